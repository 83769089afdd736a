"""Example usage of link discovery and endpoint extraction on sample markup."""

from jdss_doc_mcp.extractor import extract_auth_info, extract_endpoints
from jdss_doc_mcp.link_discovery import parse_documentation_links, resolve_version

# Example index page from a documentation host
example_index = """
<!DOCTYPE html>
<html>
<head>
    <title>Documentation</title>
</head>
<body>
    <h1>Open-E Documentation</h1>
    <ul>
        <li><a href="docs/EDSS/JEFFERSONVILLE/documentation/v3/">JEFFERSONVILLE REST API v3</a></li>
        <li><a href="docs/EDSS/JEFFERSONVILLE/documentation/v4/">JEFFERSONVILLE REST API v4</a></li>
        <li><a href="docs/EDSS/trunk/documentation/v4/">trunk REST API v4</a></li>
        <li><a href="/about">About</a></li>
    </ul>
</body>
</html>
"""

# Example fragment of a documentation page
example_page = """
<h2>Pools</h2>
<p>Get the list of storage pools.</p>
GET /api/v4/pools
<p>Create a zvol in a pool.</p>
POST /api/v4/pools/{pool}/volumes {"name": "string", "size": "integer"}
<p>Requests require an Authorization header with a bearer token.</p>
"""


def main():
    """Run the example."""
    base_url = "http://dh.lan:777/"
    print("🔍 Parsing documentation links from example index page...")
    print(f"📍 Base URL: {base_url}")
    print()

    registry = parse_documentation_links(example_index, base_url)
    print(f"✅ Found {len(registry)} registry entries:")
    for key, descriptor in registry.links.items():
        print(f"   {key}: {descriptor.page_url}")
    print()

    latest = resolve_version(registry, "latest")
    print(f"📌 'latest' resolves to {latest.release} {latest.api_version}")
    print(f"   ZIP: {latest.zip_url}")
    print()

    print("🧭 Endpoints in example page:")
    for endpoint in extract_endpoints(example_page, detailed=True):
        print(f"   {endpoint.method} {endpoint.path}")
        if endpoint.description:
            print(f"      {endpoint.description}")
        for parameter in endpoint.parameters or []:
            print(f"      - {parameter.name}: {parameter.type}")

    auth = extract_auth_info(example_page)
    print()
    print(f"🔐 Authentication keywords: {', '.join(auth.keywords) or 'none'}")


if __name__ == "__main__":
    main()
