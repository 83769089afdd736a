"""Command-line interface for the JDSS REST documentation MCP server."""

import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import click

from .comparator import size_summary
from .exceptions import DocsError, FetchError
from .fetcher import DocumentFetcher
from .link_discovery import LinkDiscovery, resolve_version
from .mcp_server import TOOL_DESCRIPTIONS, run_mcp_server
from .models import DocsConfig, LinkRegistry
from .service import DocumentationService, analysis_snapshot


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

EXAMPLE_QUERIES = (
    "Get the EDSS documentation latest version",
    "Search for 'pool' in the EDSS documentation",
    "Analyze the API endpoints in the EDSS documentation",
    "Download the EDSS documentation as ZIP",
    "Compare the latest and trunk versions of EDSS docs",
    "Discover all available EDSS documentation versions",
)


def validate_url(url: str) -> bool:
    """
    Validate URL format (http/https scheme).

    Args:
        url: URL to validate

    Returns:
        True if valid, False otherwise
    """
    try:
        parsed = urlparse(url)
        return parsed.scheme in ('http', 'https') and bool(parsed.netloc)
    except Exception:
        return False


def status_label(status_code: Optional[int]) -> str:
    """Human readable label for a HEAD check result."""
    if status_code == 200:
        return "✅ Accessible"
    if status_code == 404:
        return "❌ Not found"
    return "⚠️ Check network/server"


def _load_config(base_url: Optional[str]) -> DocsConfig:
    config = DocsConfig.from_env()
    if base_url:
        if not validate_url(base_url):
            click.echo("❌ Error: Invalid URL format. URL must start with http:// or https://", err=True)
            sys.exit(1)
        config.base_url = base_url if base_url.endswith('/') else base_url + '/'
    return config


def _display_registry_table(registry: LinkRegistry):
    """Display discovered links in a formatted table."""
    click.echo()
    click.echo("=" * 120)
    click.echo(f"{'Key':<28} {'Release':<20} {'API':<6} {'URL':<64}")
    click.echo("=" * 120)
    for key, descriptor in registry.links.items():
        click.echo(f"{key[:26]:<28} {descriptor.release[:18]:<20} {descriptor.api_version:<6} {descriptor.page_url[:64]:<64}")
    click.echo("=" * 120)
    source = "legacy fallback" if registry.from_legacy else "discovered"
    click.echo(f"{len(registry)} entries ({source})")
    click.echo()


@click.group()
@click.version_option(version='0.1.0')
@click.option(
    '--base-url',
    default=None,
    help='Documentation host root URL (default: JDSS_DOCS_BASE_URL or http://dh.lan:777/)'
)
@click.pass_context
def main(ctx, base_url: Optional[str]):
    """
    JDSS REST API Documentation MCP server.

    Use 'jdss-rest-doc serve' to run the MCP server,
    'jdss-rest-doc check' to test documentation access,
    'jdss-rest-doc explore' to download and analyze the docs,
    and 'jdss-rest-doc demo' to list the available tools.
    """
    ctx.obj = _load_config(base_url)


@main.command()
@click.option(
    '--transport',
    type=click.Choice(['stdio', 'sse'], case_sensitive=False),
    default='stdio',
    help='Transport type: stdio (default) or sse for HTTP/SSE'
)
@click.option(
    '--host',
    default='localhost',
    help='Host to bind to for SSE transport (default: localhost)'
)
@click.option(
    '--port',
    type=int,
    default=8000,
    help='Port to bind to for SSE transport (default: 8000)'
)
@click.pass_obj
def serve(config: DocsConfig, transport: str, host: str, port: int):
    """
    Run the MCP server.

    Examples:
        jdss-rest-doc serve
        jdss-rest-doc serve --transport sse --port 8000
    """
    # stdout belongs to the stdio transport
    click.echo(f"🚀 Starting JDSS documentation MCP server ({config.base_url})", err=True)
    click.echo(f"🚦 Transport: {transport}", err=True)
    if transport == 'sse':
        click.echo(f"🌐 Server URL: http://{host}:{port}/sse", err=True)

    def signal_handler(sig, frame):
        click.echo("\n\n🛑 Shutting down MCP server...", err=True)
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        run_mcp_server(config, transport=transport, host=host, port=port)
    except Exception as e:
        logger.error(f"Failed to start MCP server: {e}", exc_info=True)
        click.echo(f"❌ Error: Failed to start MCP server: {str(e)}", err=True)
        sys.exit(1)


@main.command()
@click.option('--refresh', is_flag=True, default=False, help='Ignore the discovery cache')
@click.pass_obj
def discover(config: DocsConfig, refresh: bool):
    """List documentation versions found on the documentation host."""

    async def _discover():
        service = DocumentationService(config)
        try:
            return await service.discovery.discover_links(force_refresh=refresh)
        finally:
            await service.aclose()

    click.echo(f"🔍 Discovering documentation links from {config.base_url}...")
    registry = asyncio.run(_discover())

    if not registry.links:
        click.echo("📭 No documentation links found on the index page.")
        return

    _display_registry_table(registry)


async def _check_urls(config: DocsConfig):
    async with DocumentFetcher(config=config) as fetcher:
        registry = await LinkDiscovery(fetcher, config).discover_links()
        results = []
        for version in ('latest', 'trunk'):
            try:
                descriptor = resolve_version(registry, version)
            except DocsError as e:
                results.append((version, None, str(e)))
                continue
            for url in (descriptor.page_url, descriptor.zip_url):
                try:
                    metadata = await fetcher.fetch_metadata(url)
                    results.append((url, metadata['status_code'], None))
                except FetchError as e:
                    results.append((url, e.status_code, str(e)))
        return results


@main.command()
@click.pass_obj
def check(config: DocsConfig):
    """Test access to the latest and trunk documentation URLs."""
    click.echo("Testing EDSS Documentation Access...")
    click.echo("=" * 36)

    results = asyncio.run(_check_urls(config))
    failures = 0
    for url, status_code, error in results:
        if error and status_code is None:
            failures += 1
            click.echo(f"{url}: ❌ Error - {error}")
        else:
            if status_code != 200:
                failures += 1
            click.echo(f"{url}: {status_code} {status_label(status_code)}")

    if failures:
        sys.exit(1)


async def _explore(config: DocsConfig):
    service = DocumentationService(config)
    try:
        return [await service.fetch_version(version) for version in ('latest', 'trunk')]
    finally:
        await service.aclose()


async def _download_latest_zip(config: DocsConfig) -> bytes:
    service = DocumentationService(config)
    try:
        descriptor = await service.resolve('latest')
        logger.info(f"Downloading ZIP documentation from {descriptor.zip_url}")
        return await service.fetcher.fetch_zip(descriptor.zip_url)
    finally:
        await service.aclose()


@main.command()
@click.option(
    '--output-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Directory for snapshots (default: ~/.config/jdss-rest-doc-mcp)'
)
@click.pass_obj
def explore(config: DocsConfig, output_dir: Optional[Path]):
    """
    Download and analyze the latest and trunk documentation.

    Writes jdss-docs-<version>.html and jdss-analysis-<version>.json
    snapshots, prints a size comparison and saves the latest ZIP download
    as jdss-docs.zip.
    """
    output_dir = output_dir or config.config_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    click.echo(f"📥 Exploring documentation, results will be saved to: {output_dir}")

    try:
        payloads = asyncio.run(_explore(config))
    except DocsError as e:
        logger.error(f"Exploration failed: {e}")
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    for payload in payloads:
        html_file = output_dir / f"jdss-docs-{payload.version}.html"
        html_file.write_text(payload.raw_content, encoding='utf-8')

        analysis = analysis_snapshot(payload)
        analysis_file = output_dir / f"jdss-analysis-{payload.version}.json"
        analysis_file.write_text(json.dumps(analysis, indent=2), encoding='utf-8')

        auth = "Likely required" if analysis['hasAuthentication'] else "Not clearly documented"
        click.echo()
        click.echo(f"=== Analysis Results for {payload.version.upper()} ===")
        click.echo(f"Found {len(analysis['endpoints'])} potential API endpoints")
        for endpoint in analysis['endpoints'][:10]:
            click.echo(f"  - {endpoint}")
        click.echo(f"Authentication: {auth}")
        click.echo(f"💾 Saved {html_file.name} and {analysis_file.name}")

    latest, trunk = payloads
    summary = size_summary(latest.raw_content, trunk.raw_content)
    click.echo()
    click.echo("Version comparison:")
    click.echo(f"Latest: {summary.latest_size} characters")
    click.echo(f"Trunk:  {summary.trunk_size} characters")
    click.echo(f"Difference: {summary.size_difference} characters ({summary.percentage_difference}%)")

    # A failed download is reported, the snapshots above are kept
    zip_file = output_dir / "jdss-docs.zip"
    click.echo()
    click.echo(f"📦 Downloading ZIP documentation to: {zip_file}")
    try:
        zip_bytes = asyncio.run(_download_latest_zip(config))
    except DocsError as e:
        logger.error(f"ZIP download failed: {e}")
        click.echo(f"❌ Error downloading ZIP: {e}", err=True)
        return

    zip_file.write_bytes(zip_bytes)
    click.echo(f"✅ Successfully downloaded ZIP to: {zip_file}")
    click.echo(f"File size: {round(len(zip_bytes) / 1024)} KB")


@main.command()
@click.pass_obj
def config(config: DocsConfig):
    """Show configuration and the MCP client snippet."""
    click.echo("JDSS REST API Documentation MCP - Configuration")
    click.echo()
    click.echo(f"Documentation host:  {config.base_url}")
    click.echo(f"Product:             {config.product}")
    click.echo(f"Discovery cache TTL: {config.cache_ttl:g}s")
    click.echo(f"Revealer:            {config.revealer}")
    click.echo(f"Snapshot directory:  {config.config_dir}")
    click.echo()
    click.echo("MCP configuration for Claude Desktop:")
    snippet = {
        "mcpServers": {
            "jdss-rest-documentation": {
                "command": "jdss-rest-doc",
                "args": ["serve"]
            }
        }
    }
    click.echo(json.dumps(snippet, indent=2))


@main.command()
def demo():
    """List the MCP tools and example assistant queries."""
    click.echo("EDSS Documentation MCP Tools Demo")
    click.echo("=" * 33)
    click.echo()
    click.echo("Available MCP Tools:")
    width = max(len(name) for name in TOOL_DESCRIPTIONS)
    for idx, (name, description) in enumerate(TOOL_DESCRIPTIONS.items(), 1):
        click.echo(f"{idx}. {name:<{width}} - {description}")
    click.echo()
    click.echo("Example queries:")
    for query in EXAMPLE_QUERIES:
        click.echo(f"  • \"{query}\"")
    click.echo()
    click.echo("To configure Claude Desktop:")
    click.echo("1. Copy the MCP configuration from: jdss-rest-doc config")
    click.echo("2. Add it to the Claude Desktop settings")
    click.echo("3. Restart Claude Desktop")


if __name__ == '__main__':
    main()
