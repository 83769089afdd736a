"""In-memory extraction of documentation from the ZIP download."""

import io
import logging
import zipfile
from dataclasses import dataclass
from typing import Optional

from .exceptions import ExtractionError


logger = logging.getLogger(__name__)

SCRIPT_MARKER = 'jquery'


@dataclass
class ArchiveContents:
    """Primary HTML document and optional script library from an archive."""
    html: str
    html_name: str
    script_library: Optional[str] = None
    script_name: Optional[str] = None


def extract_primary(zip_bytes: bytes, script_marker: str = SCRIPT_MARKER) -> ArchiveContents:
    """
    Locate the primary HTML document and the embedded script library.

    The first ``.html`` file in archive order is the primary document. The
    first ``.js`` file whose name contains ``script_marker`` is the script
    library; it is optional.

    Args:
        zip_bytes: Raw ZIP archive
        script_marker: Substring identifying the script library entry

    Returns:
        ArchiveContents with decoded entry text

    Raises:
        ExtractionError: If the bytes are not a ZIP archive or contain no HTML file
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(zip_bytes))
    except zipfile.BadZipFile as e:
        raise ExtractionError(f"Invalid ZIP archive: {e}") from e

    html_name = None
    script_name = None
    with archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            name = info.filename
            if html_name is None and name.endswith('.html'):
                html_name = name
            if script_name is None and script_marker in name and name.endswith('.js'):
                script_name = name

        if html_name is None:
            raise ExtractionError('No HTML file found in ZIP')

        html = archive.read(html_name).decode('utf-8', errors='replace')
        script = None
        if script_name is not None:
            script = archive.read(script_name).decode('utf-8', errors='replace')

    logger.debug(f"Extracted {html_name} ({len(html)} chars), script library: {script_name}")
    return ArchiveContents(html=html, html_name=html_name, script_library=script, script_name=script_name)
