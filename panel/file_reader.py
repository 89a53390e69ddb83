"""
File reader - Awaitable "read as text" for the import boundary
"""

import asyncio
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .config import EXPORT_MEDIA_TYPE
from .errors import NotAFile, ReadError, WrongMimeOrFormat


logger = logging.getLogger(__name__)


@dataclass
class ImportSource:
    """A file offered for import, with its declared media type."""
    path: Path
    media_type: Optional[str] = None

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        if self.media_type is None:
            self.media_type, _ = mimetypes.guess_type(self.path.name)

    @property
    def name(self) -> str:
        return self.path.name


def as_source(source: Union[ImportSource, str, Path, None]) -> Optional[ImportSource]:
    """Wrap a plain path in an ImportSource; None stays None."""
    if source is None or isinstance(source, ImportSource):
        return source
    return ImportSource(Path(source))


async def read_text(source: Union[ImportSource, str, Path, None]) -> str:
    """
    Read an import file as UTF-8 text.

    Args:
        source: The file to read

    Returns:
        The file contents

    Raises:
        NotAFile: If no source was given or it is not a regular file
        WrongMimeOrFormat: If the declared media type is not JSON
        ReadError: If the file could not be read or decoded
    """
    source = as_source(source)
    if source is None:
        raise NotAFile("No file selected.")
    if not source.path.is_file():
        raise NotAFile(f"Not a file: {source.path}")
    if source.media_type != EXPORT_MEDIA_TYPE:
        raise WrongMimeOrFormat(
            f"Please select a valid JSON file ({source.name} is {source.media_type or 'of unknown type'})."
        )

    try:
        return await asyncio.to_thread(source.path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading {source.path}: {e}")
        raise ReadError(f"Error reading file {source.name}: {e}") from e
