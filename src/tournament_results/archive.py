"""
Reads an uploaded .zip of tournament summary exports.

Failures here are archive-level: the whole upload is rejected with an
ArchiveError carrying a user-facing message and an HTTP-style status.
"""

import io
import logging
import zipfile
import zlib
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)


class ArchiveError(Exception):
    """The upload could not be read as a summary archive"""

    def __init__(self, message: str, status: int = 500):
        super().__init__(message)
        self.message = message
        self.status = status


class ArchiveMember(NamedTuple):
    name: str
    text: str


def read_archive(data: Optional[bytes], filename: Optional[str]) -> list[ArchiveMember]:
    """
    Decode every file member of a zip archive.

    Args:
        data: Raw archive bytes
        filename: Name of the uploaded file, must end with .zip

    Returns:
        Members in archive order, directories left out

    Raises:
        ArchiveError: If nothing was uploaded or it is not a readable zip
    """
    if not data:
        logger.warning("Rejected upload: no file provided")
        raise ArchiveError("No file provided", status=400)

    if not filename or not filename.lower().endswith(".zip"):
        logger.warning(f"Rejected upload: {filename!r} is not a .zip file")
        raise ArchiveError("File must be a .zip file", status=400)

    members = []
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                text = archive.read(info).decode("utf-8", errors="replace")
                members.append(ArchiveMember(info.filename, text))
    except (zipfile.BadZipFile, zlib.error, OSError, EOFError, NotImplementedError, RuntimeError) as e:
        logger.exception(f"Error processing zip file {filename}")
        raise ArchiveError("Error processing zip file", status=500) from e

    logger.info(f"Read {len(members)} files from {filename}")
    return members
