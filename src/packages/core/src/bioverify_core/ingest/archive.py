"""Result container unwrapping."""
import io
import zipfile

import structlog

from bioverify_core.util import ArchiveError

logger = structlog.get_logger()


def extract_single_entry(data: bytes) -> tuple[str, bytes]:
    """Return (name, bytes) of the first file entry in a zip container."""
    if not data:
        raise ArchiveError("Result archive is empty (no bytes downloaded)")
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            entries = [info for info in zf.infolist() if not info.is_dir()]
            if not entries:
                raise ArchiveError("Result archive is empty (no entries)")
            if len(entries) > 1:
                logger.warning(
                    "archive_extra_entries",
                    count=len(entries),
                    used=entries[0].filename,
                )
            first = entries[0]
            return first.filename, zf.read(first)
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"Result archive is malformed: {e}") from e
    except (zipfile.LargeZipFile, NotImplementedError, EOFError) as e:
        raise ArchiveError(f"Result archive could not be read: {e}") from e
