"""Cabinet archive handling.

Microsoft symbol servers answer ``.pd_`` queries with a cabinet holding
the ``.pdb``. Anything that is not a cabinet is passed through unchanged.
"""

from cabarchive import CabArchive, CorruptionError, NotSupportedError

from fastsymcache.config import CABINET_MAGIC
from fastsymcache.errors import DecompressionError
from fastsymcache.logging import logger


def is_cabinet(data: bytes) -> bool:
    return data.startswith(CABINET_MAGIC)


def _find_member(archive: CabArchive, file_name: str):
    if file_name in archive:
        return archive[file_name]

    lowered = file_name.lower()
    for name, member in archive.items():
        if name.lower() == lowered:
            return member

    if len(archive) == 1:
        return next(iter(archive.values()))

    return None


def read_cabinet(data: bytes, file_name: str) -> bytes | None:
    """Return the content of ``file_name``, extracting it from a cabinet if needed.

    None means the data is a cabinet that cannot be decompressed or does
    not hold the file.
    """
    if not is_cabinet(data):
        return data

    archive = CabArchive()
    try:
        archive.parse(data)
    except (CorruptionError, NotSupportedError) as e:
        logger.error(f"Unable to decompress cabinet for {file_name}: {e}")
        return None

    member = _find_member(archive, file_name)
    if member is None:
        logger.error(f"Cabinet does not contain {file_name}: {sorted(archive)}")
        return None

    logger.debug(f"Extracted {file_name} from cabinet ({len(data)} -> {len(member.buf)} bytes)")
    return member.buf


def extract_symbol(data: bytes, file_name: str) -> bytes:
    """Like read_cabinet, but a cabinet that yields nothing is an error."""
    content = read_cabinet(data, file_name)
    if content is None:
        raise DecompressionError(f"Unable to read the file {file_name} from the server", file_name=file_name)
    return content
