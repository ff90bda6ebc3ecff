"""Result artifact decoding: unzip, decrypt, parse."""
import structlog

from bioverify_core.crypto import decrypt_text
from bioverify_core.ingest.archive import extract_single_entry
from bioverify_core.ingest.models import ProviderResultRow
from bioverify_core.ingest.tabular import RESULT_COLUMNS, parse_result_rows

logger = structlog.get_logger()


def decode_artifact(
    artifact: bytes, key: str | bytes, iv: str | bytes
) -> list[ProviderResultRow]:
    """Turn a downloaded result container into result rows."""
    name, encrypted = extract_single_entry(artifact)
    logger.info("artifact_extracted", entry=name, size=len(encrypted))
    text = decrypt_text(encrypted, key, iv)
    rows = parse_result_rows(text)
    logger.info("artifact_decoded", entry=name, rows=len(rows))
    return rows


__all__ = [
    "ProviderResultRow",
    "RESULT_COLUMNS",
    "decode_artifact",
    "extract_single_entry",
    "parse_result_rows",
]
