"""Delimited result file parsing."""
import csv
import io

import pandas as pd
import structlog

from bioverify_core.ingest.models import ProviderResultRow
from bioverify_core.ingest.normalize import (
    normalize_record,
    parse_bool,
    parse_epoch_millis_date,
)
from bioverify_core.util import ResultFormatError

logger = structlog.get_logger()

# Field -> accepted headers, compared lower-cased.
RESULT_COLUMNS: dict[str, tuple[str, ...]] = {
    "psn": ("psn", "personal_service_number"),
    "first_name": ("firstname", "first_name"),
    "middle_name": ("middlename", "middle_name"),
    "surname": ("surname", "lastname", "last_name"),
    "grade_level": ("gradelevel", "grade_level", "grade"),
    "department": ("stateministry", "state_ministry", "ministry", "department", "businessunit"),
    "cadre": ("cadre",),
    "on_transfer": ("ontransfer", "on_transfer"),
    "date_of_first_appointment": ("dateoffirstappointment", "date_of_first_appointment"),
    "date_of_confirmation": ("dateofconfirmation", "date_of_confirmation"),
    "bvn": ("bvn",),
}

DELIMITERS = ",|\t;"


def _detect_delimiter(header_line: str) -> str:
    try:
        return csv.Sniffer().sniff(header_line, delimiters=DELIMITERS).delimiter
    except csv.Error:
        return ","


def _resolve_columns(headers: list[str]) -> dict[str, str]:
    """Map each known field to the (lower-cased) header present in the file."""
    present = set(headers)
    resolved = {}
    for field, names in RESULT_COLUMNS.items():
        for name in names:
            if name in present:
                resolved[field] = name
                break
    return resolved


def parse_result_rows(text: str, sep: str | None = None) -> list[ProviderResultRow]:
    """Parse delimited text with a header row into result rows."""
    lines = text.lstrip("\ufeff").splitlines()
    header_line = next((line for line in lines if line.strip()), None)
    if header_line is None:
        logger.warning("result_file_empty")
        return []

    delimiter = sep or _detect_delimiter(header_line)
    expected = len(header_line.split(delimiter))

    # Rows with more fields than the header are dropped, never shifted.
    def skip_bad_line(fields: list[str]) -> None:
        logger.warning(
            "row_malformed_skipped",
            first_field=fields[0].strip() if fields else "",
            fields=len(fields),
            expected=expected,
        )
        return None

    try:
        df = pd.read_csv(
            io.StringIO(text.lstrip("\ufeff")),
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
            engine="python",
            on_bad_lines=skip_bad_line,
        )
    except Exception as e:
        raise ResultFormatError(f"Result file parse error: {e}") from e

    df.columns = [str(c).strip().lower() for c in df.columns]
    columns = _resolve_columns(list(df.columns))
    if "psn" not in columns:
        raise ResultFormatError(
            "Result file has no correlation key column, wrong key or IV? "
            f"(headers: {list(df.columns)[:10]})"
        )

    rows = []
    for i, raw in enumerate(df.to_dict("records")):
        values = normalize_record(raw)

        def get(field: str) -> str:
            header = columns.get(field)
            return values.get(header, "") if header else ""

        psn = get("psn")
        if not psn:
            logger.warning("row_missing_correlation_key", row=i + 1)
            continue
        rows.append(
            ProviderResultRow(
                psn=psn,
                raw=values,
                first_name=get("first_name"),
                middle_name=get("middle_name"),
                surname=get("surname"),
                grade_level=get("grade_level") or None,
                department=get("department") or None,
                cadre=get("cadre") or None,
                on_transfer=parse_bool(get("on_transfer")),
                date_of_first_appointment=parse_epoch_millis_date(
                    get("date_of_first_appointment"), row=i + 1, psn=psn
                ),
                date_of_confirmation=parse_epoch_millis_date(
                    get("date_of_confirmation"), row=i + 1, psn=psn
                ),
                bvn=get("bvn") or None,
            )
        )

    if not rows:
        logger.warning("result_file_no_rows")
    return rows
