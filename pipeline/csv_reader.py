import io
import logging
from typing import Optional

import pandas as pd

from api.errors import CSVParseError, InvalidFileError

logger = logging.getLogger("epochguard.csv_reader")

CSV_CONTENT_TYPE = "text/csv"


def validate_csv_file(file_name: str, content_type: Optional[str] = None):
    """Reject anything that is neither named *.csv nor typed text/csv."""
    if content_type == CSV_CONTENT_TYPE:
        return
    if not file_name or not file_name.lower().endswith(".csv"):
        raise InvalidFileError(f"Please select a CSV file (got '{file_name}')")


def decode_csv(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise CSVParseError(f"File is not valid UTF-8 text: {e}") from e


def read_csv_text(text: str) -> pd.DataFrame:
    """
    Parse uploaded CSV text into a table of string cells.

    - first non-blank line is the header
    - blank lines are dropped
    - short rows are padded with "", long rows are truncated
    """

    # ---------------- Drop blank lines ----------------
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        raise CSVParseError("CSV file is empty")

    n_cols = len(lines[0].split(","))

    try:
        df = pd.read_csv(
            io.StringIO("\n".join(lines)),
            sep=",",
            dtype=str,
            keep_default_na=False,
            index_col=False,
            engine="python",
            on_bad_lines=lambda fields: fields[:n_cols],
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as e:
        raise CSVParseError(f"Unreadable CSV: {e}") from e

    if df.empty:
        raise CSVParseError("CSV file has a header but no data rows")

    # ---------------- Normalise headers / cells ----------------
    df.columns = [str(c).strip() for c in df.columns]
    df = df.fillna("").astype(str)
    df = df.apply(lambda col: col.str.strip())

    logger.info("Parsed CSV: %d rows x %d columns", len(df), len(df.columns))
    return df


def read_csv_upload(file_name: str, content: bytes, content_type: Optional[str] = None) -> pd.DataFrame:
    validate_csv_file(file_name, content_type)
    return read_csv_text(decode_csv(content))
