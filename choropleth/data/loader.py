"""Tabular data loader.

Parses delimited text into typed rows and reports structural problems as a
``ValidationResult`` instead of raising.
"""

import io
import logging
import re
from pathlib import PurePath
from typing import List, Optional, Sequence, Tuple, Union

import pandas as pd

from choropleth.config import get_config
from choropleth.data.model import Cell, LoadedTable, TableRow, ValidationResult
from choropleth.exceptions import FileTooLargeError, ParseError, WrongFileTypeError

logger = logging.getLogger(__name__)

# Optionally signed decimal number with an optional fractional part
NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")

NO_ROWS_ERROR = "No data rows found"
FEW_COLUMNS_WARNING = "Data should have at least 2 columns (region and value)"


def check_upload(
    filename: str,
    size: int,
    allowed_extensions: Optional[Sequence[str]] = None,
    max_bytes: Optional[int] = None,
) -> None:
    """
    Check an uploaded file's type and size before it is parsed.

    Args:
        filename: Name of the uploaded file
        size: Size of the file in bytes
        allowed_extensions: Accepted lowercase extensions (default: configured table extensions)
        max_bytes: Size ceiling in bytes (default: configured maximum)

    Raises:
        WrongFileTypeError: If the extension is not accepted
        FileTooLargeError: If the file is larger than ``max_bytes``
    """
    upload_config = get_config().upload
    if allowed_extensions is None:
        allowed_extensions = upload_config.allowed_table_extensions
    if max_bytes is None:
        max_bytes = upload_config.max_upload_bytes

    suffix = PurePath(filename or "").suffix.lower()
    if suffix not in allowed_extensions:
        if ".csv" in allowed_extensions:
            raise WrongFileTypeError("Please upload a CSV file")
        raise WrongFileTypeError(
            f"Unsupported file type '{suffix or filename}'. Expected one of: {', '.join(allowed_extensions)}"
        )

    if size > max_bytes:
        raise FileTooLargeError(f"File size must be less than {max_bytes / (1024 * 1024):g}MB")


def coerce_cell(value: str) -> Cell:
    """
    Coerce a raw field to a number when it is syntactically a decimal number.

    Args:
        value: Raw field text

    Returns:
        ``int`` for whole numbers, ``float`` for numbers with a fractional part,
        otherwise the trimmed string
    """
    text = value.strip()
    if not NUMBER_PATTERN.match(text):
        return text
    if "." in text:
        return float(text)
    return int(text)


def _decode(content: Union[str, bytes]) -> str:
    if isinstance(content, bytes):
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"Table is not valid UTF-8 text: {e}") from e
    return content.lstrip("\ufeff")


def parse_table(text: str, delimiter: str = ",") -> Tuple[List[str], List[TableRow]]:
    """
    Parse delimited text into headers and typed rows.

    The first non-empty line holds the headers. Blank lines are skipped,
    short rows are padded with empty strings and numeric fields are coerced.

    Args:
        text: Delimited text content
        delimiter: Field delimiter

    Returns:
        Tuple of (headers, rows)

    Raises:
        ParseError: If a row has more fields than the header or quoting is broken
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return [], []

    try:
        raw = pd.read_csv(
            io.StringIO("\n".join(lines)),
            sep=delimiter,
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ParseError(str(e).strip()) from e

    raw = raw.fillna("")
    headers = [str(h).strip() for h in raw.iloc[0].tolist()]

    rows: List[TableRow] = []
    for record in raw.iloc[1:].itertuples(index=False, name=None):
        row: TableRow = {}
        for header, value in zip(headers, record):
            row[header] = coerce_cell(str(value))
        rows.append(row)

    return headers, rows


def validate_table(headers: Sequence[str], rows: Sequence[TableRow]) -> ValidationResult:
    """
    Validate parsed rows.

    Args:
        headers: Column headers in file order
        rows: Parsed rows

    Returns:
        ValidationResult with errors (blocking) and warnings (advisory)
    """
    result = ValidationResult(row_count=len(rows), column_count=len(headers))

    if not rows:
        result.errors.append(NO_ROWS_ERROR)
        result.row_count = 0
        return result

    if len(headers) < 2:
        result.warnings.append(FEW_COLUMNS_WARNING)

    duplicates = sorted({h for h in headers if list(headers).count(h) > 1})
    if duplicates:
        result.warnings.append(f"Duplicate column names (last value wins): {', '.join(duplicates)}")

    missing = sum(
        1 for row in rows
        if any(row.get(h) is None or row.get(h) == "" for h in headers)
    )
    if missing > 0:
        result.warnings.append(f"{missing} rows have missing values")

    return result


def load_table(
    content: Union[str, bytes],
    max_bytes: Optional[int] = None,
    delimiter: str = ",",
) -> LoadedTable:
    """
    Parse and validate uploaded table content.

    Parse failures are reported in the returned validation result; they are
    never raised past this function.

    Args:
        content: Raw table content (text or UTF-8 bytes)
        max_bytes: Size ceiling in bytes (default: configured maximum)
        delimiter: Field delimiter

    Returns:
        LoadedTable with rows and validation result

    Raises:
        FileTooLargeError: If the content is larger than ``max_bytes``
    """
    if max_bytes is None:
        max_bytes = get_config().upload.max_upload_bytes

    size = len(content) if isinstance(content, bytes) else len(content.encode("utf-8"))
    if size > max_bytes:
        raise FileTooLargeError(f"File size must be less than {max_bytes / (1024 * 1024):g}MB")

    try:
        text = _decode(content)
        headers, rows = parse_table(text, delimiter=delimiter)
    except ParseError as e:
        logger.warning(f"Failed to parse table: {e}")
        validation = ValidationResult(errors=[f"Failed to parse table: {e}"])
        return LoadedTable(headers=(), rows=(), validation=validation)

    validation = validate_table(headers, rows)
    if validation.is_valid:
        logger.info(f"Loaded table with {validation.row_count} rows and {validation.column_count} columns")
    else:
        logger.warning(f"Table failed validation: {'; '.join(validation.errors)}")

    return LoadedTable(headers=tuple(headers), rows=tuple(rows), validation=validation)
