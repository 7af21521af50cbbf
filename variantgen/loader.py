"""
Table loader: reads the tab-separated variants table into a VariantTable.

Row 0 is a header and is discarded. Each data row is
[job name, variant name, comma-separated extended variants]; extra columns
are ignored. A later row with the same job name replaces the earlier one.
"""

import csv
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .errors import FormatError, LoadError, ParseError
from .logger import get_logger
from .schema import (
    JOB_COLUMN,
    TAG_FLAGS,
    TAGS_COLUMN,
    VARIANT_COLUMN,
    Variant,
    VariantTable,
    split_tags,
    unknown_tags,
    validate_row,
)

DELIMITER = "\t"


def classify_tags(name: str, tags: str) -> Variant:
    """
    Build a Variant from its label and raw extended-variant field.

    Membership is exact string equality per token; unknown tokens are ignored.
    """
    present = set(split_tags(tags))
    flags = {attr: token in present for token, attr in TAG_FLAGS.items()}
    return Variant(name=name, **flags)


class _LineRecorder:
    """Iterator over file lines that keeps the raw text of the current record."""

    def __init__(self, lines: Iterator[str]):
        self._lines = lines
        self._buffer: List[str] = []

    def __iter__(self):
        return self

    def __next__(self) -> str:
        line = next(self._lines)
        self._buffer.append(line)
        return line

    def take(self) -> str:
        raw = "".join(self._buffer)
        self._buffer = []
        return raw


def find_bare_quote(raw: str) -> Optional[int]:
    """
    Return the 1-based field number holding a quote outside a quoted field.

    A field is quoted only when its first character is a quote; a quote
    anywhere else in an unquoted field is a syntax error.
    """
    field = 1
    at_start = True
    quoted = False
    i = 0
    while i < len(raw):
        ch = raw[i]
        if quoted:
            if ch == '"':
                if raw[i + 1:i + 2] == '"':
                    i += 1
                else:
                    quoted = False
        elif ch == DELIMITER:
            field += 1
            at_start = True
        elif ch == '"':
            if not at_start:
                return field
            quoted = True
            at_start = False
        else:
            at_start = False
        i += 1
    return None


def read_records(path: Path) -> List[List[str]]:
    """
    Parse the file into records, enforcing a constant field count.

    Blank lines are skipped. Every record must have as many fields as the
    first one, and quotes may only open a field.
    """
    records: List[List[str]] = []
    expected = None
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            lines = _LineRecorder(iter(f))
            reader = csv.reader(lines, delimiter=DELIMITER, strict=True)
            for row in reader:
                raw = lines.take()
                if not row:
                    continue
                column = find_bare_quote(raw)
                if column is not None:
                    raise ParseError(
                        f'record on line {reader.line_num}; field {column}: bare " in non-quoted field'
                    )
                if expected is None:
                    expected = len(row)
                elif len(row) != expected:
                    raise ParseError(
                        f"record on line {reader.line_num}: wrong number of fields "
                        f"(expected {expected}, got {len(row)})"
                    )
                records.append(row)
    except csv.Error as e:
        raise ParseError(f"line {reader.line_num}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(str(e)) from e
    return records


def read_tsv_file(filename: Union[str, Path]) -> VariantTable:
    """
    Load the variants table from a TSV file.

    Args:
        filename: Path to the tab-separated input

    Returns:
        Mapping of job name to Variant

    Raises:
        LoadError: file cannot be opened or read
        ParseError: record syntax is invalid
        FormatError: fewer than two records, or a row with too few columns
    """
    logger = get_logger()
    path = Path(filename)

    records = read_records(path)
    if len(records) < 2:
        raise FormatError("invalid TSV file: not enough records")

    logger.debug("Parsed records", path=str(path), records=len(records))

    data: VariantTable = {}
    # Index 0 is the header
    for index, line in enumerate(records[1:], start=1):
        errors = validate_row(line)
        if errors:
            raise FormatError(f"invalid TSV file: row {index}: {'; '.join(errors)}")

        job = line[JOB_COLUMN]
        tags = line[TAGS_COLUMN]
        for tag in unknown_tags(split_tags(tags)):
            logger.record_unknown_tag(tag)

        if job in data:
            logger.record_duplicate(job)
        data[job] = classify_tags(line[VARIANT_COLUMN], tags)
        logger.record_row()

    logger.info("Loaded variants table", path=str(path), jobs=len(data))
    return data
