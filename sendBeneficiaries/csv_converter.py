#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
CSVConverter:
Turn beneficiary CSV rows into nested records used as JSON request bodies.

The header row holds dotted field paths such as
``beneficiary.bank_details.account_name``; every following row becomes one
nested record mirroring those paths.

Uses Python 3.10+ type annotations.
"""

import csv
import json
import logging
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Optional, Union

from sendBeneficiaries.config import CSV_ENCODING
from sendBeneficiaries.errors import CSVConversionError, HeaderCollisionError

# Configure logger
logger = logging.getLogger(__name__)

NestedRecord = dict[str, Union[str, list[str], "NestedRecord"]]

# Top-level headers whose cells hold a comma separated list
LIST_FIELDS = ("payment_methods", "transfer_methods")


def build_nested_record(headers: Sequence[str], row: Sequence[str]) -> NestedRecord:
    """
    Build a nested record from one CSV row.

    Args:
        headers: Dotted header paths, in column order
        row: Cell values for one row, same length as headers

    Returns:
        Nested dictionary ready to be sent as a JSON body

    Raises:
        HeaderCollisionError: If a header path runs through a position that
            already holds a value, or a value lands on a nested record
        ValueError: If headers and row differ in length
    """
    record: NestedRecord = {}

    for header, value in zip(headers, row, strict=True):
        if header in LIST_FIELDS:
            record[header] = value.split(",")
            continue

        # Empty cells leave the key out entirely
        if not value:
            continue

        *parents, leaf = header.split(".")
        current = record
        for segment in parents:
            node = current.setdefault(segment, {})
            if not isinstance(node, dict):
                raise HeaderCollisionError(
                    f"Header '{header}' runs through '{segment}', which already holds a value",
                    header=header,
                )
            current = node

        if isinstance(current.get(leaf), dict):
            raise HeaderCollisionError(
                f"Header '{header}' would overwrite the nested fields under '{leaf}'",
                header=header,
            )
        current[leaf] = value

    return record


class CSVConverter:
    """
    Reads beneficiary CSV files and converts each row to a nested record.
    """
    def __init__(self, encoding: str = CSV_ENCODING):
        """
        Initialize CSV converter.

        Args:
            encoding: File encoding for reading/writing
        """
        self.encoding = encoding

    def read_rows(self, csv_path: Path) -> Iterator[tuple[int, NestedRecord]]:
        """
        Yield (row_number, record) for each data row of a CSV file.

        The header is row 1, so the first data row is row 2. Blank lines
        are skipped.

        Raises:
            CSVConversionError: On file access errors, a missing header row,
                rows with the wrong number of cells or colliding headers
        """
        try:
            with Path(csv_path).open(newline="", encoding=self.encoding) as f:
                reader = csv.reader(f)
                headers = next(reader, None)
                if not headers:
                    raise CSVConversionError(
                        f"Header row is missing in {csv_path}", file_path=str(csv_path)
                    )
                logger.debug("Read %d header paths from %s", len(headers), csv_path)

                for row_number, row in enumerate(reader, start=2):
                    if not row:
                        continue
                    if len(row) != len(headers):
                        raise CSVConversionError(
                            f"Row {row_number} has {len(row)} columns, expected {len(headers)}",
                            file_path=str(csv_path),
                            row_number=row_number,
                        )
                    try:
                        record = build_nested_record(headers, row)
                    except HeaderCollisionError as e:
                        e.file_path = str(csv_path)
                        e.row_number = row_number
                        raise
                    yield row_number, record

        except csv.Error as e:
            raise CSVConversionError(
                f"Invalid CSV format in {csv_path}: {e}", file_path=str(csv_path)
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise CSVConversionError(
                f"Failed to read CSV file: {e}", file_path=str(csv_path)
            ) from e

    def records(self, csv_path: Path) -> list[NestedRecord]:
        """Read a whole CSV file into a list of nested records."""
        return [record for _, record in self.read_rows(csv_path)]

    def convert_file(self, csv_path: Path, json_path: Optional[Path] = None) -> Path:
        """
        Convert a CSV file to a JSON array of nested records.

        Args:
            csv_path: Path to CSV file
            json_path: Optional output JSON path (defaults to same name with .json extension)

        Returns:
            Path to the generated JSON file

        Raises:
            CSVConversionError: On conversion errors
        """
        csv_path = Path(csv_path)
        if json_path is None:
            json_path = csv_path.with_suffix('.json')

        records = self.records(csv_path)

        try:
            json_path.parent.mkdir(parents=True, exist_ok=True)
            with json_path.open('w', encoding='utf-8') as f:
                json.dump(records, f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise CSVConversionError(
                f"Failed to write {json_path}: {e}", file_path=str(csv_path)
            ) from e

        logger.info("Converted %s -> %s (%d records)", csv_path.name, json_path.name, len(records))
        return json_path
