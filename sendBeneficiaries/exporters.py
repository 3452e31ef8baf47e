#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Export utilities for the validation and creation result files.
The validation results file is also read back by the create step.
"""

import csv
import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel

from sendBeneficiaries.config import (
    VALIDATION_RESULTS_FILE, VALIDATION_ERRORS_FILE, CREATE_RESULTS_FILE
)
from sendBeneficiaries.errors import FileOperationError
from sendBeneficiaries.validators import (
    ValidationResults, ValidationErrorEntry, CreateResults, validate_results
)

# Configure logger
logger = logging.getLogger(__name__)

ERRORS_CSV_HEADER = ["Account Name", "Row", "Bank Country", "Error Source", "Error Message", "Params"]


class ResultExporter:
    """
    Write and read the result files of the validate and create steps.
    """

    def __init__(self, export_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the result exporter.

        Args:
            export_dir: Directory for result files (default: current directory)
        """
        self.export_dir = Path(export_dir) if export_dir else Path.cwd()

        if not self.export_dir.exists():
            logger.debug("Creating export directory: %s", self.export_dir)
            self.export_dir.mkdir(parents=True, exist_ok=True)

    def export_json(
        self,
        data: Union[BaseModel, dict[str, Any]],
        filename: str,
        indent: int = 2
    ) -> Path:
        """
        Export a model or dictionary to a JSON file.

        Args:
            data: Data to export
            filename: File name inside the export directory
            indent: JSON indentation level

        Returns:
            Path to the saved file

        Raises:
            FileOperationError: If the file cannot be written
        """
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json")

        file_path = self.export_dir / filename
        try:
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=indent, ensure_ascii=False)
        except OSError as e:
            raise FileOperationError(f"Failed to write {file_path}: {e}", str(file_path)) from e

        logger.info("Exported results to %s", file_path)
        return file_path

    def export_validation_results(
        self,
        results: ValidationResults,
        filename: str = VALIDATION_RESULTS_FILE
    ) -> Path:
        """Write validation_results.json."""
        return self.export_json(results, filename)

    def export_errors_csv(
        self,
        errors: Sequence[ValidationErrorEntry],
        filename: str = VALIDATION_ERRORS_FILE
    ) -> Path:
        """
        Export validation errors to CSV, one line per error.

        The header line is written even when there are no errors.

        Returns:
            Path to the saved file

        Raises:
            FileOperationError: If the file cannot be written
        """
        file_path = self.export_dir / filename
        try:
            with open(file_path, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(ERRORS_CSV_HEADER)
                for error in errors:
                    writer.writerow([
                        error.account_name,
                        error.row,
                        error.bank_country,
                        error.error_source,
                        error.error_message,
                        error.params,
                    ])
        except OSError as e:
            raise FileOperationError(f"Failed to write {file_path}: {e}", str(file_path)) from e

        logger.info("Exported %d error(s) to %s", len(errors), file_path)
        return file_path

    def export_create_results(
        self,
        results: CreateResults,
        filename: str = CREATE_RESULTS_FILE
    ) -> Path:
        """Write beneficiary_create_result.json."""
        return self.export_json(results, filename)

    def load_validation_results(self, file_path: Optional[Union[str, Path]] = None) -> ValidationResults:
        """
        Read a validation results file written by the validate step.

        Args:
            file_path: File to read (default: validation_results.json in the export directory)

        Returns:
            Parsed validation results

        Raises:
            FileOperationError: If the file is missing or malformed
        """
        path = Path(file_path) if file_path else self.export_dir / VALIDATION_RESULTS_FILE

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise FileOperationError(
                f"Error reading {path.name}: file not found. Please run validate command first.",
                str(path)
            ) from e
        except (OSError, json.JSONDecodeError) as e:
            raise FileOperationError(f"Error parsing validation results {path}: {e}", str(path)) from e

        if (error := validate_results(data)):
            raise FileOperationError(f"Error parsing validation results {path}: {error}", str(path))

        results = ValidationResults.model_validate(data)
        logger.debug("Loaded %d validated record(s) from %s", results.successful.count, path)
        return results
