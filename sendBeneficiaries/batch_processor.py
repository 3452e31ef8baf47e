#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Batch processor for Airwallex beneficiary validation and creation.
Rows are processed one at a time in file order; each API call completes
before the next row starts.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from tqdm import tqdm

from sendBeneficiaries.api_client import BeneficiaryApiClient
from sendBeneficiaries.csv_converter import CSVConverter
from sendBeneficiaries.errors import ApiAuthenticationError
from sendBeneficiaries.validators import (
    ValidationResults, ValidationErrorEntry, CreateResults,
    CreatedBeneficiary, FailedBeneficiary
)

# Configure logger
logger = logging.getLogger(__name__)

UNAUTHORIZED = "Unauthorized"


def _bank_details(record: Mapping[str, Any]) -> Mapping[str, Any]:
    beneficiary = record.get("beneficiary")
    if isinstance(beneficiary, Mapping):
        bank_details = beneficiary.get("bank_details")
        if isinstance(bank_details, Mapping):
            return bank_details
    return {}


def get_account_name(record: Mapping[str, Any]) -> str:
    """Account name of a beneficiary record, or "" if absent."""
    value = _bank_details(record).get("account_name")
    return value if isinstance(value, str) else ""


def get_bank_country(record: Mapping[str, Any]) -> str:
    """Bank country code of a beneficiary record, or "" if absent."""
    value = _bank_details(record).get("bank_country_code")
    return value if isinstance(value, str) else ""


def _render_message(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


class BeneficiaryBatchProcessor:
    """
    Sequential driver for the validate and create steps.
    """

    def __init__(
        self,
        client: BeneficiaryApiClient,
        converter: CSVConverter | None = None,
        show_progress: bool = True
    ):
        """
        Initialize the batch processor.

        Args:
            client: API client holding the bearer token
            converter: CSV converter (a default one is created if omitted)
            show_progress: Whether to display progress bars
        """
        self.client = client
        self.converter = converter or CSVConverter()
        self.show_progress = show_progress

    def validate_record(self, row_number: int, record: Mapping[str, Any]) -> list[ValidationErrorEntry]:
        """
        Validate one record against the API.

        Returns:
            Validation errors for the row; empty if the API accepted it

        Raises:
            ApiConnectionError, ApiTimeoutError, ApiError: On transport failures
        """
        account_name = get_account_name(record)
        bank_country = get_bank_country(record)

        try:
            result = self.client.validate_beneficiary(record)
        except ApiAuthenticationError:
            return [ValidationErrorEntry(
                account_name=account_name,
                row=row_number,
                bank_country=bank_country,
                error_source=UNAUTHORIZED,
                error_message=UNAUTHORIZED,
            )]

        return [
            ValidationErrorEntry(
                account_name=account_name,
                row=row_number,
                bank_country=bank_country,
                error_source=str(field),
                error_message=_render_message(message),
            )
            for field, message in result.items()
        ]

    def validate_csv(self, csv_path: Path) -> tuple[ValidationResults, list[ValidationErrorEntry]]:
        """
        Validate every row of a CSV file.

        Args:
            csv_path: Beneficiary CSV with dotted header paths

        Returns:
            Tuple of (results holding the accepted records, list of row errors)

        Raises:
            CSVConversionError: If the CSV cannot be read
            ApiError: On transport failures, which abort the run
        """
        results = ValidationResults()
        errors: list[ValidationErrorEntry] = []

        logger.info("Validating beneficiaries from %s", csv_path)
        rows = tqdm(
            self.converter.read_rows(csv_path),
            desc="Validating",
            unit="row",
            disable=not self.show_progress
        )
        for row_number, record in rows:
            row_errors = self.validate_record(row_number, record)
            if row_errors:
                logger.debug("Row %d failed validation with %d error(s)", row_number, len(row_errors),
                             extra={"row": row_number, "account_name": row_errors[0].account_name})
                errors.extend(row_errors)
            else:
                logger.debug("Row %d passed validation", row_number,
                             extra={"row": row_number, "account_name": get_account_name(record)})
                results.successful.results.append(record)
                results.successful.count += 1

        results.errors.count = len(errors)
        logger.info(
            "Validation finished: %d successful, %d error(s)",
            results.successful.count, results.errors.count
        )
        return results, errors

    def create_from_results(self, validation_results: ValidationResults) -> CreateResults:
        """
        Create every record that passed validation.

        Args:
            validation_results: Parsed validation results

        Returns:
            Created and failed beneficiaries

        Raises:
            ApiError: On transport failures, which abort the run
        """
        create_results = CreateResults()
        records = validation_results.successful.results

        logger.info("Creating %d beneficiaries", len(records))
        for index, record in enumerate(
            tqdm(records, desc="Creating", unit="record", disable=not self.show_progress),
            start=1
        ):
            name = get_account_name(record)
            status_code, body = self.client.create_beneficiary(record)

            if status_code == 201:
                create_results.add_success(CreatedBeneficiary(
                    name=name,
                    row=index,
                    id=str(body.get("beneficiary_id", "")),
                ))
                logger.info("Successfully created - %s", name, extra={"row": index, "account_name": name})
            else:
                create_results.add_failure(FailedBeneficiary(name=name, data=body))
                logger.error("Error creating - %s", name, extra={"row": index, "account_name": name})

        logger.info(
            "Create finished: %d created, %d failed",
            create_results.successful.count, create_results.errors.count
        )
        return create_results
