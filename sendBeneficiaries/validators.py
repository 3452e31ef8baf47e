"""
Data models for Airwallex API responses and the result files.
Uses Python 3.10 type annotations and Pydantic v2 for schema validation.
"""

# Use standard library typing (Python 3.10+)
from typing import Any, Optional
# Collections
from collections.abc import Mapping

# Pydantic imports
from pydantic import BaseModel, Field, ValidationError, model_validator


class TokenResponse(BaseModel):
    """Body returned by the authentication endpoint."""
    token: str = Field(..., min_length=1, description="Bearer token for later calls")
    expires_at: Optional[str] = Field(None, description="Token expiry timestamp")


class ValidationErrorEntry(BaseModel):
    """One validation failure, as written to validation_errors.csv."""
    account_name: str = ""
    row: int = Field(..., description="Spreadsheet row number (header is row 1)")
    bank_country: str = ""
    error_source: str
    error_message: str
    params: str = ""


class SuccessfulRecords(BaseModel):
    """Records the API accepted, replayed verbatim by the create step."""
    count: int = 0
    results: list[dict[str, Any]] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_count(self) -> 'SuccessfulRecords':
        """Check that count matches the number of records."""
        if self.count != len(self.results):
            raise ValueError(
                f"count is {self.count} but {len(self.results)} records are listed"
            )
        return self


class ErrorCount(BaseModel):
    """Number of validation failures; details live in the errors CSV."""
    count: int = 0
    results: Optional[list[Any]] = None


class ValidationResults(BaseModel):
    """Content of validation_results.json."""
    successful: SuccessfulRecords = Field(default_factory=SuccessfulRecords)
    errors: ErrorCount = Field(default_factory=ErrorCount)


class CreatedBeneficiary(BaseModel):
    """A beneficiary the create endpoint accepted."""
    name: str
    row: int
    id: str


class FailedBeneficiary(BaseModel):
    """A beneficiary the create endpoint rejected, with the API response body."""
    name: str
    data: dict[str, Any] = Field(default_factory=dict)


class CreatedGroup(BaseModel):
    count: int = 0
    results: list[CreatedBeneficiary] = Field(default_factory=list)


class FailedGroup(BaseModel):
    count: int = 0
    results: list[FailedBeneficiary] = Field(default_factory=list)


class CreateResults(BaseModel):
    """Content of beneficiary_create_result.json."""
    successful: CreatedGroup = Field(default_factory=CreatedGroup)
    errors: FailedGroup = Field(default_factory=FailedGroup)

    def add_success(self, entry: CreatedBeneficiary) -> None:
        self.successful.results.append(entry)
        self.successful.count += 1

    def add_failure(self, entry: FailedBeneficiary) -> None:
        self.errors.results.append(entry)
        self.errors.count += 1


def validate_results(data: Mapping[str, Any]) -> Optional[str]:
    """
    Validate the content of a validation results file.

    Args:
        data: Parsed JSON content

    Returns:
        An error message string if invalid, or None if valid
    """
    try:
        ValidationResults.model_validate(data)
        return None
    except ValidationError as e:
        errors = e.errors()
        if not errors:
            return "Unknown validation error"

        # Get the first error for simplicity
        error = errors[0]
        location = ".".join(str(loc) for loc in error["loc"])
        message = error["msg"]

        if location:
            return f"Validation error at '{location}': {message}"
        return f"Validation error: {message}"
