#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Error definitions for sendBeneficiaries package.
Custom exception classes for better error handling and reporting.
Uses Python 3.10+ type annotations.
"""

from typing import Any, Optional


class SendBeneficiariesError(Exception):
    """Base exception class for all sendBeneficiaries errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)

    def get_suggestions(self) -> list[str]:
        """Get suggestions for fixing the error."""
        return ["Run with --log-level debug for more detailed information"]


class ApiError(SendBeneficiariesError):
    """Exception for API-related errors."""

    def __init__(self, message: str, status_code: int = 0,
                 response_data: Optional[dict[str, Any]] = None, *args, **kwargs):
        self.status_code = status_code
        self.response_data = response_data or {}
        super().__init__(message, *args, **kwargs)

    def get_suggestions(self) -> list[str]:
        """
        Get suggestions for fixing API errors.

        Returns:
            List of suggestion strings
        """
        suggestions = []
        if 400 <= self.status_code < 500:
            suggestions.append("Check the request body against the Airwallex API reference")
        elif self.status_code >= 500:
            suggestions.append("The Airwallex API reported a server error, try again later")
        if not suggestions:
            suggestions.append("Check your network connection and the API base URL")
        return suggestions


class ApiAuthenticationError(ApiError):
    """Exception for API authentication failures (401)."""

    def get_suggestions(self) -> list[str]:
        return [
            "The token may have expired, run 'sendbeneficiaries token' to fetch a new one",
            "Make sure --prod matches the environment the token was issued for",
        ]


class ApiAccessDeniedError(ApiError):
    """Exception for API authorization failures (403)."""
    pass


class ApiServerError(ApiError):
    """Exception for API server errors (5xx)."""
    pass


class ApiClientError(ApiError):
    """Exception for API client errors (4xx)."""
    pass


class ApiConnectionError(ApiError):
    """Exception for connection-related errors."""

    def __init__(self, message: str, *args, **kwargs):
        super().__init__(message, 0, None, *args, **kwargs)


class ApiTimeoutError(ApiError):
    """Exception for request timeout errors."""

    def __init__(self, message: str, *args, **kwargs):
        super().__init__(message, 0, None, *args, **kwargs)

    def get_suggestions(self) -> list[str]:
        return [
            "Increase the request timeout with --timeout or AWX_TIMEOUT",
            "Check your network connection",
        ]


class CSVConversionError(SendBeneficiariesError):
    """Exception for CSV conversion errors."""

    def __init__(self, message: str, file_path: Optional[str] = None,
                 row_number: Optional[int] = None, *args, **kwargs):
        self.file_path = file_path
        self.row_number = row_number
        super().__init__(message, *args, **kwargs)

    def get_suggestions(self) -> list[str]:
        """
        Get suggestions for fixing CSV conversion errors.

        Returns:
            List of suggestion strings
        """
        suggestions = []

        if "header" in self.message.lower() and "missing" in self.message.lower():
            suggestions.append("The first line of the CSV must hold the dotted field paths")
            suggestions.append("Example: beneficiary.bank_details.account_name,payment_methods")

        elif "columns" in self.message:
            suggestions.append("Every row must have as many cells as the header row")
            suggestions.append("Verify delimiter is comma (,) and fields are properly quoted if needed")

        # Add row information if available
        if self.row_number is not None:
            suggestions.append(f"Error occurs at row {self.row_number}")

        # Generic suggestions if none matched
        if not suggestions:
            suggestions.append("Check the CSV format against the expected header paths")
            suggestions.append("Make sure the file is saved as UTF-8")

        return suggestions


class HeaderCollisionError(CSVConversionError):
    """A header path runs through a position that already holds a value."""

    def __init__(self, message: str, header: str, *args, **kwargs):
        self.header = header
        super().__init__(message, *args, **kwargs)

    def get_suggestions(self) -> list[str]:
        suggestions = [
            f"Header '{self.header}' conflicts with an earlier column",
            "A column name cannot be both a value and the prefix of another dotted column",
        ]
        if self.row_number is not None:
            suggestions.append(f"Error occurs at row {self.row_number}")
        return suggestions


class ConfigurationError(SendBeneficiariesError):
    """Exception for configuration-related errors."""

    def get_suggestions(self) -> list[str]:
        """
        Get suggestions for fixing configuration errors.

        Returns:
            List of suggestion strings
        """
        suggestions = []

        if "AIRWALLEX_TOKEN" in self.message:
            suggestions.append("Run 'sendbeneficiaries token' to fetch a token into .env")
            suggestions.append("Or set AIRWALLEX_TOKEN=your_token in the .env file")

        elif "CLIENT_ID" in self.message or "API_KEY" in self.message:
            suggestions.append("Add CLIENT_ID and API_KEY to the .env file")
            suggestions.append("Use --env to point at a different .env file")

        elif "config file" in self.message.lower():
            suggestions.append("Check that the config file exists and has correct permissions")
            suggestions.append("Use --config option to specify an alternate config file")

        if not suggestions:
            suggestions.append("Check your configuration settings and environment variables")
            suggestions.append("Run with --log-level debug for more detailed information")

        return suggestions


class FileOperationError(SendBeneficiariesError):
    """Exception for file operation errors."""

    def __init__(self, message: str, file_path: Optional[str] = None, *args, **kwargs):
        self.file_path = file_path
        super().__init__(message, *args, **kwargs)

    def get_suggestions(self) -> list[str]:
        """
        Get suggestions for fixing file operation errors.

        Returns:
            List of suggestion strings
        """
        suggestions = []

        if "validation_results" in self.message:
            suggestions.append("Run 'sendbeneficiaries validate -i <csv>' first")

        if "permission denied" in self.message.lower():
            suggestions.append("Check file permissions")
            suggestions.append("Ensure you have read/write access to the file")

        elif "no such file" in self.message.lower() or "not found" in self.message.lower():
            suggestions.append("Verify the file path is correct")

        if not suggestions:
            suggestions.append("Check the file path and permissions")
            suggestions.append("Ensure the directory exists and is accessible")

        return suggestions
