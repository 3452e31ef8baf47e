#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Formatting utilities for errors and validation reports.
Provides context-rich, user-friendly error messages and suggestions.
"""

import textwrap
import logging
from collections.abc import Sequence
from typing import Any

from sendBeneficiaries.errors import (
    SendBeneficiariesError, ApiError, ApiAuthenticationError,
    ApiServerError, ApiConnectionError, ApiTimeoutError,
    CSVConversionError, ConfigurationError, FileOperationError
)
from sendBeneficiaries.validators import ValidationResults, ValidationErrorEntry

# Configure logger
logger = logging.getLogger(__name__)

# Error sources the API uses for the human readable part of an error body
REPORTED_SOURCES = ("message", "details", "code")


class ErrorFormatter:
    """Format errors into user-friendly messages with context and suggestions."""

    # ANSI color codes for terminal output
    COLORS = {
        'reset': '\033[0m',
        'red': '\033[31m',
        'green': '\033[32m',
        'cyan': '\033[36m',
        'bold': '\033[1m',
    }

    def __init__(self, use_colors: bool = True, terminal_width: int = 80):
        """
        Initialize the error formatter.

        Args:
            use_colors: Whether to use ANSI colors in output
            terminal_width: Terminal width for text wrapping
        """
        self.use_colors = use_colors
        self.terminal_width = terminal_width

    def format(self, error: Any) -> str:
        """
        Format an error into a user-friendly message.

        Args:
            error: Error object or exception

        Returns:
            Formatted error message with context and suggestions
        """
        if isinstance(error, SendBeneficiariesError):
            return self._format_known_error(error)
        return self._format_exception(error)

    def _apply_color(self, text: str, color: str) -> str:
        """Apply ANSI color if colors are enabled."""
        if not self.use_colors:
            return text
        color_code = self.COLORS.get(color, '')
        if not color_code:
            return text
        return f"{color_code}{text}{self.COLORS['reset']}"

    def _wrap_text(self, text: str, indent: int = 0) -> str:
        """Wrap text to terminal width with optional indentation."""
        return textwrap.fill(
            text,
            width=self.terminal_width - indent,
            initial_indent=' ' * indent,
            subsequent_indent=' ' * indent
        )

    def _format_context(self, context_items: dict[str, Any]) -> str:
        """Format error context information."""
        if not context_items:
            return ""

        lines = [self._apply_color("Context:", 'bold')]
        for key, value in context_items.items():
            if value is not None:
                key_str = self._apply_color(f"{key}:", 'cyan')
                lines.append(f"  {key_str} {value}")

        return "\n".join(lines)

    def _format_suggestions(self, suggestions: list[str]) -> str:
        """Format error fix suggestions."""
        if not suggestions:
            return ""

        lines = [self._apply_color("Suggestions:", 'bold')]
        for i, suggestion in enumerate(suggestions, 1):
            bullet = self._apply_color(f"{i}.", 'green')
            suggestion_text = self._wrap_text(suggestion, indent=5)
            lines.append(f"  {bullet} {suggestion_text[5:]}")

        return "\n".join(lines)

    def _error_type(self, error: SendBeneficiariesError) -> str:
        if isinstance(error, ApiAuthenticationError):
            return "API Authentication Error"
        if isinstance(error, ApiServerError):
            return "API Server Error"
        if isinstance(error, ApiConnectionError):
            return "API Connection Error"
        if isinstance(error, ApiTimeoutError):
            return "API Timeout Error"
        if isinstance(error, ApiError):
            return "API Error"
        if isinstance(error, CSVConversionError):
            return "CSV Conversion Error"
        if isinstance(error, ConfigurationError):
            return "Configuration Error"
        if isinstance(error, FileOperationError):
            return "File Operation Error"
        return "Error"

    def _format_known_error(self, error: SendBeneficiariesError) -> str:
        context: dict[str, Any] = {}
        if isinstance(error, ApiError):
            if error.status_code:
                context["Status code"] = error.status_code
            if code := error.response_data.get("code"):
                context["API code"] = code
        elif isinstance(error, CSVConversionError):
            context["File"] = error.file_path
            context["Row"] = error.row_number
        elif isinstance(error, FileOperationError):
            context["File"] = error.file_path

        parts = [
            self._apply_color(f"ERROR: {self._error_type(error)}", 'bold'),
            self._apply_color(self._wrap_text(error.message, indent=2), 'red'),
            self._format_context({k: v for k, v in context.items() if v is not None}),
            self._format_suggestions(error.get_suggestions())
        ]
        return "\n\n".join(filter(bool, parts))

    def _format_exception(self, error: Any) -> str:
        """Format standard Python exceptions."""
        parts = [
            self._apply_color(f"ERROR: Python {error.__class__.__name__}", 'bold'),
            self._apply_color(self._wrap_text(str(error), indent=2), 'red'),
            self._format_suggestions([
                "This is an unexpected error in the application",
                "Try running with --log-level debug for more detailed information",
            ])
        ]
        return "\n\n".join(filter(bool, parts))


def format_error(error: Any, use_colors: bool = True) -> str:
    """Format an error for user-friendly display."""
    return ErrorFormatter(use_colors=use_colors).format(error)


def format_validation_report(
    results: ValidationResults,
    errors: Sequence[ValidationErrorEntry]
) -> str:
    """
    Build the summary printed after a validation run.

    Errors are grouped by row under a banner with the account name and bank
    country. Only the message, details and code parts of an API error body
    are listed, since the other keys repeat request fields.
    """
    lines = [
        "",
        "=== Validation Summary ===",
        f"Successful: {results.successful.count}",
        f"Errors: {results.errors.count}",
    ]

    if errors:
        lines.append("")
        lines.append("=== Detailed Error Information ===")
        printing_row = None
        for error in errors:
            if error.row != printing_row:
                printing_row = error.row
                lines.append(
                    f"---------Row: {error.row}, Account Name: {error.account_name}, "
                    f"Bank Country: {error.bank_country}----------"
                )
            if error.error_source in REPORTED_SOURCES:
                lines.append(f"* Error Source: {error.error_source}")
                lines.append(f"  Error Message: {error.error_message}")
                if error.params:
                    lines.append(f"Parameters: {error.params}")

    return "\n".join(lines)
