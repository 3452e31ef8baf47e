#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
API client for the Airwallex beneficiary endpoints.
Handles authentication, beneficiary validation and beneficiary creation.
Uses Python 3.10+ type annotations.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

import requests
from pydantic import ValidationError

from sendBeneficiaries.config import (
    DEMO_BASE_URL, DEFAULT_HEADERS, DEFAULT_TIMEOUT,
    LOGIN_PATH, VALIDATE_PATH, CREATE_PATH
)
from sendBeneficiaries.validators import TokenResponse
from sendBeneficiaries.errors import (
    ApiError, ApiAuthenticationError, ApiAccessDeniedError,
    ApiServerError, ApiClientError, ApiConnectionError, ApiTimeoutError
)

# Configure logger
logger = logging.getLogger(__name__)


def _response_body(response: requests.Response) -> Any:
    """Decode a JSON response body, returning None when it is not JSON."""
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return None


class BeneficiaryApiClient:
    """
    Client for the Airwallex authentication and beneficiary APIs.
    Every call is a single blocking request with a bounded timeout.
    """

    def __init__(
        self,
        api_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT
    ):
        """
        Initialize the API client.

        Args:
            api_token: Bearer token (not needed for login)
            base_url: API base URL (defaults to the demo environment)
            timeout: Request timeout in seconds
        """
        self.api_token = api_token
        self.base_url = (base_url or DEMO_BASE_URL).rstrip("/")
        self.timeout = timeout

        logger.debug("BeneficiaryApiClient initialized with URL: %s", self.base_url)

    @property
    def headers(self) -> dict[str, str]:
        """Headers for authenticated requests."""
        headers = dict(DEFAULT_HEADERS)
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    def _post(
        self,
        path: str,
        headers: Mapping[str, str],
        payload: Optional[Mapping[str, Any]] = None
    ) -> requests.Response:
        """
        POST to an API path, mapping transport failures to typed errors.

        Raises:
            ApiTimeoutError: On request timeout
            ApiConnectionError: On connection issues
            ApiError: On any other request failure
        """
        url = f"{self.base_url}{path}"
        logger.debug("Sending request to %s", url)
        try:
            return requests.post(url, headers=dict(headers), json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error("Request to %s timed out after %.1f seconds", url, self.timeout)
            raise ApiTimeoutError(f"Request timed out after {self.timeout} seconds") from e
        except requests.exceptions.ConnectionError as e:
            logger.error("Connection error: %s", str(e))
            raise ApiConnectionError(f"Cannot connect to API server: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error("Request failed: %s", str(e))
            raise ApiError(f"Request failed: {e}") from e

    def _raise_for_status(self, response: requests.Response) -> None:
        """
        Raise the typed exception matching an error status code.

        Raises:
            ApiAuthenticationError: 401 errors
            ApiAccessDeniedError: 403 errors
            ApiServerError: 5xx errors
            ApiClientError: Other 4xx errors
        """
        status_code = response.status_code
        body = _response_body(response)
        error_data = body if isinstance(body, dict) else {}
        error_msg = error_data.get("message") or response.text or response.reason or "no details"

        if status_code == 401:
            logger.error("Authentication failed: %s", error_msg)
            raise ApiAuthenticationError(f"Authentication failed: {error_msg}",
                                         status_code, error_data)
        elif status_code == 403:
            logger.error("Access denied: %s", error_msg)
            raise ApiAccessDeniedError(f"Access denied: {error_msg}",
                                       status_code, error_data)
        elif 500 <= status_code < 600:
            logger.error("Server error: %s", error_msg)
            raise ApiServerError(f"Server error ({status_code}): {error_msg}",
                                 status_code, error_data)
        else:
            logger.error("API error: %s", error_msg)
            raise ApiClientError(f"API error ({status_code}): {error_msg}",
                                 status_code, error_data)

    def login(self, client_id: str, api_key: str) -> TokenResponse:
        """
        Obtain a bearer token.

        Args:
            client_id: Airwallex client id
            api_key: Airwallex API key

        Returns:
            Parsed token response

        Raises:
            ApiError: When the API does not answer 201 with a token
        """
        headers = {
            "x-client-id": client_id,
            "x-api-key": api_key,
            "User-Agent": DEFAULT_HEADERS["User-Agent"],
        }
        response = self._post(LOGIN_PATH, headers)

        if response.status_code != 201:
            self._raise_for_status(response)

        body = _response_body(response)
        try:
            token = TokenResponse.model_validate(body)
        except ValidationError as e:
            raise ApiError(f"Error parsing token response: {e.errors()[0]['msg']}",
                           response.status_code) from e

        logger.info("Obtained token (expires at %s)", token.expires_at or "unknown")
        return token

    def validate_beneficiary(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """
        Ask the API to validate one beneficiary record.

        Args:
            record: Nested beneficiary record

        Returns:
            Empty dict if the record is valid, otherwise the API's error body

        Raises:
            ApiAuthenticationError: On 401, so the caller can record it
            ApiServerError: On 5xx, which aborts the run
            ApiConnectionError: On connection issues
            ApiTimeoutError: On request timeout
        """
        response = self._post(VALIDATE_PATH, self.headers, record)

        if response.status_code == 401 or 500 <= response.status_code < 600:
            self._raise_for_status(response)

        body = _response_body(response)
        if response.ok:
            return body if isinstance(body, dict) else {}

        if isinstance(body, dict) and body:
            return body

        return {
            "code": str(response.status_code),
            "message": response.text or response.reason or f"HTTP {response.status_code}",
        }

    def create_beneficiary(self, record: Mapping[str, Any]) -> tuple[int, dict[str, Any]]:
        """
        Create one beneficiary.

        Args:
            record: Nested beneficiary record that passed validation

        Returns:
            Tuple of (status code, decoded response body); 201 means created

        Raises:
            ApiConnectionError: On connection issues
            ApiTimeoutError: On request timeout
        """
        response = self._post(CREATE_PATH, self.headers, record)
        body = _response_body(response)
        if not isinstance(body, dict):
            body = {"message": response.text}
        return response.status_code, body
