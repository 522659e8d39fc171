import json
import logging
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from keydelivery.exceptions import AuthenticationError, CreationError
from keydelivery.http_client import AdminHTTPClient, HTTPResponse
from keydelivery.schemas import API_KEY_PERMISSIONS, API_KEY_TAGS, CreatedApiKey, DeliveryOptions
from keydelivery.timeutils import to_iso_timestamp

logger = logging.getLogger(__name__)

LOGIN_PATH = "/web/auth/login"
API_KEYS_PATH = "/admin/api-keys"

UNKNOWN_ERROR = "unknown error"


def _message(body: Any) -> str | None:
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


def _dump(response: HTTPResponse) -> str:
    return json.dumps(response.body, ensure_ascii=False)


def _succeeded(body: Any) -> bool:
    return isinstance(body, dict) and bool(body.get("success"))


def build_api_key_payload(options: DeliveryOptions, expires_at: datetime) -> dict[str, Any]:
    """Builds the fixed-shape body for POST /admin/api-keys."""
    return {
        "name": options.name,
        "description": options.description,
        "tokenLimit": 0,
        "rateLimitWindow": None,
        "rateLimitRequests": None,
        "rateLimitCost": None,
        "concurrencyLimit": 0,
        "dailyCostLimit": 0,
        "totalCostLimit": options.total_cost_limit,
        "weeklyOpusCostLimit": 0,
        "expiresAt": to_iso_timestamp(expires_at),
        "expirationMode": "fixed",
        "permissions": list(API_KEY_PERMISSIONS),
        "tags": list(API_KEY_TAGS),
        "enableModelRestriction": False,
        "restrictedModels": [],
        "enableClientRestriction": False,
        "allowedClients": [],
        "claudeConsoleAccountId": options.claude_console_account_id
    }


class AdminClient:
    def __init__(self, base_url: str, http: AdminHTTPClient):
        self.base_url = base_url.rstrip("/")
        self.http = http

    def login(self, username: str, password: str) -> str:
        """
        Exchanges admin credentials for a bearer token.

        Raises:
            AuthenticationError: If the status is not 200 or the body does not report success
            NetworkError: If the server cannot be reached
        """
        logger.info(f"Logging in to {self.base_url} as {username}")

        response = self.http.request(
            f"{self.base_url}{LOGIN_PATH}",
            method="POST",
            body={"username": username, "password": password}
        )

        if response.status != 200 or not _succeeded(response.body):
            message = _message(response.body) or UNKNOWN_ERROR
            logger.error(f"Login failed: status {response.status}")
            raise AuthenticationError(f"Login failed: {message}", status_code=response.status)

        token = response.body.get("token")
        if not token:
            raise AuthenticationError("Login failed: response did not include a token", status_code=response.status)

        logger.info("Login succeeded")
        return str(token)

    def create_api_key(self, token: str, options: DeliveryOptions, expires_at: datetime) -> CreatedApiKey:
        """
        Creates an API key with the given options.

        Args:
            token: Bearer token from login()
            options: Resolved delivery options
            expires_at: Absolute expiration instant

        Returns:
            The created key as reported by the server

        Raises:
            CreationError: If the status is not 200/201 or the body does not report success
            NetworkError: If the server cannot be reached
        """
        payload = build_api_key_payload(options, expires_at)

        logger.info(f"Creating API key {options.name} (limit ${options.total_cost_limit}, expires {payload['expiresAt']})")

        response = self.http.request(
            f"{self.base_url}{API_KEYS_PATH}",
            method="POST",
            headers={"Authorization": f"Bearer {token}"},
            body=payload
        )

        if response.status not in (200, 201):
            logger.error(f"API key creation failed: status {response.status}")
            raise CreationError(
                f"API key creation failed: {_message(response.body) or _dump(response)}",
                status_code=response.status
            )

        if not _succeeded(response.body):
            raise CreationError(
                f"API key creation failed: {_message(response.body) or UNKNOWN_ERROR}",
                status_code=response.status
            )

        data = response.body.get("data")
        if not isinstance(data, dict):
            raise CreationError("API key creation failed: response did not include key data", status_code=response.status)

        try:
            created = CreatedApiKey.model_validate(data)
        except ValidationError as e:
            raise CreationError(f"API key creation failed: malformed key data ({e.error_count()} errors)") from e

        logger.info(f"API key created: {created.id}")
        return created
