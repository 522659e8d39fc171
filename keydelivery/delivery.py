import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from keydelivery.admin_client import AdminClient
from keydelivery.config import Settings
from keydelivery.delivery_document import record_created_key, render_delivery_document, save_delivery_document
from keydelivery.http_client import AdminHTTPClient
from keydelivery.schemas import CreatedApiKey, DeliveryOptions
from keydelivery.timeutils import expiration_instant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    api_key: CreatedApiKey
    document: str
    output_path: Path


def run_delivery(
    options: DeliveryOptions,
    settings: Settings,
    http: AdminHTTPClient | None = None,
    now: datetime | None = None
) -> DeliveryResult:
    """
    Logs in, creates the API key, records it and writes the delivery document.

    Steps run strictly in order and the first failure aborts the rest. A key
    that was created is recorded in the ledger before the document is
    written, so a failed save still leaves a trace of the remote key.

    Raises:
        ConfigurationError: If admin credentials are missing (before any request)
        NetworkError, AuthenticationError, CreationError, DocumentWriteError
    """
    username, password = settings.require_admin_credentials()

    http = http or AdminHTTPClient(timeout=settings.request_timeout)
    client = AdminClient(settings.base_url, http)

    token = client.login(username, password)
    api_key = client.create_api_key(token, options, expiration_instant(options.expiration_days, now=now))

    record_created_key(api_key, settings.ledger_path, options.output)

    document = render_delivery_document(api_key, tutorial_url=settings.tutorial_url)
    save_delivery_document(document, options.output)

    return DeliveryResult(api_key=api_key, document=document, output_path=options.output)
