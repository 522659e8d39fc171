import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

import httpx
from pydantic import ValidationError

from keydelivery.config import Settings, get_settings
from keydelivery.delivery import DeliveryResult, run_delivery
from keydelivery.exceptions import ConfigurationError, DeliveryError
from keydelivery.http_client import AdminHTTPClient
from keydelivery.schemas import (
    DEFAULT_CLAUDE_CONSOLE_ACCOUNT_ID,
    DEFAULT_DESCRIPTION,
    DEFAULT_EXPIRATION_DAYS,
    DEFAULT_TOTAL_COST_LIMIT,
    DeliveryOptions,
)
from keydelivery.timeutils import default_name

logger = logging.getLogger(__name__)

EPILOG = """environment variables (read from the environment or .env):
  ADMIN_USERNAME     admin username (required)
  ADMIN_PASSWORD     admin password (required)
  API_HOST           admin API host (default 127.0.0.1)
  PORT               admin API port (default 12350)
  TIMEZONE_OFFSET    hours added to UTC for the default name (default 8)

examples:
  create-apikey-delivery
  create-apikey-delivery --name "测试账户_001" --totalCostLimit 50
  create-apikey-delivery --name "VIP客户_20260111" --totalCostLimit 100 \\
      --expirationDays 30 --description "VIP客户专属账户"
"""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise ConfigurationError(f"Invalid arguments: {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="create-apikey-delivery",
        description="Create an API key through the admin API and write its delivery document",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False
    )
    # nargs="?" lets a flag without a value fall back to its default
    parser.add_argument("--name", nargs="?", help="API key name (default: 20刀体验_<date>_<time>)")
    parser.add_argument(
        "--totalCostLimit",
        dest="total_cost_limit",
        nargs="?",
        type=float,
        help=f"Total cost limit in USD (default: {DEFAULT_TOTAL_COST_LIMIT:g})"
    )
    parser.add_argument(
        "--claudeConsoleAccountId",
        dest="claude_console_account_id",
        nargs="?",
        help=f"Claude Console account ID (default: {DEFAULT_CLAUDE_CONSOLE_ACCOUNT_ID})"
    )
    parser.add_argument(
        "--expirationDays",
        dest="expiration_days",
        nargs="?",
        type=int,
        help=f"Days until expiration (default: {DEFAULT_EXPIRATION_DAYS})"
    )
    parser.add_argument("--description", nargs="?", help=f"API key description (default: {DEFAULT_DESCRIPTION})")
    parser.add_argument("--output", nargs="?", type=Path, help="Output document path (default: <OUTPUT_DIR>/<name>.md)")
    return parser


def resolve_options(argv: list[str], settings: Settings, now: datetime | None = None) -> DeliveryOptions:
    """
    Merges CLI flags over built-in defaults. Unknown flags are ignored.

    Raises:
        ConfigurationError: If a flag value is malformed or out of range
    """
    args, unknown = build_parser().parse_known_args(argv)
    if unknown:
        logger.info(f"Ignoring unrecognized arguments: {' '.join(unknown)}")

    name = args.name or default_name(settings.timezone_offset, now=now)
    values = {
        "name": name,
        "total_cost_limit": args.total_cost_limit,
        "claude_console_account_id": args.claude_console_account_id,
        "expiration_days": args.expiration_days,
        "description": args.description,
        "output": args.output or settings.output_dir / f"{name}.md",
    }

    try:
        return DeliveryOptions(**{k: v for k, v in values.items() if v is not None})
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise ConfigurationError(f"Invalid option values: {fields}") from e


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]).upper() for err in e.errors())
        raise ConfigurationError(f"Invalid environment configuration: {fields}") from e


def print_summary(result: DeliveryResult) -> None:
    api_key = result.api_key
    print("\n✅ Done!\n")
    print("📋 API Key:")
    print(f"   ID:               {api_key.id}")
    print(f"   Name:             {api_key.name}")
    print(f"   API Key:          {api_key.api_key}")
    print(f"   Expires at:       {api_key.expires_at}")
    print(f"   Total cost limit: ${api_key.total_cost_limit}")
    print(f"\n📄 Delivery document: {result.output_path}\n")


def main(
    argv: list[str] | None = None,
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None
) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        settings = settings or _load_settings()
        options = resolve_options(sys.argv[1:] if argv is None else argv, settings)

        logger.info(f"Admin API: {settings.base_url}")
        logger.info(
            f"Key {options.name}: limit ${options.total_cost_limit:g}, "
            f"{options.expiration_days} days, output {options.output}"
        )

        http = AdminHTTPClient(timeout=settings.request_timeout, transport=transport)
        result = run_delivery(options, settings, http=http)
    except DeliveryError as e:
        print(f"\n❌ Error: {e.message}")
        return 1

    print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
