import pytest

from keydelivery.config import Settings

# Keep the developer's shell or .env from leaking into tests
SETTINGS_ENV_VARS = (
    "ADMIN_USERNAME",
    "ADMIN_PASSWORD",
    "API_SCHEME",
    "API_HOST",
    "PORT",
    "REQUEST_TIMEOUT",
    "TIMEZONE_OFFSET",
    "OUTPUT_DIR",
    "LEDGER_PATH",
    "TUTORIAL_URL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        admin_username="admin",
        admin_password="s3cret",
        output_dir=tmp_path / "xianyu-cc",
        ledger_path=tmp_path / "xianyu-cc" / "created-keys.jsonl",
    )
