import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from prbridge.logger import get_logger

load_dotenv()


logger = get_logger("prbridge.settings")

DEFAULT_PORT = 3001
GITHUB_API_URL = "https://api.github.com"


class Settings(BaseModel):
    """
    Process-wide configuration, read once at startup.

    Both the webhook ingress and the comment publisher receive this
    object explicitly instead of reading the environment themselves.
    """

    # Empty secret is allowed; every signature check then fails
    github_webhook_secret: str = ""

    # GitHub App authentication
    github_app_id: Optional[str] = None
    github_private_key: Optional[str] = None
    github_installation_id: Optional[str] = None

    github_api_url: str = GITHUB_API_URL

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    model_config = {"frozen": True}

    @property
    def has_app_credentials(self) -> bool:
        return bool(self.github_app_id) and bool(self.github_private_key)


def _read_private_key() -> Optional[str]:
    key = os.getenv("GITHUB_PRIVATE_KEY")
    if key:
        # Single-line PEMs in .env files carry escaped newlines
        return key.replace("\\n", "\n")

    key_path = os.getenv("GITHUB_PRIVATE_KEY_PATH")
    if not key_path:
        return None

    try:
        with open(key_path, "r") as f:
            return f.read()
    except OSError:
        logger.warning("Failed to read GitHub private key at %s", key_path)
        return None


def load_settings() -> Settings:
    return Settings(
        github_webhook_secret=os.getenv("GITHUB_WEBHOOK_SECRET", ""),
        github_app_id=os.getenv("GITHUB_APP_ID") or None,
        github_private_key=_read_private_key(),
        github_installation_id=os.getenv("GITHUB_INSTALLATION_ID") or None,
        github_api_url=os.getenv("GITHUB_API_URL", GITHUB_API_URL).rstrip("/"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", str(DEFAULT_PORT))),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def redact_secret(value: Optional[str], visible_chars: int = 4) -> str:
    if not value:
        return "(not set)"
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def validate_github_settings(settings: Settings) -> None:
    """
    Warn about missing GitHub configuration.

    Webhook ingestion keeps working without App credentials, so nothing
    here aborts startup.
    """
    if not settings.github_webhook_secret:
        logger.warning(
            "GITHUB_WEBHOOK_SECRET is not set; every webhook will be rejected"
        )

    if not settings.github_app_id:
        logger.warning("GITHUB_APP_ID is not set")

    if not settings.github_private_key:
        logger.warning("GITHUB_PRIVATE_KEY is not set")
