import logging

from .config import settings


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def mask(token: str | None) -> str:
    """Shorten a bearer or device token for log lines."""
    if not token:
        return ""
    return f"{token[:16]}..."
