"""Application configuration and logging setup."""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

DEFAULT_ENDPOINT = "https://www.apple.com/shop/retail/pickup-message"


class Config:
    """Configuration values sourced from the environment."""

    PICKUP_ENDPOINT: str = os.getenv("PICKUP_ENDPOINT", DEFAULT_ENDPOINT)
    POLL_DELAY: float = float(os.getenv("POLL_DELAY", "30"))
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "10"))
    EMAIL_TO: Optional[str] = os.getenv("EMAIL_TO")
    EMAIL_FROM: Optional[str] = os.getenv("EMAIL_FROM")
    EMAIL_USERNAME: Optional[str] = os.getenv("EMAIL_USERNAME")
    EMAIL_PASSWORD: Optional[str] = os.getenv("EMAIL_PASSWORD")
    EMAIL_SMTP_HOST: str = os.getenv("EMAIL_SMTP_HOST", "smtp.gmail.com")
    EMAIL_SMTP_PORT: int = int(os.getenv("EMAIL_SMTP_PORT", "587"))
    EMAIL_SUBJECT: str = os.getenv("EMAIL_SUBJECT", "iPhone available for pickup")
    PUSHOVER_TOKEN: Optional[str] = os.getenv("PUSHOVER_TOKEN")
    PUSHOVER_USER: Optional[str] = os.getenv("PUSHOVER_USER")
    PUSHOVER_PRIORITY: int = int(os.getenv("PUSHOVER_PRIORITY", "2"))
    PUSHOVER_RETRY: int = int(os.getenv("PUSHOVER_RETRY", "30"))
    PUSHOVER_EXPIRE: int = int(os.getenv("PUSHOVER_EXPIRE", "3600"))

    @classmethod
    def reload(cls, env_file: Optional[str] = None) -> None:
        """Re-read every setting, optionally after loading a credential file."""
        if env_file:
            load_dotenv(env_file, override=True)
        cls.PICKUP_ENDPOINT = os.getenv("PICKUP_ENDPOINT", DEFAULT_ENDPOINT)
        cls.POLL_DELAY = float(os.getenv("POLL_DELAY", "30"))
        cls.REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))
        cls.EMAIL_TO = os.getenv("EMAIL_TO")
        cls.EMAIL_FROM = os.getenv("EMAIL_FROM")
        cls.EMAIL_USERNAME = os.getenv("EMAIL_USERNAME")
        cls.EMAIL_PASSWORD = os.getenv("EMAIL_PASSWORD")
        cls.EMAIL_SMTP_HOST = os.getenv("EMAIL_SMTP_HOST", "smtp.gmail.com")
        cls.EMAIL_SMTP_PORT = int(os.getenv("EMAIL_SMTP_PORT", "587"))
        cls.EMAIL_SUBJECT = os.getenv("EMAIL_SUBJECT", "iPhone available for pickup")
        cls.PUSHOVER_TOKEN = os.getenv("PUSHOVER_TOKEN")
        cls.PUSHOVER_USER = os.getenv("PUSHOVER_USER")
        cls.PUSHOVER_PRIORITY = int(os.getenv("PUSHOVER_PRIORITY", "2"))
        cls.PUSHOVER_RETRY = int(os.getenv("PUSHOVER_RETRY", "30"))
        cls.PUSHOVER_EXPIRE = int(os.getenv("PUSHOVER_EXPIRE", "3600"))
        logging.getLogger().setLevel(os.getenv("LOG_LEVEL", "INFO").upper())


HEADERS: Dict[str, str] = {
    "Accept": "application/json, text/plain, */*",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36"
    ),
    "Referer": "https://www.apple.com/shop/buy-iphone",
}
