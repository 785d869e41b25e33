"""Runtime configuration read from environment variables and Streamlit secrets."""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

import streamlit as st

from utils.logging_config import setup_logger

logger = setup_logger(__name__)

DEFAULT_SENDER = "Aeternia Patrimoine <contact@aeterniapatrimoine.fr>"
DEFAULT_BCC = "contact@aeterniapatrimoine.fr"
DEFAULT_API_URL = "https://api.resend.com/emails"
DEFAULT_TIMEOUT_SECONDS = 10.0


def read_secret(name: str, default: Optional[str] = None) -> Optional[str]:
    """
    Look up a setting: environment first, then Streamlit secrets
    (nested under `passwords` or top level).
    """
    value = os.getenv(name)
    if value:
        return value

    try:
        secrets = st.secrets.get("passwords", {}) if "passwords" in st.secrets else st.secrets
        value = secrets.get(name)
    except Exception as e:
        # No secrets.toml outside of a deployed app
        logger.debug(f"Streamlit secrets unavailable for {name}: {e}")
        value = None

    return value if value else default


@dataclass(frozen=True)
class MailerSettings:
    """Settings for the simulation e-mail service."""

    api_key: Optional[str]
    sender: str = DEFAULT_SENDER
    bcc: Tuple[str, ...] = (DEFAULT_BCC,)
    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def load(cls) -> 'MailerSettings':
        """Read RESEND_API_KEY, MAIL_FROM, MAIL_BCC, RESEND_API_URL and MAIL_TIMEOUT_SECONDS."""
        bcc_raw = read_secret("MAIL_BCC", DEFAULT_BCC)
        bcc = tuple(a.strip() for a in bcc_raw.replace(";", ",").split(",") if a.strip())

        timeout_raw = read_secret("MAIL_TIMEOUT_SECONDS")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_SECONDS
        except ValueError:
            logger.warning(f"Invalid MAIL_TIMEOUT_SECONDS={timeout_raw!r}, using {DEFAULT_TIMEOUT_SECONDS}s")
            timeout = DEFAULT_TIMEOUT_SECONDS

        settings = cls(
            api_key=read_secret("RESEND_API_KEY"),
            sender=read_secret("MAIL_FROM", DEFAULT_SENDER),
            bcc=bcc,
            api_url=read_secret("RESEND_API_URL", DEFAULT_API_URL),
            timeout_seconds=timeout,
        )

        if not settings.is_configured:
            logger.info("E-mail delivery disabled (no RESEND_API_KEY found)")

        return settings
