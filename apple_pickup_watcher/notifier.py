"""Notification channels for stock alerts.

The console channel is always present. Email goes out over SMTP and push
notifications through the Pushover messages API; each is only built when its
credentials are complete, so a half-configured channel is skipped rather than
attempted.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
import sys
from email.message import EmailMessage
from typing import Dict, List, Optional, Protocol, Sequence, TextIO

import requests

from .config import Config
from .exceptions import ChannelError
from .models import StoreRecord

logger = logging.getLogger(__name__)

PUSHOVER_URL = "https://api.pushover.net/1/messages.json"


class Channel(Protocol):
    name: str

    def send(self, summary: str) -> None:
        ...


def format_summary(stores: Sequence[StoreRecord]) -> str:
    lines = [f"The device is currently available at {len(stores)} stores near you:"]
    lines.extend(store.summary_line() for store in stores)
    return "\n".join(lines)


class ConsoleChannel:
    name = "console"

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream

    def send(self, summary: str) -> None:
        stream = self.stream or sys.stdout
        try:
            stream.write("\n" + summary + "\n")
            stream.flush()
        except (OSError, ValueError) as exc:
            raise ChannelError("Could not write to console", channel=self.name, cause=exc) from exc


class EmailChannel:
    name = "email"

    def __init__(
        self,
        recipient: str,
        username: str,
        password: str,
        sender: Optional[str] = None,
        host: str = "smtp.gmail.com",
        port: int = 587,
        subject: str = "iPhone available for pickup",
        timeout: float = 20,
    ) -> None:
        self.recipient = recipient
        self.username = username
        self.password = password
        self.sender = sender or username
        self.host = host
        self.port = int(port)
        self.subject = subject
        self.timeout = timeout

    def _build_message(self, summary: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = self.subject
        msg["From"] = self.sender
        msg["To"] = self.recipient
        msg.set_content(summary)
        return msg

    def send(self, summary: str) -> None:
        msg = self._build_message(summary)
        try:
            if self.port == 587:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                    smtp.ehlo()
                    smtp.starttls(context=ssl.create_default_context())
                    smtp.login(self.username, self.password)
                    smtp.send_message(msg)
            else:
                with smtplib.SMTP_SSL(
                    self.host, self.port, context=ssl.create_default_context(), timeout=self.timeout
                ) as smtp:
                    smtp.login(self.username, self.password)
                    smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise ChannelError("Failed to send email", channel=self.name, cause=exc) from exc
        logger.info("Email sent to %s", self.recipient)


class PushChannel:
    name = "push"

    def __init__(
        self,
        token: str,
        user: str,
        title: str = "iPhone available for pickup",
        priority: int = 2,
        retry: int = 30,
        expire: int = 3600,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.token = token
        self.user = user
        self.title = title
        self.priority = priority
        self.retry = retry
        self.expire = expire
        self.timeout = float(timeout if timeout is not None else Config.REQUEST_TIMEOUT)
        self.session = session

    def _payload(self, summary: str) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "token": self.token,
            "user": self.user,
            "title": self.title,
            "message": summary,
            "priority": self.priority,
        }
        # Emergency priority is rejected without retry/expire.
        if self.priority >= 2:
            payload["retry"] = self.retry
            payload["expire"] = self.expire
        return payload

    def send(self, summary: str) -> None:
        poster = self.session or requests
        try:
            response = poster.post(PUSHOVER_URL, data=self._payload(summary), timeout=self.timeout)
        except requests.RequestException as exc:
            raise ChannelError("Failed to reach push service", channel=self.name, cause=exc) from exc
        if not response.ok:
            raise ChannelError(f"Push service returned HTTP {response.status_code}", channel=self.name)
        logger.info("Push notification sent")


def build_channels(
    email_to: Optional[str] = None,
    push: bool = True,
    console: Optional[ConsoleChannel] = None,
) -> List[Channel]:
    """Select the channels whose configuration is complete."""
    channels: List[Channel] = [console or ConsoleChannel()]

    recipient = email_to or Config.EMAIL_TO
    if recipient:
        if Config.EMAIL_USERNAME and Config.EMAIL_PASSWORD:
            channels.append(
                EmailChannel(
                    recipient=recipient,
                    username=Config.EMAIL_USERNAME,
                    password=Config.EMAIL_PASSWORD,
                    sender=Config.EMAIL_FROM,
                    host=Config.EMAIL_SMTP_HOST,
                    port=Config.EMAIL_SMTP_PORT,
                    subject=Config.EMAIL_SUBJECT,
                )
            )
        else:
            logger.warning("Email recipient set but EMAIL_USERNAME/EMAIL_PASSWORD missing; skipping email")

    if push:
        if Config.PUSHOVER_TOKEN and Config.PUSHOVER_USER:
            channels.append(
                PushChannel(
                    token=Config.PUSHOVER_TOKEN,
                    user=Config.PUSHOVER_USER,
                    priority=Config.PUSHOVER_PRIORITY,
                    retry=Config.PUSHOVER_RETRY,
                    expire=Config.PUSHOVER_EXPIRE,
                )
            )
        elif Config.PUSHOVER_TOKEN or Config.PUSHOVER_USER:
            logger.warning("Pushover needs both PUSHOVER_TOKEN and PUSHOVER_USER; skipping push")

    logger.info("Notification channels: %s", ", ".join(c.name for c in channels))
    return channels


class Notifier:
    """Deliver a stock summary to every configured channel."""

    def __init__(self, channels: Sequence[Channel]) -> None:
        self.channels = list(channels)

    def notify(self, stores: Sequence[StoreRecord]) -> Dict[str, bool]:
        summary = format_summary(stores)
        delivered: Dict[str, bool] = {}
        for channel in self.channels:
            name = channel.name
            try:
                channel.send(summary)
                delivered[name] = True
            except ChannelError as exc:
                logger.error("Notification failed: %s", exc)
                delivered[name] = False
            except Exception:  # noqa: BLE001
                logger.exception("Unexpected error in %s channel", name)
                delivered[name] = False
        return delivered
