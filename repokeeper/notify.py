"""
Report notifications.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import requests

logger = logging.getLogger(__name__)

# Discord rejects messages longer than this
DISCORD_MAX_CONTENT = 2000


class Notifier(ABC):
    """Delivers a finished report somewhere outside the report directory."""

    @abstractmethod
    def send(self, title: str, text: str) -> bool:
        pass


class DiscordNotifier(Notifier):
    """Posts reports to a Discord channel through an incoming webhook."""

    def __init__(self, webhook: str, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self.webhook = webhook
        self.session = session or requests.Session()
        self.timeout = timeout
        self.enabled = bool(webhook)

    def send(self, title: str, text: str) -> bool:
        if not self.enabled:
            return False

        content = f"**{title}**\n{text}"
        if len(content) > DISCORD_MAX_CONTENT:
            content = content[:DISCORD_MAX_CONTENT - 3] + "..."

        try:
            response = self.session.post(
                self.webhook,
                json={"content": content},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout
            )
            response.raise_for_status()
            return True
        except requests.RequestException as e:
            logger.error(f"Failed to send Discord notification: {e}")
            return False


def build_notifiers(settings) -> List[Notifier]:
    """Notifiers configured in settings."""
    notifiers: List[Notifier] = []
    if settings.DISCORD_WEBHOOK:
        notifiers.append(DiscordNotifier(settings.DISCORD_WEBHOOK))
    return notifiers


def notify_all(notifiers: List[Notifier], title: str, text: str) -> int:
    """Send to every notifier; a failing one never stops the others. Returns the number delivered."""
    delivered = 0
    for notifier in notifiers:
        try:
            if notifier.send(title, text):
                delivered += 1
        except Exception:
            logger.exception("Notifier %s failed", type(notifier).__name__)
    return delivered
