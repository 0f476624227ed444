"""Local notification center.

Stands in for the operating system's notification API: reminders are
registered, queried and removed here and persisted in the key-value store.
The UI polls ``due_requests`` and shows what fired.
"""

import json
import logging
from datetime import datetime

from pydantic import TypeAdapter

from softdreams.memory.key_value_store import KeyValueStore, StorageKeys
from softdreams.memory.notifications import NotificationRequest
from softdreams.services._records import read_list, write_list
from softdreams.settings import Settings

logger = logging.getLogger(__name__)

_REQUEST_LIST = TypeAdapter(list[NotificationRequest])


class NotificationCenter:
    """Registry of pending local notifications."""

    def __init__(self, store: KeyValueStore, settings: Settings):
        """Initialize the notification center.

        Args:
            store: Key-value store holding pending requests.
            settings: Application settings (``notifications_enabled`` acts
                as the user's permission).
        """
        self.store = store
        self.settings = settings

    def request_authorization(self) -> bool:
        """Ask for permission to show notifications.

        The answer follows ``settings.notifications_enabled`` and is
        remembered in the store.
        """
        granted = bool(self.settings.notifications_enabled)
        self.store.set(StorageKeys.NOTIFICATION_AUTHORIZATION, json.dumps({"granted": granted}))
        logger.info("Notification authorization %s", "granted" if granted else "denied")
        return granted

    def authorization_granted(self) -> bool:
        """True when permission was requested and granted and is still enabled."""
        if not self.settings.notifications_enabled:
            return False
        raw = self.store.get(StorageKeys.NOTIFICATION_AUTHORIZATION)
        if raw is None:
            return False
        try:
            return bool(json.loads(raw).get("granted", False))
        except (json.JSONDecodeError, AttributeError) as e:
            logger.warning("Ignoring unreadable notification authorization: %s", e)
            return False

    def pending_requests(self) -> list[NotificationRequest]:
        """All registered requests.

        Raises:
            DataCorruptionError: If the stored requests cannot be decoded.
        """
        return read_list(self.store, StorageKeys.PENDING_NOTIFICATIONS, _REQUEST_LIST)

    def _write(self, requests: list[NotificationRequest]) -> None:
        write_list(self.store, StorageKeys.PENDING_NOTIFICATIONS, _REQUEST_LIST, requests)

    def add(self, request: NotificationRequest) -> None:
        """Register *request*, replacing any request with the same identifier."""
        requests = [r for r in self.pending_requests() if r.identifier != request.identifier]
        requests.append(request)
        self._write(requests)
        logger.debug("Registered notification %s (%s)", request.identifier, request.category)

    def remove_pending(self, identifiers: list[str]) -> int:
        """Remove requests by identifier.

        Returns:
            Number of requests removed.
        """
        requests = self.pending_requests()
        remaining = [r for r in requests if r.identifier not in set(identifiers)]
        removed = len(requests) - len(remaining)
        if removed:
            self._write(remaining)
            logger.debug("Removed %d notification(s)", removed)
        return removed

    def remove_all(self) -> None:
        """Remove every pending request."""
        self.store.remove(StorageKeys.PENDING_NOTIFICATIONS)
        logger.info("Removed all pending notifications")

    def due_requests(self, start: datetime, end: datetime) -> list[NotificationRequest]:
        """Requests that fire in the window ``(start, end]``.

        One-shot requests are dropped from the registry once they fired.
        """
        if not self.authorization_granted():
            return []
        requests = self.pending_requests()
        due = [r for r in requests if r.fires_between(start, end)]
        fired_once = {r.identifier for r in due if not r.repeats_daily}
        if fired_once:
            self._write([r for r in requests if r.identifier not in fired_once])
        if due:
            logger.info("%d notification(s) due", len(due))
        return due
