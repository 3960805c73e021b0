"""Push notification delivery through Firebase Cloud Messaging."""
import json
import logging
from typing import List, Optional, Tuple

import firebase_admin
from firebase_admin import credentials, messaging
from sqlmodel import Session

from app.core import database
from app.crud.devices import list_device_tokens

logger = logging.getLogger(__name__)

# FCM multicast limit
MAX_TOKENS_PER_MESSAGE = 500

APP_NAME = "assister-push"


class PushNotifier:
    """Sends notifications to FCM device tokens."""

    def __init__(self):
        self._app: Optional[firebase_admin.App] = None

    @property
    def enabled(self) -> bool:
        return self._app is not None

    def configure(self, raw_config: str) -> None:
        """Initialise the Firebase app from a service-account JSON string.

        An empty string leaves push delivery disabled.
        """
        if not raw_config:
            logger.info("FIREBASE_CONFIG not set - push notifications are disabled")
            return

        if self._app is not None:
            return

        try:
            config = json.loads(raw_config)
            # Env files usually carry the key with escaped newlines
            if "private_key" in config:
                config["private_key"] = config["private_key"].replace("\\n", "\n")
            self._app = firebase_admin.initialize_app(credentials.Certificate(config), name=APP_NAME)
            logger.info("Firebase messaging configured")
        except (ValueError, KeyError) as e:
            logger.error(f"Failed to configure Firebase messaging: {e}")
            self._app = None

    def send(self, tokens: List[str], title: str, body: str) -> Tuple[int, int]:
        """Send one notification to every token.

        Returns:
            Tuple of (success_count, failure_count)
        """
        if not tokens:
            return (0, 0)

        if not self._app:
            logger.debug("Push notifications not configured, skipping")
            return (0, 0)

        success_count = 0
        failure_count = 0
        for start in range(0, len(tokens), MAX_TOKENS_PER_MESSAGE):
            batch = tokens[start:start + MAX_TOKENS_PER_MESSAGE]
            message = messaging.MulticastMessage(
                tokens=batch,
                notification=messaging.Notification(title=title, body=body),
            )
            response = messaging.send_each_for_multicast(message, app=self._app)
            success_count += response.success_count
            failure_count += response.failure_count

        logger.info(f"Sent {success_count} push notifications; {failure_count} failed")
        return (success_count, failure_count)


def notify_user(user_id: int, title: str, body: str) -> Tuple[int, int]:
    """Push to every device the user has registered.

    Runs outside the request (background task or scheduler thread), so it
    opens its own session. Failures are logged and never raised.
    """
    try:
        with Session(database.engine) as session:
            tokens = list_device_tokens(session, user_id)
        if not tokens:
            logger.info(f"No device tokens for user {user_id}; skipping notification")
            return (0, 0)
        return push_notifier.send(tokens, title, body)
    except Exception as e:
        logger.error(f"Error sending push notification to user {user_id}: {e}")
        return (0, 0)


# Global instance
push_notifier = PushNotifier()
