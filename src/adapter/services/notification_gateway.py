import logging

from src.app.services.contact import mask_email
from src.app.services.notification_gateway import NotificationGateway

logger = logging.getLogger(__name__)


class LoggingNotificationGateway(NotificationGateway):
    """
    Development gateway: writes notifications to the log instead of sending them.

    Login codes are only logged at DEBUG level.
    """

    async def send_email_otp(self, to_email: str, name: str, code: str) -> bool:
        logger.info(f"Login code for {mask_email(to_email)} queued")
        logger.debug(f"Login code for {to_email} ({name}): {code}")
        return True

    async def send_welcome(self, to_email: str, name: str) -> bool:
        logger.info(f"Welcome message for {mask_email(to_email)} queued")
        return True
