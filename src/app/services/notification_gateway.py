from abc import ABC, abstractmethod


class NotificationGateway(ABC):
    """Outbound user notifications. Delivery mechanism is up to the adapter."""

    @abstractmethod
    async def send_email_otp(self, to_email: str, name: str, code: str) -> bool:
        """Deliver a login code. Returns False if delivery failed."""
        pass

    @abstractmethod
    async def send_welcome(self, to_email: str, name: str) -> bool:
        """Deliver a welcome message to a newly created account"""
        pass
