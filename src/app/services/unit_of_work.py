from abc import ABC, abstractmethod

from src.app.repositories.refresh_credential_repository import IRefreshCredentialRepository
from src.app.repositories.session_repository import ISessionRepository
from src.app.repositories.trusted_device_repository import ITrustedDeviceRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    refresh_credentials: IRefreshCredentialRepository
    sessions: ISessionRepository
    trusted_devices: ITrustedDeviceRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
