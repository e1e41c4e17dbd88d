from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.refresh_credential_repository import RefreshCredentialRepository
from src.adapter.repositories.session_repository import SessionRepository
from src.adapter.repositories.trusted_device_repository import TrustedDeviceRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.refresh_credentials = RefreshCredentialRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.trusted_devices = TrustedDeviceRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
