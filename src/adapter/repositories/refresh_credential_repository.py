from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.refresh_credential_repository import IRefreshCredentialRepository
from src.domain.entities import RefreshCredential


class RefreshCredentialRepository(IRefreshCredentialRepository):
    """RefreshCredential repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, credential: RefreshCredential) -> RefreshCredential:
        """Persist a newly issued credential"""
        self.session.add(credential)
        await self.session.flush()
        await self.session.refresh(credential)
        return credential

    async def get_by_token_hash(self, token_hash: str) -> Optional[RefreshCredential]:
        """Get credential by token hash"""
        stmt = select(RefreshCredential).where(RefreshCredential.token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def find_valid(
        self, token_hash: str, now: datetime
    ) -> Optional[RefreshCredential]:
        """Get credential by token hash if it is neither revoked nor expired"""
        stmt = select(RefreshCredential).where(
            RefreshCredential.token_hash == token_hash,
            RefreshCredential.revoked == False,
            RefreshCredential.expires_at > now,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def revoke_if_active(self, credential_id: UUID, now: datetime) -> bool:
        """
        Revoke a credential only if it is still unrevoked.

        The WHERE clause re-checks revoked under the row lock, so of two
        concurrent rotations of the same token exactly one sees rowcount 1.
        """
        stmt = (
            update(RefreshCredential)
            .where(
                RefreshCredential.id == credential_id,
                RefreshCredential.revoked == False,
            )
            .values(revoked=True, revoked_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def revoke_all_by_user_id(
        self, user_id: UUID, now: datetime, keep_id: Optional[UUID] = None
    ) -> int:
        """Revoke all active credentials for a user, except keep_id"""
        conditions = [
            RefreshCredential.user_id == user_id,
            RefreshCredential.revoked == False,
        ]
        if keep_id is not None:
            conditions.append(RefreshCredential.id != keep_id)
        stmt = (
            update(RefreshCredential)
            .where(*conditions)
            .values(revoked=True, revoked_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def revoke_by_ids(self, credential_ids: Iterable[UUID], now: datetime) -> int:
        """Revoke the given credentials"""
        ids = list(credential_ids)
        if not ids:
            return 0
        stmt = (
            update(RefreshCredential)
            .where(
                RefreshCredential.id.in_(ids),
                RefreshCredential.revoked == False,
            )
            .values(revoked=True, revoked_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def count_active_by_user_id(self, user_id: UUID, now: datetime) -> int:
        """Count active credentials for a user"""
        stmt = select(func.count()).select_from(RefreshCredential).where(
            RefreshCredential.user_id == user_id,
            RefreshCredential.revoked == False,
            RefreshCredential.expires_at > now,
        )
        result = await self.session.exec(stmt)
        return result.one()
