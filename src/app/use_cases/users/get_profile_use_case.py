from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import AuthErrorCode, auth_error
from src.domain.result import Result, Return
from .dtos import UserProfileResponse


class GetProfileUseCase:
    """Loads the profile of the authenticated user."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[UserProfileResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(auth_error(AuthErrorCode.NOT_FOUND, "User not found"))

            return Return.ok(
                UserProfileResponse(
                    id=str(user.id),
                    email=user.email,
                    phone_number=user.phone_number,
                    full_name=user.full_name,
                    role=user.role.value,
                    status=user.status.value,
                    email_verified=user.email_verified,
                    phone_verified=user.phone_verified,
                    has_password=user.has_password,
                    created_at=user.created_at,
                    last_login_at=user.last_login_at,
                )
            )
