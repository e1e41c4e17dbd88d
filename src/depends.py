from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.challenge_store import InMemoryChallengeStore, RedisChallengeStore
from src.adapter.services.google_identity_verifier import GoogleIdentityVerifier
from src.adapter.services.notification_gateway import LoggingNotificationGateway
from src.adapter.services.otp_provider import StubOtpProvider, TwilioVerifyOtpProvider
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.challenge_store import ChallengeStore
from src.app.services.identity_verifier import FederatedIdentityVerifier
from src.app.services.notification_gateway import NotificationGateway
from src.app.services.otp_provider import ExternalOtpProvider
from src.app.services.token_issuer import AccessTokenClaims, TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    FederatedLoginUseCase,
    LoginUseCase,
    RefreshTokenUseCase,
    RegisterUseCase,
)
from src.app.use_cases.otp import EmailOtpLoginUseCase, PhoneOtpLoginUseCase
from src.domain.errors import ConfigurationError


def enable_sqlite_savepoints(async_engine: AsyncEngine) -> None:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest inside the unit of work on SQLite."""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)
if engine.dialect.name == "sqlite":
    enable_sqlite_savepoints(engine)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


@dataclass
class ServiceContainer:
    """Process-wide collaborators, built once in create_app and kept on app.state."""

    config: type
    token_issuer: TokenIssuer
    challenge_store: ChallengeStore
    notifications: NotificationGateway
    otp_provider: ExternalOtpProvider
    identity_verifier: Optional[FederatedIdentityVerifier]
    code_generator: Optional[Callable[[int], str]] = None


def build_services(config) -> ServiceContainer:
    """
    Build the collaborators from configuration.

    Raises:
        ConfigurationError: missing signing key, unknown backend or
            missing provider credentials
    """
    token_issuer = TokenIssuer(
        secret=config.JWT_SECRET,
        algorithm=config.JWT_ALGORITHM,
        issuer=config.JWT_ISSUER,
        expire_minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES,
    )

    if config.CACHE_BACKEND == "memory":
        challenge_store = InMemoryChallengeStore()
    elif config.CACHE_BACKEND == "redis":
        challenge_store = RedisChallengeStore(config.REDIS_URL)
    else:
        raise ConfigurationError(f"Unknown CACHE_BACKEND: {config.CACHE_BACKEND}")

    if config.OTP_PROVIDER == "stub":
        otp_provider = StubOtpProvider(config.STUB_OTP_CODE)
    elif config.OTP_PROVIDER == "twilio":
        if not (
            config.TWILIO_ACCOUNT_SID
            and config.TWILIO_AUTH_TOKEN
            and config.TWILIO_VERIFY_SERVICE_SID
        ):
            raise ConfigurationError("Twilio Verify credentials are not configured")
        otp_provider = TwilioVerifyOtpProvider(
            config.TWILIO_ACCOUNT_SID,
            config.TWILIO_AUTH_TOKEN,
            config.TWILIO_VERIFY_SERVICE_SID,
            timeout=config.EXTERNAL_CALL_TIMEOUT_SECONDS,
        )
    else:
        raise ConfigurationError(f"Unknown OTP_PROVIDER: {config.OTP_PROVIDER}")

    identity_verifier = (
        GoogleIdentityVerifier(config.GOOGLE_CLIENT_IDS) if config.GOOGLE_CLIENT_IDS else None
    )

    return ServiceContainer(
        config=config,
        token_issuer=token_issuer,
        challenge_store=challenge_store,
        notifications=LoggingNotificationGateway(),
        otp_provider=otp_provider,
        identity_verifier=identity_verifier,
    )


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_token_issuer(services: ServiceContainer = Depends(get_services)) -> TokenIssuer:
    return services.token_issuer


def get_register_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
    services: ServiceContainer = Depends(get_services),
) -> RegisterUseCase:
    return RegisterUseCase(
        uow, services.token_issuer, services.config.REFRESH_TOKEN_EXPIRE_DAYS
    )


def get_login_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
    services: ServiceContainer = Depends(get_services),
) -> LoginUseCase:
    return LoginUseCase(uow, services.token_issuer, services.config.REFRESH_TOKEN_EXPIRE_DAYS)


def get_refresh_token_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
    services: ServiceContainer = Depends(get_services),
) -> RefreshTokenUseCase:
    return RefreshTokenUseCase(
        uow, services.token_issuer, services.config.REFRESH_TOKEN_EXPIRE_DAYS
    )


def get_email_otp_login_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
    services: ServiceContainer = Depends(get_services),
) -> EmailOtpLoginUseCase:
    config = services.config
    return EmailOtpLoginUseCase(
        uow,
        services.token_issuer,
        services.challenge_store,
        services.notifications,
        code_length=config.OTP_LENGTH,
        expiration_minutes=config.OTP_EXPIRATION_MINUTES,
        max_attempts=config.OTP_MAX_ATTEMPTS,
        rate_limit_minutes=config.OTP_RATE_LIMIT_MINUTES,
        refresh_ttl_days=config.REFRESH_TOKEN_EXPIRE_DAYS,
        call_timeout_seconds=config.EXTERNAL_CALL_TIMEOUT_SECONDS,
        code_generator=services.code_generator,
    )


def get_phone_otp_login_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
    services: ServiceContainer = Depends(get_services),
) -> PhoneOtpLoginUseCase:
    config = services.config
    return PhoneOtpLoginUseCase(
        uow,
        services.token_issuer,
        services.challenge_store,
        services.otp_provider,
        pending_minutes=config.PHONE_OTP_PENDING_MINUTES,
        refresh_ttl_days=config.REFRESH_TOKEN_EXPIRE_DAYS,
        call_timeout_seconds=config.EXTERNAL_CALL_TIMEOUT_SECONDS,
    )


def get_federated_login_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
    services: ServiceContainer = Depends(get_services),
) -> FederatedLoginUseCase:
    return FederatedLoginUseCase(
        uow,
        services.token_issuer,
        services.identity_verifier,
        services.notifications,
        refresh_ttl_days=services.config.REFRESH_TOKEN_EXPIRE_DAYS,
        call_timeout_seconds=services.config.EXTERNAL_CALL_TIMEOUT_SECONDS,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> AccessTokenClaims:
    """
    Dependency to extract and verify the access token from the Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        AccessTokenClaims of the caller

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    claims = token_issuer.validate(credentials.credentials)

    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return claims


async def close_services(services: ServiceContainer) -> None:
    """Release network clients held by the collaborators."""
    for collaborator in (services.challenge_store, services.otp_provider):
        close = getattr(collaborator, "close", None)
        if close is not None:
            await close()
