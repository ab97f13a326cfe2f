"""Dependency injection container."""
from dependency_injector import containers, providers

from src.repositories.user_repository import UserRepository
from src.repositories.session_repository import SessionRepository
from src.repositories.recovery_token_repository import RecoveryTokenRepository

from src.services.activity_logger import ActivityLogger
from src.services.authorization_service import AuthorizationService
from src.services.email_service import EmailService
from src.services.recovery_service import RecoveryService
from src.services.recovery_token_service import RecoveryTokenConfig, RecoveryTokenService

from src.events.domain import DomainEventDispatcher
from src.handlers.recovery_handler import RecoveryEmailHandler


def build_recovery_url_base(webserver_url: str, recovery_page_path: str) -> str:
    """Join the public site URL and the recovery page path."""
    return f"{webserver_url.rstrip('/')}/{recovery_page_path.strip('/')}"


class Container(containers.DeclarativeContainer):
    """
    Application dependency injection container.

    Usage:
        container = Container()
        container.config.from_dict(app.config)
        container.db_session.override(db.session)

        recovery_service = container.recovery_service()
    """

    # Configuration (loaded from the Flask config in create_app)
    config = providers.Configuration()

    # Database session - must be overridden with actual db.session
    db_session = providers.Dependency()

    # ==================
    # Repositories
    # ==================

    user_repository = providers.Factory(
        UserRepository,
        session=db_session
    )

    session_repository = providers.Factory(
        SessionRepository,
        session=db_session
    )

    recovery_token_repository = providers.Factory(
        RecoveryTokenRepository,
        session=db_session
    )

    # ==================
    # Services
    # ==================

    recovery_token_config = providers.Singleton(
        RecoveryTokenConfig.from_mapping,
        config,
    )

    authorization_service = providers.Singleton(
        AuthorizationService
    )

    recovery_token_service = providers.Factory(
        RecoveryTokenService,
        token_repository=recovery_token_repository,
        config=recovery_token_config
    )

    recovery_service = providers.Factory(
        RecoveryService,
        user_repository=user_repository,
        token_service=recovery_token_service,
        authorization_service=authorization_service
    )

    activity_logger = providers.Singleton(
        ActivityLogger
    )

    email_service = providers.Singleton(
        EmailService,
        smtp_host=config.SMTP_HOST,
        smtp_port=config.SMTP_PORT.as_(int),
        from_email=config.EMAIL_FROM,
        smtp_user=config.SMTP_USER,
        smtp_password=config.SMTP_PASSWORD,
        use_tls=config.SMTP_USE_TLS,
        from_name=config.EMAIL_FROM_NAME,
        template_dir=config.EMAIL_TEMPLATE_DIR,
    )

    # ==================
    # Event System
    # ==================

    recovery_email_handler = providers.Singleton(
        RecoveryEmailHandler,
        email_service=email_service,
        activity_logger=activity_logger,
        recovery_url_base=providers.Callable(
            build_recovery_url_base,
            config.WEBSERVER_URL,
            config.RECOVERY_PAGE_PATH,
        ),
        app_name=config.APP_NAME,
        expires_in_minutes=recovery_token_config.provided.expiration_minutes,
    )

    event_dispatcher = providers.Singleton(
        DomainEventDispatcher
    )

    # Note: Handlers are registered in app.py after config is loaded
