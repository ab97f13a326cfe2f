"""Shared test fixtures."""
import os
import secrets
from datetime import datetime, timedelta
from uuid import uuid4

import sqlite3

import pytest
from sqlalchemy import event
from sqlalchemy.engine import Engine

os.environ["FLASK_ENV"] = "testing"


@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores foreign keys unless asked, Postgres always enforces them."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@pytest.fixture
def app():
    """Create application backed by in-memory SQLite."""
    from src.app import create_app
    from src.extensions import db

    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "RATELIMIT_ENABLED": False,
        "RATELIMIT_STORAGE_URI": "memory://",
        "WEBSERVER_URL": "http://localhost:3000",
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Database session bound to the test app."""
    from src.extensions import db

    return db.session


@pytest.fixture
def create_user(db_session):
    """Factory creating persisted users."""
    from src.models.user import User

    def _create_user(username=None, email=None, features=None):
        suffix = uuid4().hex[:10]
        user = User(
            username=username or f"user{suffix}",
            email=email or f"user{suffix}@example.com",
            features=list(features or []),
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _create_user


@pytest.fixture
def create_recovery_token(db_session):
    """Factory creating persisted recovery tokens."""
    from src.repositories.recovery_token_repository import RecoveryTokenRepository

    def _create_recovery_token(user, expires_in=timedelta(minutes=15)):
        return RecoveryTokenRepository(db_session).create(user.id, expires_in)

    return _create_recovery_token


@pytest.fixture
def create_session(db_session):
    """Factory creating active sessions, returns the cookie token."""
    from src.models.user_session import UserSession

    def _create_session(user, expires_at=None):
        session = UserSession(
            token=secrets.token_hex(48),
            user_id=user.id,
            expires_at=expires_at or datetime.utcnow() + timedelta(days=30),
        )
        db_session.add(session)
        db_session.commit()
        return session

    return _create_session


@pytest.fixture
def outbox(mocker):
    """Capture outgoing emails instead of talking to SMTP."""
    from src.services.email_service import EmailService, EmailResult

    return mocker.patch.object(
        EmailService, "send_email", return_value=EmailResult(success=True)
    )
