import asyncio
import os
import tempfile

os.environ.setdefault("APP_SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_CORS_ORIGINS", '["http://testserver"]')
os.environ.setdefault("APP_UPLOAD_DIR", tempfile.mkdtemp(prefix="hopenest-uploads-"))
os.environ.setdefault("APP_LOG_DIR", tempfile.mkdtemp(prefix="hopenest-logs-"))

import pytest
from email.message import EmailMessage
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.api.auth.service import create_user_token
from app.api.users import service as user_service
from app.api.users.models import SigninProviders, UserRoles
from app.config import settings
from app.core.email.dependencies import get_mailer
from app.core.email.email import Mailer, SandboxTransport
from app.core.rate_limit import limiter
from app.db.base import AbstractSQLModel
from app.db.core import get_session
from doth import application


class FailingTransport:
    def deliver(self, message: EmailMessage) -> None:
        raise ConnectionError("smtp server unreachable")

    def verify(self) -> None:
        raise ConnectionError("smtp server unreachable")

    def close(self) -> None:
        pass


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(AbstractSQLModel.metadata.create_all)

    asyncio.run(create_tables())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )


@pytest.fixture
def run_db(session_factory):
    """Run ``fn(session)`` to completion outside of a request."""

    def run(fn):
        async def inner():
            async with session_factory() as session:
                return await fn(session)

        return asyncio.run(inner())

    return run


@pytest.fixture
def mailer():
    return Mailer(
        transport=SandboxTransport(),
        sender="no-reply@hopenest.test",
        templates_dir=settings.TEMPLATES_DIR,
    )


@pytest.fixture
def failing_mailer():
    return Mailer(
        transport=FailingTransport(),
        sender="no-reply@hopenest.test",
        templates_dir=settings.TEMPLATES_DIR,
    )


@pytest.fixture
def client(session_factory, mailer):
    async def override_session():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_session] = override_session
    application.dependency_overrides[get_mailer] = lambda: mailer
    yield TestClient(application)
    application.dependency_overrides.clear()


@pytest.fixture
def make_user(run_db):
    """Create a user directly and return ``(user, auth headers)``."""

    def make(
        email="jane@example.com",
        name="Jane",
        password="secret123",
        role=UserRoles.user,
        **kwargs,
    ):
        user = run_db(
            lambda session: user_service.create_user(
                session, name=name, email=email, password=password, role=role, **kwargs
            )
        )
        token = create_user_token(user).token
        return user, {"Authorization": f"Bearer {token}"}

    return make


@pytest.fixture
def user_headers(make_user):
    return make_user()[1]


@pytest.fixture
def admin_headers(make_user):
    return make_user(email="admin@example.com", name="Admin", role=UserRoles.admin)[1]


@pytest.fixture
def google_user(make_user):
    return make_user(
        email="social@example.com",
        name="Social",
        password=None,
        provider=SigninProviders.google,
        google_id="google-123",
    )


@pytest.fixture
def use_failing_mailer(client, failing_mailer):
    application.dependency_overrides[get_mailer] = lambda: failing_mailer
    return failing_mailer


@pytest.fixture
def rate_limited(monkeypatch):
    """Switch the limiter on with empty counters for one test."""
    monkeypatch.setattr(limiter, "enabled", True)
    limiter.reset()
    yield limiter
    limiter.reset()
