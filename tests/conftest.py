"""Shared test fixtures for the Fortune API."""

import base64
import logging
from collections.abc import AsyncIterator, Callable, Iterator
from datetime import UTC, datetime, timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fortune.core.app import create_app
from fortune.core.logging import HANDLER_NAME, ROOT_LOGGER
from fortune.core.settings import FortuneSettings
from fortune.crypto.bearer_token import BearerTokenAuthority, new_signing_key
from fortune.db.base import BaseEntity
from fortune.db.engine import get_session

SIGNING_KEY = new_signing_key()
PUBLIC_HOST = "fortune.example.com"


@pytest.fixture(autouse=True)
def _set_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set environment variables for test settings."""
    monkeypatch.setenv("FORTUNE_JWT_SIGNING_KEY", SIGNING_KEY)
    monkeypatch.setenv("FORTUNE_PUBLIC_HOST", PUBLIC_HOST)
    monkeypatch.setenv("FORTUNE_DATABASE_URL", "sqlite+aiosqlite://")
    monkeypatch.delenv("FORTUNE_SSL_KEY", raising=False)
    monkeypatch.delenv("FORTUNE_SSL_CERTS", raising=False)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop handlers that configure_logging attached during a test."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def authority() -> BearerTokenAuthority:
    """Token authority sharing the key the test app is configured with."""
    return BearerTokenAuthority(SIGNING_KEY, PUBLIC_HOST)


@pytest.fixture
async def db_session() -> AsyncIterator[AsyncSession]:
    """Create an in-memory SQLite async session for tests."""
    engine = create_async_engine("sqlite+aiosqlite://", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(BaseEntity.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Create an httpx test client with DB session override."""
    app = create_app(FortuneSettings())

    async def _override_session() -> AsyncIterator[AsyncSession]:
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _b64(text: str) -> str:
    return base64.b64encode(text.encode()).decode()


class PemMaterial:
    """A freshly generated key and self-signed certificate."""

    def __init__(self, common_name: str) -> None:
        self.key = ec.generate_private_key(ec.SECP256R1())
        name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
        now = datetime.now(UTC)
        self.certificate = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(self.key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now - timedelta(minutes=1))
            .not_valid_after(now + timedelta(days=1))
            .add_extension(x509.BasicConstraints(ca=True, path_length=None), True)
            .sign(self.key, hashes.SHA256())
        )

    @property
    def key_pem(self) -> str:
        return self.key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode()

    @property
    def cert_pem(self) -> str:
        return self.certificate.public_bytes(serialization.Encoding.PEM).decode()

    @property
    def key_b64(self) -> str:
        return _b64(self.key_pem)

    @property
    def cert_b64(self) -> str:
        return _b64(self.cert_pem)


@pytest.fixture
def make_pem() -> Callable[[str], PemMaterial]:
    """Factory for self-signed key and certificate pairs."""
    return PemMaterial


@pytest.fixture
def b64() -> Callable[[str], str]:
    """Base64-encode text the way configuration carries PEM bundles."""
    return _b64
