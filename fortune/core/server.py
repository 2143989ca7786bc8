"""Process entry point: choose a TLS or plaintext listener and run uvicorn."""

import logging
import os
import tempfile
from pathlib import Path
from typing import NamedTuple

import uvicorn

from fortune.core.app import create_app
from fortune.core.logging import configure_logging
from fortune.core.settings import FortuneSettings
from fortune.crypto.credentials import load_server_identity
from fortune.crypto.types import TlsIdentity

logger = logging.getLogger(__name__)

KEY_FILE_MODE = 0o600


class Listener(NamedTuple):
    """Where and how the service accepts connections."""

    scheme: str
    host: str
    port: int
    identity: TlsIdentity | None = None

    @property
    def url(self) -> str:
        host = "localhost" if self.host in ("", "0.0.0.0") else self.host
        return f"{self.scheme}://{host}:{self.port}"


def plan_listener(settings: FortuneSettings) -> Listener:
    """Pick HTTPS when a usable identity is configured, otherwise HTTP."""
    identity = load_server_identity(settings.ssl_key, settings.ssl_certs)
    if identity is not None and identity.can_terminate_tls:
        return Listener("https", settings.host, settings.https_port, identity)
    return Listener("http", settings.host, settings.http_port)


def write_identity(identity: TlsIdentity, directory: Path) -> tuple[Path, Path]:
    """Write the identity as PEM files uvicorn can load. Returns (key, chain)."""
    key_path = directory / "tls.key"
    chain_path = directory / "tls.crt"
    fd = os.open(key_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, KEY_FILE_MODE)
    with os.fdopen(fd, "w") as key_file:
        key_file.write(identity.private_key_pem())
    chain_path.write_text(identity.certificate_chain_pem())
    return key_path, chain_path


def serve(settings: FortuneSettings | None = None) -> None:
    """Run the Fortune API until interrupted."""
    settings = settings or FortuneSettings()
    configure_logging(settings.log_level)
    app = create_app(settings)
    listener = plan_listener(settings)
    log_level = settings.log_level.lower()

    logger.info("Fortune API listening on %s", listener.url)
    if listener.identity is None:
        uvicorn.run(app, host=listener.host, port=listener.port, log_level=log_level)
        return

    with tempfile.TemporaryDirectory(prefix="fortune-tls-") as tmp:
        key_path, chain_path = write_identity(listener.identity, Path(tmp))
        uvicorn.run(
            app,
            host=listener.host,
            port=listener.port,
            log_level=log_level,
            ssl_keyfile=str(key_path),
            ssl_certfile=str(chain_path),
        )


def main() -> None:
    """Console entry point for ``fortune-api``."""
    serve()
    logger.info("Shutdown complete")
