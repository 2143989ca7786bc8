"""Type definitions for bearer tokens and TLS credential material."""

import ssl
from enum import StrEnum

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes
from pydantic import BaseModel, ConfigDict


class ConfigurationError(Exception):
    """Raised at startup when key material cannot be used."""


class ValidationFailure(StrEnum):
    """Reason a bearer token was rejected."""

    EMPTY_TOKEN = "empty_token"
    MISSING_SCHEME_PREFIX = "missing_scheme_prefix"
    SIGNATURE_INVALID = "signature_invalid"
    EXPIRED = "expired"
    ISSUER_MISMATCH = "issuer_mismatch"
    AUDIENCE_MISMATCH = "audience_mismatch"
    MALFORMED_ENVELOPE = "malformed_envelope"


class TokenClaims(BaseModel):
    """Claims carried by a bearer token."""

    model_config = ConfigDict(frozen=True)

    iss: str
    aud: str
    iat: int
    exp: int


def _chain_pem(chain: tuple[x509.Certificate, ...]) -> str:
    return "".join(
        cert.public_bytes(serialization.Encoding.PEM).decode() for cert in chain
    )


class TrustBundle(BaseModel):
    """Certificate chain a client trusts when connecting to the API."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    certificate_chain: tuple[x509.Certificate, ...] = ()

    def certificate_chain_pem(self) -> str:
        """Serialize the chain as concatenated PEM blocks."""
        return _chain_pem(self.certificate_chain)

    def to_ssl_context(self) -> ssl.SSLContext:
        """Build a client SSL context that trusts only this chain."""
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        if self.certificate_chain:
            context.load_verify_locations(cadata=self.certificate_chain_pem())
        return context


class TlsIdentity(BaseModel):
    """Private key and certificate chain a server presents for TLS."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    private_key: PrivateKeyTypes | None = None
    certificate_chain: tuple[x509.Certificate, ...] = ()

    @property
    def can_terminate_tls(self) -> bool:
        """True when both a key and at least one certificate are present."""
        return self.private_key is not None and bool(self.certificate_chain)

    def private_key_pem(self) -> str:
        """Serialize the private key as unencrypted PKCS#8 PEM."""
        if self.private_key is None:
            raise ValueError("identity has no private key")
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode()

    def certificate_chain_pem(self) -> str:
        """Serialize the chain as concatenated PEM blocks, leaf first."""
        return _chain_pem(self.certificate_chain)
