"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

HTTP_PORT_DEFAULT = 80
HTTPS_PORT_DEFAULT = 443
CLIENT_TIMEOUT_MS_DEFAULT = 10_000


class FortuneSettings(BaseSettings):
    """Fortune API service settings."""

    model_config = SettingsConfigDict(env_prefix="FORTUNE_")

    log_level: str = "INFO"
    database_url: str = "sqlite+aiosqlite:////fortune-data/fortune-api.db"
    host: str = "0.0.0.0"
    http_port: int = HTTP_PORT_DEFAULT
    https_port: int = HTTPS_PORT_DEFAULT
    ssl_key: str = ""
    ssl_certs: str = ""
    jwt_signing_key: str = ""
    public_host: str = "localhost"


class ClientSettings(BaseSettings):
    """Fortune API client settings. Timeouts are in milliseconds."""

    model_config = SettingsConfigDict(env_prefix="FORTUNE_")

    url: str = "http://localhost"
    connect_timeout: int = CLIENT_TIMEOUT_MS_DEFAULT
    read_timeout: int = CLIENT_TIMEOUT_MS_DEFAULT
    write_timeout: int = CLIENT_TIMEOUT_MS_DEFAULT
    ssl_certs: str = ""
