"""HTTP client for the Fortune API."""

import ssl

import httpx

from fortune.core.settings import ClientSettings
from fortune.crypto.credentials import load_client_trust

FORTUNE_PATH = "/api/v1/fortune"
FORTUNE_ALL_PATH = "/api/v1/fortune/all"
STATUS_SUCCESS = "success"


class FortuneApiError(Exception):
    """Raised when the API answers with an error or an unreadable body."""


class FortuneApiClient:
    """Calls the Fortune API over an ``httpx.Client``.

    Listing and adding fortunes need a bearer token; set one at construction
    or later with :meth:`update_bearer_token`.
    """

    def __init__(self, http: httpx.Client, bearer_token: str | None = None) -> None:
        self._http = http
        self._bearer_token = bearer_token

    def update_bearer_token(self, bearer_token: str | None) -> None:
        """Set or replace the token used for authenticated calls."""
        self._bearer_token = bearer_token

    def get_fortune(self) -> str:
        """Return a random fortune."""
        body = self._handle(self._http.get(FORTUNE_PATH))
        return body["data"]["fortune"]

    def get_all_fortunes(self) -> list[str]:
        """Return every fortune. Requires a bearer token."""
        body = self._handle(self._http.get(FORTUNE_ALL_PATH, headers=self._auth()))
        return list(body["data"] or [])

    def add_fortune(self, fortune: str) -> bool:
        """Add a fortune. Requires a bearer token."""
        body = self._handle(
            self._http.post(
                FORTUNE_PATH, json={"fortune": fortune}, headers=self._auth()
            )
        )
        return body.get("status") == STATUS_SUCCESS

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "FortuneApiClient":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def _auth(self) -> dict[str, str]:
        if not self._bearer_token:
            return {}
        return {"Authorization": self._bearer_token}

    @staticmethod
    def _handle(response: httpx.Response) -> dict:
        """Return the decoded envelope, raising FortuneApiError on failure."""
        try:
            body = response.json() if response.content else None
        except ValueError as exc:
            raise FortuneApiError(
                f"Unreadable response ({response.status_code})"
            ) from exc

        if response.is_success and isinstance(body, dict):
            return body
        if not isinstance(body, dict):
            raise FortuneApiError(
                f"An unknown error has occurred ({response.status_code})"
            )
        code = body.get("code", response.status_code)
        raise FortuneApiError(f"{body.get('message')} ({code})")


def _timeout(settings: ClientSettings) -> httpx.Timeout:
    return httpx.Timeout(
        connect=settings.connect_timeout / 1000,
        read=settings.read_timeout / 1000,
        write=settings.write_timeout / 1000,
        pool=None,
    )


def new_fortune_api_client(
    settings: ClientSettings, transport: httpx.BaseTransport | None = None
) -> FortuneApiClient:
    """Build a client from settings, trusting ``ssl_certs`` when given."""
    verify: ssl.SSLContext | bool = True
    trust = load_client_trust(settings.ssl_certs)
    if trust is not None:
        verify = trust.to_ssl_context()

    http = httpx.Client(
        base_url=settings.url,
        timeout=_timeout(settings),
        verify=verify,
        transport=transport,
    )
    return FortuneApiClient(http)
