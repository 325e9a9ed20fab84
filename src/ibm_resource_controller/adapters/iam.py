"""Bearer credential providers implemented as ``httpx.Auth`` flows."""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from ibm_resource_controller.common.errors import AuthenticationError
from ibm_resource_controller.config.resource_controller import (
    DEFAULT_IAM_URL,
    AuthSettings,
    AuthType,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

log = getLogger(__name__)

IAM_TOKEN_PATH = "/identity/token"
IAM_APIKEY_GRANT_TYPE = "urn:ibm:params:oauth:grant-type:apikey"
# Tokens are refreshed once this fraction of their lifetime has elapsed.
REFRESH_WINDOW = 0.8


class IamTokenResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    expiration: int


class NoAuthAuthenticator(httpx.Auth):
    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        yield request


class BearerTokenAuthenticator(httpx.Auth):
    """Attach a caller-managed bearer token to every request."""

    def __init__(self, bearer_token: str) -> None:
        if not bearer_token.strip():
            raise ValueError("bearer_token must not be blank")
        self._token = bearer_token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request


class IamAuthenticator(httpx.Auth):
    """Exchange an IBM Cloud API key for an IAM access token and keep it fresh.

    The token request is issued from inside the auth flow, so it travels through
    the same transport as the API call that needed it.
    """

    requires_response_body = True

    def __init__(
        self,
        apikey: str,
        *,
        url: str = DEFAULT_IAM_URL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not apikey.strip():
            raise ValueError("apikey must not be blank")
        self._apikey = apikey
        self._token_url = url.rstrip("/") + IAM_TOKEN_PATH
        self._clock = clock
        self._access_token: str | None = None
        self._refresh_at = 0.0

    @property
    def token_url(self) -> str:
        return self._token_url

    def needs_refresh(self) -> bool:
        return self._access_token is None or self._clock() >= self._refresh_at

    def build_token_request(self) -> httpx.Request:
        return httpx.Request(
            "POST",
            self._token_url,
            data={"grant_type": IAM_APIKEY_GRANT_TYPE, "apikey": self._apikey},
            headers={"Accept": "application/json"},
        )

    def update_token(self, response: httpx.Response) -> None:
        if not response.is_success:
            raise AuthenticationError(
                f"IAM token request failed with status {response.status_code}",
                status=response.status_code,
            )
        try:
            token = IamTokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise AuthenticationError("Unexpected IAM token response payload") from exc

        self._access_token = token.access_token
        self._refresh_at = token.expiration - token.expires_in * (1.0 - REFRESH_WINDOW)
        log.debug("Obtained IAM access token, refresh scheduled at %s", self._refresh_at)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self.needs_refresh():
            response = yield self.build_token_request()
            self.update_token(response)
        request.headers["Authorization"] = f"Bearer {self._access_token}"
        yield request


def build_authenticator(settings: AuthSettings) -> httpx.Auth:
    if settings.auth_type is AuthType.IAM:
        if settings.apikey is None:
            raise ValueError("IAM authentication requires an apikey")
        return IamAuthenticator(settings.apikey, url=settings.auth_url)
    if settings.auth_type is AuthType.BEARER_TOKEN:
        if settings.bearer_token is None:
            raise ValueError("Bearer token authentication requires a bearer_token")
        return BearerTokenAuthenticator(settings.bearer_token)
    return NoAuthAuthenticator()
