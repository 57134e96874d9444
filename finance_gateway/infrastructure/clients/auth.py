"""Auth service HTTP client for resolving the caller's session"""

import httpx
from finance_gateway.domain.models import Principal
from finance_gateway.domain.exceptions import AuthServiceError, Unauthenticated
from finance_gateway.config import settings

FORWARDED_HEADERS = ("authorization", "cookie")


class AuthClient:
    """Client for the external session/auth service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.auth_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def resolve_principal(self, headers: dict[str, str]) -> Principal:
        """
        Resolve the authenticated user from the request's own credentials.

        Only the Authorization and Cookie headers are forwarded; identity is
        never taken from query or body fields.

        Raises:
            Unauthenticated: No credentials, or the auth service rejected them
            AuthServiceError: On timeout, 5xx, or invalid response
        """
        forwarded = {name: value for name, value in headers.items() if name.lower() in FORWARDED_HEADERS}
        if not forwarded:
            raise Unauthenticated("No session credentials")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/session", headers=forwarded)
                if response.status_code in (401, 403):
                    raise Unauthenticated(f"Session rejected: {response.status_code}")
                response.raise_for_status()
                user = response.json()["user"]

                return Principal(user_id=str(user["id"]), email=user.get("email"))

            except httpx.TimeoutException as e:
                raise AuthServiceError(f"Auth service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise AuthServiceError(f"Auth service error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise AuthServiceError(f"Auth service unreachable: {e.__class__.__name__}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise AuthServiceError(f"Invalid session payload from auth service: {e}") from e
