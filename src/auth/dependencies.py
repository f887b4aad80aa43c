import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from ..config import settings
from ..routes import API_PREFIX
from .clerk import ClerkClient, clerk_client
from .exceptions import ClerkAPIError, SessionVerificationError

logger = logging.getLogger(__name__)

SESSION_COOKIE = "__session"


def get_session_token(request: Request) -> Optional[str]:
    """Clerk sends the session JWT as a bearer token or in the __session cookie."""
    authorization = request.headers.get("authorization")
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token:
            return token.strip()
    return request.cookies.get(SESSION_COOKIE)


class ClerkSessionGuard:
    """
    Protects a request with the current Clerk session.
    ``protect`` returns None when the request may proceed, or the response
    that should be sent instead.
    """

    def __init__(self, client: ClerkClient = clerk_client, sign_in_url: Optional[str] = None):
        self.client = client
        self.sign_in_url = sign_in_url if sign_in_url is not None else settings.clerk_sign_in_url

    async def protect(self, request: Request) -> Optional[Response]:
        token = get_session_token(request)
        if not token:
            return self.unauthenticated(request)

        try:
            claims = await self.client.verify_session_token(token)
        except SessionVerificationError as e:
            logger.info(f"Rejected session for {request.url.path}: {e}")
            return self.unauthenticated(request)
        except ClerkAPIError as e:
            logger.error(f"Could not verify session for {request.url.path}: {e}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"error": "Authentication service unavailable"},
            )

        request.state.auth = claims
        return None

    def unauthenticated(self, request: Request) -> Response:
        path = request.url.path
        if not self.sign_in_url or path == API_PREFIX or path.startswith(API_PREFIX + "/"):
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"error": "Unauthorized"},
            )
        query = urlencode({"redirect_url": str(request.url)})
        return RedirectResponse(
            f"{self.sign_in_url}?{query}",
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        )
