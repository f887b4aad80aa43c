import logging
from typing import Any, Dict, List, Optional

import httpx
from jose import jwt
from jose.exceptions import JWTError, ExpiredSignatureError

from ..config import settings
from .exceptions import ClerkAPIError, SessionVerificationError

logger = logging.getLogger(__name__)


class ClerkClient:
    """
    Thin async client for the parts of Clerk this service talks to:
    the Backend API (user metadata) and the frontend JWKS (session tokens).
    """

    def __init__(
        self,
        domain: str = settings.clerk_domain,
        secret_key: Optional[str] = settings.clerk_secret_key,
        api_url: str = settings.clerk_api_url,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.secret_key = secret_key
        self.issuer = f"https://{domain}"
        self.jwks_url = f"https://{domain}/.well-known/jwks.json"
        self.timeout = timeout
        self.transport = transport
        self._jwks_cache: Optional[List[Dict[str, Any]]] = None

    async def update_user_metadata(
        self,
        user_id: str,
        public_metadata: Optional[Dict[str, Any]] = None,
        private_metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Merges metadata into a Clerk user and returns the updated user."""
        if not self.secret_key:
            raise ClerkAPIError("CLERK_SECRET_KEY is not configured")

        body: Dict[str, Any] = {}
        if public_metadata is not None:
            body["public_metadata"] = public_metadata
        if private_metadata is not None:
            body["private_metadata"] = private_metadata

        url = f"{self.api_url}/users/{user_id}/metadata"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                resp = await client.patch(
                    url,
                    json=body,
                    headers={"Authorization": f"Bearer {self.secret_key}"},
                )
                resp.raise_for_status()
            except httpx.RequestError as exc:
                raise ClerkAPIError(f"Could not connect to Clerk API: {exc}")
            except httpx.HTTPStatusError as exc:
                raise ClerkAPIError(
                    f"Error updating metadata for {user_id}: {exc.response.text}",
                    status_code=exc.response.status_code,
                )

        logger.info(f"Updated Clerk metadata for user {user_id}")
        return resp.json()

    async def get_public_keys(self, force_refresh: bool = False) -> List[Dict[str, Any]]:
        """Retrieves and caches Clerk's JWKS public keys."""
        if self._jwks_cache and not force_refresh:
            return self._jwks_cache

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                resp = await client.get(self.jwks_url)
                resp.raise_for_status()
            except httpx.RequestError as exc:
                raise ClerkAPIError(f"Could not connect to Clerk JWKS endpoint: {exc}")
            except httpx.HTTPStatusError as exc:
                raise ClerkAPIError(
                    f"Error fetching Clerk JWKS: {exc.response.text}",
                    status_code=exc.response.status_code,
                )

        self._jwks_cache = resp.json()["keys"]
        return self._jwks_cache

    async def verify_session_token(self, token: str) -> Dict[str, Any]:
        """
        Decodes and verifies a Clerk session JWT, returning its claims.
        """
        try:
            kid = jwt.get_unverified_header(token).get("kid")
        except JWTError as e:
            raise SessionVerificationError(f"Invalid token: {e}")
        if not kid:
            raise SessionVerificationError("Invalid token header")

        rsa_key = self._find_key(await self.get_public_keys(), kid)
        if not rsa_key:
            # Clerk rotated its signing keys since the cache was filled.
            rsa_key = self._find_key(await self.get_public_keys(force_refresh=True), kid)
        if not rsa_key:
            raise SessionVerificationError("Invalid token header")

        try:
            payload = jwt.decode(
                token, rsa_key, algorithms=["RS256"], issuer=self.issuer,
                options={"verify_aud": False},
            )
        except ExpiredSignatureError:
            raise SessionVerificationError("Token has expired")
        except JWTError as e:
            raise SessionVerificationError(f"Invalid token: {e}")

        if not payload.get("sub"):
            raise SessionVerificationError("Invalid token: no sub claim")

        return payload

    @staticmethod
    def _find_key(jwks: List[Dict[str, Any]], kid: str) -> Dict[str, Any]:
        for key in jwks:
            if key.get("kid") == kid:
                return {
                    "kty": key["kty"],
                    "kid": kid,
                    "use": key.get("use", "sig"),
                    "n": key["n"],
                    "e": key["e"],
                }
        return {}


clerk_client = ClerkClient()
