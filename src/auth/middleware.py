from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request

from ..routes import RouteMatcher, is_in_scope, public_routes
from .dependencies import ClerkSessionGuard


class ClerkAuthMiddleware(BaseHTTPMiddleware):
    """Requires a Clerk session on every in-scope route that is not public."""

    def __init__(self, app, guard: ClerkSessionGuard = None, public: RouteMatcher = public_routes):
        super().__init__(app)
        self.guard = guard or ClerkSessionGuard()
        self.public = public

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if is_in_scope(path) and not self.public.matches(path):
            response = await self.guard.protect(request)
            if response is not None:
                return response
        return await call_next(request)
