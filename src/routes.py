"""
Route classification shared by the webhook router and the access middleware.

Patterns are literal paths, optionally ending in the wildcard ``(.*)``,
which matches the prefix followed by anything (including nothing):

    "/api/webhooks/clerk"   only that exact path
    "/sign-in(.*)"          "/sign-in", "/sign-in/factor-one", "/sign-in-help"
"""
import re
from typing import Iterable, List, Pattern

WILDCARD = "(.*)"

API_PREFIX = "/api"
WEBHOOK_PATH = f"{API_PREFIX}/webhooks/clerk"

PUBLIC_ROUTES = [
    WEBHOOK_PATH,
    "/sign-in(.*)",
    "/sign-up(.*)",
    "/health",
]

# Paths the access middleware never looks at.
INTERNAL_PREFIXES = ("/static", "/docs", "/redoc", "/openapi.json")
STATIC_ASSET_RE = re.compile(r"/[^/]+\.\w+$")


def compile_route_pattern(pattern: str) -> Pattern[str]:
    if not pattern.startswith("/"):
        raise ValueError(f"Route pattern must start with '/': {pattern!r}")

    prefix = pattern
    wildcard = pattern.endswith(WILDCARD)
    if wildcard:
        prefix = pattern[: -len(WILDCARD)]
    if WILDCARD in prefix or "*" in prefix:
        raise ValueError(f"Wildcard is only allowed at the end of a pattern: {pattern!r}")

    return re.compile(re.escape(prefix) + (".*" if wildcard else "") + r"\Z")


class RouteMatcher:
    """Ordered set of route patterns; the first pattern that matches wins."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns: List[str] = list(patterns)
        self._compiled = [compile_route_pattern(p) for p in self.patterns]

    def match(self, path: str):
        for pattern, regex in zip(self.patterns, self._compiled):
            if regex.match(path):
                return pattern
        return None

    def matches(self, path: str) -> bool:
        return self.match(path) is not None


def is_in_scope(path: str) -> bool:
    """Whether the access middleware should run for this path at all."""
    if path == "/" or path == API_PREFIX or path.startswith(API_PREFIX + "/"):
        return True
    for prefix in INTERNAL_PREFIXES:
        if path == prefix or path.startswith(prefix + "/"):
            return False
    return not STATIC_ASSET_RE.search(path)


public_routes = RouteMatcher(PUBLIC_ROUTES)
