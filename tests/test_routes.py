import pytest

from src.routes import (PUBLIC_ROUTES, WEBHOOK_PATH, RouteMatcher, compile_route_pattern,
                        is_in_scope, public_routes)


@pytest.mark.parametrize("path", ["/sign-in", "/sign-in/factor-one", "/sign-in-help", "/sign-up/verify"])
def test_trailing_wildcard_matches_prefix_followed_by_anything(path):
    assert public_routes.matches(path)


@pytest.mark.parametrize("path", ["/api/webhooks/clerk/", "/api/webhooks/clerkx", "/api/webhooks", "/health/db"])
def test_literal_pattern_matches_exact_path_only(path):
    assert not public_routes.matches(path)


@pytest.mark.parametrize("path", ["/", "/dashboard", "/api/users/me", "/signin", "/x/sign-in"])
def test_other_paths_are_protected(path):
    assert not public_routes.matches(path)


def test_webhook_path_is_public():
    assert WEBHOOK_PATH == "/api/webhooks/clerk"
    assert public_routes.match(WEBHOOK_PATH) == WEBHOOK_PATH


def test_first_matching_pattern_wins():
    matcher = RouteMatcher(["/a(.*)", "/ab(.*)"])
    assert matcher.match("/abc") == "/a(.*)"
    assert matcher.patterns == ["/a(.*)", "/ab(.*)"]


def test_pattern_characters_are_literal():
    matcher = RouteMatcher(["/files/v1.0(.*)"])
    assert matcher.matches("/files/v1.0/readme")
    assert not matcher.matches("/files/v1x0/readme")


@pytest.mark.parametrize("pattern", ["sign-in(.*)", "/a(.*)/b", "/a/*", "/a(.*)(.*)"])
def test_invalid_patterns_are_rejected(pattern):
    with pytest.raises(ValueError):
        compile_route_pattern(pattern)


def test_public_routes_table_is_ordered():
    assert public_routes.patterns == PUBLIC_ROUTES
    assert PUBLIC_ROUTES[0] == WEBHOOK_PATH


@pytest.mark.parametrize("path", ["/", "/dashboard", "/sign-in", "/api", "/api/users/me", "/api/export.csv"])
def test_in_scope_paths(path):
    assert is_in_scope(path)


@pytest.mark.parametrize("path", ["/favicon.ico", "/assets/app.js", "/static/logo", "/docs", "/docs/oauth2-redirect", "/redoc", "/openapi.json"])
def test_static_and_internal_paths_are_out_of_scope(path):
    assert not is_in_scope(path)
