"""Smoke test for application startup."""


def test_app_imports() -> None:
    """Verify the app can be imported without errors."""
    from cubecraft.main import app

    assert app.title == "CubeCraft"


def test_routes_registered() -> None:
    from cubecraft.main import app

    paths = {route.path for route in app.routes}
    assert {"/health", "/ready", "/games", "/cubes", "/sessions"} <= paths
