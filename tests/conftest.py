"""Shared fixtures for the authorization tests."""
import os
import sys
from pathlib import Path

import pytest
from aiohttp import web

# Ensure the project root is importable when running tests without installing
# the package.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Point navconfig at the project's env/.env file.
os.environ.setdefault("SITE_ROOT", str(PROJECT_ROOT))
os.environ.setdefault("ENV_TYPE", "file")

from authorized_persona import AuthorizedView, Persona, PolicyRegistry  # noqa: E402


FOUR_TIERS = {
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
}

STAFF_TIERS = {
    "trainee": "Trainee - limited access",
    "staff": "Staff - regular access",
    "admin": "Admin - full access",
}


@pytest.fixture
def user_class() -> type:
    """Persona with tiers one < two < three < four."""

    class User(Persona):
        def __init__(self, authorization_tier=None):
            self.authorization_tier = authorization_tier

        def __repr__(self) -> str:
            return f"<User {self.authorization_tier}>"

    User.authorization_tiers(FOUR_TIERS)
    return User


@pytest.fixture
def staff_class() -> type:
    """Persona with tiers trainee < staff < admin."""

    class Employee(Persona):
        def __init__(self, authorization_tier=None):
            self.authorization_tier = authorization_tier

    Employee.authorization_tiers(STAFF_TIERS)
    return Employee


@pytest.fixture
def registry() -> PolicyRegistry:
    """Isolated policy registry."""
    return PolicyRegistry()


@pytest.fixture
def view_class(registry: PolicyRegistry) -> type:
    """Unbound authorized view using an isolated registry."""

    class WidgetView(AuthorizedView):
        def __init__(self, request, current_user=None):
            super().__init__(request)
            self._current_user = current_user

        def current_user(self):
            return self._current_user

        async def get(self):
            return web.json_response({"widgets": []})

        async def post(self):
            return web.json_response({"created": True}, status=201)

    WidgetView.registry = registry
    return WidgetView


@pytest.fixture
def bound_view(view_class: type, user_class: type) -> type:
    """WidgetView bound to the User persona."""
    view_class.authorize_persona(class_name="User")
    return view_class
