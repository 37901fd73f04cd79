"""Tests for content negotiation and denial responses."""
import json

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer, make_mocked_request

from authorized_persona import (
    AuthorizationGate,
    ConfigurationError,
    Representation,
    negotiate,
)


def request_with(**headers):
    headers.setdefault("Host", "example.com")
    return make_mocked_request("GET", "/widgets", headers=headers)


class TestNegotiate:
    """Tests for negotiate()."""

    @pytest.mark.parametrize("accept,expected", [
        (None, Representation.INTERACTIVE),
        ("text/html,application/xhtml+xml,*/*;q=0.8", Representation.INTERACTIVE),
        ("*/*", Representation.INTERACTIVE),
        ("application/json", Representation.MACHINE_READABLE),
        ("application/vnd.api+json", Representation.MACHINE_READABLE),
        ("text/html;q=0.5, application/json", Representation.MACHINE_READABLE),
        ("application/json;q=0.2, text/html;q=0.9", Representation.INTERACTIVE),
        ("text/plain", Representation.OTHER),
        ("application/xml, text/csv", Representation.OTHER),
        ("application/json;q=0, text/plain", Representation.OTHER),
    ])
    def test_representation(self, accept, expected) -> None:
        headers = {} if accept is None else {"Accept": accept}
        assert negotiate(request_with(**headers)) is expected


class FakeView:
    """Minimal view double exposing what the gate needs."""

    def __init__(self, request, allowed: bool):
        self.request = request
        self.action_name = "get"
        self._allowed = allowed

    async def is_authorized(self) -> bool:
        return self._allowed


@pytest.fixture
def session(monkeypatch) -> dict:
    """In-memory user session returned by get_session."""
    data: dict = {}

    async def fake_get_session(request, *args, **kwargs):
        return data

    monkeypatch.setattr("authorized_persona.gate.get_session", fake_get_session)
    return data


class TestAuthorize:
    """Tests for AuthorizationGate.authorize."""

    @pytest.fixture
    def gate(self) -> AuthorizationGate:
        return AuthorizationGate()

    @pytest.mark.asyncio
    async def test_allow_has_no_side_effect(self, gate: AuthorizationGate, session: dict) -> None:
        request = request_with(Accept="text/html")
        assert await gate.authorize(FakeView(request, allowed=True)) is None
        assert session == {}

    @pytest.mark.asyncio
    async def test_deny_interactive(self, gate: AuthorizationGate, session: dict) -> None:
        request = request_with(Accept="text/html")
        response = await gate.authorize(FakeView(request, allowed=False))
        assert response.status == 302
        assert response.headers["Location"] == "/"
        assert session[gate.flash_key] == {
            "error": "You are not authorized to perform this action."
        }

    @pytest.mark.asyncio
    async def test_deny_machine_readable(self, gate: AuthorizationGate, session: dict) -> None:
        request = request_with(Accept="application/json")
        response = await gate.authorize(FakeView(request, allowed=False))
        assert response.status == 401
        assert json.loads(response.body) == {}
        assert session == {}

    @pytest.mark.asyncio
    async def test_deny_other(self, gate: AuthorizationGate, session: dict) -> None:
        request = request_with(Accept="text/csv")
        response = await gate.authorize(FakeView(request, allowed=False))
        assert response.status == 401
        assert not response.body

    @pytest.mark.asyncio
    async def test_custom_settings(self, session: dict) -> None:
        gate = AuthorizationGate(
            message="Nope.", fallback_location="/login", flash_key="notices"
        )
        request = request_with(Accept="text/html")
        response = await gate.deny(request, Representation.INTERACTIVE)
        assert response.headers["Location"] == "/login"
        assert session["notices"] == {"error": "Nope."}

    @pytest.mark.asyncio
    async def test_notice_keeps_existing_flash(self, session: dict) -> None:
        gate = AuthorizationGate()
        session[gate.flash_key] = {"info": "Saved."}
        await gate.notice(request_with(), "Denied.")
        assert session[gate.flash_key] == {"info": "Saved.", "error": "Denied."}

    @pytest.mark.asyncio
    async def test_pop_notices_consumes_flash(self, session: dict) -> None:
        gate = AuthorizationGate()
        request = request_with()
        await gate.notice(request, "Denied.")
        assert await gate.pop_notices(request) == {"error": "Denied."}
        assert await gate.pop_notices(request) == {}

    @pytest.mark.asyncio
    async def test_missing_session_is_a_configuration_error(self, monkeypatch) -> None:
        async def no_session(request, *args, **kwargs):
            return None

        monkeypatch.setattr("authorized_persona.gate.get_session", no_session)
        gate = AuthorizationGate()
        with pytest.raises(ConfigurationError, match="session backend"):
            await gate.deny(request_with(Accept="text/html"), Representation.INTERACTIVE)


class TestNoticeAcrossRedirect:
    """The denial notice reaches the page the browser is redirected to."""

    @pytest.mark.asyncio
    async def test_flash_survives_redirect(
        self, bound_view: type, user_class: type, session: dict
    ) -> None:
        class TraineeWidgetView(bound_view):
            def current_user(self):
                return user_class("one")

        TraineeWidgetView.grant(four="get")
        gate = TraineeWidgetView.gate

        async def home(request):
            notices = await gate.pop_notices(request)
            return web.Response(text=notices.get("error", ""))

        app = web.Application()
        app.router.add_view("/widgets", TraineeWidgetView)
        app.router.add_get("/", home)
        async with TestClient(TestServer(app)) as client:
            response = await client.get("/widgets", headers={"Accept": "text/html"})
            assert [r.status for r in response.history] == [302]
            assert response.status == 200
            assert await response.text() == gate.message
            # consumed by the first render
            response = await client.get("/")
            assert await response.text() == ""


class TestSafeLocation:
    """Tests for the redirect target of interactive denials."""

    @pytest.fixture
    def gate(self) -> AuthorizationGate:
        return AuthorizationGate(fallback_location="/home")

    @pytest.mark.parametrize("referer,expected", [
        (None, "/home"),
        ("http://example.com/widgets?page=2", "/widgets?page=2"),
        ("/widgets/1", "/widgets/1"),
        ("http://evil.example.org/phish", "/home"),
        ("//evil.example.org/phish", "/home"),
        ("http://example.com:8080/widgets", "/home"),
        ("widgets", "/home"),
    ])
    def test_referer(self, gate: AuthorizationGate, referer, expected) -> None:
        headers = {} if referer is None else {"Referer": referer}
        assert gate.safe_location(request_with(**headers)) == expected
