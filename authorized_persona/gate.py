"""Request-time authorization gate.

The gate asks a view whether its current persona may run the requested
action and, when it may not, builds the denial response for the negotiated
representation:

- interactive (HTML): flash notice in the user session (navigator_session)
  and redirect back to a same-host page,
- machine-readable (JSON): empty object with ``401 Unauthorized``,
- anything else: bodyless ``401 Unauthorized``.
"""
from enum import Enum
from typing import Any, Optional

from aiohttp import hdrs, web
from yarl import URL
from navconfig.logging import logging
from navigator_session import get_session
from .exceptions import ConfigurationError
from .conf import (
    AUTHORIZATION_DENIED_MESSAGE,
    AUTHORIZATION_FALLBACK_URL,
    AUTHORIZATION_FLASH_KEY
)


class Representation(Enum):
    """Response representations a denial can take."""
    INTERACTIVE = "html"
    MACHINE_READABLE = "json"
    OTHER = "any"


HTML_TYPES = frozenset({"text/html", "application/xhtml+xml", "*/*"})
JSON_TYPES = frozenset({"application/json", "text/json"})


def negotiate(request: web.BaseRequest) -> Representation:
    """Pick the representation preferred by the ``Accept`` header.

    Media ranges are tried by descending quality, then header order. A
    missing header or ``*/*`` is treated as a browser.
    """
    accept = request.headers.get(hdrs.ACCEPT, "").strip()
    if not accept:
        return Representation.INTERACTIVE
    candidates = []
    for index, media_range in enumerate(accept.split(",")):
        media, *params = [item.strip() for item in media_range.split(";")]
        quality = 1.0
        for param in params:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        if media and quality > 0:
            candidates.append((-quality, index, media.lower()))
    for _, _, media in sorted(candidates):
        if media in HTML_TYPES:
            return Representation.INTERACTIVE
        if media in JSON_TYPES or media.endswith("+json"):
            return Representation.MACHINE_READABLE
    return Representation.OTHER


class AuthorizationGate:
    """Allow or deny a view request.

    Args:
        message: Notice shown to interactive clients on denial.
        fallback_location: Redirect target when the referer is missing or
            points at another host.
        flash_key: Session key holding flash notices.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        fallback_location: Optional[str] = None,
        flash_key: Optional[str] = None
    ) -> None:
        self.message = message or AUTHORIZATION_DENIED_MESSAGE
        self.fallback_location = fallback_location or AUTHORIZATION_FALLBACK_URL
        self.flash_key = flash_key or AUTHORIZATION_FLASH_KEY
        self.logger = logging.getLogger('Authorization.Gate')

    async def authorize(self, view: Any) -> Optional[web.StreamResponse]:
        """Return ``None`` to let the action run, or the denial response."""
        if await view.is_authorized():
            return None
        request = view.request
        representation = negotiate(request)
        self.logger.warning(
            f"Denied {type(view).__name__}#{view.action_name} "
            f"({representation.value}) for {request.path}"
        )
        return await self.deny(request, representation)

    async def deny(
        self,
        request: web.BaseRequest,
        representation: Representation
    ) -> web.StreamResponse:
        if representation is Representation.INTERACTIVE:
            await self.notice(request, self.message)
            return web.Response(
                status=302,
                headers={hdrs.LOCATION: self.safe_location(request)}
            )
        if representation is Representation.MACHINE_READABLE:
            return web.json_response({}, status=401)
        return web.Response(status=401)

    async def session(self, request: web.BaseRequest) -> Any:
        session = await get_session(request)
        if session is None:
            raise ConfigurationError(
                "a session backend is required to keep authorization notices "
                "across the redirect"
            )
        return session

    async def notice(self, request: web.BaseRequest, message: str) -> None:
        """Flash a user-facing error notice into the user session.

        The notice survives the redirect and is consumed by
        :meth:`pop_notices` on the next page render.
        """
        session = await self.session(request)
        flash = dict(session.get(self.flash_key) or {})
        flash["error"] = message
        session[self.flash_key] = flash

    async def pop_notices(self, request: web.BaseRequest) -> dict:
        """Return and clear the flash notices of the user session."""
        session = await self.session(request)
        flash = dict(session.get(self.flash_key) or {})
        if flash:
            session[self.flash_key] = {}
        return flash

    def safe_location(self, request: web.BaseRequest) -> str:
        """The referer when it belongs to this host, else the fallback."""
        referer = request.headers.get(hdrs.REFERER)
        if not referer:
            return self.fallback_location
        try:
            url = URL(referer)
        except (TypeError, ValueError):
            return self.fallback_location
        if url.host is not None:
            if url.host != request.url.host or url.port != request.url.port:
                return self.fallback_location
        location = url.path_qs
        if not location.startswith("/") or location.startswith(("//", "/\\")):
            return self.fallback_location
        return location
