"""Authorized class-based views for aiohttp.

:class:`AuthorizedView` binds a view to a Persona type, holds its grants in
the policy registry and runs the authorization gate before every action:

    >>> class ReportView(AuthorizedView):
    ...     async def current_user(self):
    ...         return await load_user(self.request)
    ...
    ...     async def get(self):
    ...         return web.json_response({"reports": []})
    >>> ReportView.authorize_persona(class_name="User")
    >>> ReportView.grant({"staff": "get", "admin": "all"})
    >>> app.router.add_view("/reports", ReportView, name="reports")
"""
import inspect
from typing import Any, ClassVar, Mapping, Optional

from aiohttp import web
from .exceptions import ConfigurationError
from .gate import AuthorizationGate
from .policy import AuthorizationPolicy, PolicyRegistry, policies
from .tiers import TierName


class AuthorizedView(web.View):
    """aiohttp View with tiered persona authorization.

    Class attributes:
        registry: Policy registry holding this view's binding and grants.
        gate: Gate building denial responses.
        before_actions: Names of coroutine methods run before the action;
            the first one returning a response short-circuits the request.
    """
    registry: ClassVar[PolicyRegistry] = policies
    gate: ClassVar[AuthorizationGate] = AuthorizationGate()
    before_actions: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def before_action(cls, hook: str) -> None:
        """Append a hook for this view and its subclasses only."""
        cls.before_actions = (*cls.before_actions, hook)

    @classmethod
    def authorize_persona(
        cls,
        class_name: str,
        current_user_method: Optional[str] = None
    ) -> AuthorizationPolicy:
        """Configure authorization for a Persona type.

        Registers the ``authorize`` hook; other hooks registered earlier run
        first.
        """
        policy = cls.registry.bind(cls, class_name, current_user_method)
        cls.before_action("authorize")
        return policy

    @classmethod
    def grant(
        cls,
        privileges: Optional[Mapping] = None,
        **tiers: Any
    ) -> AuthorizationPolicy:
        """Replace every grant of this view.

        Grants replace all previous grants to avoid privilege leakage:

            >>> ReportView.grant(trainee="get", staff=["get", "post"], admin="all")
        """
        if privileges is None:
            privileges = tiers
        elif tiers:
            raise ConfigurationError(
                "pass grants either as a mapping or as keyword arguments"
            )
        return cls.registry.grant(cls, privileges)

    @classmethod
    def authorization_policy(cls) -> AuthorizationPolicy:
        return cls.registry.get(cls)

    @classmethod
    def authorization_persona(cls) -> type:
        return cls.authorization_policy().persona

    @classmethod
    def authorized_actions(cls) -> dict:
        return cls.authorization_policy().grants.as_dict()

    @classmethod
    def authorized_tier(cls, action: TierName) -> str:
        return cls.authorization_policy().authorized_tier(action)

    @classmethod
    def authorized(cls, current_user: Any, action: TierName) -> bool:
        return cls.authorization_policy().authorized(current_user, action)

    @property
    def action_name(self) -> str:
        """``{action}`` route placeholder, else the lower-cased HTTP method."""
        return self.request.match_info.get("action") or self.request.method.lower()

    async def authorization_current_user(self) -> Any:
        """Call the configured current-user accessor (sync or async)."""
        method = self.authorization_policy().current_user_method
        if not isinstance(method, str) or not method.isidentifier():
            raise ConfigurationError(
                "you must configure authorization with a valid current_user "
                "method name, e.g. `authorize_persona(class_name='User', "
                "current_user_method='my_custom_current_user')`"
            )
        accessor = getattr(self, method, None)
        if accessor is None:
            raise ConfigurationError(
                f"{type(self).__name__} has no {method}() current user accessor"
            )
        user = accessor() if callable(accessor) else accessor
        if inspect.isawaitable(user):
            user = await user
        return user

    async def is_authorized(self) -> bool:
        """Authorization of the current persona for the current action.

        An anonymous request (no current persona) is not authorized.
        """
        user = await self.authorization_current_user()
        if user is None:
            return False
        return self.authorized(user, self.action_name)

    async def authorize(self) -> Optional[web.StreamResponse]:
        return await self.gate.authorize(self)

    async def authorized_to(self, action: TierName, resource: str) -> bool:
        """Whether the current persona may run ``action`` on a named route."""
        return authorized_to(
            self.request,
            action,
            resource,
            await self.authorization_current_user()
        )

    async def _iter(self) -> web.StreamResponse:
        for hook in self.before_actions:
            response = await getattr(self, hook)()
            if response is not None:
                return response
        return await super()._iter()


def authorized_to(
    request: web.BaseRequest,
    action: TierName,
    resource: str,
    current_user: Any
) -> bool:
    """Ask the view behind the named route ``resource`` about ``action``.

    Useful in templates and handlers to show only the links a persona can
    follow.

    Raises:
        ConfigurationError: if the route is unknown or not served by an
            AuthorizedView.
    """
    try:
        named = request.app.router.named_resources()[resource]
    except KeyError:
        raise ConfigurationError(
            f"Unable to determine route for {resource}"
        ) from None
    for route in named:
        handler = route.handler
        if inspect.isclass(handler) and issubclass(handler, AuthorizedView):
            return handler.authorized(current_user, action)
    raise ConfigurationError(
        f"Unable to determine an authorized view for {resource}"
    )
