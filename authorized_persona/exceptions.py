"""Exceptions raised by the authorization engine.

Every exception here signals a programming or configuration mistake and is
propagated to the caller. A principal whose tier is too low (or a missing
principal) is not an error: it is a ``False`` decision.
"""
from typing import Any, Iterable


class AuthorizationError(Exception):
    """Base class for all Authorized Persona errors."""

    def __init__(self, message: str = None, *args) -> None:
        self.message = message or self.__class__.__doc__
        super().__init__(self.message, *args)

    def __str__(self) -> str:
        return self.message


class ConfigurationError(AuthorizationError):
    """Authorization is not configured, or configured incorrectly."""


class InvalidTierError(AuthorizationError):
    """A value is not one of the persona's authorization tiers."""

    def __init__(self, tier: Any) -> None:
        self.tier = tier
        super().__init__(f"Invalid authorization tier: {tier}")


class InvalidGrantError(AuthorizationError):
    """A grant references tiers the persona does not define."""

    def __init__(
        self,
        persona: str,
        tier_names: Iterable[str],
        extra_keys: Iterable[str]
    ) -> None:
        self.persona = persona
        self.tier_names = tuple(tier_names)
        self.extra_keys = tuple(extra_keys)
        super().__init__(
            f"invalid grant: {persona} has authorization tiers "
            f"{', '.join(self.tier_names)} but received extra keys: "
            f"{', '.join(self.extra_keys)}"
        )


class MissingGrantError(AuthorizationError):
    """No tier grants the requested action."""

    def __init__(self, controller: str, action: str) -> None:
        self.controller = controller
        self.action = action
        super().__init__(
            f"missing authorization grant for {controller}#{action}"
        )


class PersonaTypeError(AuthorizationError, TypeError):
    """The supplied principal is not an instance of the bound persona."""

    def __init__(self, value: Any, persona: type) -> None:
        self.value = value
        self.persona = persona
        super().__init__(
            f"{value!r} is not a {getattr(persona, '__name__', persona)}"
        )
