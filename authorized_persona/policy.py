"""Authorization policies and the registry that owns them.

An :class:`AuthorizationPolicy` is the immutable configuration of one view
type: which Persona it authorizes, how to obtain the current persona and the
grant table. Policies live in a :class:`PolicyRegistry` keyed by view class;
every change stores a new policy value, so a reader always sees a complete
table.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from navconfig.logging import logging
from .exceptions import ConfigurationError, PersonaTypeError
from .grants import GrantTable
from .persona import Persona, resolve_persona
from .tiers import TierName


@dataclass(frozen=True)
class AuthorizationPolicy:
    """Authorization binding and grants of a single view type.

    Attributes:
        controller: Name of the view type, used in error messages.
        persona_name: Persona type name as given at binding time.
        persona: The resolved Persona subclass.
        current_user_method: Name of the view method yielding the
            current persona.
        grants: Current grant table.
    """

    controller: str
    persona_name: str
    persona: type
    current_user_method: str
    grants: GrantTable = field(default_factory=GrantTable)

    def with_grants(self, privileges: Mapping) -> "AuthorizationPolicy":
        """New policy whose grants are exactly ``privileges``."""
        table = GrantTable.build(
            privileges,
            self.persona.tier_set(),
            persona=self.persona_name
        )
        return replace(self, grants=table)

    def authorized_tier(self, action: TierName) -> str:
        return self.grants.authorized_tier(
            action,
            self.persona.tier_set(),
            controller=self.controller
        )

    def authorized(self, current_user: Any, action: TierName) -> bool:
        """Is ``current_user`` at or above the tier that grants ``action``?

        Raises:
            PersonaTypeError: if ``current_user`` is not a bound persona.
            MissingGrantError: if no tier grants the action.
            InvalidTierError: if the persona holds an unknown tier.
        """
        if not isinstance(current_user, self.persona):
            raise PersonaTypeError(current_user, self.persona)
        return current_user.tier_at_or_above(self.authorized_tier(action))


class PolicyRegistry:
    """Policies by view class.

    Lookups walk the view's MRO, so a subclass uses its nearest ancestor's
    policy until a grant is assigned on the subclass itself.
    """

    def __init__(self) -> None:
        self._policies: dict[type, AuthorizationPolicy] = {}
        self.logger = logging.getLogger('Authorization.Registry')

    def lookup(self, controller: type) -> Optional[AuthorizationPolicy]:
        for klass in controller.__mro__:
            if klass in self._policies:
                return self._policies[klass]
        return None

    def get(self, controller: type) -> AuthorizationPolicy:
        policy = self.lookup(controller)
        if policy is None:
            raise ConfigurationError(
                "you must configure authorization, "
                "e.g. `authorize_persona(class_name='User')`"
            )
        if policy.controller != controller.__name__:
            # inherited from an ancestor view
            policy = replace(policy, controller=controller.__name__)
        return policy

    def bind(
        self,
        controller: type,
        class_name: str,
        current_user_method: Optional[str] = None
    ) -> AuthorizationPolicy:
        """Bind a view type to a Persona type, once.

        Raises:
            ConfigurationError: on a second binding, a non-string class
                name, an invalid accessor name or a non-Persona type.
        """
        if self.lookup(controller) is not None:
            raise ConfigurationError(
                "you can only configure authorization once"
            )
        if not isinstance(class_name, str):
            raise ConfigurationError("class_name must be a string")
        if current_user_method is not None and not (
            isinstance(current_user_method, str)
            and current_user_method.isidentifier()
        ):
            raise ConfigurationError(
                "current_user_method must be a method name string"
            )
        persona = resolve_persona(class_name)
        if not (isinstance(persona, type) and issubclass(persona, Persona)):
            raise ConfigurationError(f"{class_name} must be a Persona")
        policy = AuthorizationPolicy(
            controller=controller.__name__,
            persona_name=class_name,
            persona=persona,
            current_user_method=(
                current_user_method or f"current_{persona.singular_name()}"
            )
        )
        self._policies[controller] = policy
        self.logger.info(
            f"{controller.__name__} authorizes {class_name} "
            f"personas through {policy.current_user_method}()"
        )
        return policy

    def grant(self, controller: type, privileges: Mapping) -> AuthorizationPolicy:
        """Replace the grants of ``controller`` with ``privileges``.

        Nothing is stored when validation fails.
        """
        policy = self.get(controller).with_grants(privileges)
        self._policies[controller] = policy
        self.logger.debug(
            f"{controller.__name__} grants: {policy.grants.as_dict()}"
        )
        return policy

    def clear(self) -> None:
        self._policies.clear()

    def __contains__(self, controller: type) -> bool:
        return self.lookup(controller) is not None


policies = PolicyRegistry()
