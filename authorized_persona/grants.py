"""Grant tables: which tier unlocks which view action.

A grant maps tier names to the actions permitted at that tier (and, through
the at-or-above comparison, every tier above it). The literal ``"all"``
grants every action at that tier.
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Union

from .exceptions import ConfigurationError, InvalidGrantError, MissingGrantError
from .tiers import TierSet, tier_key


ALL = "all"

Actions = Union[frozenset, str]


def normalize_actions(actions) -> Actions:
    """Turn one action, many actions or ``"all"`` into a grant entry."""
    if isinstance(actions, (str, Enum)):
        actions = [actions]
    normalized = frozenset(tier_key(action) for action in actions)
    if normalized == {ALL}:
        return ALL
    return normalized


@dataclass(frozen=True)
class GrantTable:
    """Immutable mapping of tier name -> permitted actions (or ``ALL``).

    Tables are never edited in place; a new grant builds a new table that
    replaces the previous one entirely.
    """

    grants: Mapping[str, Actions] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def build(
        cls,
        privileges: Mapping,
        tier_set: TierSet,
        persona: str = "persona"
    ) -> "GrantTable":
        """Normalize and validate ``privileges`` against ``tier_set``.

        Raises:
            InvalidGrantError: naming every key that is not a tier.
        """
        if not isinstance(privileges, Mapping):
            raise ConfigurationError(
                "grants must be a mapping of tier names to actions, "
                "e.g. {'staff': ['get'], 'admin': 'all'}"
            )
        grants = {
            tier_key(tier): normalize_actions(actions)
            for tier, actions in privileges.items()
        }
        tier_names = tier_set.names()
        extra_keys = [key for key in grants if key not in tier_names]
        if extra_keys:
            raise InvalidGrantError(persona, tier_names, extra_keys)
        return cls(grants=MappingProxyType(grants))

    def actions_for(self, tier: str) -> Actions:
        return self.grants.get(tier, frozenset())

    def covers(self, tier: str, action: str) -> bool:
        actions = self.actions_for(tier)
        return actions == ALL or action in actions

    def authorized_tier(
        self,
        action,
        tier_set: TierSet,
        controller: str = "controller"
    ) -> str:
        """Lowest tier whose grant covers ``action``.

        Scanning from the least privileged tier returns the least privilege
        that is sufficient for the action.

        Raises:
            MissingGrantError: if no tier grants the action.
        """
        action = tier_key(action)
        for tier in tier_set.names():
            if self.covers(tier, action):
                return tier
        raise MissingGrantError(controller, action)

    def as_dict(self) -> dict[str, Actions]:
        return dict(self.grants)

    def __contains__(self, tier: str) -> bool:
        return tier in self.grants

    def __iter__(self):
        return iter(self.grants)

    def __len__(self) -> int:
        return len(self.grants)

