"""Ordered authorization tiers.

A TierSet is the immutable, totally ordered catalog of privilege tiers a
Persona type can hold, declared from lowest to highest privilege:

    >>> tiers = TierSet.define({
    ...     "trainee": "Trainee - limited access",
    ...     "staff": "Staff - regular access",
    ...     "admin": "Admin - full access",
    ... })
    >>> tiers.level_of("staff")
    1
    >>> tiers.at_or_above("staff")
    ('staff', 'admin')
"""
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Union

from .exceptions import ConfigurationError, InvalidTierError


TierName = Union[str, Enum]


def tier_key(tier: TierName) -> str:
    """Normalize a tier reference (name or Enum member) to its name."""
    if isinstance(tier, Enum):
        return str(tier.value)
    return str(tier)


@dataclass(frozen=True)
class TierSet:
    """Immutable ordered catalog of ``(name, description)`` tiers.

    Attributes:
        tiers: Pairs of tier name and human-readable description, lowest
            privilege first. The position of a tier is its level.
    """

    tiers: tuple[tuple[str, str], ...]

    @classmethod
    def define(cls, tiers: Mapping) -> "TierSet":
        """Build a TierSet from an ordered mapping of name -> description.

        Raises:
            ConfigurationError: if ``tiers`` is not a mapping, a name is not
                identifier-shaped or a description is not a string.
        """
        if not isinstance(tiers, Mapping):
            raise ConfigurationError(
                "you must provide a mapping of tier names and string "
                "descriptions, e.g. {'trainee': 'Trainee - limited access', "
                "'staff': 'Staff - regular access', 'admin': 'Admin - full access'}"
            )
        for name, description in tiers.items():
            if not isinstance(name, str) or not name.isidentifier():
                raise ConfigurationError(
                    f"authorization tier names must be identifier strings, got {name!r}"
                )
            if not isinstance(description, str):
                raise ConfigurationError(
                    f"authorization tier {name} must have a string description, "
                    f"got {description!r}"
                )
        return cls(tiers=tuple(tiers.items()))

    def names(self) -> tuple[str, ...]:
        """Tier names, lowest privilege first."""
        return tuple(name for name, _ in self.tiers)

    def level_of(self, tier: TierName) -> int:
        """Zero-based level of a tier in the privilege order."""
        try:
            return self.names().index(tier_key(tier))
        except ValueError:
            raise InvalidTierError(tier_key(tier)) from None

    def description_of(self, tier: TierName) -> str:
        return self.tiers[self.level_of(tier)][1]

    def at_or_above(self, tier: TierName) -> tuple[str, ...]:
        """Names of ``tier`` and every tier more privileged than it."""
        return self.names()[self.level_of(tier):]

    def collection(self) -> Mapping[str, str]:
        """Label-first mapping (description -> name), for forms and selects."""
        return MappingProxyType(
            {description: name for name, description in self.tiers}
        )

    def as_enum(self, name: str = "Tier") -> Any:
        """Build a ``str`` Enum whose members are the tier names, in order.

        Members compare equal to their names and can be passed anywhere a
        tier name is accepted:

            >>> Tier = tiers.as_enum()
            >>> user.tier_at_or_above(Tier.staff)
        """
        return Enum(
            name,
            [(tier, tier) for tier in self.names()],
            type=str
        )

    def __contains__(self, tier: Any) -> bool:
        return tier_key(tier) in self.names()

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self.tiers)
