"""Persona store capabilities.

Persistence of personas belongs to the application. A store adapter that can
run range queries over the tier attribute implements :class:`Filterable`;
``Persona.with_tier_at_or_above`` only works against such stores.
"""
from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator, Optional, Sequence


class Filterable(ABC):
    """Optional capability of a persona store: filter by tier values.

    Example:
        >>> class UserQuery(Filterable):
        ...     def filter_tiers(self, attribute, tiers):
        ...         return User.filter(**{f"{attribute}__in": list(tiers)})
    """

    @abstractmethod
    def filter_tiers(self, attribute: str, tiers: Sequence[str]) -> Any:
        """Return every persona whose ``attribute`` is one of ``tiers``.

        Args:
            attribute: Name of the persona attribute holding the tier.
            tiers: Accepted tier names.

        Returns:
            Whatever the backing store uses for query results.
        """
        ...


class MemoryPersonaStore(Filterable):
    """In-process persona store, useful for tests and small deployments."""

    def __init__(self, personas: Optional[Iterable[Any]] = None) -> None:
        self._personas: list[Any] = list(personas or [])

    def add(self, persona: Any) -> None:
        self._personas.append(persona)

    def filter_tiers(self, attribute: str, tiers: Sequence[str]) -> list[Any]:
        accepted = set(tiers)
        return [
            persona for persona in self._personas
            if getattr(persona, attribute, None) in accepted
        ]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._personas)

    def __len__(self) -> int:
        return len(self._personas)
