"""Persona: a principal carrying a single ordered authorization tier.

Subclass :class:`Persona` and declare its tiers once, lowest first:

    >>> class User(Persona):
    ...     def __init__(self, authorization_tier):
    ...         self.authorization_tier = authorization_tier
    >>> User.authorization_tiers({
    ...     "trainee": "Trainee - limited access",
    ...     "staff": "Staff - regular access",
    ...     "admin": "Admin - full access",
    ... })
    >>> User("staff").tier_at_or_above("trainee")
    True
"""
import importlib
import re
from collections.abc import Mapping
from typing import Any, ClassVar, Optional

from navconfig.logging import logging
from .conf import AUTHORIZATION_TIER_ATTRIBUTE
from .exceptions import ConfigurationError, InvalidTierError
from .store import Filterable
from .tiers import TierName, TierSet


logger = logging.getLogger(__name__)

# Persona subclasses by class name and by dotted path.
_personas: dict[str, type] = {}


def underscore(name: str) -> str:
    """``NonActiveModelUser`` -> ``non_active_model_user``."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.replace("-", "_").lower()


def resolve_persona(name: str) -> type:
    """Find a class by Persona class name or by dotted import path.

    The resolved class is returned as-is; callers check it is a Persona.
    """
    if name in _personas:
        return _personas[name]
    module_name, _, class_name = name.rpartition(".")
    if module_name:
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # only a missing target module means "no such path"
            missing = exc.name or ""
            if not (module_name == missing or module_name.startswith(f"{missing}.")):
                raise ConfigurationError(
                    f"unable to import {module_name} to resolve persona type {name}: {exc}"
                ) from exc
        except ImportError as exc:
            raise ConfigurationError(
                f"unable to import {module_name} to resolve persona type {name}: {exc}"
            ) from exc
        else:
            persona = getattr(module, class_name, None)
            if persona is not None:
                return persona
    raise ConfigurationError(
        f"unable to resolve persona type {name}: define a Persona subclass "
        "with that name or use a dotted path, e.g. 'myapp.models.User'"
    )


class Persona:
    """Principal capability: an ordered tier and tier comparisons.

    Class attributes:
        tier_attribute: Instance attribute holding the current tier.
        model_name: Singular name used to derive the default current-user
            accessor of views (``current_<model_name>``).
        store: Optional persona store; range queries need a Filterable one.
    """
    tier_attribute: ClassVar[str] = AUTHORIZATION_TIER_ATTRIBUTE
    model_name: ClassVar[Optional[str]] = None
    store: ClassVar[Optional[Any]] = None

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        previous = _personas.get(cls.__name__)
        if previous is not None and previous is not cls:
            logger.warning(
                f"Persona name {cls.__name__} now resolves to "
                f"{cls.__module__}.{cls.__qualname__} instead of "
                f"{previous.__module__}.{previous.__qualname__}; "
                "bind views with a dotted path to avoid ambiguity"
            )
        _personas[cls.__name__] = cls
        _personas[f"{cls.__module__}.{cls.__qualname__}"] = cls

    @classmethod
    def authorization_tiers(cls, tiers: Mapping) -> TierSet:
        """Declare the tiers of this persona type, lowest privilege first.

        Tiers can be defined only once per persona type.

        Raises:
            ConfigurationError: on redefinition or malformed tiers.
        """
        if "_tier_set" in cls.__dict__:
            raise ConfigurationError(
                "you can only define authorization tiers once"
            )
        tier_set = TierSet.define(tiers)
        cls._tier_set = tier_set
        logger.debug(
            f"{cls.__name__} authorization tiers: {', '.join(tier_set.names())}"
        )
        return tier_set

    @classmethod
    def tier_set(cls) -> TierSet:
        tier_set = getattr(cls, "_tier_set", None)
        if tier_set is None:
            raise ConfigurationError(
                f"{cls.__name__} has no authorization tiers, "
                f"e.g. `{cls.__name__}.authorization_tiers({{'staff': 'Staff'}})`"
            )
        return tier_set

    @classmethod
    def tier_names(cls) -> tuple[str, ...]:
        """Just the tier names, for inclusion validations and the like."""
        return cls.tier_set().names()

    @classmethod
    def tier_collection(cls) -> Mapping[str, str]:
        """Label-first tiers, for use in forms."""
        return cls.tier_set().collection()

    @classmethod
    def tier_level(cls, tier: TierName) -> int:
        return cls.tier_set().level_of(tier)

    @classmethod
    def set_tier_attribute(cls, name: str) -> None:
        """Override the attribute name holding the tier for this type."""
        if not isinstance(name, str) or not name.isidentifier():
            raise ConfigurationError(
                f"tier_attribute must be an identifier string, got {name!r}"
            )
        cls.tier_attribute = name

    @classmethod
    def singular_name(cls) -> str:
        return cls.model_name or underscore(cls.__name__)

    @classmethod
    def tiers_at_or_above(cls, tier: TierName) -> tuple[str, ...]:
        return cls.tier_set().at_or_above(tier)

    @classmethod
    def with_tier_at_or_above(cls, tier: TierName, store: Any = None) -> Any:
        """Query the store for personas at ``tier`` or above.

        Raises:
            ConfigurationError: if the store is not Filterable.
        """
        store = store if store is not None else cls.store
        if not isinstance(store, Filterable):
            raise ConfigurationError(
                f"{cls.__name__} has no Filterable store to query tiers on"
            )
        return store.filter_tiers(
            cls.tier_attribute,
            cls.tiers_at_or_above(tier)
        )

    @property
    def current_tier(self) -> Any:
        """Raw tier value read from ``tier_attribute``."""
        return getattr(self, type(self).tier_attribute, None)

    def tier_at_or_above(self, target: TierName) -> bool:
        """True if this persona's tier is ``target`` or more privileged.

        Raises:
            InvalidTierError: if either tier is unknown. A corrupt or
                unmigrated tier value must not pass as a plain denial.
        """
        cls = type(self)
        current = self.current_tier
        if current is None:
            raise InvalidTierError(None)
        return cls.tier_level(current) >= cls.tier_level(target)

    is_or_above = tier_at_or_above
