"""Tiered role-based authorization for aiohttp class-based views.

Privilege is a single ordered tier per persona (e.g. trainee < staff < admin).
Views grant each action to the lowest tier allowed to run it; a persona is
authorized when its tier is at or above that tier.

Public API:
    Tiers and personas:
    - TierSet: Immutable ordered catalog of tiers
    - Persona: Base class for principals carrying a tier
    - Filterable, MemoryPersonaStore: Stores supporting tier queries

    Grants and policies:
    - GrantTable, ALL: Per-view action grants
    - AuthorizationPolicy, PolicyRegistry, policies: View bindings

    Request integration:
    - AuthorizedView: aiohttp View running the gate before actions
    - AuthorizationGate, Representation, negotiate: Denial responses
    - authorized_to: Check a named route for a persona

Example:
    >>> from authorized_persona import Persona, AuthorizedView
    >>> class User(Persona):
    ...     def __init__(self, authorization_tier):
    ...         self.authorization_tier = authorization_tier
    >>> User.authorization_tiers({"trainee": "Trainee", "staff": "Staff", "admin": "Admin"})
    >>> class ReportView(AuthorizedView):
    ...     ...
    >>> ReportView.authorize_persona(class_name="User")
    >>> ReportView.grant(staff="get", admin="all")
    >>> ReportView.authorized(User("staff"), "get")
    True
"""
from .version import __version__
from .exceptions import (
    AuthorizationError,
    ConfigurationError,
    InvalidGrantError,
    InvalidTierError,
    MissingGrantError,
    PersonaTypeError,
)
from .tiers import TierSet
from .store import Filterable, MemoryPersonaStore
from .persona import Persona
from .grants import ALL, GrantTable
from .policy import AuthorizationPolicy, PolicyRegistry, policies
from .gate import AuthorizationGate, Representation, negotiate
from .views import AuthorizedView, authorized_to

__all__ = [
    "__version__",
    # Errors
    "AuthorizationError",
    "ConfigurationError",
    "InvalidGrantError",
    "InvalidTierError",
    "MissingGrantError",
    "PersonaTypeError",
    # Tiers and personas
    "TierSet",
    "Persona",
    "Filterable",
    "MemoryPersonaStore",
    # Grants and policies
    "ALL",
    "GrantTable",
    "AuthorizationPolicy",
    "PolicyRegistry",
    "policies",
    # Request integration
    "AuthorizedView",
    "AuthorizationGate",
    "Representation",
    "negotiate",
    "authorized_to",
]
