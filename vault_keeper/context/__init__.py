"""Request-scoped context for the vault."""

from .principal_context import PrincipalContext, principal_aware, principal_context

__all__ = ["PrincipalContext", "principal_aware", "principal_context"]
