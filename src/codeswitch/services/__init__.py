"""Resolution services for codeswitch."""

from codeswitch.services.resolver import Resolver, list_names, resolve
from codeswitch.services.switching import SwitchService, resolve_cli

__all__ = [
    "Resolver",
    "SwitchService",
    "list_names",
    "resolve",
    "resolve_cli",
]
