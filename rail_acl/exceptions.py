"""
Exceptions raised by the access-control engine.

Only ``PermissionDenied`` is raised on the request path; every other
shortfall is a silent redaction.
"""

from typing import Optional


class AclError(Exception):
    """Base exception for access-control errors."""


class PermissionDenied(AclError):
    """Raised when no resolved level may perform an action at all."""

    def __init__(self, action: str, model_name: Optional[str] = None):
        self.action = str(getattr(action, "value", action))
        self.model_name = model_name
        target = f" on '{model_name}'" if model_name else ""
        super().__init__(f"Permission denied for action '{self.action}'{target}")


class AclConfigurationError(AclError):
    """Raised when a permission table cannot be used."""

    def __init__(
        self,
        message: str,
        level: Optional[str] = None,
        action: Optional[str] = None,
    ):
        self.level = level
        self.action = action
        super().__init__(message)
