"""
faultmap - Package errors.

Structured errors raised by the taxonomy, the locator builders and the
configuration layer. The resolver itself never raises them.
"""

from __future__ import annotations

from typing import Any, Optional


class FaultMapError(Exception):
    """
    Base error - structured, typed error object.

    Attributes:
        code: Stable machine-readable identifier (e.g., "DUPLICATE_ERROR_TYPE")
        message: Human-readable summary
        metadata: Additional context data
    """

    code: str = "FAULTMAP_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        if code is not None:
            self.code = code
        self.message = message
        self.metadata = metadata or {}
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize error to dictionary."""
        return {
            "code": self.code,
            "message": self.message,
            "metadata": self.metadata,
        }


class DuplicateTypeError(FaultMapError):
    """An error type with the same namespace and identifier already exists."""

    code = "DUPLICATE_ERROR_TYPE"

    def __init__(self, namespace: str, identifier: str):
        super().__init__(
            f"Error type '{namespace}:{identifier}' is already registered",
            metadata={"namespace": namespace, "identifier": identifier},
        )


class SealedRepositoryError(FaultMapError):
    """Registration was attempted on a sealed repository."""

    code = "REPOSITORY_SEALED"

    def __init__(self, namespace: str, identifier: str):
        super().__init__(
            f"Cannot register '{namespace}:{identifier}': repository is sealed",
            metadata={"namespace": namespace, "identifier": identifier},
        )


class ConfigError(FaultMapError):
    """Raised when configuration validation fails."""

    code = "CONFIG_INVALID"
