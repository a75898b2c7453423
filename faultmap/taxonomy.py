"""
faultmap - Error type taxonomy.

The taxonomy is a tree of ErrorType nodes identified by
(namespace, identifier). It is built once at startup, sealed, and then
shared read-only by every locator and resolution.

Built-in layout (namespace ``CORE``)::

    ANY
    ├── UNKNOWN
    ├── CONNECTIVITY
    │   └── RETRY_EXHAUSTED
    ├── TRANSFORMATION
    ├── EXPRESSION
    ├── ROUTING
    ├── VALIDATION
    ├── TIMEOUT
    ├── REDELIVERY_EXHAUSTED
    └── SECURITY
        ├── CLIENT_SECURITY
        └── SERVER_SECURITY
    CRITICAL
    ├── OVERLOAD
    └── FATAL
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from .errors import DuplicateTypeError, SealedRepositoryError


logger = logging.getLogger("faultmap.taxonomy")

CORE_NAMESPACE = "CORE"


# ============================================================================
# ErrorType
# ============================================================================

@dataclass(frozen=True, slots=True)
class ErrorType:
    """
    Node of the classification taxonomy.

    Attributes:
        namespace: Namespace owning the type (e.g., "CORE", "HTTP")
        identifier: Identifier within the namespace (e.g., "CONNECTIVITY")
        parent: Parent type, or None for roots
    """

    namespace: str
    identifier: str
    parent: Optional[ErrorType] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}:{self.identifier}"

    def ancestors(self) -> Iterator[ErrorType]:
        """Yield this type, then each parent up to the root."""
        current: Optional[ErrorType] = self
        while current is not None:
            yield current
            current = current.parent

    def is_a(self, other: ErrorType) -> bool:
        """True if ``other`` is this type or one of its ancestors."""
        return any(t == other for t in self.ancestors())

    @staticmethod
    def split(value: str) -> tuple[str, str]:
        """
        Split ``"NS:ID"`` into its parts.

        An unqualified identifier belongs to the ``CORE`` namespace.
        """
        if ":" in value:
            namespace, identifier = value.split(":", 1)
            return namespace, identifier
        return CORE_NAMESPACE, value

    def __str__(self) -> str:
        return self.qualified_name

    def __repr__(self) -> str:
        return f"ErrorType('{self.qualified_name}')"


# ============================================================================
# ErrorTypeRepository
# ============================================================================

class ErrorTypeRepository:
    """
    Registry of error types.

    Maintains every registered type keyed by (namespace, identifier) and
    the built-in roots. Registration is a startup activity: call ``seal()``
    once the taxonomy is complete and share the repository read-only.

    Usage:
        ```python
        repository = create_default_repository()
        http = repository.register("HTTP", "NOT_FOUND", repository.connectivity)
        repository.seal()

        repository.is_assignable_to(http, repository.any)  # True
        ```
    """

    def __init__(self):
        """Initialize repository with the built-in taxonomy."""
        self._types: dict[tuple[str, str], ErrorType] = {}
        self._sealed = False

        self.any = self.register(CORE_NAMESPACE, "ANY", None)
        self.unknown = self.register(CORE_NAMESPACE, "UNKNOWN", self.any)
        self.connectivity = self.register(CORE_NAMESPACE, "CONNECTIVITY", self.any)
        self.retry_exhausted = self.register(CORE_NAMESPACE, "RETRY_EXHAUSTED", self.connectivity)
        self.transformation = self.register(CORE_NAMESPACE, "TRANSFORMATION", self.any)
        self.expression = self.register(CORE_NAMESPACE, "EXPRESSION", self.any)
        self.routing = self.register(CORE_NAMESPACE, "ROUTING", self.any)
        self.validation = self.register(CORE_NAMESPACE, "VALIDATION", self.any)
        self.timeout = self.register(CORE_NAMESPACE, "TIMEOUT", self.any)
        self.redelivery_exhausted = self.register(CORE_NAMESPACE, "REDELIVERY_EXHAUSTED", self.any)
        self.security = self.register(CORE_NAMESPACE, "SECURITY", self.any)
        self.client_security = self.register(CORE_NAMESPACE, "CLIENT_SECURITY", self.security)
        self.server_security = self.register(CORE_NAMESPACE, "SERVER_SECURITY", self.security)

        self.critical = self.register(CORE_NAMESPACE, "CRITICAL", None)
        self.overload = self.register(CORE_NAMESPACE, "OVERLOAD", self.critical)
        self.fatal = self.register(CORE_NAMESPACE, "FATAL", self.critical)

    # ========================================================================
    # Registration
    # ========================================================================

    def register(
        self,
        namespace: str,
        identifier: str,
        parent: Optional[ErrorType],
    ) -> ErrorType:
        """
        Register a new error type.

        Args:
            namespace: Namespace of the new type
            identifier: Identifier within the namespace
            parent: Parent type (None registers a new root)

        Returns:
            The registered ErrorType

        Raises:
            DuplicateTypeError: (namespace, identifier) is already registered
            SealedRepositoryError: The repository has been sealed
        """
        key = (namespace, identifier)
        if self._sealed:
            raise SealedRepositoryError(namespace, identifier)
        if key in self._types:
            raise DuplicateTypeError(namespace, identifier)

        error_type = ErrorType(namespace, identifier, parent)
        self._types[key] = error_type
        logger.debug(f"Registered error type {error_type} (parent: {parent})")
        return error_type

    def seal(self) -> ErrorTypeRepository:
        """Refuse any further registration. Returns self for chaining."""
        self._sealed = True
        logger.debug(f"Sealed error type repository with {len(self._types)} types")
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    # ========================================================================
    # Queries
    # ========================================================================

    def lookup(self, namespace: str, identifier: str) -> Optional[ErrorType]:
        """Return the registered type, or None if unknown."""
        return self._types.get((namespace, identifier))

    def lookup_name(self, value: str) -> Optional[ErrorType]:
        """Look up by qualified name (``"NS:ID"`` or a bare ``CORE`` identifier)."""
        return self.lookup(*ErrorType.split(value))

    @staticmethod
    def is_assignable_to(error_type: ErrorType, candidate: ErrorType) -> bool:
        """
        Check whether ``error_type`` falls in the ``candidate`` category.

        True iff ``candidate`` is ``error_type`` itself or one of its ancestors.
        """
        return error_type.is_a(candidate)

    def children(self, error_type: Optional[ErrorType]) -> list[ErrorType]:
        """Direct children of ``error_type`` (roots when None), in registration order."""
        return [t for t in self._types.values() if t.parent == error_type]

    def roots(self) -> list[ErrorType]:
        return self.children(None)

    def namespaces(self) -> set[str]:
        return {namespace for namespace, _ in self._types}

    def __contains__(self, error_type: object) -> bool:
        if not isinstance(error_type, ErrorType):
            return False
        return self._types.get((error_type.namespace, error_type.identifier)) == error_type

    def __iter__(self) -> Iterator[ErrorType]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)


def create_default_repository(*, seal: bool = False) -> ErrorTypeRepository:
    """
    Create a repository holding only the built-in taxonomy.

    Args:
        seal: Seal the repository before returning it

    Returns:
        New ErrorTypeRepository
    """
    repository = ErrorTypeRepository()
    if seal:
        repository.seal()
    return repository
