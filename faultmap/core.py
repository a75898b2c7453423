"""
faultmap - Core value types.

Defines:
- FaultKind (explicit fault kind tags)
- Fault (one immutable link of a causal chain)
- ComponentIdentifier (hashable component identity)
- Error (resolved classification attached to an event)
- Event / EventLike (event abstraction consumed by the resolver)
- MessagingFault (the unit the resolver consumes and produces)
"""

from __future__ import annotations

import uuid
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Protocol, Type, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from .taxonomy import ErrorType


logger = logging.getLogger("faultmap.core")


# ============================================================================
# Fault Kinds
# ============================================================================

class FaultKind:
    """
    Fault kind tag.

    Identifies the concrete nature of a fault. Kinds compare by name, so a
    kind declared twice with the same name is the same mapping key.
    Standard kinds are attached as class attributes below; components are
    free to declare their own.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultKind(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultKind):
            return self.name == other.name
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.name)


# Standard Kinds
FaultKind.GENERIC = FaultKind("Fault", "Plain fault with no specific nature")
FaultKind.GENERIC_SEVERE = FaultKind("SevereFault", "Unrecoverable runtime-level fault")
FaultKind.FATAL_SIGNAL = FaultKind("FatalSignal", "Explicit stop-the-system marker")
FaultKind.CONNECTIVITY = FaultKind("ConnectivityFault", "Connection problems")
FaultKind.RETRY_EXHAUSTED = FaultKind("RetryExhaustedFault", "Reconnection attempts exhausted")
FaultKind.TRANSFORMATION = FaultKind("TransformationFault", "Payload transformation failures")
FaultKind.EXPRESSION = FaultKind("ExpressionFault", "Expression evaluation failures")
FaultKind.ROUTING = FaultKind("RoutingFault", "Message routing failures")
FaultKind.SECURITY = FaultKind("SecurityFault", "Security and auth failures")
FaultKind.TIMEOUT = FaultKind("TimeoutFault", "Operation timed out")
FaultKind.VALIDATION = FaultKind("ValidationFault", "Validation failures")
FaultKind.OVERLOAD = FaultKind("OverloadFault", "Runtime refused work due to load")


class FatalSignal(Exception):
    """
    Raised by the runtime to stop the system.

    Converted to a FATAL_SIGNAL fault by Fault.from_exception. Components
    must never raise it themselves.
    """


# Exception type -> fault kind. Lookup walks the exception's MRO so
# subclasses inherit the kind of their closest registered ancestor.
_EXCEPTION_KINDS: dict[Type[BaseException], FaultKind] = {
    FatalSignal: FaultKind.FATAL_SIGNAL,
    MemoryError: FaultKind.GENERIC_SEVERE,
    RecursionError: FaultKind.GENERIC_SEVERE,
    SystemError: FaultKind.GENERIC_SEVERE,
    ConnectionError: FaultKind.CONNECTIVITY,
    TimeoutError: FaultKind.TIMEOUT,
}


def register_exception_kind(exc_type: Type[BaseException], kind: FaultKind):
    """
    Register the fault kind assigned to an exception type.

    Intended for startup; later registrations for the same type replace
    earlier ones.
    """
    _EXCEPTION_KINDS[exc_type] = kind
    logger.debug(f"Registered fault kind {kind} for {exc_type.__name__}")


def kind_for_exception(exc: BaseException) -> FaultKind:
    """Return the fault kind for an exception instance."""
    for klass in type(exc).__mro__:
        kind = _EXCEPTION_KINDS.get(klass)
        if kind is not None:
            return kind
    return FaultKind.GENERIC


# ============================================================================
# Fault - Causal Chain Link
# ============================================================================

DEFAULT_MAX_CHAIN_DEPTH = 64


@dataclass(frozen=True, slots=True)
class Fault:
    """
    One link of a causal chain.

    Attributes:
        kind: Fault kind tag (mapping key)
        message: Optional human-readable message
        cause: The fault that caused this one, if any

    Example:
        ```python
        fault = Fault(
            FaultKind.GENERIC,
            "wrapper",
            cause=Fault(FaultKind.CONNECTIVITY, "connection refused"),
        )
        ```
    """

    kind: FaultKind
    message: Optional[str] = None
    cause: Optional[Fault] = None

    def chain(self, max_depth: int = DEFAULT_MAX_CHAIN_DEPTH) -> Iterator[Fault]:
        """
        Iterate the causal chain, outermost first.

        Stops after ``max_depth`` links. Well-formed chains are finite and
        acyclic; hitting the bound means the chain was built wrong upstream.

        Args:
            max_depth: Maximum number of links to yield

        Yields:
            This fault, then each cause in turn
        """
        current: Optional[Fault] = self
        depth = 0
        while current is not None:
            if depth >= max_depth:
                logger.warning(
                    f"Causal chain of {self.kind} exceeds {max_depth} links, truncating",
                    extra={"max_depth": max_depth, "root_kind": self.kind.name},
                )
                return
            yield current
            current = current.cause
            depth += 1

    def has_message(self) -> bool:
        return bool(self.message)

    def render(self) -> str:
        """Render as ``"<message> (<kind>)."``."""
        return f"{self.message} ({self.kind.name})."

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        *,
        max_depth: int = DEFAULT_MAX_CHAIN_DEPTH,
    ) -> Fault:
        """
        Convert a raised exception and its ``__cause__`` chain to a Fault chain.

        Kinds are assigned by the exception kind registry. An exception
        message that is empty becomes ``None``.

        Args:
            exc: Exception to convert
            max_depth: Maximum number of causes followed

        Returns:
            Outermost Fault of the converted chain
        """
        links: list[BaseException] = []
        seen: set[int] = set()
        current: Optional[BaseException] = exc
        while current is not None and len(links) < max_depth and id(current) not in seen:
            seen.add(id(current))
            links.append(current)
            current = current.__cause__

        if current is not None and id(current) not in seen:
            logger.warning(
                f"Cause chain of {type(exc).__name__} exceeds {max_depth} exceptions, truncating",
                extra={"max_depth": max_depth, "exception": type(exc).__name__},
            )

        fault: Optional[Fault] = None
        for link in reversed(links):
            fault = cls(kind_for_exception(link), str(link) or None, cause=fault)
        return fault

    def __str__(self) -> str:
        return f"{self.kind.name}: {self.message}" if self.message else self.kind.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.name,
            "message": self.message,
            "cause": self.cause.to_dict() if self.cause else None,
        }


# ============================================================================
# Component Identity
# ============================================================================

@dataclass(frozen=True, slots=True)
class ComponentIdentifier:
    """Stable, hashable identity of a processing component (``namespace:name``)."""

    namespace: str
    name: str

    @classmethod
    def parse(cls, value: str) -> ComponentIdentifier:
        """Parse ``"namespace:name"``; a bare name gets the ``core`` namespace."""
        if ":" in value:
            namespace, name = value.split(":", 1)
            return cls(namespace, name)
        return cls("core", value)

    def __str__(self) -> str:
        return f"{self.namespace}:{self.name}"


# ============================================================================
# Error - Resolved Classification
# ============================================================================

@dataclass(frozen=True, slots=True)
class Error:
    """
    Resolved classification attached to an event.

    Never mutated: a later resolution replaces it as a whole.
    """

    error_type: ErrorType
    cause: Optional[Fault] = None

    @property
    def description(self) -> str:
        if self.cause is not None and self.cause.message:
            return self.cause.message
        return ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": str(self.error_type),
            "description": self.description,
            "cause": self.cause.to_dict() if self.cause else None,
        }


# ============================================================================
# Event Abstraction
# ============================================================================

@runtime_checkable
class EventLike(Protocol):
    """Protocol for events carried through the pipeline."""

    def get_error(self) -> Optional[Error]:
        """Current classification, if any."""
        ...

    def set_error(self, error: Error) -> None:
        """Replace the current classification."""
        ...


@dataclass
class Event:
    """
    Minimal in-memory event.

    Attributes:
        payload: Message payload
        event_id: Unique event ID
        error: Current classification
    """

    payload: Any = None
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    error: Optional[Error] = None

    def get_error(self) -> Optional[Error]:
        return self.error

    def set_error(self, error: Error) -> None:
        self.error = error


# ============================================================================
# MessagingFault
# ============================================================================

class MessagingFault(Exception):
    """
    A component failure bound to the event being processed.

    Attributes:
        message: Base message
        fault: Root of the causal chain
        event: Event being processed
        component: Component that raised the fault
    """

    def __init__(
        self,
        message: str,
        fault: Fault,
        event: EventLike,
        component: Optional[ComponentIdentifier] = None,
    ):
        super().__init__(message)
        self.message = message
        self.fault = fault
        self.event = event
        self.component = component

    @classmethod
    def from_exception(
        cls,
        message: str,
        exc: BaseException,
        event: EventLike,
        component: Optional[ComponentIdentifier] = None,
    ) -> MessagingFault:
        """Wrap a raised exception from ``component`` into a MessagingFault."""
        return cls(message, Fault.from_exception(exc), event, component)

    def with_message(self, message: str) -> MessagingFault:
        """Return a copy carrying ``message``."""
        return MessagingFault(message, self.fault, self.event, self.component)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"MessagingFault(message={self.message!r}, kind={self.fault.kind.name}, "
            f"component={self.component})"
        )
