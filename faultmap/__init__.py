"""
faultmap - Error type classification for message-processing runtimes.

Faults raised by processing components are causal chains. faultmap assigns
each failure exactly one ErrorType from a shared taxonomy, so routers and
handlers can branch on *what kind* of failure happened.

Core exports:
- Fault, FaultKind: Causal chain links and their kind tags
- ErrorType, ErrorTypeRepository: The classification taxonomy
- ExceptionMapper: Fault kind -> ErrorType tables
- ErrorTypeLocator: Component-aware classification lookup
- MessagingFaultResolver: The resolution engine
"""

from .core import (
    ComponentIdentifier,
    Error,
    Event,
    EventLike,
    FatalSignal,
    Fault,
    FaultKind,
    MessagingFault,
    kind_for_exception,
    register_exception_kind,
)

from .errors import (
    ConfigError,
    DuplicateTypeError,
    FaultMapError,
    SealedRepositoryError,
)

from .taxonomy import (
    CORE_NAMESPACE,
    ErrorType,
    ErrorTypeRepository,
    create_default_repository,
)

from .mapper import ExceptionMapper, ExceptionMapperBuilder

from .locator import (
    ErrorTypeLocator,
    ErrorTypeLocatorBuilder,
    create_default_locator,
    create_default_mapper,
)

from .resolver import (
    MessagingFaultResolver,
    Resolution,
    ResolutionRule,
    get_default_resolver,
    render_message,
    resolve,
)

from .config import ConfigLoader, ResolverConfig

__version__ = "0.1.0"

__all__ = [
    # Core types
    "ComponentIdentifier",
    "Error",
    "Event",
    "EventLike",
    "FatalSignal",
    "Fault",
    "FaultKind",
    "MessagingFault",
    "kind_for_exception",
    "register_exception_kind",

    # Errors
    "ConfigError",
    "DuplicateTypeError",
    "FaultMapError",
    "SealedRepositoryError",

    # Taxonomy
    "CORE_NAMESPACE",
    "ErrorType",
    "ErrorTypeRepository",
    "create_default_repository",

    # Mapping
    "ExceptionMapper",
    "ExceptionMapperBuilder",
    "ErrorTypeLocator",
    "ErrorTypeLocatorBuilder",
    "create_default_locator",
    "create_default_mapper",

    # Resolution
    "MessagingFaultResolver",
    "Resolution",
    "ResolutionRule",
    "get_default_resolver",
    "render_message",
    "resolve",

    # Config
    "ConfigLoader",
    "ResolverConfig",
]
