"""
faultmap - ErrorType locator.

The locator answers "what ErrorType does this component assign to this
fault kind?". Lookup order:

    Component mapper → Default mapper → Locator default

A component mapper that returns None (no entry, no default) falls through
to the default mapper, so components override only the kinds they name.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from .core import ComponentIdentifier, FaultKind
from .mapper import ExceptionMapper
from .taxonomy import ErrorType, ErrorTypeRepository


logger = logging.getLogger("faultmap.locator")


class ErrorTypeLocator:
    """
    Immutable classification lookup.

    Holds:
    - Default mapper (runtime-wide)
    - Component mappers (per component overrides)
    - Default error type (last resort)

    Usage:
        ```python
        locator = (
            ErrorTypeLocator.builder(repository)
            .add_component_mapper(http_request, http_mapper)
            .default_mapper(create_default_mapper(repository))
            .default_error(repository.unknown)
            .build()
        )
        locator.classify(http_request, FaultKind.CONNECTIVITY)
        ```
    """

    __slots__ = ("_repository", "_default_mapper", "_component_mappers", "_default_error")

    def __init__(
        self,
        repository: ErrorTypeRepository,
        default_mapper: ExceptionMapper,
        component_mappers: Mapping[ComponentIdentifier, ExceptionMapper],
        default_error: ErrorType,
    ):
        self._repository = repository
        self._default_mapper = default_mapper
        self._component_mappers = MappingProxyType(dict(component_mappers))
        self._default_error = default_error

    @staticmethod
    def builder(repository: ErrorTypeRepository) -> ErrorTypeLocatorBuilder:
        return ErrorTypeLocatorBuilder(repository)

    # ========================================================================
    # Classification
    # ========================================================================

    def classify(self, component: Optional[ComponentIdentifier], kind: FaultKind) -> ErrorType:
        """
        Classify a fault kind raised by ``component``.

        Args:
            component: Component identity (None skips component mappers)
            kind: Fault kind of the raised fault

        Returns:
            Component mapping, else default mapping, else the locator default
        """
        if component is not None:
            mapper = self._component_mappers.get(component)
            if mapper is not None:
                error_type = mapper.map(kind)
                if error_type is not None:
                    return error_type

        error_type = self._default_mapper.map(kind)
        if error_type is not None:
            return error_type
        return self._default_error

    def lookup_error_type(self, kind: FaultKind) -> ErrorType:
        """Classify ``kind`` ignoring component overrides."""
        return self.classify(None, kind)

    # ========================================================================
    # Inspection
    # ========================================================================

    @property
    def repository(self) -> ErrorTypeRepository:
        return self._repository

    @property
    def default_mapper(self) -> ExceptionMapper:
        return self._default_mapper

    @property
    def default_error(self) -> ErrorType:
        return self._default_error

    def component_mapper(self, component: ComponentIdentifier) -> Optional[ExceptionMapper]:
        return self._component_mappers.get(component)

    @property
    def components(self) -> frozenset[ComponentIdentifier]:
        return frozenset(self._component_mappers)


class ErrorTypeLocatorBuilder:
    """Builder for ErrorTypeLocator."""

    def __init__(self, repository: ErrorTypeRepository):
        self._repository = repository
        self._default_mapper: Optional[ExceptionMapper] = None
        self._component_mappers: dict[ComponentIdentifier, ExceptionMapper] = {}
        self._default_error: Optional[ErrorType] = None

    def add_component_mapper(
        self,
        component: ComponentIdentifier,
        mapper: ExceptionMapper,
    ) -> ErrorTypeLocatorBuilder:
        self._component_mappers[component] = mapper
        logger.debug(f"Registered component mapper for '{component}' ({len(mapper)} mappings)")
        return self

    def default_mapper(self, mapper: ExceptionMapper) -> ErrorTypeLocatorBuilder:
        self._default_mapper = mapper
        return self

    def default_error(self, error_type: ErrorType) -> ErrorTypeLocatorBuilder:
        self._default_error = error_type
        return self

    def build(self) -> ErrorTypeLocator:
        """
        Build the locator.

        An unset default mapper becomes an empty mapper; an unset default
        error becomes the repository's UNKNOWN type.
        """
        return ErrorTypeLocator(
            self._repository,
            self._default_mapper if self._default_mapper is not None else ExceptionMapper({}),
            self._component_mappers,
            self._default_error if self._default_error is not None else self._repository.unknown,
        )


# ============================================================================
# Defaults
# ============================================================================

def create_default_mapper(repository: ErrorTypeRepository) -> ExceptionMapper:
    """Map the standard fault kinds to the built-in error types."""
    return (
        ExceptionMapper.builder()
        .add_mapping(FaultKind.GENERIC, repository.unknown)
        .add_mapping(FaultKind.GENERIC_SEVERE, repository.critical)
        .add_mapping(FaultKind.FATAL_SIGNAL, repository.fatal)
        .add_mapping(FaultKind.CONNECTIVITY, repository.connectivity)
        .add_mapping(FaultKind.RETRY_EXHAUSTED, repository.retry_exhausted)
        .add_mapping(FaultKind.TRANSFORMATION, repository.transformation)
        .add_mapping(FaultKind.EXPRESSION, repository.expression)
        .add_mapping(FaultKind.ROUTING, repository.routing)
        .add_mapping(FaultKind.SECURITY, repository.security)
        .add_mapping(FaultKind.TIMEOUT, repository.timeout)
        .add_mapping(FaultKind.VALIDATION, repository.validation)
        .add_mapping(FaultKind.OVERLOAD, repository.overload)
        .build()
    )


def create_default_locator(repository: ErrorTypeRepository) -> ErrorTypeLocator:
    """
    Create a locator with the standard mappings and no component overrides.

    Unmapped kinds classify as UNKNOWN.
    """
    return (
        ErrorTypeLocator.builder(repository)
        .default_mapper(create_default_mapper(repository))
        .default_error(repository.unknown)
        .build()
    )
