"""
faultmap - Exception mappers.

An ExceptionMapper is an immutable table from fault kind to ErrorType with
an optional default. Mappers are assembled with ExceptionMapperBuilder and
never change after ``build()``.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from .core import FaultKind
from .taxonomy import ErrorType


class ExceptionMapper:
    """
    Immutable fault kind -> ErrorType table.

    Usage:
        ```python
        mapper = (
            ExceptionMapper.builder()
            .add_mapping(FaultKind.CONNECTIVITY, http_connectivity)
            .default_error(repository.unknown)
            .build()
        )
        mapper.map(FaultKind.CONNECTIVITY)  # http_connectivity
        ```
    """

    __slots__ = ("_mappings", "_default")

    def __init__(
        self,
        mappings: Mapping[FaultKind, ErrorType],
        default: Optional[ErrorType] = None,
    ):
        self._mappings = MappingProxyType(dict(mappings))
        self._default = default

    @staticmethod
    def builder() -> ExceptionMapperBuilder:
        return ExceptionMapperBuilder()

    def map(self, kind: FaultKind) -> Optional[ErrorType]:
        """
        Map a fault kind.

        Returns:
            The explicit mapping, else the mapper default, else None
        """
        error_type = self._mappings.get(kind)
        if error_type is not None:
            return error_type
        return self._default

    @property
    def mappings(self) -> Mapping[FaultKind, ErrorType]:
        return self._mappings

    @property
    def default(self) -> Optional[ErrorType]:
        return self._default

    def __contains__(self, kind: object) -> bool:
        return kind in self._mappings

    def __len__(self) -> int:
        return len(self._mappings)

    def __repr__(self) -> str:
        return f"ExceptionMapper(mappings={len(self._mappings)}, default={self._default})"


class ExceptionMapperBuilder:
    """Builder for ExceptionMapper. Later mappings for the same kind win."""

    def __init__(self):
        self._mappings: dict[FaultKind, ErrorType] = {}
        self._default: Optional[ErrorType] = None

    def add_mapping(self, kind: FaultKind, error_type: ErrorType) -> ExceptionMapperBuilder:
        self._mappings[kind] = error_type
        return self

    def default_error(self, error_type: ErrorType) -> ExceptionMapperBuilder:
        self._default = error_type
        return self

    def build(self) -> ExceptionMapper:
        return ExceptionMapper(self._mappings, self._default)
