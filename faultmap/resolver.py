"""
faultmap - Messaging fault resolver.

The resolver picks exactly one ErrorType and one rendered message for a
MessagingFault. Rules are tried in order and the first match wins:

1. Fatal signal: first FATAL_SIGNAL fault in the chain → FATAL
2. Severe chain: two or more leading GENERIC_SEVERE faults → CRITICAL,
   rendered from the deepest fault of the run
3. Existing error: the event already carries an Error → keep it,
   base message verbatim
4. Single severe: only the outermost fault is GENERIC_SEVERE → CRITICAL
5. Locator: ``locator.classify(component, root kind)``

Rules 1 and 2 override a classification already on the event; rule 3
keeps earlier classifications sticky against everything below it.

The resolver holds no mutable state and may be shared across threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .core import (
    DEFAULT_MAX_CHAIN_DEPTH,
    Error,
    Fault,
    FaultKind,
    MessagingFault,
)
from .errors import ConfigError
from .locator import ErrorTypeLocator
from .taxonomy import ErrorType


class ResolutionRule(str, Enum):
    """Rule that decided a resolution."""
    FATAL_SIGNAL = "fatal_signal"
    SEVERE_CHAIN = "severe_chain"
    EXISTING_ERROR = "existing_error"
    SINGLE_SEVERE = "single_severe"
    LOCATOR = "locator"


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of classifying a MessagingFault.

    Attributes:
        rule: Rule that won
        error: Error to attach to the event
        message: Final rendered message
        used_fault: Fault the message was rendered from (None for EXISTING_ERROR)
    """
    rule: ResolutionRule
    error: Error
    message: str
    used_fault: Optional[Fault] = None

    @property
    def error_type(self) -> ErrorType:
        return self.error.error_type

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule": self.rule.value,
            "type": str(self.error_type),
            "message": self.message,
            "used_fault": self.used_fault.to_dict() if self.used_fault else None,
        }


def render_message(base_message: str, used_fault: Optional[Fault]) -> str:
    """
    Render the final message.

    ``"<message> (<kind>)."`` when a fault was used and has a message,
    otherwise the base message unchanged.
    """
    if used_fault is None or not used_fault.message:
        return base_message
    return used_fault.render()


class MessagingFaultResolver:
    """
    Resolves MessagingFaults to a single classification.

    Usage:
        ```python
        resolver = MessagingFaultResolver()
        locator = create_default_locator(repository)

        try:
            ...
        except MessagingFault as mf:
            resolved = resolver.resolve(mf, locator)
            resolved.event.get_error().error_type  # classification
            str(resolved)                          # rendered message
        ```
    """

    def __init__(
        self,
        *,
        max_chain_depth: int = DEFAULT_MAX_CHAIN_DEPTH,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize resolver.

        Args:
            max_chain_depth: Maximum number of chain links inspected
            logger: Logger for resolution events (creates default if None)
        """
        if max_chain_depth < 1:
            raise ConfigError(
                f"max_chain_depth must be at least 1, got {max_chain_depth}",
                metadata={"max_chain_depth": max_chain_depth},
            )
        self.max_chain_depth = max_chain_depth
        self.logger = logger or logging.getLogger("faultmap.resolver")

    @classmethod
    def from_config(cls, config) -> MessagingFaultResolver:
        """Create a resolver from a ResolverConfig."""
        return cls(
            max_chain_depth=config.max_chain_depth,
            logger=logging.getLogger(config.logger_name),
        )

    # ========================================================================
    # Resolution (Core Logic)
    # ========================================================================

    def classify(
        self,
        mf: MessagingFault,
        locator: ErrorTypeLocator,
        existing_error: Optional[Error] = None,
    ) -> Resolution:
        """
        Decide the classification of ``mf`` without touching its event.

        Args:
            mf: MessagingFault to classify
            locator: Locator for component and default mappings
            existing_error: Error carried by the event before the fault

        Returns:
            Resolution describing the winning rule, Error and message
        """
        repository = locator.repository

        # Single pass: a fatal signal anywhere beats the severe run, so the
        # run length is only acted upon once the whole chain has been seen.
        severe_depth = 0
        deepest_severe: Optional[Fault] = None
        in_severe_run = True

        for fault in mf.fault.chain(self.max_chain_depth):
            if fault.kind == FaultKind.FATAL_SIGNAL:
                return self._resolution(ResolutionRule.FATAL_SIGNAL, mf, repository.fatal, fault)

            if in_severe_run and fault.kind == FaultKind.GENERIC_SEVERE:
                severe_depth += 1
                deepest_severe = fault
            else:
                in_severe_run = False

        if severe_depth >= 2:
            return self._resolution(ResolutionRule.SEVERE_CHAIN, mf, repository.critical, deepest_severe)

        if existing_error is not None:
            return Resolution(
                rule=ResolutionRule.EXISTING_ERROR,
                error=existing_error,
                message=mf.message,
            )

        if severe_depth == 1:
            return self._resolution(ResolutionRule.SINGLE_SEVERE, mf, repository.critical, mf.fault)

        error_type = locator.classify(mf.component, mf.fault.kind)
        return self._resolution(ResolutionRule.LOCATOR, mf, error_type, mf.fault)

    def resolve(self, mf: MessagingFault, locator: ErrorTypeLocator) -> MessagingFault:
        """
        Resolve ``mf`` and record the classification on its event.

        Args:
            mf: MessagingFault to resolve
            locator: Locator for component and default mappings

        Returns:
            New MessagingFault carrying the rendered message
        """
        existing_error = mf.event.get_error()
        resolution = self.classify(mf, locator, existing_error)

        if resolution.error is not existing_error:
            mf.event.set_error(resolution.error)

        self.logger.debug(
            f"Resolved {mf.fault.kind} from '{mf.component}' as "
            f"{resolution.error_type} ({resolution.rule.value})",
            extra={"resolution": resolution.to_dict()},
        )
        return mf.with_message(resolution.message)

    def _resolution(
        self,
        rule: ResolutionRule,
        mf: MessagingFault,
        error_type: ErrorType,
        used_fault: Fault,
    ) -> Resolution:
        return Resolution(
            rule=rule,
            error=Error(error_type, used_fault),
            message=render_message(mf.message, used_fault),
            used_fault=used_fault,
        )


# ============================================================================
# Convenience Functions
# ============================================================================

_default_resolver: Optional[MessagingFaultResolver] = None


def get_default_resolver() -> MessagingFaultResolver:
    """
    Get or create the default resolver.

    Returns:
        Global MessagingFaultResolver instance
    """
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = MessagingFaultResolver()
    return _default_resolver


def resolve(
    mf: MessagingFault,
    locator: ErrorTypeLocator,
    *,
    resolver: Optional[MessagingFaultResolver] = None,
) -> MessagingFault:
    """
    Resolve a MessagingFault.

    Args:
        mf: MessagingFault to resolve
        locator: Locator for component and default mappings
        resolver: Resolver to use (uses default if None)

    Returns:
        New MessagingFault carrying the rendered message
    """
    return (resolver or get_default_resolver()).resolve(mf, locator)
