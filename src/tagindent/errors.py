"""Error taxonomy for indentation analysis."""

from __future__ import annotations


class IndentError(Exception):
    """Base class for indentation engine failures."""


class ConfigurationError(IndentError, ValueError):
    """Raised when configuration cannot drive an analysis pass.

    Reported once at document scope; no fixes are emitted.
    """


class UnresolvableOffsetError(ConfigurationError):
    """Raised when an offset refers to a token outside the current document."""


class InternalConsistencyError(IndentError, RuntimeError):
    """Programming-error class failure; aborts the whole analysis pass."""


class OffsetCycleError(InternalConsistencyError):
    """Raised when an offset chain revisits a token it is resolving."""

    def __init__(self, chain: tuple[int, ...]) -> None:
        self.chain = chain
        rendered = " -> ".join(str(index) for index in chain)
        super().__init__(f"Offset chain does not terminate: {rendered}")


class UnregisteredNodeError(InternalConsistencyError):
    """Raised when a node type has no structural visitor."""

    def __init__(self, node: object) -> None:
        self.node_type = type(node).__name__
        super().__init__(f"No visitor registered for node type {self.node_type}")
