from __future__ import annotations


class ProducerError(Exception):
    """Base exception for producer lifecycle errors."""


class ChannelClosedError(ProducerError):
    """Raised when receiving from a refresh channel that has been closed."""


class ScopeClosedError(ProducerError):
    """Raised when launching a producer on a scope that was torn down."""


__all__ = [
    "ProducerError",
    "ChannelClosedError",
    "ScopeClosedError",
]
