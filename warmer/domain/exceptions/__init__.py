from .warm_exceptions import (
    NoEligibleViewer,
    RenderFailure,
    ResolutionMiss,
    StaleCursorError,
    TransportFailure,
    WarmerError,
)

__all__ = [
    "NoEligibleViewer",
    "RenderFailure",
    "ResolutionMiss",
    "StaleCursorError",
    "TransportFailure",
    "WarmerError",
]
