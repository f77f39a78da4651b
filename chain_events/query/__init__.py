"""Block-granularity pagination and filtering query engine."""

from .cancel import Cancellation
from .engine import EventQueryEngine
from .filters import Predicate, build_predicate
from .params import EventQuery, normalize
from .window import BlockWindow, BlockWindowResolver
from .fetcher import EventFetcher
from .assembler import assemble

__all__ = [
    "Cancellation",
    "EventQueryEngine",
    "EventQuery",
    "normalize",
    "Predicate",
    "build_predicate",
    "BlockWindow",
    "BlockWindowResolver",
    "EventFetcher",
    "assemble",
]
