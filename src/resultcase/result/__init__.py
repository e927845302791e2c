"""The Result engine: value model, builder, operators, batch and transaction combinators."""

from .batch import Entry, foreach, foreach_entry, foreach_fail_fast
from .builder import Builder
from .messages import push_back
from .result import Result
from .status import NULL_PLACEHOLDER, STATUS, Status, Variant
from .transaction import stage_label

__all__ = [
    # Core types
    "Result", "Builder", "Status", "Variant",
    # Batch
    "Entry", "foreach", "foreach_fail_fast", "foreach_entry",
    # Helpers
    "push_back", "stage_label", "STATUS", "NULL_PLACEHOLDER",
]
