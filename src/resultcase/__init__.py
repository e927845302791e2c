"""resultcase - categorized outcomes without exceptions.

A Result carries either a value or one of five failure categories, plus an
ordered map of context messages. Data-access and remote-call code builds a
Result where a failure originates; everything downstream composes Results
with map, and_then, meets_condition, foreach and transaction instead of
try/except.

Quick Start:
    >>> from resultcase import Result, Status
    >>>
    >>> def load_account(account_id: int) -> Result[dict]:
    ...     if account_id != 7:
    ...         return (
    ...             Result.builder()
    ...             .not_found("account does not exist")
    ...             .add_message("account_id", account_id)
    ...             .build()
    ...         )
    ...     return Result.builder().success({"id": 7, "balance": 120}).build()
    >>>
    >>> load_account(7).map(lambda a: a["balance"]).or_else(0)
    120
    >>> load_account(8).status() is Status.NOT_FOUND
    True

Batch:
    >>> from resultcase import foreach
    >>> foreach([7, 8], load_account).message("8")["error"]
    'account does not exist'

Configuration is read from RESULTCASE_* environment variables
(see resultcase.foundation.config); logging goes through
resultcase.observability.
"""

from .foundation import (
    CapturedException,
    ResultBuildError,
    ResultcaseSettings,
    ResultError,
    classify_exception,
    clear_settings_cache,
    get_settings,
)
from .observability import configure_from_settings, configure_logging, get_logger
from .result import (
    Builder,
    Entry,
    Result,
    Status,
    Variant,
    foreach,
    foreach_entry,
    foreach_fail_fast,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "Result", "Builder", "Status", "Variant",
    # Batch
    "Entry", "foreach", "foreach_fail_fast", "foreach_entry",
    # Errors
    "ResultError", "ResultBuildError", "CapturedException", "classify_exception",
    # Config
    "ResultcaseSettings", "get_settings", "clear_settings_cache",
    # Logging
    "configure_logging", "configure_from_settings", "get_logger",
]
