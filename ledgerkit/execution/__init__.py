"""
Execution: meta options, scheduling and strategy resolution.
"""

from ledgerkit.execution.meta import MetaOptions, MetaOptionsApplier
from ledgerkit.execution.outcome import (
    ExecutionOutcome,
    Strategy,
    bytes_outcome,
    executed_outcome,
    failure_outcome,
    scheduled_outcome,
)
from ledgerkit.execution.policy import (
    DEFAULT_POLICY,
    ExecutionConfig,
    OperatingMode,
    OperationPolicy,
)
from ledgerkit.execution.resolver import ExecutionResolver
from ledgerkit.execution.schedule import KeyLookup, ScheduleComposer

__all__ = [
    "DEFAULT_POLICY",
    "ExecutionConfig",
    "ExecutionOutcome",
    "ExecutionResolver",
    "KeyLookup",
    "MetaOptions",
    "MetaOptionsApplier",
    "OperatingMode",
    "OperationPolicy",
    "ScheduleComposer",
    "Strategy",
    "bytes_outcome",
    "executed_outcome",
    "failure_outcome",
    "scheduled_outcome",
]
