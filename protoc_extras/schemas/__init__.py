"""
Schemas for extra protoc plugin orchestration

These schemas define the contracts between stages:
- Task: configured extra plugins and the sealed Registry
- Invocation: resolved, ready-to-run plugin calls
- Result: per-task outcomes and the aggregated run result
- Config: the on-disk configuration document
"""
from .task_schema import (
    TaskStatus,
    RunStatus,
    TaskDescriptor,
    Registry,
    InvocationSpec,
    ProcessResult,
    TaskOutcome,
    RunResult,
)
from .config_schema import ExtrasConfig, load_extras_config

__all__ = [
    # Task (configuration)
    "TaskDescriptor",
    "Registry",
    # Invocation
    "InvocationSpec",
    "ProcessResult",
    # Result
    "TaskStatus",
    "RunStatus",
    "TaskOutcome",
    "RunResult",
    # Config
    "ExtrasConfig",
    "load_extras_config",
]
