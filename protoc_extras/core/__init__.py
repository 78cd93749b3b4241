"""
Core Orchestration Components

These components turn the configured extra plugins into process runs:
1. PathResolver - Output directory per plugin
2. ExecutableResolver - Explicit path → toolchain → artifact
3. InvocationBuilder - TaskDescriptor → InvocationSpec
4. Orchestrator - Runs the Registry, aggregates a RunResult
"""
from .path_resolver import PathResolver
from .executable_resolver import ExecutableResolver
from .invocation_builder import InvocationBuilder
from .orchestrator import Orchestrator

__all__ = [
    "PathResolver",
    "ExecutableResolver",
    "InvocationBuilder",
    "Orchestrator",
]
