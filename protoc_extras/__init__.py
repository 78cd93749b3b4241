"""
Extra protoc plugin orchestration
"""
from .errors import ProtocExtrasError
from .schemas import TaskDescriptor, Registry, InvocationSpec, RunResult, RunStatus, TaskStatus
from .core import PathResolver, ExecutableResolver, InvocationBuilder, Orchestrator

__version__ = "0.1.0"

__all__ = [
    "ProtocExtrasError",
    "TaskDescriptor",
    "Registry",
    "InvocationSpec",
    "RunResult",
    "RunStatus",
    "TaskStatus",
    "PathResolver",
    "ExecutableResolver",
    "InvocationBuilder",
    "Orchestrator",
]
