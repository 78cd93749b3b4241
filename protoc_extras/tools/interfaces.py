"""
Collaborator Interfaces

The orchestration core depends on three narrow capabilities it does
not implement itself:
- ProcessExecutor: runs one resolved plugin invocation
- ToolchainProvider: looks up a named tool in a named toolchain
- ArtifactResolver: turns a dependency coordinate into a local executable

Protocols, so fakes in tests and concrete tools need no common base class.
"""
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from protoc_extras.schemas import InvocationSpec, ProcessResult


@runtime_checkable
class ProcessExecutor(Protocol):
    """Runs the external compiler for one invocation"""

    def execute(self, invocation: InvocationSpec) -> ProcessResult:
        """
        Run the invocation

        Returns:
            ProcessResult with the exit code and a stderr summary

        Raises:
            ProcessExecutionFailed: If the process could not be launched
        """
        ...


@runtime_checkable
class ToolchainProvider(Protocol):
    """Looks up tools inside named toolchains"""

    def find_tool(self, toolchain_name: str, tool_name: str) -> Optional[Path]:
        """Return the tool path, or None when the toolchain or tool is unknown"""
        ...


@runtime_checkable
class ArtifactResolver(Protocol):
    """Resolves a dependency coordinate to a local executable file"""

    def resolve_binary(self, coordinate: str) -> Path:
        """
        Resolve the coordinate

        Raises:
            ArtifactNotFound: If the artifact cannot be located
            ArtifactNotExecutable: If the file cannot be made executable
        """
        ...


__all__ = ["ProcessExecutor", "ToolchainProvider", "ArtifactResolver"]
