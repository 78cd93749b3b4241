"""
Invocation Builder - TaskDescriptor → InvocationSpec

Composes the ExecutableResolver and PathResolver results with the
task's passthrough fields. Has no failure modes of its own: it raises
whatever the resolvers raise.
"""
from pathlib import Path
from typing import Optional, Union

from protoc_extras.schemas import TaskDescriptor, InvocationSpec
from .path_resolver import PathResolver
from .executable_resolver import ExecutableResolver


class InvocationBuilder:
    """Builds one ready-to-run invocation per task"""

    def __init__(
        self,
        executable_resolver: ExecutableResolver,
        path_resolver: Optional[PathResolver] = None,
        base_dir: Optional[Path] = None
    ):
        """
        Initialize InvocationBuilder

        Args:
            executable_resolver: Resolves plugin executables
            path_resolver: Computes output directories
            base_dir: Anchor for relative output directories (defaults to cwd)
        """
        self.executable_resolver = executable_resolver
        self.path_resolver = path_resolver or PathResolver()
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()

    def output_directory(self, task: TaskDescriptor, default_output_base: Optional[Union[str, Path]]) -> Path:
        """Absolute output directory for a task, without touching the filesystem"""
        directory = self.path_resolver.resolve(
            task.output_directory,
            task.output_base_directory,
            default_output_base,
            task.id,
        )
        if not directory.is_absolute():
            directory = self.base_dir / directory
        return directory

    def build(self, task: TaskDescriptor, default_output_base: Optional[Union[str, Path]]) -> InvocationSpec:
        """
        Build the invocation for a task

        Args:
            task: Configured extra plugin
            default_output_base: Process-wide default output base

        Returns:
            InvocationSpec with absolute executable and output directory

        Raises:
            MissingOutputBase: If no output directory can be computed
            ExecutableResolutionFailed: If no executable can be resolved
        """
        output_directory = self.output_directory(task, default_output_base)
        executable = self.executable_resolver.resolve(task)

        return InvocationSpec(
            plugin_id=task.id,
            resolved_executable=executable,
            resolved_output_directory=output_directory,
            parameter=task.parameter,
        )


__all__ = ["InvocationBuilder"]
