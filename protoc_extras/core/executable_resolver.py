"""
Executable Resolver - Plugin executable lookup

Responsibilities:
- Try executable sources in strict precedence order
- Stop at the first source that yields a path
- Skip toolchain lookup entirely when an explicit path is configured
- Wrap unexpected collaborator failures

Precedence is the order of the strategy list:
explicit path -> toolchain -> artifact.
"""
import logging
from pathlib import Path
from typing import List, Optional

from protoc_extras.errors import ExecutableResolutionFailed, NoExecutableConfigured
from protoc_extras.schemas import TaskDescriptor
from protoc_extras.tools.interfaces import ToolchainProvider, ArtifactResolver

logger = logging.getLogger(__name__)


class ResolutionStrategy:
    """One executable source"""

    name = "strategy"

    def __init__(self, working_dir: Path):
        self.working_dir = Path(working_dir)

    def anchor(self, path) -> Path:
        """Make a path absolute against the working directory"""
        path = Path(path).expanduser()
        if not path.is_absolute():
            path = self.working_dir / path
        return path

    def applies(self, task: TaskDescriptor) -> bool:
        raise NotImplementedError

    def resolve(self, task: TaskDescriptor) -> Optional[Path]:
        """Return a path, or None to fall through to the next strategy"""
        raise NotImplementedError


class ExplicitPathStrategy(ResolutionStrategy):
    """Uses pluginExecutable as given"""

    name = "executable_path"

    def applies(self, task: TaskDescriptor) -> bool:
        return task.executable_path is not None

    def resolve(self, task: TaskDescriptor) -> Optional[Path]:
        return self.anchor(task.executable_path)


class ToolchainStrategy(ResolutionStrategy):
    """Asks the toolchain provider for pluginTool in pluginToolchain"""

    name = "toolchain"

    def __init__(self, provider: Optional[ToolchainProvider], working_dir: Path):
        super().__init__(working_dir)
        self.provider = provider

    def applies(self, task: TaskDescriptor) -> bool:
        return task.has_toolchain and task.executable_path is None

    def resolve(self, task: TaskDescriptor) -> Optional[Path]:
        if self.provider is None:
            logger.info(
                f"[ExecutableResolver] No toolchain provider; cannot look up "
                f"{task.tool_name} in {task.toolchain_name} for '{task.id}'"
            )
            return None
        try:
            tool = self.provider.find_tool(task.toolchain_name, task.tool_name)
        except ExecutableResolutionFailed:
            raise
        except Exception as e:
            raise ExecutableResolutionFailed(
                f"Toolchain lookup failed for extra plugin '{task.id}': {e}"
            ) from e
        if tool is None:
            logger.info(
                f"[ExecutableResolver] Tool {task.tool_name} not found in toolchain "
                f"{task.toolchain_name} for '{task.id}'"
            )
            return None
        logger.info(f"[ExecutableResolver] Toolchain {task.toolchain_name} provides {tool} for '{task.id}'")
        return self.anchor(tool)


class ArtifactStrategy(ResolutionStrategy):
    """Resolves pluginArtifact through the artifact resolver"""

    name = "artifact"

    def __init__(self, resolver: Optional[ArtifactResolver], working_dir: Path):
        super().__init__(working_dir)
        self.resolver = resolver

    def applies(self, task: TaskDescriptor) -> bool:
        return task.artifact_coordinate is not None

    def resolve(self, task: TaskDescriptor) -> Optional[Path]:
        if self.resolver is None:
            raise ExecutableResolutionFailed(
                f"No artifact resolver available for extra plugin '{task.id}' "
                f"({task.artifact_coordinate})"
            )
        try:
            path = self.resolver.resolve_binary(task.artifact_coordinate)
        except ExecutableResolutionFailed:
            raise
        except Exception as e:
            raise ExecutableResolutionFailed(
                f"Could not resolve artifact {task.artifact_coordinate} for extra plugin '{task.id}': {e}"
            ) from e
        return self.anchor(path)


class ExecutableResolver:
    """
    Executable Resolver - finds the runnable plugin for a task

    Strategies are tried in list order; the first non-None path wins.
    """

    def __init__(
        self,
        toolchain_provider: Optional[ToolchainProvider] = None,
        artifact_resolver: Optional[ArtifactResolver] = None,
        working_dir: Optional[Path] = None
    ):
        """
        Initialize ExecutableResolver

        Args:
            toolchain_provider: Source for toolchain lookups
            artifact_resolver: Source for artifact coordinates
            working_dir: Anchor for relative executable paths from any source (defaults to cwd)
        """
        self.working_dir = Path(working_dir) if working_dir else Path.cwd()
        self.strategies: List[ResolutionStrategy] = [
            ExplicitPathStrategy(self.working_dir),
            ToolchainStrategy(toolchain_provider, self.working_dir),
            ArtifactStrategy(artifact_resolver, self.working_dir),
        ]

    def resolve(self, task: TaskDescriptor) -> Path:
        """
        Resolve the executable for a task

        Args:
            task: Configured extra plugin

        Returns:
            Absolute executable path

        Raises:
            NoExecutableConfigured: If no source is configured or all miss
            ExecutableResolutionFailed: If a collaborator fails
        """
        if task.executable_path is not None and task.has_toolchain:
            logger.warning(
                f"[ExecutableResolver] Toolchains are ignored for '{task.id}', "
                f"'pluginExecutable' parameter is set to {task.executable_path}"
            )

        tried = []
        for strategy in self.strategies:
            if not strategy.applies(task):
                continue
            tried.append(strategy.name)
            path = strategy.resolve(task)
            if path is not None:
                return path

        raise NoExecutableConfigured(task.id, tried)


__all__ = [
    "ExecutableResolver",
    "ResolutionStrategy",
    "ExplicitPathStrategy",
    "ToolchainStrategy",
    "ArtifactStrategy",
]
