"""
Error taxonomy for extension task orchestration

Resolution errors are raised before any process is launched.
Execution errors come from the process executor.
Nothing here is retried.
"""
from pathlib import Path
from typing import List, Optional


class ProtocExtrasError(Exception):
    """Base class for all orchestration errors"""
    pass


# ----------------------------------------------------------------------------
# Configuration errors
# ----------------------------------------------------------------------------

class ConfigurationError(ProtocExtrasError):
    """Raised when the task configuration itself is defective"""
    pass


class DuplicateTaskId(ConfigurationError):
    """Raised when two tasks in a registry share the same id"""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Duplicate extra plugin id: {task_id}")


class MissingOutputBase(ConfigurationError):
    """Raised when no output directory can be computed for a task"""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(
            f"No output directory for extra plugin '{task_id}': "
            "set outputDirectory, outputBaseDirectory or a default output base"
        )


class DuplicateOutputDirectory(ConfigurationError):
    """Raised when several tasks resolve to the same output directory"""

    def __init__(self, output_directory: Path, task_ids: List[str]):
        self.output_directory = output_directory
        self.task_ids = list(task_ids)
        super().__init__(
            f"Output directory {output_directory} is shared by extra plugins: "
            + ", ".join(self.task_ids)
        )


# ----------------------------------------------------------------------------
# Executable resolution errors
# ----------------------------------------------------------------------------

class ExecutableResolutionFailed(ProtocExtrasError):
    """Raised when a collaborator fails to resolve a plugin executable"""
    pass


class NoExecutableConfigured(ExecutableResolutionFailed):
    """Raised when no executable source yields a path"""

    def __init__(self, task_id: str, tried: Optional[List[str]] = None):
        self.task_id = task_id
        self.tried = list(tried or [])
        if self.tried:
            detail = "no configured source produced a path (tried: " + ", ".join(self.tried) + ")"
        else:
            detail = "no pluginExecutable, toolchain or pluginArtifact configured"
        super().__init__(f"No executable for extra plugin '{task_id}': {detail}")


class InvalidArtifactCoordinate(ExecutableResolutionFailed):
    """Raised when an artifact coordinate cannot be parsed"""

    def __init__(self, coordinate: str):
        self.coordinate = coordinate
        super().__init__(
            f"Invalid artifact coordinate '{coordinate}': "
            "expected groupId:artifactId:version[:type[:classifier]]"
        )


class ArtifactNotFound(ExecutableResolutionFailed):
    """Raised when an artifact cannot be located"""

    def __init__(self, coordinate: str, location: Optional[Path] = None):
        self.coordinate = coordinate
        self.location = location
        message = f"Artifact not found: {coordinate}"
        if location is not None:
            message += f" (looked in {location})"
        super().__init__(message)


class ArtifactNotExecutable(ExecutableResolutionFailed):
    """Raised when a resolved artifact cannot be executed"""

    def __init__(self, coordinate: str, path: Path):
        self.coordinate = coordinate
        self.path = path
        super().__init__(f"Artifact {coordinate} resolved to {path}, which is not executable")


# ----------------------------------------------------------------------------
# Execution errors
# ----------------------------------------------------------------------------

class ProcessExecutionFailed(ProtocExtrasError):
    """Raised when the external process fails to launch or exits with failure"""

    def __init__(self, message: str, exit_code: Optional[int] = None, stderr_summary: str = ""):
        self.exit_code = exit_code
        self.stderr_summary = stderr_summary
        super().__init__(message)


__all__ = [
    "ProtocExtrasError",
    "ConfigurationError",
    "DuplicateTaskId",
    "MissingOutputBase",
    "DuplicateOutputDirectory",
    "ExecutableResolutionFailed",
    "NoExecutableConfigured",
    "InvalidArtifactCoordinate",
    "ArtifactNotFound",
    "ArtifactNotExecutable",
    "ProcessExecutionFailed",
]
