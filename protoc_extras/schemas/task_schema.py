"""
Task Schema - Extension Task Data Model

This defines the configured extra plugin tasks, the sealed registry
the Orchestrator runs, the resolved invocation handed to the process
executor, and the aggregated run result.

TaskDescriptor and Registry are frozen once built.
InvocationSpec is derived per task per run and never hand-edited.
"""
from pathlib import Path
from typing import List, Optional, Dict, Any, Tuple
from enum import Enum

from pydantic import BaseModel, Field, ConfigDict, AliasChoices, field_validator, model_validator

from protoc_extras.errors import DuplicateTaskId


class TaskStatus(str, Enum):
    """Per-task execution status"""
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class RunStatus(str, Enum):
    """Overall run status"""
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    ALL_SUCCEEDED = "ALL_SUCCEEDED"
    PARTIAL_FAILURE = "PARTIAL_FAILURE"


class TaskDescriptor(BaseModel):
    """One configured extra plugin (extension task)"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(
        ...,
        min_length=1,
        pattern=r"^[A-Za-z0-9_.-]+$",
        validation_alias=AliasChoices("id", "pluginId", "plugin_id"),
        description="Plugin identifier, also the protoc-gen-<id> name and output subdirectory",
    )

    # Output location
    output_directory: Optional[Path] = Field(
        None,
        validation_alias=AliasChoices("output_directory", "outputDirectory"),
        description="Exact output directory, ignores any base directory",
    )
    output_base_directory: Optional[Path] = Field(
        None,
        validation_alias=AliasChoices("output_base_directory", "outputBaseDirectory"),
        description="Directory under which the plugin id is appended",
    )

    # Executable sources, in precedence order
    executable_path: Optional[Path] = Field(
        None,
        validation_alias=AliasChoices("executable_path", "executablePath", "pluginExecutable"),
    )
    toolchain_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("toolchain_name", "toolchainName", "pluginToolchain"),
    )
    tool_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("tool_name", "toolName", "pluginTool"),
    )
    artifact_coordinate: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("artifact_coordinate", "artifactCoordinate", "pluginArtifact"),
        description="groupId:artifactId:version[:type[:classifier]]",
    )

    parameter: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("parameter", "pluginParameter"),
        description="Opaque parameter forwarded to the plugin",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _strip_id(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("id")
    @classmethod
    def _reject_relative_segments(cls, v):
        # The id is appended to the output base as a single path segment
        if v in (".", ".."):
            raise ValueError(f"Plugin id must not be a relative path segment: {v!r}")
        return v

    @field_validator(
        "output_directory",
        "output_base_directory",
        "executable_path",
        "toolchain_name",
        "tool_name",
        "artifact_coordinate",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def has_toolchain(self) -> bool:
        """Toolchain lookup needs both names; a lone name is ignored"""
        return self.toolchain_name is not None and self.tool_name is not None

    def configured_sources(self) -> List[str]:
        """Names of the executable sources configured on this task"""
        sources = []
        if self.executable_path is not None:
            sources.append("executable_path")
        if self.has_toolchain:
            sources.append("toolchain")
        if self.artifact_coordinate is not None:
            sources.append("artifact")
        return sources


class Registry(BaseModel):
    """
    Ordered, sealed collection of extension tasks

    Execution order is configuration order. Ids are unique.
    An empty registry is valid and makes a run a no-op.
    """
    model_config = ConfigDict(frozen=True)

    tasks: Tuple[TaskDescriptor, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _check_unique_ids(self):
        seen = set()
        for task in self.tasks:
            if task.id in seen:
                raise DuplicateTaskId(task.id)
            seen.add(task.id)
        return self

    @classmethod
    def from_records(cls, records: List[Dict[str, Any]]) -> "Registry":
        """Build a registry from raw configuration records"""
        return cls(tasks=tuple(TaskDescriptor.model_validate(record) for record in records))

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self):
        return iter(self.tasks)

    @property
    def is_empty(self) -> bool:
        return not self.tasks

    def get_task(self, task_id: str) -> Optional[TaskDescriptor]:
        """Get task by id"""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


class InvocationSpec(BaseModel):
    """A fully resolved, ready-to-run plugin invocation"""
    model_config = ConfigDict(frozen=True)

    plugin_id: str
    resolved_executable: Path
    resolved_output_directory: Path
    parameter: Optional[str] = None

    @model_validator(mode="after")
    def _require_absolute_paths(self):
        if not self.resolved_executable.is_absolute():
            raise ValueError(f"resolved_executable must be absolute: {self.resolved_executable}")
        if not self.resolved_output_directory.is_absolute():
            raise ValueError(f"resolved_output_directory must be absolute: {self.resolved_output_directory}")
        return self


class ProcessResult(BaseModel):
    """What the process executor reports back"""
    exit_code: int
    stderr_summary: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class TaskOutcome(BaseModel):
    """Result of one task in a run"""
    plugin_id: str
    status: TaskStatus
    error_code: Optional[str] = Field(None, description="Error class name, e.g. NoExecutableConfigured")
    error_message: Optional[str] = None
    exit_code: Optional[int] = None
    stderr_summary: Optional[str] = None
    output_directory: Optional[Path] = None


class RunResult(BaseModel):
    """Aggregated outcome of one orchestration run, in registry order"""
    status: RunStatus
    outcomes: List[TaskOutcome] = Field(default_factory=list)
    nothing_to_do: bool = Field(False, description="True when the registry was empty")

    @property
    def succeeded(self) -> List[TaskOutcome]:
        return [o for o in self.outcomes if o.status == TaskStatus.COMPLETED]

    @property
    def failed(self) -> List[TaskOutcome]:
        return [o for o in self.outcomes if o.status == TaskStatus.FAILED]

    @property
    def skipped(self) -> List[TaskOutcome]:
        return [o for o in self.outcomes if o.status == TaskStatus.SKIPPED]

    def summary(self) -> str:
        if self.nothing_to_do:
            return "No extra plugins to execute."
        return (
            f"{len(self.succeeded)}/{len(self.outcomes)} extra plugins succeeded, "
            f"{len(self.failed)} failed, {len(self.skipped)} skipped"
        )


__all__ = [
    "TaskStatus",
    "RunStatus",
    "TaskDescriptor",
    "Registry",
    "InvocationSpec",
    "ProcessResult",
    "TaskOutcome",
    "RunResult",
]
