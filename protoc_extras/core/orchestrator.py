"""
Orchestrator - Runs the extra plugin Registry

Responsibilities:
- Build one InvocationSpec per task, in registry order
- Reject tasks that share an output directory before anything runs
- Hand each invocation to the process executor, one at a time
- Apply the failure policy (fail-fast or continue-on-error)
- Aggregate per-task outcomes into a RunResult

Per task:   PENDING → RUNNING → COMPLETED | FAILED   (or SKIPPED)
Per run:    NOT_STARTED → IN_PROGRESS → ALL_SUCCEEDED | PARTIAL_FAILURE

The Orchestrator keeps no state between runs.
"""
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Callable, Union

from protoc_extras.errors import (
    ProtocExtrasError,
    MissingOutputBase,
    DuplicateOutputDirectory,
    ProcessExecutionFailed,
)
from protoc_extras.schemas import (
    Registry,
    TaskDescriptor,
    TaskOutcome,
    TaskStatus,
    RunResult,
    RunStatus,
)
from protoc_extras.tools.interfaces import ProcessExecutor
from .invocation_builder import InvocationBuilder

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Orchestrator - executes extra plugins sequentially

    Fail-fast (the default) stops at the first failed task and marks the
    rest SKIPPED. Continue-on-error attempts every task.
    """

    def __init__(
        self,
        invocation_builder: InvocationBuilder,
        process_executor: ProcessExecutor,
        default_output_base: Optional[Union[str, Path]] = None,
        fail_fast: bool = True
    ):
        """
        Initialize Orchestrator

        Args:
            invocation_builder: Builds invocations from tasks
            process_executor: Runs each invocation
            default_output_base: Base directory for tasks without their own output settings
            fail_fast: Abort the run at the first failed task
        """
        self.invocation_builder = invocation_builder
        self.process_executor = process_executor
        self.default_output_base = default_output_base
        self.fail_fast = fail_fast

    def run(
        self,
        registry: Registry,
        progress_callback: Optional[Callable[[str], None]] = None
    ) -> RunResult:
        """
        Run every task in the registry

        Args:
            registry: Sealed, ordered task registry
            progress_callback: Optional callback for progress updates

        Returns:
            RunResult with one outcome per task, in registry order
        """
        def log(msg: str, level: int = logging.INFO):
            if progress_callback:
                progress_callback(msg)
            logger.log(level, f"[Orchestrator] {msg}")

        if registry.is_empty:
            log("No extra plugins to execute.")
            return RunResult(status=RunStatus.ALL_SUCCEEDED, nothing_to_do=True)

        run_status = RunStatus.NOT_STARTED
        log(f"Run {run_status.value} → {RunStatus.IN_PROGRESS.value}: {len(registry)} extra plugins")
        run_status = RunStatus.IN_PROGRESS

        duplicates = self._find_duplicate_output_directories(registry)
        outcomes: List[TaskOutcome] = []

        if duplicates and self.fail_fast:
            for task in registry:
                if task.id in duplicates:
                    outcomes.append(self._failed(task, duplicates[task.id], log))
                else:
                    outcomes.append(self._skipped(task))
            log("✗ Duplicate output directories; aborting before any plugin runs", logging.ERROR)
            return self._finish(outcomes, log)

        aborted = False
        for task in registry:
            if aborted:
                outcomes.append(self._skipped(task))
                continue

            if task.id in duplicates:
                outcome = self._failed(task, duplicates[task.id], log)
            else:
                outcome = self._run_task(task, log)
            outcomes.append(outcome)

            if outcome.status == TaskStatus.FAILED and self.fail_fast:
                log(f"Fail-fast: skipping {len(registry) - len(outcomes)} remaining extra plugins")
                aborted = True

        return self._finish(outcomes, log)

    def _run_task(self, task: TaskDescriptor, log: Callable) -> TaskOutcome:
        """Build and execute a single task"""
        log(f"Extra plugin '{task.id}': {TaskStatus.PENDING.value} → {TaskStatus.RUNNING.value}")

        try:
            invocation = self.invocation_builder.build(task, self.default_output_base)
        except ProtocExtrasError as e:
            return self._failed(task, e, log)

        log(f"Executing '{task.id}' with {invocation.resolved_executable} → {invocation.resolved_output_directory}")

        try:
            result = self.process_executor.execute(invocation)
        except ProcessExecutionFailed as e:
            return self._failed(task, e, log, output_directory=invocation.resolved_output_directory)
        except Exception as e:
            wrapped = ProcessExecutionFailed(f"Extra plugin '{task.id}' failed to run: {e}")
            wrapped.__cause__ = e
            return self._failed(task, wrapped, log, output_directory=invocation.resolved_output_directory)

        if not result.succeeded:
            error = ProcessExecutionFailed(
                f"Extra plugin '{task.id}' exited with code {result.exit_code}",
                exit_code=result.exit_code,
                stderr_summary=result.stderr_summary,
            )
            return self._failed(task, error, log, output_directory=invocation.resolved_output_directory)

        log(f"✓ Completed: '{task.id}'")
        return TaskOutcome(
            plugin_id=task.id,
            status=TaskStatus.COMPLETED,
            exit_code=result.exit_code,
            stderr_summary=result.stderr_summary or None,
            output_directory=invocation.resolved_output_directory,
        )

    def _find_duplicate_output_directories(self, registry: Registry) -> Dict[str, DuplicateOutputDirectory]:
        """
        Map task id → DuplicateOutputDirectory for every task sharing an output directory

        Tasks whose directory cannot be computed are left for the build step,
        which reports MissingOutputBase in order.
        """
        by_directory: Dict[str, List[str]] = {}
        directories: Dict[str, Path] = {}
        for task in registry:
            try:
                directory = self.invocation_builder.output_directory(task, self.default_output_base)
            except MissingOutputBase:
                continue
            key = os.path.normcase(os.path.normpath(str(directory)))
            by_directory.setdefault(key, []).append(task.id)
            directories.setdefault(key, directory)

        duplicates: Dict[str, DuplicateOutputDirectory] = {}
        for key, task_ids in by_directory.items():
            if len(task_ids) < 2:
                continue
            error = DuplicateOutputDirectory(directories[key], task_ids)
            for task_id in task_ids:
                duplicates[task_id] = error
        return duplicates

    @staticmethod
    def _failed(
        task: TaskDescriptor,
        error: ProtocExtrasError,
        log: Callable,
        output_directory: Optional[Path] = None
    ) -> TaskOutcome:
        log(f"✗ Failed: '{task.id}' - {error}", logging.ERROR)
        return TaskOutcome(
            plugin_id=task.id,
            status=TaskStatus.FAILED,
            error_code=type(error).__name__,
            error_message=str(error),
            exit_code=getattr(error, "exit_code", None),
            stderr_summary=getattr(error, "stderr_summary", None) or None,
            output_directory=output_directory,
        )

    @staticmethod
    def _skipped(task: TaskDescriptor) -> TaskOutcome:
        return TaskOutcome(plugin_id=task.id, status=TaskStatus.SKIPPED)

    @staticmethod
    def _finish(outcomes: List[TaskOutcome], log: Callable) -> RunResult:
        if all(o.status == TaskStatus.COMPLETED for o in outcomes):
            status = RunStatus.ALL_SUCCEEDED
        else:
            status = RunStatus.PARTIAL_FAILURE
        result = RunResult(status=status, outcomes=outcomes)
        log(f"Run {RunStatus.IN_PROGRESS.value} → {status.value}: {result.summary()}")
        return result


__all__ = ["Orchestrator"]
