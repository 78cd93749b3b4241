"""
Main Pipeline - Runs the configured extra protoc plugins

This module wires together all components:
ExtrasConfig → Registry → InvocationBuilder (ExecutableResolver + PathResolver)
→ Orchestrator → ProtocExecutor

It is also the host-integration layer: it renders the RunResult to the
log and translates it into a process exit code.

Usage:
    pipeline = ExtrasPipeline(config_path="protoc-extras.json")
    result = pipeline.run()
"""
import sys
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Callable, Union

from pydantic import ValidationError

from protoc_extras import config
from protoc_extras.errors import ConfigurationError
from protoc_extras.core import ExecutableResolver, InvocationBuilder, Orchestrator
from protoc_extras.schemas import ExtrasConfig, Registry, RunResult, RunStatus, load_extras_config
from protoc_extras.tools import (
    ProcessExecutor,
    ProtocExecutor,
    ToolchainProvider,
    ToolchainsFileProvider,
    ArtifactResolver,
    LocalRepositoryArtifactResolver,
)

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_PARTIAL_FAILURE = 1
EXIT_CONFIGURATION_ERROR = 2


class PipelineError(Exception):
    """Raised when the pipeline cannot be configured"""
    pass


class ExtrasPipeline:
    """
    Complete extra plugin pipeline

    Collaborators default to the concrete tools configured through
    environment settings; pass your own to override any of them.
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        extras_config: Optional[ExtrasConfig] = None,
        base_dir: Optional[Path] = None,
        process_executor: Optional[ProcessExecutor] = None,
        toolchain_provider: Optional[ToolchainProvider] = None,
        artifact_resolver: Optional[ArtifactResolver] = None
    ):
        """
        Initialize pipeline

        Args:
            config_path: JSON extras configuration file
            extras_config: Already-loaded configuration (wins over config_path)
            base_dir: Project directory relative paths are anchored to (defaults to cwd)
            process_executor: Runs each invocation (defaults to ProtocExecutor)
            toolchain_provider: Toolchain lookups (defaults to TOOLCHAINS_FILE, if set)
            artifact_resolver: Artifact lookups (defaults to LOCAL_REPOSITORY)
        """
        self.config_path = Path(config_path) if config_path else None
        self.extras_config = extras_config
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()

        self.process_executor = process_executor or ProtocExecutor(
            protoc_executable=config.PROTOC_EXECUTABLE,
            proto_source_root=self.base_dir / config.PROTO_SOURCE_ROOT,
            include_paths=[self.base_dir / p for p in config.PROTO_INCLUDE_PATHS],
            timeout=config.PROTOC_TIMEOUT,
        )
        if toolchain_provider is None and config.TOOLCHAINS_FILE:
            try:
                toolchain_provider = ToolchainsFileProvider(config.TOOLCHAINS_FILE)
            except (OSError, ValueError, ValidationError) as e:
                raise PipelineError(f"Cannot load toolchains file {config.TOOLCHAINS_FILE}: {e}") from e
        self.toolchain_provider = toolchain_provider
        self.artifact_resolver = artifact_resolver or LocalRepositoryArtifactResolver(
            repository=config.LOCAL_REPOSITORY,
            install_dir=self.base_dir / config.PLUGIN_INSTALL_DIR,
        )

        # Execution log
        self.execution_log = []

    def load_config(self) -> ExtrasConfig:
        """Return the extras configuration, loading it from disk if needed"""
        if self.extras_config is not None:
            return self.extras_config
        if self.config_path is None:
            return ExtrasConfig()
        try:
            return load_extras_config(self.config_path)
        except (OSError, ValueError, ValidationError) as e:
            raise PipelineError(f"Cannot load extras configuration {self.config_path}: {e}") from e

    def build_orchestrator(self, extras_config: ExtrasConfig) -> Orchestrator:
        """Wire resolvers, builder and executor into an Orchestrator"""
        executable_resolver = ExecutableResolver(
            toolchain_provider=self.toolchain_provider,
            artifact_resolver=self.artifact_resolver,
            working_dir=self.base_dir,
        )
        builder = InvocationBuilder(executable_resolver, base_dir=self.base_dir)

        fail_fast = config.EXTRAS_FAIL_FAST if extras_config.fail_fast is None else extras_config.fail_fast
        return Orchestrator(
            invocation_builder=builder,
            process_executor=self.process_executor,
            default_output_base=extras_config.output_base_directory or config.EXTRAS_OUTPUT_BASE_DIR,
            fail_fast=fail_fast,
        )

    def run(self, progress_callback: Optional[Callable[[str], None]] = None) -> Dict[str, Any]:
        """
        Run every configured extra plugin

        Args:
            progress_callback: Optional callback for progress updates (msg: str) -> None

        Returns:
            Dictionary with status, exit code, summary and the RunResult

        Raises:
            PipelineError: If the configuration cannot be loaded or sealed
        """
        self.execution_log = []

        def log(msg: str):
            self.execution_log.append(msg)
            if progress_callback:
                progress_callback(msg)

        extras_config = self.load_config()
        try:
            registry: Registry = extras_config.to_registry()
        except ConfigurationError as e:
            raise PipelineError(str(e)) from e

        orchestrator = self.build_orchestrator(extras_config)
        result = orchestrator.run(registry, progress_callback=log)

        for outcome in result.failed:
            logger.error(f"[Pipeline] {outcome.plugin_id}: {outcome.error_code}: {outcome.error_message}")
            if outcome.stderr_summary:
                logger.error(f"[Pipeline] {outcome.plugin_id} stderr: {outcome.stderr_summary}")
        logger.info(f"[Pipeline] {result.summary()}")

        return {
            "status": "success" if result.status == RunStatus.ALL_SUCCEEDED else "error",
            "exit_code": exit_code_for(result),
            "summary": result.summary(),
            "result": result,
            "execution_log": list(self.execution_log),
        }


def exit_code_for(result: RunResult) -> int:
    """Translate a RunResult into a process exit code"""
    if result.status == RunStatus.ALL_SUCCEEDED:
        return EXIT_SUCCESS
    return EXIT_PARTIAL_FAILURE


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.INFO)

    config_path = argv[0] if argv else "protoc-extras.json"
    try:
        outcome = ExtrasPipeline(config_path=config_path).run()
    except (PipelineError, ConfigurationError) as e:
        logger.error(f"[Pipeline] {e}")
        return EXIT_CONFIGURATION_ERROR
    return outcome["exit_code"]


__all__ = ["ExtrasPipeline", "PipelineError", "exit_code_for", "main"]


if __name__ == "__main__":
    sys.exit(main())
