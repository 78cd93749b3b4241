"""
Protoc Tool - Runs protoc with one extra plugin

This tool is the ProcessExecutor used outside of tests. For each
invocation it creates the output directory, then runs:

    protoc --proto_path=<root> [--proto_path=<include> ...]
           --plugin=protoc-gen-<id>=<executable>
           --<id>_out=[<parameter>:]<output directory>
           <sorted .proto files under the source root>
"""
import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Callable, Sequence

from protoc_extras.errors import ProcessExecutionFailed
from protoc_extras.schemas import InvocationSpec, ProcessResult

logger = logging.getLogger(__name__)

STDERR_SUMMARY_CHARS = 1000


class ProtocExecutor:
    """Runs the protoc compiler for a resolved invocation"""

    def __init__(
        self,
        protoc_executable: str = "protoc",
        proto_source_root: Path = Path("src/main/proto"),
        include_paths: Optional[Sequence[Path]] = None,
        timeout: int = 300,
        progress_callback: Optional[Callable[[str], None]] = None
    ):
        """
        Initialize ProtocExecutor

        Args:
            protoc_executable: protoc binary name or path
            proto_source_root: Directory searched for .proto files
            include_paths: Extra --proto_path entries
            timeout: Seconds before a protoc run is abandoned
            progress_callback: Optional callback for progress updates
        """
        self.protoc_executable = str(protoc_executable)
        self.proto_source_root = Path(proto_source_root).absolute()
        self.include_paths = [Path(p).absolute() for p in (include_paths or [])]
        self.timeout = timeout
        self.progress_callback = progress_callback

    def _log(self, msg: str, level: int = logging.INFO):
        if self.progress_callback:
            self.progress_callback(msg)
        logger.log(level, f"[Protoc] {msg}")

    def find_proto_files(self) -> List[Path]:
        """All .proto files under the source root, sorted for a stable command line"""
        if not self.proto_source_root.is_dir():
            return []
        return sorted(self.proto_source_root.rglob("*.proto"))

    def build_command(self, invocation: InvocationSpec, proto_files: Sequence[Path]) -> List[str]:
        """Assemble the protoc argument list for one plugin"""
        plugin_id = invocation.plugin_id
        out_dir = str(invocation.resolved_output_directory)
        if invocation.parameter:
            out_dir = f"{invocation.parameter}:{out_dir}"

        cmd = [self.protoc_executable, f"--proto_path={self.proto_source_root}"]
        cmd.extend(f"--proto_path={path}" for path in self.include_paths)
        cmd.append(f"--plugin=protoc-gen-{plugin_id}={invocation.resolved_executable}")
        cmd.append(f"--{plugin_id}_out={out_dir}")
        cmd.extend(str(f) for f in proto_files)
        return cmd

    def execute(self, invocation: InvocationSpec) -> ProcessResult:
        """
        Run protoc for one extra plugin

        Args:
            invocation: Resolved invocation

        Returns:
            ProcessResult with exit code and the tail of stderr

        Raises:
            ProcessExecutionFailed: If protoc cannot be launched or times out
        """
        proto_files = self.find_proto_files()
        if not proto_files:
            self._log(f"No proto files to compile in {self.proto_source_root}")
            return ProcessResult(exit_code=0, stderr_summary="")

        output_dir = invocation.resolved_output_directory
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ProcessExecutionFailed(f"Cannot create output directory {output_dir}: {e}") from e

        cmd = self.build_command(invocation, proto_files)
        self._log(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                cwd=output_dir,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise ProcessExecutionFailed(
                f"protoc timed out after {self.timeout} seconds for '{invocation.plugin_id}'"
            ) from e
        except OSError as e:
            raise ProcessExecutionFailed(
                f"Failed to launch {self.protoc_executable} for '{invocation.plugin_id}': {e}"
            ) from e

        stderr_summary = (result.stderr or "")[-STDERR_SUMMARY_CHARS:]
        if result.returncode != 0:
            self._log(f"✗ protoc failed with exit code {result.returncode}", logging.ERROR)
            self._log("STDERR:" + stderr_summary, logging.ERROR)
        else:
            self._log(f"✓ Generated sources for '{invocation.plugin_id}' in {output_dir}")

        return ProcessResult(exit_code=result.returncode, stderr_summary=stderr_summary)


__all__ = ["ProtocExecutor"]
