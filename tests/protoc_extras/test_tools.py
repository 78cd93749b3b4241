"""
Tests for Tools

Test the concrete collaborators: protoc runner, toolchains, local repository.
"""
import json
import os
import sys
from pathlib import Path

import pytest

from protoc_extras.errors import (
    InvalidArtifactCoordinate,
    ArtifactNotFound,
    ArtifactNotExecutable,
    ProcessExecutionFailed,
)
from protoc_extras.schemas import InvocationSpec
from protoc_extras.tools import (
    ArtifactCoordinate,
    LocalRepositoryArtifactResolver,
    ProtocExecutor,
    StaticToolchainProvider,
    ToolchainsFileProvider,
    ProcessExecutor,
    ToolchainProvider,
    ArtifactResolver,
)

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses a shell script as protoc")


def write_script(path: Path, body: str) -> Path:
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(0o755)
    return path


class TestArtifactCoordinate:
    """Test coordinate parsing"""

    def test_parse_defaults_type_to_exe(self):
        artifact = ArtifactCoordinate.parse("io.grpc:protoc-gen-grpc-java:1.62.2")
        assert artifact.group_id == "io.grpc"
        assert artifact.artifact_id == "protoc-gen-grpc-java"
        assert artifact.version == "1.62.2"
        assert artifact.type == "exe"
        assert artifact.classifier is None

    def test_parse_with_classifier(self):
        artifact = ArtifactCoordinate.parse("io.grpc:protoc-gen-grpc-java:1.62.2:exe:linux-x86_64")
        assert artifact.classifier == "linux-x86_64"
        assert artifact.file_name == "protoc-gen-grpc-java-1.62.2-linux-x86_64.exe"
        assert str(artifact) == "io.grpc:protoc-gen-grpc-java:1.62.2:exe:linux-x86_64"

    @pytest.mark.parametrize("coordinate", ["", "g:a", "g::v", "g:a:v:t:c:extra"])
    def test_invalid_coordinates(self, coordinate):
        with pytest.raises(InvalidArtifactCoordinate):
            ArtifactCoordinate.parse(coordinate)

    def test_repository_path_uses_maven_layout(self):
        artifact = ArtifactCoordinate.parse("io.grpc:protoc-gen-grpc-java:1.62.2")
        path = artifact.repository_path(Path("/repo"))
        assert path == Path("/repo/io/grpc/protoc-gen-grpc-java/1.62.2/protoc-gen-grpc-java-1.62.2.exe")


class TestLocalRepositoryArtifactResolver:
    """Test local repository resolution"""

    @pytest.fixture
    def repository(self, temp_dir):
        repo = temp_dir / "repo"
        artifact_dir = repo / "com" / "example" / "protoc-gen-demo" / "1.0"
        artifact_dir.mkdir(parents=True)
        (artifact_dir / "protoc-gen-demo-1.0.exe").write_bytes(b"binary")
        return repo

    def test_resolves_and_installs_executable(self, repository, temp_dir):
        resolver = LocalRepositoryArtifactResolver(repository, temp_dir / "plugins")

        path = resolver.resolve_binary("com.example:protoc-gen-demo:1.0")

        assert path.is_absolute()
        assert path.parent == (temp_dir / "plugins").absolute()
        assert path.read_bytes() == b"binary"
        if os.name != "nt":
            assert os.access(path, os.X_OK)

    def test_missing_artifact(self, repository, temp_dir):
        resolver = LocalRepositoryArtifactResolver(repository, temp_dir / "plugins")
        with pytest.raises(ArtifactNotFound) as exc_info:
            resolver.resolve_binary("com.example:protoc-gen-demo:2.0")
        assert exc_info.value.coordinate == "com.example:protoc-gen-demo:2.0"

    def test_copy_without_execute_permission(self, repository, temp_dir, monkeypatch):
        monkeypatch.setattr("protoc_extras.tools.artifact_tool.os.access", lambda path, mode: False)
        resolver = LocalRepositoryArtifactResolver(repository, temp_dir / "plugins")

        with pytest.raises(ArtifactNotExecutable) as exc_info:
            resolver.resolve_binary("com.example:protoc-gen-demo:1.0")

        assert exc_info.value.coordinate == "com.example:protoc-gen-demo:1.0"
        assert exc_info.value.path.parent == (temp_dir / "plugins").absolute()

    def test_chmod_failure(self, repository, temp_dir, monkeypatch):
        def refuse_chmod(self, mode):
            raise PermissionError("read-only file system")

        monkeypatch.setattr(Path, "chmod", refuse_chmod)
        resolver = LocalRepositoryArtifactResolver(repository, temp_dir / "plugins")

        with pytest.raises(ArtifactNotExecutable) as exc_info:
            resolver.resolve_binary("com.example:protoc-gen-demo:1.0")

        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_satisfies_protocol(self, repository, temp_dir):
        assert isinstance(LocalRepositoryArtifactResolver(repository, temp_dir), ArtifactResolver)


class TestToolchainProviders:
    """Test toolchain lookups"""

    def test_static_provider_hit_and_miss(self):
        provider = StaticToolchainProvider.from_mapping({"protobuf": {"protoc-gen-grpc": "/opt/grpc"}})
        assert provider.find_tool("protobuf", "protoc-gen-grpc") == Path("/opt/grpc")
        assert provider.find_tool("protobuf", "other") is None
        assert provider.find_tool("jdk", "protoc-gen-grpc") is None
        assert isinstance(provider, ToolchainProvider)

    def test_toolchains_file(self, temp_dir):
        toolchains_file = temp_dir / "toolchains.json"
        toolchains_file.write_text(json.dumps({
            "toolchains": [
                {"type": "protobuf", "provides": {"version": "3.0"}, "tools": {"protoc-gen-a": "/old/a"}},
                {"type": "protobuf", "provides": {"version": "4.0"}, "tools": {"protoc-gen-b": "/new/b"}},
            ]
        }))

        provider = ToolchainsFileProvider(toolchains_file)

        assert provider.find_tool("protobuf", "protoc-gen-a") == Path("/old/a")
        assert provider.find_tool("protobuf", "protoc-gen-b") == Path("/new/b")


class TestProtocExecutor:
    """Test the protoc runner"""

    @pytest.fixture
    def proto_root(self, temp_dir):
        root = temp_dir / "proto"
        (root / "pkg").mkdir(parents=True)
        (root / "pkg" / "b.proto").write_text('syntax = "proto3";\n')
        (root / "a.proto").write_text('syntax = "proto3";\n')
        return root

    def make_invocation(self, temp_dir, parameter=None):
        return InvocationSpec(
            plugin_id="demo",
            resolved_executable=Path("/opt/protoc-gen-demo"),
            resolved_output_directory=temp_dir / "out" / "demo",
            parameter=parameter,
        )

    def test_build_command(self, proto_root, temp_dir):
        executor = ProtocExecutor("protoc", proto_root, include_paths=[temp_dir / "include"])
        invocation = self.make_invocation(temp_dir, parameter="lite")

        cmd = executor.build_command(invocation, executor.find_proto_files())

        assert cmd == [
            "protoc",
            f"--proto_path={proto_root.absolute()}",
            f"--proto_path={(temp_dir / 'include').absolute()}",
            "--plugin=protoc-gen-demo=/opt/protoc-gen-demo",
            f"--demo_out=lite:{temp_dir / 'out' / 'demo'}",
            str(proto_root.absolute() / "a.proto"),
            str(proto_root.absolute() / "pkg" / "b.proto"),
        ]
        assert isinstance(executor, ProcessExecutor)

    def test_no_proto_files_is_a_no_op(self, temp_dir):
        executor = ProtocExecutor("does-not-exist", temp_dir / "empty")

        result = executor.execute(self.make_invocation(temp_dir))

        assert result.exit_code == 0
        assert not (temp_dir / "out" / "demo").exists()

    @posix_only
    def test_execute_creates_output_directory(self, proto_root, temp_dir):
        protoc = write_script(temp_dir / "protoc", 'echo "$@" > args.txt')
        executor = ProtocExecutor(str(protoc), proto_root)

        result = executor.execute(self.make_invocation(temp_dir))

        out_dir = temp_dir / "out" / "demo"
        assert result.succeeded
        assert out_dir.is_dir()
        assert "--plugin=protoc-gen-demo=/opt/protoc-gen-demo" in (out_dir / "args.txt").read_text()

    @posix_only
    def test_execute_reports_non_zero_exit(self, proto_root, temp_dir):
        protoc = write_script(temp_dir / "protoc", 'echo "demo: bad option" >&2\nexit 1')
        executor = ProtocExecutor(str(protoc), proto_root)

        result = executor.execute(self.make_invocation(temp_dir))

        assert result.exit_code == 1
        assert "bad option" in result.stderr_summary

    def test_launch_failure(self, proto_root, temp_dir):
        executor = ProtocExecutor(str(temp_dir / "missing-protoc"), proto_root)
        with pytest.raises(ProcessExecutionFailed):
            executor.execute(self.make_invocation(temp_dir))
