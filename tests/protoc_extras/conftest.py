"""
Shared fixtures
"""
import shutil
import tempfile
from pathlib import Path

import pytest

from fakes import RecordingExecutor, FakeToolchainProvider, FakeArtifactResolver


@pytest.fixture
def temp_dir():
    """Create temporary directory"""
    temp = Path(tempfile.mkdtemp())
    yield temp
    if temp.exists():
        shutil.rmtree(temp)


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def toolchain_provider():
    return FakeToolchainProvider({("protobuf", "protoc-gen-grpc"): Path("/opt/toolchain/protoc-gen-grpc")})


@pytest.fixture
def artifact_resolver():
    return FakeArtifactResolver({"g:a:v": Path("/opt/plugins/protoc-gen-a")})
