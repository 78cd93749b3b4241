"""
Tools for extra plugin orchestration

Concrete collaborators the Orchestrator is wired with outside of tests:
- ProtocExecutor: runs protoc with one extra plugin
- StaticToolchainProvider / ToolchainsFileProvider: toolchain lookups
- LocalRepositoryArtifactResolver: plugin binaries from a local repository

The Protocols they satisfy live in interfaces.py.
"""
from .interfaces import ProcessExecutor, ToolchainProvider, ArtifactResolver
from .protoc_tool import ProtocExecutor
from .toolchain_tool import ToolchainEntry, StaticToolchainProvider, ToolchainsFileProvider
from .artifact_tool import ArtifactCoordinate, LocalRepositoryArtifactResolver

__all__ = [
    "ProcessExecutor",
    "ToolchainProvider",
    "ArtifactResolver",
    "ProtocExecutor",
    "ToolchainEntry",
    "StaticToolchainProvider",
    "ToolchainsFileProvider",
    "ArtifactCoordinate",
    "LocalRepositoryArtifactResolver",
]
