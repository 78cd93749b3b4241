"""
Toolchain Tool - Named toolchains of tool locations

A toolchains file lists toolchains by type, each with the tools it provides:

    {
        "toolchains": [
            {
                "type": "protobuf",
                "provides": {"version": "3.25.3"},
                "tools": {"protoc-gen-grpc-java": "/opt/grpc/bin/protoc-gen-grpc-java"}
            }
        ]
    }

The first toolchain of the requested type that knows the tool wins.
A missing toolchain or tool is a miss (None), never an error.
"""
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ToolchainEntry(BaseModel):
    """One toolchain declaration"""
    type: str = Field(..., description="Toolchain name, e.g. 'protobuf'")
    provides: Dict[str, str] = Field(default_factory=dict, description="Free-form requirements metadata")
    tools: Dict[str, Path] = Field(default_factory=dict, description="Tool name → executable path")


class ToolchainsFile(BaseModel):
    """Top-level toolchains document"""
    toolchains: List[ToolchainEntry] = Field(default_factory=list)


class StaticToolchainProvider:
    """Toolchain provider over an in-memory list of toolchains"""

    def __init__(self, toolchains: Optional[List[ToolchainEntry]] = None):
        self.toolchains = list(toolchains or [])

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Dict[str, Union[str, Path]]]) -> "StaticToolchainProvider":
        """Build from {toolchain_name: {tool_name: path}}"""
        return cls([ToolchainEntry(type=name, tools=tools) for name, tools in mapping.items()])

    def find_tool(self, toolchain_name: str, tool_name: str) -> Optional[Path]:
        for toolchain in self.toolchains:
            if toolchain.type != toolchain_name:
                continue
            if tool_name in toolchain.tools:
                logger.info(f"[Toolchain] Toolchain in protoc-extras: {toolchain.type} {toolchain.provides}")
                return toolchain.tools[tool_name]
        return None


class ToolchainsFileProvider(StaticToolchainProvider):
    """Toolchain provider reading a JSON toolchains file"""

    def __init__(self, toolchains_file: Union[str, Path]):
        self.toolchains_file = Path(toolchains_file)
        document = ToolchainsFile.model_validate(json.loads(self.toolchains_file.read_text()))
        super().__init__(document.toolchains)


__all__ = ["ToolchainEntry", "ToolchainsFile", "StaticToolchainProvider", "ToolchainsFileProvider"]
