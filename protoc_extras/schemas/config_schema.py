"""
Config Schema - Extra plugin configuration file format

A JSON document using the extraPlugins keys of the Maven protobuf plugin:

    {
        "outputBaseDirectory": "target/generated-sources/protobuf",
        "failFast": true,
        "extraPlugins": [
            {"pluginId": "grpc-java", "pluginArtifact": "io.grpc:protoc-gen-grpc-java:1.62.2:exe"},
            {"pluginId": "doc", "pluginExecutable": "/usr/local/bin/protoc-gen-doc", "pluginParameter": "html,index.html"}
        ]
    }

Values missing here fall back to the environment settings in config.py.
"""
import json
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ConfigDict, AliasChoices

from .task_schema import TaskDescriptor, Registry


class ExtrasConfig(BaseModel):
    """Top-level extras configuration document"""
    model_config = ConfigDict(populate_by_name=True)

    extra_plugins: List[TaskDescriptor] = Field(
        default_factory=list,
        validation_alias=AliasChoices("extra_plugins", "extraPlugins"),
    )
    output_base_directory: Optional[Path] = Field(
        None,
        validation_alias=AliasChoices("output_base_directory", "outputBaseDirectory"),
        description="Default base directory for plugins without their own output settings",
    )
    fail_fast: Optional[bool] = Field(
        None,
        validation_alias=AliasChoices("fail_fast", "failFast"),
    )

    def to_registry(self) -> Registry:
        """Seal the configured plugins into a registry"""
        return Registry(tasks=tuple(self.extra_plugins))


def load_extras_config(config_path: Union[str, Path]) -> ExtrasConfig:
    """
    Load and validate an extras configuration file

    Args:
        config_path: Path to the JSON configuration

    Returns:
        Validated ExtrasConfig

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the document is malformed
    """
    config_path = Path(config_path)
    data = json.loads(config_path.read_text())
    return ExtrasConfig.model_validate(data)


__all__ = ["ExtrasConfig", "load_extras_config"]
