"""
Artifact Tool - Resolves plugin binaries from a local repository

Coordinates use the groupId:artifactId:version[:type[:classifier]] form,
with type defaulting to "exe". The artifact is looked up in a
Maven-layout local repository, copied into the plugin install directory
and marked executable.
"""
import os
import shutil
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel

from protoc_extras.errors import InvalidArtifactCoordinate, ArtifactNotFound, ArtifactNotExecutable

logger = logging.getLogger(__name__)

DEFAULT_ARTIFACT_TYPE = "exe"


class ArtifactCoordinate(BaseModel):
    """Parsed dependency coordinate"""
    group_id: str
    artifact_id: str
    version: str
    type: str = DEFAULT_ARTIFACT_TYPE
    classifier: Optional[str] = None

    @classmethod
    def parse(cls, coordinate: str) -> "ArtifactCoordinate":
        """
        Parse a coordinate string

        Raises:
            InvalidArtifactCoordinate: If the string has the wrong shape
        """
        parts = [p.strip() for p in coordinate.strip().split(":")]
        if len(parts) < 3 or len(parts) > 5 or not all(parts):
            raise InvalidArtifactCoordinate(coordinate)
        group_id, artifact_id, version = parts[:3]
        artifact_type = parts[3] if len(parts) > 3 else DEFAULT_ARTIFACT_TYPE
        classifier = parts[4] if len(parts) > 4 else None
        return cls(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            type=artifact_type,
            classifier=classifier,
        )

    @property
    def file_name(self) -> str:
        suffix = f"-{self.classifier}" if self.classifier else ""
        return f"{self.artifact_id}-{self.version}{suffix}.{self.type}"

    def repository_path(self, repository: Path) -> Path:
        """Location of the artifact inside a Maven-layout repository"""
        return (
            Path(repository)
            / Path(*self.group_id.split("."))
            / self.artifact_id
            / self.version
            / self.file_name
        )

    def __str__(self) -> str:
        text = f"{self.group_id}:{self.artifact_id}:{self.version}:{self.type}"
        if self.classifier:
            text += f":{self.classifier}"
        return text


class LocalRepositoryArtifactResolver:
    """Artifact resolver over a local repository directory"""

    def __init__(self, repository: Union[str, Path], install_dir: Union[str, Path]):
        """
        Args:
            repository: Root of the local repository
            install_dir: Where resolved plugin binaries are copied
        """
        self.repository = Path(repository).expanduser()
        self.install_dir = Path(install_dir).absolute()

    def resolve_binary(self, coordinate: str) -> Path:
        """
        Resolve a coordinate to an executable copy of the artifact

        Raises:
            InvalidArtifactCoordinate: If the coordinate cannot be parsed
            ArtifactNotFound: If the artifact is missing from the repository
            ArtifactNotExecutable: If the copy cannot be made executable
        """
        artifact = ArtifactCoordinate.parse(coordinate)
        source = artifact.repository_path(self.repository)
        if not source.is_file():
            raise ArtifactNotFound(coordinate, source)

        target_name = artifact.file_name[: -len(artifact.type) - 1]
        if os.name == "nt":
            target_name += ".exe"
        target = self.install_dir / target_name

        try:
            self.install_dir.mkdir(parents=True, exist_ok=True)
            if not target.exists() or target.stat().st_mtime < source.stat().st_mtime:
                shutil.copy(source, target)
                logger.info(f"[Artifact] Copied {artifact} to {target}")
            # Make executable on Unix
            target.chmod(0o755)
        except OSError as e:
            raise ArtifactNotExecutable(coordinate, target) from e

        if not os.access(target, os.X_OK):
            raise ArtifactNotExecutable(coordinate, target)

        return target


__all__ = ["ArtifactCoordinate", "LocalRepositoryArtifactResolver"]
