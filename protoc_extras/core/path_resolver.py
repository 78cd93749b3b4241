"""
Path Resolver - Output directory computation

An explicit output directory wins verbatim. Otherwise the plugin id is
appended to the task's base directory override, or to the default base.
Pure path arithmetic: nothing touches the filesystem here.
"""
from pathlib import Path
from typing import Optional, Union

from protoc_extras.errors import MissingOutputBase

PathLike = Union[str, Path]


class PathResolver:
    """Computes the output directory for an extra plugin"""

    def resolve(
        self,
        explicit_dir: Optional[PathLike],
        base_dir_override: Optional[PathLike],
        default_base: Optional[PathLike],
        task_id: str
    ) -> Path:
        """
        Resolve the output directory

        Args:
            explicit_dir: Task's outputDirectory, returned unchanged when set
            base_dir_override: Task's outputBaseDirectory
            default_base: Process-wide default output base
            task_id: Plugin id appended to the effective base

        Returns:
            Output directory path

        Raises:
            MissingOutputBase: If no directory can be computed
        """
        if explicit_dir is not None:
            return Path(explicit_dir)

        effective_base = base_dir_override if base_dir_override is not None else default_base
        if effective_base is None:
            raise MissingOutputBase(task_id)

        return Path(effective_base) / task_id


__all__ = ["PathResolver"]
