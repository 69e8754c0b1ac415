"""
File utilities for the OAS generator.

The writer is the only place in the generator that touches the filesystem.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def write_files_to_disk(files: dict[Path, str]) -> None:
    """Write generated files to disk.

    Args:
        files: Dictionary mapping file paths to their content.
    """
    for path, content in files.items():
        path.parent.mkdir(parents=True, exist_ok=True)
        # Keep line endings exactly as rendered so reruns are byte-identical.
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.debug("wrote %s", path)


def get_relative_path(file_path: Path, base_path: Path) -> Path:
    """Get relative path from base_path to file_path.

    Args:
        file_path: Target file path.
        base_path: Base path to calculate relative path from.

    Returns:
        Relative path from base_path to file_path, or the original
        path if it cannot be made relative.
    """
    try:
        return file_path.relative_to(base_path)
    except ValueError:
        return file_path
