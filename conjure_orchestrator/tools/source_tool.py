"""
Source Staging Tool - Mirrors definition files into the build directory

Stale files from a previous run are removed first, so the staging
directory always matches the current source tree exactly.
"""
import logging
import shutil
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger(__name__)


def stage_sources(source_dir: Path, staging_dir: Path, extension: str = ".yml") -> Dict[str, Any]:
    """
    Copy every `extension` file under source_dir into staging_dir

    Args:
        source_dir: Definition source directory (e.g. src/main/conjure)
        staging_dir: Build-private staging directory
        extension: File suffix to copy

    Returns:
        Dictionary with output_dir and the staged file list
    """
    source_dir = Path(source_dir)
    staging_dir = Path(staging_dir)

    if staging_dir.exists():
        shutil.rmtree(staging_dir)
    staging_dir.mkdir(parents=True, exist_ok=True)

    staged = []
    if source_dir.is_dir():
        for path in sorted(source_dir.rglob(f"*{extension}")):
            if not path.is_file():
                continue
            relative = path.relative_to(source_dir)
            target = staging_dir / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, target)
            staged.append(str(relative))
    else:
        logger.warning(f"[Sources] {source_dir} does not exist, staging nothing")

    logger.info(f"[Sources] Staged {len(staged)} file(s) into {staging_dir}")
    return {
        "status": "success",
        "output_dir": str(staging_dir),
        "files": staged,
    }


__all__ = ["stage_sources"]
