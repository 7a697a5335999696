"""
Clean Tool - Deletes declared outputs
"""
import logging
import shutil
from pathlib import Path
from typing import Dict, Any, List

logger = logging.getLogger(__name__)


def clean_outputs(paths: List[Path]) -> Dict[str, Any]:
    """Delete every path in `paths`; missing paths are ignored"""
    removed = []
    for path in map(Path, paths):
        if path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()
        else:
            continue
        removed.append(str(path))
        logger.info(f"[Clean] Removed {path}")

    return {
        "status": "success",
        "removed": removed,
    }


__all__ = ["clean_outputs"]
