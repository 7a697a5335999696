"""
Extract Tool - Materializes a generator or compiler executable
"""
from pathlib import Path
from typing import Dict, Any

from conjure_orchestrator.core.extractor import ExecutableExtractor
from conjure_orchestrator.errors import ExtractionError


def extract_executable(
    extractor: ExecutableExtractor,
    coordinate: str,
    output_dir: Path,
    executable_name: str,
) -> Dict[str, Any]:
    """
    Extract `coordinate` into output_dir and locate its executable

    Returns:
        Dictionary with output_dir and executable on success,
        or status 'error' with the extraction failure
    """
    try:
        executable = extractor.materialize(coordinate, Path(output_dir), executable_name)
    except ExtractionError as e:
        return {
            "status": "error",
            "error": str(e),
        }

    return {
        "status": "success",
        "output_dir": str(output_dir),
        "executable": str(executable),
    }


__all__ = ["extract_executable"]
