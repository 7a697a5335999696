"""
Service Dependencies Tool - Writes the declared product dependencies to JSON
"""
import json
from pathlib import Path
from typing import Dict, Any, List


def write_service_dependencies(output_file: Path, product_dependencies: List[Dict[str, Any]]) -> Dict[str, Any]:
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(json.dumps(product_dependencies, indent=2, sort_keys=True) + "\n")
    return {
        "status": "success",
        "output_file": str(output_file),
    }


__all__ = ["write_service_dependencies"]
