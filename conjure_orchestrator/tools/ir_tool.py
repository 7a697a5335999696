"""
IR Tool - Compiles staged definitions into a single IR file

Invocation:
    <conjure> compile <input_dir> <output_file> [--extensions <json>]

Recommended product dependencies are embedded as the
'recommended-product-dependencies' extension.
"""
import json
from pathlib import Path
from typing import Dict, Any, List, Optional

from conjure_orchestrator.tools.exec_tool import run_command


def compile_ir(
    executable: Path,
    input_dir: Path,
    output_file: Path,
    product_dependencies: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Run the IR compiler

    Returns:
        Dictionary with ir_file on success
    """
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    command = [str(executable), "compile", str(input_dir), str(output_file)]
    if product_dependencies:
        extensions = {"recommended-product-dependencies": product_dependencies}
        command += ["--extensions", json.dumps(extensions, sort_keys=True)]

    result = run_command(command)
    if result["status"] != "success":
        return result

    return {
        "status": "success",
        "ir_file": str(output_file),
    }


__all__ = ["compile_ir"]
