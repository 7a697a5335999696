"""
Generator Tool - Runs a code generator against the IR

Invocation:
    <generator> generate <ir_file> <output_dir> [--flag] [--key=value] ...

The output directory is emptied first so files for removed
definitions do not linger.
"""
import logging
import shutil
from pathlib import Path
from typing import Dict, Any, List, Optional

from conjure_orchestrator.schemas.options_schema import GeneratorOptions
from conjure_orchestrator.tools.exec_tool import run_command

logger = logging.getLogger(__name__)


def render_generator_command(
    executable: Path,
    ir_file: Path,
    output_dir: Path,
    options: Optional[Dict[str, Any]] = None,
    extra_args: Optional[List[str]] = None,
) -> List[str]:
    command = [str(executable), "generate", str(ir_file), str(output_dir)]
    command += GeneratorOptions(properties=dict(options or {})).to_args()
    command += list(extra_args or [])
    return command


def run_generator(
    executable: Path,
    ir_file: Path,
    output_dir: Path,
    options: Optional[Dict[str, Any]] = None,
    extra_args: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Generate code for one target

    Args:
        executable: Extracted generator executable
        ir_file: Compiled IR
        output_dir: Target output directory (cleared first)
        options: Generator options, rendered as command-line flags
        extra_args: Arguments appended after the options

    Returns:
        Dictionary with output_dir on success
    """
    output_dir = Path(output_dir)
    if output_dir.exists():
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    command = render_generator_command(executable, ir_file, output_dir, options, extra_args)
    result = run_command(command)
    if result["status"] != "success":
        return result

    logger.info(f"[Generator] {Path(executable).name} -> {output_dir}")
    return {
        "status": "success",
        "output_dir": str(output_dir),
    }


__all__ = ["run_generator", "render_generator_command"]
