"""
Exec Tool - Runs an external command

Every executable the build invokes (the IR compiler, generators,
npm, python) goes through run_command so failures are reported the
same way.
"""
import logging
import subprocess
from pathlib import Path
from typing import Dict, Any, List, Optional

from conjure_orchestrator.config import COMMAND_TIMEOUT

logger = logging.getLogger(__name__)


def run_command(
    command: List[str],
    working_dir: Optional[Path] = None,
    timeout: int = COMMAND_TIMEOUT,
) -> Dict[str, Any]:
    """
    Run a command and capture its output

    Args:
        command: Argument list, executable first
        working_dir: Directory to run in (defaults to the current directory)
        timeout: Seconds before the command is abandoned

    Returns:
        Dictionary with status, exit_code, stdout and stderr
    """
    command = [str(part) for part in command]
    cwd = Path(working_dir) if working_dir else None
    if cwd is not None and not cwd.is_dir():
        return {
            "status": "error",
            "error": f"Working directory does not exist: {cwd}",
        }

    logger.info(f"[Exec] {' '.join(command)}" + (f" (in {cwd})" if cwd else ""))

    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.error(f"[Exec] {command[0]} timed out after {timeout}s")
        return {
            "status": "error",
            "error": f"Command timed out after {timeout} seconds",
        }
    except OSError as e:
        logger.error(f"[Exec] {command[0]} could not be started: {e}")
        return {
            "status": "error",
            "error": str(e),
        }

    if result.returncode != 0:
        logger.error(f"[Exec] {command[0]} failed with exit code {result.returncode}")
        return {
            "status": "error",
            "error": f"Command failed with exit code {result.returncode}: {result.stderr.strip()}",
            "stdout": result.stdout,
            "stderr": result.stderr,
            "exit_code": result.returncode,
        }

    return {
        "status": "success",
        "stdout": result.stdout,
        "stderr": result.stderr,
        "exit_code": 0,
    }


__all__ = ["run_command"]
