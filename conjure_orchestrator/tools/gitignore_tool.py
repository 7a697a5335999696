"""
Gitignore Tool - Keeps generated output out of version control
"""
from pathlib import Path
from typing import Dict, Any


def write_gitignore(output_dir: Path, contents: str) -> Dict[str, Any]:
    """Write `contents` to output_dir/.gitignore (unchanged files are not rewritten)"""
    output_file = Path(output_dir) / ".gitignore"
    output_file.parent.mkdir(parents=True, exist_ok=True)

    written = False
    if not output_file.exists() or output_file.read_text() != contents:
        output_file.write_text(contents)
        written = True

    return {
        "status": "success",
        "output_file": str(output_file),
        "written": written,
    }


__all__ = ["write_gitignore"]
