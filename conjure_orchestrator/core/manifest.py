"""
Manifest loading - conjure-project.json -> BuildUnit topology
"""
import json
from pathlib import Path
from typing import Union

from conjure_orchestrator.schemas.manifest_schema import ProjectManifest
from conjure_orchestrator.schemas.project_schema import BuildUnit

MANIFEST_FILENAME = "conjure-project.json"


def load_manifest(path: Union[str, Path]) -> ProjectManifest:
    """
    Load a manifest file (or the manifest inside a project directory)

    A relative project_dir is resolved against the manifest's directory.
    """
    path = Path(path)
    if path.is_dir():
        path = path / MANIFEST_FILENAME
    if not path.exists():
        raise FileNotFoundError(f"Manifest not found: {path}")

    data = json.loads(path.read_text())
    manifest = ProjectManifest(**data)
    project_dir = Path(manifest.project_dir)
    if not project_dir.is_absolute():
        manifest = manifest.model_copy(update={"project_dir": str(path.parent / project_dir)})
    return manifest


def build_topology(manifest: ProjectManifest) -> BuildUnit:
    """Root unit with one child per manifest entry, each in '<project_dir>/<name>'"""
    root_dir = Path(manifest.project_dir)
    root = BuildUnit(
        manifest.name,
        root_dir,
        version=manifest.version,
        plugins=manifest.plugins,
        tasks=manifest.tasks,
    )
    for child in manifest.children:
        BuildUnit(
            child.name,
            root_dir / child.name,
            parent=root,
            version=manifest.version,
            plugins=child.plugins,
            tasks=child.tasks,
        )
    return root


__all__ = ["MANIFEST_FILENAME", "load_manifest", "build_topology"]
