"""
Tests for manifest loading
"""
import json

import pytest
from pydantic import ValidationError

from conjure_orchestrator.core.manifest import MANIFEST_FILENAME, build_topology, load_manifest
from conjure_orchestrator.schemas.manifest_schema import ProjectManifest


class TestManifest:
    """Test conjure-project.json -> BuildUnit topology"""

    @pytest.fixture
    def manifest_dir(self, temp_dir):
        data = {
            "name": "foo",
            "version": "2.0.0",
            "plugins": ["idea"],
            "tasks": ["ideaModule"],
            "children": [
                {"name": "foo-objects", "plugins": ["idea"], "tasks": ["ideaModule", "compileJava"]},
                {"name": "foo-typescript", "tasks": ["publish"]},
            ],
            "generators": ["com.example:conjure-rust:1.0.0"],
            "options": {"typescript": {"packageName": "@foo/api"}},
            "product_dependencies": [{
                "productGroup": "com.example",
                "productName": "bar",
                "minimumVersion": "1.0.0",
                "maximumVersion": "1.x.x",
            }],
        }
        (temp_dir / MANIFEST_FILENAME).write_text(json.dumps(data))
        return temp_dir

    def test_load_from_directory(self, manifest_dir):
        manifest = load_manifest(manifest_dir)

        assert manifest.name == "foo"
        assert manifest.project_dir == str(manifest_dir / ".")
        assert manifest.options.typescript.get("packageName") == "@foo/api"
        assert manifest.product_dependencies[0].product_name == "bar"

    def test_missing_manifest(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_manifest(temp_dir)

    def test_build_topology(self, manifest_dir):
        root = build_topology(load_manifest(manifest_dir / MANIFEST_FILENAME))

        assert root.path == ":"
        assert sorted(root.children) == ["foo-objects", "foo-typescript"]
        objects = root.children["foo-objects"]
        assert objects.parent is root
        assert objects.path == ":foo-objects"
        assert objects.build_dir == manifest_dir / "." / "foo-objects" / "build"
        assert objects.declared_tasks == {"ideaModule", "compileJava"}
        assert root.plugins == {"idea"}
        assert objects.version == "2.0.0"

    def test_duplicate_children_rejected(self):
        with pytest.raises(ValidationError):
            ProjectManifest(name="foo", children=[{"name": "foo-objects"}, {"name": "foo-objects"}])
