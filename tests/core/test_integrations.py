"""
Tests for optional integrations

IDE sync and dependency lint are probed once per unit; a probe that
cannot find its extension point falls back to the no-op variant.
"""
import logging

import pytest

from conjure_orchestrator.core.integrations import (
    ExactDependenciesIntegration,
    IdeSyncIntegration,
    IntegrationRegistry,
    NoDependencyLintIntegration,
    NoIdeIntegration,
)
from conjure_orchestrator.errors import OptionalIntegrationUnavailable
from conjure_orchestrator.schemas.task_schema import TaskGraph, WorkItem


class TestIntegrationRegistry:
    """Test probing and fallback"""

    @pytest.fixture
    def registry(self):
        return IntegrationRegistry()

    def test_no_plugins_selects_no_op(self, registry, make_project):
        root = make_project("foo", "foo-objects")

        selected = registry.probe(root.children["foo-objects"])

        assert len(selected.ide) == 1
        assert isinstance(selected.ide[0], NoIdeIntegration)
        assert isinstance(selected.dependency_lint, NoDependencyLintIntegration)

    def test_idea_plugin_selects_sync(self, registry, make_project):
        root = make_project(
            "foo", "foo-objects",
            plugins={"foo-objects": ["idea", "eclipse"]},
            tasks={"foo-objects": ["ideaModule", "eclipseClasspath"]},
        )

        selected = registry.probe(root.children["foo-objects"])

        assert [i.name for i in selected.ide] == ["eclipse", "idea"]
        assert all(isinstance(i, IdeSyncIntegration) for i in selected.ide)

    def test_missing_extension_point_falls_back(self, registry, make_project, caplog):
        root = make_project("foo", "foo-objects", plugins={"foo-objects": ["idea"]})

        with caplog.at_level(logging.WARNING):
            selected = registry.probe(root.children["foo-objects"])

        assert isinstance(selected.ide[0], NoIdeIntegration)
        assert "ideaModule" in caplog.text

    def test_probe_is_memoized(self, make_project):
        calls = []

        def probe(unit):
            calls.append(unit.path)
            raise OptionalIntegrationUnavailable("idea", "not today")

        registry = IntegrationRegistry(ide_probes={"idea": probe}, lint_probes={})
        root = make_project("foo", "foo-objects", plugins={"foo-objects": ["idea"]})
        unit = root.children["foo-objects"]

        first = registry.probe(unit)
        second = registry.probe(unit)

        assert first is second
        assert calls == [":foo-objects"]


class TestIntegrationVariants:
    """Test what each variant does to the graph"""

    def test_ide_sync_follows_generation(self, make_project):
        root = make_project("foo", "foo-objects")
        unit = root.children["foo-objects"]
        graph = TaskGraph(root_name="foo")
        graph.add(WorkItem(name=":foo-objects:ideaModule", task_type="external"))
        graph.add(WorkItem(name=":compileConjureObjects", task_type="generate"))
        generated = unit.file("src/generated/java")

        IdeSyncIntegration(unit, "idea", "ideaModule", tracks_source_dirs=True).register_generation(
            graph, ":compileConjureObjects", generated
        )

        assert ":compileConjureObjects" in graph.get_task(":foo-objects:ideaModule").dependencies
        assert unit.generated_source_dirs == [generated]

    def test_exact_dependencies_ignores_group_and_name(self, make_project):
        root = make_project("foo", "foo-objects")
        unit = root.children["foo-objects"]
        graph = TaskGraph(root_name="foo")
        graph.add(WorkItem(name=":foo-objects:checkUnusedDependencies", task_type="external"))
        lint = ExactDependenciesIntegration(unit)

        lint.ignore(graph, ["com.google.guava:guava:31.0", "com.google.guava:guava"])

        assert graph.get_task(":foo-objects:checkUnusedDependencies").inputs["ignore"] == [
            "com.google.guava:guava"
        ]
