"""
Optional Integrations - IDE sync and dependency lint

Each optional add-on is a capability with two variants: a concrete one,
used when the add-on is present on a unit, and a no-op one. The registry
probes a unit once, before any wiring, and hands the selected variants to
the wiring code; business logic never checks for plugins itself.

A probe that finds the add-on but not its extension point raises
OptionalIntegrationUnavailable; the registry logs it and falls back to
the no-op variant.
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from conjure_orchestrator.errors import OptionalIntegrationUnavailable
from conjure_orchestrator.schemas.project_schema import BuildUnit
from conjure_orchestrator.schemas.task_schema import TaskGraph

logger = logging.getLogger(__name__)

IDEA_PLUGIN = "idea"
ECLIPSE_PLUGIN = "eclipse"
EXACT_DEPENDENCIES_PLUGIN = "com.palantir.baseline-exact-dependencies"


class IdeIntegration(ABC):
    """Keeps an IDE's project model in sync with generated sources"""

    name = "ide"

    @abstractmethod
    def register_generation(self, graph: TaskGraph, generation_task: str, generated_dir: Optional[Path]):
        """Make the IDE sync operation run after `generation_task`"""


class IdeSyncIntegration(IdeIntegration):
    """An IDE plugin whose sync work item must follow generation"""

    def __init__(self, unit: BuildUnit, plugin: str, sync_task: str, tracks_source_dirs: bool = False):
        self.unit = unit
        self.name = plugin
        self.sync_task = unit.task_path(sync_task)
        self.tracks_source_dirs = tracks_source_dirs

    def register_generation(self, graph: TaskGraph, generation_task: str, generated_dir: Optional[Path]):
        graph.add_edge(self.sync_task, generation_task)
        if self.tracks_source_dirs and generated_dir is not None:
            self.unit.add_source_dir(generated_dir)
            if generated_dir not in self.unit.generated_source_dirs:
                self.unit.generated_source_dirs.append(generated_dir)


class NoIdeIntegration(IdeIntegration):

    def register_generation(self, graph: TaskGraph, generation_task: str, generated_dir: Optional[Path]):
        pass


class DependencyLintIntegration(ABC):
    """Tells an unused-dependency check to leave generator runtime libraries alone"""

    name = "dependency-lint"

    @abstractmethod
    def ignore(self, graph: TaskGraph, notations: Iterable[str]):
        pass


class ExactDependenciesIntegration(DependencyLintIntegration):

    name = EXACT_DEPENDENCIES_PLUGIN

    def __init__(self, unit: BuildUnit, check_task: str = "checkUnusedDependencies"):
        self.unit = unit
        self.check_task = unit.task_path(check_task)

    def ignore(self, graph: TaskGraph, notations: Iterable[str]):
        task = graph.get_task(self.check_task)
        ignored = task.inputs.setdefault("ignore", [])
        for notation in notations:
            group_and_name = ":".join(notation.split(":")[:2])
            if group_and_name not in ignored:
                ignored.append(group_and_name)


class NoDependencyLintIntegration(DependencyLintIntegration):

    def ignore(self, graph: TaskGraph, notations: Iterable[str]):
        pass


class UnitIntegrations:
    """The integration variants selected for one unit"""

    def __init__(self, ide: List[IdeIntegration], dependency_lint: DependencyLintIntegration):
        self.ide = ide
        self.dependency_lint = dependency_lint

    def register_generation(self, graph: TaskGraph, generation_task: str, generated_dir: Optional[Path] = None):
        for integration in self.ide:
            integration.register_generation(graph, generation_task, generated_dir)


def _require_task(unit: BuildUnit, plugin: str, task_name: str):
    if task_name not in unit.declared_tasks:
        raise OptionalIntegrationUnavailable(plugin, f"{unit.path} has no '{task_name}' task")


def probe_idea(unit: BuildUnit) -> IdeIntegration:
    _require_task(unit, IDEA_PLUGIN, "ideaModule")
    return IdeSyncIntegration(unit, IDEA_PLUGIN, "ideaModule", tracks_source_dirs=True)


def probe_eclipse(unit: BuildUnit) -> IdeIntegration:
    _require_task(unit, ECLIPSE_PLUGIN, "eclipseClasspath")
    return IdeSyncIntegration(unit, ECLIPSE_PLUGIN, "eclipseClasspath")


def probe_exact_dependencies(unit: BuildUnit) -> DependencyLintIntegration:
    _require_task(unit, EXACT_DEPENDENCIES_PLUGIN, "checkUnusedDependencies")
    return ExactDependenciesIntegration(unit)


class IntegrationRegistry:
    """
    Probes units for optional integrations

    Probes are keyed by plugin id and only run when the unit carries
    that plugin.
    """

    def __init__(
        self,
        ide_probes: Optional[Dict[str, Callable[[BuildUnit], IdeIntegration]]] = None,
        lint_probes: Optional[Dict[str, Callable[[BuildUnit], DependencyLintIntegration]]] = None,
    ):
        self.ide_probes = ide_probes if ide_probes is not None else {
            IDEA_PLUGIN: probe_idea,
            ECLIPSE_PLUGIN: probe_eclipse,
        }
        self.lint_probes = lint_probes if lint_probes is not None else {
            EXACT_DEPENDENCIES_PLUGIN: probe_exact_dependencies,
        }
        self._selected: Dict[str, UnitIntegrations] = {}

    def probe(self, unit: BuildUnit) -> UnitIntegrations:
        """Select integration variants for `unit` (memoized per unit path)"""
        if unit.path in self._selected:
            return self._selected[unit.path]

        ide: List[IdeIntegration] = []
        for plugin in sorted(self.ide_probes):
            if plugin not in unit.plugins:
                continue
            integration = self._try(unit, plugin, self.ide_probes[plugin])
            if integration is not None:
                ide.append(integration)

        lint: DependencyLintIntegration = NoDependencyLintIntegration()
        for plugin in sorted(self.lint_probes):
            if plugin not in unit.plugins:
                continue
            integration = self._try(unit, plugin, self.lint_probes[plugin])
            if integration is not None:
                lint = integration
                break

        selected = UnitIntegrations(ide or [NoIdeIntegration()], lint)
        self._selected[unit.path] = selected
        return selected

    def _try(self, unit: BuildUnit, plugin: str, probe: Callable):
        try:
            return probe(unit)
        except OptionalIntegrationUnavailable as e:
            logger.warning(f"[Integrations] Skipping optional integration for {unit.path}: {e}")
            return None


__all__ = [
    "IdeIntegration",
    "IdeSyncIntegration",
    "NoIdeIntegration",
    "DependencyLintIntegration",
    "ExactDependenciesIntegration",
    "NoDependencyLintIntegration",
    "UnitIntegrations",
    "IntegrationRegistry",
]
