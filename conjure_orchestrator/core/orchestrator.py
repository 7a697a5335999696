"""
Orchestrator - Topology -> Task Graph

Responsibilities:
- Discover generation targets under a root unit
- Collect generator declarations until the session is finalized
- Validate everything (names, generators, siblings) before wiring anything
- Build the work item graph: staging, IR, first-class and generic targets

Configuration happens in two explicit phases:

    session = orchestrator.open_session(root)    # DECLARING
    session.declare_generator("com.example:conjure-rust:1.0.0")
    graph = session.finalize()                    # FINALIZED, validated once

Any configuration error aborts finalize() before a graph is returned, so a
partially wired graph is never observable.
"""
import logging
from typing import Callable, Dict, Iterable, Optional, Union

from conjure_orchestrator.core.declarations import DeclarationPhase, GeneratorDeclarations
from conjure_orchestrator.core.discovery import discover, first_class, generic
from conjure_orchestrator.core.graph_builder import TaskGraphBuilder
from conjure_orchestrator.core.integrations import IntegrationRegistry
from conjure_orchestrator.core.manifest import build_topology
from conjure_orchestrator.core.resolver import GeneratorResolver
from conjure_orchestrator.core.wiring import (
    PROFILES,
    WiringContext,
    check_siblings,
    wire_first_class,
    wire_generic,
)
from conjure_orchestrator.schemas.manifest_schema import ProjectManifest
from conjure_orchestrator.schemas.options_schema import ConjureOptions
from conjure_orchestrator.schemas.project_schema import (
    BuildUnit,
    GeneratorDependency,
    ProductDependency,
)
from conjure_orchestrator.schemas.task_schema import TaskGraph

logger = logging.getLogger(__name__)


class ConfigurationSession:
    """
    One configuration pass over one root unit.

    Units are discovered when the session opens; generator dependencies
    may be declared at any point until finalize().
    """

    def __init__(
        self,
        root: BuildUnit,
        options: Optional[ConjureOptions] = None,
        product_dependencies: Iterable[ProductDependency] = (),
        versions: Optional[Dict[str, str]] = None,
        integrations: Optional[IntegrationRegistry] = None,
        resolver: Optional[GeneratorResolver] = None,
    ):
        self.root = root
        self.options = options or ConjureOptions()
        self.product_dependencies = list(product_dependencies)
        self.versions = dict(versions or {})
        self.integrations = integrations or IntegrationRegistry()
        self.resolver = resolver or GeneratorResolver()
        self.declarations = GeneratorDeclarations()
        self.mappings = discover(root)
        self._graph: Optional[TaskGraph] = None

    @property
    def phase(self) -> DeclarationPhase:
        return self.declarations.phase

    def declare_generator(self, dependency: Union[str, GeneratorDependency]) -> GeneratorDependency:
        """Declare a generator dependency (only while DECLARING)"""
        return self.declarations.declare(dependency)

    def finalize(self) -> TaskGraph:
        """
        Freeze declarations, validate, and build the graph

        Returns:
            The validated TaskGraph (the same object on repeated calls)

        Raises:
            MalformedGeneratorName: A declared generator lacks the reserved prefix
            AmbiguousGenerator: Two generators resolve to the same language
            MissingGenerator: A generic unit has no matching generator
            MissingSibling: A target requiring '<root>-objects' found none
        """
        if self._graph is not None:
            return self._graph

        dependencies = self.declarations.finalize()
        logger.info(f"[Orchestrator] {self.root.name}: configuration finalized, validating")

        generic_units = generic(self.mappings)
        generators = self.resolver.resolve(dependencies, generic_units)
        first_class_units = first_class(self.mappings)
        check_siblings(self.root, first_class_units)

        self._graph = self._build(first_class_units, generic_units, generators)
        return self._graph

    def _build(self, first_class_units, generic_units, generators) -> TaskGraph:
        builder = TaskGraphBuilder(self.root, self.versions)

        # Integrations are selected once, before any wiring
        root_integrations = self.integrations.probe(self.root)
        unit_integrations = {
            m.unit.path: self.integrations.probe(m.unit) for m in first_class_units.values()
        }

        staging = builder.build_source_staging()
        compiler = builder.build_compiler_extraction()
        compiled_ir = builder.build_ir_compilation(staging, compiler, self.product_dependencies)
        builder.build_raw_ir(staging, compiler)
        service_dependencies = builder.build_service_dependencies(self.product_dependencies)
        root_integrations.register_generation(builder.graph, builder.generate_all.name)

        context = WiringContext(builder, compiled_ir, self.options, service_dependencies)
        for kind in PROFILES:
            mapping = first_class_units.get(kind)
            if mapping is not None:
                wire_first_class(context, mapping, unit_integrations[mapping.unit.path])

        for mapping in generic_units:
            wire_generic(context, mapping, generators[mapping.identifier])

        return builder.build()


class ConjureOrchestrator:
    """
    Orchestrator - Opens configuration sessions and plans manifests

    This is the entry point used by the planning API.
    """

    def __init__(self, integration_factory: Optional[Callable[[], IntegrationRegistry]] = None):
        self.integration_factory = integration_factory or IntegrationRegistry

    def open_session(
        self,
        root: BuildUnit,
        options: Optional[ConjureOptions] = None,
        product_dependencies: Iterable[ProductDependency] = (),
        versions: Optional[Dict[str, str]] = None,
    ) -> ConfigurationSession:
        return ConfigurationSession(
            root,
            options=options,
            product_dependencies=product_dependencies,
            versions=versions,
            integrations=self.integration_factory(),
        )

    def plan(self, manifest: ProjectManifest) -> TaskGraph:
        """
        Plan a manifest end to end

        Args:
            manifest: Root unit, children, generators and options

        Returns:
            Validated TaskGraph
        """
        root = build_topology(manifest)
        session = self.open_session(
            root,
            options=manifest.options,
            product_dependencies=manifest.product_dependencies,
            versions=manifest.versions,
        )
        for coordinate in manifest.generators:
            session.declare_generator(coordinate)
        return session.finalize()


__all__ = ["ConfigurationSession", "ConjureOrchestrator"]
