"""
Core Pipeline Components

These components turn a project topology into a runnable build:
1. Discovery - Units -> language mappings
2. Declarations - Generator dependencies, frozen before use
3. Resolver - Language -> generator dependency
4. Graph Builder - Work items and ordering edges
5. Wiring - Per-target profiles (objects, jersey, typescript, ...)
6. Orchestrator - Runs the configuration session end to end
7. Extractor - Coordinate -> executable on disk
8. Executor - Runs the graph
"""
from .orchestrator import ConfigurationSession, ConjureOrchestrator
from .graph_builder import TaskGraphBuilder
from .resolver import GeneratorResolver
from .integrations import IntegrationRegistry
from .extractor import ArchiveExtractor, ArtifactResolver, ExecutableExtractor
from .executor import Executor
from .manifest import build_topology, load_manifest

__all__ = [
    "ConfigurationSession",
    "ConjureOrchestrator",
    "TaskGraphBuilder",
    "GeneratorResolver",
    "IntegrationRegistry",
    "ArchiveExtractor",
    "ArtifactResolver",
    "ExecutableExtractor",
    "Executor",
    "build_topology",
    "load_manifest",
]
