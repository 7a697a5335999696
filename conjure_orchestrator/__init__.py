"""
Conjure Orchestrator

Wires a multi-target code generation build: API definitions are staged,
compiled into one IR file, and handed to a generator per target unit.
"""
__version__ = "0.1.0"

from .core.orchestrator import ConfigurationSession, ConjureOrchestrator
from .core.executor import Executor
from .core.manifest import build_topology, load_manifest

__all__ = [
    "__version__",
    "ConfigurationSession",
    "ConjureOrchestrator",
    "Executor",
    "build_topology",
    "load_manifest",
]
