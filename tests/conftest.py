"""
Shared fixtures

Topologies are built in memory under a throwaway directory; nothing
touches the filesystem unless a test writes there itself.
"""
import pytest
import tempfile
import shutil
from pathlib import Path

from conjure_orchestrator.core.orchestrator import ConjureOrchestrator
from conjure_orchestrator.schemas.project_schema import BuildUnit


@pytest.fixture
def temp_dir():
    """Create temporary directory"""
    temp = Path(tempfile.mkdtemp())
    yield temp
    if temp.exists():
        shutil.rmtree(temp)


@pytest.fixture
def make_project(temp_dir):
    """
    Factory for a root unit and its children

    Usage:
        root = make_project("foo", "foo-objects", plugins={"foo-objects": ["idea"]},
                            tasks={"foo-objects": ["ideaModule"]})
    """
    def factory(root_name, *children, plugins=None, tasks=None, version="1.2.3"):
        plugins = plugins or {}
        tasks = tasks or {}
        root = BuildUnit(
            root_name,
            temp_dir / root_name,
            version=version,
            plugins=plugins.get(root_name, ()),
            tasks=tasks.get(root_name, ()),
        )
        for child in children:
            BuildUnit(
                child,
                root.project_dir / child,
                parent=root,
                version=version,
                plugins=plugins.get(child, ()),
                tasks=tasks.get(child, ()),
            )
        return root

    return factory


@pytest.fixture
def orchestrator():
    return ConjureOrchestrator()


@pytest.fixture
def configure(orchestrator):
    """Open a session, declare generators, finalize; returns (session, graph)"""
    def run(root, *generators, **session_kwargs):
        session = orchestrator.open_session(root, **session_kwargs)
        for coordinate in generators:
            session.declare_generator(coordinate)
        return session, session.finalize()

    return run
