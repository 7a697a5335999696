"""
Schemas for the build orchestrator

These schemas define the contracts between stages:
- Project: Build units, dependencies, language mappings
- Options: Generator option sets
- Task: Work item graph
- Manifest: Topology input
"""
from .project_schema import (
    BuildUnit,
    GeneratorDependency,
    LanguageMapping,
    LibraryDependency,
    ProductDependency,
    TargetKind,
)
from .options_schema import ConjureOptions, GeneratorOptions
from .task_schema import TaskGraph, TaskStatus, ToolCall, WorkItem
from .manifest_schema import ProjectManifest, UnitManifest
from .plan_schema import PlanResponse, WorkItemView

__all__ = [
    # Project
    "BuildUnit",
    "GeneratorDependency",
    "LanguageMapping",
    "LibraryDependency",
    "ProductDependency",
    "TargetKind",
    # Options
    "ConjureOptions",
    "GeneratorOptions",
    # Task graph
    "TaskGraph",
    "TaskStatus",
    "ToolCall",
    "WorkItem",
    # Manifest
    "ProjectManifest",
    "UnitManifest",
    "PlanResponse",
    "WorkItemView",
]
