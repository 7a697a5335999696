"""
Manifest Schema - Project topology input

A manifest describes what the surrounding build system knows about a
project: the root unit, its children, the generator dependencies declared
for it and the options handed to each generator.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from conjure_orchestrator.schemas.options_schema import ConjureOptions
from conjure_orchestrator.schemas.project_schema import ProductDependency


class UnitManifest(BaseModel):
    """A child unit of the root"""
    name: str = Field(..., min_length=1, description="Unit name, e.g. 'api-objects'")
    plugins: List[str] = Field(default_factory=list, description="Plugins applied to the unit, e.g. 'idea'")
    tasks: List[str] = Field(default_factory=list, description="Work items the build already declares, e.g. 'publish'")


class ProjectManifest(BaseModel):
    """Complete topology and configuration for one root unit"""
    name: str = Field(..., min_length=1, description="Root unit name")
    version: Optional[str] = Field(None, description="Root version, used as the default package version")
    project_dir: str = Field(".", description="Root project directory")
    plugins: List[str] = Field(default_factory=list)
    tasks: List[str] = Field(default_factory=list)
    children: List[UnitManifest] = Field(default_factory=list)

    generators: List[str] = Field(default_factory=list, description="Generator coordinates, 'group:conjure-<lang>:version'")
    options: ConjureOptions = Field(default_factory=ConjureOptions)
    product_dependencies: List[ProductDependency] = Field(default_factory=list)
    versions: Dict[str, str] = Field(default_factory=dict, description="Executable coordinate -> version overrides")

    @field_validator("children")
    @classmethod
    def _unique_children(cls, children: List[UnitManifest]) -> List[UnitManifest]:
        seen = set()
        for child in children:
            if child.name in seen:
                raise ValueError(f"Duplicate unit name: {child.name}")
            seen.add(child.name)
        return children


__all__ = ["UnitManifest", "ProjectManifest"]
