"""
Project Schema - Build topology

These types describe the project topology handed to us by the surrounding
build system:
- BuildUnit: a buildable subtree (root unit plus its child units)
- LibraryDependency: a dependency a wiring step adds to a unit
- GeneratorDependency: a coordinate declared into the generators configuration
- ProductDependency: a recommended service dependency embedded in the IR
- LanguageMapping: a discovered unit paired with its target kind
"""
import weakref
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from conjure_orchestrator.config import BUILD_DIRNAME
from conjure_orchestrator.errors import InvalidCoordinate


class TargetKind(str, Enum):
    """First-class generation targets with bespoke wiring"""
    OBJECTS = "objects"
    JERSEY = "jersey"
    RETROFIT = "retrofit"
    UNDERTOW = "undertow"
    DIALOGUE = "dialogue"
    TYPESCRIPT = "typescript"
    PYTHON = "python"


class LibraryDependency(BaseModel):
    """A dependency added to a unit's configuration (e.g. api, compileOnly)"""
    model_config = ConfigDict(frozen=True)

    configuration: str = Field(..., description="Configuration name, e.g. 'api' or 'compileOnly'")
    notation: str = Field(..., description="group:name[:version] or a unit path for project dependencies")
    project: bool = Field(False, description="True when notation refers to another unit")


class GeneratorDependency(BaseModel):
    """A generator coordinate declared into the generators configuration"""
    model_config = ConfigDict(frozen=True)

    group: str = Field("", description="Artifact group")
    name: str = Field(..., description="Artifact name, expected to carry the reserved prefix")
    version: Optional[str] = Field(None)
    extension: Optional[str] = Field(None, description="Archive extension, e.g. 'tgz'")

    @classmethod
    def parse(cls, coordinate: str) -> "GeneratorDependency":
        """
        Parse 'group:name[:version][@ext]' (a bare 'name' is accepted too)

        Raises:
            InvalidCoordinate: If there are too many parts or the name is empty
        """
        original = coordinate
        extension = None
        if "@" in coordinate:
            coordinate, extension = coordinate.rsplit("@", 1)
        parts = coordinate.split(":")
        if len(parts) == 1:
            parts = ["", parts[0]]
        if len(parts) > 3 or not parts[1]:
            raise InvalidCoordinate(original)
        version = (parts[2] or None) if len(parts) == 3 else None
        return cls(group=parts[0], name=parts[1], version=version, extension=extension)

    @property
    def coordinate(self) -> str:
        parts = [p for p in (self.group, self.name, self.version) if p]
        text = ":".join(parts)
        return f"{text}@{self.extension}" if self.extension else text

    def with_version(self, version: Optional[str]) -> "GeneratorDependency":
        return self.model_copy(update={"version": version})


class ProductDependency(BaseModel):
    """A recommended product (service) dependency"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    product_group: str = Field(..., alias="productGroup", min_length=1)
    product_name: str = Field(..., alias="productName", min_length=1)
    minimum_version: str = Field(..., alias="minimumVersion", min_length=1)
    maximum_version: str = Field(..., alias="maximumVersion", min_length=1)
    recommended_version: Optional[str] = Field(None, alias="recommendedVersion")
    optional: bool = Field(False)


class BuildUnit:
    """
    A unit in the project topology.

    Identity (name, path, directory) is fixed at creation. The parent link
    is weak: the surrounding build system owns unit lifecycles, children are
    only kept here for discovery.
    """

    def __init__(
        self,
        name: str,
        project_dir: Path,
        parent: Optional["BuildUnit"] = None,
        version: Optional[str] = None,
        plugins: Iterable[str] = (),
        tasks: Iterable[str] = (),
    ):
        self._name = name
        self._project_dir = Path(project_dir)
        self._parent = weakref.ref(parent) if parent is not None else None
        self.version = version
        self.children: Dict[str, "BuildUnit"] = {}
        self.plugins = set(plugins)
        self.capabilities = set()
        # Work items the surrounding build already declared for this unit
        self.declared_tasks = set(tasks)
        self.dependencies: List[LibraryDependency] = []
        self.source_dirs: List[Path] = []
        self.generated_source_dirs: List[Path] = []

        if parent is not None:
            parent.children[name] = self

    @property
    def name(self) -> str:
        return self._name

    @property
    def project_dir(self) -> Path:
        return self._project_dir

    @property
    def build_dir(self) -> Path:
        return self._project_dir / BUILD_DIRNAME

    @property
    def parent(self) -> Optional["BuildUnit"]:
        return self._parent() if self._parent is not None else None

    @property
    def path(self) -> str:
        """Gradle-style path: ':' for the root, ':child' below it"""
        parent = self.parent
        if parent is None:
            return ":"
        return parent.path.rstrip(":") + ":" + self._name

    def task_path(self, task_name: str) -> str:
        return self.path.rstrip(":") + ":" + task_name

    def file(self, relative: str) -> Path:
        return self._project_dir / relative

    def find_child(self, name: str) -> Optional["BuildUnit"]:
        return self.children.get(name)

    def add_dependency(self, configuration: str, notation: str, project: bool = False):
        dependency = LibraryDependency(configuration=configuration, notation=notation, project=project)
        if dependency not in self.dependencies:
            self.dependencies.append(dependency)

    def add_source_dir(self, directory: Path):
        if directory not in self.source_dirs:
            self.source_dirs.append(directory)

    def __repr__(self):
        return f"BuildUnit({self.path})"


class LanguageMapping(BaseModel):
    """A discovered unit paired with its derived identifier"""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    unit: BuildUnit
    identifier: str
    kind: Optional[TargetKind] = Field(None, description="None for generic targets")

    @property
    def is_generic(self) -> bool:
        return self.kind is None


__all__ = [
    "TargetKind",
    "LibraryDependency",
    "GeneratorDependency",
    "ProductDependency",
    "BuildUnit",
    "LanguageMapping",
]
