"""
Task Graph Builder - declares work items and ordering edges

Responsibilities:
- Stage definition sources into a build-private directory
- Compile staged sources into a single IR file
- Materialize generator/compiler executables (one work item per coordinate)
- Declare per-target generation steps with their outputs and options
- Pair every generation step with a cleanup step
- Hang every generation step off the aggregate generate operation

Hard ordering guarantees encoded as edges:
    staging, compiler extraction -> IR compile -> generation -> unit compile
    generator extraction -> generation

The builder only declares; nothing here touches the filesystem.
Names derive from unit names and fixed conventions, so building twice
from the same inputs yields identical graphs.
"""
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from conjure_orchestrator.config import (
    CONJURE_COMPILER_BINARY,
    DEFAULT_EXECUTABLE_VERSIONS,
    IR_DIRNAME,
    RAW_IR_FILENAME,
    SERVICE_DEPENDENCIES_FILENAME,
    SOURCE_DIR,
    SOURCE_EXTENSION,
    STAGING_DIRNAME,
    TASK_CLEAN,
    TASK_COMPILE_CONJURE,
    TASK_COMPILE_IR,
    TASK_COPY_SOURCES,
    TASK_GROUP,
    TASK_RAW_IR,
    TASK_SERVICE_DEPENDENCIES,
)
from conjure_orchestrator.core import naming
from conjure_orchestrator.schemas.options_schema import GeneratorOptions
from conjure_orchestrator.schemas.project_schema import BuildUnit, GeneratorDependency, ProductDependency
from conjure_orchestrator.schemas.task_schema import TaskGraph, ToolCall, WorkItem

logger = logging.getLogger(__name__)


class TaskGraphBuilder:
    """
    TaskGraphBuilder - Builds the work item graph for one root unit

    Work items the surrounding build already declared on a unit (publish,
    ideaModule, compileJava, ...) are adopted as 'external' placeholders so
    edges can point at them.
    """

    def __init__(self, root: BuildUnit, versions: Optional[Dict[str, str]] = None):
        self.root = root
        self.graph = TaskGraph(root_name=root.name)
        self.versions = {**DEFAULT_EXECUTABLE_VERSIONS, **(versions or {})}
        self._extractions: Dict[str, WorkItem] = {}

        self._adopt_declared_tasks(root)
        for name in sorted(root.children):
            self._adopt_declared_tasks(root.children[name])

        self.clean = self.ensure_task(root, TASK_CLEAN, task_type="aggregate")
        self.generate_all = self.graph.add(WorkItem(
            name=root.task_path(TASK_COMPILE_CONJURE),
            task_type="aggregate",
            group=TASK_GROUP,
            description=f"Generates code for your API definitions in {SOURCE_DIR}/**/*{SOURCE_EXTENSION}",
        ))

    # ------------------------------------------------------------------
    # Unit-owned work items
    # ------------------------------------------------------------------

    def _adopt_declared_tasks(self, unit: BuildUnit):
        for name in sorted(unit.declared_tasks):
            self.ensure_task(unit, name)

    def ensure_task(self, unit: BuildUnit, name: str, task_type: str = "external") -> WorkItem:
        """Return the unit's work item `name`, creating a placeholder if needed"""
        path = unit.task_path(name)
        existing = self.graph.get_task(path)
        if existing is not None:
            return existing
        return self.graph.add(WorkItem(name=path, task_type=task_type))

    def find_task(self, unit: BuildUnit, name: str) -> Optional[WorkItem]:
        return self.graph.get_task(unit.task_path(name))

    # ------------------------------------------------------------------
    # Executables
    # ------------------------------------------------------------------

    def resolve_coordinate(self, coordinate: str) -> GeneratorDependency:
        """Attach the configured version to a versionless first-class coordinate"""
        dependency = GeneratorDependency.parse(coordinate)
        if dependency.version is None and coordinate in self.versions:
            dependency = dependency.with_version(self.versions[coordinate])
        return dependency

    def build_extraction(
        self,
        task_name: str,
        dependency: GeneratorDependency,
        output_dir: Path,
        executable_name: str,
    ) -> WorkItem:
        """
        Work item materializing an executable.

        Memoized by coordinate: asking twice for the same coordinate returns
        the first work item, whatever name the second caller asked for.
        """
        key = dependency.coordinate
        if key in self._extractions:
            return self._extractions[key]

        executable = Path(output_dir) / "bin" / executable_name
        task = self.graph.add(WorkItem(
            name=self.root.task_path(task_name),
            task_type="extract",
            description=f"Extracts the {executable_name} executable from {key}",
            tool_calls=[ToolCall(
                tool_name="extract_executable",
                parameters={
                    "coordinate": key,
                    "output_dir": str(output_dir),
                    "executable_name": executable_name,
                },
            )],
            inputs={"coordinate": key},
            outputs={"output_dir": str(output_dir), "executable": str(executable)},
        ))
        self._extractions[key] = task
        return task

    # ------------------------------------------------------------------
    # Sources and IR
    # ------------------------------------------------------------------

    def build_source_staging(self) -> WorkItem:
        """Mirror definition files into a build-private directory (stale contents cleared first)"""
        source_dir = self.root.file(SOURCE_DIR)
        staging_dir = self.root.build_dir / STAGING_DIRNAME
        task = self.graph.add(WorkItem(
            name=self.root.task_path(TASK_COPY_SOURCES),
            task_type="stage",
            description=f"Copies {SOURCE_DIR}/**/*{SOURCE_EXTENSION} into the build directory",
            tool_calls=[ToolCall(
                tool_name="stage_sources",
                parameters={
                    "source_dir": str(source_dir),
                    "staging_dir": str(staging_dir),
                    "extension": SOURCE_EXTENSION,
                },
            )],
            inputs={"source_dir": str(source_dir), "extension": SOURCE_EXTENSION},
            outputs={"output_dir": str(staging_dir)},
        ))
        self.wire_cleanup(task, staging_dir)
        return task

    def build_compiler_extraction(self) -> WorkItem:
        return self.build_extraction(
            "extractConjure",
            self.resolve_coordinate(CONJURE_COMPILER_BINARY),
            self.root.build_dir / "conjureCompiler",
            "conjure",
        )

    def build_ir_compilation(
        self,
        staging: WorkItem,
        compiler: WorkItem,
        product_dependencies: Iterable[ProductDependency] = (),
    ) -> WorkItem:
        """One IR file from all staged definitions, embedding recommended product dependencies"""
        product_dependencies = [
            dep.model_dump(by_alias=True, exclude_none=True) for dep in product_dependencies
        ]
        ir_file = self.root.build_dir / IR_DIRNAME / f"{self.root.name}.conjure.json"
        task = self.graph.add(WorkItem(
            name=self.root.task_path(TASK_COMPILE_IR),
            task_type="compile_ir",
            group=TASK_GROUP,
            description="Converts your Conjure YML files into a single portable JSON file in IR format.",
            tool_calls=[ToolCall(
                tool_name="compile_ir",
                parameters={
                    "executable": compiler.outputs["executable"],
                    "input_dir": staging.outputs["output_dir"],
                    "output_file": str(ir_file),
                    "product_dependencies": product_dependencies,
                },
            )],
            inputs={
                "source_dir": staging.outputs["output_dir"],
                "product_dependencies": product_dependencies,
            },
            outputs={"ir_file": str(ir_file)},
        ))
        task.depends_on(staging.name, compiler.name)
        return task

    def build_raw_ir(self, staging: WorkItem, compiler: WorkItem) -> WorkItem:
        """IR without extensions, for tooling that diffs definitions"""
        ir_file = self.root.build_dir / IR_DIRNAME / RAW_IR_FILENAME
        task = self.graph.add(WorkItem(
            name=self.root.task_path(TASK_RAW_IR),
            task_type="compile_ir",
            tool_calls=[ToolCall(
                tool_name="compile_ir",
                parameters={
                    "executable": compiler.outputs["executable"],
                    "input_dir": staging.outputs["output_dir"],
                    "output_file": str(ir_file),
                },
            )],
            inputs={"source_dir": staging.outputs["output_dir"]},
            outputs={"ir_file": str(ir_file)},
        ))
        task.depends_on(staging.name, compiler.name)
        return task

    def build_service_dependencies(self, product_dependencies: Iterable[ProductDependency]) -> WorkItem:
        product_dependencies = [
            dep.model_dump(by_alias=True, exclude_none=True) for dep in product_dependencies
        ]
        output_file = self.root.build_dir / SERVICE_DEPENDENCIES_FILENAME
        return self.graph.add(WorkItem(
            name=self.root.task_path(TASK_SERVICE_DEPENDENCIES),
            task_type="service_dependencies",
            tool_calls=[ToolCall(
                tool_name="write_service_dependencies",
                parameters={
                    "output_file": str(output_file),
                    "product_dependencies": product_dependencies,
                },
            )],
            inputs={"product_dependencies": product_dependencies},
            outputs={"output_file": str(output_file)},
        ))

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def build_generation_step(
        self,
        task_name: str,
        kind: str,
        compiled_ir: WorkItem,
        generator: WorkItem,
        output_dir: Path,
        options: GeneratorOptions,
        description: Optional[str] = None,
        extra_parameters: Optional[Dict[str, str]] = None,
    ) -> WorkItem:
        """
        One generation step for one target.

        The option set is recorded as an input so a changed option
        invalidates the step's outputs.
        """
        parameters = {
            "executable": generator.outputs["executable"],
            "ir_file": compiled_ir.outputs["ir_file"],
            "output_dir": str(output_dir),
            "options": dict(options.properties),
        }
        parameters.update(extra_parameters or {})
        task = self.graph.add(WorkItem(
            name=self.root.task_path(task_name),
            task_type="generate",
            group=TASK_GROUP,
            description=description or f"Generates {kind} files from your Conjure definitions.",
            tool_calls=[ToolCall(tool_name="run_generator", parameters=parameters)],
            inputs={
                "kind": kind,
                "ir_file": compiled_ir.outputs["ir_file"],
                "options": dict(options.properties),
            },
            outputs={"output_dir": str(output_dir)},
        ))
        task.depends_on(compiled_ir.name, generator.name)
        return task

    def build_gitignore(self, unit: BuildUnit, task_name: str, contents: str) -> WorkItem:
        """Marker keeping generated output out of version control"""
        output_file = unit.project_dir / ".gitignore"
        return self.graph.add(WorkItem(
            name=unit.task_path(task_name),
            task_type="gitignore",
            tool_calls=[ToolCall(
                tool_name="write_gitignore",
                parameters={"output_dir": str(unit.project_dir), "contents": contents},
            )],
            inputs={"contents": contents},
            outputs={"output_file": str(output_file)},
        ))

    def build_command(
        self,
        task_name: str,
        command: List[str],
        working_dir: Path,
        description: Optional[str] = None,
        inputs: Optional[Dict[str, str]] = None,
        outputs: Optional[Dict[str, str]] = None,
        group: Optional[str] = TASK_GROUP,
    ) -> WorkItem:
        """An opaque subprocess with a fixed argument list and working directory"""
        return self.graph.add(WorkItem(
            name=self.root.task_path(task_name),
            task_type="exec",
            group=group,
            description=description,
            tool_calls=[ToolCall(
                tool_name="run_command",
                parameters={"command": list(command), "working_dir": str(working_dir)},
            )],
            inputs=dict(inputs or {}),
            outputs=dict(outputs or {}),
        ))

    def wire_cleanup(self, work_item: WorkItem, output_dir: Path) -> WorkItem:
        """Register output_dir with the aggregate clean operation"""
        local_name = work_item.name.rsplit(":", 1)[-1]
        owner = work_item.name[: -len(local_name)]
        task = self.graph.add(WorkItem(
            name=owner + naming.clean_task_name(local_name),
            task_type="clean",
            description=f"Deletes the outputs of {work_item.name}",
            tool_calls=[ToolCall(tool_name="clean_outputs", parameters={"paths": [str(output_dir)]})],
            outputs={"output_dir": str(output_dir)},
        ))
        self.clean.depends_on(task.name)
        work_item.runs_after(task.name)
        return task

    def wire_generic_owner(self, parent_aggregate: WorkItem, work_item: WorkItem):
        """Make `work_item` part of the aggregate operation"""
        parent_aggregate.depends_on(work_item.name)

    def build(self) -> TaskGraph:
        """Validate and return the graph"""
        self.graph.validate()
        logger.info(f"[GraphBuilder] {self.root.name}: {len(self.graph.tasks)} work items")
        return self.graph


__all__ = ["TaskGraphBuilder"]
