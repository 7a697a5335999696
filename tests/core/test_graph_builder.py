"""
Tests for TaskGraphBuilder

The builder only declares work items and edges; these tests inspect
the declared graph.
"""
import pytest

from conjure_orchestrator.config import CONJURE_COMPILER_BINARY, DEFAULT_EXECUTABLE_VERSIONS
from conjure_orchestrator.core.graph_builder import TaskGraphBuilder
from conjure_orchestrator.errors import DuplicateWorkItem, GraphCycleError
from conjure_orchestrator.schemas.options_schema import GeneratorOptions
from conjure_orchestrator.schemas.project_schema import GeneratorDependency, ProductDependency
from conjure_orchestrator.schemas.task_schema import WorkItem


class TestTaskGraphBuilder:
    """Test work item declaration"""

    @pytest.fixture
    def root(self, make_project):
        return make_project("foo", "foo-objects", tasks={"foo-objects": ["compileJava"]})

    @pytest.fixture
    def builder(self, root):
        return TaskGraphBuilder(root)

    def test_aggregates_exist(self, builder):
        assert ":compileConjure" in builder.graph
        assert ":clean" in builder.graph
        assert builder.generate_all.group == "Conjure"

    def test_declared_tasks_are_adopted(self, builder):
        assert builder.graph.get_task(":foo-objects:compileJava").task_type == "external"

    def test_source_staging(self, builder, root):
        staging = builder.build_source_staging()

        assert staging.name == ":copyConjureSourcesIntoBuild"
        assert staging.output_dir == str(root.build_dir / "conjure")
        assert staging.inputs["source_dir"] == str(root.project_dir / "src" / "main" / "conjure")
        assert ":cleanCopyConjureSourcesIntoBuild" in builder.clean.dependencies

    def test_ir_compilation_depends_on_staging_and_compiler(self, builder, root):
        staging = builder.build_source_staging()
        compiler = builder.build_compiler_extraction()
        ir = builder.build_ir_compilation(staging, compiler)

        assert ir.name == ":compileIr"
        assert ir.dependencies == [staging.name, compiler.name]
        assert ir.outputs["ir_file"] == str(root.build_dir / "conjure-ir" / "foo.conjure.json")
        assert ir.tool_calls[0].parameters["executable"] == compiler.outputs["executable"]

    def test_product_dependencies_recorded(self, builder):
        product = ProductDependency(
            productGroup="com.example",
            productName="bar",
            minimumVersion="1.0.0",
            maximumVersion="2.x.x",
        )
        ir = builder.build_ir_compilation(
            builder.build_source_staging(), builder.build_compiler_extraction(), [product]
        )

        assert ir.inputs["product_dependencies"] == [{
            "productGroup": "com.example",
            "productName": "bar",
            "minimumVersion": "1.0.0",
            "maximumVersion": "2.x.x",
            "optional": False,
        }]

    def test_compiler_uses_default_version(self, builder):
        compiler = builder.build_compiler_extraction()

        assert compiler.name == ":extractConjure"
        assert compiler.inputs["coordinate"] == (
            f"{CONJURE_COMPILER_BINARY}:{DEFAULT_EXECUTABLE_VERSIONS[CONJURE_COMPILER_BINARY]}"
        )

    def test_version_override(self, root):
        builder = TaskGraphBuilder(root, versions={CONJURE_COMPILER_BINARY: "9.9.9"})

        assert builder.build_compiler_extraction().inputs["coordinate"].endswith(":9.9.9")

    def test_extraction_memoized_by_coordinate(self, builder, root):
        dep = GeneratorDependency.parse("com.example:conjure-rust:1.0.0")

        first = builder.build_extraction("extractConjureRust", dep, root.build_dir / "rust", "conjure-rust")
        second = builder.build_extraction("extractOther", dep, root.build_dir / "other", "conjure-rust")

        assert first is second
        assert ":extractOther" not in builder.graph

    def test_generation_step(self, builder, root):
        ir = builder.build_ir_compilation(builder.build_source_staging(), builder.build_compiler_extraction())
        generator = builder.build_extraction(
            "extractConjureRust",
            GeneratorDependency.parse("com.example:conjure-rust:1.0.0"),
            root.build_dir / "rust",
            "conjure-rust",
        )
        output_dir = root.project_dir / "foo-rust" / "src"

        step = builder.build_generation_step(
            "compileConjureRust", "rust", ir, generator, output_dir, GeneratorOptions(properties={"crateName": "foo"})
        )

        assert step.dependencies == [":compileIr", ":extractConjureRust"]
        assert step.output_dir == str(output_dir)
        assert step.inputs["options"] == {"crateName": "foo"}
        assert step.tool_calls[0].tool_name == "run_generator"

    def test_cleanup_is_paired(self, builder, root):
        item = builder.graph.add(WorkItem(name=":compileConjureRust", task_type="generate"))

        cleanup = builder.wire_cleanup(item, root.project_dir / "foo-rust" / "src")

        assert cleanup.name == ":cleanCompileConjureRust"
        assert cleanup.name in builder.clean.dependencies

    def test_duplicate_work_item(self, builder):
        builder.build_source_staging()

        with pytest.raises(DuplicateWorkItem):
            builder.build_source_staging()

    def test_cycle_detected_on_build(self, builder):
        a = builder.graph.add(WorkItem(name=":a", task_type="exec"))
        b = builder.graph.add(WorkItem(name=":b", task_type="exec"))
        a.depends_on(b.name)
        b.depends_on(a.name)

        with pytest.raises(GraphCycleError) as exc:
            builder.build()

        assert ":a" in exc.value.cycle and ":b" in exc.value.cycle
