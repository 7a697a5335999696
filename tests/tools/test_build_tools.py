"""
Tests for Tools

Test individual tool implementations. External processes are mocked.
"""
import json
import subprocess
from pathlib import Path
from unittest import mock

import pytest

from conjure_orchestrator.errors import ExtractionError
from conjure_orchestrator.tools import (
    clean_outputs,
    compile_ir,
    create_tool_registry,
    extract_executable,
    render_generator_command,
    run_command,
    run_generator,
    stage_sources,
    write_gitignore,
    write_service_dependencies,
    ToolRegistry,
)


def completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestSourceTool:
    """Test definition staging"""

    def test_stage_sources(self, temp_dir):
        source = temp_dir / "src" / "main" / "conjure"
        (source / "nested").mkdir(parents=True)
        (source / "api.yml").write_text("types: {}\n")
        (source / "nested" / "more.yml").write_text("types: {}\n")
        (source / "notes.txt").write_text("not a definition")
        staging = temp_dir / "build" / "conjure"
        staging.mkdir(parents=True)
        (staging / "removed.yml").write_text("stale")

        result = stage_sources(source_dir=source, staging_dir=staging, extension=".yml")

        assert result["status"] == "success"
        assert result["files"] == ["api.yml", str(Path("nested") / "more.yml")]
        assert (staging / "nested" / "more.yml").exists()
        assert not (staging / "removed.yml").exists()
        assert not (staging / "notes.txt").exists()

    def test_missing_source_dir(self, temp_dir):
        result = stage_sources(source_dir=temp_dir / "missing", staging_dir=temp_dir / "staging")

        assert result["status"] == "success"
        assert result["files"] == []
        assert (temp_dir / "staging").is_dir()


class TestExecTool:
    """Test subprocess handling"""

    def test_success(self, temp_dir):
        with mock.patch("subprocess.run", return_value=completed(stdout="ok")) as run:
            result = run_command(["npm", "install"], working_dir=temp_dir)

        assert result["status"] == "success"
        assert result["stdout"] == "ok"
        assert run.call_args[0][0] == ["npm", "install"]
        assert run.call_args[1]["cwd"] == temp_dir

    def test_non_zero_exit(self):
        with mock.patch("subprocess.run", return_value=completed(returncode=2, stderr="bad input")):
            result = run_command(["conjure", "compile"])

        assert result["status"] == "error"
        assert result["exit_code"] == 2
        assert "bad input" in result["error"]

    def test_timeout(self):
        with mock.patch("subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="npm", timeout=1)):
            result = run_command(["npm", "publish"], timeout=1)

        assert result["status"] == "error"
        assert "timed out" in result["error"]

    def test_missing_executable(self):
        with mock.patch("subprocess.run", side_effect=FileNotFoundError("no such file")):
            result = run_command(["does-not-exist"])

        assert result["status"] == "error"

    def test_missing_working_dir(self, temp_dir):
        result = run_command(["npm", "install"], working_dir=temp_dir / "missing")

        assert result["status"] == "error"


class TestIrTool:
    """Test IR compiler invocation"""

    def test_compile_ir(self, temp_dir):
        output = temp_dir / "build" / "conjure-ir" / "foo.conjure.json"

        with mock.patch("conjure_orchestrator.tools.ir_tool.run_command", return_value={"status": "success"}) as run:
            result = compile_ir(executable="/bin/conjure", input_dir=temp_dir / "staging", output_file=output)

        assert result == {"status": "success", "ir_file": str(output)}
        assert run.call_args[0][0] == ["/bin/conjure", "compile", str(temp_dir / "staging"), str(output)]
        assert output.parent.is_dir()

    def test_product_dependencies_as_extensions(self, temp_dir):
        product = {"productGroup": "com.example", "productName": "bar"}

        with mock.patch("conjure_orchestrator.tools.ir_tool.run_command", return_value={"status": "success"}) as run:
            compile_ir("/bin/conjure", temp_dir, temp_dir / "ir.json", product_dependencies=[product])

        command = run.call_args[0][0]
        assert command[-2] == "--extensions"
        assert json.loads(command[-1]) == {"recommended-product-dependencies": [product]}

    def test_failure_is_reported(self, temp_dir):
        failure = {"status": "error", "error": "Command failed with exit code 1"}

        with mock.patch("conjure_orchestrator.tools.ir_tool.run_command", return_value=failure):
            assert compile_ir("/bin/conjure", temp_dir, temp_dir / "ir.json") == failure


class TestGeneratorTool:
    """Test generator invocation"""

    def test_render_command(self):
        command = render_generator_command(
            "/bin/conjure-java", "ir.json", "out",
            options={"objects": True, "packagePrefix": "com.foo", "strict": False, "extra": None},
            extra_args=["--productDependencies=deps.json"],
        )

        assert command == [
            "/bin/conjure-java", "generate", "ir.json", "out",
            "--objects", "--packagePrefix=com.foo", "--productDependencies=deps.json",
        ]

    def test_output_dir_cleared(self, temp_dir):
        output = temp_dir / "src" / "generated" / "java"
        output.mkdir(parents=True)
        (output / "Removed.java").write_text("class Removed {}")

        with mock.patch(
            "conjure_orchestrator.tools.generator_tool.run_command", return_value={"status": "success"}
        ) as run:
            result = run_generator("/bin/conjure-java", temp_dir / "ir.json", output, options={"objects": True})

        assert result == {"status": "success", "output_dir": str(output)}
        assert output.is_dir()
        assert not (output / "Removed.java").exists()
        assert run.call_args[0][0][-1] == "--objects"


class TestFileTools:
    """Test gitignore, service dependencies and cleanup"""

    def test_write_gitignore(self, temp_dir):
        first = write_gitignore(output_dir=temp_dir, contents="/src/\n")
        second = write_gitignore(output_dir=temp_dir, contents="/src/\n")

        assert (temp_dir / ".gitignore").read_text() == "/src/\n"
        assert first["written"] is True
        assert second["written"] is False

    def test_write_service_dependencies(self, temp_dir):
        output = temp_dir / "build" / "service-dependencies.json"
        deps = [{"productGroup": "com.example", "productName": "bar"}]

        result = write_service_dependencies(output_file=output, product_dependencies=deps)

        assert result["status"] == "success"
        assert json.loads(output.read_text()) == deps

    def test_clean_outputs(self, temp_dir):
        directory = temp_dir / "generated"
        directory.mkdir()
        (directory / "A.java").write_text("")
        single = temp_dir / "ir.json"
        single.write_text("{}")

        result = clean_outputs(paths=[directory, single, temp_dir / "missing"])

        assert result["removed"] == [str(directory), str(single)]
        assert not directory.exists()
        assert not single.exists()


class TestExtractTool:
    """Test extraction reporting"""

    def test_success(self, temp_dir):
        extractor = mock.Mock()
        extractor.materialize.return_value = temp_dir / "bin" / "conjure"

        result = extract_executable(extractor, "com.palantir.conjure:conjure:4.36.0", temp_dir, "conjure")

        assert result["status"] == "success"
        assert result["executable"] == str(temp_dir / "bin" / "conjure")

    def test_failure(self, temp_dir):
        extractor = mock.Mock()
        extractor.materialize.side_effect = ExtractionError("archive not found")

        result = extract_executable(extractor, "com.palantir.conjure:conjure:4.36.0", temp_dir, "conjure")

        assert result == {"status": "error", "error": "archive not found"}


class TestToolRegistry:
    """Test the registry"""

    def test_all_tools_registered(self):
        tools = create_tool_registry(extractor=mock.Mock())

        assert set(tools) == {
            "stage_sources",
            "extract_executable",
            "compile_ir",
            "write_service_dependencies",
            "run_generator",
            "write_gitignore",
            "clean_outputs",
            "run_command",
        }

    def test_extractor_is_injected(self, temp_dir):
        extractor = mock.Mock()
        extractor.materialize.return_value = temp_dir / "bin" / "conjure"
        registry = ToolRegistry(extractor)

        result = registry.get_tool("extract_executable")(
            coordinate="com.palantir.conjure:conjure:4.36.0", output_dir=str(temp_dir), executable_name="conjure"
        )

        assert result["status"] == "success"
        extractor.materialize.assert_called_once()

    def test_unknown_tool(self):
        with pytest.raises(ValueError):
            ToolRegistry(mock.Mock()).get_tool("compile_java")

    def test_tool_info(self):
        info = ToolRegistry(mock.Mock()).get_tool_info("run_generator")

        assert "options" in info["inputs"]
        assert info["outputs"] == ["output_dir"]
