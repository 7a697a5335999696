"""
Tools for Code Generation Builds

These tools are invoked by the Executor to perform specific work:
- Source staging
- Executable extraction
- IR compilation
- Code generation
- .gitignore markers and cleanup
- External commands (npm, python)

All tools are deterministic: same inputs → same outputs.
"""
from .source_tool import stage_sources
from .extract_tool import extract_executable
from .ir_tool import compile_ir
from .service_dependencies_tool import write_service_dependencies
from .generator_tool import run_generator, render_generator_command
from .gitignore_tool import write_gitignore
from .clean_tool import clean_outputs
from .exec_tool import run_command
from .tool_registry import ToolRegistry, create_tool_registry

__all__ = [
    "stage_sources",
    "extract_executable",
    "compile_ir",
    "write_service_dependencies",
    "run_generator",
    "render_generator_command",
    "write_gitignore",
    "clean_outputs",
    "run_command",
    "ToolRegistry",
    "create_tool_registry",
]
