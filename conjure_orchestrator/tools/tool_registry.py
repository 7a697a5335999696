"""
Tool Registry - Central registry for all available tools

This module defines all tools available to the Executor.
Each tool is a callable function that receives the parameters recorded
on a work item's tool calls.

Tool Design Principles:
1. Tools are deterministic - same inputs always produce the same outputs
2. Tools receive complete parameters - paths are absolute, options rendered by the graph
3. Tools report what they did - a dict with 'status' and the produced paths
"""
from typing import Dict, Callable, Any, Optional

from conjure_orchestrator.core.extractor import ArchiveExtractor, ExecutableExtractor
from .clean_tool import clean_outputs
from .exec_tool import run_command
from .extract_tool import extract_executable
from .generator_tool import run_generator
from .gitignore_tool import write_gitignore
from .ir_tool import compile_ir
from .service_dependencies_tool import write_service_dependencies
from .source_tool import stage_sources


class ToolRegistry:
    """
    Central registry for all available tools

    The graph builder names tools on work items.
    The Executor uses this to invoke them.
    """

    def __init__(self, extractor: Optional[ExecutableExtractor] = None):
        """
        Initialize tool registry

        Args:
            extractor: Executable extractor shared by every extraction work item
        """
        self.extractor = extractor or ArchiveExtractor()

        self._registry: Dict[str, Callable] = {}
        self._register_tools()

    def _register_tools(self):
        """Register all available tools"""

        # Sources and IR
        self._registry["stage_sources"] = self._wrap_tool(
            stage_sources,
            description="Mirror definition files into the build directory",
            inputs=["source_dir", "staging_dir", "extension"],
            outputs=["output_dir"]
        )

        self._registry["compile_ir"] = self._wrap_tool(
            compile_ir,
            description="Compile staged definitions into a single IR file",
            inputs=["executable", "input_dir", "output_file", "product_dependencies"],
            outputs=["ir_file"]
        )

        self._registry["write_service_dependencies"] = self._wrap_tool(
            write_service_dependencies,
            description="Write declared product dependencies as JSON",
            inputs=["output_file", "product_dependencies"],
            outputs=["output_file"]
        )

        # Executables
        self._registry["extract_executable"] = self._wrap_tool(
            extract_executable,
            description="Extract a generator or compiler distribution",
            inputs=["extractor", "coordinate", "output_dir", "executable_name"],
            outputs=["output_dir", "executable"]
        )

        # Generation
        self._registry["run_generator"] = self._wrap_tool(
            run_generator,
            description="Run a code generator against the IR",
            inputs=["executable", "ir_file", "output_dir", "options", "extra_args"],
            outputs=["output_dir"]
        )

        self._registry["write_gitignore"] = self._wrap_tool(
            write_gitignore,
            description="Write a .gitignore marker for generated output",
            inputs=["output_dir", "contents"],
            outputs=["output_file"]
        )

        # Housekeeping
        self._registry["clean_outputs"] = self._wrap_tool(
            clean_outputs,
            description="Delete declared outputs",
            inputs=["paths"],
            outputs=["removed"]
        )

        self._registry["run_command"] = self._wrap_tool(
            run_command,
            description="Run an external command (npm, python, ...)",
            inputs=["command", "working_dir", "timeout"],
            outputs=["stdout"]
        )

    def _wrap_tool(self, func: Callable, description: str, inputs: list, outputs: list) -> Callable:
        """
        Wrap tool function with metadata

        This allows us to query tool capabilities.
        """
        def wrapper(**kwargs):
            if "extractor" in inputs:
                kwargs.setdefault("extractor", self.extractor)
            return func(**kwargs)

        # Attach metadata
        wrapper.__doc__ = description
        wrapper.__tool_inputs__ = inputs
        wrapper.__tool_outputs__ = outputs
        wrapper.__wrapped__ = func

        return wrapper

    def get_tool(self, tool_name: str) -> Callable:
        """Get tool by name"""
        if tool_name not in self._registry:
            available = ", ".join(self._registry.keys())
            raise ValueError(f"Tool '{tool_name}' not found. Available tools: {available}")
        return self._registry[tool_name]

    def get_all_tools(self) -> Dict[str, Callable]:
        """Get all registered tools"""
        return self._registry.copy()

    def get_tool_info(self, tool_name: str) -> Dict[str, Any]:
        """Get metadata about a tool"""
        tool = self.get_tool(tool_name)
        return {
            "name": tool_name,
            "description": tool.__doc__,
            "inputs": getattr(tool, "__tool_inputs__", []),
            "outputs": getattr(tool, "__tool_outputs__", [])
        }


def create_tool_registry(extractor: Optional[ExecutableExtractor] = None) -> Dict[str, Callable]:
    """
    Factory function to create a tool registry

    This is the main entry point for the Executor.

    Args:
        extractor: Executable extractor (defaults to ArchiveExtractor)

    Returns:
        Dictionary mapping tool names to callable functions
    """
    registry = ToolRegistry(extractor)
    return registry.get_all_tools()


__all__ = ["ToolRegistry", "create_tool_registry"]
