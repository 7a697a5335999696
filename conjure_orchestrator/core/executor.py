"""
Executor - Runs a TaskGraph

Responsibilities:
- Execute work items in dependency order
- Invoke tools with parameters
- Track execution state
- Skip the dependents of failed work items
- Report progress

The Executor is mechanical - it just runs the graph the orchestrator built.
"""
import logging
from datetime import datetime
from typing import Dict, Any, Callable, Iterable, Optional

from conjure_orchestrator.errors import ExecutionError
from conjure_orchestrator.schemas.task_schema import TaskGraph, TaskStatus, ToolCall, WorkItem

logger = logging.getLogger(__name__)


class Executor:
    """
    Executor - Runs work items from a TaskGraph

    Executes the graph created by the orchestrator.
    """

    def __init__(self, tool_registry: Dict[str, Callable], keep_going: bool = False):
        """
        Initialize Executor

        Args:
            tool_registry: Mapping of tool names to callable functions
            keep_going: Keep running independent work items after a failure
        """
        self.tool_registry = tool_registry
        self.keep_going = keep_going
        self.execution_log = []

    def execute(
        self,
        graph: TaskGraph,
        targets: Optional[Iterable[str]] = None,
        progress_callback: Optional[Callable[[str], None]] = None
    ) -> Dict[str, Any]:
        """
        Execute the graph, or only what `targets` need

        Args:
            graph: Task graph to execute
            targets: Work item names to run, with everything they depend on
            progress_callback: Optional callback for progress updates

        Returns:
            Execution results

        Raises:
            ExecutionError: If any work item fails
        """
        def log(msg: str):
            self.execution_log.append(msg)
            if progress_callback:
                progress_callback(msg)
            logger.info(f"[Executor] {msg}")

        graph.validate()
        names = graph.closure(list(targets)) if targets else set(graph.tasks)
        results: Dict[str, Dict[str, Any]] = {}
        failed: Dict[str, str] = {}
        skipped = []

        log(f"Starting execution of {len(names)} work items")

        while True:
            ready_tasks = graph.get_ready_tasks(names)
            if not ready_tasks:
                break

            for task in ready_tasks:
                try:
                    log(f"Executing: {task.name}")
                    results[task.name] = self._execute_task(task)
                    graph.mark_completed(task.name)
                    log(f"✓ Completed: {task.name}")
                except ExecutionError as e:
                    log(f"✗ Failed: {task.name} - {e}")
                    graph.mark_failed(task.name, str(e))
                    failed[task.name] = str(e)
                    dependents = graph.mark_skipped_dependents(task.name, names)
                    for name in dependents:
                        log(f"- Skipped: {name} (depends on {task.name})")
                    skipped.extend(dependents)
                    if not self.keep_going:
                        raise ExecutionError(
                            f"Work item failed: {task.name} - {e}", failed=failed, skipped=skipped
                        ) from e

        if failed:
            raise ExecutionError(
                f"Execution failed: {len(failed)} work item(s) failed", failed=failed, skipped=skipped
            )

        pending = [name for name in names if graph.tasks[name].status == TaskStatus.PENDING]
        if pending:
            raise ExecutionError(f"Execution deadlock: no ready work items but {len(pending)} pending")

        log(f"✓ Execution complete: {len(names)} work items succeeded")

        return {
            "status": "success",
            "completed_tasks": len(names),
            "total_tasks": len(graph.tasks),
            "results": results,
            "execution_log": self.execution_log
        }

    def _execute_task(self, task: WorkItem) -> Dict[str, Any]:
        """Execute a single work item; aggregates have no tool calls and complete trivially"""
        task.status = TaskStatus.RUNNING
        task.started_at = datetime.utcnow()

        result: Dict[str, Any] = {}
        for tool_call in task.tool_calls:
            result = self._execute_tool_call(tool_call)
        return result

    def _execute_tool_call(self, tool_call: ToolCall) -> Dict[str, Any]:
        """Execute a tool call"""
        tool_name = tool_call.tool_name

        if tool_name not in self.tool_registry:
            raise ExecutionError(f"Tool not found: {tool_name}")

        tool_func = self.tool_registry[tool_name]

        # Pass only what the tool expects
        params = dict(tool_call.parameters)
        allowed_params = getattr(tool_func, "__tool_inputs__", None)
        if allowed_params:
            params = {k: v for k, v in params.items() if k in allowed_params}

        try:
            result = tool_func(**params)
        except Exception as e:
            raise ExecutionError(f"Tool {tool_name} failed: {str(e)}") from e

        if isinstance(result, dict) and result.get("status") == "error":
            raise ExecutionError(f"Tool {tool_name} failed: {result.get('error', 'unknown error')}")
        return result if isinstance(result, dict) else {}


__all__ = ["Executor", "ExecutionError"]
