"""
Task Schema - Work item graph

This defines the work item graph the orchestrator produces
and the Executor runs.

Work items are never mutated after creation except to append
dependency edges (and to track execution status).
"""
from typing import List, Dict, Any, Optional, Set
from pydantic import BaseModel, Field
from enum import Enum
from datetime import datetime

from conjure_orchestrator.errors import DuplicateWorkItem, GraphCycleError


class TaskStatus(str, Enum):
    """Task execution status"""
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class ToolCall(BaseModel):
    """A call to a specific tool with parameters"""
    tool_name: str = Field(..., description="Tool identifier (e.g., 'run_generator', 'run_command')")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Tool-specific parameters")


class WorkItem(BaseModel):
    """A single named, orderable unit of build work"""
    name: str = Field(..., description="Unique task path, e.g. ':compileConjureObjects'")
    task_type: str = Field(..., description="stage, extract, compile_ir, generate, gitignore, clean, exec, aggregate, external")
    group: Optional[str] = Field(None, description="Group label shown in task listings")
    description: Optional[str] = Field(None)

    # Dependencies
    dependencies: List[str] = Field(default_factory=list, description="Work items that must complete first")
    must_run_after: List[str] = Field(
        default_factory=list,
        description="Ordering only: these run first when both are scheduled, but are never pulled in",
    )

    # Execution
    tool_calls: List[ToolCall] = Field(default_factory=list, description="Tools to invoke for this work item")
    inputs: Dict[str, Any] = Field(default_factory=dict, description="Declared inputs, used for caching/invalidation")
    outputs: Dict[str, str] = Field(default_factory=dict, description="Declared output locations")

    # Status tracking
    status: TaskStatus = Field(TaskStatus.PENDING)
    started_at: Optional[datetime] = Field(None)
    completed_at: Optional[datetime] = Field(None)
    error_message: Optional[str] = Field(None)

    def depends_on(self, *names: str) -> "WorkItem":
        """Append dependency edges (duplicates are ignored)"""
        for name in names:
            if name != self.name and name not in self.dependencies:
                self.dependencies.append(name)
        return self

    def runs_after(self, *names: str) -> "WorkItem":
        """Append must-run-after constraints (duplicates are ignored)"""
        for name in names:
            if name != self.name and name not in self.must_run_after:
                self.must_run_after.append(name)
        return self

    @property
    def output_dir(self) -> Optional[str]:
        return self.outputs.get("output_dir")


class TaskGraph(BaseModel):
    """
    Complete build plan as a Directed Acyclic Graph

    The orchestrator produces this from the project topology.
    The Executor runs it.
    """
    root_name: str = Field(..., description="Root unit this graph was configured for")
    tasks: Dict[str, WorkItem] = Field(default_factory=dict, description="Work items keyed by name, in creation order")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Execution state
    completed_task_ids: List[str] = Field(default_factory=list)
    failed_task_ids: List[str] = Field(default_factory=list)

    def add(self, task: WorkItem) -> WorkItem:
        if task.name in self.tasks:
            raise DuplicateWorkItem(f"Work item already exists: {task.name}")
        self.tasks[task.name] = task
        return task

    def get_task(self, name: str) -> Optional[WorkItem]:
        """Get task by name"""
        return self.tasks.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.tasks

    def add_edge(self, downstream: str, upstream: str):
        """Declare that `downstream` must run after `upstream`"""
        for name in (downstream, upstream):
            if name not in self.tasks:
                raise KeyError(f"Unknown work item: {name}")
        self.tasks[downstream].depends_on(upstream)

    def edges(self) -> Set[tuple]:
        """All (downstream, upstream) pairs"""
        return {
            (task.name, dep)
            for task in self.tasks.values()
            for dep in task.dependencies
        }

    def transitive_dependencies(self, name: str) -> Set[str]:
        """Every work item `name` depends on, directly or indirectly"""
        seen: Set[str] = set()
        stack = list(self.tasks[name].dependencies)
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            task = self.tasks.get(current)
            if task:
                stack.extend(task.dependencies)
        return seen

    def closure(self, targets: List[str]) -> Set[str]:
        """Targets plus everything they transitively depend on"""
        names = set()
        for target in targets:
            if target not in self.tasks:
                raise KeyError(f"Unknown work item: {target}")
            names.add(target)
            names |= self.transitive_dependencies(target)
        return names

    def topological_order(self) -> List[str]:
        """
        Names in dependency order; ties broken by creation order.

        Raises:
            GraphCycleError: If the edges do not form a DAG
        """
        order: List[str] = []
        state: Dict[str, int] = {}  # 1 = visiting, 2 = done

        def visit(name: str, trail: List[str]):
            mark = state.get(name)
            if mark == 2:
                return
            if mark == 1:
                start = trail.index(name)
                raise GraphCycleError(trail[start:] + [name])
            state[name] = 1
            trail.append(name)
            task = self.tasks[name]
            for dep in task.dependencies:
                if dep not in self.tasks:
                    raise KeyError(f"{name} depends on unknown work item: {dep}")
                visit(dep, trail)
            for earlier in task.must_run_after:
                if earlier in self.tasks:
                    visit(earlier, trail)
            trail.pop()
            state[name] = 2
            order.append(name)

        for name in self.tasks:
            visit(name, [])
        return order

    def validate(self):
        """Check every edge points at a known work item and that there are no cycles"""
        self.topological_order()

    def get_ready_tasks(self, names: Optional[Set[str]] = None) -> List[WorkItem]:
        """
        Get tasks that are ready to run

        Dependencies must be completed. Scheduled must-run-after items must
        be settled (completed, failed or skipped) but need not succeed.
        """
        scheduled = set(self.tasks) if names is None else names
        ready = []
        for task in self.tasks.values():
            if task.name not in scheduled:
                continue
            if task.status != TaskStatus.PENDING:
                continue
            # Check if all dependencies are completed
            deps_met = all(
                dep_id in self.completed_task_ids
                for dep_id in task.dependencies
            )
            ordered = all(
                self.tasks[earlier].status not in (TaskStatus.PENDING, TaskStatus.RUNNING)
                for earlier in task.must_run_after
                if earlier in scheduled and earlier in self.tasks
            )
            if deps_met and ordered:
                ready.append(task)
        return ready

    def mark_completed(self, name: str):
        """Mark task as completed"""
        task = self.get_task(name)
        if task:
            task.status = TaskStatus.COMPLETED
            task.completed_at = datetime.utcnow()
            if name not in self.completed_task_ids:
                self.completed_task_ids.append(name)

    def mark_failed(self, name: str, error_message: str):
        """Mark task as failed"""
        task = self.get_task(name)
        if task:
            task.status = TaskStatus.FAILED
            task.error_message = error_message
            task.completed_at = datetime.utcnow()
            if name not in self.failed_task_ids:
                self.failed_task_ids.append(name)

    def mark_skipped_dependents(self, name: str, names: Optional[Set[str]] = None) -> List[str]:
        """Skip every pending work item (within `names`, if given) that transitively depends on `name`"""
        skipped = []
        for task in self.tasks.values():
            if names is not None and task.name not in names:
                continue
            if task.status == TaskStatus.PENDING and name in self.transitive_dependencies(task.name):
                task.status = TaskStatus.SKIPPED
                skipped.append(task.name)
        return skipped


# Export
__all__ = [
    "WorkItem",
    "TaskGraph",
    "TaskStatus",
    "ToolCall",
]
