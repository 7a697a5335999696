"""
Plan Schemas - API response shapes for planned graphs
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from conjure_orchestrator.schemas.task_schema import TaskGraph


class WorkItemView(BaseModel):
    """One planned work item, without execution state"""
    name: str
    task_type: str
    group: Optional[str] = None
    description: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)
    must_run_after: List[str] = Field(default_factory=list)
    outputs: Dict[str, str] = Field(default_factory=dict)


class PlanResponse(BaseModel):
    """A validated task graph for one root unit"""
    root_name: str
    generate_task: str = Field(..., description="Aggregate generation work item")
    clean_task: str = Field(..., description="Aggregate clean work item")
    order: List[str] = Field(..., description="Work item names in dependency order")
    tasks: List[WorkItemView]

    @classmethod
    def from_graph(cls, graph: TaskGraph, generate_task: str, clean_task: str) -> "PlanResponse":
        return cls(
            root_name=graph.root_name,
            generate_task=generate_task,
            clean_task=clean_task,
            order=graph.topological_order(),
            tasks=[
                WorkItemView(
                    name=task.name,
                    task_type=task.task_type,
                    group=task.group,
                    description=task.description,
                    dependencies=list(task.dependencies),
                    must_run_after=list(task.must_run_after),
                    outputs=dict(task.outputs),
                )
                for task in graph.tasks.values()
            ],
        )


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error class name, e.g. 'MissingGenerator'")
    detail: str


__all__ = ["WorkItemView", "PlanResponse", "ErrorResponse"]
