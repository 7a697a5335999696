"""
Plans Router
FastAPI routes for planning a project's code generation graph

Planning is pure configuration: nothing is extracted, compiled or
generated. Configuration errors are client errors and map to 422.
"""
import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from conjure_orchestrator.config import TASK_CLEAN, TASK_COMPILE_CONJURE
from conjure_orchestrator.core.orchestrator import ConjureOrchestrator
from conjure_orchestrator.errors import ConfigurationError
from conjure_orchestrator.schemas.manifest_schema import ProjectManifest
from conjure_orchestrator.schemas.plan_schema import ErrorResponse, PlanResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plans", tags=["plans"])

orchestrator = ConjureOrchestrator()


@router.post(
    "",
    response_model=PlanResponse,
    responses={status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse}},
)
async def create_plan(manifest: ProjectManifest):
    """
    Plan the work item graph for a project manifest

    Returns every work item with its dependencies and declared outputs,
    plus the names of the aggregate generate and clean operations.
    """
    try:
        graph = orchestrator.plan(manifest)
    except ConfigurationError as e:
        logger.info(f"[Plans] {manifest.name}: {type(e).__name__}: {e}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": type(e).__name__, "detail": str(e)},
        )

    return PlanResponse.from_graph(
        graph,
        generate_task=":" + TASK_COMPILE_CONJURE,
        clean_task=":" + TASK_CLEAN,
    )
