"""
Scheduler API

Status and manual triggers for background workflows.
"""
from fastapi import APIRouter, HTTPException
from typing import Dict, Any

from app.services.scheduler import get_scheduler_orchestrator, get_trimming_scheduler

router = APIRouter(prefix="/scheduler", tags=["Scheduler"])


@router.get("/status")
async def get_scheduler_status() -> Dict[str, Any]:
    """
    Get status of all workflows and scheduler infrastructure.

    Returns unified view of:
    - Scheduler running state
    - All registered jobs
    - Per-workflow statistics
    """
    scheduler = get_scheduler_orchestrator()
    trimming = get_trimming_scheduler()

    return {
        "scheduler": scheduler.get_status(),
        "workflows": {
            "trimming": trimming.get_status(),
        }
    }


@router.post("/workflows/{workflow_name}/trigger")
async def trigger_workflow(workflow_name: str) -> Dict[str, Any]:
    """
    Manually trigger workflow execution and wait for its result.

    **Available workflows:**
    - `trimming`: Scan all memories and delete those above the trim threshold

    A trigger that lands while the same workflow is running returns
    `skipped: true` instead of starting a second pass.
    """
    if workflow_name == "trimming":
        workflow_scheduler = get_trimming_scheduler()
    else:
        raise HTTPException(status_code=404, detail=f"Unknown workflow: {workflow_name}")

    result = await workflow_scheduler.trigger_manual()

    return {
        "workflow": workflow_name,
        "result": result,
    }
