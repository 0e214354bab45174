from __future__ import annotations

from fastapi import APIRouter

from .schemas import JobsListOut
from .service import list_jobs

router = APIRouter(tags=["jobs"])


@router.get("/jobs", response_model=JobsListOut)
def api_list_jobs() -> JobsListOut:
    return JobsListOut(items=list_jobs())
