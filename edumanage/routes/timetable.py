# edumanage/routes/timetable.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from edumanage.core.dependencies import (
    TenantScope,
    get_notices,
    get_timetable_service,
    manage_school,
    view_school,
)
from edumanage.core.notices import NoticeBoard
from edumanage.schemas.academics import (
    TimetableDay,
    TimetableEntryCreate,
    TimetableEntryRead,
    TimetableEntryUpdate,
)
from edumanage.schemas.common import MutationResponse
from edumanage.services.timetable_service import TimetableService

router = APIRouter(
    prefix="/api/v1/timetable",
    tags=["Timetable"]
)


@router.get("", response_model=List[TimetableEntryRead])
async def list_entries(
    class_id: Optional[str] = Query(default=None),
    scope: TenantScope = Depends(view_school),
    service: TimetableService = Depends(get_timetable_service)
):
    return await service.list_entries(scope.school_id, class_id)


@router.get("/grid", response_model=List[TimetableDay])
async def weekly_grid(
    class_id: Optional[str] = Query(default=None),
    scope: TenantScope = Depends(view_school),
    service: TimetableService = Depends(get_timetable_service)
):
    return await service.weekly_grid(scope.school_id, class_id)


@router.post("", response_model=MutationResponse[TimetableEntryRead], status_code=status.HTTP_201_CREATED)
async def create_entry(
    data: TimetableEntryCreate,
    scope: TenantScope = Depends(manage_school),
    service: TimetableService = Depends(get_timetable_service),
    notices: NoticeBoard = Depends(get_notices)
):
    created = await service.create_entry(scope.school_id, data)
    return MutationResponse(message=notices.last_message(), data=created)


@router.patch("/{entry_id}", response_model=MutationResponse[TimetableEntryRead])
async def update_entry(
    entry_id: str,
    data: TimetableEntryUpdate,
    scope: TenantScope = Depends(manage_school),
    service: TimetableService = Depends(get_timetable_service),
    notices: NoticeBoard = Depends(get_notices)
):
    updated = await service.update_entry(scope.school_id, entry_id, data)
    return MutationResponse(message=notices.last_message(), data=updated)


@router.delete("/{entry_id}", response_model=MutationResponse)
async def delete_entry(
    entry_id: str,
    scope: TenantScope = Depends(manage_school),
    service: TimetableService = Depends(get_timetable_service),
    notices: NoticeBoard = Depends(get_notices)
):
    await service.delete_entry(scope.school_id, entry_id)
    return MutationResponse(message=notices.last_message())
