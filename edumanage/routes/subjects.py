# edumanage/routes/subjects.py
from typing import List

from fastapi import APIRouter, Depends, status

from edumanage.core.dependencies import (
    TenantScope,
    get_notices,
    get_subject_service,
    manage_school,
    view_school,
)
from edumanage.core.notices import NoticeBoard
from edumanage.schemas.academics import SubjectCreate, SubjectRead, SubjectUpdate
from edumanage.schemas.common import MutationResponse
from edumanage.services.subject_service import SubjectService

router = APIRouter(
    prefix="/api/v1/subjects",
    tags=["Subjects"]
)


@router.get("", response_model=List[SubjectRead])
async def list_subjects(
    scope: TenantScope = Depends(view_school),
    service: SubjectService = Depends(get_subject_service)
):
    return await service.list_subjects(scope.school_id)


@router.post("", response_model=MutationResponse[SubjectRead], status_code=status.HTTP_201_CREATED)
async def create_subject(
    data: SubjectCreate,
    scope: TenantScope = Depends(manage_school),
    service: SubjectService = Depends(get_subject_service),
    notices: NoticeBoard = Depends(get_notices)
):
    created = await service.create_subject(scope.school_id, data)
    return MutationResponse(message=notices.last_message(), data=created)


@router.patch("/{subject_id}", response_model=MutationResponse[SubjectRead])
async def update_subject(
    subject_id: str,
    data: SubjectUpdate,
    scope: TenantScope = Depends(manage_school),
    service: SubjectService = Depends(get_subject_service),
    notices: NoticeBoard = Depends(get_notices)
):
    updated = await service.update_subject(scope.school_id, subject_id, data)
    return MutationResponse(message=notices.last_message(), data=updated)


@router.delete("/{subject_id}", response_model=MutationResponse)
async def delete_subject(
    subject_id: str,
    scope: TenantScope = Depends(manage_school),
    service: SubjectService = Depends(get_subject_service),
    notices: NoticeBoard = Depends(get_notices)
):
    await service.delete_subject(scope.school_id, subject_id)
    return MutationResponse(message=notices.last_message())
