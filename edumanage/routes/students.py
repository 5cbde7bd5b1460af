# edumanage/routes/students.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from edumanage.core.dependencies import (
    TenantScope,
    get_notices,
    get_student_service,
    manage_school,
    view_school,
)
from edumanage.core.notices import NoticeBoard
from edumanage.schemas.common import MutationResponse
from edumanage.schemas.student import (
    SchoolParentRead,
    StudentCreate,
    StudentParentLink,
    StudentParentRead,
    StudentRead,
    StudentUpdate,
)
from edumanage.services.student_service import StudentService

router = APIRouter(
    prefix="/api/v1/students",
    tags=["Students"]
)


@router.get("", response_model=List[StudentRead])
async def list_students(
    class_id: Optional[str] = Query(default=None),
    scope: TenantScope = Depends(view_school),
    service: StudentService = Depends(get_student_service)
):
    return await service.list_students(scope.school_id, class_id)


# Declared before /{student_id} so "parents" is not taken for an id
@router.get("/parents", response_model=List[SchoolParentRead])
async def list_school_parents(
    scope: TenantScope = Depends(view_school),
    service: StudentService = Depends(get_student_service)
):
    return await service.list_school_parents(scope.school_id)


@router.get("/{student_id}", response_model=StudentRead)
async def get_student(
    student_id: str,
    scope: TenantScope = Depends(view_school),
    service: StudentService = Depends(get_student_service)
):
    return await service.get_student(scope.school_id, student_id)


@router.post("", response_model=MutationResponse[StudentRead], status_code=status.HTTP_201_CREATED)
async def create_student(
    data: StudentCreate,
    scope: TenantScope = Depends(manage_school),
    service: StudentService = Depends(get_student_service),
    notices: NoticeBoard = Depends(get_notices)
):
    created = await service.create_student(scope.school_id, data)
    return MutationResponse(message=notices.last_message(), data=created)


@router.patch("/{student_id}", response_model=MutationResponse[StudentRead])
async def update_student(
    student_id: str,
    data: StudentUpdate,
    scope: TenantScope = Depends(manage_school),
    service: StudentService = Depends(get_student_service),
    notices: NoticeBoard = Depends(get_notices)
):
    updated = await service.update_student(scope.school_id, student_id, data)
    return MutationResponse(message=notices.last_message(), data=updated)


@router.delete("/{student_id}", response_model=MutationResponse)
async def delete_student(
    student_id: str,
    scope: TenantScope = Depends(manage_school),
    service: StudentService = Depends(get_student_service),
    notices: NoticeBoard = Depends(get_notices)
):
    await service.delete_student(scope.school_id, student_id)
    return MutationResponse(message=notices.last_message())


@router.get("/{student_id}/parents", response_model=List[StudentParentRead])
async def list_student_parents(
    student_id: str,
    scope: TenantScope = Depends(view_school),
    service: StudentService = Depends(get_student_service)
):
    return await service.list_parents(scope.school_id, student_id)


@router.post(
    "/{student_id}/parents",
    response_model=MutationResponse[StudentParentRead],
    status_code=status.HTTP_201_CREATED
)
async def link_parent(
    student_id: str,
    data: StudentParentLink,
    scope: TenantScope = Depends(manage_school),
    service: StudentService = Depends(get_student_service),
    notices: NoticeBoard = Depends(get_notices)
):
    link = await service.link_parent(scope.school_id, student_id, data)
    return MutationResponse(message=notices.last_message(), data=link)


@router.delete("/{student_id}/parents/{link_id}", response_model=MutationResponse)
async def unlink_parent(
    student_id: str,
    link_id: str,
    scope: TenantScope = Depends(manage_school),
    service: StudentService = Depends(get_student_service),
    notices: NoticeBoard = Depends(get_notices)
):
    await service.unlink_parent(scope.school_id, student_id, link_id)
    return MutationResponse(message=notices.last_message())
