# edumanage/routes/classes.py
from typing import List

from fastapi import APIRouter, Depends, status

from edumanage.core.dependencies import (
    TenantScope,
    get_class_service,
    get_notices,
    manage_school,
    view_school,
)
from edumanage.core.notices import NoticeBoard
from edumanage.schemas.academics import ClassCreate, ClassRead, ClassUpdate
from edumanage.schemas.common import MutationResponse
from edumanage.services.class_service import ClassService

router = APIRouter(
    prefix="/api/v1/classes",
    tags=["Classes"]
)


@router.get("", response_model=List[ClassRead])
async def list_classes(
    scope: TenantScope = Depends(view_school),
    service: ClassService = Depends(get_class_service)
):
    return await service.list_classes(scope.school_id)


@router.post("", response_model=MutationResponse[ClassRead], status_code=status.HTTP_201_CREATED)
async def create_class(
    data: ClassCreate,
    scope: TenantScope = Depends(manage_school),
    service: ClassService = Depends(get_class_service),
    notices: NoticeBoard = Depends(get_notices)
):
    created = await service.create_class(scope.school_id, data)
    return MutationResponse(message=notices.last_message(), data=created)


@router.patch("/{class_id}", response_model=MutationResponse[ClassRead])
async def update_class(
    class_id: str,
    data: ClassUpdate,
    scope: TenantScope = Depends(manage_school),
    service: ClassService = Depends(get_class_service),
    notices: NoticeBoard = Depends(get_notices)
):
    updated = await service.update_class(scope.school_id, class_id, data)
    return MutationResponse(message=notices.last_message(), data=updated)


@router.delete("/{class_id}", response_model=MutationResponse)
async def delete_class(
    class_id: str,
    scope: TenantScope = Depends(manage_school),
    service: ClassService = Depends(get_class_service),
    notices: NoticeBoard = Depends(get_notices)
):
    await service.delete_class(scope.school_id, class_id)
    return MutationResponse(message=notices.last_message())
