# edumanage/routes/users.py
import logging
from typing import Any, Dict, Type, TypeVar

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from edumanage.core.dependencies import get_current_user, get_provisioning_service
from edumanage.core.errors import ValidationError
from edumanage.core.session import SessionUser
from edumanage.schemas.common import SuccessResponse
from edumanage.schemas.enums import ProvisioningAction
from edumanage.schemas.user import (
    CreateUserRequest,
    CreateUserResponse,
    DeleteUserRequest,
    ListUsersRequest,
    ListUsersResponse,
)
from edumanage.services.provisioning_service import ProvisioningService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/functions/v1",
    tags=["User Provisioning"]
)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

MISSING_FIELDS_MESSAGES = {
    ProvisioningAction.CREATE_USER: "Missing required fields",
    ProvisioningAction.LIST_USERS: "school_id required",
    ProvisioningAction.DELETE_USER: "user_id and school_id required",
}

R = TypeVar("R", bound=BaseModel)


def parse_action(body: Dict[str, Any], model: Type[R], action: ProvisioningAction) -> R:
    try:
        return model.model_validate(body)
    except PydanticValidationError:
        raise ValidationError(MISSING_FIELDS_MESSAGES[action])


@router.options("/manage-school-users", include_in_schema=False)
async def manage_school_users_preflight():
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post("/manage-school-users")
async def manage_school_users(
    body: Dict[str, Any] = Body(...),
    caller: SessionUser = Depends(get_current_user),
    service: ProvisioningService = Depends(get_provisioning_service)
):
    """Create, list or remove school users; `action` in the body selects the operation"""
    try:
        action = ProvisioningAction(body.get("action"))
    except ValueError:
        raise ValidationError("Unknown action")

    match action:
        case ProvisioningAction.CREATE_USER:
            request = parse_action(body, CreateUserRequest, action)
            user_id = await service.create_user(caller.id, request)
            return CreateUserResponse(user_id=user_id)
        case ProvisioningAction.LIST_USERS:
            request = parse_action(body, ListUsersRequest, action)
            return ListUsersResponse(users=await service.list_users(caller.id, request))
        case ProvisioningAction.DELETE_USER:
            request = parse_action(body, DeleteUserRequest, action)
            await service.delete_user(caller.id, request)
            return SuccessResponse()
