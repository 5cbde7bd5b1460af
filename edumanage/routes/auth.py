# edumanage/routes/auth.py
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from edumanage.core.dependencies import (
    get_auth_service,
    get_notices,
    get_registration_service,
    get_session_context,
    get_token_payload,
)
from edumanage.core.notices import NoticeBoard
from edumanage.core.session import SessionContext
from edumanage.schemas.auth import (
    LoginRequest,
    RegistrationResponse,
    SchoolRegistrationRequest,
    SessionResponse,
    SignUpRequest,
    SignUpResponse,
    TokenResponse,
)
from edumanage.schemas.common import SuccessResponse
from edumanage.schemas.school import SchoolRead
from edumanage.services.auth_service import AuthService
from edumanage.services.registration_service import RegistrationService

router = APIRouter(
    prefix="/api/v1/auth",
    tags=["Authentication"]
)


@router.post("/signup", response_model=SignUpResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignUpRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    return await auth_service.sign_up(request)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    return await auth_service.sign_in(request)


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    context: SessionContext = Depends(get_session_context),
    payload: Dict[str, Any] = Depends(get_token_payload),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Revoke the bearer token and end the session context"""
    await auth_service.sign_out(payload)
    context.sign_out()
    return SuccessResponse()


@router.get("/session", response_model=SessionResponse)
async def get_session(context: SessionContext = Depends(get_session_context)):
    return AuthService.session_response(context)


@router.post(
    "/register-school",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED
)
async def register_school(
    request: SchoolRegistrationRequest,
    service: RegistrationService = Depends(get_registration_service),
    notices: NoticeBoard = Depends(get_notices)
):
    school, user_id = await service.register_school(request)
    return RegistrationResponse(
        message=notices.last_message(),
        school=SchoolRead.model_validate(school),
        user_id=user_id
    )
