# edumanage/routes/attendance.py
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query

from edumanage.core.dependencies import (
    TenantScope,
    get_attendance_service,
    get_notices,
    mark_attendance,
    view_school,
)
from edumanage.core.notices import NoticeBoard
from edumanage.schemas.attendance import (
    AttendanceRead,
    AttendanceSummary,
    MarkAttendanceRequest,
    WeeklyAttendanceReport,
)
from edumanage.schemas.common import MutationResponse
from edumanage.services.attendance_service import AttendanceService

router = APIRouter(
    prefix="/api/v1/attendance",
    tags=["Attendance"]
)


@router.get("", response_model=List[AttendanceRead])
async def get_class_attendance(
    class_id: str = Query(...),
    on: date = Query(..., alias="date"),
    scope: TenantScope = Depends(view_school),
    service: AttendanceService = Depends(get_attendance_service)
):
    return await service.get_class_attendance(scope.school_id, class_id, on)


@router.get("/summary", response_model=AttendanceSummary)
async def get_day_summary(
    class_id: str = Query(...),
    on: date = Query(..., alias="date"),
    scope: TenantScope = Depends(view_school),
    service: AttendanceService = Depends(get_attendance_service)
):
    return await service.day_summary(scope.school_id, class_id, on)


@router.get("/report", response_model=WeeklyAttendanceReport)
async def get_weekly_report(
    class_id: str = Query(...),
    week_start: date = Query(...),
    week_end: date = Query(...),
    scope: TenantScope = Depends(view_school),
    service: AttendanceService = Depends(get_attendance_service)
):
    return await service.weekly_report(scope.school_id, class_id, week_start, week_end)


@router.post("", response_model=MutationResponse[List[AttendanceRead]])
async def save_attendance(
    request: MarkAttendanceRequest,
    scope: TenantScope = Depends(mark_attendance),
    service: AttendanceService = Depends(get_attendance_service),
    notices: NoticeBoard = Depends(get_notices)
):
    records = await service.mark_attendance(scope.school_id, scope.user_id, request)
    return MutationResponse(message=notices.last_message(), data=records)
