# edumanage/services/attendance_service.py
import logging
from collections import Counter, defaultdict
from datetime import date
from typing import Dict, Iterable, List

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import joinedload

from edumanage.core.errors import ValidationError
from edumanage.core.logging import log_function_call
from edumanage.models import AttendanceRecord, Class, Student
from edumanage.models.base import generate_uuid, utcnow
from edumanage.schemas.attendance import (
    AttendanceRead,
    AttendanceStudent,
    AttendanceSummary,
    MarkAttendanceRequest,
    StudentAttendanceStats,
    WeeklyAttendanceReport,
)
from edumanage.schemas.enums import AttendanceStatus
from .base_service import BaseService

logger = logging.getLogger(__name__)

UPSERT_DIALECTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}

# Late arrivals count as attended
ATTENDED_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE})


def to_attendance_read(record: AttendanceRecord) -> AttendanceRead:
    read = AttendanceRead.model_validate(record)
    if record.student is None:
        return read
    return read.model_copy(update={"students": AttendanceStudent.model_validate(record.student)})


def summarize(records: Iterable[AttendanceRead]) -> AttendanceSummary:
    """Counts per status for one set of records"""
    counts = Counter(record.status for record in records)
    return AttendanceSummary(
        present=counts[AttendanceStatus.PRESENT],
        absent=counts[AttendanceStatus.ABSENT],
        late=counts[AttendanceStatus.LATE],
        excused=counts[AttendanceStatus.EXCUSED],
        total=sum(counts.values())
    )


def student_stats(records: Iterable[AttendanceRead]) -> List[StudentAttendanceStats]:
    """Per-student attended/total with a whole-number percentage"""
    totals: Dict[str, int] = defaultdict(int)
    attended: Dict[str, int] = defaultdict(int)
    for record in records:
        totals[record.student_id] += 1
        if record.status in ATTENDED_STATUSES:
            attended[record.student_id] += 1

    return [
        StudentAttendanceStats(
            student_id=student_id,
            present=attended[student_id],
            total=total,
            percentage=round(attended[student_id] / total * 100) if total else 0
        )
        for student_id, total in totals.items()
    ]


class AttendanceService(BaseService):
    """
    Daily class attendance. Marking a class for a day writes one row per
    student; marking the same student and day again replaces the row.
    """

    def _records_query(self, school_id: str, class_id: str):
        return (
            select(AttendanceRecord)
            .options(joinedload(AttendanceRecord.student))
            .where(AttendanceRecord.school_id == school_id, AttendanceRecord.class_id == class_id)
            .execution_options(populate_existing=True)
        )

    async def get_class_attendance(self, school_id: str, class_id: str, on: date) -> List[AttendanceRead]:
        async def load():
            result = await self.db.execute(
                self._records_query(school_id, class_id)
                .where(AttendanceRecord.date == on)
                .order_by(AttendanceRecord.created_at)
            )
            return [to_attendance_read(record) for record in result.scalars().all()]

        return await self.cached(("attendance", school_id, class_id, on.isoformat()), load, List[AttendanceRead])

    async def weekly_report(
        self,
        school_id: str,
        class_id: str,
        week_start: date,
        week_end: date
    ) -> WeeklyAttendanceReport:
        if week_end < week_start:
            raise ValidationError("week_end must not be before week_start")

        async def load():
            result = await self.db.execute(
                self._records_query(school_id, class_id)
                .where(AttendanceRecord.date >= week_start, AttendanceRecord.date <= week_end)
                .order_by(AttendanceRecord.date, AttendanceRecord.created_at)
            )
            records = [to_attendance_read(record) for record in result.scalars().all()]
            return WeeklyAttendanceReport(
                class_id=class_id,
                week_start=week_start,
                week_end=week_end,
                records=records,
                stats=student_stats(records)
            )

        key = ("attendance-report", school_id, class_id, week_start.isoformat(), week_end.isoformat())
        return await self.cached(key, load, WeeklyAttendanceReport)

    async def day_summary(self, school_id: str, class_id: str, on: date) -> AttendanceSummary:
        return summarize(await self.get_class_attendance(school_id, class_id, on))

    @log_function_call(logger)
    async def mark_attendance(
        self,
        school_id: str,
        marked_by: str,
        request: MarkAttendanceRequest
    ) -> List[AttendanceRead]:
        async def upsert():
            await self.get_scoped(Class, request.class_id, school_id, "Class")
            await self._check_students(school_id, [entry.student_id for entry in request.entries])

            now = utcnow()
            rows = {}
            # Later entries for the same student win
            for entry in request.entries:
                rows[entry.student_id] = {
                    "id": generate_uuid(),
                    "school_id": school_id,
                    "student_id": entry.student_id,
                    "class_id": request.class_id,
                    "date": request.date,
                    "status": entry.status,
                    "notes": entry.notes,
                    "marked_by": marked_by,
                    "created_at": now,
                    "updated_at": now,
                }
            await self._upsert(list(rows.values()))

        await self.mutate(
            upsert,
            success="Attendance saved successfully",
            failure="Failed to save attendance",
            invalidate=[("attendance", school_id), ("attendance-report", school_id)]
        )
        logger.info(
            f"Attendance for class {request.class_id} on {request.date} marked by {marked_by}",
            extra={"user_id": marked_by, "school_id": school_id, "action": "mark_attendance"}
        )
        return await self.get_class_attendance(school_id, request.class_id, request.date)

    async def _check_students(self, school_id: str, student_ids: List[str]) -> None:
        wanted = set(student_ids)
        result = await self.db.execute(
            select(Student.id).where(Student.school_id == school_id, Student.id.in_(wanted))
        )
        missing = wanted - set(result.scalars().all())
        if missing:
            raise ValidationError(f"Students not found in this school: {', '.join(sorted(missing))}")

    async def _upsert(self, rows: List[dict]) -> None:
        dialect = self.db.get_bind().dialect.name
        insert = UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise ValidationError(f"Attendance upsert is not supported on {dialect}")

        stmt = insert(AttendanceRecord).values(rows)
        stmt = stmt.on_conflict_do_update(
            index_elements=[AttendanceRecord.student_id, AttendanceRecord.date],
            set_={
                "class_id": stmt.excluded.class_id,
                "status": stmt.excluded.status,
                "notes": stmt.excluded.notes,
                "marked_by": stmt.excluded.marked_by,
                "updated_at": stmt.excluded.updated_at,
            }
        )
        await self.db.execute(stmt)
