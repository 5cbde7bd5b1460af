# edumanage/services/timetable_service.py
import logging
from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from edumanage.core.errors import ValidationError
from edumanage.models import Class, Subject, TimetableEntry, UserRole
from edumanage.schemas.academics import (
    ClassSummary,
    SubjectSummary,
    TeacherSummary,
    TimetableDay,
    TimetableEntryCreate,
    TimetableEntryRead,
    TimetableEntryUpdate,
)
from .base_service import BaseService

logger = logging.getLogger(__name__)


def to_entry_read(entry: TimetableEntry) -> TimetableEntryRead:
    return TimetableEntryRead(
        id=entry.id,
        school_id=entry.school_id,
        class_id=entry.class_id,
        subject_id=entry.subject_id,
        teacher_id=entry.teacher_id,
        day_of_week=entry.day_of_week,
        start_time=entry.start_time,
        end_time=entry.end_time,
        room=entry.room,
        classes=ClassSummary.model_validate(entry.class_) if entry.class_ else None,
        subjects=SubjectSummary.model_validate(entry.subject) if entry.subject else None,
        profiles=TeacherSummary.model_validate(entry.teacher) if entry.teacher else None
    )


class TimetableService(BaseService):
    """Weekly slots per class. Overlapping slots are stored as given."""

    async def list_entries(self, school_id: str, class_id: Optional[str] = None) -> List[TimetableEntryRead]:
        async def load():
            query = (
                select(TimetableEntry)
                .options(
                    joinedload(TimetableEntry.class_),
                    joinedload(TimetableEntry.subject),
                    joinedload(TimetableEntry.teacher)
                )
                .where(TimetableEntry.school_id == school_id)
                .order_by(TimetableEntry.day_of_week, TimetableEntry.start_time)
            )
            if class_id:
                query = query.where(TimetableEntry.class_id == class_id)
            result = await self.db.execute(query)
            return [to_entry_read(entry) for entry in result.scalars().all()]

        return await self.cached(("timetable", school_id, class_id), load, List[TimetableEntryRead])

    async def weekly_grid(self, school_id: str, class_id: Optional[str] = None) -> List[TimetableDay]:
        """Entries grouped by day of week, only days that have slots"""
        by_day: Dict[int, List[TimetableEntryRead]] = defaultdict(list)
        for entry in await self.list_entries(school_id, class_id):
            by_day[entry.day_of_week].append(entry)
        return [TimetableDay(day_of_week=day, entries=by_day[day]) for day in sorted(by_day)]

    async def _check_references(
        self,
        school_id: str,
        class_id: Optional[str],
        subject_id: Optional[str],
        teacher_id: Optional[str]
    ) -> None:
        if class_id is not None:
            await self.get_scoped(Class, class_id, school_id, "Class")
        if subject_id is not None:
            await self.get_scoped(Subject, subject_id, school_id, "Subject")
        if teacher_id is not None:
            member = await self.db.scalar(
                select(UserRole.id).where(
                    UserRole.user_id == teacher_id,
                    UserRole.school_id == school_id
                ).limit(1)
            )
            if member is None:
                raise ValidationError("Teacher is not a member of this school")

    @staticmethod
    def _check_times(entry: TimetableEntry) -> None:
        if entry.end_time <= entry.start_time:
            raise ValidationError("End time must be after start time")

    async def create_entry(self, school_id: str, data: TimetableEntryCreate) -> TimetableEntryRead:
        async def create():
            await self._check_references(school_id, data.class_id, data.subject_id, data.teacher_id)
            entry = TimetableEntry(school_id=school_id, **data.model_dump())
            self._check_times(entry)
            self.db.add(entry)
            await self.db.flush()
            return entry.id

        entry_id = await self.mutate(
            create,
            success="Timetable entry created successfully",
            failure="Failed to create timetable entry",
            invalidate=[("timetable", school_id)]
        )
        return await self._read_entry(school_id, entry_id)

    async def update_entry(
        self,
        school_id: str,
        entry_id: str,
        data: TimetableEntryUpdate
    ) -> TimetableEntryRead:
        async def update():
            entry = await self.get_scoped(TimetableEntry, entry_id, school_id, "Timetable entry")
            changes = data.model_dump(exclude_unset=True)
            await self._check_references(
                school_id,
                changes.get("class_id"),
                changes.get("subject_id"),
                changes.get("teacher_id")
            )
            self.apply_changes(entry, changes)
            self._check_times(entry)
            await self.db.flush()

        await self.mutate(
            update,
            success="Timetable entry updated successfully",
            failure="Failed to update timetable entry",
            invalidate=[("timetable", school_id)]
        )
        return await self._read_entry(school_id, entry_id)

    async def delete_entry(self, school_id: str, entry_id: str) -> None:
        async def remove():
            entry = await self.get_scoped(TimetableEntry, entry_id, school_id, "Timetable entry")
            await self.db.delete(entry)
            await self.db.flush()

        await self.mutate(
            remove,
            success="Timetable entry deleted successfully",
            failure="Failed to delete timetable entry",
            invalidate=[("timetable", school_id)]
        )

    async def _read_entry(self, school_id: str, entry_id: str) -> TimetableEntryRead:
        result = await self.db.execute(
            select(TimetableEntry)
            .options(
                joinedload(TimetableEntry.class_),
                joinedload(TimetableEntry.subject),
                joinedload(TimetableEntry.teacher)
            )
            .where(TimetableEntry.id == entry_id, TimetableEntry.school_id == school_id)
            .execution_options(populate_existing=True)
        )
        return to_entry_read(result.scalar_one())
