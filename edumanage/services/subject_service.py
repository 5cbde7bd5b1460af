# edumanage/services/subject_service.py
from typing import List

from sqlalchemy import select

from edumanage.models import Subject
from edumanage.models.subject import DEFAULT_SUBJECT_COLOR
from edumanage.schemas.academics import SubjectCreate, SubjectRead, SubjectUpdate
from .base_service import BaseService


class SubjectService(BaseService):

    async def list_subjects(self, school_id: str) -> List[SubjectRead]:
        async def load():
            result = await self.db.execute(
                select(Subject).where(Subject.school_id == school_id).order_by(Subject.name)
            )
            return [SubjectRead.model_validate(row) for row in result.scalars().all()]

        return await self.cached(("subjects", school_id), load, List[SubjectRead])

    async def create_subject(self, school_id: str, data: SubjectCreate) -> SubjectRead:
        async def create():
            values = data.model_dump()
            values["color"] = values.get("color") or DEFAULT_SUBJECT_COLOR
            subject = Subject(school_id=school_id, **values)
            self.db.add(subject)
            await self.db.flush()
            return subject

        subject = await self.mutate(
            create,
            success="Subject created successfully",
            failure="Failed to create subject",
            invalidate=[("subjects", school_id)]
        )
        return SubjectRead.model_validate(subject)

    async def update_subject(self, school_id: str, subject_id: str, data: SubjectUpdate) -> SubjectRead:
        async def update():
            row = await self.get_scoped(Subject, subject_id, school_id, "Subject")
            self.apply_changes(row, data.model_dump(exclude_unset=True))
            await self.db.flush()
            return row

        row = await self.mutate(
            update,
            success="Subject updated successfully",
            failure="Failed to update subject",
            invalidate=[("subjects", school_id), ("timetable", school_id)]
        )
        return SubjectRead.model_validate(row)

    async def delete_subject(self, school_id: str, subject_id: str) -> None:
        async def remove():
            row = await self.get_scoped(Subject, subject_id, school_id, "Subject")
            await self.db.delete(row)
            await self.db.flush()

        await self.mutate(
            remove,
            success="Subject deleted successfully",
            failure="Failed to delete subject",
            invalidate=[("subjects", school_id), ("timetable", school_id)]
        )
