# edumanage/services/class_service.py
import logging
from datetime import date
from typing import List

from sqlalchemy import select

from edumanage.models import Class
from edumanage.schemas.academics import ClassCreate, ClassRead, ClassUpdate
from .base_service import BaseService

logger = logging.getLogger(__name__)


def current_academic_year(today: date = None) -> str:
    """Academic year label such as '2024-2025'; the year rolls over in August"""
    today = today or date.today()
    start = today.year if today.month >= 8 else today.year - 1
    return f"{start}-{start + 1}"


class ClassService(BaseService):

    async def list_classes(self, school_id: str) -> List[ClassRead]:
        async def load():
            result = await self.db.execute(
                select(Class)
                .where(Class.school_id == school_id)
                .order_by(Class.grade_level, Class.name)
            )
            return [ClassRead.model_validate(row) for row in result.scalars().all()]

        return await self.cached(("classes", school_id), load, List[ClassRead])

    async def create_class(self, school_id: str, data: ClassCreate) -> ClassRead:
        async def create():
            values = data.model_dump()
            values["academic_year"] = values.get("academic_year") or current_academic_year()
            new_class = Class(school_id=school_id, **values)
            self.db.add(new_class)
            await self.db.flush()
            return new_class

        new_class = await self.mutate(
            create,
            success="Class created successfully",
            failure="Failed to create class",
            invalidate=[("classes", school_id)]
        )
        logger.info(f"Created class {new_class.id} in school {school_id}")
        return ClassRead.model_validate(new_class)

    async def update_class(self, school_id: str, class_id: str, data: ClassUpdate) -> ClassRead:
        async def update():
            row = await self.get_scoped(Class, class_id, school_id, "Class")
            self.apply_changes(row, data.model_dump(exclude_unset=True))
            await self.db.flush()
            return row

        row = await self.mutate(
            update,
            success="Class updated successfully",
            failure="Failed to update class",
            invalidate=[
                ("classes", school_id),
                ("timetable", school_id),
                ("students", school_id),
                ("student", school_id),
            ]
        )
        return ClassRead.model_validate(row)

    async def delete_class(self, school_id: str, class_id: str) -> None:
        async def remove():
            row = await self.get_scoped(Class, class_id, school_id, "Class")
            await self.db.delete(row)
            await self.db.flush()

        # Timetable slots and attendance cascade with the class; students are unassigned
        await self.mutate(
            remove,
            success="Class deleted successfully",
            failure="Failed to delete class",
            invalidate=[
                ("classes", school_id),
                ("timetable", school_id),
                ("students", school_id),
                ("student", school_id),
                ("attendance", school_id),
                ("attendance-report", school_id),
            ]
        )
        logger.info(f"Deleted class {class_id} from school {school_id}")
