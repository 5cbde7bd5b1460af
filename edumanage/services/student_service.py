# edumanage/services/student_service.py
import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import joinedload

from edumanage.core.errors import NotFoundError, ValidationError
from edumanage.models import Class, Profile, Student, StudentParent, UserRole
from edumanage.schemas.academics import ClassSummary
from edumanage.schemas.enums import AppRole
from edumanage.schemas.student import (
    ParentSummary,
    SchoolParentRead,
    StudentCreate,
    StudentParentLink,
    StudentParentRead,
    StudentRead,
    StudentUpdate,
)
from .base_service import BaseService

logger = logging.getLogger(__name__)


def to_student_read(student: Student) -> StudentRead:
    read = StudentRead.model_validate(student)
    if student.class_ is None:
        return read
    return read.model_copy(update={"classes": ClassSummary.model_validate(student.class_)})


def to_link_read(link: StudentParent) -> StudentParentRead:
    return StudentParentRead(
        id=link.id,
        student_id=link.student_id,
        parent_id=link.parent_id,
        relationship=link.relationship_type,
        is_primary_contact=link.is_primary_contact,
        created_at=link.created_at,
        profiles=ParentSummary.model_validate(link.parent) if link.parent else None
    )


class StudentService(BaseService):
    """Enrollment records and their parent links"""

    def _student_query(self, school_id: str):
        return (
            select(Student)
            .options(joinedload(Student.class_))
            .where(Student.school_id == school_id)
        )

    async def list_students(self, school_id: str, class_id: Optional[str] = None) -> List[StudentRead]:
        async def load():
            query = (
                self._student_query(school_id)
                .order_by(Student.last_name, Student.first_name)
                .execution_options(populate_existing=True)
            )
            if class_id:
                query = query.where(Student.class_id == class_id)
            result = await self.db.execute(query)
            return [to_student_read(student) for student in result.scalars().all()]

        return await self.cached(("students", school_id, class_id), load, List[StudentRead])

    async def get_student(self, school_id: str, student_id: str) -> StudentRead:
        async def load():
            result = await self.db.execute(
                self._student_query(school_id)
                .where(Student.id == student_id)
                .execution_options(populate_existing=True)
            )
            student = result.scalar_one_or_none()
            if student is None:
                raise NotFoundError("Student not found")
            return to_student_read(student)

        return await self.cached(("student", school_id, student_id), load, StudentRead)

    async def _check_class(self, school_id: str, class_id: Optional[str]) -> None:
        if class_id is not None:
            await self.get_scoped(Class, class_id, school_id, "Class")

    async def create_student(self, school_id: str, data: StudentCreate) -> StudentRead:
        async def create():
            await self._check_class(school_id, data.class_id)
            values = data.model_dump(exclude_none=True)
            student = Student(school_id=school_id, **values)
            self.db.add(student)
            await self.db.flush()
            return student.id

        student_id = await self.mutate(
            create,
            success="Student enrolled successfully",
            failure="Failed to enroll student",
            invalidate=[("students", school_id)]
        )
        logger.info(f"Enrolled student {student_id} in school {school_id}")
        return await self.get_student(school_id, student_id)

    async def update_student(self, school_id: str, student_id: str, data: StudentUpdate) -> StudentRead:
        async def update():
            student = await self.get_scoped(Student, student_id, school_id, "Student")
            changes = data.model_dump(exclude_unset=True)
            if "class_id" in changes:
                await self._check_class(school_id, changes["class_id"])
            self.apply_changes(student, changes)
            await self.db.flush()

        await self.mutate(
            update,
            success="Student updated successfully",
            failure="Failed to update student",
            invalidate=[("students", school_id), ("student", school_id, student_id)]
        )
        return await self.get_student(school_id, student_id)

    async def delete_student(self, school_id: str, student_id: str) -> None:
        async def remove():
            await self.get_scoped(Student, student_id, school_id, "Student")
            await self.db.execute(
                delete(Student).where(Student.id == student_id, Student.school_id == school_id)
            )

        # Parent links and attendance rows cascade with the student
        await self.mutate(
            remove,
            success="Student removed successfully",
            failure="Failed to remove student",
            invalidate=[
                ("students", school_id),
                ("student", school_id, student_id),
                ("student-parents", school_id, student_id),
                ("attendance", school_id),
                ("attendance-report", school_id),
            ]
        )

    async def list_parents(self, school_id: str, student_id: str) -> List[StudentParentRead]:
        async def load():
            await self.get_scoped(Student, student_id, school_id, "Student")
            result = await self.db.execute(
                select(StudentParent)
                .options(joinedload(StudentParent.parent))
                .where(StudentParent.student_id == student_id)
                .order_by(StudentParent.created_at)
            )
            return [to_link_read(link) for link in result.scalars().all()]

        return await self.cached(("student-parents", school_id, student_id), load, List[StudentParentRead])

    async def list_school_parents(self, school_id: str) -> List[SchoolParentRead]:
        """Profiles holding the parent role in the school, for the link picker"""
        async def load():
            result = await self.db.execute(
                select(Profile)
                .join(UserRole, UserRole.user_id == Profile.id)
                .where(UserRole.school_id == school_id, UserRole.role == AppRole.PARENT)
                .order_by(Profile.full_name)
                .distinct()
            )
            return [SchoolParentRead.model_validate(profile) for profile in result.scalars().all()]

        return await self.cached(("school-parents", school_id), load, List[SchoolParentRead])

    async def link_parent(self, school_id: str, student_id: str, data: StudentParentLink) -> StudentParentRead:
        async def link():
            await self.get_scoped(Student, student_id, school_id, "Student")
            is_parent = await self.db.scalar(
                select(UserRole.id).where(
                    UserRole.user_id == data.parent_id,
                    UserRole.school_id == school_id,
                    UserRole.role == AppRole.PARENT
                ).limit(1)
            )
            if is_parent is None:
                raise ValidationError("Selected user is not a parent in this school")

            link_row = StudentParent(
                student_id=student_id,
                parent_id=data.parent_id,
                relationship_type=data.relationship,
                is_primary_contact=data.is_primary_contact
            )
            self.db.add(link_row)
            await self.db.flush()
            return link_row.id

        link_id = await self.mutate(
            link,
            success="Parent linked successfully",
            failure="Failed to link parent",
            invalidate=[("student-parents", school_id, student_id)]
        )
        result = await self.db.execute(
            select(StudentParent)
            .options(joinedload(StudentParent.parent))
            .where(StudentParent.id == link_id)
        )
        return to_link_read(result.scalar_one())

    async def unlink_parent(self, school_id: str, student_id: str, link_id: str) -> None:
        async def unlink():
            await self.get_scoped(Student, student_id, school_id, "Student")
            result = await self.db.execute(
                delete(StudentParent).where(
                    StudentParent.id == link_id,
                    StudentParent.student_id == student_id
                )
            )
            if result.rowcount == 0:
                raise NotFoundError("Parent link not found")

        await self.mutate(
            unlink,
            success="Parent unlinked successfully",
            failure="Failed to unlink parent",
            invalidate=[("student-parents", school_id, student_id)]
        )
