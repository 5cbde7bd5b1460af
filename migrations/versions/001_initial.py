"""Initial schema: tenants, identities, academics, enrollment and attendance.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None

app_role = sa.Enum('super_admin', 'school_admin', 'teacher', 'parent', 'student', name='app_role')
student_gender = sa.Enum('male', 'female', 'other', name='student_gender')
student_status = sa.Enum('active', 'inactive', 'graduated', 'transferred', name='student_status')
parent_relationship = sa.Enum('parent', 'guardian', 'other', name='parent_relationship')
attendance_status = sa.Enum('present', 'absent', 'late', 'excused', name='attendance_status')


def tenant_columns():
    return [
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('school_id', sa.String(length=36), sa.ForeignKey('schools.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'schools',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_schools_slug', 'schools', ['slug'], unique=True)

    op.create_table(
        'auth_identities',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('email_confirmed', sa.Boolean(), nullable=False),
        sa.Column('user_metadata', sa.JSON(), nullable=False),
        sa.Column('last_sign_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_auth_identities_email', 'auth_identities', ['email'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('id', sa.String(length=36), sa.ForeignKey('auth_identities.id', ondelete='CASCADE'),
                  primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('avatar_url', sa.String(length=512), nullable=True),
        sa.Column('school_id', sa.String(length=36), sa.ForeignKey('schools.id', ondelete='SET NULL'),
                  nullable=True, index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'user_roles',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('profiles.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('role', app_role, nullable=False),
        sa.Column('school_id', sa.String(length=36), sa.ForeignKey('schools.id', ondelete='CASCADE'),
                  nullable=True, index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('user_id', 'role', 'school_id', name='uq_user_roles_user_role_school'),
    )

    op.create_table(
        'classes',
        *tenant_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('grade_level', sa.String(length=50), nullable=False),
        sa.Column('section', sa.String(length=50), nullable=True),
        sa.Column('academic_year', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )

    op.create_table(
        'subjects',
        *tenant_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('school_id', 'code', name='uq_subjects_school_code'),
    )

    op.create_table(
        'timetable_entries',
        *tenant_columns(),
        sa.Column('class_id', sa.String(length=36), sa.ForeignKey('classes.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('subject_id', sa.String(length=36), sa.ForeignKey('subjects.id', ondelete='CASCADE'),
                  nullable=False),
        sa.Column('teacher_id', sa.String(length=36), sa.ForeignKey('profiles.id', ondelete='SET NULL'),
                  nullable=True),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('room', sa.String(length=100), nullable=True),
        sa.CheckConstraint('day_of_week BETWEEN 0 AND 6', name='ck_timetable_day_of_week'),
    )

    op.create_table(
        'students',
        *tenant_columns(),
        sa.Column('class_id', sa.String(length=36), sa.ForeignKey('classes.id', ondelete='SET NULL'),
                  nullable=True, index=True),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('profiles.id', ondelete='SET NULL'),
                  nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', student_gender, nullable=True),
        sa.Column('admission_number', sa.String(length=50), nullable=True),
        sa.Column('enrollment_date', sa.Date(), nullable=False),
        sa.Column('status', student_status, nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('emergency_contact_name', sa.String(length=255), nullable=True),
        sa.Column('emergency_contact_phone', sa.String(length=50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'student_parents',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('student_id', sa.String(length=36), sa.ForeignKey('students.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('parent_id', sa.String(length=36), sa.ForeignKey('profiles.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('relationship', parent_relationship, nullable=False),
        sa.Column('is_primary_contact', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('student_id', 'parent_id', name='uq_student_parents_pair'),
    )

    op.create_table(
        'attendance',
        *tenant_columns(),
        sa.Column('student_id', sa.String(length=36), sa.ForeignKey('students.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('class_id', sa.String(length=36), sa.ForeignKey('classes.id', ondelete='CASCADE'),
                  nullable=False, index=True),
        sa.Column('date', sa.Date(), nullable=False, index=True),
        sa.Column('status', attendance_status, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('marked_by', sa.String(length=36), sa.ForeignKey('profiles.id', ondelete='SET NULL'),
                  nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('student_id', 'date', name='uq_attendance_student_date'),
    )


def downgrade() -> None:
    for table in (
        'attendance',
        'student_parents',
        'students',
        'timetable_entries',
        'subjects',
        'classes',
        'user_roles',
        'profiles',
        'auth_identities',
        'schools',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in (attendance_status, parent_relationship, student_status, student_gender, app_role):
        enum.drop(bind, checkfirst=True)
