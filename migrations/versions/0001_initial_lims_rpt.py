"""lims/rpt 초기 스키마: 환자, 검사 배정, 보고서 유형/필드/인스턴스/값

Revision ID: 0001_initial_lims_rpt
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial_lims_rpt"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(*, with_updated: bool = True):
    columns = [sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now())]
    if with_updated:
        columns.append(sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now()))
    return columns


def upgrade() -> None:
    # --- lims.patients ---
    op.create_table(
        "patients",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("mobile_number", sa.String(15), nullable=False),
        sa.Column("title", sa.String(10), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("sex", sa.String(10), nullable=False),
        sa.Column("age_years", sa.Integer(), nullable=False),
        sa.Column("age_months", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("age_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("referred_by", sa.String(200), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("sex IN ('Male', 'Female', 'Other')", name="ck_patients_sex"),
        sa.CheckConstraint("age_years >= 0", name="ck_patients_age_years"),
        sa.CheckConstraint("age_months >= 0 AND age_months < 12", name="ck_patients_age_months"),
        sa.CheckConstraint("age_days >= 0 AND age_days < 31", name="ck_patients_age_days"),
        schema="lims",
    )
    op.create_index("ix_lims_patients_mobile_number", "patients", ["mobile_number"], schema="lims")
    op.create_index("ix_lims_patients_created_at", "patients", ["created_at"], schema="lims")

    # --- lims.test_assignments ---
    op.create_table(
        "test_assignments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("patient_id", sa.Uuid(), sa.ForeignKey("lims.patients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("test_type", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("assigned_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.Column("assigned_by", sa.Uuid(), nullable=False),
        sa.Column("completed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("patient_id", "test_type", name="uq_test_assignments_patient_test_type"),
        sa.CheckConstraint("test_type IN ('CBC', 'BG', 'VDRL')", name="ck_test_assignments_test_type"),
        sa.CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed', 'cancelled')", name="ck_test_assignments_status"
        ),
        schema="lims",
    )
    op.create_index("ix_lims_test_assignments_patient_id", "test_assignments", ["patient_id"], schema="lims")
    op.create_index("ix_lims_test_assignments_status", "test_assignments", ["status"], schema="lims")
    op.create_index("ix_lims_test_assignments_assigned_at", "test_assignments", ["assigned_at"], schema="lims")

    # --- rpt.report_types ---
    op.create_table(
        "report_types",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        schema="rpt",
    )
    op.create_index("ix_rpt_report_types_code", "report_types", ["code"], unique=True, schema="rpt")

    # --- rpt.report_fields ---
    op.create_table(
        "report_fields",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "report_type_id", sa.Uuid(), sa.ForeignKey("rpt.report_types.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("field_name", sa.String(100), nullable=False),
        sa.Column("field_label", sa.String(255), nullable=False),
        sa.Column("field_type", sa.String(20), nullable=False),
        sa.Column("field_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("unit", sa.String(50), nullable=True),
        sa.Column("normal_range_min", sa.Numeric(10, 4), nullable=True),
        sa.Column("normal_range_max", sa.Numeric(10, 4), nullable=True),
        sa.Column("normal_range_text", sa.String(100), nullable=True),
        sa.Column("dropdown_options", postgresql.JSONB(), nullable=True),
        sa.Column("default_value", sa.Text(), nullable=True),
        sa.Column("validation_rules", postgresql.JSONB(), nullable=True),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint("report_type_id", "field_name", name="uq_report_fields_type_name"),
        sa.CheckConstraint(
            "field_type IN ('text', 'number', 'dropdown', 'textarea')", name="ck_report_fields_field_type"
        ),
        schema="rpt",
    )
    op.create_index("ix_rpt_report_fields_report_type_id", "report_fields", ["report_type_id"], schema="rpt")

    # --- rpt.report_instances ---
    op.create_table(
        "report_instances",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "test_assignment_id",
            sa.Uuid(),
            sa.ForeignKey("lims.test_assignments.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("report_type_id", sa.Uuid(), sa.ForeignKey("rpt.report_types.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("completed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint("status IN ('pending', 'in-progress', 'completed')", name="ck_report_instances_status"),
        schema="rpt",
    )
    op.create_index("ix_rpt_report_instances_report_type_id", "report_instances", ["report_type_id"], schema="rpt")
    op.create_index("ix_rpt_report_instances_status", "report_instances", ["status"], schema="rpt")

    # --- rpt.report_values ---
    op.create_table(
        "report_values",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "report_instance_id",
            sa.Uuid(),
            sa.ForeignKey("rpt.report_instances.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "report_field_id", sa.Uuid(), sa.ForeignKey("rpt.report_fields.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("value_text", sa.Text(), nullable=True),
        sa.Column("value_number", sa.Numeric(10, 4), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("report_instance_id", "report_field_id", name="uq_report_values_instance_field"),
        schema="rpt",
    )
    op.create_index("ix_rpt_report_values_report_instance_id", "report_values", ["report_instance_id"], schema="rpt")
    op.create_index("ix_rpt_report_values_report_field_id", "report_values", ["report_field_id"], schema="rpt")


def downgrade() -> None:
    op.drop_table("report_values", schema="rpt")
    op.drop_table("report_instances", schema="rpt")
    op.drop_table("report_fields", schema="rpt")
    op.drop_table("report_types", schema="rpt")
    op.drop_table("test_assignments", schema="lims")
    op.drop_table("patients", schema="lims")
