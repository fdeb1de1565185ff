"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

Foreign keys carry no ON DELETE CASCADE. Organization teardown deletes
children before parents.
"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

AutoString = sqlmodel.sql.sqltypes.AutoString


def _org_column() -> sa.Column:
    return sa.Column("organization_id", sa.Uuid(), nullable=False)


def _org_fk() -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"])


def _org_index(table: str) -> None:
    op.create_index(f"ix_{table}_organization_id", table, ["organization_id"], unique=False)


def upgrade() -> None:
    # 1. Identity and tenant root
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", AutoString(length=320), nullable=False),
        sa.Column("hashed_password", AutoString(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column(
            "email_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column("email_verified_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "organizations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", AutoString(length=200), nullable=False),
        sa.Column("slug", AutoString(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_organizations_name", "organizations", ["name"], unique=False)
    op.create_index("ix_organizations_slug", "organizations", ["slug"], unique=True)

    op.create_table(
        "organization_subscriptions",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("stripe_customer_id", AutoString(length=255), nullable=True),
        sa.Column("stripe_subscription_id", AutoString(length=255), nullable=True),
        sa.Column(
            "status", AutoString(length=50), nullable=False, server_default="pending"
        ),
        sa.Column("current_period_end", sa.DateTime(), nullable=True),
        sa.Column("grace_period_ends_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_organization_subscriptions_organization_id",
        "organization_subscriptions",
        ["organization_id"],
        unique=True,
    )
    op.create_index(
        "ix_organization_subscriptions_stripe_subscription_id",
        "organization_subscriptions",
        ["stripe_subscription_id"],
        unique=False,
    )

    op.create_table(
        "user_organization_roles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("role", AutoString(length=50), nullable=False),
        sa.Column("status", AutoString(length=20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        _org_fk(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "organization_id", name="uq_user_organization_roles_user_org"
        ),
    )
    op.create_index(
        "ix_user_organization_roles_user_id", "user_organization_roles", ["user_id"]
    )
    _org_index("user_organization_roles")

    # 2. Parents
    op.create_table(
        "parent_invites",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("code", AutoString(length=200), nullable=False),
        sa.Column("email", AutoString(length=320), nullable=True),
        sa.Column("role", AutoString(length=50), nullable=False, server_default="parent"),
        sa.Column("status", AutoString(length=20), nullable=False, server_default="pending"),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("accepted_at", sa.DateTime(), nullable=True),
        sa.Column("created_by_user_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_parent_invites_code", "parent_invites", ["code"], unique=True)
    _org_index("parent_invites")

    op.create_table(
        "parents",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("first_name", AutoString(length=100), nullable=False),
        sa.Column("last_name", AutoString(length=100), nullable=False),
        sa.Column("email", AutoString(length=320), nullable=True),
        sa.Column("relationship", AutoString(length=100), nullable=True),
        sa.Column("student_name", AutoString(length=200), nullable=True),
        sa.Column("notes", AutoString(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        _org_fk(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("parents")
    op.create_index("ix_parents_user_id", "parents", ["user_id"])
    op.create_index("ix_parents_email", "parents", ["email"])

    # 3. Organization-scoped collections
    op.create_table(
        "organization_invites",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("code", AutoString(length=200), nullable=False),
        sa.Column("role", AutoString(length=50), nullable=False),
        sa.Column("uses_remaining", sa.Integer(), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("revoked_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_organization_invites_code", "organization_invites", ["code"], unique=True
    )
    _org_index("organization_invites")

    for table in ("members", "alumni"):
        extra = (
            [sa.Column("email", AutoString(length=320), nullable=True)]
            if table == "members"
            else [sa.Column("graduation_year", sa.Integer(), nullable=True)]
        )
        op.create_table(
            table,
            sa.Column("id", sa.Uuid(), nullable=False),
            _org_column(),
            sa.Column("user_id", sa.Uuid(), nullable=True),
            sa.Column("first_name", AutoString(length=100), nullable=False),
            sa.Column("last_name", AutoString(length=100), nullable=False),
            *extra,
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("deleted_at", sa.DateTime(), nullable=True),
            _org_fk(),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        _org_index(table)

    op.create_table(
        "events",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("title", AutoString(length=200), nullable=False),
        sa.Column("starts_at", sa.DateTime(), nullable=False),
        sa.Column("ends_at", sa.DateTime(), nullable=True),
        sa.Column("location", AutoString(length=300), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        _org_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("events")

    op.create_table(
        "event_rsvps",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("status", AutoString(length=20), nullable=False, server_default="attending"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("event_rsvps")
    op.create_index("ix_event_rsvps_event_id", "event_rsvps", ["event_id"])

    op.create_table(
        "announcements",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("title", AutoString(length=200), nullable=False),
        sa.Column("body", AutoString(), nullable=True),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        _org_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("announcements")

    op.create_table(
        "donations",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("donor_name", AutoString(length=200), nullable=True),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("stripe_payment_intent_id", AutoString(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("donations")

    op.create_table(
        "records",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("title", AutoString(length=200), nullable=False),
        sa.Column("value", AutoString(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("records")

    op.create_table(
        "philanthropy_events",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("title", AutoString(length=200), nullable=False),
        sa.Column("hours", sa.Numeric(precision=8, scale=2), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("philanthropy_events")

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("title", AutoString(length=200), nullable=False),
        sa.Column("body", AutoString(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("notifications")

    op.create_table(
        "notification_preferences",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("email_enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("push_enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        _org_fk(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("notification_preferences")

    op.create_table(
        "competitions",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("name", AutoString(length=200), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("competitions")

    op.create_table(
        "competition_points",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("competition_id", sa.Uuid(), nullable=False),
        sa.Column("team_name", AutoString(length=200), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.ForeignKeyConstraint(["competition_id"], ["competitions.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("competition_points")
    op.create_index(
        "ix_competition_points_competition_id", "competition_points", ["competition_id"]
    )

    # 4. Forms and schedules
    op.create_table(
        "forms",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("title", AutoString(length=200), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("forms")

    op.create_table(
        "form_documents",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("form_id", sa.Uuid(), nullable=True),
        sa.Column("file_path", AutoString(length=500), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("form_documents")

    op.create_table(
        "form_submissions",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("form_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("form_submissions")
    op.create_index("ix_form_submissions_form_id", "form_submissions", ["form_id"])

    op.create_table(
        "academic_schedules",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("title", AutoString(length=200), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("academic_schedules")

    op.create_table(
        "schedule_files",
        sa.Column("id", sa.Uuid(), nullable=False),
        _org_column(),
        sa.Column("schedule_id", sa.Uuid(), nullable=True),
        sa.Column("file_path", AutoString(length=500), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _org_fk(),
        sa.ForeignKeyConstraint(["schedule_id"], ["academic_schedules.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    _org_index("schedule_files")


def downgrade() -> None:
    for table in (
        "schedule_files",
        "academic_schedules",
        "form_submissions",
        "form_documents",
        "forms",
        "competition_points",
        "competitions",
        "notification_preferences",
        "notifications",
        "philanthropy_events",
        "records",
        "donations",
        "announcements",
        "event_rsvps",
        "events",
        "alumni",
        "members",
        "organization_invites",
        "parents",
        "parent_invites",
        "user_organization_roles",
        "organization_subscriptions",
        "organizations",
        "users",
    ):
        op.drop_table(table)
