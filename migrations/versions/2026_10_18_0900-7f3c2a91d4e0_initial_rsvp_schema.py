"""initial_rsvp_schema

Revision ID: 7f3c2a91d4e0
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

import sqlalchemy as sa
import sqlalchemy_utils
from alembic import op

# revision identifiers, used by Alembic.
revision = "7f3c2a91d4e0"
down_revision = None
branch_labels = None
depends_on = None


def _uuid():
    return sqlalchemy_utils.types.uuid.UUIDType(binary=False)


def _timestamps():
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("uuid", _uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("couple_names", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("location", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("rsvp_deadline", sa.Date(), nullable=True),
        sa.Column("allow_plus_ones", sa.Boolean(), nullable=False),
        sa.Column("allow_children_details", sa.Boolean(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("uuid"),
    )

    op.create_table(
        "ceremonies",
        sa.Column("uuid", _uuid(), nullable=False),
        sa.Column("event_id", _uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(length=10), nullable=False),
        sa.Column("end_time", sa.String(length=10), nullable=False),
        sa.Column("location", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("attire_code", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
        sa.UniqueConstraint("uuid", "event_id", name="uq_ceremonies_uuid_event"),
    )
    op.create_index("ix_ceremonies_event_id", "ceremonies", ["event_id"])

    op.create_table(
        "guests",
        sa.Column("uuid", _uuid(), nullable=False),
        sa.Column("event_id", _uuid(), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("side", sa.Enum("bride", "groom", name="guest_side_enum"), nullable=False),
        sa.Column("relationship", sa.String(length=255), nullable=True),
        sa.Column("is_family", sa.Boolean(), nullable=False),
        sa.Column("is_vip", sa.Boolean(), nullable=False),
        sa.Column("is_local_guest", sa.Boolean(), nullable=False),
        sa.Column("plus_one_allowed", sa.Boolean(), nullable=False),
        sa.Column("plus_one_confirmed", sa.Boolean(), nullable=False),
        sa.Column("plus_one_name", sa.String(length=255), nullable=True),
        sa.Column("plus_one_email", sa.String(length=255), nullable=True),
        sa.Column("plus_one_phone", sa.String(length=50), nullable=True),
        sa.Column("plus_one_relationship", sa.String(length=255), nullable=True),
        sa.Column("children_details", sa.JSON(), nullable=False),
        sa.Column("dietary_restrictions", sa.Text(), nullable=True),
        sa.Column("allergies", sa.Text(), nullable=True),
        sa.Column("needs_accommodation", sa.Boolean(), nullable=True),
        sa.Column("accommodation_preference", sa.String(length=255), nullable=True),
        sa.Column("needs_transportation", sa.Boolean(), nullable=True),
        sa.Column("transportation_preference", sa.String(length=255), nullable=True),
        sa.Column("needs_flight_assistance", sa.Boolean(), nullable=False),
        sa.Column("arrival_date", sa.Date(), nullable=True),
        sa.Column("departure_date", sa.Date(), nullable=True),
        sa.Column("special_requests", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
        sa.UniqueConstraint("uuid", "event_id", name="uq_guests_uuid_event"),
    )
    op.create_index("ix_guests_event_id", "guests", ["event_id"])
    op.create_index("ix_guests_first_name", "guests", ["first_name"])
    op.create_index("ix_guests_last_name", "guests", ["last_name"])
    op.create_index("ix_guests_email", "guests", ["email"])

    op.create_table(
        "rsvp_info",
        sa.Column("uuid", _uuid(), nullable=False),
        sa.Column("guest_id", _uuid(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "confirmed", "declined", name="guest_status_enum"),
            nullable=False,
        ),
        sa.Column(
            "stage",
            sa.Enum("stage1", "stage2", "complete", name="rsvp_stage_enum"),
            nullable=False,
        ),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("rsvp_token", sa.String(length=64), nullable=False),
        sa.Column("rsvp_link", sa.String(length=512), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("email_sent_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("stage2_submitted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_rsvp_info_guest_id", "rsvp_info", ["guest_id"], unique=True)
    op.create_index("ix_rsvp_info_rsvp_token", "rsvp_info", ["rsvp_token"], unique=True)

    op.create_table(
        "guest_ceremony_attendance",
        sa.Column("uuid", _uuid(), nullable=False),
        sa.Column("guest_id", _uuid(), nullable=False),
        sa.Column("ceremony_id", _uuid(), nullable=False),
        sa.Column("event_id", _uuid(), nullable=False),
        sa.Column("attending", sa.Boolean(), nullable=False),
        sa.Column("meal_preference", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["guest_id", "event_id"],
            ["guests.uuid", "guests.event_id"],
            ondelete="CASCADE",
            name="fk_attendance_guest_event",
        ),
        sa.ForeignKeyConstraint(
            ["ceremony_id", "event_id"],
            ["ceremonies.uuid", "ceremonies.event_id"],
            ondelete="CASCADE",
            name="fk_attendance_ceremony_event",
        ),
        sa.PrimaryKeyConstraint("uuid"),
        sa.UniqueConstraint("guest_id", "ceremony_id", name="uq_attendance_guest_ceremony"),
    )
    op.create_index(
        "ix_guest_ceremony_attendance_guest_id", "guest_ceremony_attendance", ["guest_id"]
    )
    op.create_index(
        "ix_guest_ceremony_attendance_ceremony_id", "guest_ceremony_attendance", ["ceremony_id"]
    )

    op.create_table(
        "family_relationships",
        sa.Column("uuid", _uuid(), nullable=False),
        sa.Column("event_id", _uuid(), nullable=False),
        sa.Column("primary_guest_id", _uuid(), nullable=False),
        sa.Column("related_guest_id", _uuid(), nullable=False),
        sa.Column("pair_low_id", _uuid(), nullable=False),
        sa.Column("pair_high_id", _uuid(), nullable=False),
        sa.Column("relationship", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "primary_guest_id <> related_guest_id", name="ck_family_relationship_not_self"
        ),
        sa.ForeignKeyConstraint(
            ["primary_guest_id", "event_id"],
            ["guests.uuid", "guests.event_id"],
            ondelete="CASCADE",
            name="fk_family_relationship_primary_event",
        ),
        sa.ForeignKeyConstraint(
            ["related_guest_id", "event_id"],
            ["guests.uuid", "guests.event_id"],
            ondelete="CASCADE",
            name="fk_family_relationship_related_event",
        ),
        sa.PrimaryKeyConstraint("uuid"),
        sa.UniqueConstraint("pair_low_id", "pair_high_id", name="uq_family_relationship_pair"),
    )
    op.create_index("ix_family_relationships_event_id", "family_relationships", ["event_id"])
    op.create_index(
        "ix_family_relationships_primary_guest_id", "family_relationships", ["primary_guest_id"]
    )
    op.create_index(
        "ix_family_relationships_related_guest_id", "family_relationships", ["related_guest_id"]
    )

    op.create_table(
        "communication_logs",
        sa.Column("uuid", _uuid(), nullable=False),
        sa.Column("event_id", _uuid(), nullable=False),
        sa.Column("guest_id", _uuid(), nullable=True),
        sa.Column(
            "channel",
            sa.Enum("email", "sms", "whatsapp", name="communication_channel_enum"),
            nullable=False,
        ),
        sa.Column("recipient", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "sent", "failed", name="communication_status_enum"),
            nullable=False,
        ),
        sa.Column("provider", sa.String(length=100), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.uuid"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_communication_logs_event_id", "communication_logs", ["event_id"])
    op.create_index("ix_communication_logs_guest_id", "communication_logs", ["guest_id"])
    op.create_index("ix_communication_logs_channel", "communication_logs", ["channel"])
    op.create_index("ix_communication_logs_recipient", "communication_logs", ["recipient"])
    op.create_index("ix_communication_logs_status", "communication_logs", ["status"])


def downgrade() -> None:
    op.drop_table("communication_logs")
    op.drop_table("family_relationships")
    op.drop_table("guest_ceremony_attendance")
    op.drop_table("rsvp_info")
    op.drop_table("guests")
    op.drop_table("ceremonies")
    op.drop_table("events")

    for enum_name in (
        "communication_status_enum",
        "communication_channel_enum",
        "rsvp_stage_enum",
        "guest_status_enum",
        "guest_side_enum",
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
