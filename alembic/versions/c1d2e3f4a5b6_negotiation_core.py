"""negotiation core tables

Revision ID: c1d2e3f4a5b6
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision = "c1d2e3f4a5b6"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- service_providers ---
    op.create_table(
        "service_providers",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("business_name", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index(
        "ix_service_providers_user_id", "service_providers", ["user_id"], unique=True
    )

    # --- service_requests ---
    op.create_table(
        "service_requests",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("organizer_id", sa.String(), nullable=False),
        sa.Column(
            "provider_id",
            sa.String(),
            sa.ForeignKey("service_providers.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("budget_range", JSONB, nullable=True),
        sa.Column("timeline", sa.String(), nullable=True),
        sa.Column(
            "status",
            sa.String(),
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
        sa.Column(
            "is_agreement_locked",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column(
            "card_sequence",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_service_requests_organizer_id", "service_requests", ["organizer_id"])
    op.create_index("ix_service_requests_provider_id", "service_requests", ["provider_id"])
    op.create_index(
        "ix_service_requests_organizer_status",
        "service_requests",
        ["organizer_id", "status"],
    )

    # --- proposal_cards ---
    op.create_table(
        "proposal_cards",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "request_id",
            sa.String(),
            sa.ForeignKey("service_requests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("submitted_by", sa.String(), nullable=False),
        sa.Column("card_number", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("negotiated_title", sa.String(), nullable=True),
        sa.Column("negotiated_description", sa.Text(), nullable=True),
        sa.Column("negotiated_budget_range", JSONB, nullable=True),
        sa.Column("negotiated_timeline", sa.String(), nullable=True),
        sa.Column(
            "response_to_card_id",
            sa.String(),
            sa.ForeignKey("proposal_cards.id"),
            nullable=True,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint("request_id", "card_number", name="uq_proposal_card_number"),
    )
    op.create_index("ix_proposal_cards_request_id", "proposal_cards", ["request_id"])
    op.create_index(
        "ix_proposal_cards_request_status", "proposal_cards", ["request_id", "status"]
    )

    # --- proposal_card_responses ---
    op.create_table(
        "proposal_card_responses",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "card_id",
            sa.String(),
            sa.ForeignKey("proposal_cards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("responded_by", sa.String(), nullable=False),
        sa.Column("response_type", sa.String(), nullable=False),
        sa.Column("response_notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint("card_id", "responded_by", name="uq_card_response_actor"),
    )
    op.create_index(
        "ix_proposal_card_responses_card_id", "proposal_card_responses", ["card_id"]
    )

    # --- service_request_comments ---
    op.create_table(
        "service_request_comments",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "request_id",
            sa.String(),
            sa.ForeignKey("service_requests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("author_id", sa.String(), nullable=False),
        sa.Column("comment_type", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index(
        "ix_service_request_comments_request_id",
        "service_request_comments",
        ["request_id"],
    )

    # --- project_completions ---
    op.create_table(
        "project_completions",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "request_id",
            sa.String(),
            sa.ForeignKey("service_requests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("submitted_by", sa.String(), nullable=False),
        sa.Column(
            "deliverables",
            JSONB,
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("confirmed_by", sa.String(), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index(
        "ix_project_completions_request_id",
        "project_completions",
        ["request_id"],
        unique=True,
    )

    # --- negotiation_audit_log ---
    op.create_table(
        "negotiation_audit_log",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "request_id",
            sa.String(),
            sa.ForeignKey("service_requests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "card_id",
            sa.String(),
            sa.ForeignKey("proposal_cards.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("old_state", sa.String(50), nullable=True),
        sa.Column("new_state", sa.String(50), nullable=True),
        sa.Column("action_metadata", JSONB, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_negotiation_audit_log_request_id", "negotiation_audit_log", ["request_id"])
    op.create_index("ix_negotiation_audit_log_user_id", "negotiation_audit_log", ["user_id"])
    op.create_index("ix_negotiation_audit_log_action", "negotiation_audit_log", ["action"])
    op.create_index(
        "idx_negotiation_audit_request_created",
        "negotiation_audit_log",
        ["request_id", sa.text("created_at DESC")],
    )

    # --- negotiation_domain_events ---
    op.create_table(
        "negotiation_domain_events",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "request_id",
            sa.String(),
            sa.ForeignKey("service_requests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("event_type", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=True),
        sa.Column("data", JSONB, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "publish_attempts",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
        ),
    )
    op.create_index(
        "ix_negotiation_domain_events_request_id",
        "negotiation_domain_events",
        ["request_id"],
    )
    op.create_index(
        "ix_negotiation_domain_events_unpublished",
        "negotiation_domain_events",
        ["published_at", "created_at"],
    )


def downgrade() -> None:
    op.drop_table("negotiation_domain_events")
    op.drop_table("negotiation_audit_log")
    op.drop_table("project_completions")
    op.drop_table("service_request_comments")
    op.drop_table("proposal_card_responses")
    op.drop_table("proposal_cards")
    op.drop_table("service_requests")
    op.drop_table("service_providers")
