"""users, security questions, entities and incomes

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

role_enum = sa.Enum("USER", "ADMIN", name="role")
entity_type_enum = sa.Enum("MAIN", "SUB", "EMPLOYEE", name="entitytype")
income_type_enum = sa.Enum("SUBSCRIPTION", "LEGAL_FEES", "PENALTIES", "AUTOMATION", "OTHER", name="incometype")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("username", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("role", role_enum, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_approved", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_phone", "users", ["phone"], unique=True)

    op.create_table(
        "security_questions",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("question", sa.String(500), nullable=False),
        sa.Column("answer_hash", sa.String(255), nullable=False),
        sa.Column("user_id", sa.String(32), sa.ForeignKey("users.id"), nullable=False, unique=True),
    )

    op.create_table(
        "entities",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("province", sa.String(255), nullable=False),
        sa.Column("main_entity_id", sa.String(32), sa.ForeignKey("entities.id"), nullable=True),
        sa.Column("type", entity_type_enum, nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_entities_name", "entities", ["name"])
    op.create_index("ix_entities_province", "entities", ["province"])
    op.create_index("ix_entities_main_entity_id", "entities", ["main_entity_id"])

    op.create_table(
        "incomes",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("entity_id", sa.String(32), sa.ForeignKey("entities.id"), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("type", income_type_enum, nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("gp_number", sa.String(100), nullable=True),
        sa.Column("user_id", sa.String(32), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    for column in ("due_date", "entity_id", "month", "year", "user_id"):
        op.create_index(f"ix_incomes_{column}", "incomes", [column])


def downgrade() -> None:
    op.drop_table("incomes")
    op.drop_table("entities")
    op.drop_table("security_questions")
    op.drop_table("users")
