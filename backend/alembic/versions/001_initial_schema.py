"""Initial schema — users, access_tokens, listings.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(30), nullable=False, unique=True),
        sa.Column("email", sa.String(254), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(200), nullable=False),
        sa.Column("phone_number", sa.String(40), nullable=True),
        sa.Column("birth_date", sa.Date, nullable=False),
        sa.Column("creation_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("address_city", sa.String(100), nullable=True),
        sa.Column("address_country", sa.String(100), nullable=True),
        sa.Column("address_postal_code", sa.String(20), nullable=True),
        sa.Column("address_street", sa.String(200), nullable=True),
    )

    op.create_table(
        "access_tokens",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "listings",
        sa.Column("seq", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("id", UUID(as_uuid=True), nullable=False, unique=True),
        sa.Column("title", sa.String(25), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("asking_price", sa.Float, nullable=False),
        sa.Column("delivery_type", sa.JSON, nullable=False),
        sa.Column("seller_username", sa.String(30), nullable=False),
        sa.Column("seller_email", sa.String(254), nullable=False),
        sa.Column("seller_phone_number", sa.String(40), nullable=True),
        sa.Column("location_city", sa.String(100), nullable=True),
        sa.Column("location_country", sa.String(100), nullable=True),
        sa.Column("location_postal_code", sa.String(20), nullable=True),
        sa.Column("location_street", sa.String(200), nullable=True),
        sa.Column("image_urls", sa.JSON, nullable=False),
        sa.Column("posted", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_listings_category", "listings", ["category"])
    op.create_index("ix_listings_seller_username", "listings", ["seller_username"])
    op.create_index("ix_listings_location_city", "listings", ["location_city"])
    op.create_index("ix_listings_location_country", "listings", ["location_country"])
    op.create_index("ix_listings_posted", "listings", ["posted"])


def downgrade() -> None:
    op.drop_table("listings")
    op.drop_table("access_tokens")
    op.drop_table("users")
