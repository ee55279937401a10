"""Create Mangas and Prestamos tables

Revision ID: 001
Revises: None
Create Date: 2025-06-01 00:00:00.000000+00:00

What:  Creates the manga catalog table and the loans table.
How:   Integer autoincrement keys; Prestamos.manga_id is indexed but carries
       no FOREIGN KEY, so deleting a manga keeps its loan history.

Rollback: downgrade() drops both tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "Mangas",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False,
                  comment="Store-assigned identity"),
        sa.Column("titulo", sa.String(255), nullable=True,
                  comment="Title; excluded from title searches when NULL"),
        sa.Column("autor", sa.String(255), nullable=True),
        sa.Column("capitulos", sa.Integer(), nullable=True, comment="Chapter count"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "Prestamos",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False,
                  comment="Store-assigned identity"),
        sa.Column("nombre_cliente", sa.String(255), nullable=False,
                  comment="Name of the client who borrowed the manga"),
        sa.Column("fecha_prestamo", sa.DateTime(timezone=True), nullable=False,
                  comment="When the loan was made (UTC)"),
        sa.Column("manga_id", sa.Integer(), nullable=False,
                  comment="Identity of the borrowed manga (no FK constraint)"),
        sa.PrimaryKeyConstraint("id"),
    )

    # Filters used by GET /prestamo/manga/{id} and GET /prestamo/fechas
    op.create_index("idx_prestamos_manga_id", "Prestamos", ["manga_id"])
    op.create_index("idx_prestamos_fecha", "Prestamos", ["fecha_prestamo"])


def downgrade() -> None:
    op.drop_index("idx_prestamos_fecha", table_name="Prestamos")
    op.drop_index("idx_prestamos_manga_id", table_name="Prestamos")
    op.drop_table("Prestamos")
    op.drop_table("Mangas")
