"""
MangaBot Backend - Préstamo SQLAlchemy Model
=============================================

What:  ORM model representing the `Prestamos` (loans) table.
Who:   Used by PrestamoService for CRUD and by Alembic for schema management.

Table Design:
    - manga_id is a plain indexed integer, not a FOREIGN KEY: loans are kept
      as history when their manga is deleted. Existence is checked by the
      service when a loan is written.
    - fecha_prestamo is stored with timezone; the service stamps UTC "now"
      when the client omits it.

Query Patterns:
    - Loans of a manga:   WHERE manga_id = :id          → idx_prestamos_manga_id
    - Loans in a period:  WHERE fecha_prestamo BETWEEN  → idx_prestamos_fecha
    - Client search:      WHERE nombre_cliente LIKE '%x%' (sequential scan)
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from mangabot.database import Base


class Prestamo(Base):
    """A client borrowing a manga on a given date."""

    __tablename__ = "Prestamos"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Store-assigned identity",
    )

    nombre_cliente: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Name of the client who borrowed the manga",
    )

    fecha_prestamo: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When the loan was made (UTC)",
    )

    manga_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Identity of the borrowed manga (no FK constraint)",
    )

    __table_args__ = (
        Index("idx_prestamos_manga_id", manga_id),
        Index("idx_prestamos_fecha", fecha_prestamo),
    )

    def __repr__(self) -> str:
        return (
            f"<Prestamo(id={self.id}, cliente='{self.nombre_cliente}', "
            f"manga_id={self.manga_id})>"
        )
