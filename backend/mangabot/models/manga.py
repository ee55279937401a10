"""
MangaBot Backend - Manga SQLAlchemy Model
==========================================

What:  ORM model representing the `Mangas` table.
Who:   Used by MangaService for CRUD and by Alembic for schema management.

Table Design:
    - Integer autoincrement primary key, assigned by the database on insert
    - titulo / autor / capitulos are all nullable; a catalog entry may be
      registered before its metadata is known
    - No relationship to `Prestamos`; loans reference mangas by id only
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from mangabot.database import Base


class Manga(Base):
    """
    A manga catalog entry.

    Lifecycle:
        Created by POST, fully replaced by PUT, hard-deleted by DELETE.
    """

    __tablename__ = "Mangas"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Store-assigned identity",
    )

    titulo: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Title; excluded from title searches when NULL",
    )

    autor: Mapped[str | None] = mapped_column(String(255), nullable=True)

    capitulos: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Chapter count",
    )

    def __repr__(self) -> str:
        return f"<Manga(id={self.id}, titulo='{self.titulo}')>"
