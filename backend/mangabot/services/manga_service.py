"""
MangaBot Backend - Manga Service
=================================

What:  Data-access operations over the `Mangas` table.
How:   Each method runs exactly one query on the AsyncSession it receives.
       Missing records on reads come back as None; the routes decide the
       HTTP status. Unexpected failures are wrapped in DatabaseError with an
       operation-level message, the original error is only logged.
Who:   Called by routes/manga.py and by PrestamoService (existence checks).

Design:
    MangaService is stateless; the session is passed into every call, so a
    single module-level instance is shared by all requests.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from mangabot.exceptions import MangaBotError, NotFoundError, database_error
from mangabot.models.manga import Manga
from mangabot.schemas.manga import MangaCreate, MangaRead, MangaUpdate

logger = logging.getLogger(__name__)


class MangaService:
    """
    CRUD + title search for manga catalog entries.

    Responsibilities:
        - list_mangas(): every record, ordered by id
        - get_manga(): single record or None
        - create_manga(): insert, id assigned by the database
        - update_manga(): whole-record overwrite, NotFoundError when absent
        - delete_manga(): hard delete, silent no-op when absent
        - search_mangas_by_title(): substring match on non-null titles
        - manga_exists(): boolean presence test
    """

    async def list_mangas(self, db: AsyncSession) -> List[MangaRead]:
        try:
            result = await db.execute(select(Manga).order_by(Manga.id))
            return [MangaRead.model_validate(m) for m in result.scalars().all()]
        except Exception as e:
            raise database_error("Error interno del servidor", e)

    async def get_manga(self, db: AsyncSession, manga_id: int) -> Optional[MangaRead]:
        """
        Fetch one manga by primary key.

        Returns:
            MangaRead, or None when no row has that id (absence is not an error).
        """
        try:
            result = await db.execute(select(Manga).where(Manga.id == manga_id))
            manga = result.scalar_one_or_none()
        except Exception as e:
            raise database_error("Error interno del servidor", e, manga_id=manga_id)

        if manga is None:
            return None
        return MangaRead.model_validate(manga)

    async def create_manga(self, db: AsyncSession, payload: MangaCreate) -> MangaRead:
        """
        Insert a new manga.

        The row is flushed (not committed) so the database assigns the id;
        the commit happens in get_db_session when the request succeeds.
        """
        try:
            manga = Manga(
                titulo=payload.titulo,
                autor=payload.autor,
                capitulos=payload.capitulos,
            )
            db.add(manga)
            await db.flush()
        except Exception as e:
            raise database_error("Error al crear el manga", e)

        logger.info("Manga created: %s (titulo=%r)", manga.id, manga.titulo)
        return MangaRead.model_validate(manga)

    async def update_manga(
        self, db: AsyncSession, manga_id: int, payload: MangaUpdate
    ) -> MangaRead:
        """
        Replace every field of an existing manga.

        This is not a patch: fields left out of `payload` are written as null.

        Raises:
            NotFoundError: No manga with `manga_id`
            DatabaseError: Query or flush failed
        """
        try:
            result = await db.execute(select(Manga).where(Manga.id == manga_id))
            manga = result.scalar_one_or_none()
            if manga is None:
                raise NotFoundError(resource="manga", resource_id=manga_id)

            manga.titulo = payload.titulo
            manga.autor = payload.autor
            manga.capitulos = payload.capitulos
            await db.flush()
        except MangaBotError:
            raise
        except Exception as e:
            raise database_error("Error al actualizar el manga", e, manga_id=manga_id)

        logger.info("Manga updated: %s", manga_id)
        return MangaRead.model_validate(manga)

    async def delete_manga(self, db: AsyncSession, manga_id: int) -> None:
        """Hard-delete a manga. Deleting an unknown id does nothing."""
        try:
            result = await db.execute(delete(Manga).where(Manga.id == manga_id))
        except Exception as e:
            raise database_error("Error al eliminar el manga", e, manga_id=manga_id)

        if result.rowcount:
            logger.info("Manga deleted: %s", manga_id)

    async def search_mangas_by_title(self, db: AsyncSession, titulo: str) -> List[MangaRead]:
        """
        Substring search on titulo.

        `%` and `_` in the query are matched literally (autoescape).
        Case sensitivity follows the database collation.
        """
        try:
            query = (
                select(Manga)
                .where(Manga.titulo.is_not(None))
                .where(Manga.titulo.contains(titulo, autoescape=True))
                .order_by(Manga.id)
            )
            result = await db.execute(query)
            return [MangaRead.model_validate(m) for m in result.scalars().all()]
        except Exception as e:
            raise database_error("Error en la búsqueda", e)

    async def manga_exists(self, db: AsyncSession, manga_id: int) -> bool:
        try:
            result = await db.execute(
                select(Manga.id).where(Manga.id == manga_id).limit(1)
            )
            return result.scalar_one_or_none() is not None
        except Exception as e:
            raise database_error("Error interno del servidor", e, manga_id=manga_id)


# ── Singleton Instance ────────────────────────────────────────────────────
manga_service = MangaService()
