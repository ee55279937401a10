"""
MangaBot Backend - Préstamo (Loan) Service
===========================================

What:  Data-access operations over the `Prestamos` table.
How:   Same shape as MangaService, plus client-name search and the
       manga-id / date-range filters. Writes check that the referenced
       manga exists (ValidationError otherwise); deleting a manga never
       touches its loans.
Who:   Called by routes/prestamo.py.

Loan dates:
    FechaPrestamo is normalised to UTC before it is stored or compared.
    Naive datetimes are taken to be UTC already. A missing date on create
    or update is replaced with the current time.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from mangabot.exceptions import MangaBotError, NotFoundError, ValidationError, database_error
from mangabot.models.prestamo import Prestamo
from mangabot.schemas.prestamo import PrestamoCreate, PrestamoRead, PrestamoUpdate
from mangabot.services.manga_service import manga_service

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PrestamoService:
    """
    CRUD + search/filter operations for loans.

    Error Handling Strategy:
        NotFoundError / ValidationError propagate unchanged; any other
        failure becomes a DatabaseError with an operation-level message.
    """

    async def _require_manga(self, db: AsyncSession, manga_id: int) -> None:
        if not await manga_service.manga_exists(db, manga_id):
            raise ValidationError(
                message=f"El manga con ID {manga_id} no existe",
                field="MangaId",
            )

    async def list_prestamos(self, db: AsyncSession) -> List[PrestamoRead]:
        try:
            result = await db.execute(select(Prestamo).order_by(Prestamo.id))
            return [PrestamoRead.model_validate(p) for p in result.scalars().all()]
        except Exception as e:
            raise database_error("Error interno del servidor", e)

    async def get_prestamo(self, db: AsyncSession, prestamo_id: int) -> Optional[PrestamoRead]:
        try:
            result = await db.execute(select(Prestamo).where(Prestamo.id == prestamo_id))
            prestamo = result.scalar_one_or_none()
        except Exception as e:
            raise database_error("Error interno del servidor", e, prestamo_id=prestamo_id)

        if prestamo is None:
            return None
        return PrestamoRead.model_validate(prestamo)

    async def create_prestamo(self, db: AsyncSession, payload: PrestamoCreate) -> PrestamoRead:
        """
        Insert a new loan.

        Workflow:
            1. Check the referenced manga exists (400 if not)
            2. Stamp FechaPrestamo with the current UTC time when omitted
            3. Flush so the database assigns the id

        Raises:
            ValidationError: MangaId does not reference an existing manga
            DatabaseError: Insert failed
        """
        try:
            await self._require_manga(db, payload.manga_id)

            prestamo = Prestamo(
                nombre_cliente=payload.nombre_cliente,
                fecha_prestamo=_as_utc(payload.fecha_prestamo),
                manga_id=payload.manga_id,
            )
            db.add(prestamo)
            await db.flush()
        except MangaBotError:
            raise
        except Exception as e:
            raise database_error("Error al crear el préstamo", e)

        logger.info(
            "Prestamo created: %s (manga_id=%s, fecha=%s)",
            prestamo.id,
            prestamo.manga_id,
            prestamo.fecha_prestamo.isoformat(),
        )
        return PrestamoRead.model_validate(prestamo)

    async def update_prestamo(
        self, db: AsyncSession, prestamo_id: int, payload: PrestamoUpdate
    ) -> PrestamoRead:
        """
        Replace every field of an existing loan.

        Raises:
            NotFoundError: No loan with `prestamo_id`
            ValidationError: MangaId does not reference an existing manga
            DatabaseError: Query or flush failed
        """
        try:
            result = await db.execute(select(Prestamo).where(Prestamo.id == prestamo_id))
            prestamo = result.scalar_one_or_none()
            if prestamo is None:
                raise NotFoundError(resource="préstamo", resource_id=prestamo_id)

            await self._require_manga(db, payload.manga_id)

            prestamo.nombre_cliente = payload.nombre_cliente
            prestamo.fecha_prestamo = _as_utc(payload.fecha_prestamo)
            prestamo.manga_id = payload.manga_id
            await db.flush()
        except MangaBotError:
            raise
        except Exception as e:
            raise database_error("Error al actualizar el préstamo", e, prestamo_id=prestamo_id)

        logger.info("Prestamo updated: %s", prestamo_id)
        return PrestamoRead.model_validate(prestamo)

    async def delete_prestamo(self, db: AsyncSession, prestamo_id: int) -> None:
        """Hard-delete a loan. Deleting an unknown id does nothing."""
        try:
            result = await db.execute(delete(Prestamo).where(Prestamo.id == prestamo_id))
        except Exception as e:
            raise database_error("Error al eliminar el préstamo", e, prestamo_id=prestamo_id)

        if result.rowcount:
            logger.info("Prestamo deleted: %s", prestamo_id)

    async def search_prestamos_by_cliente(
        self, db: AsyncSession, nombre_cliente: str
    ) -> List[PrestamoRead]:
        try:
            query = (
                select(Prestamo)
                .where(Prestamo.nombre_cliente.contains(nombre_cliente, autoescape=True))
                .order_by(Prestamo.id)
            )
            result = await db.execute(query)
            return [PrestamoRead.model_validate(p) for p in result.scalars().all()]
        except Exception as e:
            raise database_error("Error en la búsqueda", e)

    async def get_prestamos_by_manga(self, db: AsyncSession, manga_id: int) -> List[PrestamoRead]:
        """Loans whose MangaId equals `manga_id`; unknown ids give []."""
        try:
            query = (
                select(Prestamo)
                .where(Prestamo.manga_id == manga_id)
                .order_by(Prestamo.id)
            )
            result = await db.execute(query)
            return [PrestamoRead.model_validate(p) for p in result.scalars().all()]
        except Exception as e:
            raise database_error("Error interno del servidor", e, manga_id=manga_id)

    async def get_prestamos_by_date_range(
        self,
        db: AsyncSession,
        fecha_inicio: datetime,
        fecha_fin: datetime,
    ) -> List[PrestamoRead]:
        """
        Loans dated within [fecha_inicio, fecha_fin], both bounds included.

        An inverted range (inicio > fin) simply matches nothing.
        """
        try:
            query = (
                select(Prestamo)
                .where(Prestamo.fecha_prestamo >= _as_utc(fecha_inicio))
                .where(Prestamo.fecha_prestamo <= _as_utc(fecha_fin))
                .order_by(Prestamo.fecha_prestamo, Prestamo.id)
            )
            result = await db.execute(query)
            return [PrestamoRead.model_validate(p) for p in result.scalars().all()]
        except Exception as e:
            raise database_error("Error interno del servidor", e)

    async def prestamo_exists(self, db: AsyncSession, prestamo_id: int) -> bool:
        try:
            result = await db.execute(
                select(Prestamo.id).where(Prestamo.id == prestamo_id).limit(1)
            )
            return result.scalar_one_or_none() is not None
        except Exception as e:
            raise database_error("Error interno del servidor", e, prestamo_id=prestamo_id)


# ── Singleton Instance ────────────────────────────────────────────────────
prestamo_service = PrestamoService()
