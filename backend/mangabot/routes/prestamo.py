"""
MangaBot Backend - Préstamo (Loan) Route Handlers
==================================================

What:  /api/v1/prestamo endpoints: CRUD, client search, loans of a manga,
       loans within a date range.
How:   Same contract as routes/manga.py: HTTP-only checks here, one
       PrestamoService call, uniform envelope on success, application
       exceptions on failure.
Who:   Mounted by main.create_app() behind the bearer-token guard.

Endpoints:
    GET    /api/v1/prestamo
    GET    /api/v1/prestamo/search?cliente=...
    GET    /api/v1/prestamo/fechas?fecha_inicio=...&fecha_fin=...
    GET    /api/v1/prestamo/manga/{manga_id}
    GET    /api/v1/prestamo/{prestamo_id}
    POST   /api/v1/prestamo
    PUT    /api/v1/prestamo/{prestamo_id}
    DELETE /api/v1/prestamo/{prestamo_id}
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from mangabot.database import get_db_session
from mangabot.exceptions import NotFoundError, ValidationError
from mangabot.schemas.common import MAX_ID, Envelope, ErrorResponse
from mangabot.schemas.prestamo import (
    PrestamoCreate,
    PrestamoListResponse,
    PrestamoResponse,
    PrestamoUpdate,
)
from mangabot.security import get_current_user
from mangabot.services.prestamo_service import prestamo_service

router = APIRouter(
    prefix="/api/v1/prestamo",
    tags=["Préstamo"],
    responses={
        401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
)


@router.get(
    "",
    response_model=PrestamoListResponse,
    summary="List every loan",
)
async def get_prestamos(
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> PrestamoListResponse:
    prestamos = await prestamo_service.list_prestamos(db)
    return PrestamoListResponse(
        data=prestamos,
        message="Préstamos obtenidos exitosamente",
        user=current_user,
    )


@router.get(
    "/search",
    response_model=PrestamoListResponse,
    responses={400: {"description": "Missing search term", "model": ErrorResponse}},
    summary="Search loans by client name substring",
)
async def search_prestamos(
    cliente: Optional[str] = Query(default=None, description="Substring of the client name"),
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> PrestamoListResponse:
    if cliente is None or not cliente.strip():
        raise ValidationError(
            message="El parámetro 'cliente' es requerido para la búsqueda",
            field="cliente",
        )

    prestamos = await prestamo_service.search_prestamos_by_cliente(db, cliente)
    return PrestamoListResponse(
        data=prestamos,
        message=f"Búsqueda completada para cliente: '{cliente}'",
        searched_by=current_user,
    )


@router.get(
    "/fechas",
    response_model=PrestamoListResponse,
    responses={400: {"description": "Missing or malformed dates", "model": ErrorResponse}},
    summary="Loans within an inclusive date range",
)
async def get_prestamos_by_date_range(
    fecha_inicio: datetime = Query(description="Range start (ISO 8601, inclusive)"),
    fecha_fin: datetime = Query(description="Range end (ISO 8601, inclusive)"),
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> PrestamoListResponse:
    """
    Both bounds are inclusive. A start after the end is not an error;
    it returns an empty list.
    """
    prestamos = await prestamo_service.get_prestamos_by_date_range(db, fecha_inicio, fecha_fin)
    return PrestamoListResponse(
        data=prestamos,
        message=(
            f"Préstamos entre {fecha_inicio.isoformat()} y {fecha_fin.isoformat()} "
            "obtenidos exitosamente"
        ),
        user=current_user,
    )


@router.get(
    "/manga/{manga_id}",
    response_model=PrestamoListResponse,
    summary="Loans of one manga",
)
async def get_prestamos_by_manga(
    manga_id: int = Path(ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> PrestamoListResponse:
    prestamos = await prestamo_service.get_prestamos_by_manga(db, manga_id)
    return PrestamoListResponse(
        data=prestamos,
        message=f"Préstamos del manga ID {manga_id} obtenidos exitosamente",
        user=current_user,
    )


@router.get(
    "/{prestamo_id}",
    response_model=PrestamoResponse,
    responses={404: {"description": "Loan not found", "model": ErrorResponse}},
    summary="Get a loan by id",
)
async def get_prestamo(
    prestamo_id: int = Path(ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> PrestamoResponse:
    prestamo = await prestamo_service.get_prestamo(db, prestamo_id)
    if prestamo is None:
        raise NotFoundError(resource="préstamo", resource_id=prestamo_id)

    return PrestamoResponse(
        data=prestamo,
        message="Préstamo encontrado exitosamente",
        user=current_user,
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PrestamoResponse,
    responses={400: {"description": "Missing body or unknown manga", "model": ErrorResponse}},
    summary="Create a loan",
)
async def create_prestamo(
    request: Request,
    response: Response,
    payload: Optional[PrestamoCreate] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> PrestamoResponse:
    """Omitting FechaPrestamo stamps the loan with the current time."""
    if payload is None:
        raise ValidationError(message="Los datos del préstamo son requeridos")

    prestamo = await prestamo_service.create_prestamo(db, payload)

    response.headers["Location"] = str(
        request.url_for("get_prestamo", prestamo_id=prestamo.id)
    )
    return PrestamoResponse(
        data=prestamo,
        message="Préstamo creado exitosamente",
        created_by=current_user,
    )


@router.put(
    "/{prestamo_id}",
    response_model=Envelope,
    responses={
        400: {"description": "Id mismatch, invalid body or unknown manga", "model": ErrorResponse},
        404: {"description": "Loan not found", "model": ErrorResponse},
    },
    summary="Replace a loan",
)
async def update_prestamo(
    prestamo_id: int = Path(ge=1, le=MAX_ID),
    payload: Optional[PrestamoUpdate] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> Envelope:
    if payload is None:
        raise ValidationError(message="Los datos del préstamo son requeridos")
    if payload.id != prestamo_id:
        raise ValidationError(message="El ID del préstamo no coincide", field="Id")

    await prestamo_service.update_prestamo(db, prestamo_id, payload)
    return Envelope(message="Préstamo actualizado exitosamente", updated_by=current_user)


@router.delete(
    "/{prestamo_id}",
    response_model=Envelope,
    responses={404: {"description": "Loan not found", "model": ErrorResponse}},
    summary="Delete a loan",
)
async def delete_prestamo(
    prestamo_id: int = Path(ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> Envelope:
    if not await prestamo_service.prestamo_exists(db, prestamo_id):
        raise NotFoundError(resource="préstamo", resource_id=prestamo_id)

    await prestamo_service.delete_prestamo(db, prestamo_id)
    return Envelope(message="Préstamo eliminado exitosamente", deleted_by=current_user)
