"""
MangaBot Backend - Manga Route Handlers
========================================

What:  /api/v1/manga endpoints (list, get, create, update, delete, search).
How:   Each handler validates what only HTTP knows (body present, path id
       matching body id, non-empty search term), calls MangaService once,
       and wraps the result in the response envelope. Errors are raised as
       application exceptions and rendered by the handlers in main.py.
Who:   Mounted by main.create_app() behind the bearer-token guard.

Route order:
    /search is declared before /{manga_id} so it is not captured as an id.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from mangabot.database import get_db_session
from mangabot.exceptions import NotFoundError, ValidationError
from mangabot.schemas.common import MAX_ID, Envelope, ErrorResponse
from mangabot.schemas.manga import (
    MangaCreate,
    MangaListResponse,
    MangaResponse,
    MangaUpdate,
)
from mangabot.security import get_current_user
from mangabot.services.manga_service import manga_service

router = APIRouter(
    prefix="/api/v1/manga",
    tags=["Manga"],
    responses={
        401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
)


@router.get(
    "",
    response_model=MangaListResponse,
    summary="List every manga",
)
async def get_mangas(
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> MangaListResponse:
    mangas = await manga_service.list_mangas(db)
    return MangaListResponse(
        data=mangas,
        message="Mangas obtenidos exitosamente",
        user=current_user,
    )


@router.get(
    "/search",
    response_model=MangaListResponse,
    responses={400: {"description": "Missing search term", "model": ErrorResponse}},
    summary="Search mangas by title substring",
)
async def search_mangas(
    titulo: Optional[str] = Query(default=None, description="Substring of the title"),
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> MangaListResponse:
    """
    Example:
        GET /api/v1/manga/search?titulo=Piece → every manga whose title
        contains "Piece". Empty or whitespace-only terms are rejected
        before the database is queried.
    """
    if titulo is None or not titulo.strip():
        raise ValidationError(
            message="El parámetro 'titulo' es requerido para la búsqueda",
            field="titulo",
        )

    mangas = await manga_service.search_mangas_by_title(db, titulo)
    return MangaListResponse(
        data=mangas,
        message=f"Búsqueda completada para: '{titulo}'",
        searched_by=current_user,
    )


@router.get(
    "/{manga_id}",
    response_model=MangaResponse,
    responses={404: {"description": "Manga not found", "model": ErrorResponse}},
    summary="Get a manga by id",
)
async def get_manga(
    manga_id: int = Path(ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> MangaResponse:
    manga = await manga_service.get_manga(db, manga_id)
    if manga is None:
        raise NotFoundError(resource="manga", resource_id=manga_id)

    return MangaResponse(
        data=manga,
        message="Manga encontrado exitosamente",
        user=current_user,
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=MangaResponse,
    responses={400: {"description": "Missing or invalid body", "model": ErrorResponse}},
    summary="Create a manga",
)
async def create_manga(
    request: Request,
    response: Response,
    payload: Optional[MangaCreate] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> MangaResponse:
    """
    Create a manga; the id is assigned by the database.

    Responds 201 with a Location header pointing at GET /api/v1/manga/{id}.
    """
    if payload is None:
        raise ValidationError(message="Los datos del manga son requeridos")

    manga = await manga_service.create_manga(db, payload)

    response.headers["Location"] = str(request.url_for("get_manga", manga_id=manga.id))
    return MangaResponse(
        data=manga,
        message="Manga creado exitosamente",
        created_by=current_user,
    )


@router.put(
    "/{manga_id}",
    response_model=Envelope,
    responses={
        400: {"description": "Id mismatch or invalid body", "model": ErrorResponse},
        404: {"description": "Manga not found", "model": ErrorResponse},
    },
    summary="Replace a manga",
)
async def update_manga(
    manga_id: int = Path(ge=1, le=MAX_ID),
    payload: Optional[MangaUpdate] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> Envelope:
    if payload is None:
        raise ValidationError(message="Los datos del manga son requeridos")
    if payload.id != manga_id:
        raise ValidationError(message="El ID del manga no coincide", field="Id")

    await manga_service.update_manga(db, manga_id, payload)
    return Envelope(message="Manga actualizado exitosamente", updated_by=current_user)


@router.delete(
    "/{manga_id}",
    response_model=Envelope,
    responses={404: {"description": "Manga not found", "model": ErrorResponse}},
    summary="Delete a manga",
)
async def delete_manga(
    manga_id: int = Path(ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
    current_user: str = Depends(get_current_user),
) -> Envelope:
    """Loans that reference the manga are left untouched."""
    if not await manga_service.manga_exists(db, manga_id):
        raise NotFoundError(resource="manga", resource_id=manga_id)

    await manga_service.delete_manga(db, manga_id)
    return Envelope(message="Manga eliminado exitosamente", deleted_by=current_user)
