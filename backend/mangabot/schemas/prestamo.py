"""
MangaBot Backend - Préstamo Request/Response Schemas
=====================================================

What:  API contract for the /api/v1/prestamo endpoints.

FechaPrestamo:
    Optional on input. When it is omitted or null the service stamps the
    current UTC time, on creation and on full-record update alike.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import Field, field_validator

from mangabot.schemas.common import MAX_ID, Envelope, PascalModel


class PrestamoBase(PascalModel):
    nombre_cliente: str = Field(min_length=1, max_length=255, description="Client name")
    fecha_prestamo: Optional[datetime] = Field(
        default=None,
        description="Loan date (ISO 8601); defaults to now when omitted",
    )
    manga_id: int = Field(ge=1, le=MAX_ID, description="Identity of the borrowed manga")

    @field_validator("nombre_cliente")
    @classmethod
    def strip_nombre_cliente(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("NombreCliente no puede estar vacío")
        return value


class PrestamoCreate(PrestamoBase):
    """POST body. A client-supplied `Id` is ignored."""


class PrestamoUpdate(PrestamoBase):
    id: int = Field(ge=1, le=MAX_ID, description="Must match the id in the URL path")


class PrestamoRead(PascalModel):
    id: int
    nombre_cliente: str
    fecha_prestamo: datetime
    manga_id: int

    @field_validator("fecha_prestamo")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite returns stored UTC values without tzinfo
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class PrestamoResponse(Envelope):
    data: PrestamoRead


class PrestamoListResponse(Envelope):
    data: List[PrestamoRead]
