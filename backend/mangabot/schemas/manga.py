"""
MangaBot Backend - Manga Request/Response Schemas
==================================================

What:  API contract for the /api/v1/manga endpoints.
How:   MangaCreate validates POST bodies (no id), MangaUpdate validates PUT
       bodies (id required, checked against the path id by the route),
       MangaRead is what services return.
"""

from typing import List, Optional

from pydantic import Field

from mangabot.schemas.common import MAX_ID, Envelope, PascalModel


class MangaBase(PascalModel):
    titulo: Optional[str] = Field(default=None, max_length=255, description="Title")
    autor: Optional[str] = Field(default=None, max_length=255, description="Author")
    capitulos: Optional[int] = Field(default=None, ge=0, description="Chapter count")


class MangaCreate(MangaBase):
    """POST body. A client-supplied `Id` is ignored; the store assigns it."""


class MangaUpdate(MangaBase):
    """
    PUT body: the full record, including its id.

    Every field is overwritten; an omitted field becomes null.
    """

    id: int = Field(ge=1, le=MAX_ID, description="Must match the id in the URL path")


class MangaRead(PascalModel):
    id: int = Field(description="Store-assigned identity")
    titulo: Optional[str] = None
    autor: Optional[str] = None
    capitulos: Optional[int] = None


class MangaResponse(Envelope):
    data: MangaRead


class MangaListResponse(Envelope):
    data: List[MangaRead]
