# Services package init
"""
MangaBot Backend - Services Layer
==================================

What:  Data-access layer sitting between routes (HTTP) and the database.
How:   Stateless service objects; every method receives the request's
       AsyncSession and runs a single query.

Service Inventory:
    - MangaService:     CRUD, title search, existence check
    - PrestamoService:  CRUD, client search, filter by manga, filter by date range
"""
