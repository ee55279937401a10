# Routes package init
"""
MangaBot Backend - API Routes Package
======================================

Route Inventory:
    - manga.py:     /api/v1/manga      (CRUD + title search)
    - prestamo.py:  /api/v1/prestamo   (CRUD + client search, by manga, by date range)
    - health.py:    GET /health        (service health check, no auth)

Routes are thin: they check what only HTTP knows (body present, ids match,
search term not blank), call one service method and build the envelope.
"""
