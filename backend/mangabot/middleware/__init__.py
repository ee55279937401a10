# Middleware package init
"""
MangaBot Backend - Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: accept or generate the correlation ID
    2. Logging: one access line per request, tagged with the request ID

    The response passes back through the same chain in reverse, which is
    where the X-Request-ID header and the duration are added.

Authentication is not middleware: it is a router dependency
(mangabot.security.get_current_user) so /health and /docs stay open.
"""
