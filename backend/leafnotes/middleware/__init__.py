# Middleware package init
"""
LeafNotes Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID runs first so every log line of the request can carry it
    - Logging captures the response status and duration on the way out
    - The request ID is echoed back in the X-Request-ID response header
"""
