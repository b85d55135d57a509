# Routes package init
"""
LeafNotes Backend — API Routes Package
========================================

Route Inventory:
    - folders.py: GET/POST /api/folders, PATCH/DELETE /api/folders/{id}
    - notes.py:   GET/POST /api/notes, GET/PATCH/DELETE /api/notes/{id},
                  POST/DELETE /api/notes/{id}/share
    - shared.py:  GET /api/shared/{token}
    - health.py:  GET /health

Routes stay thin: they read the request, call a service and return its
response model. Business rules live in leafnotes.services.
"""
