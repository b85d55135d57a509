# Schemas package init
"""
LeafNotes Backend — Pydantic API Schemas
==========================================

Request/response models defining the JSON contract shared by the FastAPI
routes and the Python API client. Every model serializes with camelCase keys
(`folderId`, `shareToken`, `noteCount`, ...) and accepts either spelling on input.
"""
