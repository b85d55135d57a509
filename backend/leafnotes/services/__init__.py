# Services package init
"""
LeafNotes Backend — Services Layer
====================================

What:  Business logic between the routes (HTTP) and the database.
How:   Stateless singletons; each method receives the request's AsyncSession,
       returns response models and raises LeafNotesError subclasses.

Service Inventory:
    - FolderService: folder CRUD with note counts; deletion unfiles notes
    - NoteService:   note CRUD, search and folder filtering
    - ShareService:  share token issue / revoke / resolve
"""
