"""
Notekeep Backend: Services Layer
=================================

Service Inventory:
    - NoteService: note store operations (create, list, get, update, delete,
      empty trash, trash reaper)

Services receive the database session per call and hold no state, so a single
module-level instance is shared by all requests.
"""
