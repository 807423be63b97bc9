"""
Notekeep Backend: API Routes Package
=====================================

Route Inventory:
    - notes.py:   GET    /notes                (list all notes)
                  POST   /notes                (create)
                  GET    /notes/{id}           (get one)
                  PATCH  /notes/{id}           (partial update, pin, archive, trash)
                  DELETE /notes/{id}           (permanent delete)
                  DELETE /notes/trash          (empty trash)
                  POST   /notes/trash/purge    (run the trash reaper)
    - health.py:  GET    /health               (service health check)

Routes handle HTTP concerns only; business rules live in app.services.
"""
