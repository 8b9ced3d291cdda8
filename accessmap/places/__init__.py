"""
Accessible places directory.

Responsibilities:
- Model place records and user submissions.
- Score records into a confidence tier and a star score.
- Filter the cached records by the visitor's selected features.
- Orchestrate loading (with demo fallback) and corroboration actions.
- Render records into card view models for the client.
"""
