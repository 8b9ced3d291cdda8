"""
Seed import for the places directory.

Responsibilities:
- Read an existing list of accessible places from CSV.
- Normalize it into the place submission schema.
- Insert the valid rows into the configured place store.
"""
