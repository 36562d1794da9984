"""
Pydantic schema definitions for API payloads.

Schemas are kept apart from the sqlite rows so the external field names
(``id``, ``name``, ``level``) do not depend on column names.
"""
