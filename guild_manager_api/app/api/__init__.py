"""
HTTP layer of the guild backend.

``router`` bundles the endpoint modules found in ``endpoints``; the
application mounts it under ``/api``.  ``deps`` provides the
dependencies shared by the endpoints.
"""
