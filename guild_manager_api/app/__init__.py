"""
Application package initializer.

The backend is split into a handful of small pieces: ``core`` holds
configuration, logging, errors and the sqlite record store;
``schemas`` holds the request/response models; ``services`` holds the
guild business rules and ``api`` maps HTTP routes onto them.
"""

from .main import app, create_app  # noqa: F401
