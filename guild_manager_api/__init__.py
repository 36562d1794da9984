"""
Top‑level package for the Guild Manager API.

The backend lives in the ``app`` subpackage and can be imported with
fully qualified names such as ``guild_manager_api.app.main``.  The
package itself has no public exports.
"""

__all__ = []
