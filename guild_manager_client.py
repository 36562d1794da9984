"""Guild manager API client and list view-model.

This module is the client side of the guild backend.  It has three
layers:

* :class:`GuildManagerAPI` – a thin wrapper around the REST endpoints
  under ``/api/guilds`` built on a ``requests`` session.  Every call
  returns a ``(data, error)`` tuple instead of raising, where ``error``
  is a dictionary with ``status_code`` and ``message`` keys.
* :class:`GuildListViewModel` – the in-memory mirror of the guild list
  a UI renders.  It fetches the list on :meth:`~GuildListViewModel.load`,
  appends created guilds, replaces updated ones and drops deleted ones,
  always matching by ``id``.  A failed request only sets
  :attr:`~GuildListViewModel.error`; the list keeps its last good state.
* :func:`main` – a small command line front end (``guild-manager``).

The base URL defaults to ``GUILD_MANAGER_BASE_URL`` or
``http://localhost:3001``.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001"

ApiError = Dict[str, Any]


class GuildManagerAPI:
    """Client for the guild REST API."""

    guilds_path = "/api/guilds"

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        session: Optional[Any] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the backend, e.g. ``http://localhost:3001``.
            session: Optional session object with a ``requests``-style
                ``request`` method.  A ``requests.Session`` is created
                when omitted.
            timeout: Per-request timeout in seconds.
        """
        base_url = base_url or os.getenv("GUILD_MANAGER_BASE_URL", DEFAULT_BASE_URL)
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[ApiError]]:
        """Perform an HTTP request to the API.

        Returns:
            A tuple ``(data, error)``.  ``data`` holds the parsed JSON body
            on success (``None`` for empty bodies such as 204 responses).
            On failure ``data`` is ``None`` and ``error`` carries the
            status code (``None`` for transport failures) and the
            server's ``error`` message.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

        if response.status_code >= 400:
            message = ""
            try:
                err_json = response.json()
            except ValueError:
                message = response.text
            else:
                if isinstance(err_json, dict):
                    message = err_json.get("error") or err_json.get("detail") or ""
            if not message:
                message = "(No details provided)"
            logger.error("API request failed (%s): %s", response.status_code, message)
            return None, {"status_code": response.status_code, "message": message}

        if not response.content:
            return None, None
        try:
            return response.json(), None
        except ValueError:
            logger.error("API returned a non-JSON body for %s %s", method, url)
            return None, {"status_code": response.status_code, "message": "Invalid JSON in response"}

    # ------------------------------------------------------------------
    # Guild operations
    # ------------------------------------------------------------------
    def list_guilds(self) -> Tuple[List[Dict[str, Any]], Optional[ApiError]]:
        data, error = self._request("GET", self.guilds_path)
        if error:
            return [], error
        if not isinstance(data, list):
            return [], {"status_code": None, "message": "Unexpected response for guild list"}
        return data, None

    def create_guild(
        self, name: str, level: Optional[int] = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        payload: Dict[str, Any] = {"name": name}
        if level is not None:
            payload["level"] = level
        return self._request("POST", self.guilds_path, json_body=payload)

    def update_guild(
        self, guild_id: int, name: str, level: Optional[int] = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        payload: Dict[str, Any] = {"name": name}
        if level is not None:
            payload["level"] = level
        return self._request("PUT", f"{self.guilds_path}/{guild_id}", json_body=payload)

    def delete_guild(self, guild_id: int) -> Tuple[bool, Optional[ApiError]]:
        _, error = self._request("DELETE", f"{self.guilds_path}/{guild_id}")
        if error:
            return False, error
        return True, None


def _http_error_text(error: ApiError) -> str:
    status = error.get("status_code")
    if status is None:
        return f"{error.get('message')}. Check backend status and URL."
    return f"HTTP error! status: {status} - {error.get('message')}"


class GuildListViewModel:
    """In-memory guild list kept in step with the backend.

    Attributes mirror what a form/list UI binds to: ``guilds``,
    ``error``, the busy flags and the inline edit form.
    """

    def __init__(self, api: GuildManagerAPI) -> None:
        self.api = api
        self.guilds: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self.is_loading = False
        self.is_creating = False
        self.is_updating = False
        self.new_guild_name = ""
        self.editing_guild_id: Optional[int] = None
        self.edit_form: Dict[str, str] = {"name": "", "level": ""}

    def load(self) -> bool:
        """Replace the local list with the server's."""
        self.is_loading = True
        self.error = None
        try:
            guilds, error = self.api.list_guilds()
            if error:
                self.error = f"Failed to load guilds: {_http_error_text(error)}"
                return False
            self.guilds = guilds
            logger.info("Guilds loaded: %s", len(guilds))
            return True
        finally:
            self.is_loading = False

    def create(self, name: Optional[str] = None, level: Optional[int] = None) -> bool:
        """Create a guild from ``name`` (or the bound ``new_guild_name``)."""
        name = self.new_guild_name if name is None else name
        if not name.strip():
            self.error = "Guild name cannot be empty."
            return False
        self.is_creating = True
        self.error = None
        try:
            guild, error = self.api.create_guild(name, level)
            if error:
                self.error = f"Failed to create guild: {_http_error_text(error)}"
                return False
            self.guilds = [*self.guilds, guild]
            self.new_guild_name = ""
            return True
        finally:
            self.is_creating = False

    def start_edit(self, guild: Dict[str, Any]) -> None:
        self.editing_guild_id = guild["id"]
        self.edit_form = {"name": guild["name"], "level": str(guild["level"])}
        self.error = None

    def cancel_edit(self) -> None:
        self.editing_guild_id = None
        self.edit_form = {"name": "", "level": ""}

    def change_edit_field(self, field: str, value: str) -> None:
        self.edit_form = {**self.edit_form, field: value}

    def save_edit(self) -> bool:
        """Submit the inline edit form for the guild being edited."""
        if self.editing_guild_id is None:
            return False
        name = self.edit_form["name"]
        if not name.strip():
            self.error = "Guild name cannot be empty."
            return False
        try:
            level = int(str(self.edit_form["level"]).strip())
        except ValueError:
            level = 0
        if level < 1:
            self.error = "Level must be a positive number."
            return False
        if self.update(self.editing_guild_id, name.strip(), level):
            self.cancel_edit()
            return True
        return False

    def update(self, guild_id: int, name: str, level: Optional[int] = None) -> bool:
        """Update a guild and replace the matching local record.

        ``level=None`` leaves the stored level untouched.
        """
        self.is_updating = True
        self.error = None
        try:
            guild, error = self.api.update_guild(guild_id, name, level)
            if error:
                self.error = f"Failed to update guild: {_http_error_text(error)}"
                return False
            self.guilds = [guild if g["id"] == guild_id else g for g in self.guilds]
            return True
        finally:
            self.is_updating = False

    def delete(self, guild_id: int, confirm: Optional[Callable[[int], bool]] = None) -> bool:
        """Delete a guild and drop it from the local list.

        ``confirm`` is asked first when given; a negative answer cancels
        the request without touching the error message.
        """
        if confirm is not None and not confirm(guild_id):
            return False
        self.error = None
        deleted, error = self.api.delete_guild(guild_id)
        if error or not deleted:
            self.error = f"Failed to delete guild: {_http_error_text(error or {})}"
            return False
        self.guilds = [g for g in self.guilds if g["id"] != guild_id]
        return True


# ----------------------------------------------------------------------
# Command line front end
# ----------------------------------------------------------------------
def _format_guild(guild: Dict[str, Any]) -> str:
    return f"{guild['id']:>4}  {guild['name']} (Level: {guild['level']})"


def _ask_confirmation(guild_id: int) -> bool:
    answer = input(f"Are you sure you want to delete the guild with ID {guild_id}? [y/N] ")
    return answer.strip().lower() in {"y", "yes"}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="guild-manager", description="Manage guilds on a guild backend.")
    ap.add_argument(
        "--base-url",
        default=os.getenv("GUILD_MANAGER_BASE_URL", DEFAULT_BASE_URL),
        help="Backend URL (default: $GUILD_MANAGER_BASE_URL or %(default)s)",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List guilds ordered by name")

    create = sub.add_parser("create", help="Create a guild")
    create.add_argument("name")
    create.add_argument("--level", type=int, help="Initial level (default 1)")

    update = sub.add_parser("update", help="Rename a guild and optionally change its level")
    update.add_argument("id", type=int)
    update.add_argument("name")
    update.add_argument("--level", type=int, help="New level; omitted keeps the current one")

    delete = sub.add_parser("delete", help="Delete a guild")
    delete.add_argument("id", type=int)
    delete.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    return ap


def main(argv: Optional[List[str]] = None, api: Optional[GuildManagerAPI] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(asctime)s [%(levelname)s] %(message)s")
    view = GuildListViewModel(api or GuildManagerAPI(base_url=args.base_url))

    if args.command == "list":
        ok = view.load()
        if ok:
            if not view.guilds:
                print("No guilds found.")
            for guild in view.guilds:
                print(_format_guild(guild))
    elif args.command == "create":
        ok = view.create(args.name, args.level)
        if ok:
            print(f"Created: {_format_guild(view.guilds[-1])}")
    elif args.command == "update":
        ok = view.update(args.id, args.name, args.level)
        if ok:
            print(f"Updated guild {args.id}.")
    else:
        ok = view.delete(args.id, confirm=None if args.yes else _ask_confirmation)
        if ok:
            print(f"Deleted guild {args.id}.")
        elif view.error is None:
            print("Cancelled.")
            return 0

    if not ok:
        print(f"Error: {view.error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
