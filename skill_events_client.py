"""Skill Events API client.

This module defines a small client wrapper around the Skill Events REST
API for use by external collaborators (the mobile app's backend-for-
frontend, admin scripts, bots).  It uses the ``requests`` library and
exposes one method per API operation:

* :meth:`get_balance`, :meth:`get_history`, :meth:`apply_credits` –
  wallet credits.
* :meth:`list_events`, :meth:`get_event`, :meth:`create_event`,
  :meth:`update_event`, :meth:`delete_event` – the event catalog.
* :meth:`is_joined`, :meth:`join_event` – event registration.
* :meth:`submit_drill`, :meth:`get_leaderboard` – drill results.

Every method returns a tuple ``(data, error)``.  On success ``error`` is
``None``; on failure ``data`` is empty and ``error`` is a dictionary
with ``status_code`` and ``message``.  Join outcomes such as a full
event or insufficient credits are not errors: they come back as data
with ``status == "failed"`` and a ``reason``.

Administrative calls need a token; pass ``api_key='<token>'`` and it
will be sent in the ``Authorization`` header.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

# Statuses on which the join endpoint still returns a JoinResult body.
JOIN_OUTCOME_STATUSES = (402, 404, 409)


class SkillEventsAPI:
    """Client for interacting with the Skill Events API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL including the version prefix, e.g.
                ``http://localhost:3001/api/v1``.
            api_key: Optional admin token, sent as ``Bearer <api_key>``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
        ok_statuses: Iterable[int] = (),
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to :attr:`base_url` (e.g. ``/events/``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
            ok_statuses: Additional non-2xx statuses whose JSON body is
                returned as data instead of an error.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            if response.status_code in tuple(ok_statuses):
                return response.json(), None
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": str(message)}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def _segment(value: Any) -> str:
        return quote(str(value), safe="")

    # ------------------------------------------------------------------
    # Credits
    # ------------------------------------------------------------------
    def get_balance(self, email: str) -> Tuple[Optional[int], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", f"/credits/{self._segment(email)}")
        if error:
            return None, error
        return data.get("balance"), None

    def get_history(
        self, email: str, q: Optional[str] = None, limit: Optional[int] = None
    ) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Return the credit history feed, most recent first."""
        params: Dict[str, Any] = {}
        if q:
            params["q"] = q
        if limit:
            params["limit"] = limit
        data, error = self._request("GET", f"/credits/{self._segment(email)}/history", params=params or None)
        if error:
            return [], error
        return list(data.get("history", [])), None

    def apply_credits(
        self, email: str, delta: int, note: Optional[str] = None
    ) -> Tuple[Optional[int], Optional[Dict[str, Any]]]:
        """Grant (positive) or deduct (negative) credits.  Admin only."""
        body = {"email": email, "delta": delta, "note": note}
        data, error = self._request("POST", "/credits/apply", json_body=body)
        if error:
            return None, error
        return data.get("balance"), None

    # ------------------------------------------------------------------
    # Event catalog
    # ------------------------------------------------------------------
    def list_events(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", "/events/")
        if error:
            return [], error
        return list(data or []), None

    def get_event(self, event_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._request("GET", f"/events/{self._segment(event_id)}")

    def create_event(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._request("POST", "/events/", json_body=payload)

    def update_event(
        self, event_id: str, patch: Dict[str, Any]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._request("PUT", f"/events/{self._segment(event_id)}", json_body=patch)

    def delete_event(self, event_id: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/events/{self._segment(event_id)}")
        return error is None, error

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def is_joined(self, event_id: str, email: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        data, error = self._request(
            "GET", f"/events/{self._segment(event_id)}/registration/{self._segment(email)}"
        )
        if error:
            return False, error
        return bool(data.get("joined")), None

    def join_event(
        self,
        event_id: str,
        email: str,
        tag: Optional[str] = None,
        fee: Optional[int] = None,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Join an event paying with credits.

        Returns the join result (``status``, ``balance`` and, depending
        on the outcome, ``credits_charged`` or ``reason``).
        """
        body: Dict[str, Any] = {"email": email}
        if tag is not None:
            body["tag"] = tag
        if fee is not None:
            body["fee"] = fee
        return self._request(
            "POST",
            f"/events/{self._segment(event_id)}/join",
            json_body=body,
            ok_statuses=JOIN_OUTCOME_STATUSES,
        )

    # ------------------------------------------------------------------
    # Drill results
    # ------------------------------------------------------------------
    def submit_drill(
        self, event_id: str, payload: Dict[str, Any]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._request("POST", f"/events/{self._segment(event_id)}/submissions", json_body=payload)

    def get_leaderboard(self, event_id: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", f"/events/{self._segment(event_id)}/leaderboard")
        if error:
            return [], error
        return list(data.get("leaderboard", [])), None
