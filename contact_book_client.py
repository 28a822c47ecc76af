"""Contact Book API client.

A thin wrapper around the REST API served by ``contact_book_api``.  It
uses the ``requests`` library and exposes one method per operation:

* :meth:`create_contact` / :meth:`update_contact` / :meth:`delete_contact`
* :meth:`update_contact_field` and the per‑field shortcuts
* :meth:`get_contact`, :meth:`get_contact_by_name`,
  :meth:`get_contacts_by_category`, :meth:`get_contacts_by_owner`,
  :meth:`list_contacts`
* :meth:`get_contact_creation_time` / :meth:`get_contact_update_time`

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is ``None`` (or an empty list for
list operations) and ``error`` is a dictionary with the keys
``status_code``, ``message`` and ``error`` (the server's error kind,
e.g. ``"NotFoundError"``).

Authentication is optional: pass ``api_key`` to send an
``Authorization: Bearer <api_key>`` header with every request.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]

CONTACT_FIELDS = ("name", "phoneNumber", "email", "category", "address")


class ContactBookAPI:
    """Client for the contact book HTTP API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        api_prefix: str = "/api/v1",
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:8000``.
            api_key: Optional bearer token identifying the caller.
            api_prefix: Path prefix of the versioned API.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per‑request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, json_body: Any | None = None) -> Result:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PATCH``, etc.).
            path: Path below the API prefix (e.g. ``/contacts/``).
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)`` as described in the module docstring.
        """
        url = f"{self.base_url}{self.api_prefix}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            return None, self._http_error(exc)
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc), "error": None}

    @staticmethod
    def _http_error(exc: requests.HTTPError) -> Dict[str, Any]:
        response = exc.response
        status = response.status_code if response is not None else None
        message = ""
        kind = None
        if response is not None:
            try:
                err_json = response.json()
            except ValueError:
                message = response.text
            else:
                if isinstance(err_json, dict):
                    detail = err_json.get("detail")
                    message = detail if isinstance(detail, str) else str(detail or err_json)
                    kind = err_json.get("error")
                else:
                    message = str(err_json)
        if not message:
            message = str(exc)
        logger.error("API request failed (%s): %s", status, message)
        return {"status_code": status, "message": message, "error": kind}

    @staticmethod
    def _segment(value: str) -> str:
        return quote(str(value), safe="")

    def _list(self, path: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", path)
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create_contact(self, payload: Dict[str, Any]) -> Result:
        """Create a contact owned by the authenticated caller."""
        return self._request("POST", "/contacts/", json_body=payload)

    def update_contact(self, contact_id: str, payload: Dict[str, Any]) -> Result:
        """Replace all five text fields of a contact."""
        return self._request("PUT", f"/contacts/{self._segment(contact_id)}", json_body=payload)

    def update_contact_field(self, contact_id: str, field: str, value: str) -> Result:
        """Update a single field; ``field`` is one of :data:`CONTACT_FIELDS`."""
        if field not in CONTACT_FIELDS:
            return None, {"status_code": None, "message": f"Unknown contact field: {field}", "error": "ValidationError"}
        return self._request(
            "PATCH",
            f"/contacts/{self._segment(contact_id)}/{field}",
            json_body={"value": value},
        )

    def update_contact_name(self, contact_id: str, value: str) -> Result:
        return self.update_contact_field(contact_id, "name", value)

    def update_contact_phone_number(self, contact_id: str, value: str) -> Result:
        return self.update_contact_field(contact_id, "phoneNumber", value)

    def update_contact_email(self, contact_id: str, value: str) -> Result:
        return self.update_contact_field(contact_id, "email", value)

    def update_contact_category(self, contact_id: str, value: str) -> Result:
        return self.update_contact_field(contact_id, "category", value)

    def update_contact_address(self, contact_id: str, value: str) -> Result:
        return self.update_contact_field(contact_id, "address", value)

    def delete_contact(self, contact_id: str) -> Result:
        """Delete a contact; on success ``data`` is the deleted record."""
        return self._request("DELETE", f"/contacts/{self._segment(contact_id)}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_contact(self, contact_id: str) -> Result:
        return self._request("GET", f"/contacts/{self._segment(contact_id)}")

    def get_contact_by_name(self, name: str) -> Result:
        return self._request("GET", f"/contacts/by-name/{self._segment(name)}")

    def get_contacts_by_category(self, category: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._list(f"/contacts/by-category/{self._segment(category)}")

    def get_contacts_by_owner(self, owner: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._list(f"/contacts/by-owner/{self._segment(owner)}")

    def list_contacts(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._list("/contacts/")

    def get_contact_creation_time(self, contact_id: str) -> Result:
        data, error = self._request("GET", f"/contacts/{self._segment(contact_id)}/created-at")
        if error:
            return None, error
        return data.get("createdAt"), None

    def get_contact_update_time(self, contact_id: str) -> Result:
        """Return ``updatedAt``; ``(None, None)`` means the contact was never updated."""
        data, error = self._request("GET", f"/contacts/{self._segment(contact_id)}/updated-at")
        if error:
            return None, error
        return data.get("updatedAt"), None

    def whoami(self) -> Result:
        data, error = self._request("GET", "/contacts/whoami")
        if error:
            return None, error
        return data.get("principal"), None
