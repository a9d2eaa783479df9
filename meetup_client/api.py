# meetup_client/api.py
import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response; `body` is the decoded error payload."""

    def __init__(self, status: int, body: Dict[str, Any]):
        self.status = status
        self.body = body
        super().__init__(f"{status}: {body.get('message', body)}")

    @property
    def errors(self) -> Dict[str, str]:
        return self.body.get("errors", {})


class MeetupApi:
    """
    Thin JSON wrapper around a `requests.Session`.

    Every call resolves `path` against `base_url`, sends the bearer token
    when one is set and returns the decoded body.  Non-2xx responses raise
    `ApiError`; transport failures surface as `requests` exceptions.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: Optional[str] = None,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if token:
            self.set_token(token)

    def set_token(self, token: Optional[str]) -> None:
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            self.session.headers.pop("Authorization", None)

    def login(self, credential: str, password: str) -> Dict[str, Any]:
        data = self.post("/api/auth/token/", {"credential": credential, "password": password})
        self.set_token(data["access"])
        return data

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("GET", path, params=params)

    def post(self, path: str, json_data: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("POST", path, json_data=json_data)

    def put(self, path: str, json_data: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("PUT", path, json_data=json_data)

    def delete(self, path: str, json_data: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("DELETE", path, json_data=json_data)

    def _request(self, method, path, params=None, json_data=None):
        url = f"{self.base_url}/{path.lstrip('/')}"
        resp = self.session.request(method, url, params=params, json=json_data, timeout=self.timeout)

        try:
            body = resp.json()
        except ValueError:
            body = {"message": resp.text}

        if not 200 <= resp.status_code < 300:
            logger.warning("%s %s failed status=%s body=%r", method, url, resp.status_code, body)
            raise ApiError(resp.status_code, body if isinstance(body, dict) else {"message": body})

        logger.debug("%s %s status=%s", method, url, resp.status_code)
        return body
