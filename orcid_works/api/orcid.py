"""ORCID member API client for creating, updating and deleting works."""

import json
import logging
from typing import Optional

import requests
from pydantic import BaseModel

from orcid_works.core.config import API_VERSION, Settings, get_settings
from orcid_works.core.errors import SubmissionFailure

logger = logging.getLogger(__name__)

ORCID_XML = "application/vnd.orcid+xml"


class ApiResponse(BaseModel):
    """Outcome of a successful ORCID API call."""

    status_code: int
    put_code: Optional[int] = None
    body: str = ""
    location: Optional[str] = None


def _put_code_from_location(location: str | None) -> int | None:
    """ORCID returns the new work URL, e.g. ``.../work/123456``."""
    if not location:
        return None
    tail = location.rstrip("/").rsplit("/", 1)[-1]
    return int(tail) if tail.isdigit() else None


class OrcidApi:
    """Thin wrapper over the ORCID member API for one ORCID iD."""

    def __init__(
        self,
        orcid: str,
        access_token: str,
        settings: Settings | None = None,
        session: requests.Session | None = None,
    ):
        self.orcid = orcid
        self.access_token = access_token
        self.settings = settings or get_settings()
        self.session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return f"{self.settings.orcid_api_url.rstrip('/')}/v{API_VERSION}/{self.orcid}"

    def _headers(self, content_type: str | None = None) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
            "User-Agent": self.settings.user_agent,
        }
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def _request(self, method: str, url: str, data: str | None = None) -> ApiResponse:
        headers = self._headers(ORCID_XML if data is not None else None)
        logger.info("ORCID %s %s", method, url)
        try:
            response = self.session.request(
                method,
                url,
                data=data.encode("utf-8") if data is not None else None,
                headers=headers,
                timeout=self.settings.timeout,
            )
        except requests.RequestException as exc:
            raise SubmissionFailure(f"ORCID {method} {url} failed: {exc}") from exc

        if response.status_code >= 400:
            logger.error("ORCID %s %s returned %d", method, url, response.status_code)
            raise SubmissionFailure(
                f"ORCID {method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        location = response.headers.get("Location")
        return ApiResponse(
            status_code=response.status_code,
            put_code=_put_code_from_location(location),
            body=response.text,
            location=location,
        )

    # ── Works ────────────────────────────────────────────────────

    def create_work(self, data: str) -> ApiResponse:
        return self._request("POST", f"{self.base_url}/work", data)

    def update_work(self, put_code: int, data: str) -> ApiResponse:
        result = self._request("PUT", f"{self.base_url}/work/{put_code}", data)
        if result.put_code is None:
            result.put_code = put_code
        return result

    def delete_work(self, put_code: int) -> ApiResponse:
        result = self._request("DELETE", f"{self.base_url}/work/{put_code}")
        if result.put_code is None:
            result.put_code = put_code
        return result

    def get_works(self) -> dict:
        """Work summaries for the ORCID record, as decoded JSON."""
        result = self._request("GET", f"{self.base_url}/works")
        try:
            return json.loads(result.body) if result.body else {}
        except ValueError as exc:
            raise SubmissionFailure("ORCID works response is not JSON", body=result.body) from exc
