"""DOI metadata client using CSL-JSON content negotiation."""

import logging
import re
from urllib.parse import quote

import requests

from orcid_works.core.config import Settings, get_settings
from orcid_works.core.errors import LookupFailure

logger = logging.getLogger(__name__)

CSL_JSON = "application/vnd.citationstyles.csl+json"

_DOI_PREFIXES = ("https://doi.org/", "http://doi.org/", "https://dx.doi.org/", "http://dx.doi.org/", "doi:")
_TAG = re.compile(r"<[^>]+>")


# ── Public API ───────────────────────────────────────────────────────


def normalize_doi(doi: str) -> str:
    """Strip resolver URL or ``doi:`` prefixes from a DOI."""
    doi = doi.strip()
    for prefix in _DOI_PREFIXES:
        if doi.lower().startswith(prefix):
            return doi[len(prefix):]
    return doi


class MetadataResolver:
    """Fetch metadata for a DOI from the DOI resolver and normalize it.

    One GET per call, no retries and no alternative formats: any failure
    is raised as LookupFailure.
    """

    def __init__(self, settings: Settings | None = None, session: requests.Session | None = None):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()

    def fetch_metadata(self, doi: str) -> dict:
        doi = normalize_doi(doi)
        url = f"{self.settings.metadata_url.rstrip('/')}/{quote(doi, safe='/')}"
        headers = {"Accept": CSL_JSON, "User-Agent": self.settings.user_agent}

        logger.info("Fetching metadata for %s", doi)
        try:
            response = self.session.get(url, headers=headers, timeout=self.settings.timeout)
        except requests.RequestException as exc:
            raise LookupFailure(doi, str(exc)) from exc

        if response.status_code == 404:
            raise LookupFailure(doi, "DOI not found", status_code=404)
        if response.status_code >= 400:
            raise LookupFailure(
                doi, f"HTTP {response.status_code}", status_code=response.status_code
            )

        try:
            csl = response.json()
        except ValueError as exc:
            raise LookupFailure(doi, "response is not JSON") from exc
        if not isinstance(csl, dict):
            raise LookupFailure(doi, "response is not a JSON object")

        return parse_csl(csl)


def fetch_metadata(doi: str, settings: Settings | None = None) -> dict:
    """Convenience wrapper around MetadataResolver for a single lookup."""
    return MetadataResolver(settings).fetch_metadata(doi)


# ── CSL-JSON → Metadata ──────────────────────────────────────────────


def _first(value):
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _strip_markup(text: str) -> str:
    """Drop JATS/HTML tags from an abstract and collapse whitespace."""
    return " ".join(_TAG.sub(" ", text).split())


def parse_csl(csl: dict) -> dict:
    """Convert a CSL-JSON record into the metadata mapping used by WorkRecord."""
    title = _first(csl.get("title"))
    container_title = _first(csl.get("container-title")) or csl.get("publisher")

    published = None
    for key in ("published", "issued", "created"):
        if csl.get(key):
            published = csl[key]
            break

    description = []
    abstract = csl.get("abstract")
    if abstract:
        abstract = _strip_markup(str(abstract))
        if abstract:
            description.append(abstract)

    authors = [a for a in csl.get("author") or [] if isinstance(a, dict)]

    return {
        "doi": csl.get("DOI"),
        "title": title or None,
        "container-title": container_title or None,
        "publisher": csl.get("publisher"),
        "type": csl.get("type"),
        "subtype": csl.get("genre"),
        "published": published,
        "description": description,
        "author": authors,
    }
