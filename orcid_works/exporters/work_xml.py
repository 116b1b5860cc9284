"""ORCID work XML generation (record schema 2.0)."""

import logging

from lxml import etree

from orcid_works.core.config import API_VERSION, COMMON_NS, NSMAP, WORK_NS, XSI_NS
from orcid_works.metadata.models import Contributor, PublicationDate

logger = logging.getLogger(__name__)

SHORT_DESCRIPTION_LIMIT = 2500
ORCID_HOST = "orcid.org"

_WORK = f"{{{WORK_NS}}}"
_COMMON = f"{{{COMMON_NS}}}"


# ── Text Helpers ─────────────────────────────────────────────────────


def without_control(text) -> str:
    """Drop characters below U+0020. Tabs and newlines become spaces."""
    text = str(text).replace("\t", " ").replace("\r", " ").replace("\n", " ")
    return "".join(c for c in text if ord(c) >= 32)


def truncate_words(text: str, limit: int = SHORT_DESCRIPTION_LIMIT) -> str:
    """Cut ``text`` to at most ``limit`` characters at the last space.

    A single word longer than ``limit`` is cut hard; there is no
    boundary to snap to.
    """
    if len(text) <= limit:
        return text
    if text[limit] == " ":
        return text[:limit].rstrip()

    window = text[:limit]
    stop = window.rfind(" ")
    if stop <= 0:
        return window
    return window[:stop].rstrip()


def orcid_path(uri: str) -> str:
    """ORCID iD from an ORCID URI: the part after ``orcid.org/``."""
    marker = f"{ORCID_HOST}/"
    uri = uri.strip().rstrip("/")
    if marker in uri:
        return uri.split(marker, 1)[1]
    return uri


def orcid_uri(value: str) -> str:
    if f"{ORCID_HOST}/" in value:
        return value.strip()
    return f"https://{ORCID_HOST}/{value.strip()}"


def _sub(parent, tag: str, text=None):
    el = etree.SubElement(parent, tag)
    if text is not None:
        el.text = without_control(text)
    return el


# ── Work Document ────────────────────────────────────────────────────


def build_work_xml(
    *,
    doi: str,
    title: str,
    work_type: str,
    container_title: str | None = None,
    description: str | None = None,
    citation: str | None = None,
    publication_date: PublicationDate | None = None,
    contributors: list[Contributor] | None = None,
    put_code: int | None = None,
) -> str:
    """Serialize a work to ORCID XML.

    Element order is fixed by the work schema: titles, short description,
    citation, type, publication date, external ids, contributors.
    """
    root = etree.Element(_WORK + "work", nsmap=NSMAP)
    root.set(f"{{{XSI_NS}}}schemaLocation", f"{WORK_NS} ../work-{API_VERSION}.xsd")
    if put_code is not None:
        root.set("put-code", str(put_code))

    _insert_titles(root, title, container_title)
    _insert_description(root, description)
    _insert_citation(root, citation)
    _sub(root, _WORK + "type", work_type)
    _insert_pub_date(root, publication_date)
    _insert_ids(root, doi)
    _insert_contributors(root, contributors or [])

    return etree.tostring(
        root, xml_declaration=True, encoding="UTF-8", pretty_print=True
    ).decode("utf-8")


def _insert_titles(root, title: str, container_title: str | None) -> None:
    title_el = _sub(root, _WORK + "title")
    _sub(title_el, _COMMON + "title", title)
    if container_title:
        _sub(root, _WORK + "journal-title", container_title)


def _insert_description(root, description: str | None) -> None:
    if not description or not description.strip():
        return
    text = truncate_words(without_control(description).strip())
    _sub(root, _WORK + "short-description", text)


def _insert_citation(root, citation: str | None) -> None:
    if not citation:
        return
    citation_el = _sub(root, _WORK + "citation")
    _sub(citation_el, _WORK + "citation-type", "bibtex")
    _sub(citation_el, _WORK + "citation-value", citation)


def _insert_pub_date(root, date: PublicationDate | None) -> None:
    if date is None or date.year is None:
        return
    date_el = _sub(root, _COMMON + "publication-date")
    _sub(date_el, _COMMON + "year", f"{date.year:04d}")
    if date.month:
        _sub(date_el, _COMMON + "month", f"{date.month:02d}")
        if date.day:
            _sub(date_el, _COMMON + "day", f"{date.day:02d}")


def _insert_ids(root, doi: str) -> None:
    ids_el = _sub(root, _COMMON + "external-ids")
    _insert_id(ids_el, "doi", doi)


def _insert_id(parent, id_type: str, value: str) -> None:
    id_el = _sub(parent, _COMMON + "external-id")
    _sub(id_el, _COMMON + "external-id-type", id_type)
    _sub(id_el, _COMMON + "external-id-value", value)


def _insert_contributors(root, contributors: list[Contributor]) -> None:
    if not contributors:
        return
    contributors_el = _sub(root, _WORK + "contributors")
    for contributor in contributors:
        contributor_el = _sub(contributors_el, _WORK + "contributor")
        _insert_contributor(contributor_el, contributor)


def _insert_contributor(parent, contributor: Contributor) -> None:
    if contributor.orcid:
        uri = orcid_uri(contributor.orcid)
        orcid_el = _sub(parent, _COMMON + "contributor-orcid")
        _sub(orcid_el, _COMMON + "uri", uri)
        _sub(orcid_el, _COMMON + "path", orcid_path(uri))
        _sub(orcid_el, _COMMON + "host", ORCID_HOST)

    _sub(parent, _WORK + "credit-name", contributor.credit_name)

    if contributor.role or contributor.sequence:
        attributes_el = _sub(parent, _WORK + "contributor-attributes")
        if contributor.sequence:
            _sub(attributes_el, _WORK + "contributor-sequence", contributor.sequence)
        if contributor.role:
            _sub(attributes_el, _WORK + "contributor-role", contributor.role)
