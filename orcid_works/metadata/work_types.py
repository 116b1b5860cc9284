"""Mapping from metadata registry work types to the ORCID work-type vocabulary."""

import logging

from orcid_works.core.errors import UnknownWorkType

logger = logging.getLogger(__name__)

DEFAULT_WORK_TYPE = "other"

ORCID_WORK_TYPES = frozenset({
    "artistic-performance",
    "book-chapter",
    "book-review",
    "book",
    "conference-abstract",
    "conference-paper",
    "conference-poster",
    "data-set",
    "dictionary-entry",
    "disclosure",
    "dissertation",
    "edited-book",
    "encyclopedia-entry",
    "invention",
    "journal-article",
    "journal-issue",
    "lecture-speech",
    "license",
    "magazine-article",
    "manual",
    "newsletter-article",
    "newspaper-article",
    "online-resource",
    "other",
    "patent",
    "registered-copyright",
    "report",
    "research-technique",
    "research-tool",
    "spin-off-company",
    "standards-and-policy",
    "supervised-student-publication",
    "technical-standard",
    "test",
    "trademark",
    "translation",
    "website",
    "working-paper",
    "undefined",
})

# ── Lookup Table ─────────────────────────────────────────────────────
#
# Keys are lowercased (type, subtype). A subtype of None is the fallback
# for the type when the exact pair is not listed.

WORK_TYPES: dict[tuple[str, str | None], str] = {
    # DataCite resourceTypeGeneral
    ("audiovisual", None): "other",
    ("collection", None): "other",
    ("dataset", None): "data-set",
    ("event", None): "other",
    ("image", None): "other",
    ("interactiveresource", None): "online-resource",
    ("model", None): "other",
    ("physicalobject", None): "other",
    ("service", None): "other",
    ("software", None): "other",
    ("sound", None): "other",
    ("workflow", None): "other",
    ("other", None): "other",
    ("text", None): "other",
    # DataCite Text with a free-text resourceType
    ("text", "article"): "journal-article",
    ("text", "journal article"): "journal-article",
    ("text", "book"): "book",
    ("text", "book chapter"): "book-chapter",
    ("text", "chapter"): "book-chapter",
    ("text", "book review"): "book-review",
    ("text", "conference abstract"): "conference-abstract",
    ("text", "conference paper"): "conference-paper",
    ("text", "conference poster"): "conference-poster",
    ("text", "poster"): "conference-poster",
    ("text", "dissertation"): "dissertation",
    ("text", "thesis"): "dissertation",
    ("text", "doctoral thesis"): "dissertation",
    ("text", "master thesis"): "supervised-student-publication",
    ("text", "bachelor thesis"): "supervised-student-publication",
    ("text", "manual"): "manual",
    ("text", "preprint"): "working-paper",
    ("text", "working paper"): "working-paper",
    ("text", "report"): "report",
    ("text", "technical report"): "report",
    ("text", "presentation"): "lecture-speech",
    ("text", "lecture"): "lecture-speech",
    ("text", "standard"): "technical-standard",
    ("text", "patent"): "patent",
    ("text", "website"): "website",
    ("text", "blog post"): "online-resource",
    # CSL-JSON types
    ("article", None): "journal-article",
    ("article-journal", None): "journal-article",
    ("article-magazine", None): "magazine-article",
    ("article-newspaper", None): "newspaper-article",
    ("bill", None): "standards-and-policy",
    ("broadcast", None): "other",
    ("chapter", None): "book-chapter",
    ("entry", None): "encyclopedia-entry",
    ("entry-dictionary", None): "dictionary-entry",
    ("entry-encyclopedia", None): "encyclopedia-entry",
    ("figure", None): "other",
    ("graphic", None): "other",
    ("interview", None): "other",
    ("legal_case", None): "other",
    ("legislation", None): "standards-and-policy",
    ("manuscript", None): "working-paper",
    ("map", None): "other",
    ("motion_picture", None): "artistic-performance",
    ("musical_score", None): "artistic-performance",
    ("pamphlet", None): "other",
    ("paper-conference", None): "conference-paper",
    ("personal_communication", None): "other",
    ("post", None): "online-resource",
    ("post-weblog", None): "online-resource",
    ("review", None): "book-review",
    ("review-book", None): "book-review",
    ("song", None): "artistic-performance",
    ("speech", None): "lecture-speech",
    ("thesis", None): "dissertation",
    ("treaty", None): "standards-and-policy",
    ("webpage", None): "website",
    # Crossref types
    ("book", None): "book",
    ("book-chapter", None): "book-chapter",
    ("book-part", None): "book-chapter",
    ("book-section", None): "book-chapter",
    ("book-series", None): "book",
    ("book-set", None): "book",
    ("book-track", None): "book-chapter",
    ("component", None): "other",
    ("database", None): "data-set",
    ("dissertation", None): "dissertation",
    ("edited-book", None): "edited-book",
    ("grant", None): "other",
    ("journal", None): "journal-issue",
    ("journal-article", None): "journal-article",
    ("journal-issue", None): "journal-issue",
    ("journal-volume", None): "journal-issue",
    ("monograph", None): "book",
    ("peer-review", None): "other",
    ("posted-content", None): "working-paper",
    ("posted-content", "preprint"): "working-paper",
    ("proceedings", None): "conference-paper",
    ("proceedings-article", None): "conference-paper",
    ("proceedings-series", None): "conference-paper",
    ("reference-book", None): "book",
    ("reference-entry", None): "encyclopedia-entry",
    ("report", None): "report",
    ("report-component", None): "report",
    ("report-series", None): "report",
    ("standard", None): "technical-standard",
    ("standard-series", None): "technical-standard",
}


def _key(value: str | None) -> str | None:
    if value is None:
        return None
    value = " ".join(str(value).split()).lower()
    return value or None


class WorkTypeMapper:
    """Resolve a (type, subtype) pair against the static WORK_TYPES table.

    Unmapped pairs resolve to DEFAULT_WORK_TYPE unless ``strict`` is set,
    in which case UnknownWorkType is raised.
    """

    def __init__(self, table: dict | None = None, strict: bool = False):
        self.table = WORK_TYPES if table is None else table
        self.strict = strict

    def lookup(self, work_type: str | None, subtype: str | None = None) -> str:
        type_key = _key(work_type)
        subtype_key = _key(subtype)

        if (type_key, subtype_key) in self.table:
            return self.table[(type_key, subtype_key)]
        if (type_key, None) in self.table:
            return self.table[(type_key, None)]

        if self.strict:
            raise UnknownWorkType(work_type, subtype)
        logger.warning(
            "Unmapped work type %r / %r, using %r", work_type, subtype, DEFAULT_WORK_TYPE
        )
        return DEFAULT_WORK_TYPE
