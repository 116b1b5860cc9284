"""Tests for WorkRecord: required elements gate, outputs, caching and submission."""

import copy
import re
from unittest.mock import MagicMock

import pytest
from lxml import etree

from orcid_works.api.orcid import ApiResponse
from orcid_works.core.config import NSMAP, Settings
from orcid_works.core.errors import IncompleteMetadata, LookupFailure, SubmissionFailure
from orcid_works.core.work import WorkRecord

DOI = "10.1234/example"
ORCID = "0000-0002-1825-0097"

EXAMPLE_METADATA = {
    "title": "Example Paper",
    "container-title": "Journal of Examples",
    "type": "journal-article",
    "published": {"year": 2020, "month": 5},
    "author": [{"given": "Jane", "family": "Doe"}],
}


def _record(metadata=None, doi=DOI, **kwargs) -> WorkRecord:
    resolver = MagicMock()
    resolver.fetch_metadata.return_value = copy.deepcopy(
        EXAMPLE_METADATA if metadata is None else metadata
    )
    return WorkRecord(doi, ORCID, "token", settings=Settings(), resolver=resolver, **kwargs)


def _without(key: str) -> dict:
    metadata = copy.deepcopy(EXAMPLE_METADATA)
    del metadata[key]
    return metadata


# ── Required Elements ────────────────────────────────────────────────


def test_example_has_required_elements():
    assert _record().has_required_elements() is True


@pytest.mark.parametrize("key", ["title", "container-title", "author", "published"])
def test_missing_required_element(key):
    record = _record(_without(key))
    assert record.has_required_elements() is False
    assert record.citation() is None
    assert record.data() is None


def test_missing_doi():
    record = _record(doi="")
    assert record.has_required_elements() is False
    assert record.data() is None


def test_authors_without_names_count_as_missing():
    metadata = copy.deepcopy(EXAMPLE_METADATA)
    metadata["author"] = [{}]
    assert _record(metadata).has_required_elements() is False


def test_date_without_year_counts_as_missing():
    metadata = copy.deepcopy(EXAMPLE_METADATA)
    metadata["published"] = {"month": 5}
    assert _record(metadata).has_required_elements() is False


# ── Derived Fields ───────────────────────────────────────────────────


def test_derived_fields():
    record = _record()
    assert record.title() == "Example Paper"
    assert record.container_title() == "Journal of Examples"
    assert record.work_type() == "journal-article"
    assert record.publication_date().year == 2020
    assert record.publication_date().month == 5
    assert record.publication_date().day is None
    assert record.author_string() == "Doe, Jane"
    assert [c.credit_name for c in record.contributors()] == ["Jane Doe"]


def test_description_uses_first_entry():
    metadata = copy.deepcopy(EXAMPLE_METADATA)
    metadata["description"] = ["First abstract.", "Second abstract."]
    assert _record(metadata).description() == "First abstract."


def test_doi_url_is_normalized():
    assert _record(doi="https://doi.org/10.1234/example").doi == DOI


# ── Citation ─────────────────────────────────────────────────────────


def test_citation():
    citation = _record().citation()
    assert citation.startswith("@data{https://doi.org/10.1234/example,")
    assert "author = {Doe, Jane}" in citation
    assert "publisher = {Journal of Examples}" in citation
    assert "year = {2020}" in citation
    assert "\n" not in citation
    assert re.search(r"\s{2,}", citation) is None


# ── End-to-End Document ──────────────────────────────────────────────


def test_example_document_structure():
    root = etree.fromstring(_record().data().encode("utf-8"))

    assert len(root.findall("work:title", namespaces=NSMAP)) == 1
    assert root.findtext("work:title/common:title", namespaces=NSMAP) == "Example Paper"

    types = root.findall("work:type", namespaces=NSMAP)
    assert [t.text for t in types] == ["journal-article"]

    (date,) = root.findall("common:publication-date", namespaces=NSMAP)
    assert int(date.findtext("common:year", namespaces=NSMAP)) == 2020
    assert int(date.findtext("common:month", namespaces=NSMAP)) == 5
    assert date.find("common:day", namespaces=NSMAP) is None

    (ids,) = root.findall("common:external-ids", namespaces=NSMAP)
    (ext_id,) = ids.findall("common:external-id", namespaces=NSMAP)
    assert ext_id.findtext("common:external-id-type", namespaces=NSMAP) == "doi"
    assert ext_id.findtext("common:external-id-value", namespaces=NSMAP) == DOI

    (contributors,) = root.findall("work:contributors", namespaces=NSMAP)
    (contributor,) = contributors.findall("work:contributor", namespaces=NSMAP)
    assert contributor.findtext("work:credit-name", namespaces=NSMAP) == "Jane Doe"
    assert contributor.find("common:contributor-orcid", namespaces=NSMAP) is None


def test_example_document_is_schema_valid():
    assert _record().validation_errors() == []
    assert _record().is_valid()


def test_contributor_orcid_path_in_document():
    metadata = copy.deepcopy(EXAMPLE_METADATA)
    metadata["author"][0]["ORCID"] = "https://orcid.org/0000-0001-2345-6789"
    record = _record(metadata)
    root = etree.fromstring(record.data().encode("utf-8"))
    path = root.findtext(".//common:contributor-orcid/common:path", namespaces=NSMAP)
    assert path == "0000-0001-2345-6789"
    assert record.validation_errors() == []


def test_unmapped_type_document_is_still_valid():
    metadata = copy.deepcopy(EXAMPLE_METADATA)
    metadata["type"] = "hologram"
    record = _record(metadata)
    assert record.work_type() == "other"
    assert record.validation_errors() == []


# ── Caching ──────────────────────────────────────────────────────────


def test_metadata_fetched_once():
    record = _record()
    record.data()
    record.citation()
    record.validation_errors()
    record.resolver.fetch_metadata.assert_called_once_with(DOI)


def test_validation_errors_computed_once():
    validator = MagicMock()
    validator.validate.return_value = ["line 1: broken"]
    record = _record(validator=validator)
    assert record.validation_errors() == ["line 1: broken"]
    assert record.validation_errors() == ["line 1: broken"]
    validator.validate.assert_called_once()


def test_new_put_code_invalidates_validation_errors():
    validator = MagicMock()
    validator.validate.return_value = []
    api = MagicMock()
    api.create_work.return_value = ApiResponse(status_code=201, put_code=42)
    record = _record(validator=validator, api=api)

    record.validation_errors()
    record.create_work()
    record.validation_errors()

    assert validator.validate.call_count == 2
    (data,) = validator.validate.call_args.args
    assert 'put-code="42"' in data


def test_update_with_other_put_code_invalidates_validation_errors():
    validator = MagicMock()
    validator.validate.return_value = []
    api = MagicMock()
    api.update_work.return_value = ApiResponse(status_code=200, put_code=43)
    record = _record(validator=validator, api=api, put_code=42)

    record.validation_errors()
    record.update_work(43)
    record.validation_errors()

    assert validator.validate.call_count == 2
    assert 'put-code="43"' in validator.validate.call_args.args[0]


def test_lookup_failure_propagates():
    resolver = MagicMock()
    resolver.fetch_metadata.side_effect = LookupFailure(DOI, "DOI not found", status_code=404)
    record = WorkRecord(DOI, ORCID, settings=Settings(), resolver=resolver)
    with pytest.raises(LookupFailure):
        record.data()


def test_instances_do_not_share_state():
    first = _record()
    second = _record(_without("title"))
    assert first.has_required_elements()
    assert not second.has_required_elements()
    assert first.validator is not second.validator


# ── Submission ───────────────────────────────────────────────────────


def test_create_work_posts_data_and_keeps_put_code():
    api = MagicMock()
    api.create_work.return_value = ApiResponse(status_code=201, put_code=42)
    record = _record(api=api)

    result = record.create_work()

    assert result.put_code == 42
    assert record.put_code == 42
    (data,) = api.create_work.call_args.args
    assert "<work:work" in data


def test_update_work_sends_put_code_attribute():
    api = MagicMock()
    api.update_work.return_value = ApiResponse(status_code=200, put_code=42)
    record = _record(api=api, put_code=42)

    record.update_work()

    put_code, data = api.update_work.call_args.args
    assert put_code == 42
    assert 'put-code="42"' in data


def test_update_without_put_code_fails():
    with pytest.raises(SubmissionFailure):
        _record(api=MagicMock()).update_work()


def test_delete_work():
    api = MagicMock()
    api.delete_work.return_value = ApiResponse(status_code=204, put_code=7)
    assert _record(api=api).delete_work(7).status_code == 204
    api.delete_work.assert_called_once_with(7)


def test_incomplete_work_is_not_submitted():
    api = MagicMock()
    record = _record(_without("title"), api=api)
    with pytest.raises(IncompleteMetadata):
        record.create_work()
    api.create_work.assert_not_called()


def test_submission_requires_token():
    resolver = MagicMock()
    resolver.fetch_metadata.return_value = copy.deepcopy(EXAMPLE_METADATA)
    record = WorkRecord(DOI, ORCID, None, settings=Settings(), resolver=resolver)
    with pytest.raises(SubmissionFailure, match="access token"):
        record.create_work()
