"""Tests for Open Graph extraction and the ``MetadataRecord`` JSON form."""

from __future__ import annotations

import json

import pytest
from bs4 import BeautifulSoup
from pydantic import ValidationError

from app.models.preview.record import MetadataRecord
from app.services.preview.extractor import extract_metadata


def _doc(head: str) -> BeautifulSoup:
    return BeautifulSoup(f"<html><head>{head}</head><body></body></html>", "html.parser")


# ---------------------------------------------------------------------------
# extract_metadata
# ---------------------------------------------------------------------------


class TestExtractMetadata:
    def test_reads_all_four_properties(self):
        doc = _doc(
            '<meta property="og:title" content="Title">'
            '<meta property="og:description" content="Desc">'
            '<meta property="og:image" content="https://example.com/i.png">'
            '<meta property="og:url" content="https://example.com/canonical">'
        )
        assert extract_metadata(doc) == MetadataRecord(
            title="Title",
            description="Desc",
            image="https://example.com/i.png",
            canonical_url="https://example.com/canonical",
        )

    def test_title_only_page(self):
        record = extract_metadata(_doc('<meta property="og:title" content="A Page">'))
        assert json.loads(record.to_json()) == {
            "title": "A Page",
            "description": "",
            "image": "",
            "url": "",
        }

    def test_missing_title_is_empty_string(self):
        record = extract_metadata(_doc('<meta property="og:image" content="x.png">'))
        assert record.title == ""
        assert record.image == "x.png"

    def test_first_tag_in_document_order_wins(self):
        doc = BeautifulSoup(
            "<html><head>"
            '<meta property="og:title" content="First">'
            "</head><body>"
            '<meta property="og:title" content="Second">'
            "</body></html>",
            "html.parser",
        )
        assert extract_metadata(doc).title == "First"

    def test_no_fallback_to_title_element(self):
        doc = _doc(
            "<title>Plain title</title>"
            '<meta name="description" content="Plain description">'
            '<meta name="twitter:image" content="tw.png">'
        )
        assert extract_metadata(doc) == MetadataRecord()

    def test_name_attribute_is_not_a_property(self):
        assert extract_metadata(_doc('<meta name="og:title" content="Wrong">')).title == ""

    def test_tag_without_content_is_empty_string(self):
        assert extract_metadata(_doc('<meta property="og:title">')).title == ""

    def test_property_name_must_match_exactly(self):
        doc = _doc('<meta property="og:title:alt" content="Alt">')
        assert extract_metadata(doc).title == ""

    def test_empty_document(self):
        assert extract_metadata(BeautifulSoup("", "html.parser")) == MetadataRecord()

    def test_extraction_is_repeatable(self):
        doc = _doc(
            '<meta property="og:title" content="T">'
            '<meta property="og:url" content="https://example.com/">'
        )
        assert extract_metadata(doc).to_json() == extract_metadata(doc).to_json()


# ---------------------------------------------------------------------------
# MetadataRecord
# ---------------------------------------------------------------------------


class TestMetadataRecord:
    def test_defaults_are_empty_strings(self):
        record = MetadataRecord()
        assert (record.title, record.description, record.image, record.canonical_url) == (
            "",
            "",
            "",
            "",
        )

    def test_json_uses_url_key_for_canonical_url(self):
        record = MetadataRecord(canonical_url="https://example.com/")
        assert json.loads(record.to_json())["url"] == "https://example.com/"
        assert "canonical_url" not in record.to_json()

    def test_round_trip(self):
        record = MetadataRecord(
            title='Quotes "and" unicode ✓',
            description="line\nbreak",
            image="https://example.com/i.png?x=1&y=2",
            canonical_url="https://example.com/",
        )
        assert MetadataRecord.from_json(record.to_json()) == record

    def test_from_json_accepts_bytes(self):
        raw = b'{"title":"T","description":"D","image":"I","url":"U"}'
        assert MetadataRecord.from_json(raw).canonical_url == "U"

    def test_missing_keys_default_to_empty(self):
        assert MetadataRecord.from_json('{"title": "T"}') == MetadataRecord(title="T")

    def test_invalid_json_raises(self):
        with pytest.raises(ValidationError):
            MetadataRecord.from_json("not json")

    def test_null_field_raises(self):
        with pytest.raises(ValidationError):
            MetadataRecord.from_json('{"title": null}')

    def test_non_string_field_raises(self):
        with pytest.raises(ValidationError):
            MetadataRecord.from_json('{"image": 42}')

    def test_record_is_immutable(self):
        record = MetadataRecord(title="T")
        with pytest.raises(ValidationError):
            record.title = "changed"
