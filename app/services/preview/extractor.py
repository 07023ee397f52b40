from __future__ import annotations

from bs4 import BeautifulSoup

from app.models.preview.record import MetadataRecord

# Record field -> Open Graph property
OG_PROPERTIES: dict[str, str] = {
    "title": "og:title",
    "description": "og:description",
    "image": "og:image",
    "canonical_url": "og:url",
}


def _og_content(doc: BeautifulSoup, prop: str) -> str:
    tag = doc.select_one(f'meta[property="{prop}"]')
    if tag is None:
        return ""
    return tag.get("content") or ""


def extract_metadata(doc: BeautifulSoup) -> MetadataRecord:
    """Read the Open Graph properties of *doc* into a ``MetadataRecord``.

    Only ``<meta property="og:...">`` tags are consulted; there is no
    fallback to ``<title>`` or other meta names.  When a property appears
    more than once the first tag in document order wins.
    """
    return MetadataRecord(
        **{field: _og_content(doc, prop) for field, prop in OG_PROPERTIES.items()}
    )
