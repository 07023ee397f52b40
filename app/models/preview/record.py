from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MetadataRecord(BaseModel):
    """Open Graph metadata extracted from a single page.

    Every field is a string; a property missing from the page is ``""``,
    never ``None``.  ``canonical_url`` is the page's own ``og:url`` and is
    serialized as ``url``; it need not match the URL that was requested.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    title: str = ""
    description: str = ""
    image: str = ""
    canonical_url: str = Field(default="", alias="url")

    def to_json(self) -> str:
        """Serialize to the JSON stored in the cache and returned by the API."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str | bytes) -> MetadataRecord:
        """Parse a record produced by :meth:`to_json`.

        Raises:
            pydantic.ValidationError: *raw* is not valid JSON or a field is
                not a string.
        """
        return cls.model_validate_json(raw)
