"""
Shared pydantic models.

``Book`` is the catalogue entry as returned by the search client.  The
reading queue and the favourites list embed a snapshot of it, so the
model is frozen once built.  All models serialise with camelCase keys
(``pageCount``, ``infoLink``) and accept either spelling on input.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated  # Py3.8 compatibility


class CamelModel(BaseModel):
    """Base model using camelCase aliases on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        """Return the JSON-ready dict used for persistence and responses."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Book(CamelModel):
    """A single catalogue entry.

    Every field has an empty default because the upstream catalogue
    omits whatever it does not know.  An empty ``id`` is accepted here
    and rejected by the services that need one.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    title: str = ""
    authors: List[str] = Field(default_factory=list)
    published_date: str = ""
    description: str = ""
    categories: List[str] = Field(default_factory=list)
    page_count: int = 0
    thumbnail: str = ""
    info_link: str = ""


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return ``value`` in UTC.  Naive timestamps are taken to be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Aware UTC datetime; naive input is read as UTC.
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
