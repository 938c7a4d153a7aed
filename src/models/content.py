"""
Content collection models

A document is a Markdown file with YAML front-matter. The front-matter is
validated into a typed record whose schema depends on the collection the
document lives in (blog, news, events).
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Site-local timezone; naive front-matter dates are read as JST
JST = timezone(timedelta(hours=9))


class Collection(Enum):
    """Content groupings; each value is also the content/ image path segment"""
    BLOG = "blog"
    NEWS = "news"
    EVENTS = "events"


def date_normalize(value: Any) -> Any:
    """
    Coerce a front-matter date into an aware datetime.

    Accepts datetime/date objects or ISO-ish strings ("2024-05-01",
    "2024-05-01 10:00", "2024-05-01T10:00:00Z"). Naive results are
    interpreted as JST.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif hasattr(value, "year") and hasattr(value, "month"):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip().replace("Z", "+00:00")
        parsed = datetime.fromisoformat(text.replace("/", "-"))
    else:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=JST)
    return parsed


class ContentEntry(BaseModel):
    """Fields shared by every collection"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str
    description: str
    pubDate: datetime
    updatedDate: Optional[datetime] = None
    author: str = "創技 光"
    tags: List[str] = Field(default_factory=list)
    draft: bool = False
    cover: Optional[str] = None
    coverAlt: Optional[str] = None

    @field_validator("pubDate", "updatedDate", mode="before")
    @classmethod
    def dates_coerce(cls, value: Any) -> Any:
        return date_normalize(value)


class BlogEntry(ContentEntry):
    seriesId: Optional[str] = None
    seriesNumber: Optional[int] = None


class NewsEntry(ContentEntry):
    pass


class EventEntry(ContentEntry):
    eventDate: datetime
    eventEndDate: Optional[datetime] = None
    location: Optional[str] = None

    @field_validator("eventDate", "eventEndDate", mode="before")
    @classmethod
    def eventDates_coerce(cls, value: Any) -> Any:
        return date_normalize(value)


def record_classFor(collection: Collection) -> Type[ContentEntry]:
    """Front-matter schema for a collection"""
    return {
        Collection.BLOG: BlogEntry,
        Collection.NEWS: NewsEntry,
        Collection.EVENTS: EventEntry,
    }[collection]


class SeriesInfo(BaseModel):
    """Contents of a blog/<series-id>/series.json file"""

    name: str
    description: str = ""
    color: str = "#4299e1"
    icon: str = "📚"
    order: int = 0
