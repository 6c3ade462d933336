"""
Media dataset models.

These models describe the labeled media records the game spawns from and
that the media HTTP endpoints manage. JSON uses camelCase keys
(``fakeIndicators``, ``dateAdded``); Python code uses snake_case attributes.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel

from .enums import MediaType


class MediaRecord(BaseModel):
    """One authored media record from a real or fake dataset.

    Attributes:
        id: Identifier, only set for custom (user-added) records
        type: image, quote or video
        content: Display text (caption or quote body)
        author: Attributed author for quotes
        description: Short human description
        source: Where the record came from
        url: Image URL, if any
        category: Free-form grouping label
        fake_indicators: Tell-tale signs listed for fake records
        date_added: Creation time for custom records

    Unknown keys are preserved so that imported datasets round-trip.

    Examples:
        >>> record = MediaRecord(type='quote', content='Be the change.')
        >>> record.type
        <MediaType.QUOTE: 'quote'>
    """
    id: Optional[str] = None
    type: MediaType
    content: str
    author: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    url: Optional[str] = None
    category: Optional[str] = None
    fake_indicators: List[str] = Field(default_factory=list)
    date_added: Optional[datetime] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='allow',
        use_enum_values=False,
    )

    @field_validator('content')
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('Content must be a non-empty string')
        return v

    def to_json(self) -> dict:
        """Serialize with camelCase keys, dropping unset optionals."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class CustomMediaCreate(BaseModel):
    """Request body for adding a custom media record.

    ``isFake`` must be a real JSON boolean; strings like "true" are rejected.
    """
    type: MediaType
    content: str
    is_fake: StrictBool
    author: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    url: Optional[str] = None
    category: Optional[str] = None
    fake_indicators: List[str] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator('content')
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Content must be a non-empty string')
        return v.strip()

    @field_validator('author', 'description', 'source', 'url', 'category')
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else None

    def to_record(self, record_id: str) -> MediaRecord:
        """Build the stored record, filling defaults for source and category."""
        return MediaRecord(
            id=record_id,
            type=self.type,
            content=self.content,
            author=self.author,
            description=self.description,
            source=self.source or 'Custom',
            url=self.url,
            category=self.category or 'custom',
            fake_indicators=self.fake_indicators,
            date_added=datetime.now(timezone.utc),
        )


class MediaInfo(BaseModel):
    """Context about a media item, used to build explanation prompts."""
    type: MediaType
    content: str
    author: Optional[str] = None
    source: Optional[str] = None
    description: Optional[str] = None
    fake_indicators: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class CustomMediaSet(BaseModel):
    """Custom records grouped by label, as exported and imported."""
    real: Optional[List[MediaRecord]] = None
    fake: Optional[List[MediaRecord]] = None


class MediaImport(BaseModel):
    """Body of a media import. Missing lists leave the current data alone."""
    real: Optional[List[MediaRecord]] = None
    fake: Optional[List[MediaRecord]] = None
    custom: Optional[CustomMediaSet] = None
