"""
Media data provider.

MediaLibrary holds the labeled datasets the game spawns from: a default
real and fake pool loaded from JSON, plus custom records added at runtime.
The same library backs the game client and the media HTTP endpoints.

Loading never fails: unreadable or invalid dataset files are logged and
replaced by a small built-in dataset, and an empty pool yields a single
generic item.
"""

import json
import random
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import TypeAdapter

from models import (
    CustomMediaCreate,
    MediaImport,
    MediaInfo,
    MediaRecord,
    MediaType,
)
from deepfake_defense import config
from deepfake_defense.game.entities import MediaItem
from deepfake_defense.logging import get_logger

log = get_logger('media')

REAL_FILE = 'real_media.json'
FAKE_FILE = 'fake_media.json'
IMMUTABLE_FIELDS = ('id', 'dateAdded', 'date_added', 'isFake', 'is_fake')

_records = TypeAdapter(List[MediaRecord])

DEFAULT_REAL = [
    {
        'type': 'image',
        'content': 'Real celebrity photo',
        'url': 'https://picsum.photos/200/200?random=1',
        'description': 'Authentic photo of a well-known public figure',
        'source': 'Verified news source',
    },
    {
        'type': 'quote',
        'content': 'The only way to do great work is to love what you do.',
        'author': 'Steve Jobs',
        'description': 'Famous quote from Apple co-founder',
        'source': 'Stanford Commencement Speech, 2005',
    },
    {
        'type': 'image',
        'content': 'Real event photo',
        'url': 'https://picsum.photos/200/200?random=2',
        'description': 'Photo from a documented public event',
        'source': 'Official event photographer',
    },
    {
        'type': 'quote',
        'content': 'Be the change you wish to see in the world.',
        'author': 'Mahatma Gandhi',
        'description': 'Well-known inspirational quote',
        'source': 'Various historical records',
    },
    {
        'type': 'image',
        'content': 'Real landscape photo',
        'url': 'https://picsum.photos/200/200?random=3',
        'description': 'Natural landscape photograph',
        'source': 'Professional photographer',
    },
]

DEFAULT_FAKE = [
    {
        'type': 'image',
        'content': 'AI-generated face',
        'url': 'https://thispersondoesnotexist.com/',
        'description': 'Computer-generated human face',
        'source': 'StyleGAN AI model',
        'fakeIndicators': ['Perfect symmetry', 'Unrealistic features', 'AI artifacts'],
    },
    {
        'type': 'quote',
        'content': 'I never said that technology would solve all our problems.',
        'author': 'Albert Einstein',
        'description': 'Fabricated quote attributed to Einstein',
        'source': 'Misattributed online',
        'fakeIndicators': ['No historical record', 'Modern language', 'Misattributed'],
    },
    {
        'type': 'image',
        'content': 'Deepfake video frame',
        'url': 'https://picsum.photos/200/200?random=4',
        'description': 'AI-manipulated video content',
        'source': 'Deepfake technology',
        'fakeIndicators': ['Facial inconsistencies', 'Unnatural movements', 'AI artifacts'],
    },
    {
        'type': 'quote',
        'content': 'The internet is just a passing fad.',
        'author': 'Bill Gates',
        'description': 'Fake quote about the internet',
        'source': 'Misattributed',
        'fakeIndicators': ['Never said this', 'Contradicts known views', 'No source'],
    },
    {
        'type': 'image',
        'content': 'Synthetic image',
        'url': 'https://picsum.photos/200/200?random=5',
        'description': 'Computer-generated image',
        'source': 'AI image generator',
        'fakeIndicators': ['Unrealistic details', 'AI patterns', 'Synthetic appearance'],
    },
]


def load_records(path: Path) -> List[MediaRecord]:
    """Read and validate one dataset file.

    Raises:
        OSError: File missing or unreadable
        ValueError: Invalid JSON or records (ValidationError is a ValueError)
    """
    with open(path, encoding='utf-8') as f:
        return _records.validate_python(json.load(f))


class MediaLibrary:
    """Labeled media pools with custom additions.

    Args:
        real: Default real records
        fake: Default fake records
        rng: Random source for draws, injectable for tests

    Examples:
        >>> library = MediaLibrary.from_directory()
        >>> item = library.get_random_media()
        >>> library.get_media_info(item).source
        'Verified news source'
    """

    def __init__(
        self,
        real: Optional[List[MediaRecord]] = None,
        fake: Optional[List[MediaRecord]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.real: List[MediaRecord] = list(real) if real is not None else _records.validate_python(DEFAULT_REAL)
        self.fake: List[MediaRecord] = list(fake) if fake is not None else _records.validate_python(DEFAULT_FAKE)
        self.custom_real: List[MediaRecord] = []
        self.custom_fake: List[MediaRecord] = []
        self.rng = rng or random.Random()

    @classmethod
    def from_directory(
        cls,
        data_dir: Union[str, Path, None] = None,
        rng: Optional[random.Random] = None,
    ) -> 'MediaLibrary':
        """Load ``real_media.json`` and ``fake_media.json`` from a directory.

        Falls back to the built-in dataset if either file cannot be used.
        """
        data_dir = Path(data_dir) if data_dir else config.MEDIA_DATA_DIR
        try:
            real = load_records(data_dir / REAL_FILE)
            fake = load_records(data_dir / FAKE_FILE)
        except (OSError, ValueError) as e:
            log.warning("Could not load media data from %s (%s); using built-in dataset", data_dir, e)
            return cls(rng=rng)
        log.info("Loaded %d real media items and %d fake media items", len(real), len(fake))
        return cls(real, fake, rng=rng)

    # ------------------------------------------------------------------
    # Game-facing provider
    # ------------------------------------------------------------------

    def pool(self, is_fake: bool) -> List[MediaRecord]:
        """Default plus custom records with the given label."""
        return self.fake + self.custom_fake if is_fake else self.real + self.custom_real

    def all_records(self) -> List[MediaRecord]:
        return self.real + self.fake + self.custom_real + self.custom_fake

    def get_random_media(self) -> MediaItem:
        """A new MediaItem, fake or real with equal probability.

        Position and speed are placeholders; the spawner sets them.
        """
        is_fake = self.rng.random() < config.FAKE_PROBABILITY
        pool = self.pool(is_fake)
        if not pool:
            return self._fallback_item(is_fake)

        record = self.rng.choice(pool)
        return MediaItem(
            x=0.0,
            y=config.SPAWN_Y,
            media_type=record.type,
            content=record.content,
            is_fake=is_fake,
            author=record.author,
            source=record.source,
            description=record.description,
        )

    @staticmethod
    def _fallback_item(is_fake: bool) -> MediaItem:
        content = 'AI Generated Content' if is_fake else 'Real Content'
        return MediaItem(0.0, config.SPAWN_Y, MediaType.IMAGE, content, is_fake)

    def get_media_info(self, item) -> MediaInfo:
        """Context for an item, looked up by content and type.

        Works with anything exposing ``type`` and ``content`` (a MediaItem or
        a MediaSnapshot).
        """
        for record in self.all_records():
            if record.content == item.content and record.type == item.type:
                return MediaInfo(
                    type=record.type,
                    content=record.content,
                    author=record.author,
                    source=record.source,
                    description=record.description,
                    fake_indicators=record.fake_indicators,
                )
        return MediaInfo(
            type=item.type,
            content=item.content,
            description='Media content',
            source='Unknown',
        )

    # ------------------------------------------------------------------
    # Catalog queries
    # ------------------------------------------------------------------

    def list_media(
        self,
        media_type: Optional[MediaType] = None,
        category: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """All records as JSON dicts tagged with ``isCustom``, filtered."""
        tagged = [(r, False) for r in self.real + self.fake]
        tagged += [(r, True) for r in self.custom_real + self.custom_fake]
        result = []
        for record, is_custom in tagged:
            if media_type is not None and record.type != media_type:
                continue
            if category is not None and record.category != category:
                continue
            result.append({**record.to_json(), 'isCustom': is_custom})
        if limit is not None:
            result = result[:limit]
        return result

    def random_record(
        self,
        media_type: Optional[MediaType] = None,
        is_fake: Optional[bool] = None,
    ) -> Optional[Tuple[MediaRecord, bool]]:
        """Pick a random record and its label, or None when nothing matches."""
        if is_fake is None:
            is_fake = self.rng.random() < config.FAKE_PROBABILITY
        pool = self.pool(is_fake)
        if media_type is not None:
            pool = [r for r in pool if r.type == media_type]
        if not pool:
            return None
        return self.rng.choice(pool), is_fake

    def by_type(self, media_type: MediaType, is_fake: Optional[bool] = None) -> List[MediaRecord]:
        if is_fake is None:
            pool = self.all_records()
        else:
            pool = self.pool(is_fake)
        return [r for r in pool if r.type == media_type]

    def categories(self) -> List[str]:
        """Distinct categories in first-seen order."""
        seen: Dict[str, None] = {}
        for record in self.all_records():
            if record.category:
                seen.setdefault(record.category, None)
        return list(seen)

    def counts(self) -> Dict[str, int]:
        return {
            'real': len(self.real) + len(self.custom_real),
            'fake': len(self.fake) + len(self.custom_fake),
            'custom': len(self.custom_real) + len(self.custom_fake),
        }

    def stats(self) -> Dict[str, Any]:
        by_type = {t.value: 0 for t in MediaType}
        by_category: Dict[str, int] = {}
        for record in self.all_records():
            by_type[record.type.value] += 1
            if record.category:
                by_category[record.category] = by_category.get(record.category, 0) + 1
        return {
            'total': len(self.all_records()),
            'real': {
                'default': len(self.real),
                'custom': len(self.custom_real),
                'total': len(self.real) + len(self.custom_real),
            },
            'fake': {
                'default': len(self.fake),
                'custom': len(self.custom_fake),
                'total': len(self.fake) + len(self.custom_fake),
            },
            'byType': by_type,
            'byCategory': by_category,
        }

    # ------------------------------------------------------------------
    # Custom records
    # ------------------------------------------------------------------

    def add_custom(self, data: CustomMediaCreate) -> MediaRecord:
        record = data.to_record(uuid.uuid4().hex)
        (self.custom_fake if data.is_fake else self.custom_real).append(record)
        log.info("Added %s media: %s", 'fake' if data.is_fake else 'real', record.content)
        return record

    def list_custom(self, is_fake: Optional[bool] = None) -> List[MediaRecord]:
        if is_fake is True:
            return list(self.custom_fake)
        if is_fake is False:
            return list(self.custom_real)
        return self.custom_real + self.custom_fake

    def _find_custom(self, record_id: str) -> Optional[Tuple[List[MediaRecord], int]]:
        for pool in (self.custom_real, self.custom_fake):
            for index, record in enumerate(pool):
                if record.id == record_id:
                    return pool, index
        return None

    def update_custom(self, record_id: str, updates: Dict[str, Any]) -> Optional[MediaRecord]:
        """Apply field updates to a custom record.

        ``id``, ``dateAdded`` and the real/fake label cannot be changed. The
        merged record is validated before it replaces the stored one.

        Returns:
            The updated record, or None when the id is unknown

        Raises:
            ValidationError: The merged record is invalid
        """
        found = self._find_custom(record_id)
        if found is None:
            return None
        pool, index = found
        current = pool[index]
        merged = current.model_dump(by_alias=True)
        for key, value in updates.items():
            if key in IMMUTABLE_FIELDS:
                continue
            merged[key] = value
        merged['id'] = current.id
        merged['dateAdded'] = current.date_added
        updated = MediaRecord.model_validate(merged)
        pool[index] = updated
        return updated

    def delete_custom(self, record_id: str) -> Optional[Tuple[MediaRecord, bool]]:
        """Remove a custom record. Returns it with its label, or None."""
        found = self._find_custom(record_id)
        if found is None:
            return None
        pool, index = found
        return pool.pop(index), pool is self.custom_fake

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export(self) -> Dict[str, Any]:
        def dump(records):
            return [r.to_json() for r in records]

        return {
            'real': dump(self.real + self.custom_real),
            'fake': dump(self.fake + self.custom_fake),
            'custom': {
                'real': dump(self.custom_real),
                'fake': dump(self.custom_fake),
            },
            'exportDate': datetime.now(timezone.utc).isoformat(),
            'version': config.GAME_VERSION,
        }

    def import_data(self, data: MediaImport) -> Dict[str, int]:
        """Replace whichever pools the import provides. Returns counts."""
        if data.real is not None:
            self.real = list(data.real)
        if data.fake is not None:
            self.fake = list(data.fake)
        if data.custom is not None:
            if data.custom.real is not None:
                self.custom_real = list(data.custom.real)
            if data.custom.fake is not None:
                self.custom_fake = list(data.custom.fake)
        log.info("Media data imported")
        return self.counts()
