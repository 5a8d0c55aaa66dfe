from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Union

from utils.dates import parse_iso


class ItemType(str, Enum):
    NOTE = 'note'
    IMAGE = 'image'
    PDF = 'pdf'


# python attribute -> persisted key
_KEY_MAP = {
    'created_at': 'createdAt',
    'updated_at': 'updatedAt',
    'data_url': 'dataUrl',
}


@dataclass
class VaultItem:
    """Common shape of everything kept in the vault.

    `kind` is fixed per subclass and written out as the `type` tag, so a
    caller can never choose it.
    """

    kind: ClassVar[ItemType]

    id: str
    title: str
    created_at: str
    updated_at: str

    @property
    def type(self) -> ItemType:
        return self.kind

    def matches(self, lowered_query: str) -> bool:
        return lowered_query in (self.title or '').lower()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            out[_KEY_MAP.get(f.name, f.name)] = getattr(self, f.name)
        out['type'] = self.kind.value
        return out

    @classmethod
    def from_dict(cls, raw: Any) -> 'VaultItem':
        if not isinstance(raw, dict):
            raise ValueError(f'expected an object, got {type(raw).__name__}')
        if raw.get('type') != cls.kind.value:
            raise ValueError(f"type tag {raw.get('type')!r} does not belong in {cls.kind.value} collection")
        values = {}
        for f in fields(cls):
            key = _KEY_MAP.get(f.name, f.name)
            if key not in raw:
                raise ValueError(f'missing field {key!r}')
            # every persisted field is a string
            if not isinstance(raw[key], str):
                raise ValueError(f'field {key!r} is {type(raw[key]).__name__}, expected str')
            values[f.name] = raw[key]
        for key in ('createdAt', 'updatedAt'):
            try:
                parse_iso(raw[key])
            except ValueError as exc:
                raise ValueError(f'field {key!r} is not an ISO-8601 timestamp') from exc
        return cls(**values)


@dataclass
class Note(VaultItem):
    kind: ClassVar[ItemType] = ItemType.NOTE

    content: str = ''

    def matches(self, lowered_query: str) -> bool:
        # notes are the only variant whose body is searchable
        return super().matches(lowered_query) or lowered_query in (self.content or '').lower()


@dataclass
class ImageItem(VaultItem):
    kind: ClassVar[ItemType] = ItemType.IMAGE

    data_url: str = ''


@dataclass
class PDFItem(VaultItem):
    kind: ClassVar[ItemType] = ItemType.PDF

    data_url: str = ''


VaultItemType = Union[Note, ImageItem, PDFItem]

ITEM_CLASSES = {
    ItemType.NOTE: Note,
    ItemType.IMAGE: ImageItem,
    ItemType.PDF: PDFItem,
}
