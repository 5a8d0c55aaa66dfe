from __future__ import annotations

import json
import uuid
from dataclasses import fields, replace
from typing import Callable, Dict, Generic, List, Optional, Type, TypeVar

from models.vault_item import ITEM_CLASSES, ImageItem, ItemType, Note, PDFItem, VaultItem, VaultItemType
from patterns.storage_port import KeyValueStorage
from utils.dates import now_iso
from utils.log import get_logger

log = get_logger(__name__)

DEFAULT_NAMESPACE = 'obsidian-vault-blue'

COLLECTION_SUFFIXES = {
    ItemType.NOTE: 'notes',
    ItemType.IMAGE: 'images',
    ItemType.PDF: 'pdfs',
}

# Assigned by the store on creation, never taken from an update
_FROZEN_FIELDS = ('id', 'type', 'created_at')

T = TypeVar('T', bound=VaultItem)


class Collection(Generic[T]):
    """All records of one item type, kept as a single JSON array under one key.

    Every mutation reads the whole array and writes it back, so each call costs
    O(size of the collection).
    """

    def __init__(self, storage: KeyValueStorage, key: str, item_cls: Type[T],
                 clock: Callable[[], str], id_factory: Callable[[], str]):
        self.storage = storage
        self.key = key
        self.item_cls = item_cls
        self._clock = clock
        self._id_factory = id_factory

    @property
    def kind(self) -> ItemType:
        return self.item_cls.kind

    def get_all(self) -> List[T]:
        raw = self.storage.get(self.key)
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except (TypeError, ValueError):
            log.warning('collection_unreadable', collection=self.key)
            return []
        if not isinstance(records, list):
            log.warning('collection_not_a_list', collection=self.key)
            return []

        items: List[T] = []
        for record in records:
            try:
                items.append(self.item_cls.from_dict(record))
            except (TypeError, ValueError) as exc:
                log.warning('record_skipped', collection=self.key, reason=str(exc))
        return items

    def _write(self, items: List[T]) -> None:
        self.storage.set(self.key, json.dumps([it.to_dict() for it in items]))
        log.debug('collection_written', collection=self.key, count=len(items))

    def save(self, **values) -> T:
        items = self.get_all()
        now = self._clock()
        item = self.item_cls(id=self._id_factory(), created_at=now, updated_at=now, **values)
        items.append(item)
        self._write(items)
        log.info('item_saved', collection=self.key, item_id=item.id)
        return item

    def update(self, item_id: str, **changes) -> Optional[T]:
        items = self.get_all()
        for index, existing in enumerate(items):
            if existing.id == item_id:
                break
        else:
            log.info('item_not_found', collection=self.key, item_id=item_id, op='update')
            return None

        known = {f.name for f in fields(self.item_cls)}
        unknown = set(changes) - known - {'type'}
        if unknown:
            raise TypeError(f'{self.item_cls.__name__} has no field(s) {", ".join(sorted(unknown))}')
        merged = {k: v for k, v in changes.items() if k not in _FROZEN_FIELDS}
        # updated_at always comes from the clock, even if the caller passed one
        merged['updated_at'] = self._clock()

        updated = replace(existing, **merged)
        items[index] = updated
        self._write(items)
        log.info('item_updated', collection=self.key, item_id=item_id)
        return updated

    def delete(self, item_id: str) -> bool:
        items = self.get_all()
        remaining = [it for it in items if it.id != item_id]
        if len(remaining) == len(items):
            log.info('item_not_found', collection=self.key, item_id=item_id, op='delete')
            return False
        self._write(remaining)
        log.info('item_deleted', collection=self.key, item_id=item_id)
        return True


class VaultStore:
    """CRUD and search over the notes, images and PDFs of one vault.

    The store returns plain snapshots; callers re-fetch after mutating to see
    the new state. Nothing here coordinates concurrent writers: two clients
    sharing one storage overwrite each other's collections (last writer wins).
    """

    def __init__(self, storage: KeyValueStorage, namespace: str = DEFAULT_NAMESPACE,
                 clock: Optional[Callable[[], str]] = None,
                 id_factory: Optional[Callable[[], str]] = None):
        self.storage = storage
        self.namespace = namespace
        clock = clock or now_iso
        id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._collections: Dict[ItemType, Collection] = {
            kind: Collection(storage, f'{namespace}-{suffix}', ITEM_CLASSES[kind], clock, id_factory)
            for kind, suffix in COLLECTION_SUFFIXES.items()
        }

    def collection(self, kind) -> Collection:
        return self._collections[ItemType(kind)]

    @property
    def notes(self) -> Collection[Note]:
        return self._collections[ItemType.NOTE]

    @property
    def images(self) -> Collection[ImageItem]:
        return self._collections[ItemType.IMAGE]

    @property
    def pdfs(self) -> Collection[PDFItem]:
        return self._collections[ItemType.PDF]

    # Notes
    def get_notes(self) -> List[Note]:
        return self.notes.get_all()

    def save_note(self, title: str, content: str = '') -> Note:
        return self.notes.save(title=title, content=content)

    def update_note(self, note_id: str, **changes) -> Optional[Note]:
        return self.notes.update(note_id, **changes)

    def delete_note(self, note_id: str) -> bool:
        return self.notes.delete(note_id)

    # Images
    def get_images(self) -> List[ImageItem]:
        return self.images.get_all()

    def save_image(self, title: str, data_url: str) -> ImageItem:
        return self.images.save(title=title, data_url=data_url)

    def delete_image(self, image_id: str) -> bool:
        return self.images.delete(image_id)

    # PDFs
    def get_pdfs(self) -> List[PDFItem]:
        return self.pdfs.get_all()

    def save_pdf(self, title: str, data_url: str) -> PDFItem:
        return self.pdfs.save(title=title, data_url=data_url)

    def delete_pdf(self, pdf_id: str) -> bool:
        return self.pdfs.delete(pdf_id)

    def search_items(self, query: str) -> List[VaultItemType]:
        """Case-insensitive substring search.

        Notes match on title or content, images and PDFs on title only.
        Results are grouped notes, then images, then PDFs, each group in
        storage order. A blank query returns nothing without touching storage.
        """
        if not query or not query.strip():
            return []
        lowered = query.lower()
        results: List[VaultItemType] = []
        for kind in (ItemType.NOTE, ItemType.IMAGE, ItemType.PDF):
            results.extend(it for it in self._collections[kind].get_all() if it.matches(lowered))
        log.debug('search', query=query, hits=len(results))
        return results
