from datetime import datetime

from models import db


class StorageEntry(db.Model):
    """One key of the vault's key-value storage; each vault collection is one row."""
    __tablename__ = 'storage_entries'
    key = db.Column(db.String(255), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @staticmethod
    def read(key: str):
        entry = db.session.get(StorageEntry, key)
        return entry.value if entry else None

    @staticmethod
    def write(key: str, value: str) -> None:
        entry = db.session.get(StorageEntry, key)
        if entry is None:
            entry = StorageEntry(key=key, value=value)
            db.session.add(entry)
        else:
            entry.value = value
        try:
            db.session.commit()
        except Exception:
            # leave the session usable, then let the caller see the failure
            db.session.rollback()
            raise
