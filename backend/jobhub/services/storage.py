from __future__ import annotations
import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Iterable

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from jobhub.crawlers.errors import StorageFailure
from jobhub.models.api_cache import ApiCacheEntry
from jobhub.models.job import Job
from jobhub.models.setting import Setting

logger = logging.getLogger(__name__)

COLLECTIONS = ("jobs", "settings")
JOB_COLUMNS = (
    "source",
    "title",
    "company",
    "location",
    "description",
    "requirements",
    "salary",
    "date_posted",
    "url",
    "apply_url",
    "raw_data",
)
JOB_EXTRAS = (
    "benefits",
    "skills",
    "tags",
    "logo",
    "category",
    "experience_level",
    "sponsored",
    "expiration_date",
    "applications",
)


def _as_dict(item: Any) -> dict:
    if isinstance(item, dict):
        return item
    if hasattr(item, "to_dict"):
        return item.to_dict()
    raise StorageFailure(f"cannot store item of type {type(item).__name__}")


def job_row_to_dict(row: Job) -> dict:
    data = {name: getattr(row, name) for name in JOB_COLUMNS}
    data["id"] = row.id
    data["type"] = row.job_type
    for name in JOB_EXTRAS:
        data[name] = (row.extra or {}).get(name)
    return data


class SqlStorage:
    """Storage collaborator backed by SQLAlchemy.

    Provides the response cache (``get_cached`` / ``set_cached``), job
    persistence (``bulk_upsert`` / ``get``) and small key/value settings.
    Calls arrive from adapter worker threads, so every session is used
    under one lock.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._lock = threading.RLock()

    def _session(self) -> Session:
        return self._session_factory()

    # --- response cache ---

    def get_cached(self, key: str) -> Any | None:
        with self._lock, self._session() as db:
            row = db.get(ApiCacheEntry, key)
            if row is None:
                return None
            if datetime.utcnow() > row.expires_at:
                db.delete(row)
                db.commit()
                return None
            return row.value

    def set_cached(self, key: str, value: Any, ttl_ms: int) -> None:
        expires_at = datetime.utcnow() + timedelta(milliseconds=ttl_ms)
        with self._lock, self._session() as db:
            row = db.get(ApiCacheEntry, key)
            if row is None:
                db.add(ApiCacheEntry(key=key, value=value, expires_at=expires_at))
            else:
                row.value = value
                row.expires_at = expires_at
            db.commit()

    def clean_cache(self) -> int:
        with self._lock, self._session() as db:
            result = db.execute(delete(ApiCacheEntry).where(ApiCacheEntry.expires_at < datetime.utcnow()))
            db.commit()
            deleted = result.rowcount or 0
        logger.info(f"Cleaned {deleted} expired cache entries")
        return deleted

    # --- collections ---

    def bulk_upsert(self, collection: str, items: Iterable[Any]) -> dict:
        self._check_collection(collection)
        succeeded = 0
        failed = 0
        for item in items:
            try:
                with self._lock, self._session() as db:
                    if collection == "jobs":
                        self._upsert_job(db, _as_dict(item))
                    else:
                        data = _as_dict(item)
                        self._upsert_setting(db, data["key"], data.get("value") or {})
                    db.commit()
                succeeded += 1
            except (SQLAlchemyError, StorageFailure, KeyError) as exc:
                failed += 1
                logger.warning(f"Failed to store item in {collection}: {exc}")
        return {"succeeded": succeeded, "failed": failed}

    def get(self, collection: str, item_id: str) -> dict | None:
        self._check_collection(collection)
        with self._lock, self._session() as db:
            if collection == "jobs":
                row = db.get(Job, item_id)
                return job_row_to_dict(row) if row else None
            row = db.get(Setting, item_id)
            return row.value if row else None

    def put(self, collection: str, item_id: str, value: dict) -> None:
        self._check_collection(collection)
        with self._lock, self._session() as db:
            if collection == "jobs":
                self._upsert_job(db, {**value, "id": item_id})
            else:
                self._upsert_setting(db, item_id, value)
            db.commit()

    @staticmethod
    def _check_collection(collection: str) -> None:
        if collection not in COLLECTIONS:
            raise StorageFailure(f"unknown collection: {collection}")

    @staticmethod
    def _upsert_job(db: Session, data: dict) -> None:
        if not data.get("id"):
            raise StorageFailure("job without id")
        row = db.get(Job, data["id"])
        if row is None:
            row = Job(id=data["id"])
            db.add(row)
        for name in JOB_COLUMNS:
            if name in data and data[name] is not None:
                setattr(row, name, data[name])
        if data.get("type"):
            row.job_type = data["type"]
        row.extra = {name: data[name] for name in JOB_EXTRAS if data.get(name) not in (None, "", [])}
        row.updated_at = datetime.utcnow()

    @staticmethod
    def _upsert_setting(db: Session, key: str, value: dict) -> None:
        row = db.get(Setting, key)
        if row is None:
            db.add(Setting(key=key, value=value, updated_at=datetime.utcnow()))
        else:
            row.value = value
            row.updated_at = datetime.utcnow()
