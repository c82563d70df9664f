# portal/services/sessions.py
"""
Server-side session storage.

A session is an opaque id (sid) mapped to a small JSON dict. The client never
sees the dict, only a signed token wrapping the sid (see core/security.py).
Two backends share the same interface: an in-memory one for tests and local
runs, and a SQL one backed by the `sessions` table.
"""
from __future__ import annotations

import json
import secrets
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from portal.models.web_session import WebSession


def new_sid() -> str:
    return secrets.token_urlsafe(32)


class SessionStore:
    def __init__(self, ttl_minutes: int):
        self.ttl = timedelta(minutes=ttl_minutes)

    def _expiry(self) -> datetime:
        return datetime.utcnow() + self.ttl

    def create(self, data: dict) -> str:
        raise NotImplementedError

    def read(self, sid: str) -> Optional[dict]:
        raise NotImplementedError

    def write(self, sid: str, data: dict) -> None:
        raise NotImplementedError

    def touch(self, sid: str) -> None:
        """Push the expiry forward by a full TTL (rolling sessions)."""
        raise NotImplementedError

    def destroy(self, sid: str) -> None:
        raise NotImplementedError

    def purge_expired(self) -> int:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    def __init__(self, ttl_minutes: int):
        super().__init__(ttl_minutes)
        self._items: dict[str, tuple[dict, datetime]] = {}
        self._lock = threading.Lock()

    def create(self, data: dict) -> str:
        sid = new_sid()
        with self._lock:
            self._items[sid] = (dict(data), self._expiry())
        return sid

    def read(self, sid: str) -> Optional[dict]:
        with self._lock:
            item = self._items.get(sid)
            if item is None:
                return None
            data, expire = item
            if expire <= datetime.utcnow():
                del self._items[sid]
                return None
            return dict(data)

    def write(self, sid: str, data: dict) -> None:
        with self._lock:
            if sid in self._items:
                _, expire = self._items[sid]
                self._items[sid] = (dict(data), expire)

    def touch(self, sid: str) -> None:
        with self._lock:
            if sid in self._items:
                data, _ = self._items[sid]
                self._items[sid] = (data, self._expiry())

    def destroy(self, sid: str) -> None:
        with self._lock:
            self._items.pop(sid, None)

    def purge_expired(self) -> int:
        now = datetime.utcnow()
        with self._lock:
            stale = [sid for sid, (_, expire) in self._items.items() if expire <= now]
            for sid in stale:
                del self._items[sid]
        return len(stale)


class SqlSessionStore(SessionStore):
    """Sessions persisted in the `sessions` table, one short DB session per call."""

    def __init__(self, session_factory: Callable[[], Session], ttl_minutes: int):
        super().__init__(ttl_minutes)
        self.session_factory = session_factory

    def create(self, data: dict) -> str:
        sid = new_sid()
        db = self.session_factory()
        try:
            db.add(WebSession(sid=sid, sess=json.dumps(data), expire=self._expiry()))
            db.commit()
        finally:
            db.close()
        return sid

    def read(self, sid: str) -> Optional[dict]:
        db = self.session_factory()
        try:
            row = db.get(WebSession, sid)
            if row is None:
                return None
            if row.expire <= datetime.utcnow():
                db.delete(row)
                db.commit()
                return None
            return json.loads(row.sess)
        finally:
            db.close()

    def write(self, sid: str, data: dict) -> None:
        db = self.session_factory()
        try:
            row = db.get(WebSession, sid)
            if row is None:
                return
            row.sess = json.dumps(data)
            db.commit()
        finally:
            db.close()

    def touch(self, sid: str) -> None:
        db = self.session_factory()
        try:
            row = db.get(WebSession, sid)
            if row is None:
                return
            row.expire = self._expiry()
            db.commit()
        finally:
            db.close()

    def destroy(self, sid: str) -> None:
        db = self.session_factory()
        try:
            db.query(WebSession).filter(WebSession.sid == sid).delete()
            db.commit()
        finally:
            db.close()

    def purge_expired(self) -> int:
        db = self.session_factory()
        try:
            n = (
                db.query(WebSession)
                .filter(WebSession.expire <= datetime.utcnow())
                .delete()
            )
            db.commit()
            return n
        finally:
            db.close()


def build_session_store(backend: str, session_factory, ttl_minutes: int) -> SessionStore:
    if backend == "memory":
        return MemorySessionStore(ttl_minutes)
    if backend == "sql":
        return SqlSessionStore(session_factory, ttl_minutes)
    raise ValueError(f"Unknown session backend: {backend}")
