"""Cart snapshot persistence backends.

Every backend stores the whole cart as one JSON array and rewrites it on
each save. ``load()`` returns None when nothing was stored yet and raises
CorruptCartSnapshot when the stored payload cannot be decoded.
"""
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Protocol

import httpx
from upstash_redis import Redis
from upstash_redis.errors import UpstashError

from storefront.errors import CartStorageError, ERROR_CART_STORAGE
from storefront.logging import get_logger
from .models import CartLineItem, dump_snapshot, load_snapshot

logger = get_logger(__name__)


class CartStorage(Protocol):
    def load(self) -> Optional[List[CartLineItem]]:
        ...

    def save(self, items: List[CartLineItem]) -> None:
        ...


class InMemoryCartStorage:
    """Keeps the serialized snapshot in process memory."""

    def __init__(self, raw: Optional[str] = None):
        self.raw = raw

    def load(self) -> Optional[List[CartLineItem]]:
        if self.raw is None:
            return None
        return load_snapshot(self.raw)

    def save(self, items: List[CartLineItem]) -> None:
        self.raw = dump_snapshot(items)


class JsonFileCartStorage:
    """Stores the snapshot in a local JSON file.

    Writes go to a temp file in the same directory and are renamed over
    the target, so the file always holds a complete snapshot.
    """

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Optional[List[CartLineItem]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CartStorageError(f"{ERROR_CART_STORAGE}: {e}") from e
        return load_snapshot(raw)

    def save(self, items: List[CartLineItem]) -> None:
        payload = dump_snapshot(items)
        directory = self.path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=directory, prefix=f".{self.path.name}.", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CartStorageError(f"{ERROR_CART_STORAGE}: {e}") from e


class RedisCartStorage:
    """Stores the snapshot under one Upstash Redis key."""

    def __init__(self, redis: Redis, key: str, ttl: Optional[int] = None):
        self.redis = redis
        self.key = key
        self.ttl = ttl

    def load(self) -> Optional[List[CartLineItem]]:
        try:
            raw = self.redis.get(self.key)
        except (UpstashError, httpx.HTTPError) as e:
            raise CartStorageError(f"{ERROR_CART_STORAGE}: {e}") from e
        if raw is None:
            return None
        return load_snapshot(raw)

    def save(self, items: List[CartLineItem]) -> None:
        try:
            if self.ttl:
                self.redis.set(self.key, dump_snapshot(items), ex=self.ttl)
            else:
                self.redis.set(self.key, dump_snapshot(items))
        except (UpstashError, httpx.HTTPError) as e:
            raise CartStorageError(f"{ERROR_CART_STORAGE}: {e}") from e
