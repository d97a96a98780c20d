import json
import threading
import hashlib
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional, Dict, Set
import time
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

class CacheBackend(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    def delete(self, *keys: str) -> int:
        pass

    @abstractmethod
    def clear(self) -> bool:
        pass

    @abstractmethod
    def tag(self, tag: str, key: str) -> None:
        pass

    @abstractmethod
    def pop_tag(self, tag: str) -> Set[str]:
        pass

class MemoryCacheBackend(CacheBackend):
    def __init__(self):
        self._cache: Dict[str, Dict] = {}
        self._tags: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            self._cleanup_expired()
            item = self._cache.get(key)
            if item and (item.get("expiry", 0) == 0 or time.time() < item["expiry"]):
                return item["value"]
            elif key in self._cache:
                del self._cache[key]
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        if ttl is None:
            ttl = settings.CACHE_TTL
        with self._lock:
            expiry = time.time() + ttl if ttl > 0 else 0
            self._cache[key] = {
                "value": value,
                "expiry": expiry,
                "created_at": time.time()
            }
            return True

    def delete(self, *keys: str) -> int:
        with self._lock:
            return sum(1 for key in keys if self._cache.pop(key, None) is not None)

    def clear(self) -> bool:
        with self._lock:
            self._cache.clear()
            self._tags.clear()
            return True

    def tag(self, tag: str, key: str) -> None:
        with self._lock:
            self._tags.setdefault(tag, set()).add(key)

    def pop_tag(self, tag: str) -> Set[str]:
        with self._lock:
            return self._tags.pop(tag, set())

    def _cleanup_expired(self):
        current_time = time.time()
        expired_keys = [
            key for key, item in self._cache.items()
            if item.get("expiry", 0) > 0 and current_time >= item["expiry"]
        ]
        for key in expired_keys:
            del self._cache[key]

class RedisCacheBackend(CacheBackend):
    TAG_PREFIX = "tag:"

    def __init__(self, redis_url: str):
        import redis
        self.redis = redis.from_url(redis_url, decode_responses=True)

    def _serialize(self, value: Any) -> str:
        return json.dumps(value, default=str)

    def _deserialize(self, value: str) -> Any:
        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return value

    def get(self, key: str) -> Optional[Any]:
        try:
            value = self.redis.get(key)
            return self._deserialize(value) if value else None
        except Exception as e:
            logger.error(f"Redis GET error for key {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        try:
            serialized = self._serialize(value)
            if ttl is None:
                ttl = settings.CACHE_TTL
            if ttl == 0:
                self.redis.set(key, serialized)
            else:
                self.redis.setex(key, ttl, serialized)
            return True
        except Exception as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return self.redis.delete(*keys)
        except Exception as e:
            logger.error(f"Redis DELETE error for keys {keys}: {e}")
            return 0

    def clear(self) -> bool:
        try:
            self.redis.flushdb()
            return True
        except Exception as e:
            logger.error(f"Redis CLEAR error: {e}")
            return False

    def tag(self, tag: str, key: str) -> None:
        try:
            self.redis.sadd(f"{self.TAG_PREFIX}{tag}", key)
        except Exception as e:
            logger.error(f"Redis SADD error for tag {tag}: {e}")

    def pop_tag(self, tag: str) -> Set[str]:
        tag_key = f"{self.TAG_PREFIX}{tag}"
        try:
            pipe = self.redis.pipeline()
            pipe.smembers(tag_key)
            pipe.delete(tag_key)
            members, _ = pipe.execute()
            return set(members or ())
        except Exception as e:
            logger.error(f"Redis tag flush error for tag {tag}: {e}")
            return set()

def create_cache_backend() -> CacheBackend:
    if settings.REDIS_URL:
        try:
            logger.info("Initializing Redis cache backend")
            return RedisCacheBackend(settings.REDIS_URL)
        except Exception as e:
            logger.error(f"Redis connection failed: {e}, falling back to memory cache")

    logger.info("Using in-memory cache backend")
    return MemoryCacheBackend()

cache_backend = create_cache_backend()

class CacheManager:
    def __init__(self, backend: CacheBackend):
        self.backend = backend

    def generate_key(self, prefix: str, *args, **kwargs) -> str:
        key_data = f"{prefix}:{':'.join(map(str, args))}"
        if kwargs:
            sorted_kwargs = sorted(kwargs.items())
            key_data += f":{':'.join(f'{k}={v}' for k, v in sorted_kwargs)}"
        return f"{prefix}:{hashlib.md5(key_data.encode()).hexdigest()}"

    def get(self, key: str) -> Optional[Any]:
        if not settings.CACHE_ENABLED:
            return None
        return self.backend.get(key)

    def set(self, key: str, value: Any, ttl: Optional[int] = None, tags: Iterable[str] = ()) -> bool:
        if not settings.CACHE_ENABLED:
            return False
        stored = self.backend.set(key, value, ttl)
        if stored:
            for tag in tags:
                self.backend.tag(tag, key)
        return stored

    def remember(self, key: str, ttl: Optional[int], tags: Iterable[str], loader):
        cached_value = self.get(key)
        if cached_value is not None:
            logger.debug(f"Cache HIT for key: {key}")
            return cached_value
        logger.debug(f"Cache MISS for key: {key}")
        value = loader()
        if value is not None:
            self.set(key, value, ttl=ttl, tags=tags)
        return value

    def delete(self, key: str) -> bool:
        return self.backend.delete(key) > 0

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        deleted = 0
        for tag in tags:
            keys = self.backend.pop_tag(tag)
            if keys:
                deleted += self.backend.delete(*keys)
        return deleted

    def clear(self) -> bool:
        return self.backend.clear()

cache = CacheManager(cache_backend)
