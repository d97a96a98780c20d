from typing import Dict, Any, Iterable
import logging

from app.core.cache import cache
from app.utils import timeutils

logger = logging.getLogger(__name__)

def course_tag(course_id: int) -> str:
    return f"course:{course_id}"

def quiz_tag(quiz_id: int) -> str:
    return f"quiz:{quiz_id}"

def learner_tag(learner_id: int) -> str:
    return f"learner:{learner_id}"

class CacheService:

    @staticmethod
    def _invalidate_tags(tags: Iterable[str]):
        tags = list(tags)
        try:
            deleted = cache.invalidate_tags(tags)
            logger.info(f"Invalidated {deleted} cache entries for tags {tags}")
        except Exception as e:
            logger.error(f"Cache invalidation failed for tags {tags}: {e}")

    @staticmethod
    def invalidate_course_cache(course_id: int):
        CacheService._invalidate_tags([course_tag(course_id)])

    @staticmethod
    def invalidate_quiz_cache(quiz_id: int):
        CacheService._invalidate_tags([quiz_tag(quiz_id)])

    @staticmethod
    def invalidate_enrollment_cache(course_id: int, learner_id: int):
        CacheService._invalidate_tags([course_tag(course_id), learner_tag(learner_id)])

    @staticmethod
    def invalidate_attempt_cache(quiz_id: int, student_id: int):
        CacheService._invalidate_tags([quiz_tag(quiz_id), learner_tag(student_id)])

    @staticmethod
    def get_cache_stats() -> Dict[str, Any]:
        try:
            stats = {
                "backend": "Redis" if hasattr(cache.backend, 'redis') else "Memory",
                "timestamp": timeutils.utcnow().isoformat()
            }

            if hasattr(cache.backend, 'redis'):
                info = cache.backend.redis.info()
                stats.update({
                    "redis_version": info.get("redis_version"),
                    "used_memory": info.get("used_memory_human"),
                    "keyspace_hits": info.get("keyspace_hits", 0),
                    "keyspace_misses": info.get("keyspace_misses", 0),
                })
            else:
                stats["memory_cache_size"] = len(cache.backend._cache)

            return stats
        except Exception as e:
            logger.error(f"Failed to get cache stats: {e}")
            return {"error": str(e)}

    @staticmethod
    def health_check() -> bool:
        try:
            test_key = "health_check_test"
            test_value = {"timestamp": timeutils.utcnow().isoformat()}

            cache.backend.set(test_key, test_value, ttl=10)
            retrieved = cache.backend.get(test_key)
            cache.backend.delete(test_key)

            return retrieved == test_value
        except Exception as e:
            logger.error(f"Cache health check failed: {e}")
            return False

cache_service = CacheService()
