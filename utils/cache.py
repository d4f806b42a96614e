"""
Cache utilities for the quote client.
Provides the process-wide read cache keyed by logical query names.
"""

import time
import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional
from dataclasses import dataclass, field

from .logging_manager import cache_logger, cache_metrics
from .config_manager import config_manager

# 随机名言读取结果的逻辑键
QUOTES_QUERY_KEY = "getQuotes"


@dataclass
class CacheEntry:
    """缓存条目"""
    value: Any
    created_at: float = field(default_factory=time.time)
    ttl: Optional[float] = None  # 生存时间（秒）
    stale: bool = False

    def is_expired(self) -> bool:
        """检查是否过期"""
        if self.ttl is None:
            return False
        return time.time() - self.created_at > self.ttl

    def is_fresh(self) -> bool:
        return not self.stale and not self.is_expired()


class QueryCache:
    """
    读缓存服务

    invalidate 只把条目标记为过时，不会主动重新获取；
    下一次 get 会未命中，由读取路径（fetch）负责重新填充。
    """

    def __init__(self, max_size: int = 100, default_ttl: Optional[float] = None):
        """
        初始化缓存

        Args:
            max_size: 最大缓存条目数
            default_ttl: 默认生存时间（秒），None 表示不过期
        """
        self.max_size = max_size
        self.default_ttl = default_ttl
        self._cache: Dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0
        self._invalidations = 0

    async def get(self, key: str) -> Optional[Any]:
        """获取新鲜的缓存值，过时或过期时返回 None"""
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None or not entry.is_fresh():
                self._misses += 1
                return None

            self._hits += 1
            cache_logger.debug(f"[Cache] Hit: {key}")
            return entry.value

    async def peek(self, key: str) -> Optional[Any]:
        """获取缓存值，不论是否过时"""
        async with self._lock:
            entry = self._cache.get(key)
            return entry.value if entry is not None else None

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        """设置缓存值"""
        async with self._lock:
            if len(self._cache) >= self.max_size and key not in self._cache:
                self._cleanup_expired()
                if len(self._cache) >= self.max_size:
                    self._evict_oldest()

            self._cache[key] = CacheEntry(
                value=value,
                ttl=ttl if ttl is not None else self.default_ttl
            )
            cache_logger.debug(f"[Cache] Set: {key}")
            return True

    def invalidate(self, key: str) -> bool:
        """将条目标记为过时，返回条目是否存在；只改标记，不挂起"""
        self._invalidations += 1
        cache_metrics.increment("invalidations")
        entry = self._cache.get(key)
        if entry is None:
            cache_logger.debug(f"[Cache] Invalidate (no entry): {key}")
            return False

        entry.stale = True
        cache_logger.info(f"[Cache] Invalidated: {key}")
        return True

    async def is_stale(self, key: str) -> bool:
        """条目缺失、过时或过期时视为需要重新获取"""
        async with self._lock:
            entry = self._cache.get(key)
            return entry is None or not entry.is_fresh()

    async def fetch(self, key: str, loader: Callable[[], Awaitable[Any]],
                    ttl: Optional[float] = None) -> Any:
        """读取路径：命中则返回缓存值，否则调用 loader 并重新填充"""
        cached = await self.get(key)
        if cached is not None:
            return cached

        cache_logger.debug(f"[Cache] Miss, loading: {key}")
        value = await loader()
        await self.set(key, value, ttl)
        return value

    async def delete(self, key: str) -> bool:
        """删除缓存值"""
        async with self._lock:
            if key in self._cache:
                del self._cache[key]
                cache_logger.debug(f"[Cache] Delete: {key}")
                return True
            return False

    async def clear(self):
        """清空缓存"""
        async with self._lock:
            self._cache.clear()
            cache_logger.info("[Cache] Cleared all entries")

    async def get_stats(self) -> Dict[str, Any]:
        """获取缓存统计信息"""
        async with self._lock:
            total_entries = len(self._cache)
            stale_entries = sum(1 for entry in self._cache.values() if not entry.is_fresh())
            lookups = self._hits + self._misses

            return {
                'total_entries': total_entries,
                'stale_entries': stale_entries,
                'active_entries': total_entries - stale_entries,
                'max_size': self.max_size,
                'invalidations': self._invalidations,
                'hit_rate': self._hits / lookups if lookups else 0.0
            }

    def _cleanup_expired(self):
        """清理过期条目（调用方持有锁）"""
        expired_keys = [key for key, entry in self._cache.items() if entry.is_expired()]
        for key in expired_keys:
            del self._cache[key]
        if expired_keys:
            cache_logger.debug(f"[Cache] Cleaned up {len(expired_keys)} expired entries")

    def _evict_oldest(self):
        """驱逐最老的条目"""
        if not self._cache:
            return

        oldest_key = min(self._cache.keys(), key=lambda k: self._cache[k].created_at)
        del self._cache[oldest_key]
        cache_logger.debug(f"[Cache] Evicted oldest entry: {oldest_key}")


def create_query_cache() -> QueryCache:
    """按配置创建读缓存"""
    cache_config = config_manager.get_cache_config()
    return QueryCache(max_size=cache_config.max_size, default_ttl=cache_config.default_ttl)


# 全局读缓存实例，所有表单和读取方共享
query_cache = create_query_cache()
