"""
按资源键加锁
同一进程内对同一资源（如某个房间）的“检查-写入”串行执行；
跨进程的互斥由事务内的行锁 (SELECT ... FOR UPDATE) 负责
"""
import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, List


class KeyedLock:
    """
    资源键锁表（线程安全）

    条目按持有者计数，最后一个持有者释放后即移除，锁表大小只取决于当前并发的键数。

    使用方式：
        with room_locks.hold(room_id):
            ...
    """

    def __init__(self, name: str):
        self.name = name
        # key -> [lock, 持有/等待者数量]
        self._locks: Dict[Hashable, List] = {}
        self._registry_lock = threading.Lock()

    def _acquire_entry(self, key: Hashable) -> threading.Lock:
        with self._registry_lock:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[key] = entry
            entry[1] += 1
            return entry[0]

    def _release_entry(self, key: Hashable) -> None:
        with self._registry_lock:
            entry = self._locks.get(key)
            if entry is None:
                return
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._acquire_entry(key)
        try:
            with lock:
                yield
        finally:
            self._release_entry(key)

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)

    def clear(self) -> None:
        """清空锁表（仅用于测试）"""
        with self._registry_lock:
            self._locks.clear()


# 房间预订锁：覆盖“可用性检查 + 插入预订”
room_locks = KeyedLock("room")
