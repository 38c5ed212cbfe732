"""
资源键锁测试
"""
import threading
import time

from hotelops.locks import KeyedLock


class TestKeyedLock:

    def test_entry_removed_after_release(self):
        locks = KeyedLock("test")
        with locks.hold(1):
            assert len(locks) == 1
        assert len(locks) == 0

    def test_entry_removed_when_body_raises(self):
        locks = KeyedLock("test")
        try:
            with locks.hold("x"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert len(locks) == 0

    def test_same_key_is_serialized(self):
        """测试同一键的持有者串行执行，全部结束后锁表为空"""
        locks = KeyedLock("test")
        active = []
        overlaps = []
        barrier = threading.Barrier(5)

        def worker():
            barrier.wait()
            with locks.hold("room-1"):
                active.append(1)
                if len(active) > 1:
                    overlaps.append(1)
                time.sleep(0.01)
                active.pop()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert overlaps == []
        assert len(locks) == 0
