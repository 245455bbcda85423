"""
Unit tests for PathLockRegistry
"""

import threading
import time

from keydrop.domain.file_storage import PathLockRegistry


class TestPathLockRegistry:
    """Test per-name locking."""

    def test_lock_is_dropped_after_release(self):
        registry = PathLockRegistry()

        with registry.hold("a.txt"):
            assert len(registry) == 1

        assert len(registry) == 0

    def test_lock_is_released_on_exception(self):
        registry = PathLockRegistry()

        try:
            with registry.hold("a.txt"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert len(registry) == 0
        with registry.hold("a.txt"):
            pass

    def test_same_name_is_serialized(self):
        registry = PathLockRegistry()
        active = []
        overlaps = []

        def worker():
            with registry.hold("shared.txt"):
                active.append(1)
                if len(active) > 1:
                    overlaps.append(1)
                time.sleep(0.01)
                active.pop()

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert overlaps == []
        assert len(registry) == 0

    def test_different_names_do_not_block(self):
        registry = PathLockRegistry()
        entered = threading.Event()

        def worker():
            with registry.hold("b.txt"):
                entered.set()

        with registry.hold("a.txt"):
            t = threading.Thread(target=worker)
            t.start()
            assert entered.wait(timeout=2)
            t.join()
