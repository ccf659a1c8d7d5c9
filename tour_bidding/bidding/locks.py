"""Per-tour-request mutexes for serializing bid-set mutations in this process."""
import threading
import weakref
from contextlib import contextmanager

# Entries vanish once no caller holds or waits on the lock
_request_locks = weakref.WeakValueDictionary()
_registry_lock = threading.Lock()


def get_request_lock(tour_request_id) -> threading.Lock:
    """Return the single live lock for a tour request, creating it on first use."""
    key = int(tour_request_id)
    with _registry_lock:
        lock = _request_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _request_locks[key] = lock
        return lock


@contextmanager
def request_lock(tour_request_id):
    lock = get_request_lock(tour_request_id)
    with lock:
        yield
