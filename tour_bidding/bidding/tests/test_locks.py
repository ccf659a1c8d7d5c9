import gc
import threading

from django.test import SimpleTestCase

from ..locks import _request_locks, get_request_lock, request_lock


class RequestLockTests(SimpleTestCase):

    def test_same_request_shares_one_lock(self):
        self.assertIs(get_request_lock(41), get_request_lock('41'))

    def test_different_requests_have_different_locks(self):
        self.assertIsNot(get_request_lock(41), get_request_lock(42))

    def test_lock_is_held_inside_block(self):
        with request_lock(43):
            self.assertTrue(get_request_lock(43).locked())
        self.assertFalse(get_request_lock(43).locked())

    def test_concurrent_registry_access_yields_one_lock(self):
        seen = []

        def grab():
            seen.append(get_request_lock(44))

        threads = [threading.Thread(target=grab) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len({id(lock) for lock in seen}), 1)

    def test_released_locks_leave_the_registry(self):
        for tour_request_id in range(100, 110):
            with request_lock(tour_request_id):
                pass
        gc.collect()

        self.assertFalse(any(key in _request_locks for key in range(100, 110)))

    def test_lock_survives_while_held(self):
        lock = get_request_lock(45)
        gc.collect()

        self.assertIs(get_request_lock(45), lock)
