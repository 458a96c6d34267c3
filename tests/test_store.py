import threading
import unittest

from cpauth.store import ChallengeSession, ChallengeStore, UserRecord, UserRegistry


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _session(auth_id: str, expires_at: float, username: str = "alice") -> ChallengeSession:
    return ChallengeSession(auth_id=auth_id, username=username, r1=2, r2=3, c=5, expires_at=expires_at)


class TestUserRegistry(unittest.TestCase):
    def test_put_overwrites(self) -> None:
        registry = UserRegistry()
        registry.put(UserRecord("alice", 2, 3))
        registry.put(UserRecord("alice", 4, 5))
        self.assertEqual(registry.get("alice"), UserRecord("alice", 4, 5))
        self.assertEqual(len(registry), 1)
        self.assertIn("alice", registry)
        self.assertIsNone(registry.get("bob"))

    def test_instances_are_isolated(self) -> None:
        first, second = UserRegistry(), UserRegistry()
        first.put(UserRecord("alice", 2, 3))
        self.assertNotIn("alice", second)


class TestChallengeStore(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.store = ChallengeStore(ttl=30, max_pending=3, clock=self.clock)

    def test_take_is_single_use(self) -> None:
        self.assertTrue(self.store.add(_session("a", self.store.deadline())))
        self.assertIsNotNone(self.store.take("a"))
        self.assertIsNone(self.store.take("a"))
        self.assertNotIn("a", self.store)

    def test_duplicate_auth_id_refused(self) -> None:
        self.assertTrue(self.store.add(_session("a", self.store.deadline())))
        self.assertFalse(self.store.add(_session("a", self.store.deadline(), username="bob")))
        self.assertEqual(self.store.take("a").username, "alice")

    def test_expired_session_not_returned(self) -> None:
        self.store.add(_session("a", self.store.deadline()))
        self.clock.now += 30
        self.assertIsNone(self.store.take("a"))
        self.assertEqual(len(self.store), 0)

    def test_purge_expired(self) -> None:
        self.store.add(_session("old", self.store.deadline()))
        self.clock.now += 20
        self.store.add(_session("new", self.store.deadline()))
        self.clock.now += 15
        self.assertEqual(self.store.purge_expired(), 1)
        self.assertNotIn("old", self.store)
        self.assertIn("new", self.store)

    def test_full_store_purges_on_add(self) -> None:
        for auth_id in ("a", "b", "c"):
            self.store.add(_session(auth_id, self.store.deadline()))
        self.clock.now += 31
        self.store.add(_session("d", self.store.deadline()))
        self.assertEqual(len(self.store), 1)
        self.assertIn("d", self.store)

    def test_invalid_ttl(self) -> None:
        with self.assertRaises(ValueError):
            ChallengeStore(ttl=0)

    def test_concurrent_take_yields_one_winner(self) -> None:
        store = ChallengeStore(ttl=30)
        store.add(_session("shared", store.deadline()))
        results = []
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            results.append(store.take("shared"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(sum(1 for result in results if result is not None), 1)


if __name__ == "__main__":
    unittest.main()
