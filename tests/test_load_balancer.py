"""Tests for api_gateway.app.services.load_balancer: round-robin dispatch table."""

import threading
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import List

import pytest

from api_gateway.app.core.errors import NoBackendsAvailable
from api_gateway.app.services.load_balancer import LoadBalancer


def _urls(lb: LoadBalancer, service: str, times: int) -> List[str]:
    return [lb.resolve(service)["url"] for _ in range(times)]


class TestRoundRobin:
    def test_users_scenario(self) -> None:
        lb = LoadBalancer({"users": ["http://a", "http://b", "http://c"]})
        assert _urls(lb, "users", 4) == ["http://a", "http://b", "http://c", "http://a"]

    def test_cycle_returns_each_backend_once(self) -> None:
        backends = [f"http://node-{i}" for i in range(7)]
        lb = LoadBalancer({"svc": backends})
        first = _urls(lb, "svc", len(backends))
        assert first == backends
        assert lb.resolve("svc") == {"url": backends[0]}

    def test_services_rotate_independently(self) -> None:
        lb = LoadBalancer({"a": ["http://a1", "http://a2"], "b": ["http://b1", "http://b2"]})
        assert lb.resolve("a")["url"] == "http://a1"
        assert lb.resolve("b")["url"] == "http://b1"
        assert lb.resolve("a")["url"] == "http://a2"
        assert lb.resolve("b")["url"] == "http://b2"

    def test_dispatched_counter(self) -> None:
        lb = LoadBalancer({"users": ["http://a", "http://b"]})
        _urls(lb, "users", 5)
        snapshot = lb.get_service("users")
        assert snapshot["dispatched"] == 5
        assert snapshot["cursor"] == 1


class TestFallback:
    def test_unregistered_name_is_direct_url(self) -> None:
        lb = LoadBalancer()
        assert lb.resolve("payments") == {"url": "payments"}

    def test_fallback_does_not_register(self) -> None:
        lb = LoadBalancer()
        lb.resolve("http://direct:9000")
        assert "http://direct:9000" not in lb
        assert lb.list_services() == []

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            LoadBalancer().resolve("")


class TestEmptyList:
    def test_registered_empty_list_raises(self) -> None:
        lb = LoadBalancer({"billing": []})
        with pytest.raises(NoBackendsAvailable) as exc_info:
            lb.resolve("billing")
        assert exc_info.value.service == "billing"
        assert exc_info.value.status_code == 503

    def test_removing_last_backend_empties_service(self) -> None:
        lb = LoadBalancer({"users": ["http://a"]})
        lb.remove_target("users", "http://a")
        with pytest.raises(NoBackendsAvailable):
            lb.resolve("users")

    def test_empty_list_recovers_after_add(self) -> None:
        lb = LoadBalancer({"billing": []})
        lb.add_target("billing", "http://bill")
        assert lb.resolve("billing") == {"url": "http://bill"}


class TestAddTarget:
    def test_orders_scenario(self) -> None:
        lb = LoadBalancer()
        lb.add_target("orders", "http://x")
        lb.add_target("orders", "http://x")
        assert _urls(lb, "orders", 3) == ["http://x", "http://x", "http://x"]

    @pytest.mark.parametrize("already_resolved", [0, 1, 2, 3, 5])
    def test_new_target_appears_within_n_plus_one(self, already_resolved: int) -> None:
        backends = ["http://a", "http://b", "http://c"]
        lb = LoadBalancer({"users": backends})
        _urls(lb, "users", already_resolved)
        lb.add_target("users", "http://new")
        assert "http://new" in _urls(lb, "users", len(backends) + 1)

    def test_add_does_not_reset_cursor(self) -> None:
        lb = LoadBalancer({"users": ["http://a", "http://b"]})
        lb.resolve("users")
        lb.add_target("users", "http://c")
        assert _urls(lb, "users", 3) == ["http://b", "http://c", "http://a"]

    def test_empty_url_rejected(self) -> None:
        with pytest.raises(ValueError):
            LoadBalancer().add_target("users", "")


class TestRegistryMutation:
    def test_register_replaces_and_restarts(self) -> None:
        lb = LoadBalancer({"users": ["http://a", "http://b"]})
        lb.resolve("users")
        lb.register("users", ["http://x", "http://y"])
        assert _urls(lb, "users", 3) == ["http://x", "http://y", "http://x"]

    def test_shrinking_list_keeps_cursor_in_bounds(self) -> None:
        lb = LoadBalancer({"users": ["http://a", "http://b", "http://c"]})
        _urls(lb, "users", 2)  # cursor now points at c
        lb.remove_target("users", "http://c")
        lb.remove_target("users", "http://b")
        assert lb.get_service("users")["cursor"] == 0
        assert _urls(lb, "users", 2) == ["http://a", "http://a"]

    def test_remove_unknown_target(self) -> None:
        lb = LoadBalancer({"users": ["http://a"]})
        with pytest.raises(ValueError, match="not registered"):
            lb.remove_target("users", "http://zzz")
        with pytest.raises(ValueError, match="not found"):
            lb.remove_target("nobody", "http://a")

    def test_remove_service(self) -> None:
        lb = LoadBalancer({"users": ["http://a"]})
        assert lb.remove_service("users") is True
        assert lb.remove_service("users") is False
        assert lb.resolve("users") == {"url": "users"}

    def test_list_services_snapshot_is_a_copy(self) -> None:
        lb = LoadBalancer({"users": ["http://a"]})
        snapshot = lb.list_services()[0]
        snapshot["targets"].append("http://mutated")
        assert lb.get_service("users")["targets"] == ["http://a"]


class TestConcurrency:
    def test_threads_share_rotation_without_skips(self) -> None:
        backends = ["http://a", "http://b", "http://c", "http://d"]
        lb = LoadBalancer({"users": backends})
        calls_per_worker = 500
        workers = 8

        def work(_: int) -> List[str]:
            return _urls(lb, "users", calls_per_worker)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = [url for chunk in pool.map(work, range(workers)) for url in chunk]

        counts = Counter(results)
        expected = workers * calls_per_worker // len(backends)
        assert counts == {url: expected for url in backends}
        assert lb.get_service("users")["dispatched"] == workers * calls_per_worker

    def test_add_target_survives_concurrent_service_removal(self) -> None:
        lb = LoadBalancer({"users": ["http://old"]})
        stale = lb._buckets["users"]
        stale.lock.acquire()
        adder = threading.Thread(target=lb.add_target, args=("users", "http://new"))
        adder.start()
        # Let the adder pick up the stale bucket and block on its lock.
        time.sleep(0.05)
        # A removal that won the race drops the bucket before the append.
        del lb._buckets["users"]
        stale.lock.release()
        adder.join(timeout=5)

        assert not adder.is_alive()
        assert lb.get_service("users")["targets"] == ["http://new"]
        assert stale.targets == ["http://old"]

