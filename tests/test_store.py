"""Tests for the URL store."""

import random
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from shortkey.lib.keygen import KeyGenerator, KeySpaceExhaustedError
from shortkey.lib.store import URLStore


class TestURLStore:
    """Test URL store."""

    def test_register_then_resolve(self, store, sample_urls):
        for url in sample_urls:
            key = store.register(url)
            assert store.resolve(key) == url

        assert len(store) == len(sample_urls)

    def test_register_returns_generated_key(self, store):
        key = store.register("https://example.com")

        assert KeyGenerator.is_valid_format(key, length=6)
        assert store.key_generator.is_issued(key)

    def test_same_url_gets_distinct_keys(self, store):
        first = store.register("https://example.com")
        second = store.register("https://example.com")

        assert first != second
        assert store.resolve(first) == store.resolve(second) == "https://example.com"

    def test_resolve_unknown_key(self, store):
        assert store.resolve("doesnotexist") is None
        assert store.resolve("") is None

    def test_empty_value_is_not_absence(self, store):
        """Only a missing key is not-found."""
        key = store.register("")

        assert store.resolve(key) == ""

    def test_default_generator(self):
        store = URLStore()

        key = store.register("https://example.com")
        assert len(key) == 6

    def test_stores_are_independent(self):
        first = URLStore(KeyGenerator(rng=random.Random(5)))
        second = URLStore(KeyGenerator(rng=random.Random(6)))

        key = first.register("https://example.com")

        assert first.resolve(key) == "https://example.com"
        assert second.resolve(key) is None
        assert len(second) == 0

    def test_exhaustion_leaves_store_unchanged(self):
        class OneKeyRandom(random.Random):
            def choices(self, population, weights=None, *, cum_weights=None, k=1):
                return ["q"] * k

        store = URLStore(KeyGenerator(length=4, max_attempts=3, rng=OneKeyRandom()))
        assert store.register("https://example.com/1") == "qqqq"

        with pytest.raises(KeySpaceExhaustedError):
            store.register("https://example.com/2")

        assert len(store) == 1
        assert store.resolve("qqqq") == "https://example.com/1"


class TestURLStoreConcurrency:
    """The lock keeps keys unique and writes visible across threads."""

    def test_concurrent_register_unique_keys(self):
        # Two-character keys make collisions frequent.
        store = URLStore(KeyGenerator(length=2, max_attempts=10_000))
        threads = 8
        per_thread = 100
        barrier = threading.Barrier(threads)

        def worker(worker_id):
            barrier.wait()
            return [
                (store.register(f"https://example.com/{worker_id}/{i}"), f"https://example.com/{worker_id}/{i}")
                for i in range(per_thread)
            ]

        with ThreadPoolExecutor(max_workers=threads) as pool:
            results = [pair for batch in pool.map(worker, range(threads)) for pair in batch]

        keys = [key for key, _ in results]
        assert len(keys) == threads * per_thread
        assert len(set(keys)) == len(keys), "Keys must be unique under concurrency"
        assert len(store) == len(keys)

        for key, url in results:
            assert store.resolve(key) == url

    def test_concurrent_register_and_resolve(self, store):
        known = store.register("https://example.com/known")
        errors = []

        def reader():
            for _ in range(200):
                if store.resolve(known) != "https://example.com/known":
                    errors.append("lost entry")

        def writer(n):
            for i in range(200):
                store.register(f"https://example.com/{n}/{i}")

        workers = [threading.Thread(target=reader) for _ in range(4)]
        workers += [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in workers:
            t.start()
        for t in workers:
            t.join()

        assert errors == []
        assert len(store) == 1 + 4 * 200
