import threading
import unittest

from mirror_backend.db import InMemoryDbClient
from shared.types import AssetFilter, AssetRecord


def _record(name, category="Holiday", width=100):
    return AssetRecord(
        name=name,
        category=category,
        image_url=f"https://cdn.test/{name}.png",
        width=width,
        height=100,
        format="png",
    )


class InMemoryAssetRepositoryTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.repository = self.db.repository("templates")

    def test_upsert_keeps_tags_and_created_at(self):
        self.repository.bulk_upsert([_record("a", width=1)])
        self.repository.records["a"].tags = ["featured"]
        created_at = self.repository.records["a"].created_at

        self.repository.bulk_upsert([_record("a", category="Winter", width=2)])

        (record,) = self.repository.find()
        self.assertEqual(record.category, "Winter")
        self.assertEqual(record.width, 2)
        self.assertEqual(record.tags, ["featured"])
        self.assertEqual(record.created_at, created_at)

    def test_find_returns_copies(self):
        self.repository.bulk_upsert([_record("a")])
        self.repository.find()[0].tags.append("mutated")
        self.assertEqual(self.repository.find()[0].tags, [])

    def test_reset(self):
        self.repository.bulk_upsert([_record("a")])
        self.db.reset()
        self.assertEqual(self.db.repository("templates").find(), [])

    def test_concurrent_upserts_and_finds(self):
        writers = 4
        per_writer = 300
        barrier = threading.Barrier(writers + 2)
        errors = []

        def write(offset):
            barrier.wait()
            try:
                for i in range(per_writer):
                    self.repository.bulk_upsert([_record(f"{offset}-{i}")])
            except Exception as exc:
                errors.append(exc)

        def read():
            barrier.wait()
            try:
                for _ in range(per_writer):
                    self.repository.find(AssetFilter(category="Holiday"))
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=write, args=(n,)) for n in range(writers)]
        threads += [threading.Thread(target=read) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(self.repository.find()), writers * per_writer)

    def test_repository_is_shared_across_threads(self):
        seen = []
        threads = [
            threading.Thread(target=lambda: seen.append(self.db.repository("stickers")))
            for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(len({id(repository) for repository in seen}), 1)


if __name__ == "__main__":
    unittest.main()
