import unittest

from asset_pipeline.query import AssetQueryService
from mirror_backend.db import InMemoryAssetRepository
from shared.errors import NotFoundError, PayloadValidationError
from shared.types import AssetFilter, AssetRecord


class AssetQueryServiceTest(unittest.TestCase):
    def setUp(self):
        self.repository = InMemoryAssetRepository()
        self.repository.bulk_upsert(
            [
                AssetRecord(
                    name="Templates/Winter Fun/a",
                    category="Winter Fun",
                    image_url="https://cdn.test/a.png",
                    width=100,
                    height=100,
                    format="png",
                ),
                AssetRecord(
                    name="Templates/Winter Fun/b",
                    category="Winter Fun",
                    image_url="https://cdn.test/b.jpg",
                    width=200,
                    height=400,
                    format="jpg",
                ),
                AssetRecord(
                    name="Templates/Birthday/c",
                    category="Birthday",
                    image_url="https://cdn.test/c.PNG",
                    width=300,
                    height=150,
                    format="PNG",
                ),
            ]
        )
        self.repository.records["Templates/Winter Fun/a"].tags = ["snow", "blue"]
        self.repository.records["Templates/Birthday/c"].tags = ["cake", "snow"]
        self.service = AssetQueryService(self.repository)

    def _names(self, rows):
        return sorted(row["name"] for row in rows)

    def test_list_all_projects_fields(self):
        rows = self.service.list_all()
        self.assertEqual(len(rows), 3)
        self.assertEqual(
            set(rows[0]), {"name", "category", "imageUrl", "width", "height", "format"}
        )

    def test_list_all_custom_projection(self):
        rows = self.service.list_all(projection=("name",))
        self.assertEqual(rows[0], {"name": "Templates/Winter Fun/a"})

    def test_list_by_category_decodes_url_name(self):
        rows = self.service.list_by_category("Winter_Fun")
        self.assertEqual(
            self._names(rows), ["Templates/Winter Fun/a", "Templates/Winter Fun/b"]
        )
        self.assertNotIn("category", rows[0])

    def test_list_by_category_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.service.list_by_category("Summer")
        self.assertEqual(ctx.exception.extra["category"], "Summer")

    def test_list_by_category_requires_name(self):
        with self.assertRaises(PayloadValidationError):
            self.service.list_by_category("")
        with self.assertRaises(PayloadValidationError):
            self.service.list_by_category("   ")

    def test_search_min_width_is_inclusive_lower_bound(self):
        rows = self.service.search(AssetFilter(min_width=150))
        self.assertEqual(
            self._names(rows), ["Templates/Birthday/c", "Templates/Winter Fun/b"]
        )
        rows = self.service.search(AssetFilter(min_width=200))
        self.assertEqual(len(rows), 2)

    def test_search_format_is_case_insensitive(self):
        rows = self.service.search(AssetFilter(format="png"))
        self.assertEqual(
            self._names(rows), ["Templates/Birthday/c", "Templates/Winter Fun/a"]
        )

    def test_search_filters_are_conjunctive(self):
        rows = self.service.search(AssetFilter(format="png", min_height=120))
        self.assertEqual(self._names(rows), ["Templates/Birthday/c"])

    def test_search_tags_require_superset(self):
        rows = self.service.search(AssetFilter(tags=["snow"]))
        self.assertEqual(
            self._names(rows), ["Templates/Birthday/c", "Templates/Winter Fun/a"]
        )
        rows = self.service.search(AssetFilter(tags=["blue", "snow"]))
        self.assertEqual(self._names(rows), ["Templates/Winter Fun/a"])
        rows = self.service.search(AssetFilter(tags=["snow", "missing"]))
        self.assertEqual(rows, [])

    def test_search_category_accepts_url_name(self):
        rows = self.service.search(AssetFilter(category="Winter_Fun"))
        self.assertEqual(len(rows), 2)
        rows = self.service.search(AssetFilter(category="Winter Fun"))
        self.assertEqual(len(rows), 2)

    def test_search_without_filters_returns_everything(self):
        self.assertEqual(len(self.service.search(AssetFilter())), 3)


if __name__ == "__main__":
    unittest.main()
