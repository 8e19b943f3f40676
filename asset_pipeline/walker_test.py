import unittest
from unittest.mock import MagicMock, patch

from asset_pipeline.walker import walk
from mirror_backend.remote_store import InMemoryRemoteStoreClient
from shared.errors import TransientFetchError
from shared.types import RemoteItem, RemotePage


def _items(count, folder="Templates/Holiday"):
    return [
        RemoteItem(
            id=f"{folder}/img{i}",
            url=f"https://cdn.test/{folder}/img{i}.png",
            width=100 + i,
            height=50,
            format="png",
        )
        for i in range(count)
    ]


class WalkerTest(unittest.TestCase):
    def test_walks_all_pages(self):
        client = InMemoryRemoteStoreClient(items=_items(7))
        result = walk(client, "Templates/", page_size=3)

        self.assertFalse(result.truncated)
        self.assertIsNone(result.error)
        self.assertEqual(result.pages, 3)
        self.assertEqual(len(result.assets), 7)
        self.assertEqual(result.assets[0].folder_path, "Templates/Holiday")
        self.assertEqual(result.assets[0].external_id, "Templates/Holiday/img0")

    def test_only_lists_prefix(self):
        client = InMemoryRemoteStoreClient(
            items=_items(2) + _items(3, folder="Stickers/Animals")
        )
        result = walk(client, "Stickers/", page_size=10)
        self.assertEqual(len(result.assets), 3)

    def test_failure_returns_pages_before_it(self):
        client = InMemoryRemoteStoreClient(items=_items(9), fail_on_calls={3})
        result = walk(client, "Templates/", page_size=3)

        self.assertTrue(result.truncated)
        self.assertIn("Simulated failure", result.error)
        self.assertEqual(result.pages, 2)
        self.assertEqual(
            [asset.external_id for asset in result.assets],
            [item.id for item in _items(6)],
        )

    def test_failure_on_first_page_returns_empty(self):
        client = InMemoryRemoteStoreClient(items=_items(2), fail_on_calls={1})
        result = walk(client, "Templates/")
        self.assertTrue(result.truncated)
        self.assertEqual(result.assets, [])

    def test_page_limit_truncates(self):
        client = InMemoryRemoteStoreClient(items=_items(10))
        result = walk(client, "Templates/", page_size=2, max_pages=2)
        self.assertTrue(result.truncated)
        self.assertEqual(len(result.assets), 4)

    def test_page_limit_not_hit_when_listing_ends(self):
        client = InMemoryRemoteStoreClient(items=_items(4))
        result = walk(client, "Templates/", page_size=2, max_pages=2)
        self.assertFalse(result.truncated)
        self.assertEqual(len(result.assets), 4)

    def test_repeated_cursor_stops_walk(self):
        client = MagicMock()
        client.list_page.return_value = RemotePage(items=_items(1), next_cursor="same")
        result = walk(client, "Templates/")
        self.assertTrue(result.truncated)
        self.assertEqual(client.list_page.call_count, 2)

    @patch("asset_pipeline.walker.time")
    def test_deadline_truncates(self, mock_time):
        mock_time.monotonic.side_effect = [0.0, 1.0, 20.0]
        client = InMemoryRemoteStoreClient(items=_items(10))
        result = walk(client, "Templates/", page_size=2, deadline_seconds=10)
        self.assertTrue(result.truncated)
        self.assertEqual(result.pages, 1)

    def test_non_transient_errors_propagate(self):
        client = MagicMock()
        client.list_page.side_effect = RuntimeError("boom")
        with self.assertRaises(RuntimeError):
            walk(client, "Templates/")

    def test_identifier_without_separator_is_root(self):
        client = MagicMock()
        client.list_page.return_value = RemotePage(
            items=[RemoteItem(id="loose", url="https://cdn.test/loose.png")]
        )
        result = walk(client, "")
        self.assertEqual(result.assets[0].folder_path, "root")


if __name__ == "__main__":
    unittest.main()
