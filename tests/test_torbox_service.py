import unittest

import httpx

from torbox_resolver.exceptions import AccessDeniedError, BadTokenError, NotFoundError
from torbox_stub import TorboxStub, ok, error

HASH_A = "a" * 40
HASH_B = "b" * 40


class TestTorboxService(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.stub = TorboxStub()
        self.service = self.stub.service()

    async def asyncTearDown(self):
        await self.service.close()

    async def test_check_cached_repeats_hash_params(self):
        self.stub.on("GET", "/torrents/checkcached", ok({HASH_A: {"files": [{"name": "movie.mkv"}]}}))

        result = await self.service.check_cached("key123", [HASH_A, HASH_B])

        self.assertIn(HASH_A, result)
        request = self.stub.calls("GET", "/torrents/checkcached")[0]
        self.assertEqual(request.url.params.get_list("hash"), [HASH_A, HASH_B])
        self.assertEqual(request.url.params["format"], "object")
        self.assertEqual(request.url.params["list_files"], "true")
        self.assertEqual(request.headers["Authorization"], "Bearer key123")

    async def test_check_cached_non_object_answer_is_empty(self):
        self.stub.on("GET", "/torrents/checkcached", ok(None))
        self.assertEqual(await self.service.check_cached("key", [HASH_A]), {})

    async def test_create_torrent_returns_id(self):
        self.stub.on("POST", "/torrents/createtorrent", ok({"id": 42, "hash": HASH_A}))

        torrent_id = await self.service.create_torrent("key", f"magnet:?xt=urn:btih:{HASH_A}")

        self.assertEqual(torrent_id, 42)
        request = self.stub.calls("POST", "/torrents/createtorrent")[0]
        self.assertIn(b'"magnet_link"', request.content)
        self.assertEqual(request.headers["Authorization"], "Bearer key")

    async def test_create_torrent_uses_create_timeout(self):
        self.stub.on("POST", "/torrents/createtorrent", ok({"id": 42}))

        await self.service.create_torrent("key", "magnet:?xt=urn:btih:x")

        timeout = self.stub.requests[0].extensions["timeout"]
        self.assertEqual(timeout["read"], 15.0)
        self.assertEqual(timeout["connect"], 15.0)

    async def test_reads_use_read_timeout(self):
        self.stub.on("GET", "/torrents/mylist", ok([]))
        self.stub.on("GET", "/torrents/checkcached", ok({}))
        self.stub.on("GET", "/torrents/requestdl", ok({"download": "https://cdn/x"}))

        await self.service.list_torrents("key")
        await self.service.check_cached("key", [HASH_A])
        await self.service.request_download_link("key", 1, 1)

        for request in self.stub.requests:
            with self.subTest(endpoint=request.url.path):
                self.assertEqual(request.extensions["timeout"]["read"], 10.0)

    async def test_create_torrent_tolerates_duplicate_statuses(self):
        for status in (400, 409):
            with self.subTest(status=status):
                self.stub.on("POST", "/torrents/createtorrent", error(status, "already exists"))
                self.assertIsNone(await self.service.create_torrent("key", "magnet:?xt=urn:btih:x"))

    async def test_create_torrent_auth_failure(self):
        self.stub.on("POST", "/torrents/createtorrent", error(401, "BAD_TOKEN"))
        with self.assertRaises(BadTokenError):
            await self.service.create_torrent("key", "magnet:?xt=urn:btih:x")

    async def test_get_torrent_unwraps_list(self):
        self.stub.on("GET", "/torrents/mylist", ok([{"id": 7, "hash": HASH_A.upper(), "files": []}]))

        torrent = await self.service.get_torrent("key", 7)

        self.assertEqual(torrent.id, 7)
        self.assertEqual(torrent.hash, HASH_A)
        self.assertEqual(self.stub.requests[0].url.params["id"], "7")

    async def test_list_torrents_without_data(self):
        self.stub.on("GET", "/torrents/mylist", ok(None))
        self.assertEqual(await self.service.list_torrents("key"), [])

    async def test_request_link_uses_token_param(self):
        self.stub.on("GET", "/torrents/requestdl", ok({"download": "https://cdn/x"}))

        link = await self.service.request_download_link("key", 42, 3, "10.0.0.1")

        self.assertEqual(link, "https://cdn/x")
        request = self.stub.calls("GET", "/torrents/requestdl")[0]
        self.assertNotIn("Authorization", request.headers)
        self.assertEqual(request.url.params["token"], "key")
        self.assertEqual(request.url.params["torrent_id"], "42")
        self.assertEqual(request.url.params["file_id"], "3")
        self.assertEqual(request.url.params["redirect"], "false")
        self.assertEqual(request.url.params["user_ip"], "10.0.0.1")

    async def test_request_link_without_ip(self):
        self.stub.on("GET", "/torrents/requestdl", ok({"download": "https://cdn/x"}))
        await self.service.request_download_link("key", 42, 3)
        self.assertNotIn("user_ip", self.stub.requests[0].url.params)

    async def test_request_link_url_fallback(self):
        self.stub.on("GET", "/torrents/requestdl", ok({"url": "https://cdn/fallback"}))
        self.assertEqual(await self.service.request_download_link("key", 1, 1), "https://cdn/fallback")

    async def test_request_link_missing(self):
        self.stub.on("GET", "/torrents/requestdl", ok({}))
        with self.assertRaises(NotFoundError):
            await self.service.request_download_link("key", 1, 1)

    async def test_request_link_plan_restriction(self):
        self.stub.on("GET", "/torrents/requestdl", error(402, "PLAN_RESTRICTED_FEATURE"))
        with self.assertRaises(AccessDeniedError):
            await self.service.request_download_link("key", 1, 1)

    async def test_server_error_propagates_unchanged(self):
        self.stub.on("GET", "/torrents/mylist", error(500))
        with self.assertRaises(httpx.HTTPStatusError):
            await self.service.list_torrents("key")


if __name__ == '__main__':
    unittest.main()
