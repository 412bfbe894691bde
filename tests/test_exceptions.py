import unittest

import httpx

from torbox_resolver.exceptions import (
    AccessDeniedError,
    BadTokenError,
    FailureKind,
    NotFoundError,
    classify_status,
    failure_kind,
    rethrow_auth,
)


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.torbox.app/v1/api/torrents/mylist")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"status {status}", request=request, response=response)


class TestClassifyStatus(unittest.TestCase):
    def test_bad_token_statuses(self):
        self.assertIs(classify_status(401), BadTokenError)
        self.assertIs(classify_status(403), BadTokenError)

    def test_access_denied_status(self):
        self.assertIs(classify_status(402), AccessDeniedError)

    def test_other_statuses_unclassified(self):
        for status in (None, 400, 404, 409, 429, 500, 503):
            with self.subTest(status=status):
                self.assertIsNone(classify_status(status))


class TestRethrowAuth(unittest.TestCase):
    def test_auth_statuses_raise_taxonomy_errors(self):
        cases = {401: BadTokenError, 403: BadTokenError, 402: AccessDeniedError}
        for status, expected in cases.items():
            with self.subTest(status=status):
                with self.assertRaises(expected):
                    rethrow_auth(_status_error(status))

    def test_other_status_reraised_unchanged(self):
        original = _status_error(500)
        with self.assertRaises(httpx.HTTPStatusError) as ctx:
            rethrow_auth(original)
        self.assertIs(ctx.exception, original)

    def test_network_error_reraised_unchanged(self):
        original = httpx.ConnectError("connection refused")
        with self.assertRaises(httpx.ConnectError) as ctx:
            rethrow_auth(original)
        self.assertIs(ctx.exception, original)


class TestFailureKind(unittest.TestCase):
    def test_kinds(self):
        self.assertEqual(failure_kind(BadTokenError()), FailureKind.BAD_TOKEN)
        self.assertEqual(failure_kind(AccessDeniedError()), FailureKind.ACCESS_DENIED)
        self.assertEqual(failure_kind(NotFoundError()), FailureKind.NOT_FOUND)
        self.assertEqual(failure_kind(httpx.ReadTimeout("slow")), FailureKind.UNEXPECTED)
        self.assertEqual(failure_kind(ValueError("bad json")), FailureKind.UNEXPECTED)


if __name__ == '__main__':
    unittest.main()
