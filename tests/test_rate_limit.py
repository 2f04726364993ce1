import dataclasses
import unittest
from unittest.mock import patch

from starlette.requests import Request

from ats_service.core import rate_limit as rate_limit_module
from ats_service.core.rate_limit import client_key


def _request(forwarded_for: str | None = None) -> Request:
    headers = []
    if forwarded_for is not None:
        headers.append((b"x-forwarded-for", forwarded_for.encode()))
    return Request({"type": "http", "headers": headers, "client": ("10.0.0.1", 5123)})


class ClientKeyTests(unittest.TestCase):
    def _with_trust(self, trusted: bool):
        return patch.object(
            rate_limit_module,
            "settings",
            dataclasses.replace(rate_limit_module.settings, trust_x_forwarded_for=trusted),
        )

    def test_forwarded_header_ignored_by_default(self):
        with self._with_trust(False):
            self.assertEqual(client_key(_request("203.0.113.7")), "10.0.0.1")

    def test_first_forwarded_address_used_behind_trusted_proxy(self):
        with self._with_trust(True):
            self.assertEqual(client_key(_request("203.0.113.7, 10.0.0.1")), "203.0.113.7")

    def test_peer_address_used_without_forwarded_header(self):
        with self._with_trust(True):
            self.assertEqual(client_key(_request()), "10.0.0.1")


if __name__ == "__main__":
    unittest.main()
