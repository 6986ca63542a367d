"""
Testing secret generation
- random.org is never contacted: requests.get is patched.
"""

import requests

import codebreaker.random_client as random_client
from codebreaker.config import Settings


class FakeResponse:
    def __init__(self, text):
        self.text = text

    def raise_for_status(self):
        pass


def use_random_org(monkeypatch, enabled=True):
    monkeypatch.setattr(random_client, "get_settings", lambda: Settings(random_org_enabled=enabled))


def test_uses_random_org_digits(monkeypatch):
    use_random_org(monkeypatch)
    monkeypatch.setattr(random_client.requests, "get", lambda *a, **kw: FakeResponse("9\n0\n4\n4\n"))
    assert random_client.fetch_code(4) == [9, 0, 4, 4]


def test_falls_back_when_random_org_fails(monkeypatch):
    use_random_org(monkeypatch)

    def broken_get(*args, **kwargs):
        raise requests.ConnectionError("no internet")

    monkeypatch.setattr(random_client.requests, "get", broken_get)
    code = random_client.fetch_code(4)
    assert len(code) == 4
    assert all(0 <= digit <= 9 for digit in code)


def test_falls_back_on_bad_values(monkeypatch):
    use_random_org(monkeypatch)
    monkeypatch.setattr(random_client.requests, "get", lambda *a, **kw: FakeResponse("1\n12\n3\n4\n"))
    code = random_client.fetch_code(4)
    assert len(code) == 4
    assert all(0 <= digit <= 9 for digit in code)


def test_disabled_never_calls_random_org(monkeypatch):
    use_random_org(monkeypatch, enabled=False)

    def unexpected_get(*args, **kwargs):
        raise AssertionError("random.org should not be called")

    monkeypatch.setattr(random_client.requests, "get", unexpected_get)
    assert len(random_client.fetch_code(4)) == 4
