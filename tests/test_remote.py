"""
Testing the score server client without a server.
- Trick: hand RemoteClient a fake requests session that returns canned bodies.
"""

import pytest
import requests

from codebreaker.config import Settings
from codebreaker.errors import MalformedResponseError, TransportError, ValidationError
from codebreaker.remote import RemoteClient
from codebreaker.session import UserSession


class FakeResponse:
    def __init__(self, body: str, status_code: int = 200):
        self.content = body.encode("utf-8")
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeHttp:
    def __init__(self, body="", status_code=200, error=None):
        self.body = body
        self.status_code = status_code
        self.error = error
        self.posts = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.posts.append((url, data))
        if self.error:
            raise self.error
        return FakeResponse(self.body, self.status_code)

    def head(self, url, timeout=None):
        if self.error:
            raise self.error
        return FakeResponse("")


SETTINGS = Settings(remote_base_url="http://scores.test/api/")


def make_client(**kwargs):
    http = FakeHttp(**kwargs)
    return RemoteClient(SETTINGS, http), http


def test_verify_returns_result_code():
    client, http = make_client(body='{"result": 31}')
    assert client.verify_credentials("player_one", "secret_pw1") == 31

    url, data = http.posts[0]
    assert url == "http://scores.test/api/verify_credentials.php"
    assert data == {"username": "player_one", "password": "secret_pw1"}


def test_verify_missing_result_reads_as_zero():
    client, _ = make_client(body='{"something": "else"}')
    assert client.verify_credentials("player_one", "secret_pw1") == 0


def test_verify_empty_input_never_reaches_server():
    client, http = make_client(body='{"result": 31}')
    with pytest.raises(ValidationError):
        client.verify_credentials("", "secret_pw1")
    assert http.posts == []


def test_malformed_body():
    client, _ = make_client(body="<html>oops</html>")
    with pytest.raises(MalformedResponseError):
        client.verify_credentials("player_one", "secret_pw1")


def test_connection_error_is_transport_error():
    client, _ = make_client(error=requests.ConnectionError("refused"))
    with pytest.raises(TransportError):
        client.verify_credentials("player_one", "secret_pw1")
    assert client.is_reachable() is False


def test_http_error_and_empty_body_are_transport_errors():
    client, _ = make_client(body='{"result": 1}', status_code=500)
    with pytest.raises(TransportError):
        client.get_high_scores()

    client, _ = make_client(body="  \n")
    with pytest.raises(TransportError):
        client.get_high_scores()


def test_submit_score_form():
    client, http = make_client(body='{"ok": true}')
    session = UserSession(secret_code="0427", turns=150, elapsed_seconds=80, score=6600)
    session.set_credentials("player_one", "secret_pw1", 9, False)

    client.submit_score(session)

    url, data = http.posts[0]
    assert url.endswith("submit_score.php")
    assert data == {
        "account_id": "9",
        "secret_number": "0427",
        "turns": "100",  # capped
        "time_in_seconds": "80",
        "score": "6600",
    }


def test_submit_score_needs_an_account_id():
    client, http = make_client(body='{"ok": true}')
    session = UserSession(secret_code="0427", turns=3, elapsed_seconds=80, score=6600)
    session.set_credentials("player_one", "secret_pw1", -1, False)
    with pytest.raises(ValidationError):
        client.submit_score(session)
    assert http.posts == []


def test_high_scores_and_instructions():
    client, _ = make_client(body='{"scores": [{"username": "a_player", "score": "1200"}]}')
    payload = client.get_high_scores()
    assert payload.scores[0].username == "a_player"
    assert payload.scores[0].score == 1200

    client, _ = make_client(
        body='{"misc": [{"name": "website_link_text", "value": "x"}, {"name": "instructions", "value": "Play!"}]}'
    )
    assert client.get_instructions() == "Play!"

    client, _ = make_client(body='{"misc": []}')
    assert client.get_instructions() is None
