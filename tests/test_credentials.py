# tests/test_credentials.py
from codebreaker.credentials import CredentialStore


def test_credential_store_flow(credential_store):
    assert credential_store.find() is None

    added = credential_store.add("player_one", "secret_pw1", 12)
    assert added.name == "player_one"
    assert added.auth_token == 12

    found = credential_store.find()
    assert found == added

    credential_store.remove(found)
    assert credential_store.find() is None


def test_duplicate_account_is_not_added(credential_store):
    credential_store.add("player_one", "secret_pw1", 12)
    assert credential_store.add("player_one", "other_pw22", 13) is None
    assert credential_store.find().password == "secret_pw1"


def test_other_account_types_are_invisible(credential_store, session_factory):
    other_app = CredentialStore(session_factory, "some.other.app")
    other_app.add("player_one", "secret_pw1", 12)

    assert credential_store.find() is None
    assert other_app.find().name == "player_one"
