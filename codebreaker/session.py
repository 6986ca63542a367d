"""
What we know about the player once a game is won.
Built by the game store, handed to the sync flow, thrown away after the
score is submitted (or skipped).
"""

from dataclasses import dataclass

from .types import NO_AUTH_TOKEN


@dataclass
class UserSession:
    secret_code: str
    turns: int
    elapsed_seconds: int
    score: int

    username: str = ""
    password: str = ""
    auth_token: int = NO_AUTH_TOKEN
    remember_me: bool = False

    def set_credentials(self, username: str, password: str, auth_token: int, remember_me: bool) -> None:
        self.username = username.strip()
        self.password = password.strip()
        self.auth_token = auth_token
        self.remember_me = remember_me

    def clear_password(self) -> None:
        self.password = ""
