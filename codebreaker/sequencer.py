"""
The sync flow that runs after a game is won:

    fetch_local_account -> verify_remote -> persist_account -> persist_score

Forward only. Every stage is entered once per pass, even when the player
opted out of logging in (the "skip" flag): skipped stages are still reported
so the caller can show the whole step-by-step record.

The sequencer never touches presentation objects. It emits SyncEvents;
whoever cares (see progress.py) subscribes and renders.

Remote calls go through a dispatcher and come back through callbacks. One
call is in flight at most, and every transition runs under one lock, so a
callback is the only thing mutating the flow while it runs.
"""

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Callable, List, Optional, Set

from sqlalchemy.exc import SQLAlchemyError

from .credentials import CredentialStore
from .errors import SequencerStateError
from .remote import RemoteClient
from .session import UserSession
from .types import (
    AuthStage,
    NO_AUTH_TOKEN,
    RESULT_INVALID,
    RESULT_MISSING_FIELDS,
    RESULT_STORAGE_FAILED,
    RESULT_WRONG_PASSWORD,
)

logger = logging.getLogger(__name__)

NO_CONNECTION_NOTICE = "No internet connection. Your score will not be stored."
LOGIN_FAILED_NOTICE = "Login failed. Check your username and password and try again."

RESULT_MESSAGES = {
    RESULT_MISSING_FIELDS: "Query parameters missing.",
    RESULT_STORAGE_FAILED: "Server failed to store the account.",
}


@dataclass(frozen=True)
class SyncEvent:
    # entered | done | skipped | failed | credentials_requested | notice | restarted | finished
    kind: str
    stage: Optional[AuthStage] = None
    message: Optional[str] = None


Listener = Callable[[SyncEvent], None]


class AuthSequencer:
    def __init__(
        self,
        session: UserSession,
        credentials: CredentialStore,
        remote: RemoteClient,
        dispatcher,
    ):
        self.session = session
        self.credentials = credentials
        self.remote = remote
        self.dispatcher = dispatcher

        self.stage: Optional[AuthStage] = None
        self.skip = False
        self.awaiting_credentials = False
        self.finished = False
        self.failed = False

        self._started = False
        self._in_flight = False
        self._visited: Set[AuthStage] = set()
        self._listeners: List[Listener] = []
        self._lock = RLock()

    # ---------------- Public API ----------------

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def start(self) -> None:
        with self._lock:
            if self._started:
                raise SequencerStateError("Sync already started.")
            self._started = True

            # Connectivity is checked locally; without it, nothing remote is attempted
            if not self.remote.is_reachable():
                logger.info("No connectivity; skipping remote work")
                self.skip = True
                self._emit("notice", message=NO_CONNECTION_NOTICE)

            self._enter("fetch_local_account")

    def provide_credentials(self, username: str, password: str, remember_me: bool) -> None:
        """Positive answer to the login prompt."""
        with self._lock:
            self._require_awaiting()
            self.awaiting_credentials = False
            self.session.set_credentials(username, password, NO_AUTH_TOKEN, remember_me)
            self._emit("done", self.stage)
            self._enter("verify_remote")

    def decline(self) -> None:
        """Negative answer to the login prompt: skip everything remote from here on."""
        with self._lock:
            self._require_awaiting()
            self.awaiting_credentials = False
            self.skip = True
            self._emit("skipped", self.stage)
            self._enter("verify_remote")

    # ---------------- Transitions ----------------

    def _enter(self, stage: AuthStage) -> None:
        if stage in self._visited:
            raise SequencerStateError(f"Stage {stage} already visited.")
        self._visited.add(stage)
        self.stage = stage
        logger.debug("Entering %s (skip=%s)", stage, self.skip)
        self._emit("entered", stage)

        if stage == "fetch_local_account":
            self._fetch_local_account()
        elif stage == "verify_remote":
            self._verify_remote()
        elif stage == "persist_account":
            self._persist_account()
        else:
            self._persist_score()

    def _fetch_local_account(self) -> None:
        account = self.credentials.find()
        if account is not None:
            self.session.set_credentials(account.name, account.password, account.auth_token, True)
            self._emit("done", "fetch_local_account")
            self._enter("verify_remote")
        elif self.skip:
            self._emit("skipped", "fetch_local_account")
            self._enter("verify_remote")
        else:
            # Wait for provide_credentials() or decline()
            self.awaiting_credentials = True
            self._emit("credentials_requested", "fetch_local_account", self.session.username)

    def _verify_remote(self) -> None:
        if self.skip:
            self._emit("skipped", "verify_remote")
            self._enter("persist_account")
            return

        username = self.session.username
        password = self.session.password
        self._dispatch(
            lambda: self.remote.verify_credentials(username, password),
            self._on_verified,
            self._on_verify_error,
        )

    def _on_verified(self, result: int) -> None:
        with self._lock:
            self._in_flight = False
            logger.debug("Verify returned %s", result)

            try:
                if result > 0:
                    self.session.auth_token = result
                    if self.session.remember_me and self.credentials.find() is None:
                        self.credentials.add(self.session.username, self.session.password, result)
                    self._emit("done", "verify_remote")
                    self._enter("persist_account")
                elif result in (RESULT_INVALID, RESULT_WRONG_PASSWORD):
                    self._restart()
                else:
                    message = RESULT_MESSAGES.get(result, f"Unexpected result {result}.")
                    logger.error("Verify failed: %s", message)
                    self._fail(message)
            except SQLAlchemyError as exc:
                logger.error("Stored account unavailable: %s", exc)
                self._fail(f"Could not access the stored account: {exc}")

    def _on_verify_error(self, exc: Exception) -> None:
        with self._lock:
            self._in_flight = False
            logger.error("Verify request failed: %s", exc)
            self._fail(str(exc))

    def _restart(self) -> None:
        """Wrong password: forget the stored login and start over."""
        account = self.credentials.find()
        if account is not None:
            self.credentials.remove(account)
        self.session.clear_password()

        self._emit("notice", message=LOGIN_FAILED_NOTICE)
        self._visited.clear()
        self.stage = None
        self._emit("restarted")
        self._enter("fetch_local_account")

    def _persist_account(self) -> None:
        # Storing already happened during verify; this stage is bookkeeping
        self._emit("skipped" if self.skip else "done", "persist_account")
        self._enter("persist_score")

    def _persist_score(self) -> None:
        if self.skip:
            self._emit("skipped", "persist_score")
            self._finish()
            return

        session = self.session
        self._dispatch(
            lambda: self.remote.submit_score(session),
            self._on_score_saved,
            self._on_score_error,
        )

    def _on_score_saved(self, _body: str) -> None:
        with self._lock:
            self._in_flight = False
            self._emit("done", "persist_score")
            self._finish()

    def _on_score_error(self, exc: Exception) -> None:
        # Best effort: the flow still finishes
        with self._lock:
            self._in_flight = False
            logger.error("Score submission failed: %s", exc)
            self._emit("failed", "persist_score", str(exc))
            self._finish()

    # ---------------- Helpers ----------------

    def _dispatch(self, call, on_success, on_error) -> None:
        if self._in_flight:
            raise SequencerStateError("A remote call is already in flight.")
        self._in_flight = True
        self.dispatcher.submit(call, on_success, on_error)

    def _fail(self, message: str) -> None:
        self.failed = True
        self._emit("failed", self.stage, message)

    def _finish(self) -> None:
        self.finished = True
        logger.info("Sync finished (skipped=%s)", self.skip)
        self._emit("finished", self.stage)

    def _require_awaiting(self) -> None:
        if not self.awaiting_credentials:
            raise SequencerStateError("Not waiting for credentials.")

    def _emit(self, kind: str, stage: Optional[AuthStage] = None, message: Optional[str] = None) -> None:
        event = SyncEvent(kind=kind, stage=stage, message=message)
        for listener in self._listeners:
            listener(event)
