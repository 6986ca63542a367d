"""
Turns sync events into the step-by-step record the player sees:
one row per stage with a description and a pending/done/skipped/failed mark.
"""

from threading import RLock
from typing import Dict, List, Optional

from .schemas import StepOut, SyncStateOut
from .sequencer import SyncEvent
from .types import AuthStage, StageStatus

STAGE_DESCRIPTIONS: Dict[AuthStage, str] = {
    "fetch_local_account": "Getting account info",
    "verify_remote": "Verifying account",
    "persist_account": "Storing account",
    "persist_score": "Storing score",
}

FINAL_STATUSES = ("done", "skipped", "failed")


class ProgressLog:
    def __init__(self) -> None:
        self.rows: List[StepOut] = []
        self.notice: Optional[str] = None
        self.awaiting_credentials = False
        self.skipped = False
        self.finished = False
        self.failed = False
        # Every event seen, restarts included
        self.events: List[SyncEvent] = []

        # Events arrive on the dispatcher thread while requests read snapshots
        self._lock = RLock()

    def __call__(self, event: SyncEvent) -> None:
        with self._lock:
            self._apply(event)

    def _apply(self, event: SyncEvent) -> None:
        self.events.append(event)

        if event.kind == "entered":
            self.rows.append(
                StepOut(stage=event.stage, description=STAGE_DESCRIPTIONS[event.stage], status="pending")
            )
        elif event.kind in FINAL_STATUSES:
            self._set_status(event.stage, event.kind)
            if event.stage == "fetch_local_account":
                # Login prompt answered (or never needed)
                self.awaiting_credentials = False
            if event.kind == "skipped":
                self.skipped = True
            if event.kind == "failed":
                self.notice = event.message
                # A failed score submission still lets the flow finish
                self.failed = event.stage != "persist_score"
        elif event.kind == "credentials_requested":
            self.awaiting_credentials = True
        elif event.kind == "notice":
            self.notice = event.message
        elif event.kind == "restarted":
            self.rows = []
        elif event.kind == "finished":
            self.finished = True

    def _set_status(self, stage: AuthStage, status: StageStatus) -> None:
        for row in reversed(self.rows):
            if row.stage == stage:
                row.status = status
                return

    def snapshot(self, game_id: str) -> SyncStateOut:
        with self._lock:
            current = self.rows[-1].stage if self.rows else None
            return SyncStateOut(
                game_id=game_id,
                stage=current,
                awaiting_credentials=self.awaiting_credentials,
                skipped=self.skipped,
                finished=self.finished,
                failed=self.failed,
                notice=self.notice,
                steps=[row.model_copy() for row in self.rows],
            )
