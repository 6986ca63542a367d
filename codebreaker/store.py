"""
In-memory store
Holds game state in memory, plus the sync flow attached to a won game.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from uuid import uuid4
from time import time
from threading import RLock

from .types import Code, GameStatus, TurnResult
from .engine import calculate_score, code_to_string, count_markers, is_win, score_guess
from .progress import ProgressLog
from .sequencer import AuthSequencer
from .session import UserSession

logger = logging.getLogger(__name__)


@dataclass
class TurnEntry:
    turn: int
    guess: Code
    markers: TurnResult
    exact: int
    partial: int
    timestamp: float


@dataclass
class Game:
    id: str
    secret: Code
    turns: int = 0
    status: GameStatus = "in_progress"
    history: List[TurnEntry] = field(default_factory=list)
    started_at: float = field(default_factory=time)
    elapsed_seconds: Optional[int] = None
    score: Optional[int] = None
    # Filled in once the game is won
    session: Optional[UserSession] = None
    sync: Optional[Tuple[AuthSequencer, ProgressLog]] = None


class GameStore:
    def __init__(self) -> None:
        self._games: Dict[str, Game] = {}
        self._lock = RLock()

    def create(self, secret: Code) -> Game:
        game = Game(id=str(uuid4()), secret=list(secret))
        with self._lock:
            self._games[game.id] = game
        logger.debug("Game %s secret: %s", game.id, code_to_string(game.secret))
        return game

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            return self._games.get(game_id)

    def guess(self, game_id: str, attempt: Code) -> Optional[Game]:
        with self._lock:
            game = self._games.get(game_id)
            if game is None:
                return None

            if game.status != "in_progress":
                # Game already won: ignore extra guesses
                return game

            markers = score_guess(game.secret, attempt)
            exact, partial = count_markers(markers)

            game.turns += 1
            game.history.append(
                TurnEntry(
                    turn=game.turns,
                    guess=list(attempt),
                    markers=markers,
                    exact=exact,
                    partial=partial,
                    timestamp=time(),
                )
            )

            if is_win(markers):
                self._finish(game)

            return game

    def _finish(self, game: Game) -> None:
        game.status = "won"
        game.elapsed_seconds = int(time() - game.started_at)
        game.score = calculate_score(game.turns, game.elapsed_seconds)
        game.session = UserSession(
            secret_code=code_to_string(game.secret),
            turns=game.turns,
            elapsed_seconds=game.elapsed_seconds,
            score=game.score,
        )
        logger.info("Game %s won in %s turn(s), score %s", game.id, game.turns, game.score)

    def attach_sync(self, game_id: str, sequencer: AuthSequencer, progress: ProgressLog) -> bool:
        """Attach a sync flow unless one is already there. Returns False if it was."""
        with self._lock:
            game = self._games[game_id]
            if game.sync is not None:
                return False
            game.sync = (sequencer, progress)
            return True

    def get_sync(self, game_id: str) -> Optional[Tuple[AuthSequencer, ProgressLog]]:
        with self._lock:
            game = self._games.get(game_id)
            return game.sync if game else None
