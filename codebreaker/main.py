'''
Codebreaker API

Endpoints:
GET  /instructions              -> how to play (from the score server, with a built-in fallback)
POST /games                     -> start a game
GET  /games/{id}                -> read state & history
POST /games/{id}/guess          -> submit a guess

After a win:
POST /games/{id}/sync           -> start the login / score upload flow
GET  /games/{id}/sync           -> step-by-step progress of that flow
POST /games/{id}/sync/login     -> answer the login prompt
POST /games/{id}/sync/skip      -> decline the login prompt (nothing is uploaded)

GET  /scores                    -> high-score board
'''

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware

from .bootstrap_db import create_all    # dev-only: create tables
from .config import get_settings
from .credentials import CredentialStore
from .db import SessionLocal
from .dispatch import ThreadDispatcher
from .errors import CodebreakerError, SequencerStateError
from .highscores import build_board
from .progress import ProgressLog
from .random_client import fetch_code
from .remote import RemoteClient
from .sequencer import AuthSequencer
from .store import Game, GameStore

from .schemas import (
    NewGameResponse,
    GuessRequest,
    GuessResponse,
    GameState,
    TurnOut,
    LoginRequest,
    SyncStateOut,
    HighScoresOut,
    InstructionsOut,
)

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTIONS = (
    "Guess the secret number: four digits, each 0-9, repeats allowed. "
    "After every guess you get one exact marker for each digit in the right spot "
    "and one partial marker for each right digit in the wrong spot. "
    "Four exact markers wins. Fewer turns and less time mean a higher score."
)

app = FastAPI(title="Codebreaker API", version="1.0.0")

# Allow everything in dev so the docs and front-end work easily
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# One store and one remote worker per process
_store = GameStore()
_dispatcher = ThreadDispatcher()

# --- Dev convenience: auto-create tables locally ---
if settings.app_env == "local":
    @app.on_event("startup")
    def _dev_create_tables():
        create_all()


@app.on_event("shutdown")
def _stop_dispatcher():
    _dispatcher.shutdown()


# Small factories so routes can be pointed at fakes in tests
def get_store() -> GameStore:
    return _store


def get_remote() -> RemoteClient:
    return RemoteClient(settings)


def get_credentials() -> CredentialStore:
    return CredentialStore(SessionLocal, settings.account_type)


def get_dispatcher():
    return _dispatcher


# --- DTO builders ---

def _to_turn_out(entry) -> TurnOut:
    return TurnOut(
        turn=entry.turn,
        guess=entry.guess,
        markers=entry.markers,
        exact=entry.exact,
        partial=entry.partial,
        timestamp=entry.timestamp,
    )


def _to_game_state(game: Game) -> GameState:
    return GameState(
        game_id=game.id,
        status=game.status,
        turns=game.turns,
        elapsed_seconds=game.elapsed_seconds,
        score=game.score,
        history=[_to_turn_out(h) for h in game.history],
    )


def _get_game_or_404(store: GameStore, game_id: str) -> Game:
    game = store.get(game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    return game


def _get_sync_or_404(store: GameStore, game_id: str):
    _get_game_or_404(store, game_id)
    sync = store.get_sync(game_id)
    if sync is None:
        raise HTTPException(status_code=404, detail="Sync not started for this game")
    return sync

# ---------------- Routes ----------------

@app.get("/instructions", response_model=InstructionsOut, summary="How to play")
def get_instructions(remote: RemoteClient = Depends(get_remote)) -> InstructionsOut:
    instructions = None
    try:
        instructions = remote.get_instructions()
    except CodebreakerError as exc:
        logger.info("Instructions unavailable: %s", exc)
    return InstructionsOut(instructions=instructions or DEFAULT_INSTRUCTIONS)


@app.post("/games", response_model=NewGameResponse, summary="Start a new game")
def start_game(store: GameStore = Depends(get_store)) -> NewGameResponse:
    secret = fetch_code(4)                        # random.org w/ secure fallback
    game = store.create(secret)
    return NewGameResponse(game_id=game.id, status=game.status)


@app.get("/games/{game_id}", response_model=GameState, summary="Get current game state")
def get_game(game_id: str, store: GameStore = Depends(get_store)) -> GameState:
    return _to_game_state(_get_game_or_404(store, game_id))


@app.post("/games/{game_id}/guess", response_model=GuessResponse, summary="Submit a guess")
def submit_guess(
    game_id: str,
    payload: GuessRequest,
    store: GameStore = Depends(get_store),
) -> GuessResponse:
    try:
        game = store.guess(game_id, payload.guess)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")

    won = game.status == "won"
    return GuessResponse(
        turns=game.turns,
        status=game.status,
        feedback=_to_turn_out(game.history[-1]) if game.history else None,
        # Reveal the secret only once the game is over
        secret=list(game.secret) if won else None,
        score=game.score,
        note="Game won. No more guesses allowed." if won else None,
    )


@app.post("/games/{game_id}/sync", response_model=SyncStateOut, summary="Start login & score upload")
def start_sync(
    game_id: str,
    store: GameStore = Depends(get_store),
    remote: RemoteClient = Depends(get_remote),
    credentials: CredentialStore = Depends(get_credentials),
    dispatcher=Depends(get_dispatcher),
) -> SyncStateOut:
    game = _get_game_or_404(store, game_id)
    if game.status != "won" or game.session is None:
        raise HTTPException(status_code=409, detail="Game not won yet.")

    sequencer = AuthSequencer(game.session, credentials, remote, dispatcher)
    progress = ProgressLog()
    sequencer.subscribe(progress)
    # Check and attach in one step; only the request that wins it starts the flow
    if not store.attach_sync(game_id, sequencer, progress):
        raise HTTPException(status_code=409, detail="Sync already started for this game.")

    sequencer.start()
    return progress.snapshot(game_id)


@app.get("/games/{game_id}/sync", response_model=SyncStateOut, summary="Progress of login & score upload")
def get_sync(game_id: str, store: GameStore = Depends(get_store)) -> SyncStateOut:
    _, progress = _get_sync_or_404(store, game_id)
    return progress.snapshot(game_id)


@app.post("/games/{game_id}/sync/login", response_model=SyncStateOut, summary="Answer the login prompt")
def sync_login(
    game_id: str,
    payload: LoginRequest,
    store: GameStore = Depends(get_store),
) -> SyncStateOut:
    sequencer, progress = _get_sync_or_404(store, game_id)
    try:
        sequencer.provide_credentials(payload.username, payload.password, payload.remember_me)
    except SequencerStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return progress.snapshot(game_id)


@app.post("/games/{game_id}/sync/skip", response_model=SyncStateOut, summary="Decline the login prompt")
def sync_skip(game_id: str, store: GameStore = Depends(get_store)) -> SyncStateOut:
    sequencer, progress = _get_sync_or_404(store, game_id)
    try:
        sequencer.decline()
    except SequencerStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return progress.snapshot(game_id)


@app.get("/scores", response_model=HighScoresOut, summary="High-score board")
def get_scores(
    game_id: Optional[str] = None,
    store: GameStore = Depends(get_store),
    remote: RemoteClient = Depends(get_remote),
) -> HighScoresOut:
    if not remote.is_reachable():
        raise HTTPException(status_code=503, detail="No internet connection.")
    try:
        payload = remote.get_high_scores()
    except CodebreakerError as exc:
        logger.error("High scores unavailable: %s", exc)
        raise HTTPException(status_code=502, detail="Could not load high scores.")

    # Highlight the player's row when we know who just finished
    username, score = None, None
    game = store.get(game_id) if game_id else None
    if game and game.session:
        username, score = game.session.username, game.session.score
    return build_board(payload, username, score)
