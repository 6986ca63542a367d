"""
Explicit validation & Pydantic models
- API models validate and serialize data exchanged with our own clients.
- Remote models parse the JSON bodies the score server sends back.
"""

import re
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from .types import AuthStage, Marker, StageStatus

# Login fields: ASCII letters, digits and underscores, 8 to 16 of them
CREDENTIAL_PATTERN = re.compile(r"\w+", re.ASCII)
CREDENTIAL_MIN_LENGTH = 8
CREDENTIAL_MAX_LENGTH = 16


# ---------------- Our API ----------------

# 1. Represents response when a new game is started
class NewGameResponse(BaseModel):
    game_id: str = Field(..., description="Unique ID for the game; secret is never returned")
    status: Literal["in_progress", "won"] = Field(..., description="Current state of the game")


# 2. Validates player's guess
class GuessRequest(BaseModel):
    guess: List[int] = Field(..., description="Exactly four digits, each between 0 and 9.")

    @field_validator("guess")
    @classmethod
    def validate_digits(cls, guess_list: List[int]) -> List[int]:
        if len(guess_list) != 4:
            raise ValueError("Guess must have exactly 4 digits.")
        for digit in guess_list:
            if digit < 0 or digit > 9:
                raise ValueError("Each digit must be between 0 and 9 inclusive.")
        return guess_list

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"guess": [0, 1, 2, 3]},
                {"guess": [9, 9, 4, 4]},
            ]
        }
    }


# 3. Feedback for a single turn
class TurnOut(BaseModel):
    turn: int = Field(..., description="Turn number, starting at 1")
    guess: List[int] = Field(..., description="The player's guess")
    markers: List[Marker] = Field(..., description="Exact markers first, then partial, then none")
    exact: int = Field(..., description="Right digit, right place")
    partial: int = Field(..., description="Right digit, wrong place")
    timestamp: float = Field(..., description="When the guess was made")


# 4. Overall state of the game
class GameState(BaseModel):
    game_id: str = Field(..., description="Unique ID for the game")
    status: Literal["in_progress", "won"] = Field(..., description="Current state of the game")
    turns: int = Field(..., description="Guesses made so far")
    elapsed_seconds: Optional[int] = Field(None, description="Time taken to win")
    score: Optional[int] = Field(None, description="Final score (only once won)")
    history: List[TurnOut] = Field(..., description="All guesses made so far, oldest first")


# 5. Result of a guess
class GuessResponse(BaseModel):
    turns: int = Field(..., description="Guesses made so far")
    status: Literal["in_progress", "won"] = Field(..., description="Current state of the game")
    feedback: Optional[TurnOut] = Field(None, description="Feedback from the latest guess")
    secret: Optional[List[int]] = Field(None, description="The secret code (only revealed once won)")
    score: Optional[int] = Field(None, description="Final score (only once won)")
    note: Optional[str] = Field(None, description="Extra note (ex. 'Game won. No more guesses.')")


# 6. Login dialog answer
class LoginRequest(BaseModel):
    username: str = Field(..., description="8-16 word characters")
    password: str = Field(..., description="8-16 word characters")
    remember_me: bool = Field(True, description="Keep the login on this device")

    @field_validator("username", "password")
    @classmethod
    def validate_credential(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Username and password cannot be empty.")
        if not CREDENTIAL_PATTERN.fullmatch(value):
            raise ValueError("Only letters, digits and underscores are allowed.")
        if len(value) < CREDENTIAL_MIN_LENGTH or len(value) > CREDENTIAL_MAX_LENGTH:
            raise ValueError(
                f"Must be between {CREDENTIAL_MIN_LENGTH} and {CREDENTIAL_MAX_LENGTH} characters."
            )
        return value


# 7. One row of the sync progress record
class StepOut(BaseModel):
    stage: AuthStage
    description: str
    status: StageStatus


class SyncStateOut(BaseModel):
    game_id: str
    stage: Optional[AuthStage] = Field(None, description="Stage currently being worked on")
    awaiting_credentials: bool = Field(..., description="Waiting for /sync/login or /sync/skip")
    skipped: bool = Field(..., description="Remote work is being skipped")
    finished: bool
    failed: bool
    notice: Optional[str] = Field(None, description="Latest message worth showing the player")
    steps: List[StepOut]


# 8. High-score board
class ScoreRowOut(BaseModel):
    rank: int
    username: str
    score: str = Field(..., description="Formatted, ex. '123,400'")


class HighScoresOut(BaseModel):
    scores: List[ScoreRowOut]
    user_index: int = Field(-1, description="Row of the current player, -1 when absent")


class InstructionsOut(BaseModel):
    instructions: str


# ---------------- Remote server payloads ----------------

class VerifyPayload(BaseModel):
    # Missing "result" reads as 0, the same as an invalid response
    result: int = 0


class RemoteScore(BaseModel):
    username: str = ""
    score: int = 0


class HighScoresPayload(BaseModel):
    scores: List[RemoteScore] = Field(default_factory=list)


class MiscEntry(BaseModel):
    name: str = ""
    value: str = ""


class SplashPayload(BaseModel):
    misc: List[MiscEntry] = Field(default_factory=list)
