"""
Labels for clarity.
"""

from typing import List, Literal, Tuple

Digit = int  # 0 -> 9
Code = List[Digit]  # 4 digit secret or guess
Marker = Literal["exact", "partial", "none"]
TurnResult = List[Marker]
GameStatus = Literal["in_progress", "won"]

AuthStage = Literal["fetch_local_account", "verify_remote", "persist_account", "persist_score"]
StageStatus = Literal["pending", "done", "skipped", "failed"]

# Order the sync flow walks through
AUTH_STAGES: Tuple[AuthStage, ...] = (
    "fetch_local_account",
    "verify_remote",
    "persist_account",
    "persist_score",
)

# Result codes returned by the remote verify endpoint (positive = account id)
RESULT_INVALID = 0
RESULT_MISSING_FIELDS = -1
RESULT_WRONG_PASSWORD = -2
RESULT_STORAGE_FAILED = -3

# Placeholder token until the server hands out an account id
NO_AUTH_TOKEN = -1
