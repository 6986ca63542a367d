"""
Pure game logic (no HTTP, no storage).
For each guess we hand back four markers:
- exact:   right digit, right place
- partial: digit is in the secret, but somewhere else
- none:    padding for slots that did not match

Markers are ordered exact first, then partial, then none, so the player
never learns WHICH slot matched.

Duplicates are allowed in the secret.
"""

from typing import List, Tuple

from .types import Code, TurnResult

CODE_LENGTH = 4

# A secret slot that already produced a marker; outside 0..9 so it never matches again
CONSUMED = -1

# Caps used by the score formula
MAX_TURNS = 100
MAX_DURATION = 9999


def score_guess(secret: Code, guess: Code) -> TurnResult:
    """
    Example:
      secret = [1, 2, 3, 4]
      guess  = [1, 1, 1, 1]
      -> ["exact", "none", "none", "none"]
      Only one "1" lives in the secret, so it can only be hit once.
    """

    # 0. Validate lengths
    if len(secret) != CODE_LENGTH or len(guess) != CODE_LENGTH:
        raise ValueError(f"Secret and guess must both have exactly {CODE_LENGTH} digits.")

    # Work on a copy; consumed slots get overwritten
    remaining = list(secret)
    markers: TurnResult = []

    # 1. Same digit in the same slot -> exact
    i = 0
    while i < CODE_LENGTH:
        if guess[i] == secret[i]:
            markers.append("exact")
            remaining[i] = CONSUMED
        i += 1

    # 2. Every guess digit looks for an unconsumed slot holding the same value -> partial
    #    Exact positions are scanned again; their slots are already consumed.
    for value in guess:
        j = 0
        while j < CODE_LENGTH:
            if remaining[j] == value:
                markers.append("partial")
                remaining[j] = CONSUMED
                break
            j += 1

    # 3. Pad with "none"
    while len(markers) < CODE_LENGTH:
        markers.append("none")

    return markers


def count_markers(markers: TurnResult) -> Tuple[int, int]:
    """Returns (exact, partial) for a turn result."""
    return (markers.count("exact"), markers.count("partial"))


def is_win(markers: TurnResult) -> bool:
    """
    Win = four exact markers.
    """
    return len(markers) == CODE_LENGTH and markers.count("exact") == CODE_LENGTH


def calculate_score(turns: int, elapsed_seconds: int) -> int:
    """
    Fewer turns and less time -> higher score.
      score = ((10000 - duration) // turns) * 100
    Turns are capped at 100, duration at 9999 seconds.
    """
    if turns < 1 or elapsed_seconds < 0:
        return 0

    if turns > MAX_TURNS:
        turns = MAX_TURNS
    if elapsed_seconds > MAX_DURATION:
        elapsed_seconds = MAX_DURATION

    return ((10000 - elapsed_seconds) // turns) * 100


def code_to_string(code: List[int]) -> str:
    # [0, 4, 2, 7] -> "0427"
    return "".join(str(digit) for digit in code)
