"""
High-score board.

The server sends its array already sorted, best score LAST. We flip it so
the best score comes first, number the rows from 1, format the scores with
thousands separators and point at the row belonging to the player who just
finished (if it made the board).
"""

from typing import Optional

from .schemas import HighScoresOut, HighScoresPayload, ScoreRowOut


def format_score(score: int) -> str:
    # 123400 -> "123,400"
    return f"{score:,}"


def build_board(
    payload: HighScoresPayload,
    username: Optional[str] = None,
    score: Optional[int] = None,
) -> HighScoresOut:
    total = len(payload.scores)
    rows = []
    user_index = -1

    for i, entry in enumerate(payload.scores):
        rows.insert(0, ScoreRowOut(rank=total - i, username=entry.username, score=format_score(entry.score)))
        if username and entry.username == username and entry.score == score:
            user_index = total - i - 1

    return HighScoresOut(scores=rows, user_index=user_index)
