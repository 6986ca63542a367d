"""
- HTTP call with clear fallback
Get 4 random digits (0..9) from random.org. If anything goes wrong (no internet,
timeout, bad response), we fall back to a local secure random generator so the game still works.
"""

import logging
import requests
from secrets import randbelow
from typing import List

from .config import get_settings

logger = logging.getLogger(__name__)

RANDOM_URL = "https://www.random.org/integers/"


def _local_code(length: int) -> List[int]:
    # randbelow(10) gives us a number between 0 and 9
    return [randbelow(10) for _ in range(length)]


def fetch_code(length: int = 4) -> List[int]:
    if not get_settings().random_org_enabled:
        return _local_code(length)

    params = {
        "num": length,     # how many numbers we want
        "min": 0,          # smallest allowed number
        "max": 9,          # largest allowed number
        "col": 1,          # one number per line
        "base": 10,        # normal decimal numbers
        "format": "plain", # plain text response
        "rnd": "new",      # always generate new numbers
    }

    # keep network quick; if it takes too long, we will just fallback
    timeout_seconds = 3.0

    try:
        response = requests.get(RANDOM_URL, params=params, timeout=timeout_seconds)
        response.raise_for_status()

        # The body looks like:
        #   0\n3\n9\n2\n
        digits = [int(line.strip()) for line in response.text.splitlines() if line.strip() != ""]

        if len(digits) != length:
            raise ValueError(f"random.org returned {len(digits)} values, expected {length}.")

        for digit in digits:
            if digit < 0 or digit > 9:
                raise ValueError("random.org number out of range 0..9.")

        return digits

    except (requests.RequestException, ValueError) as exc:
        logger.warning("random.org unavailable (%s); using local randomness", exc)
        return _local_code(length)
