# Area: Battle
"""
quiz_battle._battle.join_code — Join code generation
"""

import random
from typing import Collection, Optional

JOIN_CODE_LENGTH = 6
MAX_ATTEMPTS = 100


def generate_join_code(
    active_codes: Collection[str] = (),
    rng: Optional[random.Random] = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> str:
    """
    Generate a 6-digit numeric code not present in ``active_codes``.

    Raises:
        RuntimeError: If no free code was found within ``max_attempts``
    """
    rng = rng or random.Random()
    taken = set(active_codes)
    low = 10 ** (JOIN_CODE_LENGTH - 1)
    high = 10 ** JOIN_CODE_LENGTH - 1
    for _ in range(max_attempts):
        code = str(rng.randint(low, high))
        if code not in taken:
            return code
    raise RuntimeError(f"No free join code after {max_attempts} attempts")
