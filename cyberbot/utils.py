import random
import time
from typing import Callable, Optional, Tuple

# -----------------------------
# Utils: text normalisation
# -----------------------------
def normalize(text: Optional[str]) -> str:
    """Trim and case-fold user text so lookups compare like-for-like."""
    if not text:
        return ""
    return text.strip().casefold()


def is_blank(text: Optional[str]) -> bool:
    return not text or not text.strip()


# -----------------------------
# Utils: delays
# -----------------------------
def random_delay_ms(rng: random.Random, bounds: Tuple[int, int]) -> int:
    """Uniform delay in [low, high); a degenerate range yields `low`."""
    low, high = bounds
    if high <= low:
        return max(low, 0)
    return rng.randrange(low, high)


def sleep_ms(ms: int, sleep: Callable[[float], None] = time.sleep):
    if ms > 0:
        sleep(ms / 1000.0)
