"""
Download filename generation.
"""
import random
import string
import time
from typing import Optional

FILENAME_CHARSET = string.ascii_lowercase + string.ascii_uppercase + string.digits
RANDOM_PART_LENGTH = 10

_rng = random.SystemRandom()


def generate_random_filename(ext: str, now: Optional[float] = None) -> str:
    """
    Build `<unix-seconds>_<10 random alphanumerics><ext>`.

    Args:
        ext: Extension including the leading dot
        now: Timestamp override (defaults to the current time)
    """
    timestamp = int(time.time() if now is None else now)
    suffix = "".join(_rng.choices(FILENAME_CHARSET, k=RANDOM_PART_LENGTH))
    return f"{timestamp}_{suffix}{ext}"
