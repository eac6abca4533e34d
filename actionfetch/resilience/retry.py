"""Exponential backoff schedule.

Delays are a pure function of the attempt index and the base delay: the
attempt before the first retry waits ``base``, each later one doubles it.
There is no jitter and no upper cap, so observable timing is exactly
``base * 2 ** (attempt - 2)``. Large retry counts grow the wait quickly.
"""

from typing import List


def backoff_delay_ms(attempt: int, base_ms: int) -> int:
    """Delay to wait before the given 1-indexed attempt.

    Args:
        attempt: Attempt number (1 is the initial attempt)
        base_ms: Base delay in milliseconds

    Returns:
        Delay in milliseconds (0 for the initial attempt)

    Raises:
        ValueError: If attempt < 1 or base_ms <= 0
    """
    if attempt < 1:
        raise ValueError(f"attempt must be >= 1, got {attempt}")
    if base_ms <= 0:
        raise ValueError(f"base_ms must be > 0, got {base_ms}")

    if attempt == 1:
        return 0
    return base_ms * 2 ** (attempt - 2)


def backoff_schedule(max_retries: int, base_ms: int) -> List[int]:
    """Delays before each attempt, initial attempt included.

    Example:
        >>> backoff_schedule(3, 1000)
        [0, 1000, 2000, 4000]
    """
    if max_retries < 0:
        raise ValueError(f"max_retries must be >= 0, got {max_retries}")
    return [backoff_delay_ms(attempt, base_ms) for attempt in range(1, max_retries + 2)]
