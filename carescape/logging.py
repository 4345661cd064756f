import logging
import time
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def log_action(action: str, func: Callable[[], T], level: int = logging.INFO) -> T:
    """Run ``func``, logging when the action starts and how long it took."""
    logger.log(level, f"Running {action}")
    start_time = time.perf_counter()
    result = func()
    elapsed = time.perf_counter() - start_time
    logger.log(level, f"{action} completed in {elapsed:.4f}s")
    return result
