import functools
import logging
import time

logger = logging.getLogger(__name__)


def stopwatch(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            logger.debug(
                f"Execution of {func.__name__} took {time.perf_counter() - start:.3f} seconds"
            )

    return wrapper
