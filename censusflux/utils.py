import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from time import perf_counter

fmt = "%(levelname)s:%(asctime).19s: %(message)s"
logging.basicConfig(format=fmt)
logger = logging.getLogger("censusflux")


# Global settings
@dataclass
class Settings:
    verify_ssl: bool = True
    write_pause: float = 1.0  # Delay between two writes (in seconds)


settings = Settings()

DURATION_UNITS = [("s", 1), ("ms", 1e-3), ("us", 1e-6)]


def pretty_duration(seconds):
    """
    Format a duration with the largest unit that keeps it above one,
    nanoseconds below a microsecond.
    """
    for unit, factor in DURATION_UNITS:
        if seconds >= factor:
            return "%.2f%s" % (seconds / factor, unit)
    return "%.2fns" % (seconds * 1e9)


@contextmanager
def timeit(title=""):
    start = perf_counter()
    try:
        yield
    finally:
        print(title, pretty_duration(perf_counter() - start), file=sys.stderr)
