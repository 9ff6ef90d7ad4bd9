import logging
import time

start_time = time.monotonic()


class ElapsedFormatter(logging.Formatter):
    def format(self, record):
        elapsed = time.monotonic() - start_time
        record.elapsed_time = f"{elapsed:.2f}s"
        return super().format(record)


formatter_str = "%(elapsed_time)s [%(levelname)s] %(message)s"


def setup_logging(level: str = "INFO"):
    logging.basicConfig(level=level, format=formatter_str)

    for handler in logging.getLogger().handlers:
        handler.setFormatter(ElapsedFormatter(formatter_str))

    for lib in ["aiohttp", "urllib3", "asyncio", "playwright"]:
        logging.getLogger(lib).setLevel(logging.WARNING)


def reset_clock():
    global start_time
    start_time = time.monotonic()
