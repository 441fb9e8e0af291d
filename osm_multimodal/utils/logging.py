import contextlib
import logging
import time
from typing import Iterable, Iterator, Optional

logger = logging.getLogger(__name__)

# =============================================================================
# CONTEXT MANAGERS
# =============================================================================


@contextlib.contextmanager
def timer(
    stage_name: str,  #
    log: Optional[logging.Logger] = None,
) -> Iterator[None]:
    """
    Context manager that logs the start and wall-clock duration of a pipeline stage.

    Parameters:
        stage_name (str): A descriptive name for the stage, e.g. "Topology thinning".
        log (logging.Logger, optional): Logger to report to. Defaults to this module's logger.

    Yields:
        None: This context manager yields control back to the caller.
    """
    log = log or logger
    start_time = time.perf_counter()
    log.info(f"Starting: {stage_name}")

    try:
        yield

    finally:
        log.info(f"Completed: {stage_name} in {time.perf_counter() - start_time:.2f} seconds")


# =============================================================================
# REPORTING
# =============================================================================


def log_value_list(
    log: logging.Logger,  #
    header: str,
    values: Iterable[str],
) -> None:
    """Log a header followed by one '- "value"' line per value, in sorted order."""
    values = sorted(values)

    if not values:
        return

    log.info(header)

    for value in values:
        log.info(f'- "{value}"')
