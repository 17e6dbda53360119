"""Progress reporting into a caller-supplied sink."""
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ProgressSink = Callable[[float], None]

# Sub-ranges of the overall 0-100 scale
PREFILL_DONE = 20.0
FILL_RANGE = (20.0, 70.0)
FILL_DONE = 75.0
SMOOTH_RANGE = (75.0, 90.0)
SMOOTH_DONE = 92.0
COMPLETE = 100.0


class ProgressReporter:
    """
    Forward percentages to a sink, never going backwards.

    Values are clamped to [0, 100]; a value below the last one reported is
    replaced by the last one.
    """

    def __init__(self, sink: Optional[ProgressSink] = None):
        self.sink = sink
        self.last = 0.0

    def report(self, percent: float) -> None:
        percent = min(100.0, max(0.0, float(percent)))
        percent = max(percent, self.last)
        self.last = percent
        logger.debug(f"Progress: {percent:.1f}%")
        if self.sink is not None:
            self.sink(percent)

    def sub_range(self, start: float, end: float) -> Callable[[float], None]:
        """Callback mapping a fraction in [0, 1] onto [start, end]."""
        def on_fraction(fraction: float) -> None:
            self.report(start + (end - start) * fraction)
        return on_fraction
