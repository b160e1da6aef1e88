import contextlib
from typing import Optional

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm


class ProgressReporter:
    """Progress bar for the enrichment step. Never consulted for control decisions."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.bar: Optional[tqdm] = None

    def start(self, total: int):
        if not self.enabled:
            return
        self.finish()
        self.bar = tqdm(total=total, unit="product", dynamic_ncols=True)

    def advance(self, amount: int = 1):
        if self.bar is not None:
            self.bar.update(amount)

    def resize(self, total: int):
        """Change the total, keeping the bar at the same relative position."""
        if self.bar is None:
            return
        old_total = self.bar.total or 0
        old_position = self.bar.n
        position = round(old_position / old_total * total) if old_total else 0
        self.bar.total = total
        self.bar.n = min(position, total)
        self.bar.refresh()

    def finish(self):
        if self.bar is not None:
            self.bar.close()
            self.bar = None

    def redirect_logging(self):
        """Print log records above the bar instead of through it."""
        if self.bar is None:
            return contextlib.nullcontext()
        return logging_redirect_tqdm()
