# src/transformer/managers/progress_manager.py
import sys
import logging

from tqdm import tqdm

logger = logging.getLogger(__name__)


class ProgressManager:
    """
    Manages the lifecycle of the tqdm progress bar of a transformer run.
    The bar goes to stderr so it never mixes with the report on stdout.
    """

    def __init__(self, total: int, desc: str = "Transforming", unit: str = "doc", enabled: bool = True):
        self.pbar = None
        if not enabled:
            return
        self.pbar = tqdm(
            total=max(total, 1),
            desc=desc,
            unit=f" {unit}",
            dynamic_ncols=True,
            leave=False,
            postfix={"changed": 0, "warnings": 0, "errors": 0},
            bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}] {postfix}",
            file=sys.stderr,
        )

    def advance(self, changed: int, warnings: int, errors: int, steps: int = 1) -> None:
        if not self.pbar:
            return
        self.pbar.update(steps)
        self.pbar.set_postfix({"changed": changed, "warnings": warnings, "errors": errors}, refresh=False)

    def close(self) -> None:
        if not self.pbar:
            return
        try:
            self.pbar.close()
        except Exception as e:
            logger.error(f"Error encountered while closing progress bar: {e}")
        self.pbar = None
