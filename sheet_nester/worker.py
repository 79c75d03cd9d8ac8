# sheet_nester/worker.py
# Run one nesting job off the caller's thread (e.g. a UI thread) and stream progress.
#
# Usage:
#   job = run_in_background(groups, settings)
#   for ev in job.progress:          # ends when the job finishes
#       print(f"{ev.percent:5.1f}% {ev.message}")
#   result = job.result(timeout=60)
#
# One job = one worker thread. The nesting itself stays single threaded;
# cancel() sets an event the nester checks before every part attempt.

from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, Optional

from .cache import NestingCache
from .nester import Nester, SettingsLike
from .progress import ProgressChannel
from .types import NestingResult


class NestingJob:
    def __init__(
        self,
        material_groups: Dict[str, Iterable[Any]],
        settings: SettingsLike = None,
        *,
        nester: Optional[Nester] = None,
        cache: Optional[NestingCache] = None,
    ):
        self.material_groups = material_groups
        self.settings = settings
        self.nester = nester or Nester()
        self.cache = cache
        self.progress = ProgressChannel()
        self._cancel = threading.Event()
        self._done = threading.Event()
        self._result: Optional[NestingResult] = None
        self._error: Optional[Exception] = None
        self._thread = threading.Thread(target=self._work, name="sheet-nester", daemon=True)

    def start(self) -> "NestingJob":
        self._thread.start()
        return self

    def _work(self) -> None:
        try:
            self._result = self.nester.run(
                self.material_groups,
                self.settings,
                progress_callback=self.progress,
                cache=self.cache,
                cancel_event=self._cancel,
            )
            self.progress.publish("Done", 100)
        except Exception as e:  # re-raised in result()
            self._error = e
        finally:
            self._done.set()
            self.progress.close()

    def cancel(self) -> None:
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def done(self) -> bool:
        return self._done.is_set()

    def result(self, timeout: Optional[float] = None) -> NestingResult:
        """Block until the job ends; re-raises NestingCancelled or any nesting error."""
        if not self._done.wait(timeout):
            raise TimeoutError(f"Nesting job still running after {timeout} s")
        if self._error is not None:
            raise self._error
        if self._result is None:
            raise RuntimeError("Nesting job finished without a result")
        return self._result


def run_in_background(
    material_groups: Dict[str, Iterable[Any]],
    settings: SettingsLike = None,
    *,
    nester: Optional[Nester] = None,
    cache: Optional[NestingCache] = None,
) -> NestingJob:
    return NestingJob(material_groups, settings, nester=nester, cache=cache).start()
