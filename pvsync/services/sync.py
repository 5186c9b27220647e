"""
Sync Driver - drains pending samples tracker by tracker

For every tracker, in configured order:
1. Select up to batch_size pending samples (empty -> next tracker)
2. Format and upload them as one batch
3. Mark exactly those samples as uploaded, then repeat

Errors are not retried: they propagate and stop the run. Samples that
were not committed stay pending for the next run.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from pvsync.core.config import MAX_BATCH_SIZE
from pvsync.core.exceptions import UploadRejectedError
from pvsync.models.tracker import Tracker
from pvsync.services.formatter import DEFAULT_TZ, format_batch
from pvsync.services.store import SampleStore
from pvsync.services.uploader import PVOutputUploader

logger = logging.getLogger(__name__)


@dataclass
class TrackerResult:
    """Outcome of draining one tracker."""

    tracker: Tracker
    samples: int = 0
    batches: int = 0


@dataclass
class SyncReport:
    """Outcome of a full run."""

    results: list[TrackerResult] = field(default_factory=list)

    @property
    def samples(self) -> int:
        return sum(r.samples for r in self.results)

    @property
    def batches(self) -> int:
        return sum(r.batches for r in self.results)


class SyncDriver:
    """Runs the select -> format -> send -> commit loop."""

    def __init__(
        self,
        store: SampleStore,
        uploader: PVOutputUploader,
        trackers: Sequence[Tracker],
        api_key: str,
        batch_size: int = MAX_BATCH_SIZE,
        tz: str = DEFAULT_TZ,
        commit_on_http_error: bool = False,
    ):
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}, got {batch_size}")
        self.store = store
        self.uploader = uploader
        self.trackers = list(trackers)
        self.api_key = api_key
        self.batch_size = batch_size
        self.tz = tz
        self.commit_on_http_error = commit_on_http_error

    def run(self) -> SyncReport:
        """Drain every tracker in order."""
        report = SyncReport()
        logger.info(f"🚀 Starting sync of {len(self.trackers)} trackers")

        for tracker in self.trackers:
            report.results.append(self.sync_tracker(tracker))

        logger.info(f"✅ Sync complete: {report.samples} samples in {report.batches} batches")
        return report

    def sync_tracker(self, tracker: Tracker) -> TrackerResult:
        """Upload all pending samples of one tracker."""
        result = TrackerResult(tracker=tracker)
        pending = self.store.count_pending(tracker.device_id, tracker.tracker_id)
        logger.info(f"📡 {tracker}: {pending} pending samples")

        while True:
            samples = self.store.select_pending(tracker.device_id, tracker.tracker_id, self.batch_size)
            if not samples:
                break

            payload = format_batch(samples, self.tz)
            status = self.uploader.send(payload, tracker.system_id, self.api_key)
            self._check_status(status, tracker, len(samples))

            self.store.mark_uploaded([s.id for s in samples])
            result.samples += len(samples)
            result.batches += 1
            logger.info(f"📤 {tracker}: uploaded samples {samples[0].id}..{samples[-1].id} ({len(samples)})")

        logger.info(f"{tracker}: {result.samples} samples in {result.batches} batches")
        return result

    def _check_status(self, status: int, tracker: Tracker, count: int) -> None:
        """Decide whether a batch answered with status may be committed."""
        if 200 <= status < 300:
            return

        if self.commit_on_http_error:
            logger.warning(f"⚠️ {tracker}: HTTP {status}, committing {count} samples anyway")
            return

        raise UploadRejectedError(
            f"PVOutput rejected batch for system {tracker.system_id} with HTTP {status}",
            status_code=status,
            system_id=tracker.system_id,
        )
