"""Metrics collection for batch translation."""

from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar


@dataclass
class TranslationMetrics:
    """Metrics for batch translation.

    Counters are updated under a lock; the API serves requests from a
    thread pool and every request shares the singleton.

    Attributes:
        batches_total: Batches that reached dispatch.
        units_dispatched_total: Work units sent to the translator.
        units_succeeded_total: Work units whose translation was applied.
        units_failed_total: Work units whose translation call failed.
        units_skipped_total: (directive, record) pairs with a falsy source.
        validation_errors_total: Batches rejected for a bad directive.
        last_batch_duration_ms: Wall time of the most recent batch.
    """

    batches_total: int = 0
    units_dispatched_total: int = 0
    units_succeeded_total: int = 0
    units_failed_total: int = 0
    units_skipped_total: int = 0
    validation_errors_total: int = 0
    last_batch_duration_ms: float = 0.0
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    _instance: ClassVar["TranslationMetrics | None"] = None
    _instance_lock: ClassVar[Lock] = Lock()

    @classmethod
    def get_instance(cls) -> "TranslationMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        with cls._instance_lock:
            cls._instance = None

    def record_validation_error(self) -> None:
        """Record a rejected batch."""
        with self._lock:
            self.validation_errors_total += 1

    def record_batch(
        self,
        dispatched: int,
        succeeded: int,
        failed: int,
        skipped: int,
        duration_ms: float,
    ) -> None:
        """Record the outcome of one batch.

        Args:
            dispatched: Units sent to the translator.
            succeeded: Units applied to records.
            failed: Units whose call failed.
            skipped: Pairs skipped for a falsy source value.
            duration_ms: Batch wall time in milliseconds.
        """
        with self._lock:
            self.batches_total += 1
            self.units_dispatched_total += dispatched
            self.units_succeeded_total += succeeded
            self.units_failed_total += failed
            self.units_skipped_total += skipped
            self.last_batch_duration_ms = duration_ms

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        with self._lock:
            return {
                "batches_total": self.batches_total,
                "units_dispatched_total": self.units_dispatched_total,
                "units_succeeded_total": self.units_succeeded_total,
                "units_failed_total": self.units_failed_total,
                "units_skipped_total": self.units_skipped_total,
                "validation_errors_total": self.validation_errors_total,
                "last_batch_duration_ms": self.last_batch_duration_ms,
            }
