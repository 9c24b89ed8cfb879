"""Batch translation engine with bounded fan-out and per-unit outcomes."""

from __future__ import annotations

import time
import uuid
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

import structlog

from src.features.observability.metrics import TranslationMetrics
from src.features.translation.config import TranslatorConfig
from src.features.translation.constants import COMPONENT_TRANSLATION
from src.features.translation.errors import (
    DirectiveValidationError,
    TranslationError,
    TranslationFailure,
)
from src.features.translation.models import (
    BatchResult,
    Directive,
    Record,
    UnitFailure,
    WorkUnit,
    record_text,
)
from src.features.translation.protocols import TextTranslator
from src.features.translation.state_machine import BatchState, BatchStateMachine


logger = structlog.get_logger()

UnitOutcome = str | TranslationError


class BatchTranslationEngine:
    """Translates selected fields across a record collection.

    Provides:
    - Directive validation before any remote call
    - One work unit per (directive, record) with a truthy source value
    - Parallel dispatch bounded by ``max_concurrency``
    - Failure isolation (one unit failing doesn't stop the others)
    - In-place merge of translations into the caller's records

    Successful translations are merged on the calling thread after every
    unit has settled, in directive order and then record order. When two
    directives write the same target key on one record, the later
    directive wins.
    """

    def __init__(
        self,
        translator: TextTranslator,
        config: TranslatorConfig | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            translator: Client used for every work unit.
            config: Concurrency and failure policy.
        """
        self._translator = translator
        self._config = config or TranslatorConfig()
        self._metrics = TranslationMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_TRANSLATION, subcomponent="engine")

    def translate_batch(
        self,
        records: list[Record],
        directives: Sequence[Directive],
        source_lang: str,
        batch_id: str | None = None,
    ) -> BatchResult:
        """Translate every directive's source field across all records.

        Args:
            records: Records to translate; mutated in place.
            directives: Field translation directives, in priority order.
            source_lang: Source language code shared by all directives.
            batch_id: Optional identifier for logging.

        Returns:
            BatchResult holding the same ``records`` list plus any
            per-unit failures.

        Raises:
            DirectiveValidationError: If a directive has an empty target
                key. Raised before any call is issued.
            TranslationFailure: Only when ``fail_fast`` is configured and
                a unit failed; no record is mutated in that case.
        """
        batch_id = batch_id or uuid.uuid4().hex[:12]
        state = BatchStateMachine(batch_id)
        log = self._log.bind(batch_id=batch_id)
        start_time_ns = time.perf_counter_ns()

        try:
            self._validate(directives)
        except DirectiveValidationError as exc:
            self._metrics.record_validation_error()
            state.transition_to(BatchState.FAILED)
            log.warning("batch_validation_failed", **exc.to_dict())
            raise
        state.transition_to(BatchState.VALIDATED)

        units, skipped = self._build_units(records, directives)

        log.info(
            "batch_started",
            records=len(records),
            directives=len(directives),
            units=len(units),
            skipped=skipped,
            source_lang=source_lang,
            max_concurrency=self._config.max_concurrency,
        )

        state.transition_to(BatchState.DISPATCHED)
        outcomes = self._dispatch(units, source_lang, log)
        state.transition_to(BatchState.JOINED)

        failures: list[UnitFailure] = []
        for index, unit in enumerate(units):
            outcome = outcomes.get(index)
            if isinstance(outcome, TranslationError):
                failures.append(UnitFailure.from_unit(unit, source_lang, outcome))

        if failures and self._config.fail_fast:
            duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
            self._metrics.record_batch(
                len(units), 0, len(failures), skipped, duration_ms
            )
            state.transition_to(BatchState.FAILED)
            log.warning(
                "batch_aborted",
                failed=len(failures),
                duration_ms=round(duration_ms, 2),
            )
            raise TranslationFailure(failures)

        succeeded = self._apply(records, units, outcomes)
        state.transition_to(BatchState.APPLIED)

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_batch(
            len(units), succeeded, len(failures), skipped, duration_ms
        )
        log.info(
            "batch_complete",
            succeeded=succeeded,
            failed=len(failures),
            duration_ms=round(duration_ms, 2),
        )

        return BatchResult(
            records=records,
            failures=failures,
            units_dispatched=len(units),
            units_succeeded=succeeded,
            units_skipped=skipped,
            duration_ms=duration_ms,
        )

    @staticmethod
    def _validate(directives: Sequence[Directive]) -> None:
        """Reject the first directive with an empty target key.

        Raises:
            DirectiveValidationError: Naming the offending directive.
        """
        for index, directive in enumerate(directives):
            if not directive.target_key:
                msg = (
                    f"Directive {index} (key '{directive.source_key}') "
                    "has an empty target key"
                )
                raise DirectiveValidationError(index, directive, msg)

    @staticmethod
    def _build_units(
        records: list[Record], directives: Sequence[Directive]
    ) -> tuple[list[WorkUnit], int]:
        """Expand directives x records into work units.

        Returns:
            Work units in directive-then-record order, and the number of
            pairs skipped for a missing or falsy source value.
        """
        units: list[WorkUnit] = []
        skipped = 0
        for d_index, directive in enumerate(directives):
            for r_index, record in enumerate(records):
                text = record_text(record.get(directive.source_key))
                if text is None:
                    skipped += 1
                    continue
                units.append(WorkUnit(d_index, r_index, directive, text))
        return units, skipped

    def _dispatch(
        self,
        units: list[WorkUnit],
        source_lang: str,
        log: structlog.typing.FilteringBoundLogger,
    ) -> dict[int, UnitOutcome]:
        """Run every unit and collect outcomes keyed by unit index.

        With ``fail_fast`` the first observed failure cancels units that
        have not started; running units still complete.
        """
        outcomes: dict[int, UnitOutcome] = {}
        fail_fast = self._config.fail_fast

        if self._config.max_concurrency <= 1 or len(units) <= 1:
            for index, unit in enumerate(units):
                outcome = self._run_unit(unit, source_lang, log)
                outcomes[index] = outcome
                if fail_fast and isinstance(outcome, TranslationError):
                    break
            return outcomes

        workers = min(self._config.max_concurrency, len(units))
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="translate"
        ) as executor:
            future_to_index = {
                executor.submit(self._run_unit, unit, source_lang, log): index
                for index, unit in enumerate(units)
            }

            for future in as_completed(future_to_index):
                outcome = future.result()
                outcomes[future_to_index[future]] = outcome
                if fail_fast and isinstance(outcome, TranslationError):
                    executor.shutdown(wait=False, cancel_futures=True)
                    break

        return outcomes

    def _run_unit(
        self,
        unit: WorkUnit,
        source_lang: str,
        log: structlog.typing.FilteringBoundLogger,
    ) -> UnitOutcome:
        """Translate one unit, returning the error instead of raising it."""
        try:
            return self._translator.translate(
                unit.text, source_lang, unit.directive.target_lang
            )
        except TranslationError as exc:
            log.warning(
                "unit_failed",
                directive_index=unit.directive_index,
                record_index=unit.record_index,
                source_key=unit.directive.source_key,
                target_lang=unit.directive.target_lang,
                error=str(exc),
            )
            return exc

    @staticmethod
    def _apply(
        records: list[Record],
        units: list[WorkUnit],
        outcomes: dict[int, UnitOutcome],
    ) -> int:
        """Merge successful translations into their owning records.

        A rename never removes a key that an earlier unit on the same record
        wrote as its target, so chained directives keep both translations.

        Returns:
            Number of units applied.
        """
        applied = 0
        written: dict[int, set[str]] = {}
        for index, unit in enumerate(units):
            outcome = outcomes.get(index)
            if not isinstance(outcome, str):
                continue
            record = records[unit.record_index]
            targets = written.setdefault(unit.record_index, set())
            record[unit.directive.target_key] = outcome
            if unit.directive.renames and unit.directive.source_key not in targets:
                record.pop(unit.directive.source_key, None)
            targets.add(unit.directive.target_key)
            applied += 1
        return applied
