"""Tests for the BatchTranslationEngine."""

import threading
import time
from collections.abc import Iterator

import pytest

from src.features.observability.metrics import TranslationMetrics
from src.features.translation.config import TranslatorConfig
from src.features.translation.engine import BatchTranslationEngine
from src.features.translation.errors import (
    DirectiveValidationError,
    RemoteError,
    TranslationFailure,
)
from src.features.translation.models import Directive, Record
from tests.helpers.translator import FakeTranslator


@pytest.fixture(autouse=True)
def reset_metrics() -> Iterator[None]:
    """Reset metrics singleton before each test."""
    TranslationMetrics.reset()
    yield
    TranslationMetrics.reset()


def _directive(key: str, new_key: str, lang: str = "en") -> Directive:
    return Directive(source_key=key, target_key=new_key, target_lang=lang)


def _engine(
    translator: FakeTranslator, **config: object
) -> BatchTranslationEngine:
    return BatchTranslationEngine(translator, TranslatorConfig(**config))


class TestValidation:
    """Directive validation happens before any call."""

    def test_empty_target_key_fails_without_calls(self) -> None:
        translator = FakeTranslator()
        records: list[Record] = [{"title": "salam"}]

        with pytest.raises(DirectiveValidationError) as exc_info:
            _engine(translator).translate_batch(
                records, [_directive("title", "")], "az"
            )

        assert exc_info.value.index == 0
        assert translator.calls == []
        assert records == [{"title": "salam"}]

    def test_reports_first_offending_directive(self) -> None:
        translator = FakeTranslator()
        records: list[Record] = [{"a": "bir", "b": "iki", "c": "üç"}]
        directives = [
            _directive("a", "a_en"),
            _directive("b", ""),
            _directive("c", ""),
        ]

        with pytest.raises(DirectiveValidationError) as exc_info:
            _engine(translator).translate_batch(records, directives, "az")

        # Earlier valid directives must not have been dispatched either.
        assert exc_info.value.index == 1
        assert exc_info.value.directive.source_key == "b"
        assert translator.calls == []
        assert records == [{"a": "bir", "b": "iki", "c": "üç"}]

    def test_validation_error_recorded_in_metrics(self) -> None:
        with pytest.raises(DirectiveValidationError):
            _engine(FakeTranslator()).translate_batch(
                [{"x": "y"}], [_directive("x", "")], "az"
            )
        assert TranslationMetrics.get_instance().validation_errors_total == 1


class TestSkipping:
    """Falsy or missing source values produce no work."""

    @pytest.mark.parametrize("value", ["", 0, None, False])
    def test_falsy_value_untouched(self, value: object) -> None:
        translator = FakeTranslator()
        records: list[Record] = [{"title": value, "other": 1}]  # type: ignore[dict-item]

        result = _engine(translator).translate_batch(
            records, [_directive("title", "title_en")], "az"
        )

        assert records == [{"title": value, "other": 1}]
        assert translator.calls == []
        assert result.units_dispatched == 0
        assert result.units_skipped == 1

    def test_missing_key_untouched(self) -> None:
        translator = FakeTranslator()
        records: list[Record] = [{"other": "x"}]

        _engine(translator).translate_batch(
            records, [_directive("title", "title_en")], "az"
        )

        assert records == [{"other": "x"}]
        assert translator.calls == []

    def test_empty_source_key_matches_nothing(self) -> None:
        translator = FakeTranslator()
        records: list[Record] = [{"name": "salam"}]

        result = _engine(translator).translate_batch(
            records, [_directive("name", "name_en"), _directive("", "x")], "az"
        )

        assert records == [{"name_en": "en:salam"}]
        assert result.units_skipped == 1
        assert translator.calls == [("salam", "az", "en")]

    def test_empty_inputs(self) -> None:
        translator = FakeTranslator()

        result = _engine(translator).translate_batch([], [_directive("a", "b")], "az")
        assert result.records == []

        records: list[Record] = [{"a": "x"}]
        result = _engine(translator).translate_batch(records, [], "az")
        assert result.records == [{"a": "x"}]
        assert translator.calls == []


class TestMerge:
    """Successful units are merged into their own record."""

    def test_rename_removes_source_key(self) -> None:
        translator = FakeTranslator(table={"salam": "hello"})
        records: list[Record] = [{"name": "salam"}]

        result = _engine(translator).translate_batch(
            records, [_directive("name", "name_en")], "az"
        )

        assert result.records == [{"name_en": "hello"}]
        assert "name" not in records[0]
        assert translator.calls == [("salam", "az", "en")]

    def test_same_key_overwrites_in_place(self) -> None:
        translator = FakeTranslator(table={"salam": "hello"})
        records: list[Record] = [{"id": 7, "name": "salam", "city": "Bakı"}]

        _engine(translator).translate_batch(
            records, [_directive("name", "name")], "az"
        )

        assert records == [{"id": 7, "name": "hello", "city": "Bakı"}]

    def test_positions_preserved_across_records(self) -> None:
        translator = FakeTranslator(table={"bir": "one", "iki": "two"})
        records: list[Record] = [{"x": "bir"}, {"x": "iki"}]

        result = _engine(translator).translate_batch(
            records, [_directive("x", "x")], "az"
        )

        assert result.records == [{"x": "one"}, {"x": "two"}]

    def test_returns_callers_list(self) -> None:
        records: list[Record] = [{"x": "bir"}]
        result = _engine(FakeTranslator()).translate_batch(
            records, [_directive("x", "y")], "az"
        )
        assert result.records is records

    def test_untouched_records_unchanged(self) -> None:
        translator = FakeTranslator()
        records: list[Record] = [{"x": "bir"}, {"y": "iki"}, {"x": ""}]

        _engine(translator).translate_batch(records, [_directive("x", "x_en")], "az")

        assert records[1] == {"y": "iki"}
        assert records[2] == {"x": ""}

    def test_numbers_sent_as_text(self) -> None:
        translator = FakeTranslator()
        records: list[Record] = [{"n": 12, "f": 1.5, "b": True}]

        _engine(translator, max_concurrency=1).translate_batch(
            records,
            [_directive("n", "n"), _directive("f", "f"), _directive("b", "b")],
            "az",
        )

        assert [c[0] for c in translator.calls] == ["12", "1.5", "true"]

    def test_two_directives_from_one_source(self) -> None:
        translator = FakeTranslator()
        records: list[Record] = [{"name": "salam"}]

        _engine(translator).translate_batch(
            records,
            [_directive("name", "name_en", "en"), _directive("name", "name_tr", "tr")],
            "az",
        )

        assert records == [{"name_en": "en:salam", "name_tr": "tr:salam"}]

    def test_later_directive_wins_on_same_target(self) -> None:
        translator = FakeTranslator()
        records: list[Record] = [{"a": "bir", "b": "iki"}]

        _engine(translator).translate_batch(
            records,
            [_directive("a", "out", "en"), _directive("b", "out", "tr")],
            "az",
        )

        assert records == [{"out": "tr:iki"}]

    def test_retranslating_output_is_permitted(self) -> None:
        translator = FakeTranslator(table={"salam": "hello", "hello": "hi"})
        records: list[Record] = [{"name": "salam"}]
        engine = _engine(translator)

        engine.translate_batch(records, [_directive("name", "name_en")], "az")
        engine.translate_batch(records, [_directive("name_en", "name_en")], "en")

        assert records == [{"name_en": "hi"}]
        assert len(translator.calls) == 2

    def test_chained_rename_keeps_both_translations(self) -> None:
        translator = FakeTranslator()
        records: list[Record] = [{"x": "a", "z": "b"}]

        result = _engine(translator).translate_batch(
            records, [_directive("z", "x"), _directive("x", "y")], "az"
        )

        assert result.success
        assert records == [{"x": "en:b", "y": "en:a"}]

    def test_chained_rename_on_other_record_still_removes_source(self) -> None:
        translator = FakeTranslator()
        records: list[Record] = [{"x": "a", "z": "b"}, {"x": "c"}]

        _engine(translator).translate_batch(
            records, [_directive("z", "x"), _directive("x", "y")], "az"
        )

        assert records[1] == {"y": "en:c"}

    def test_nested_values_pass_through(self) -> None:
        translator = FakeTranslator()
        records: list[Record] = [{"name": "salam", "meta": {"id": 1}}]

        _engine(translator).translate_batch(
            records, [_directive("name", "name_en"), _directive("meta", "meta_en")], "az"
        )

        assert records == [{"meta": {"id": 1}, "name_en": "en:salam"}]
        assert translator.calls == [("salam", "az", "en")]


class TestFailures:
    """Per-unit failures are aggregated, not fatal."""

    def test_failures_reported_successes_applied(self) -> None:
        translator = FakeTranslator(failing={"iki"})
        records: list[Record] = [{"x": "bir"}, {"x": "iki"}, {"x": "üç"}]

        result = _engine(translator).translate_batch(
            records, [_directive("x", "x_en")], "az"
        )

        assert not result.success
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.record_index == 1
        assert failure.directive_index == 0
        assert failure.text == "iki"
        assert isinstance(failure.error, RemoteError)
        assert records == [{"x_en": "en:bir"}, {"x": "iki"}, {"x_en": "en:üç"}]
        assert result.units_succeeded == 2

    def test_raise_for_failures(self) -> None:
        translator = FakeTranslator(failing={"bir"})
        result = _engine(translator).translate_batch(
            [{"x": "bir"}], [_directive("x", "y")], "az"
        )

        with pytest.raises(TranslationFailure, match="key 'x'") as exc_info:
            result.raise_for_failures()
        assert exc_info.value.failures == result.failures

    def test_raise_for_failures_noop_on_success(self) -> None:
        result = _engine(FakeTranslator()).translate_batch(
            [{"x": "bir"}], [_directive("x", "y")], "az"
        )
        result.raise_for_failures()

    def test_unexpected_errors_propagate(self) -> None:
        class BrokenTranslator:
            def translate(self, text: str, source_lang: str, target_lang: str) -> str:
                raise KeyError(text)

        engine = BatchTranslationEngine(BrokenTranslator())

        with pytest.raises(KeyError):
            engine.translate_batch([{"x": "bir"}], [_directive("x", "y")], "az")


class TestFailFast:
    """fail_fast aborts without mutating any record."""

    def test_sequential_stops_at_first_failure(self) -> None:
        translator = FakeTranslator(failing={"bir"})
        records: list[Record] = [{"x": "bir"}, {"x": "iki"}]

        with pytest.raises(TranslationFailure):
            _engine(translator, max_concurrency=1, fail_fast=True).translate_batch(
                records, [_directive("x", "x_en")], "az"
            )

        assert len(translator.calls) == 1
        assert records == [{"x": "bir"}, {"x": "iki"}]

    def test_parallel_applies_nothing(self) -> None:
        translator = FakeTranslator(failing={"iki"})
        records: list[Record] = [{"x": "bir"}, {"x": "iki"}, {"x": "üç"}]

        with pytest.raises(TranslationFailure) as exc_info:
            _engine(translator, max_concurrency=4, fail_fast=True).translate_batch(
                records, [_directive("x", "x_en")], "az"
            )

        assert exc_info.value.failures[0].text == "iki"
        assert records == [{"x": "bir"}, {"x": "iki"}, {"x": "üç"}]


class TestConcurrency:
    """Fan-out is bounded by max_concurrency."""

    def test_in_flight_calls_bounded(self) -> None:
        lock = threading.Lock()
        active = 0
        peak = 0

        class SlowTranslator:
            def translate(self, text: str, source_lang: str, target_lang: str) -> str:
                nonlocal active, peak
                with lock:
                    active += 1
                    peak = max(peak, active)
                time.sleep(0.02)
                with lock:
                    active -= 1
                return text.upper()

        records: list[Record] = [{"x": f"t{i}"} for i in range(8)]
        engine = BatchTranslationEngine(
            SlowTranslator(), TranslatorConfig(max_concurrency=2)
        )

        result = engine.translate_batch(records, [_directive("x", "x")], "az")

        assert peak <= 2
        assert result.records == [{"x": f"T{i}"} for i in range(8)]

    def test_metrics_recorded(self) -> None:
        translator = FakeTranslator(failing={"iki"})
        _engine(translator).translate_batch(
            [{"x": "bir"}, {"x": "iki"}, {"x": ""}], [_directive("x", "y")], "az"
        )

        metrics = TranslationMetrics.get_instance()
        assert metrics.batches_total == 1
        assert metrics.units_dispatched_total == 2
        assert metrics.units_succeeded_total == 1
        assert metrics.units_failed_total == 1
        assert metrics.units_skipped_total == 1
