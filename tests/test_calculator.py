"""Tests for the method registry and the public analysis entry points."""

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from busfactor.calculator import (
    BusFactorCalculator,
    StandardMethod,
    UnknownMethodError,
    run_standard_analysis,
    run_time_weighted_analysis,
)
from busfactor.models import AnalysisConfig, AuthorshipData, CommitRecord, RiskLevel


class TestRegistry:
    def test_available_methods(self):
        assert BusFactorCalculator().list_available_methods() == ["abf", "jbf"]

    def test_unknown_method(self):
        calc = BusFactorCalculator()
        with pytest.raises(UnknownMethodError) as exc_info:
            calc.calculate("xyz", AuthorshipData())
        assert "xyz" in str(exc_info.value)
        assert exc_info.value.available == ["abf", "jbf"]

    def test_unknown_method_is_value_error(self):
        with pytest.raises(ValueError):
            BusFactorCalculator().get_method("nope")

    def test_register_new_method(self, scenario_authorship):
        class EveryoneOwns(StandardMethod):
            name = "loose"
            label = "Loose"

            def compute_ownership(self, file_authorship, history, config, current_time):
                ownership = {f: next(iter(a), None) for f, a in file_authorship.items()}
                return ownership, None

        calc = BusFactorCalculator()
        calc.register(EveryoneOwns())
        report = calc.calculate("loose", AuthorshipData(file_authorship=scenario_authorship))
        assert report.analysis.method == "Loose"
        assert "loose" in calc.list_available_methods()

    def test_status_messages(self, scenario_authorship):
        messages = []
        calc = BusFactorCalculator(on_status=messages.append)
        calc.calculate("abf", AuthorshipData(file_authorship=scenario_authorship))
        assert messages[0] == "Running bus factor calculation with method: ABF"
        assert any(m.startswith("Step 3") for m in messages)


class TestStandardAnalysis:
    def test_scenario(self, scenario_authorship):
        report = run_standard_analysis(scenario_authorship)
        assert report.summary.bus_factor == 2
        assert report.summary.critical_contributors == ["Alice", "Bob"]
        assert report.analysis.method.startswith("Avelino")
        assert report.analysis.threshold == 0.5
        assert report.analysis.metadata is None
        assert report.file_ownership == {
            "f1": "Alice", "f2": "Alice", "f3": "Bob", "f4": "Charlie",
        }

    def test_ten_solo_files(self):
        report = run_standard_analysis({f"f{i}": {f"d{i}": 3} for i in range(10)})
        assert report.summary.bus_factor == 6
        assert report.interpretation.risk == RiskLevel.low

    def test_custom_threshold(self, scenario_authorship):
        report = run_standard_analysis(scenario_authorship, AnalysisConfig(threshold=0.25))
        assert report.summary.bus_factor == 1
        assert report.analysis.threshold == 0.25

    def test_zero_files(self):
        report = run_standard_analysis({})
        assert report.summary.bus_factor == 0
        assert report.summary.critical_contributors == []
        assert report.analysis.final_ownerless_ratio is None

    def test_input_not_mutated(self, scenario_authorship):
        snapshot = {f: dict(a) for f, a in scenario_authorship.items()}
        run_standard_analysis(scenario_authorship)
        assert scenario_authorship == snapshot

    def test_errors_pass_through(self):
        report = run_standard_analysis({"a": {}}, errors=['Could not analyze "a": boom'])
        assert report.errors == ['Could not analyze "a": boom']
        assert report.file_ownership == {"a": None}


class TestTimeWeightedAnalysis:
    def test_recent_contributor_takes_ownership(self, now):
        authorship = {
            "a": {"old": 100, "new": 30},
            "b": {"old": 100, "new": 30},
            "c": {"old": 100},
        }
        history = {
            "a": [CommitRecord(author="new", timestamp=now - timedelta(days=2), revision="1")],
            "b": [CommitRecord(author="new", timestamp=now - timedelta(days=3), revision="2")],
        }
        report = run_time_weighted_analysis(authorship, history, current_time=now)
        assert report.file_ownership == {"a": "new", "b": "new", "c": "old"}
        assert report.summary.critical_contributors[0] == "new"
        assert report.summary.bus_factor == 1

    def test_metadata_and_activity(self, now):
        history = {"f": [CommitRecord(author="alice", timestamp=now - timedelta(days=365))]}
        config = AnalysisConfig(decay_rate=0.5, window_days=400)
        report = run_time_weighted_analysis({"f": {"alice": 100}}, history, config, now)
        meta = report.analysis.metadata
        assert meta.decay_rate == 0.5
        assert meta.time_window_days == 400
        assert meta.analysis_date == now.isoformat()
        assert report.top_contributors[0].recent_activity_score == "61"
        share = report.file_authorship_map["f"]["alice"]
        assert share.lines == 100
        assert float(share.weighted_lines) == pytest.approx(60.65, abs=0.01)
        assert report.analysis.method.startswith("Jabrayilzade")

    def test_missing_history_degrades_gracefully(self, now):
        report = run_time_weighted_analysis(
            {"a": {"x": 10}, "b": {"y": 10}}, {}, current_time=now
        )
        assert report.file_ownership == {"a": "x", "b": "y"}
        assert report.summary.bus_factor == 2

    def test_non_owners_are_ranked(self, now):
        history = {"a": [CommitRecord(author="x", timestamp=now)]}
        report = run_time_weighted_analysis(
            {"a": {"x": 10, "y": 5}}, history, current_time=now
        )
        authors = [c.author for c in report.top_contributors]
        assert authors == ["x", "y"]
        assert report.top_contributors[1].degree_of_authorship == "0.00%"

    def test_history_outside_window_gets_max_decay(self, now):
        history = {"f": [CommitRecord(author="a", timestamp=now - timedelta(days=400))]}
        config = AnalysisConfig(window_days=30)
        report = run_time_weighted_analysis({"f": {"a": 100}}, history, config, now)
        assert report.file_authorship_map["f"]["a"].weighted_lines == "1.00"

    def test_window_keeps_recent_records(self, now):
        history = {
            "f": [
                CommitRecord(author="a", timestamp=now - timedelta(days=400)),
                CommitRecord(author="a", timestamp=now - timedelta(days=10)),
            ]
        }
        config = AnalysisConfig(window_days=30)
        report = run_time_weighted_analysis({"f": {"a": 100}}, history, config, now)
        assert float(report.file_authorship_map["f"]["a"].weighted_lines) > 98

    def test_naive_timestamps_are_utc(self, now):
        naive_now = now.replace(tzinfo=None)
        history = {"f": [CommitRecord(author="a", timestamp=naive_now - timedelta(days=365))]}
        aware = run_time_weighted_analysis({"f": {"a": 100}}, history, current_time=now)
        naive = run_time_weighted_analysis({"f": {"a": 100}}, history, current_time=naive_now)
        assert aware.file_authorship_map == naive.file_authorship_map
        assert float(aware.file_authorship_map["f"]["a"].weighted_lines) == pytest.approx(
            60.65, abs=0.01
        )

    def test_epoch_records_with_naive_current_time(self):
        history = {"f": [CommitRecord(author="a", timestamp=1735689600)]}  # 2025-01-01
        report = run_time_weighted_analysis(
            {"f": {"a": 10}}, history, current_time=datetime(2025, 6, 1)
        )
        assert report.file_ownership == {"f": "a"}
        assert report.analysis.metadata.analysis_date == "2025-06-01T00:00:00+00:00"

    def test_exhausted_ranking_bounded_by_contributors(self, now):
        authorship = {"a": {"x": 10, "ghost": 0}, "b": {"y": 10}}
        history = {
            "a": [CommitRecord(author="x", timestamp=now)],
            "b": [CommitRecord(author="y", timestamp=now)],
        }
        config = AnalysisConfig(threshold=1.0)
        report = run_time_weighted_analysis(authorship, history, config, now)
        assert report.summary.total_contributors == 2
        assert report.summary.bus_factor == 2
        assert "ghost" not in [c.author for c in report.top_contributors]

    def test_zero_files(self, now):
        report = run_time_weighted_analysis({}, {}, current_time=now)
        assert report.summary.bus_factor == 0
        assert report.analysis.final_ownerless_ratio is None

    def test_same_input_both_methods(self, scenario_authorship, now):
        snapshot = {f: dict(a) for f, a in scenario_authorship.items()}
        standard = run_standard_analysis(scenario_authorship)
        weighted = run_time_weighted_analysis(scenario_authorship, {}, current_time=now)
        assert scenario_authorship == snapshot
        assert standard.file_ownership == weighted.file_ownership


class TestConfigValidation:
    def test_negative_decay_rate_rejected(self):
        with pytest.raises(ValidationError):
            AnalysisConfig(decay_rate=-0.1)
