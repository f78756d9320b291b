"""Tests for knowledge decay weighting."""

import math
from datetime import timedelta

import pytest

from busfactor.analysis.decay import (
    MAX_DECAY,
    apply_decay,
    decay_factor,
    history_cutoff,
    latest_touch,
)
from busfactor.models import CommitRecord


def _commit(author, when, rev="r"):
    return CommitRecord(author=author, timestamp=when, revision=rev)


class TestDecayFactor:
    def test_one_year(self, now):
        factor = decay_factor(now - timedelta(days=365), now, 0.5)
        assert factor == pytest.approx(math.exp(-0.5))

    def test_no_elapsed_time(self, now):
        assert decay_factor(now, now, 0.5) == 1.0

    def test_future_timestamp_clamped(self, now):
        assert decay_factor(now + timedelta(days=30), now, 0.5) == 1.0

    def test_more_recent_weighs_more(self, now):
        older = decay_factor(now - timedelta(days=400), now, 0.5)
        newer = decay_factor(now - timedelta(days=10), now, 0.5)
        assert newer > older

    def test_zero_rate_disables_decay(self, now):
        assert decay_factor(now - timedelta(days=900), now, 0.0) == 1.0

    def test_naive_and_aware_mix(self, now):
        naive = (now - timedelta(days=365)).replace(tzinfo=None)
        assert decay_factor(naive, now, 0.5) == pytest.approx(math.exp(-0.5))
        assert decay_factor(now - timedelta(days=365), now.replace(tzinfo=None), 0.5) == (
            pytest.approx(math.exp(-0.5))
        )


class TestLatestTouch:
    def test_picks_most_recent_regardless_of_order(self, now):
        commits = [
            _commit("alice", now - timedelta(days=100)),
            _commit("alice", now - timedelta(days=5)),
            _commit("bob", now - timedelta(days=1)),
            _commit("alice", now - timedelta(days=50)),
        ]
        assert latest_touch(commits, "alice") == now - timedelta(days=5)

    def test_missing_author(self, now):
        assert latest_touch([_commit("bob", now)], "alice") is None

    def test_ignores_commits_before_since(self, now):
        commits = [
            _commit("alice", now - timedelta(days=100)),
            _commit("alice", now - timedelta(days=40)),
        ]
        assert latest_touch(commits, "alice", since=now - timedelta(days=30)) is None
        assert latest_touch(commits, "alice", since=now - timedelta(days=60)) == now - timedelta(
            days=40
        )


class TestApplyDecay:
    def test_one_year_old_commit(self, now):
        weighted = apply_decay(
            {"f": {"alice": 100}},
            {"f": [_commit("alice", now - timedelta(days=365))]},
            0.5,
            now,
        )
        assert weighted["f"]["alice"] == pytest.approx(60.65, abs=1)

    def test_no_commit_records_gets_max_decay(self, now):
        weighted = apply_decay({"f": {"alice": 100}}, {"f": []}, 0.5, now)
        assert weighted["f"]["alice"] == 100 * MAX_DECAY

    def test_missing_file_history_gets_max_decay(self, now):
        weighted = apply_decay({"f": {"alice": 40, "bob": 7}}, {}, 0.5, now)
        assert weighted["f"] == {"alice": 40 * MAX_DECAY, "bob": 7 * MAX_DECAY}

    def test_recent_contributor_overtakes_stale_one(self, now):
        weighted = apply_decay(
            {"f": {"alice": 100, "bob": 20}},
            {"f": [_commit("bob", now - timedelta(days=1))]},
            0.5,
            now,
        )
        assert weighted["f"]["bob"] > weighted["f"]["alice"]

    def test_commit_outside_window_gets_max_decay(self, now):
        weighted = apply_decay(
            {"f": {"alice": 100}},
            {"f": [_commit("alice", now - timedelta(days=400))]},
            0.5,
            now,
            window_days=30,
        )
        assert weighted["f"]["alice"] == pytest.approx(100 * MAX_DECAY)

    def test_naive_current_time(self, now):
        weighted = apply_decay(
            {"f": {"alice": 100}},
            {"f": [_commit("alice", now - timedelta(days=365))]},
            0.5,
            now.replace(tzinfo=None),
        )
        assert weighted["f"]["alice"] == pytest.approx(60.65, abs=0.01)

    def test_returns_new_map(self, now):
        authorship = {"f": {"alice": 100}}
        weighted = apply_decay(authorship, {}, 0.5, now)
        assert weighted is not authorship
        assert authorship == {"f": {"alice": 100}}


class TestHistoryCutoff:
    def test_window(self, now):
        assert history_cutoff(now, 548) == now - timedelta(days=548)
