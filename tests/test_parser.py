"""Tests for snapshot document parsing."""
import logging
from datetime import datetime, timezone

import pytest

from netdiag.collection.parser import (
    load_snapshot,
    parse_liveness_status,
    parse_locality,
    parse_node_status,
    parse_snapshot,
    parse_timestamp,
)
from netdiag.engine import compute_diagnostics
from netdiag.errors import SnapshotError
from netdiag.models import LivenessStatus, LocalityTier

from conftest import MS


class TestParseSnapshot:

    def test_nodes_and_liveness(self, snapshot_document):
        snapshot = parse_snapshot(snapshot_document)
        assert snapshot.node_ids == (1, 2, 3)
        assert snapshot.liveness == {
            1: LivenessStatus.HEALTHY,
            2: LivenessStatus.HEALTHY,
            3: LivenessStatus.HEALTHY,
        }
        status = snapshot.status_by_id()[1]
        assert status.address == "10.0.0.1:26257"
        assert status.locality_tiers == (LocalityTier("dc", "east"),)
        assert status.latencies == {2: 5 * MS, 3: 50 * MS}

    def test_matches_in_memory_example(self, snapshot_document):
        result = compute_diagnostics(parse_snapshot(snapshot_document))
        assert result.stats.mean == pytest.approx(20.33, abs=0.01)

    def test_not_an_object(self):
        with pytest.raises(SnapshotError):
            parse_snapshot([])

    def test_missing_nodes(self):
        with pytest.raises(SnapshotError):
            parse_snapshot({"liveness": {}})

    def test_node_without_id(self):
        with pytest.raises(SnapshotError):
            parse_snapshot({"nodes": [{"address": "x"}]})

    def test_bad_liveness_keys_skipped(self, caplog):
        with caplog.at_level(logging.WARNING):
            snapshot = parse_snapshot({"nodes": [], "liveness": {"x": "HEALTHY", "4": "DEAD"}})
        assert snapshot.liveness == {4: LivenessStatus.DEAD}
        assert "non-integer node id" in caplog.text


class TestParseNodeStatus:

    def test_self_and_malformed_latencies_dropped(self, caplog):
        with caplog.at_level(logging.WARNING):
            status = parse_node_status({
                "node_id": 2,
                "latencies": {"1": 100, "2": 5, "abc": 1, "3": "slow"},
            })
        assert status.latencies == {1: 100}
        assert "toward itself" in caplog.text

    def test_non_finite_latencies_dropped(self, caplog):
        with caplog.at_level(logging.WARNING):
            status = parse_node_status({
                "node_id": 1,
                "latencies": {"2": float("nan"), "3": float("inf"), "4": 7 * MS},
            })
        assert status.latencies == {4: 7 * MS}
        assert caplog.text.count("non-finite") == 2

    def test_fractional_nanos_kept(self):
        status = parse_node_status({"node_id": 1, "latencies": {"2": 2.5}})
        assert status.latencies == {2: 2.5}

    def test_missing_fields_default_empty(self):
        status = parse_node_status({"node_id": "7"})
        assert status.node_id == 7
        assert status.address == ""
        assert status.locality_tiers == ()
        assert status.updated_at is None
        assert status.latencies == {}


class TestFieldParsers:

    def test_timestamp_from_nanos(self):
        assert parse_timestamp(1500000000000000000) == datetime(2017, 7, 14, 2, 40, tzinfo=timezone.utc)

    def test_timestamp_from_iso(self):
        assert parse_timestamp("2017-07-14T02:40:00Z") == datetime(2017, 7, 14, 2, 40, tzinfo=timezone.utc)

    def test_timestamp_garbage(self):
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None
        assert parse_timestamp(True) is None

    def test_locality_forms(self):
        expected = (LocalityTier("region", "us"), LocalityTier("zone", "a"))
        assert parse_locality([{"key": "region", "value": "us"}, {"key": "zone", "value": "a"}]) == expected
        assert parse_locality([["region", "us"], ["zone", "a"]]) == expected
        assert parse_locality({"tiers": [["region", "us"], ["zone", "a"]]}) == expected
        assert parse_locality("region=us") == ()

    @pytest.mark.parametrize("value, expected", [
        ("HEALTHY", LivenessStatus.HEALTHY),
        ("live", LivenessStatus.HEALTHY),
        ("suspect", LivenessStatus.SUSPECT),
        ("UNAVAILABLE", LivenessStatus.SUSPECT),
        (1, LivenessStatus.DEAD),
        (3, LivenessStatus.HEALTHY),
        (5, LivenessStatus.DECOMMISSIONED),
        (42, LivenessStatus.UNKNOWN),
        ("sleeping", LivenessStatus.UNKNOWN),
        (None, LivenessStatus.UNKNOWN),
    ])
    def test_liveness(self, value, expected):
        assert parse_liveness_status(value) == expected


class TestLoadSnapshot:

    def test_load_file(self, snapshot_file):
        snapshot = load_snapshot(snapshot_file)
        assert len(snapshot.statuses) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotError, match="cannot read"):
            load_snapshot(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotError, match="malformed JSON"):
            load_snapshot(path)

    def test_nan_and_overflowing_literals_dropped(self, tmp_path, caplog):
        path = tmp_path / "nonfinite.json"
        path.write_text(
            '{"nodes": [{"node_id": 1, "latencies": {"2": NaN, "3": 1e400, "4": 5000000.5}}],'
            ' "liveness": {"1": "HEALTHY"}}',
            encoding="utf-8",
        )
        with caplog.at_level(logging.WARNING):
            snapshot = load_snapshot(path)
        assert snapshot.status_by_id()[1].latencies == {4: 5000000.5}
        assert "non-finite latency toward n2" in caplog.text
        assert "non-finite latency toward n3" in caplog.text
