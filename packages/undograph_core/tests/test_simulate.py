"""Tests for the random history generator."""
from __future__ import annotations

import pytest

from undograph_core.ingest import ingest
from undograph_core.simulate import simulate_history


class TestSimulateHistory:
    """Tests for simulate_history function."""

    def test_reproducible_with_seed(self) -> None:
        """Test that a seed fixes the generated history."""
        first = simulate_history(30, undo_chance=0.4, seed=7, start_time=0.0)
        second = simulate_history(30, undo_chance=0.4, seed=7, start_time=0.0)
        assert first == second

    def test_no_undo_is_linear(self) -> None:
        """Test that zero undo chance produces a chain."""
        records = simulate_history(5, undo_chance=0.0, seed=1, start_time=0.0)
        assert [record["parent_seq"] for record in records] == [0, 1, 2, 3, 4]

    def test_last_change_is_current(self) -> None:
        """Test that the newest change is flagged current."""
        records = simulate_history(8, undo_chance=0.5, seed=3, start_time=0.0)
        assert [record["seq"] for record in records if record["is_current"]] == [8]

    def test_times_increase(self) -> None:
        """Test that changes are spaced by step_seconds."""
        records = simulate_history(3, seed=0, start_time=100.0, step_seconds=2.0)
        assert [record["time"] for record in records] == [102.0, 104.0, 106.0]

    def test_zero_nodes(self) -> None:
        """Test that an empty simulation yields no records."""
        assert simulate_history(0, seed=0) == []

    def test_ingestible(self) -> None:
        """Test that every simulated history is a valid tree."""
        for seed in range(5):
            tree = ingest(simulate_history(50, undo_chance=1.0, seed=seed, start_time=0.0))
            assert tree.total == 51

    @pytest.mark.parametrize(("num_nodes", "undo_chance"), [(-1, 0.1), (5, -0.1), (5, 1.5)])
    def test_rejects_bad_arguments(self, num_nodes: int, undo_chance: float) -> None:
        """Test argument validation."""
        with pytest.raises(ValueError):
            simulate_history(num_nodes, undo_chance=undo_chance)
