"""
Unit tests for session persistence.

Tests snapshot capture and restore, the snapshot store, save rules and
choosing the session to show on launch.
"""
import json
import logging
from datetime import datetime, timezone

import pytest
from menumines import (
    Board,
    Direction,
    GameResult,
    GameSnapshot,
    GameStatus,
    InvalidConfiguration,
    PuzzleType,
    SnapshotStore,
    StatsStore,
    restore_session,
    save_session,
)


NOW = datetime(2024, 3, 15, 12, tzinfo=timezone.utc)

MINE = {"state": "hidden", "has_mine": True, "adjacent_mines": 0, "is_exploded": False}

IMPOSSIBLE_BOARDS = {
    "all_mines": (1, 2, [[MINE, MINE]]),
    "empty_grid": (0, 0, []),
}


def snapshot_payload(rows: int, cols: int, cells) -> dict:
    """A well-formed snapshot document around the given cell grid."""
    return {
        "seed": 20240315,
        "rows": rows,
        "cols": cols,
        "cells": cells,
        "status": "playing",
        "elapsed_time": 5.0,
        "flag_count": 0,
    }


@pytest.fixture
def playing_session(session_factory, daily_board, clock):
    """A daily session twelve seconds into play with one flag."""
    session = session_factory(daily_board)
    session.reveal(0, 0)
    session.toggle_flag(8, 0)
    session.move_selection(Direction.DOWN)
    clock.advance(12)
    return session


# ============================================================================
# Snapshot Tests
# ============================================================================

class TestGameSnapshot:
    """Test capturing and rebuilding sessions."""

    def test_from_session_captures_state(self, playing_session) -> None:
        snapshot = GameSnapshot.from_session(playing_session)
        assert snapshot.seed == 20240315
        assert snapshot.status == GameStatus.PLAYING
        assert snapshot.elapsed_time == pytest.approx(12)
        assert snapshot.flag_count == 1
        assert (snapshot.selected_row, snapshot.selected_col) == (1, 0)

    def test_snapshot_is_independent_of_session(self, playing_session) -> None:
        snapshot = GameSnapshot.from_session(playing_session)
        playing_session.toggle_flag(8, 2)
        assert not snapshot.cells[8][2].is_flagged

    def test_to_session_restores_paused(self, playing_session, clock) -> None:
        restored = GameSnapshot.from_session(playing_session).to_session(clock=clock)
        assert restored.board == playing_session.board
        assert restored.status == GameStatus.PLAYING
        assert restored.is_paused is True
        assert restored.first_click_taken is True
        assert restored.flag_count == 1
        assert restored.selection == (1, 0)
        clock.advance(100)
        assert restored.elapsed_time == pytest.approx(12)

    def test_flag_count_mismatch_uses_board(self, playing_session, caplog) -> None:
        snapshot = GameSnapshot.from_session(playing_session)
        snapshot.flag_count = 5
        with caplog.at_level(logging.WARNING):
            restored = snapshot.to_session()
        assert restored.flag_count == 1
        assert "Flag count mismatch" in caplog.text

    def test_dict_round_trip(self, playing_session) -> None:
        snapshot = GameSnapshot.from_session(playing_session)
        assert GameSnapshot.from_dict(json.loads(json.dumps(snapshot.to_dict()))) == snapshot

    def test_from_dict_rejects_wrong_shape(self, playing_session) -> None:
        data = GameSnapshot.from_session(playing_session).to_dict()
        data["rows"] = 8
        with pytest.raises(ValueError):
            GameSnapshot.from_dict(data)

    @pytest.mark.parametrize("layout", sorted(IMPOSSIBLE_BOARDS))
    def test_from_dict_rejects_impossible_board(self, layout: str) -> None:
        with pytest.raises(InvalidConfiguration):
            GameSnapshot.from_dict(snapshot_payload(*IMPOSSIBLE_BOARDS[layout]))


# ============================================================================
# Snapshot Store Tests
# ============================================================================

class TestSnapshotStore:
    """Test the JSON snapshot file."""

    def test_load_missing_file(self, snapshot_store: SnapshotStore) -> None:
        assert snapshot_store.load_any_day() is None

    def test_save_and_load(self, snapshot_store, playing_session) -> None:
        snapshot = GameSnapshot.from_session(playing_session)
        assert snapshot_store.save(snapshot) is True
        assert snapshot_store.load(20240315) == snapshot

    def test_load_other_day_clears(self, snapshot_store, playing_session) -> None:
        snapshot_store.save(GameSnapshot.from_session(playing_session))
        assert snapshot_store.load(20240316) is None
        assert not snapshot_store.path.exists()

    def test_corrupt_snapshot_is_discarded(self, snapshot_store, caplog) -> None:
        snapshot_store.path.write_text('{"seed": 1}')
        with caplog.at_level(logging.WARNING):
            assert snapshot_store.load_any_day() is None
        assert not snapshot_store.path.exists()
        assert "Discarding unreadable snapshot" in caplog.text

    def test_clear_without_file(self, snapshot_store) -> None:
        snapshot_store.clear()
        assert not snapshot_store.path.exists()


# ============================================================================
# Save Rule Tests
# ============================================================================

class TestSaveSession:
    """Test which sessions get saved."""

    def test_untouched_session_not_saved(self, session_factory, daily_board, snapshot_store) -> None:
        assert save_session(session_factory(daily_board), snapshot_store) is False
        assert not snapshot_store.path.exists()

    def test_random_puzzle_not_saved(self, session_factory, snapshot_store) -> None:
        session = session_factory(Board(seed=-5), puzzle_type=PuzzleType.RANDOM)
        session.reveal(4, 4)
        assert save_session(session, snapshot_store) is False

    def test_started_daily_saved(self, playing_session, snapshot_store) -> None:
        assert save_session(playing_session, snapshot_store) is True
        assert snapshot_store.path.exists()


# ============================================================================
# Restore Tests
# ============================================================================

class TestRestoreSession:
    """Test choosing the session on launch."""

    def test_fresh_daily_without_history(self, snapshot_store, stats_store) -> None:
        session = restore_session(snapshot_store, stats_store, now=NOW)
        assert session.seed == 20240315
        assert session.status == GameStatus.NOT_STARTED
        assert session.puzzle_type == PuzzleType.DAILY

    def test_todays_snapshot_restored(
        self, playing_session, snapshot_store, stats_store, clock
    ) -> None:
        save_session(playing_session, snapshot_store)
        session = restore_session(snapshot_store, stats_store, now=NOW, clock=clock)
        assert session.status == GameStatus.PLAYING
        assert session.elapsed_time == pytest.approx(12)
        assert session.board == playing_session.board

    def test_previous_day_in_progress_restored(
        self, playing_session, snapshot_store, stats_store
    ) -> None:
        save_session(playing_session, snapshot_store)
        tomorrow = datetime(2024, 3, 16, 8, tzinfo=timezone.utc)
        session = restore_session(snapshot_store, stats_store, now=tomorrow)
        assert session.seed == 20240315
        assert session.status == GameStatus.PLAYING

    def test_previous_day_finished_is_dropped(
        self, session_factory, corner_mine_board, snapshot_store, stats_store
    ) -> None:
        session = session_factory(corner_mine_board)
        session.reveal(0, 0)
        save_session(session, snapshot_store)
        restored = restore_session(snapshot_store, stats_store, now=NOW)
        assert restored.seed == 20240315
        assert restored.status == GameStatus.NOT_STARTED
        assert not snapshot_store.path.exists()

    def test_finished_daily_rebuilt_from_stats(self, snapshot_store, stats_store) -> None:
        stats_store.record(GameResult(
            won=False, elapsed_time=33, daily_seed=20240315, flag_count=2
        ))
        session = restore_session(snapshot_store, stats_store, now=NOW)
        assert session.status == GameStatus.LOST
        assert session.elapsed_time == pytest.approx(33)
        assert session.flag_count == 2
        assert all(
            session.board.get_cell(r, c).is_revealed
            for r, c in session.board.mine_positions()
        )

    def test_continuous_play_after_daily(self, playing_session, snapshot_store, stats_store) -> None:
        save_session(playing_session, snapshot_store)
        stats_store.record(GameResult(won=True, elapsed_time=50, daily_seed=20240315))
        session = restore_session(
            snapshot_store, stats_store, now=NOW, continuous_play=True
        )
        assert session.puzzle_type == PuzzleType.RANDOM
        assert session.seed < 0
        assert not snapshot_store.path.exists()

    def test_continuous_play_before_daily(self, snapshot_store, stats_store) -> None:
        session = restore_session(
            snapshot_store, stats_store, now=NOW, continuous_play=True
        )
        assert session.puzzle_type == PuzzleType.DAILY
        assert session.seed == 20240315

    @pytest.mark.parametrize("layout", sorted(IMPOSSIBLE_BOARDS))
    def test_impossible_snapshot_is_discarded(
        self, layout, snapshot_store, stats_store, caplog
    ) -> None:
        """A saved board that cannot exist falls back to today's puzzle."""
        payload = snapshot_payload(*IMPOSSIBLE_BOARDS[layout])
        snapshot_store.path.write_text(json.dumps(payload))
        with caplog.at_level(logging.WARNING):
            session = restore_session(snapshot_store, stats_store, now=NOW)
        assert session.seed == 20240315
        assert session.status == GameStatus.NOT_STARTED
        assert not snapshot_store.path.exists()
        assert "Discarding unreadable snapshot" in caplog.text
