"""
Unit tests for Board class.

Tests board initialization, first-click safety, flood fill, flags,
chording, mine growth, win/lose conditions and observations.
"""
import pytest
import numpy as np
from sweeper import Board, BoardConfig, GameState


def count_mines(board: Board) -> int:
    return sum(1 for cell in board.cells if cell.is_mine)


# ============================================================================
# Board Configuration Tests
# ============================================================================

class TestBoardConfig:
    """Test board configuration validation."""

    def test_valid_config_creation(self) -> None:
        """Valid configuration should be created successfully."""
        config = BoardConfig(9, 9, 10)
        assert (config.width, config.height, config.num_mines) == (9, 9, 10)
        assert config.total_cells == 81

    def test_zero_width_raises_error(self) -> None:
        """Width of 0 should raise ValueError."""
        with pytest.raises(ValueError, match="dimensions must be positive"):
            BoardConfig(0, 9, 10)

    def test_zero_height_raises_error(self) -> None:
        """Height of 0 should raise ValueError."""
        with pytest.raises(ValueError, match="dimensions must be positive"):
            BoardConfig(9, 0, 10)

    def test_negative_mines_raises_error(self) -> None:
        """Negative mine count should raise ValueError."""
        with pytest.raises(ValueError, match="cannot be negative"):
            BoardConfig(9, 9, -1)

    def test_too_many_mines_raises_error(self) -> None:
        """More mines than cells should raise ValueError."""
        with pytest.raises(ValueError, match="Too many mines"):
            BoardConfig(3, 3, 10)


# ============================================================================
# Board Initialization Tests
# ============================================================================

class TestBoardInitialization:
    """Test board creation and initial state."""

    def test_new_board_is_playing(self, default_board: Board) -> None:
        """New board should be in playing state."""
        assert default_board.game_state == GameState.PLAYING
        assert default_board.is_game_over is False
        assert default_board.is_win is False

    def test_cells_are_row_major(self, default_board: Board) -> None:
        """Cell ids follow y * width + x."""
        assert len(default_board.cells) == 81
        for cell in default_board.cells:
            assert cell.id == cell.y * 9 + cell.x

    def test_mines_not_placed_before_first_click(
        self, default_board: Board
    ) -> None:
        """Mines should not be placed until first reveal."""
        assert count_mines(default_board) == 0
        assert default_board.first_click_done is False
        assert all(cell.adjacent == 0 for cell in default_board.cells)

    def test_mine_counts_start_equal(self, default_board: Board) -> None:
        """Live and initial mine counts start at the configured value."""
        assert default_board.mine_count == 10
        assert default_board.initial_mine_count == 10

    def test_index_helpers(self, default_board: Board) -> None:
        """index_of and coords are inverses."""
        assert default_board.index_of(4, 4) == 40
        assert default_board.coords(40) == (4, 4)

    def test_corner_has_three_neighbors(self, default_board: Board) -> None:
        """Corner cells have three neighbors, center cells eight."""
        assert sorted(default_board.neighbors(0)) == [1, 9, 10]
        assert len(default_board.neighbors(40)) == 8

    @pytest.mark.parametrize("mine", [-1, 9, 100])
    def test_from_mines_rejects_outside_indices(self, mine: int) -> None:
        """Fixed layouts may only name cells on the board."""
        with pytest.raises(ValueError, match="outside the board"):
            Board.from_mines(3, 3, [0, mine])

    def test_from_mines_accepts_last_cell(self) -> None:
        """The last index is still on the board."""
        board = Board.from_mines(3, 3, [8])
        assert board.cells[8].is_mine is True
        assert board.mine_count == 1


# ============================================================================
# First Click Tests
# ============================================================================

class TestFirstClick:
    """Test first click behavior."""

    def test_first_click_places_mines(self, default_board: Board) -> None:
        """First reveal should place exactly the configured mines."""
        default_board.reveal(40)
        assert count_mines(default_board) == 10
        assert default_board.first_click_done is True

    @pytest.mark.parametrize("seed", range(25))
    def test_first_click_neighborhood_is_safe(self, seed: int) -> None:
        """Clicked cell and its neighbors are never mines."""
        board = Board(BoardConfig(9, 9, 10), seed=seed)
        board.reveal(40)
        safe = {40, *board.neighbors(40)}
        assert not any(board.cells[i].is_mine for i in safe)
        assert board.cells[40].adjacent == 0
        assert board.is_lost is False

    @pytest.mark.parametrize("seed", range(10))
    def test_adjacent_counts_are_consistent(self, seed: int) -> None:
        """Every count matches its neighborhood; mines carry -1."""
        board = Board(BoardConfig(16, 16, 40), seed=seed)
        board.reveal(0)
        for cell in board.cells:
            if cell.is_mine:
                assert cell.adjacent == -1
            else:
                expected = sum(
                    1 for n in board.neighbors(cell.id) if board.cells[n].is_mine
                )
                assert cell.adjacent == expected

    def test_same_seed_gives_same_layout(self) -> None:
        """Seeded boards are reproducible."""
        first = Board(BoardConfig(9, 9, 10), seed=99)
        second = Board(BoardConfig(9, 9, 10), seed=99)
        first.reveal(0)
        second.reveal(0)
        assert [c.is_mine for c in first.cells] == [c.is_mine for c in second.cells]

    def test_crowded_board_clamps_mine_count(self) -> None:
        """Mines that do not fit outside the safe set are dropped."""
        board = Board(BoardConfig(3, 3, 8))
        board.reveal(4)
        assert count_mines(board) == 0
        assert board.mine_count == 0
        assert board.is_win is True


# ============================================================================
# Reveal Tests
# ============================================================================

class TestReveal:
    """Test cell revealing behavior."""

    def test_reveal_returns_true_on_success(self, default_board: Board) -> None:
        """Successful reveal should return True."""
        assert default_board.reveal(40) is True
        assert default_board.cells[40].is_revealed is True

    def test_reveal_same_cell_twice_returns_false(
        self, default_board: Board
    ) -> None:
        """Revealing same cell twice should be a no-op."""
        default_board.reveal(40)
        assert default_board.reveal(40) is False

    def test_reveal_invalid_index_returns_false(
        self, default_board: Board
    ) -> None:
        """Revealing out of range should be a no-op."""
        assert default_board.reveal(-1) is False
        assert default_board.reveal(81) is False
        assert default_board.first_click_done is False

    def test_reveal_flagged_cell_returns_false(
        self, corner_mine_board: Board
    ) -> None:
        """Cannot reveal a flagged cell."""
        corner_mine_board.toggle_flag(12)
        assert corner_mine_board.reveal(12) is False
        assert corner_mine_board.cells[12].is_revealed is False

    def test_numbered_cell_reveals_alone(self, chord_board: Board) -> None:
        """A non-zero cell does not expand."""
        chord_board.reveal(4)
        revealed = [c.id for c in chord_board.cells if c.is_revealed]
        assert revealed == [4]


# ============================================================================
# Flood Fill Tests
# ============================================================================

class TestFloodFill:
    """Test zero-region cascade behavior."""

    def test_empty_board_reveals_everything(self, empty_board: Board) -> None:
        """With no mines a single reveal uncovers the board."""
        empty_board.reveal(12)
        assert all(cell.is_revealed for cell in empty_board.cells)
        assert empty_board.is_win is True

    def test_zero_region_and_border_revealed(
        self, corner_mine_board: Board
    ) -> None:
        """The whole zero region and its numbered border are revealed."""
        corner_mine_board.reveal(24)
        for cell in corner_mine_board.cells:
            assert cell.is_revealed is (not cell.is_mine)

    def test_flags_bound_the_fill(self, corner_mine_board: Board) -> None:
        """Flagged cells are never auto-revealed."""
        corner_mine_board.toggle_flag(12)
        corner_mine_board.reveal(24)
        assert corner_mine_board.cells[12].is_revealed is False
        assert corner_mine_board.cells[12].is_flagged is True
        assert corner_mine_board.cells[0].is_revealed is False

    def test_question_marks_do_not_bound_the_fill(
        self, corner_mine_board: Board
    ) -> None:
        """Question-marked cells are revealed by the cascade."""
        corner_mine_board.toggle_flag(12)
        corner_mine_board.toggle_flag(12)
        corner_mine_board.reveal(24)
        assert corner_mine_board.cells[12].is_revealed is True
        assert corner_mine_board.cells[12].is_question is False

    def test_walled_region_stops_at_wall(self) -> None:
        """A column of mines splits the board into separate regions."""
        # Mines fill column 2 of a 5x3 board
        board = Board.from_mines(5, 3, [2, 7, 12])
        board.reveal(0)
        left = {0, 1, 5, 6, 10, 11}
        for cell in board.cells:
            assert cell.is_revealed is (cell.id in left)


# ============================================================================
# Flag Tests
# ============================================================================

class TestFlag:
    """Test flag cycling behavior."""

    def test_flag_question_unmarked_cycle(self, default_board: Board) -> None:
        """Index 5: flag, then question, then unmarked."""
        cell = default_board.cells[5]
        assert default_board.toggle_flag(5) is True
        assert cell.is_flagged is True
        default_board.toggle_flag(5)
        assert cell.is_question is True and cell.is_flagged is False
        default_board.toggle_flag(5)
        assert cell.is_hidden is True

    def test_flag_revealed_cell_fails(self, default_board: Board) -> None:
        """Cannot flag a revealed cell."""
        default_board.reveal(40)
        assert default_board.toggle_flag(40) is False

    def test_flag_invalid_index_fails(self, default_board: Board) -> None:
        """Out-of-range flags are no-ops."""
        assert default_board.toggle_flag(1000) is False

    def test_flags_placed_and_mines_remaining(
        self, default_board: Board
    ) -> None:
        """Flag counters track flags only, never below zero."""
        for index in range(12):
            default_board.toggle_flag(index)
        assert default_board.flags_placed == 12
        assert default_board.mines_remaining == 0
        default_board.toggle_flag(0)
        assert default_board.flags_placed == 11

    def test_flag_does_not_change_counts(self, chord_board: Board) -> None:
        """Flagging leaves adjacency alone."""
        before = [c.adjacent for c in chord_board.cells]
        chord_board.toggle_flag(1)
        assert [c.adjacent for c in chord_board.cells] == before


# ============================================================================
# Chord Tests
# ============================================================================

class TestChord:
    """Test chording on numbered cells."""

    def test_chord_reveals_unflagged_neighbors(self, chord_board: Board) -> None:
        """Matching flags reveal every other neighbor."""
        chord_board.reveal(4)
        chord_board.toggle_flag(0)
        chord_board.toggle_flag(2)
        assert chord_board.chord(4) is True
        for index in (1, 3, 5, 6, 7, 8):
            assert chord_board.cells[index].is_revealed is True
        assert chord_board.is_win is True

    def test_chord_with_too_few_flags_is_noop(self, chord_board: Board) -> None:
        """Mismatched flag count changes nothing."""
        chord_board.reveal(4)
        chord_board.toggle_flag(0)
        before = chord_board.get_observation()
        assert chord_board.chord(4) is False
        assert np.array_equal(chord_board.get_observation(), before)

    def test_chord_hidden_cell_is_noop(self, chord_board: Board) -> None:
        """Chording requires a revealed cell."""
        assert chord_board.chord(4) is False

    def test_chord_zero_cell_is_noop(self, chord_board: Board) -> None:
        """Chording requires a positive number."""
        chord_board.reveal(7)
        assert chord_board.chord(7) is False

    def test_misplaced_flag_loses(self, chord_board: Board) -> None:
        """A wrong flag lets the chord hit a mine and stop."""
        chord_board.reveal(4)
        chord_board.toggle_flag(0)
        chord_board.toggle_flag(1)
        assert chord_board.chord(4) is True
        assert chord_board.is_lost is True
        assert chord_board.cells[3].is_revealed is False


# ============================================================================
# Win/Lose Condition Tests
# ============================================================================

class TestGameEndConditions:
    """Test win and lose conditions."""

    def test_reveal_mine_loses_game(self, chord_board: Board) -> None:
        """Revealing a mine ends the game and discloses every mine."""
        chord_board.toggle_flag(2)
        assert chord_board.reveal(0) is True
        assert chord_board.is_lost is True
        assert chord_board.is_game_over is True
        assert chord_board.is_win is False
        assert chord_board.cells[0].is_revealed is True
        assert chord_board.cells[2].is_revealed is True
        assert chord_board.cells[2].is_flagged is True

    def test_no_commands_after_loss(self, chord_board: Board) -> None:
        """Every mutating command is a no-op once lost."""
        chord_board.reveal(0)
        before = chord_board.get_observation()
        assert chord_board.reveal(7) is False
        assert chord_board.toggle_flag(8) is False
        assert chord_board.chord(1) is False
        assert chord_board.grow_mine() is None
        assert np.array_equal(chord_board.get_observation(), before)

    def test_win_only_when_all_safe_revealed(self, chord_board: Board) -> None:
        """Win triggers on the last safe cell."""
        for index in (1, 3, 5):
            chord_board.reveal(index)
            assert chord_board.is_win is False
        chord_board.reveal(7)
        assert chord_board.revealed_safe_count == 7
        assert chord_board.is_win is True
        assert chord_board.is_game_over is True


# ============================================================================
# Mine Growth Tests
# ============================================================================

class TestGrowMine:
    """Test terrain-mode mine growth on the board."""

    def test_no_growth_before_first_click(self, default_board: Board) -> None:
        """Growth waits for mine placement."""
        assert default_board.grow_mine() is None
        assert count_mines(default_board) == 0

    def test_growth_adds_one_mine(self, corner_mine_board: Board) -> None:
        """Each growth adds exactly one mine on an unrevealed safe cell."""
        corner_mine_board.reveal(6)
        index = corner_mine_board.grow_mine()
        assert index is not None
        assert index not in (0, 6)
        assert corner_mine_board.mine_count == 2
        assert corner_mine_board.initial_mine_count == 1
        assert corner_mine_board.cells[index].adjacent == -1
        assert count_mines(corner_mine_board) == 2

    def test_growth_updates_neighbor_counts(self) -> None:
        """Neighbors of the new mine count it, including revealed ones."""
        board = Board.from_mines(3, 1, [0], seed=3)
        board.reveal(1)
        # Only index 2 is an unrevealed safe cell
        assert board.grow_mine() == 2
        assert board.cells[1].adjacent == 2

    def test_growth_never_hits_revealed_or_mined(self) -> None:
        """Repeated growth only consumes unrevealed safe cells."""
        board = Board(BoardConfig(9, 9, 10), seed=5)
        board.reveal(40)
        revealed = {c.id for c in board.cells if c.is_revealed}
        while board.is_playing:
            mines_before = {c.id for c in board.cells if c.is_mine}
            index = board.grow_mine()
            assert index not in revealed
            assert index not in mines_before
        assert board.is_win is True
        assert board.mine_count == count_mines(board)

    def test_growth_consuming_last_safe_cell_wins(self) -> None:
        """The board is won when growth takes the last hidden safe cell."""
        board = Board.from_mines(3, 1, [0], seed=3)
        board.reveal(1)
        board.grow_mine()
        assert board.is_win is True


# ============================================================================
# Observation Tests
# ============================================================================

class TestObservation:
    """Test observation array."""

    def test_observation_shape_matches_board(self) -> None:
        """Observation should be (height, width)."""
        board = Board(BoardConfig(7, 4, 3))
        obs = board.get_observation()
        assert obs.shape == (4, 7)
        assert obs.dtype == np.int8

    def test_new_board_observation_all_hidden(
        self, default_board: Board
    ) -> None:
        """New board observation should be all -1."""
        assert np.all(default_board.get_observation() == -1)

    def test_markers_in_observation(self, default_board: Board) -> None:
        """Flag shows -2 and question shows -3."""
        default_board.toggle_flag(0)
        default_board.toggle_flag(1)
        default_board.toggle_flag(1)
        obs = default_board.get_observation()
        assert obs[0, 0] == -2
        assert obs[0, 1] == -3


# ============================================================================
# Valid Actions / Reset Tests
# ============================================================================

class TestValidActionsAndReset:
    """Test action enumeration and reset."""

    def test_valid_actions_skip_revealed_and_flagged(
        self, corner_mine_board: Board
    ) -> None:
        """Only unrevealed, unflagged cells are listed."""
        corner_mine_board.toggle_flag(0)
        corner_mine_board.reveal(6)
        actions = corner_mine_board.get_valid_actions()
        assert 0 not in actions
        assert 6 not in actions
        assert len(actions) == 23

    def test_reset_restores_empty_board(self, default_board: Board) -> None:
        """Reset removes mines and restores the initial mine count."""
        default_board.reveal(40)
        default_board.grow_mine()
        default_board.reset()
        assert default_board.is_playing is True
        assert default_board.first_click_done is False
        assert default_board.mine_count == 10
        assert count_mines(default_board) == 0
        assert not any(cell.is_revealed for cell in default_board.cells)
