"""Tests for board construction and the connectivity helpers."""

from encore.board_manager import BoardManager
from encore.boards import OFFICIAL_BOARDS
from encore.models import GameColor, Position


def pos(row, col):
    return Position(row=row, col=col)


def keys(positions):
    return {(p.row, p.col) for p in positions}


class TestCreateBoard:

    def test_dimensions_and_labels(self, board_factory):
        board = board_factory()
        assert len(board) == 7
        assert all(len(row) == 15 for row in board)
        assert board[0][0].column == "A"
        assert board[3][7].column == "H"
        assert board[6][14].column == "O"
        assert board[4][2].row == 4

    def test_stars_and_colors_follow_configuration(self, board_factory):
        board = board_factory()
        config = OFFICIAL_BOARDS["classic"]
        stars = keys(config.star_positions)
        for r, row in enumerate(board):
            for c, square in enumerate(row):
                assert square.color == config.color_layout[r][c]
                assert square.has_star == ((r, c) in stars)
                assert not square.crossed


class TestFindConnectedGroup:

    def test_single_square_component(self, board_factory):
        board = board_factory()
        group = BoardManager.find_connected_group(0, 7, GameColor.GREEN, board)
        assert group == [pos(0, 7)]

    def test_maximal_component_in_bfs_order(self, board_factory):
        board = board_factory()
        group = BoardManager.find_connected_group(5, 7, GameColor.YELLOW, board)
        assert group == [pos(5, 7), pos(6, 7), pos(5, 8), pos(6, 8), pos(6, 9)]

    def test_same_component_from_any_start(self, board_factory):
        board = board_factory()
        a = BoardManager.find_connected_group(5, 7, GameColor.YELLOW, board)
        b = BoardManager.find_connected_group(6, 9, GameColor.YELLOW, board)
        assert keys(a) == keys(b)
        assert len(b) == len(keys(b))

    def test_wrong_color_returns_empty(self, board_factory):
        board = board_factory()
        assert BoardManager.find_connected_group(5, 7, GameColor.RED, board) == []

    def test_crossed_start_returns_empty(self, board_factory):
        board = board_factory(crossed=[(5, 7)])
        assert BoardManager.find_connected_group(5, 7, GameColor.YELLOW, board) == []

    def test_out_of_bounds_returns_empty(self, board_factory):
        board = board_factory()
        assert BoardManager.find_connected_group(7, 0, GameColor.YELLOW, board) == []
        assert BoardManager.find_connected_group(0, -1, GameColor.GREEN, board) == []

    def test_crossed_square_splits_component(self, board_factory):
        board = board_factory(crossed=[(6, 8)])
        group = BoardManager.find_connected_group(5, 7, GameColor.YELLOW, board)
        assert keys(group) == {(5, 7), (6, 7), (5, 8)}
        assert BoardManager.find_connected_group(6, 9, GameColor.YELLOW, board) == [
            pos(6, 9)
        ]


class TestComponents:

    def test_official_boards_have_sizes_one_to_six(self, board_factory):
        for board_id in OFFICIAL_BOARDS:
            board = board_factory(board_id)
            for color in BoardManager.board_colors(board):
                sizes = sorted(
                    len(c) for c in BoardManager.find_connected_components(board, color)
                )
                assert sizes == [1, 2, 3, 4, 5, 6], (board_id, color)

    def test_components_in_row_major_order(self, board_factory):
        board = board_factory()
        components = BoardManager.find_connected_components(board, GameColor.YELLOW)
        firsts = [(c[0].row, c[0].col) for c in components]
        assert firsts == sorted(firsts)
        assert firsts[0] == (0, 3)

    def test_purple_absent(self, board_factory):
        board = board_factory()
        assert BoardManager.find_connected_components(board, GameColor.PURPLE) == []
        assert GameColor.PURPLE not in BoardManager.board_colors(board)
        assert not BoardManager.is_color_complete(board, GameColor.PURPLE)


class TestIsConnected:

    def test_adjacent_pair(self):
        assert BoardManager.is_connected([pos(5, 7), pos(5, 8)])

    def test_gap_is_not_bridged(self):
        # Both squares belong to the same yellow component on the board.
        assert not BoardManager.is_connected([pos(5, 7), pos(6, 9)])

    def test_diagonal_is_not_adjacent(self):
        assert not BoardManager.is_connected([pos(5, 7), pos(6, 8)])

    def test_empty(self):
        assert not BoardManager.is_connected([])


class TestCounts:

    def test_uncrossed_counts(self, board_factory):
        board = board_factory(crossed=[(5, 7), (6, 7)])
        assert BoardManager.count_uncrossed_for_color(board, GameColor.YELLOW) == 19
        assert BoardManager.count_uncrossed_in_column(board, 7) == 5

    def test_column_complete(self, board_factory):
        board = board_factory(crossed=[(r, 0) for r in range(7)])
        assert BoardManager.is_column_complete(board, 0)
        assert not BoardManager.is_column_complete(board, 1)

    def test_color_complete(self, board_factory):
        board = board_factory()
        yellow = [
            (r, c) for r, row in enumerate(board) for c, sq in enumerate(row)
            if sq.color == GameColor.YELLOW
        ]
        assert len(yellow) == 21
        for r, c in yellow[:-1]:
            board[r][c].crossed = True
        assert not BoardManager.is_color_complete(board, GameColor.YELLOW)
        r, c = yellow[-1]
        board[r][c].crossed = True
        assert BoardManager.is_color_complete(board, GameColor.YELLOW)

    def test_cross_squares_counts_stars(self, board_factory):
        board = board_factory()
        # (0, 7) carries a star, (1, 7) does not.
        stars = BoardManager.cross_squares([pos(0, 7), pos(1, 7)], board)
        assert stars == 1
        assert board[0][7].crossed and board[1][7].crossed

    def test_touches_crossed_any_color(self, board_factory):
        board = board_factory(crossed=[(1, 3)])
        assert BoardManager.touches_crossed(pos(1, 2), board)
        assert not BoardManager.touches_crossed(pos(6, 14), board)

    def test_neighbors_clip_to_board(self, board_factory):
        board = board_factory()
        assert keys(BoardManager.neighbors(0, 0, board)) == {(1, 0), (0, 1)}
        assert len(BoardManager.neighbors(3, 7, board)) == 4
