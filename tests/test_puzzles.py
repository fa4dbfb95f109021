import json
import os
import struct
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from game.puzzles import PuzzleCatalog, PuzzleLoadError, resolve_puzzle_dir, write_binary_catalog
from rules.rules import BOARD_BYTES, DEFAULT_PUZZLE_DIR, PUZZLE_DIR_ENV
from sample_boards import PUZZLE, SOLUTION
from solver.constraints import is_valid_board
from solver.solver import solve_sudoku


class CatalogTestCase(unittest.TestCase):
    def setUp(self) -> None:
        temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(temp_dir.cleanup)
        self.puzzle_dir = Path(temp_dir.name)
        self.catalog = PuzzleCatalog(self.puzzle_dir)


class TestBinaryCatalog(CatalogTestCase):
    def test_reads_board_by_one_based_number(self) -> None:
        write_binary_catalog(self.puzzle_dir / "n00b.bin", [SOLUTION, PUZZLE])

        self.assertEqual(self.catalog.load("n00b", 1), SOLUTION)
        self.assertEqual(self.catalog.load("n00b", 2), PUZZLE)

    def test_layout_is_little_endian_int32_row_major(self) -> None:
        write_binary_catalog(self.puzzle_dir / "l33t.bin", [PUZZLE])
        payload = (self.puzzle_dir / "l33t.bin").read_bytes()

        self.assertEqual(len(payload), BOARD_BYTES)
        self.assertEqual(struct.unpack_from("<i", payload, 0)[0], 5)
        self.assertEqual(struct.unpack_from("<i", payload, 4)[0], 0)

    def test_rejects_truncated_file(self) -> None:
        (self.puzzle_dir / "n00b.bin").write_bytes(b"\x00" * (BOARD_BYTES - 4))
        with self.assertRaises(PuzzleLoadError):
            self.catalog.load("n00b", 1)

    def test_rejects_number_beyond_file(self) -> None:
        write_binary_catalog(self.puzzle_dir / "n00b.bin", [PUZZLE])
        with self.assertRaises(PuzzleLoadError):
            self.catalog.load("n00b", 2)

    def test_rejects_out_of_range_values(self) -> None:
        values = [0] * 81
        values[10] = 12
        (self.puzzle_dir / "n00b.bin").write_bytes(struct.pack("<81i", *values))
        with self.assertRaises(PuzzleLoadError):
            self.catalog.load("n00b", 1)

    def test_binary_wins_over_json(self) -> None:
        write_binary_catalog(self.puzzle_dir / "debug.bin", [SOLUTION])
        (self.puzzle_dir / "debug.json").write_text(json.dumps({"boards": [PUZZLE]}), encoding="utf-8")
        self.assertEqual(self.catalog.load("debug", 1), SOLUTION)


class TestJsonCatalog(CatalogTestCase):
    def test_reads_string_and_list_boards(self) -> None:
        text = "".join(str(value) for row in PUZZLE for value in row).replace("0", ".")
        (self.puzzle_dir / "debug.json").write_text(json.dumps({"boards": [text, SOLUTION]}), encoding="utf-8")

        self.assertEqual(self.catalog.load("debug", 1), PUZZLE)
        self.assertEqual(self.catalog.load("debug", 2), SOLUTION)

    def test_rejects_invalid_json(self) -> None:
        (self.puzzle_dir / "debug.json").write_text("{ not valid json", encoding="utf-8")
        with self.assertRaises(PuzzleLoadError):
            self.catalog.load("debug", 1)

    def test_rejects_missing_boards_list(self) -> None:
        (self.puzzle_dir / "debug.json").write_text(json.dumps({"level": "debug"}), encoding="utf-8")
        with self.assertRaises(PuzzleLoadError):
            self.catalog.load("debug", 1)

    def test_rejects_short_board_text(self) -> None:
        (self.puzzle_dir / "debug.json").write_text(json.dumps({"boards": ["123"]}), encoding="utf-8")
        with self.assertRaises(PuzzleLoadError):
            self.catalog.load("debug", 1)

    def test_rejects_board_with_conflicting_givens(self) -> None:
        broken = [row[:] for row in PUZZLE]
        broken[0][1] = 5
        (self.puzzle_dir / "debug.json").write_text(json.dumps({"boards": [broken]}), encoding="utf-8")
        with self.assertRaises(PuzzleLoadError):
            self.catalog.load("debug", 1)


class TestCatalogBounds(CatalogTestCase):
    def test_board_counts_per_level(self) -> None:
        self.assertEqual(self.catalog.board_count("debug"), 9)
        self.assertEqual(self.catalog.board_count("n00b"), 1024)
        self.assertEqual(self.catalog.board_count("l33t"), 1024)

    def test_rejects_unknown_level(self) -> None:
        with self.assertRaises(PuzzleLoadError):
            self.catalog.board_count("expert")

    def test_rejects_numbers_outside_catalog(self) -> None:
        for number in (0, 10, -1):
            with self.assertRaises(PuzzleLoadError):
                self.catalog.load("debug", number)

    def test_missing_catalog_is_a_load_error(self) -> None:
        with self.assertRaises(PuzzleLoadError):
            self.catalog.load("l33t", 1)

    def test_load_errors_are_value_errors(self) -> None:
        self.assertTrue(issubclass(PuzzleLoadError, ValueError))


class TestPuzzleDirectory(unittest.TestCase):
    def test_explicit_directory_wins(self) -> None:
        with mock.patch.dict(os.environ, {PUZZLE_DIR_ENV: "/from/env"}):
            self.assertEqual(resolve_puzzle_dir("/explicit"), Path("/explicit"))

    def test_environment_overrides_default(self) -> None:
        with mock.patch.dict(os.environ, {PUZZLE_DIR_ENV: "/from/env"}):
            self.assertEqual(resolve_puzzle_dir(), Path("/from/env"))

    def test_default_directory(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(resolve_puzzle_dir(), DEFAULT_PUZZLE_DIR)


class TestShippedDebugCatalog(unittest.TestCase):
    def test_every_debug_board_loads_and_solves(self) -> None:
        catalog = PuzzleCatalog(DEFAULT_PUZZLE_DIR)
        for number in range(1, catalog.board_count("debug") + 1):
            board = catalog.load("debug", number)
            self.assertTrue(is_valid_board(board))
            solution = solve_sudoku(board)
            for r in range(9):
                for c in range(9):
                    if board[r][c]:
                        self.assertEqual(solution[r][c], board[r][c])


if __name__ == "__main__":
    unittest.main()
