#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command-line tests for *placemacro*.

The façade `PlaceMacro.run` is driven with in-memory stdin/stdout so no
subprocess is needed; `main` is checked for its exit codes.
"""
from __future__ import annotations

import io
import sys
import tempfile
import unittest
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from placemacro.cli import PlaceMacro, main  # noqa: E402
from placemacro.errors import EmptySequence, ExpansionLimitExceeded  # noqa: E402


# --------------------------------------------------------------------------- #
#  Helpers                                                                    #
# --------------------------------------------------------------------------- #
class CliBaseTest(unittest.TestCase):
    def _run(self, argv, text: str = "") -> str:
        out = io.StringIO()
        PlaceMacro.run(argv, stdin=io.StringIO(text), stdout=out)
        return out.getvalue()


# --------------------------------------------------------------------------- #
#  1. Input / output                                                          #
# --------------------------------------------------------------------------- #
class CliIOTests(CliBaseTest):
    def test_reads_stdin_by_default(self) -> None:
        self.assertEqual(self._run([], "fn __ident__(a _ b)() {}"), "fn a_b() {}\n")

    def test_reads_file_and_writes_output(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            src = Path(td, "in.rs")
            src.write_text('const X: &str = __str__(hello " " world);', encoding="utf-8")
            dst = Path(td, "out", "x.rs")
            returned = PlaceMacro.run([str(src), "-o", str(dst)], stdout=io.StringIO())
            self.assertEqual(dst.read_text(encoding="utf-8"), 'const X : & str = "hello world";\n')
            self.assertEqual(returned, dst.read_text(encoding="utf-8"))

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                PlaceMacro.run([str(Path(td, "nope.rs"))])

    def test_preserve_lines(self) -> None:
        out = self._run(["-l"], "a\n    __str__(b)\nc")
        self.assertEqual(out, 'a\n    "b"\nc\n')


# --------------------------------------------------------------------------- #
#  2. Expansion flags                                                         #
# --------------------------------------------------------------------------- #
class CliExpansionTests(CliBaseTest):
    SRC = "__id__(__id__(__str__(x)))"

    def test_single_pass_by_default(self) -> None:
        self.assertEqual(self._run([], self.SRC), "__id__(__str__(x))\n")

    def test_passes(self) -> None:
        self.assertEqual(self._run(["-p", "3"], self.SRC), '"x"\n')

    def test_until_stable(self) -> None:
        self.assertEqual(self._run(["--until-stable"], self.SRC), '"x"\n')
        with self.assertRaises(ExpansionLimitExceeded):
            self._run(["-u", "--max-passes", "2"], self.SRC)

    def test_max_steps(self) -> None:
        with self.assertRaises(ExpansionLimitExceeded):
            self._run(["--max-steps", "1"], "__str__(a) __str__(b)")

    def test_rejects_non_positive_limits(self) -> None:
        with self.assertRaises(SystemExit):
            self._run(["-p", "0"], "")


# --------------------------------------------------------------------------- #
#  3. Failures                                                                #
# --------------------------------------------------------------------------- #
class CliErrorTests(CliBaseTest):
    def test_compile_errors_are_written_before_raising(self) -> None:
        out = io.StringIO()
        with self.assertRaises(EmptySequence):
            PlaceMacro.run(["-e"], stdin=io.StringIO("__head__()"), stdout=out)
        self.assertTrue(out.getvalue().startswith('compile_error!("`head` needs at least one token'))

    def test_main_exit_codes(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            good = Path(td, "good.rs")
            good.write_text("__str__(ok)", encoding="utf-8")
            bad = Path(td, "bad.rs")
            bad.write_text("__tail__()", encoding="utf-8")
            out = Path(td, "out.rs")

            with self.assertRaises(SystemExit) as cm:
                main([str(good), "-o", str(out)])
            self.assertEqual(cm.exception.code, 0)
            self.assertEqual(out.read_text(encoding="utf-8"), '"ok"\n')

            with self.assertRaises(SystemExit) as cm:
                main([str(bad)])
            self.assertEqual(cm.exception.code, 1)

            with self.assertRaises(SystemExit) as cm:
                main([str(Path(td, "missing.rs"))])
            self.assertEqual(cm.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
