import contextlib
import io
import tempfile
import unittest
from pathlib import Path

from bigratio import RationalNumber
from bigratio.cli import main, nilakantha_pi, parse_argument


def run_cli(*argv):
    stdout = io.StringIO()
    stderr = io.StringIO()
    with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
        code = main(list(argv))
    return code, stdout.getvalue().splitlines(), stderr.getvalue()


class NilakanthaTests(unittest.TestCase):
    def test_partial_sums(self):
        self.assertEqual(nilakantha_pi(0), RationalNumber(3))
        self.assertEqual(nilakantha_pi(1), RationalNumber(19, 6))
        self.assertEqual(nilakantha_pi(2), RationalNumber(47, 15))


class CommandLineTests(unittest.TestCase):
    def test_parse_argument(self):
        self.assertEqual(parse_argument("3/4"), RationalNumber(3, 4))
        self.assertEqual(parse_argument("-0.75"), RationalNumber(-3, 4))

    def test_show(self):
        code, lines, _ = run_cli("show", "6/4")
        self.assertEqual(code, 0)
        self.assertEqual(
            lines,
            ["decimal:  1.5", "fraction: 3/2", 'json:     "3/2"'],
        )

    def test_root_and_power(self):
        code, lines, _ = run_cli("--precision", "4", "root", "2", "2")
        self.assertEqual((code, lines), (0, ["1.4142"]))
        code, lines, _ = run_cli("power", "2", "-1")
        self.assertEqual((code, lines), (0, ["0.5"]))
        code, lines, _ = run_cli("power", "9/4", "0.5")
        self.assertEqual((code, lines), (0, ["1.5"]))

    def test_pi(self):
        code, lines, _ = run_cli("--precision", "3", "pi", "--terms", "2")
        self.assertEqual((code, lines), (0, ["3.133"]))

    def test_errors_are_reported(self):
        code, lines, stderr = run_cli("root", "-1", "2")
        self.assertEqual(code, 1)
        self.assertEqual(lines, [])
        self.assertIn("Error:", stderr)

        code, _, stderr = run_cli("show", "1/0")
        self.assertEqual(code, 1)
        self.assertIn("Error:", stderr)

    def test_parfile(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            parfile = Path(tmpdir) / "parfile"
            parfile.write_text("precision = 3\n")
            code, lines, _ = run_cli("--parfile", str(parfile), "show", "1/3")
        self.assertEqual(code, 0)
        self.assertEqual(lines[0], "decimal:  0.333")


if __name__ == "__main__":  # pragma: no cover - direct execution helper
    unittest.main()
