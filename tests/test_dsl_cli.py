"""
Tests for the turtle-language command line.
"""

from pathlib import Path

import ezdxf
import pytest

from logoplot.dsl.__main__ import main

SQUARE = '''// a square
PENDOWN
MAKE "i "0
WHILE LT :i "4 [
    FORWARD "100
    TURN "90
    ADDASSIGN "i "1
]
'''


@pytest.fixture
def script(tmp_path):
    """Write a script to a temporary file and return its path."""
    def write(text, name="script.lg"):
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return write


class TestRun:
    """Test the run command."""

    def test_run_writes_dxf(self, script, tmp_path, capsys):
        """A good script produces a DXF file with its lines."""
        out = tmp_path / "square"
        assert main(["run", script(SQUARE), str(out)]) == 0
        assert "4 segment(s)" in capsys.readouterr().out
        doc = ezdxf.readfile(str(out) + ".dxf")
        assert len(list(doc.modelspace().query("LINE"))) == 4

    def test_run_with_size(self, script, tmp_path):
        """Canvas size may be given."""
        out = tmp_path / "big.dxf"
        assert main(["run", script('PENDOWN FORWARD "400'), str(out), "1000", "1000"]) == 0
        assert out.exists()

    def test_run_width_without_height(self, script, tmp_path, capsys):
        """WIDTH and HEIGHT come as a pair."""
        assert main(["run", script("PENUP"), str(tmp_path / "x"), "100"]) == 1
        assert "together" in capsys.readouterr().err

    def test_run_bad_size(self, script, tmp_path, capsys):
        """Canvas dimensions must be positive."""
        assert main(["run", script("PENUP"), str(tmp_path / "x"), "0", "10"]) == 1
        assert "bad canvas dimension" in capsys.readouterr().err

    def test_run_syntax_error(self, script, tmp_path, capsys):
        """Syntax errors exit 1 and print diagnostics."""
        out = tmp_path / "bad"
        assert main(["run", script('FORWARD "10 "20'), str(out)]) == 1
        assert "E105" in capsys.readouterr().err
        assert not (tmp_path / "bad.dxf").exists()

    def test_run_runtime_error(self, script, tmp_path, capsys):
        """Runtime errors exit 1 and write nothing."""
        out = tmp_path / "bad"
        assert main(["run", script('PENDOWN FORWARD "1000'), str(out)]) == 1
        assert "E406" in capsys.readouterr().err
        assert not (tmp_path / "bad.dxf").exists()

    def test_run_contain_block_errors(self, script, tmp_path, capsys):
        """Contained errors are printed as warnings and the run succeeds."""
        source = 'IF EQ "1 "1 [ FORWARD :nope PENDOWN FORWARD "10 ]'
        out = tmp_path / "contained"
        assert main(["run", script(source), str(out)]) == 1
        assert main(["run", "--contain-block-errors", script(source), str(out)]) == 0
        assert "W401" in capsys.readouterr().err
        assert (tmp_path / "contained.dxf").exists()

    def test_missing_file(self, tmp_path, capsys):
        assert main(["run", str(tmp_path / "nope.lg"), str(tmp_path / "out")]) == 1
        assert "File not found" in capsys.readouterr().err


class TestCheck:
    """Test the check command."""

    def test_check_ok(self, script, capsys):
        """Statement count is reported."""
        assert main(["check", script(SQUARE)]) == 0
        assert "3 statement(s)" in capsys.readouterr().out

    def test_check_error(self, script, capsys):
        """Syntax errors are reported with their location."""
        assert main(["check", script("PENDOWN\nforward")]) == 1
        err = capsys.readouterr().err
        assert "E101" in err
        assert "E001" in err
        assert ":2:1" in err

    def test_check_ast(self, script, capsys):
        """--ast prints the tree."""
        assert main(["check", "--ast", script('FORWARD "1')]) == 0
        assert "TurtleCommand" in capsys.readouterr().out

    def test_check_json(self, script, capsys):
        """--json prints machine-readable diagnostics."""
        assert main(["check", "--json", script('IF EQ "1 "1 [ ]')]) == 1
        out = capsys.readouterr().out
        assert '"code": "E106"' in out
        assert '"error_count": 1' in out


class TestTokens:
    """Test the tokens command."""

    def test_tokens(self, script, capsys):
        """Tokens are listed with positions."""
        assert main(["tokens", script('PENDOWN FORWARD "100')]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0].split("\t")[:2] == ["1:1", "PENDOWN"]
        assert out[2].split("\t")[:2] == ["1:17", "WORD"]
        assert out[-1].split("\t")[1] == "EOF"

    def test_error_tokens_marked(self, script, capsys):
        """Unrecognized input is marked and the exit code is 1."""
        assert main(["tokens", script("PENUP ?")]) == 1
        assert "<-- unrecognized input" in capsys.readouterr().out


class TestVerbose:
    """Test logging control."""

    def test_verbose_logs_statements(self, script, tmp_path, capsys):
        """-v logs interpreter activity to stderr."""
        assert main(["-v", "run", script('PENDOWN FORWARD "10'), str(tmp_path / "v")]) == 0
        err = capsys.readouterr().err
        assert "DEBUG logoplot.dsl.runtime.interpreter" in err
        assert "INFO logoplot.ezdxf_drawable" in err


class TestExampleScripts:
    """The scripts shipped in examples/ run cleanly."""

    EXAMPLES = Path(__file__).resolve().parent.parent / "examples"

    def test_examples_present(self):
        assert sorted(p.name for p in self.EXAMPLES.glob("*.lg")) == [
            "flower.lg", "spiral.lg", "square.lg",
        ]

    def test_square(self, tmp_path):
        assert main(["run", str(self.EXAMPLES / "square.lg"), str(tmp_path / "square")]) == 0
        doc = ezdxf.readfile(str(tmp_path / "square.dxf"))
        assert len(list(doc.modelspace().query("LINE"))) == 4

    def test_flower(self, tmp_path):
        assert main(["run", str(self.EXAMPLES / "flower.lg"), str(tmp_path / "flower")]) == 0
        doc = ezdxf.readfile(str(tmp_path / "flower.dxf"))
        assert len(list(doc.modelspace().query("LINE"))) == 48

    def test_spiral(self, tmp_path):
        out = tmp_path / "spiral.dxf"
        assert main(["run", str(self.EXAMPLES / "spiral.lg"), str(out), "800", "800"]) == 0
        doc = ezdxf.readfile(str(out))
        assert len(list(doc.modelspace().query("LINE"))) == 94
