"""
Tests for the loa command line and interactive shell.
"""

import io
import textwrap

import pytest
from loa import __version__, Interpreter
from loa.__main__ import main
from loa.shell import Shell


@pytest.fixture
def loa_file(tmp_path):
    """Write a source file and return its path."""
    def _write(source, name="program.loa"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return str(path)
    return _write


class TestVersionAndHelp:

    def test_version(self, capsys):
        assert main(["--no-color", "--version"]) == 0
        assert capsys.readouterr().out.strip() == __version__

    def test_short_version_flag(self, capsys):
        assert main(["--no-color", "-V"]) == 0
        assert __version__ in capsys.readouterr().out

    def test_help(self, capsys):
        assert main(["--no-color", "help"]) == 0
        out = capsys.readouterr().out
        assert "Commands:" in out
        assert "run <file>" in out
        assert "repl" in out
        assert "--version" in out

    def test_no_command_prints_usage(self, capsys):
        assert main(["--no-color"]) == 1
        assert "Usage:" in capsys.readouterr().err


class TestRunCommand:

    def test_run_file(self, capsys, loa_file):
        path = loa_file("""\
            x = 2 + 3;
            if (x > 4):
                print(x)
        """)
        assert main(["--no-color", "run", path]) == 0
        assert capsys.readouterr().out == "5\n"

    def test_missing_file(self, capsys, tmp_path):
        assert main(["--no-color", "run", str(tmp_path / "nope.loa")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_syntax_error(self, capsys, loa_file):
        path = loa_file("fun f(a: int, b: int):\n    return;\n")
        assert main(["--no-color", "run", path]) == 1
        err = capsys.readouterr().err
        assert "E106" in err
        assert "Failed to parse" in err

    def test_lexer_error(self, capsys, loa_file):
        path = loa_file('print("unterminated)\n')
        assert main(["--no-color", "run", path]) == 1
        assert "E002" in capsys.readouterr().err

    def test_division_by_zero(self, capsys, loa_file):
        path = loa_file("print(1)\nx = 10 / 0;\nprint(2)\n")
        assert main(["--no-color", "run", path]) == 1
        captured = capsys.readouterr()
        assert captured.out == "1\n"
        assert "E401" in captured.err

    def test_warning_goes_to_stderr(self, capsys, loa_file):
        path = loa_file("""\
            if (0):
                print(1)
            else if (0):
                print(2)
            else:
                print(3)
        """)
        assert main(["--no-color", "run", path]) == 0
        captured = capsys.readouterr()
        assert captured.out == "3\n"
        assert "W401" in captured.err

    def test_deep_nesting_reports_diagnostic(self, capsys, loa_file):
        path = loa_file("print(" + "(" * 1000 + "1" + ")" * 1000 + ")\n")
        assert main(["--no-color", "run", path]) == 1
        err = capsys.readouterr().err
        assert "E109" in err
        assert "Traceback" not in err

    def test_long_sum(self, capsys, loa_file):
        path = loa_file("x = " + " + ".join(["2"] * 1500) + "\nprint(x)\n")
        assert main(["--no-color", "run", path]) == 0
        assert capsys.readouterr().out == "3000\n"


class TestInspectionCommands:

    def test_tokens(self, capsys, loa_file):
        path = loa_file("x = 1")
        assert main(["--no-color", "tokens", path]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0].split() == ["1", "IDENTIFIER('x')"]
        assert out[-1].split() == ["1", "EOF"]

    def test_ast(self, capsys, loa_file):
        path = loa_file("x = 1 + 2\n")
        assert main(["--no-color", "ast", path]) == 0
        out = capsys.readouterr().out
        assert "AssignStatement (line 1)" in out
        assert "operator: +" in out

    def test_ast_syntax_error(self, capsys, loa_file):
        path = loa_file("x = \n")
        assert main(["--no-color", "ast", path]) == 1


class TestShell:
    """Test the interactive shell with scripted input."""

    def run_shell(self, text):
        out, err = io.StringIO(), io.StringIO()
        shell = Shell(color=False, stdin=io.StringIO(textwrap.dedent(text)),
                      stdout=out, stderr=err)
        shell.cmdloop()
        return out.getvalue(), err.getvalue(), shell

    def test_bindings_persist(self):
        out, _, shell = self.run_shell("""\
            x = 2 + 3;
            print(x)
            exit
        """)
        assert "5\n" in out
        assert "x" in shell.interpreter.variables

    def test_prompt_shown(self):
        out, _, _ = self.run_shell("quit\n")
        assert "Loa > " in out

    def test_block_input(self):
        out, _, _ = self.run_shell("""\
            i = 0
            while (i < 2):
                print(i)
                i = i + 1

            quit
        """)
        assert "0\n1\n" in out
        assert "... " in out

    def test_block_closed_by_eof(self):
        out, _, _ = self.run_shell("if (1):\n    print(7)\n")
        assert "7\n" in out

    def test_parse_error_keeps_session(self):
        out, err, _ = self.run_shell("""\
            x = = 1
            print(4)
        """)
        assert "Parse error: failed to parse input." in err
        assert "4\n" in out

    def test_runtime_error_keeps_session(self):
        out, err, _ = self.run_shell("""\
            x = 1 / 0
            print(8)
        """)
        assert "E401" in err
        assert "8\n" in out

    def test_lexer_error_keeps_session(self):
        out, err, _ = self.run_shell('x = "open\nprint(9)\n')
        assert "E002" in err
        assert "9\n" in out

    def test_exit_as_variable_name(self):
        out, _, shell = self.run_shell("""\
            exit = 3
            print(exit)
            exit
        """)
        assert "3\n" in out

    def test_help_as_variable_name(self):
        out, _, shell = self.run_shell("""\
            help = 7;
            print(help)
            quit
        """)
        assert "7\n" in out
        assert "starts a block" not in out
        assert shell.interpreter.variables["help"].data == 7

    def test_help(self):
        out, _, _ = self.run_shell("help\nquit\n")
        assert "A line ending in ':' starts a block" in out

    def test_shared_interpreter(self):
        interp = Interpreter(out=io.StringIO(), err=io.StringIO())
        shell = Shell(interpreter=interp, color=False,
                      stdin=io.StringIO("y = 11\n"), stdout=io.StringIO())
        shell.cmdloop()
        assert interp.variables["y"].data == 11

    def test_repl_command(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("print(6 * 7)\n"))
        assert main(["--no-color", "repl"]) == 0
        assert "42" in capsys.readouterr().out
