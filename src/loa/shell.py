"""Interactive mode for the Loa interpreter. Uses cmd as backend."""

import cmd
import sys
from typing import List, Optional

from termcolor import colored

from .errors import LexerError, LoaRuntimeError
from .runtime import Interpreter, run


class Shell(cmd.Cmd):
    """
    Loa interpreter shell.

    Each input is run on the same Interpreter, so bindings persist between
    inputs. A line ending in ':' opens a block; following lines are
    collected until a blank line, then run together.
    """
    intro = "Loa interactive mode. Type 'exit' or 'quit' to leave, 'help' for help."
    prompt = "Loa > "
    secondary_prompt = "... "   # used for block continuations
    _tmp_prompt = "Loa > "      # restored after a block is run

    def __init__(self, interpreter: Optional[Interpreter] = None, color: bool = True,
                 stdin=None, stdout=None, stderr=None):
        super().__init__(stdin=stdin, stdout=stdout)
        if stdin is not None:
            self.use_rawinput = False
        self.stderr = stderr if stderr is not None else sys.stderr
        self.color = color
        self.interpreter = interpreter or Interpreter(out=self.stdout, err=self.stderr)
        self._block: List[str] = []

    def _paint(self, text: str, color: str) -> str:
        return colored(text, color, attrs=["bold"], no_color=not self.color)

    def _error(self, text: str) -> None:
        print(self._paint(text, "red"), file=self.stderr)

    def run_source(self, source: str) -> None:
        """Run one input; errors are reported and the session continues."""
        try:
            if not run(source, self.interpreter, err=self.stderr):
                self._error("Parse error: failed to parse input.")
        except LexerError as e:
            self._error(str(e))
        except LoaRuntimeError as e:
            self._error(str(e))

    def _flush_block(self) -> None:
        source = "\n".join(self._block) + "\n"
        self._block = []
        self.prompt = self._tmp_prompt
        self.run_source(source)

    def onecmd(self, line):
        """Collect block lines verbatim while a block is open."""
        if self._block:
            if line == "EOF":
                self._flush_block()
                return self.do_EOF("")
            if line.strip():
                self._block.append(line)
                return False
            self._flush_block()
            return False
        return super().onecmd(line)

    def default(self, line):
        """Executes arbitrary Loa input."""
        if line.rstrip().endswith(":"):
            self._block = [line]
            self.prompt = self.secondary_prompt
            return
        self.run_source(line)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_help(self, arg):
        """Prints a short intro instead of command docs."""
        if arg.strip():
            # e.g. 'help = 7' is an assignment, not a command
            return self.default(self.lastcmd)
        print("Type Loa statements to run them, for example:\n\n"
              "    x = 2 + 3;\n"
              "    print(x)\n\n"
              "A line ending in ':' starts a block; indent the body and finish\n"
              "it with an empty line. Bindings are kept until you leave with\n"
              "'exit' or 'quit'.", file=self.stdout)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg.strip():
            # e.g. 'exit = 1' is an assignment, not a command
            return self.default(self.lastcmd)
        return True

    do_quit = do_exit

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return True
