"""An interactive command shell with variables, exports and aliases."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, TextIO

Runner = Callable[[Sequence[str], str], int]

PROMPT = "user@system:{cwd}$ "
_WHITESPACE = " \t\n\r"
_QUOTES = "'\""

_SIGNAL_NAMES = {
    1: "Hangup",
    2: "Interrupt",
    3: "Quit",
    4: "Illegal Instruction",
    5: "Trace/breakpoint trap",
    6: "Aborted",
    7: "Buss Error",
    8: "Floating point exception",
    9: "Killed",
    10: "User defined signal 1",
    11: "Segmentation fault",
    12: "User defined signal 2",
    13: "Broken pipe",
    14: "Alarm clock",
    15: "Terminated",
    16: "Stack fault",
    19: "Stopped (signal)",
    20: "Stopped (signal)",
    21: "Stopped (tty input)",
    22: "Stopped (tty output)",
    23: "Urgent condition on socket",
    24: "CPU time limit exceeded",
    25: "File size limit exceeded",
    26: "Virtual alarm clock",
    27: "Profiling timer expired",
    30: "Power failure",
    31: "Bad system call",
}


class ShellExit(Exception):
    """Raised by the exit builtin to leave the shell."""

    def __init__(self, code: int = 0) -> None:
        super().__init__(code)
        self.code = code


def split_args(text: str) -> list[str]:
    """Split a command line into words, honouring single and double quotes.

    A quote only opens a word at the start of one; an unterminated quote runs
    to the end of the text. Empty words are dropped.
    """
    words: list[str] = []
    position = 0
    length = len(text)
    while position < length:
        while position < length and text[position] in _WHITESPACE:
            position += 1
        if position >= length:
            break

        quote = ""
        if text[position] in _QUOTES:
            quote = text[position]
            position += 1
            end = text.find(quote, position)
            if end == -1:
                end = length
        else:
            end = position
            while end < length and text[end] not in _WHITESPACE:
                end += 1

        if end > position:
            words.append(text[position:end])
        position = end
        if quote and position < length and text[position] == quote:
            position += 1
    return words


def is_valid_var_assignment(text: str) -> bool:
    """Return True if text starts with NAME= where NAME is a valid identifier."""
    if not text:
        return False
    name, sep, _ = text.partition("=")
    if not sep or not name:
        return False
    if not (name[0].isascii() and (name[0].isalpha() or name[0] == "_")):
        return False
    return all(ch.isascii() and (ch.isalnum() or ch == "_") for ch in name[1:])


def signal_to_string(signal: int) -> str:
    """Return the description of a signal number, or an empty string."""
    return _SIGNAL_NAMES.get(signal, "")


def format_exit_status(status: int) -> Optional[str]:
    """Describe a wait status; None when the command succeeded."""
    if status == 0:
        return None
    exit_code = (status >> 8) & 0xFF
    signal_num = status & 0x7F
    core_dumped = bool(status & 0x80)

    if exit_code > 0:
        return f"Exited with code {exit_code}"
    text = signal_to_string(signal_num) if signal_num > 0 else ""
    if core_dumped:
        text += " (core dumped)"
    return text


def _run_program(argv: Sequence[str], cwd: str) -> int:
    """Run a program and return its status in wait() encoding."""
    try:
        completed = subprocess.run(list(argv), cwd=cwd, check=False)
    except (FileNotFoundError, PermissionError, NotADirectoryError):
        return 127 << 8
    code = completed.returncode
    if code < 0:
        return (-code) & 0x7F
    return (code & 0xFF) << 8


@dataclass
class _Alias:
    name: str
    command: str


class Shell:
    """A line-oriented shell reading commands from stdin."""

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        cwd: Optional[str] = None,
        runner: Optional[Runner] = None,
    ) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.cwd = os.path.abspath(cwd if cwd is not None else os.getcwd())
        self.runner: Runner = runner if runner is not None else _run_program
        self.variables: dict[str, str] = {}
        self.exported: list[str] = []
        self.aliases: list[_Alias] = []

    def _print(self, text: str) -> None:
        self.stdout.write(text + "\n")

    def execute(self, line: str) -> None:
        """Run one command line. Raises ShellExit for the exit builtin."""
        self._dispatch(split_args(line), line, frozenset())

    def run(self) -> int:
        """Read and execute lines until end of input or exit; return the exit code."""
        while True:
            self.stdout.write(PROMPT.format(cwd=self.cwd))
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                return 0
            try:
                self.execute(line.rstrip("\r\n"))
            except ShellExit as exc:
                return exc.code

    def _find_alias(self, name: str) -> Optional[_Alias]:
        return next((alias for alias in self.aliases if alias.name == name), None)

    def _dispatch(self, args: list[str], line: str, expanding: frozenset) -> None:
        if not args:
            return
        command, count = args[0], len(args)

        if command == "cd":
            if count == 1:
                return
            if count > 2:
                self._print("Too many args for cd command")
                return
            target = os.path.normpath(os.path.join(self.cwd, args[1]))
            if os.path.isdir(target):
                self.cwd = target
        elif command == "echo":
            if count > 1:
                self._print(line[5:])
        elif command == "pwd":
            if count == 1:
                self._print(self.cwd)
            else:
                self._print("Too many args for pwd command")
        elif command == "export":
            if count == 1:
                for name in self.exported:
                    self._print(f"{name}={self.variables[name]}")
            elif count == 2:
                name = args[1]
                if name in self.variables and name not in self.exported:
                    self.exported.append(name)
        elif command == "exit":
            raise ShellExit(0)
        elif command == "set":
            if count == 1:
                for name, value in self.variables.items():
                    self._print(f"{name}={value}")
        elif command == "unset":
            if count == 2:
                name = args[1]
                if name in self.variables:
                    del self.variables[name]
                    if name in self.exported:
                        self.exported.remove(name)
            elif count > 2:
                self._print("Too many args for unset command")
        elif command == "alias":
            self._alias(args)
        elif command == "unalias":
            if count == 2:
                self.aliases = [a for a in self.aliases if a.name != args[1]]
        elif count == 1 and is_valid_var_assignment(line):
            name, _, value = command.partition("=")
            self.variables[name] = value
        else:
            alias = self._find_alias(command)
            if alias is not None and alias.name not in expanding:
                expanded = split_args(alias.command) + args[1:]
                self._dispatch(expanded, line, expanding | {alias.name})
                return
            message = format_exit_status(self.runner(args, self.cwd))
            if message is not None:
                self._print(message)

    def _alias(self, args: list[str]) -> None:
        if len(args) == 1:
            for alias in self.aliases:
                self._print(f"alias {alias.name} '{alias.command}'")
            return
        if len(args) < 3:
            self._print("Alias no no")
            return
        name, command = args[1], args[2]
        existing = self._find_alias(name)
        if existing is not None:
            self._print("overwriting alias")
            existing.command = command
            return
        self.aliases.append(_Alias(name, command))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start an interactive shell on the standard streams."""
    return Shell().run()


if __name__ == "__main__":
    sys.exit(main())