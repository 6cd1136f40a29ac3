"""Login prompt that starts a shell for an authenticated user."""

from __future__ import annotations

import sys
from typing import Optional, Sequence, TextIO

from hendos.shell import Shell

_USERNAME = "root"
_PASSWORD = "password"

_BANNER = (
    r" _   _                _ _____ _____ ",
    r"| | | |              | |  _  /  ___|",
    r"| |_| | ___ _ __   __| | | | \ `--. ",
    r"|  _  |/ _ \ '_ \ / _` | | | |`--. \ ",
    r"| | | |  __/ | | | (_| \ \_/ /\__/ /",
    r"\_| |_/\___|_| |_|\__,_|\___/\____/ ",
    "    HendOS v0.1.0 | Terminal Interface",
    "--------------------------------------------------",
    " Built on : May 11, 2025",
    " Arch     : x86_64",
    "--------------------------------------------------",
)


def banner() -> str:
    """Return the greeting shown before the login prompt."""
    return "\n".join(line.rstrip() if index == 3 else line for index, line in enumerate(_BANNER)) + "\n"


def check_credentials(username: str, password: str) -> bool:
    """Return True if the pair matches the built-in account."""
    return username.rstrip("\r\n") == _USERNAME and password.rstrip("\r\n") == _PASSWORD


def _read_line(stdin: TextIO) -> str:
    line = stdin.readline()
    if not line:
        raise EOFError("end of input at login prompt")
    return line.rstrip("\r\n")


def prompt_login(stdin: TextIO, stdout: TextIO) -> str:
    """Ask for credentials until they are correct; return the user name.

    Raises EOFError when input runs out.
    """
    while True:
        stdout.write("login: ")
        stdout.flush()
        username = _read_line(stdin)
        stdout.write("password: ")
        stdout.flush()
        password = _read_line(stdin)
        if check_credentials(username, password):
            return username
        stdout.write("Login incorrect.\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Show the banner, log a user in and run a shell, over and over."""
    stdin, stdout = sys.stdin, sys.stdout
    while True:
        stdout.write(banner())
        try:
            username = prompt_login(stdin, stdout)
        except EOFError:
            stdout.write("\n")
            return 0
        stdout.write(f"Login successfull. Welcome {username}!\n")
        Shell(stdin=stdin, stdout=stdout).run()


if __name__ == "__main__":
    sys.exit(main())