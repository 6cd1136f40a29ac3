"""Small user programs: argument echoers, hello world and an argument counter."""

from __future__ import annotations

import os
import sys
from typing import Optional, Sequence

_HELLO_REPEAT = 10


def echo_args(argv: Sequence[str]) -> str:
    """Return every argument followed by a space, then a newline."""
    return "".join(f"{arg} " for arg in argv) + "\n"


def hello_world() -> str:
    """Return the greeting, printed ten times."""
    return "Hello World!\n" * _HELLO_REPEAT


def args_count(argv: Sequence[str]) -> str:
    """Return the line reporting how many arguments were given."""
    return f"arvc: {len(argv)}\n"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the program named by argv[0]; unknown names echo their arguments."""
    args = list(sys.argv if argv is None else argv)
    program = os.path.basename(args[0]) if args else ""
    if program == "helloworld":
        output = hello_world()
    elif program == "args":
        output = args_count(args)
    else:
        output = echo_args(args)
    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())