# hendos

The user-facing programs of a small x86_64 hobby operating system, together
with pure-Python models of the parts of its kernel that can be worked with
without hardware: descriptor tables, CPU exceptions and signals, and the
loading of executables.

## Modules

- `hendos.shell`: an interactive command shell (`Shell`) with quoting
  (`split_args`), shell variables, `export`/`unset`, `alias`/`unalias`, and
  the built-ins `cd`, `pwd`, `echo`, `set` and `exit`. Anything else is started
  as a program and, if it did not succeed, how it ended is printed
  (`format_exit_status`, `signal_to_string`), e.g.
  `"Segmentation fault (core dumped)"` or `"Exited with code 3"`.
- `hendos.getty`: the login prompt. `banner()` returns the greeting,
  `check_credentials()` checks a user name and password against the single
  built-in account, `prompt_login()` asks until the login is correct.
- `hendos.elf`: `parse_header`, `parse_program_headers` and `load_image` for
  64-bit little-endian x86_64 executables. `load_image` lays every `PT_LOAD`
  segment out into zero-filled 4 KiB pages keyed by address and raises
  `ElfError` for anything it cannot load, including dynamically linked files.
- `hendos.signals`: the `Signal` and `CpuException` numbers, interrupt gates
  (`IdtEntry`, `make_gate`, `build_idt`), the signal a CPU exception sends to
  the faulting process (`signal_for_exception`), and what a signal does to a
  process (`disposition`, `exit_status_for_signal`).
- `hendos.gdt`: segment descriptors (`GdtEntry`), the 64-bit task state
  segment (`TaskStateSegment`) and the seven-entry table from `build_gdt`.
- `hendos.tools`: `echo_args`, `hello_world` and `args_count`, the output of
  the small utility programs.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

```
hendos-shell
```

Starts the shell in the current directory. It prompts with
`user@system:<cwd>$ ` and stops at `exit` or end of input. `cd` only moves
into directories that exist; a program that cannot be started is reported as
`Exited with code 127`.

```
hendos-getty
```

Shows the banner, asks for `login:` and `password:` until they are correct,
then starts the shell; when the shell ends, the banner and prompt come back.
End of input at the prompt ends the command.

```
hendos-tools [ARG...]
```

Prints its own name and every argument, each followed by a space, then a
newline. Called under the name `helloworld` it prints `Hello World!` ten
times; under the name `args` it prints `arvc: <number of arguments>`.

## Using it as a library

```python
from hendos.shell import split_args, format_exit_status
from hendos.signals import signal_for_exception, exit_status_for_signal
from hendos.elf import load_image

split_args("echo 'hello world' x")             # ['echo', 'hello world', 'x']

sig = signal_for_exception(0xE, error_code=0)  # page fault, page not present
status = exit_status_for_signal(sig)           # Signal.SIGSEGV | 0x80
format_exit_status(status)                     # 'Segmentation fault (core dumped)'

with open("program", "rb") as f:
    image = load_image(f.read())
image.entry, sorted(image.pages)
```

## What it does not do

There is no kernel to boot here. The descriptor tables, exception handling
and ELF loading are data models: they build and decode byte layouts and
compute results, but nothing is installed on a CPU and no loaded image is
executed. There is no file system, scheduler or process table. The utility
programs in `hendos.tools` do not copy, list, move or remove files; they only
echo their arguments.