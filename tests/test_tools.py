import pytest

from hendos.tools import args_count, echo_args, hello_world, main


def test_echo_args_joins_with_trailing_space():
    assert echo_args(["cp", "a", "b"]) == "cp a b \n"


def test_echo_args_empty():
    assert echo_args([]) == "\n"


def test_hello_world_repeats_ten_times():
    lines = hello_world().splitlines()
    assert len(lines) == 10
    assert set(lines) == {"Hello World!"}


def test_args_count_reports_number():
    assert args_count(["args", "x", "y"]) == "arvc: 3\n"


@pytest.mark.parametrize("name", ["ls", "/bin/mkdir", "touch"])
def test_main_echoes_for_stub_tools(name, capsys):
    assert main([name, "file.txt"]) == 0
    assert capsys.readouterr().out == echo_args([name, "file.txt"])


def test_main_runs_helloworld(capsys):
    assert main(["/bin/helloworld"]) == 0
    assert capsys.readouterr().out == hello_world()


def test_main_runs_args(capsys):
    assert main(["args", "one"]) == 0
    assert capsys.readouterr().out == args_count(["args", "one"])