import io
import sys

import pytest

from hendos.getty import banner, check_credentials, main, prompt_login


def test_banner_names_system():
    text = banner()
    assert "    HendOS v0.1.0 | Terminal Interface\n" in text
    assert " Arch     : x86_64\n" in text
    assert text.endswith("\n")


def test_check_credentials_accepts_account():
    assert check_credentials("root", "password") is True


def test_check_credentials_strips_newlines():
    assert check_credentials("root\n", "password\n") is True


def test_check_credentials_rejects_wrong_pair():
    assert check_credentials("root", "secret") is False
    assert check_credentials("admin", "password") is False


def test_prompt_login_retries_until_correct():
    stdin = io.StringIO("admin\nsecret\nroot\npassword\n")
    stdout = io.StringIO()
    assert prompt_login(stdin, stdout) == "root"
    out = stdout.getvalue()
    assert out.count("Login incorrect.\n") == 1
    assert out.count("login: ") == 2


def test_prompt_login_eof_raises():
    with pytest.raises(EOFError):
        prompt_login(io.StringIO("root\n"), io.StringIO())


def test_main_logs_in_and_runs_shell(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("root\npassword\necho hi\nexit\n"))
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "Login successfull. Welcome root!\n" in out
    assert "hi\n" in out
    assert out.count("HendOS v0.1.0") == 2