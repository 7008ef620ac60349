"""Tests for the Rich-backed terminal adapter."""

from __future__ import annotations

import io

from rich.console import Console

from agentloop.terminal import RichTerminal, Terminal
from tests.conftest import ScriptedTerminal


def _terminal(stdin: str) -> tuple[RichTerminal, io.StringIO]:
    out = io.StringIO()
    console = Console(file=out, width=200, color_system=None, force_terminal=False)
    return RichTerminal(console, input_stream=io.StringIO(stdin)), out


class TestRichTerminal:
    def test_read_lines_until_eof(self):
        term, out = _terminal("hello\nsecond line\n")
        assert term.read_line() == ("hello", True)
        assert term.read_line() == ("second line", True)
        assert term.read_line() == ("", False)
        assert out.getvalue().count("You: ") == 3

    def test_last_line_without_newline(self):
        term, _ = _terminal("partial")
        assert term.read_line() == ("partial", True)
        assert term.read_line() == ("", False)

    def test_crlf_stripped(self):
        term, _ = _terminal("windows\r\n")
        assert term.read_line() == ("windows", True)

    def test_write_line_prefixes_label(self):
        term, out = _terminal("")
        term.write_line("Assistant", "Hello there")
        assert out.getvalue() == "Assistant: Hello there\n"

    def test_markup_in_text_is_literal(self):
        term, out = _terminal("")
        term.write_line("Assistant", "[bold]not bold[/bold]")
        assert "[bold]not bold[/bold]" in out.getvalue()

    def test_confirm_yes(self):
        term, out = _terminal("yes\n")
        assert term.confirm("echo hi") is True
        text = out.getvalue()
        assert "Executing command: echo hi" in text
        assert "Are you sure you want to execute this command? (yes/no): " in text

    def test_confirm_case_and_whitespace(self):
        term, _ = _terminal("  YES \n")
        assert term.confirm("ls") is True

    def test_confirm_anything_else_declines(self):
        for answer in ("y\n", "no\n", "\n", "yes please\n"):
            term, _ = _terminal(answer)
            assert term.confirm("ls") is False

    def test_confirm_eof_declines(self):
        term, _ = _terminal("")
        assert term.confirm("ls") is False

    def test_trace(self):
        term, out = _terminal("")
        term.trace("read_file", '{"path":"a.txt"}')
        assert out.getvalue() == 'tool: read_file({"path":"a.txt"})\n'

    def test_banner(self):
        term, out = _terminal("")
        term.banner("claude-test")
        assert "Chat with claude-test (use 'ctrl-c' to quit)" in out.getvalue()

    def test_banner_model_name_is_literal(self):
        term, out = _terminal("")
        term.banner("model[x]")
        assert "Chat with model[x] (use" in out.getvalue()

    def test_command_output(self):
        term, out = _terminal("")
        term.show_command_output("hello\n")
        assert "Command output: hello" in out.getvalue()


class TestTerminalProtocol:
    def test_implementations_satisfy_protocol(self):
        term, _ = _terminal("")
        assert isinstance(term, Terminal)
        assert isinstance(ScriptedTerminal(), Terminal)
