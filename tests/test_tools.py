"""Tests for the built-in file and web tools."""

from __future__ import annotations

import json

import httpx
import pytest

from agentloop.toolkit.definitions import ToolContext, build_registry
from agentloop.toolkit.web import extract_text_from_html


def _invoke(registry, name, args):
    return registry.get(name).invoke(args)


# ===========================================================================
# read_file
# ===========================================================================


class TestReadFile:
    def test_reads_content(self, registry, workspace):
        (workspace / "notes.txt").write_text("line one\nline two\n")
        outcome = _invoke(registry, "read_file", {"path": "notes.txt"})
        assert outcome.ok
        assert outcome.output == "line one\nline two\n"

    def test_nested_path(self, registry, workspace):
        (workspace / "pkg").mkdir()
        (workspace / "pkg" / "mod.py").write_text("x = 1\n")
        assert _invoke(registry, "read_file", {"path": "pkg/mod.py"}).output == "x = 1\n"

    def test_missing_file(self, registry):
        outcome = _invoke(registry, "read_file", {"path": "nope.txt"})
        assert not outcome.ok
        assert outcome.output.startswith("failed to read nope.txt")

    def test_directory_is_error(self, registry, workspace):
        (workspace / "d").mkdir()
        assert not _invoke(registry, "read_file", {"path": "d"}).ok

    def test_missing_argument(self, registry):
        outcome = _invoke(registry, "read_file", {})
        assert not outcome.ok
        assert "invalid arguments for read_file" in outcome.output

    def test_json_string_arguments(self, registry, workspace):
        (workspace / "a.txt").write_text("A")
        assert _invoke(registry, "read_file", '{"path": "a.txt"}').output == "A"


# ===========================================================================
# list_files
# ===========================================================================


class TestListFiles:
    @pytest.fixture()
    def tree(self, workspace):
        (workspace / "b.txt").write_text("b")
        (workspace / "a.txt").write_text("a")
        (workspace / "src").mkdir()
        (workspace / "src" / "main.py").write_text("")
        (workspace / "src" / "lib").mkdir()
        (workspace / "src" / "lib" / "util.py").write_text("")
        return workspace

    def test_immediate_entries_sorted(self, registry, tree):
        outcome = _invoke(registry, "list_files", {"path": ""})
        assert outcome.ok
        assert json.loads(outcome.output) == ["a.txt", "b.txt", "src/"]

    def test_defaults_to_workspace(self, registry, tree):
        assert json.loads(_invoke(registry, "list_files", {}).output) == ["a.txt", "b.txt", "src/"]

    def test_subdirectory(self, registry, tree):
        entries = json.loads(_invoke(registry, "list_files", {"path": "src"}).output)
        assert entries == ["lib/", "main.py"]

    def test_recursive(self, registry, tree):
        entries = json.loads(_invoke(registry, "list_files", {"path": "src", "recursive": True}).output)
        assert entries == ["lib/", "lib/util.py", "main.py"]

    def test_empty_directory(self, registry, workspace):
        assert _invoke(registry, "list_files", {}).output == "[]"

    def test_not_a_directory(self, registry, tree):
        outcome = _invoke(registry, "list_files", {"path": "a.txt"})
        assert not outcome.ok
        assert outcome.output == "not a directory: a.txt"

    def test_missing_directory(self, registry):
        assert not _invoke(registry, "list_files", {"path": "ghost"}).ok


# ===========================================================================
# edit_file
# ===========================================================================


class TestEditFile:
    def test_replaces_all_occurrences(self, registry, workspace):
        target = workspace / "f.txt"
        target.write_text("foo bar foo")
        outcome = _invoke(registry, "edit_file", {"path": "f.txt", "old_str": "foo", "new_str": "baz"})
        assert outcome.ok
        assert outcome.output == "OK"
        assert target.read_text() == "baz bar baz"

    def test_creates_missing_file(self, registry, workspace):
        outcome = _invoke(registry, "edit_file", {"path": "new/dir/f.txt", "old_str": "", "new_str": "hello"})
        assert outcome.ok
        assert outcome.output == "Successfully created file new/dir/f.txt"
        assert (workspace / "new" / "dir" / "f.txt").read_text() == "hello"

    def test_missing_file_with_old_str(self, registry):
        outcome = _invoke(registry, "edit_file", {"path": "ghost.txt", "old_str": "a", "new_str": "b"})
        assert not outcome.ok
        assert outcome.output == "file not found: ghost.txt"

    def test_identical_strings_rejected(self, registry, workspace):
        (workspace / "f.txt").write_text("same")
        outcome = _invoke(registry, "edit_file", {"path": "f.txt", "old_str": "same", "new_str": "same"})
        assert not outcome.ok
        assert outcome.output == "invalid input parameters"
        assert (workspace / "f.txt").read_text() == "same"

    def test_empty_path_rejected(self, registry):
        outcome = _invoke(registry, "edit_file", {"path": "", "old_str": "", "new_str": "x"})
        assert outcome.output == "invalid input parameters"

    def test_old_str_absent(self, registry, workspace):
        (workspace / "f.txt").write_text("content")
        outcome = _invoke(registry, "edit_file", {"path": "f.txt", "old_str": "zzz", "new_str": "y"})
        assert not outcome.ok
        assert outcome.output == "old_str not found in file"

    def test_empty_old_str_on_existing_file(self, registry, workspace):
        (workspace / "f.txt").write_text("keep me")
        outcome = _invoke(registry, "edit_file", {"path": "f.txt", "old_str": "", "new_str": "x"})
        assert not outcome.ok
        assert (workspace / "f.txt").read_text() == "keep me"


# ===========================================================================
# fetch_url
# ===========================================================================


PAGE = """
<html>
  <head><title>Demo</title><style>body { color: red; }</style></head>
  <body>
    <script>var hidden = 1;</script>
    <h1>Hello</h1>
    <p>World   of <b>text</b></p>
  </body>
</html>
"""


def _fetch_registry(workspace, handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    ctx = ToolContext(workspace=workspace, confirm=lambda c: False, http_client=client)
    return build_registry(ctx, only=["fetch_url"]), client


class TestExtractText:
    def test_drops_script_and_style(self):
        text = extract_text_from_html(PAGE)
        assert "hidden" not in text
        assert "color" not in text
        assert text == "Demo Hello World   of text"

    def test_plain_text_passthrough(self):
        assert extract_text_from_html("just words") == "just words"


class TestFetchUrl:
    def test_success_returns_visible_text(self, workspace):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, text=PAGE, headers={"content-type": "text/html"})

        registry, client = _fetch_registry(workspace, handler)
        with client:
            outcome = registry.get("fetch_url").invoke({"url": "https://example.com/page"})
        assert outcome.ok
        assert outcome.output.startswith("Demo Hello")
        assert seen == ["https://example.com/page"]

    def test_non_200_is_error(self, workspace):
        registry, client = _fetch_registry(workspace, lambda r: httpx.Response(404))
        with client:
            outcome = registry.get("fetch_url").invoke({"url": "https://example.com/missing"})
        assert not outcome.ok
        assert outcome.output == "failed to fetch URL: 404 Not Found"

    def test_transport_error_is_error(self, workspace):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        registry, client = _fetch_registry(workspace, handler)
        with client:
            outcome = registry.get("fetch_url").invoke({"url": "https://down.example"})
        assert not outcome.ok
        assert outcome.output == "failed to fetch URL: connection refused"

    def test_empty_url(self, workspace):
        registry, client = _fetch_registry(workspace, lambda r: httpx.Response(200))
        with client:
            outcome = registry.get("fetch_url").invoke({"url": ""})
        assert outcome.output == "url cannot be empty"
