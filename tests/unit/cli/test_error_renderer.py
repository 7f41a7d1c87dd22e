"""Tests for ErrorView and ErrorRenderer."""

from io import StringIO
from unittest.mock import patch

from rich.console import Console

from rtrebuild.cli.console import ErrorRenderer, ErrorView, UNEXPECTED_ERROR_CODE
from rtrebuild.core.exceptions import PreconditionError, UpstreamQueryError


def make_console() -> Console:
    return Console(file=StringIO(), force_terminal=False, width=120)


class TestErrorView:
    """Tests for ErrorView.from_exception."""

    def test_rebuild_error(self) -> None:
        exc = PreconditionError("Index [rt_docs] not present", index="rt_docs")

        view = ErrorView.from_exception(exc)

        assert view.code == "RT-PRE-001"
        assert view.message == "Index [rt_docs] not present (index=rt_docs)"
        assert view.fixes == PreconditionError.how_to_fix
        assert view.statement is None
        assert view.root_cause is None

    def test_statement_and_root_cause(self) -> None:
        try:
            try:
                raise OSError("connection refused")
            except OSError as e:
                raise UpstreamQueryError("failed", statement="SELECT 1") from e
        except UpstreamQueryError as exc:
            view = ErrorView.from_exception(exc)

        assert view.statement == "SELECT 1"
        assert view.root_cause == "OSError: connection refused"

    def test_unexpected_error(self) -> None:
        view = ErrorView.from_exception(KeyError("id"))

        assert view.code == UNEXPECTED_ERROR_CODE
        assert view.message.startswith("KeyError")


class TestErrorRenderer:
    """Tests for ErrorRenderer.render."""

    def test_panel_contents(self) -> None:
        console = make_console()
        exc = UpstreamQueryError("write failed", statement="REPLACE INTO rt (id) VALUES (:id)")

        with patch("rtrebuild.cli.console.get_console", return_value=console):
            ErrorRenderer.render(exc, context="While rebuilding rt", show_traceback=False)

        output = console.file.getvalue()
        assert "Error: RT-UPS-001" in output
        assert "While rebuilding rt" in output
        assert "REPLACE INTO rt (id) VALUES (:id)" in output
        assert "How to fix:" in output
        assert "Traceback" not in output

    def test_traceback_when_requested(self) -> None:
        console = make_console()
        try:
            raise ValueError("boom")
        except ValueError as exc:
            with patch("rtrebuild.cli.console.get_console", return_value=console):
                ErrorRenderer.render(exc, show_traceback=True)

        output = console.file.getvalue()
        assert "RT-ERR-999" in output
        assert "Traceback" in output
