"""Tests for kiln._errors."""

from pathlib import Path

from kiln._errors import (
    CompileError,
    ConfigError,
    KilnError,
    ReadError,
    WatchError,
    WriteError,
)


class TestErrorHierarchy:
    """All kiln errors inherit from KilnError."""

    def test_kiln_error_is_exception(self) -> None:
        assert issubclass(KilnError, Exception)

    def test_specific_errors_inherit(self) -> None:
        for error_cls in (ConfigError, ReadError, CompileError, WriteError, WatchError):
            assert issubclass(error_cls, KilnError)

    def test_catch_all_kiln_errors(self) -> None:
        """All specific errors are catchable via KilnError."""
        cause = OSError("boom")
        errors = [
            ConfigError("bad"),
            ReadError(Path("a.md")),
            CompileError(Path("a.md"), cause),
            WriteError(Path("out.html"), cause),
            WatchError(Path("content"), cause),
        ]
        for error in errors:
            try:
                raise error
            except KilnError:
                pass  # all caught by the base class


class TestErrorAttributes:
    """Errors carry the path and cause they were raised for."""

    def test_read_error_without_cause(self) -> None:
        err = ReadError(Path("layouts/missing.html"))
        assert err.path == Path("layouts/missing.html")
        assert err.cause is None
        assert "layouts/missing.html" in str(err)

    def test_read_error_with_cause(self) -> None:
        cause = FileNotFoundError("no such file")
        err = ReadError(Path("a.md"), cause)
        assert err.cause is cause
        assert "no such file" in str(err)

    def test_compile_error(self) -> None:
        cause = ValueError("bad template")
        err = CompileError(Path("content/a.md"), cause)
        assert err.path == Path("content/a.md")
        assert err.cause is cause
        assert "bad template" in str(err)

    def test_compile_error_wrapping_read_error(self) -> None:
        layout = Path("layouts/nope.html")
        err = CompileError(Path("content/a.md"), ReadError(layout))
        assert isinstance(err.cause, ReadError)
        assert err.cause.path == layout

    def test_write_error(self) -> None:
        err = WriteError(Path("dist/a/index.html"), PermissionError("denied"))
        assert err.path == Path("dist/a/index.html")
        assert "denied" in str(err)

    def test_watch_error(self) -> None:
        err = WatchError(Path("layouts"), FileNotFoundError("gone"))
        assert err.root == Path("layouts")
        assert isinstance(err.cause, FileNotFoundError)
