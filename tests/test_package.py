"""Tests for the vsplit package."""


def test_package_imports():
    """Test that the package can be imported successfully."""
    import vsplit

    assert vsplit is not None


def test_package_version():
    """Test that the package has a version string."""
    from vsplit import __version__

    assert __version__ == "0.1.0"


def test_public_api():
    """Test that the top-level names are exported."""
    import vsplit

    for name in (
        "CancellableContext",
        "QualityCeiling",
        "SplitExecutor",
        "SplitOptions",
        "SplitResult",
        "SplitStatus",
        "split",
    ):
        assert hasattr(vsplit, name), name


def test_errors_share_a_base():
    """Every vsplit error can be caught as VSplitError."""
    from vsplit.exceptions import (
        MediaIntrospectionError,
        NotTranscodableError,
        OperationCancelledError,
        ProcessExitError,
        ToolNotFoundError,
        VSplitError,
    )

    for error_cls in (
        MediaIntrospectionError,
        NotTranscodableError,
        OperationCancelledError,
        ToolNotFoundError,
    ):
        assert issubclass(error_cls, VSplitError)

    error = ProcessExitError("failed", returncode=2, command=("ffmpeg",), output="x")
    assert isinstance(error, VSplitError)
    assert (error.returncode, error.command, error.output) == (2, ("ffmpeg",), "x")
