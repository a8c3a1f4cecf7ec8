"""Tests for CodedError construction and rendering."""

import pickle

from svckit.errors import CodedError, ErrCode, format_chain, with_code, wrap_c


class TestWrapC:
    """Tests for wrap_c and with_code."""

    def test_wrap_sets_fields(self):
        """Test that wrapping records code, message and cause."""
        cause = OSError("read: end of input")
        err = wrap_c(cause, 1003, "could not read configuration file")

        assert isinstance(err, CodedError)
        assert err.code == 1003
        assert err.message == "could not read configuration file"
        assert err.cause is cause
        assert err.__cause__ is cause

    def test_wrap_none_cause(self):
        """Test that a nil cause still yields a well-formed error."""
        err = wrap_c(None, 1001, "lookup")
        assert err.cause is None
        assert str(err) == "lookup"

    def test_message_formatting(self):
        """Test that message args are %-formatted."""
        err = wrap_c(None, 1001, "user %s not found in %d ms", "bob", 12)
        assert err.message == "user bob not found in 12 ms"

    def test_message_without_args_kept_verbatim(self):
        """Test that a lone message is not formatted."""
        err = wrap_c(None, 1001, "100% done")
        assert err.message == "100% done"

    def test_with_code(self):
        """Test that with_code creates a root error."""
        err = with_code(1002, "bad %s", "request")
        assert err.code == 1002
        assert err.cause is None
        assert err.message == "bad request"

    def test_can_be_raised_and_caught(self):
        """Test that coded errors behave as ordinary exceptions."""
        try:
            raise wrap_c(ValueError("raw"), 1001, "outer")
        except CodedError as e:
            assert e.code == 1001


class TestRendering:
    """Tests for chain rendering."""

    def test_str_renders_chain(self):
        """Test that str() lists messages outermost first."""
        err = wrap_c(
            wrap_c(wrap_c(OSError("read: end of input"), 1002, "could not read configuration file"),
                   1001, "could not decode configuration data"),
            1000,
            "service configuration could not be loaded",
        )
        assert str(err) == (
            "service configuration could not be loaded: could not decode configuration data: "
            "could not read configuration file: read: end of input"
        )

    def test_str_skips_empty_message(self):
        """Test that an empty wrapping message does not add a separator."""
        err = wrap_c(ValueError("raw"), 1001, "")
        assert str(err) == "raw"

    def test_format_chain(self, registry):
        """Test that the verbose rendering shows one line per link."""
        registry.register(ErrCode(1001, 404, "User not found"))
        err = wrap_c(wrap_c(KeyError("id"), 1001, "lookup"), 2002, "handler")

        lines = format_chain(err, registry).splitlines()

        assert len(lines) == 3
        assert "code=2002" in lines[0]
        assert "An internal server error occurred" in lines[0]
        assert "code=1001" in lines[1]
        assert "'User not found'" in lines[1]
        assert "'lookup'" in lines[1]
        assert "KeyError" in lines[2]

    def test_format_chain_follows_python_causes(self):
        """Test that plain exceptions chained with `from` are rendered."""
        try:
            try:
                raise KeyError("id")
            except KeyError as e:
                raise RuntimeError("lookup failed") from e
        except RuntimeError as e:
            err = wrap_c(e, 1001, "handler")

        lines = format_chain(err).splitlines()
        assert len(lines) == 3
        assert "RuntimeError: lookup failed" in lines[1]
        assert "KeyError" in lines[2]


class TestPickling:
    """Tests for pickling coded errors."""

    def test_pickle_preserves_chain(self):
        """Test that a wrapped error survives a pickle round trip."""
        err = wrap_c(ValueError("bad port"), 1003, "load config")

        restored = pickle.loads(pickle.dumps(err))

        assert isinstance(restored, CodedError)
        assert restored.code == 1003
        assert restored.message == "load config"
        assert isinstance(restored.cause, ValueError)
        assert str(restored.cause) == "bad port"
        assert str(restored) == "load config: bad port"
