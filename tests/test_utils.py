"""Unit tests for utils package."""

import pytest


# =========================
# Tests for utils/logging.py
# =========================

class TestLogging:
    """Tests for logging utilities."""

    def test_log_outputs_with_timestamp(self, capsys):
        """log() should print message with timestamp prefix."""
        from utils.logging import log

        log("test message")
        captured = capsys.readouterr()

        assert "test message" in captured.out
        assert captured.out.startswith("[")
        assert "]" in captured.out

    def test_log_event_formats_direction_and_target(self, capsys):
        """log_event() should show direction, target and text."""
        from utils.logging import log_event

        log_event(">>", "#chan", "hello")
        captured = capsys.readouterr()

        assert ">> #chan: hello" in captured.out


# =========================
# Tests for utils/errors.py
# =========================

class TestErrors:
    """Tests for the error hierarchy."""

    def test_subclasses_share_base(self):
        """All bot errors should derive from JBotError."""
        from utils.errors import ConfigError, EvalError, JBotError, SetupError, TransportError

        for cls in (ConfigError, EvalError, SetupError, TransportError):
            assert issubclass(cls, JBotError)

    def test_cause_is_kept(self):
        """JBotError should remember the underlying exception."""
        from utils.errors import TransportError

        cause = OSError("reset")
        err = TransportError("dropped", cause=cause)

        assert err.cause is cause
        assert str(err) == "dropped"

    def test_log_error_includes_traceback(self, capsys):
        """log_error() should print the traceback of the exception."""
        from utils.errors import log_error

        try:
            raise ValueError("boom")
        except ValueError as exc:
            log_error("Something failed.", exc)

        out = capsys.readouterr().out
        assert "[ERROR] Something failed." in out
        assert "ValueError: boom" in out


# =========================
# Tests for utils/helpers.py
# =========================

class TestSplitOnce:
    """Tests for split_once()."""

    def test_splits_on_first_space(self):
        from utils.helpers import split_once

        assert split_once("memo bob hey there") == ("memo", "bob hey there")

    def test_single_word_has_no_remainder(self):
        from utils.helpers import split_once

        assert split_once("memo") == ("memo", None)

    def test_trailing_space_has_no_remainder(self):
        from utils.helpers import split_once

        assert split_once("memo ") == ("memo", None)


# =========================
# Tests for utils/text.py
# =========================

class TestIterWords:
    """Tests for iter_words()."""

    def test_lowercases_and_strips_punctuation(self):
        """Tokens should be lowercased words without punctuation."""
        from utils.text import iter_words

        assert list(iter_words("The quick, brown FOX!")) == ["the", "quick", "brown", "fox"]

    def test_keeps_apostrophes_inside_words(self):
        from utils.text import iter_words

        assert list(iter_words("don't stop")) == ["don't", "stop"]

    def test_unicode_words(self):
        from utils.text import iter_words

        assert list(iter_words("quinzième señor")) == ["quinzième", "señor"]

    def test_empty_input(self):
        from utils.text import iter_words

        assert list(iter_words("")) == []
        assert list(iter_words(None)) == []


class TestFirstLine:
    """Tests for first_line()."""

    def test_takes_first_non_empty_line(self):
        from utils.text import first_line

        assert first_line("\n  summary here \nmore detail\n") == "summary here"

    def test_empty(self):
        from utils.text import first_line

        assert first_line("") == ""
        assert first_line(None) == ""


class TestTruncateAtWord:
    """Tests for truncate_at_word()."""

    def test_short_text_unchanged(self):
        """Short text should be returned unchanged."""
        from utils.text import truncate_at_word

        assert truncate_at_word("hello world", 50) == "hello world"

    def test_truncates_at_word_boundary(self):
        """Should cut at a space, never mid-word."""
        from utils.text import truncate_at_word

        result = truncate_at_word("hello world goodbye", 15)

        assert result == "hello world ..."
        assert len(result) <= 15

    def test_space_right_after_budget_counts(self):
        """A space just past the budget is still a clean cut."""
        from utils.text import truncate_at_word

        assert truncate_at_word("abc def ghi", 10) == "abc ..."
        # 11 - 4 leaves 7 chars: exactly "abc def", followed by a space
        assert truncate_at_word("abc def ghijk", 11) == "abc def ..."

    def test_single_long_word_is_not_split(self):
        """Without any space in range, only the marker remains."""
        from utils.text import truncate_at_word

        assert truncate_at_word("a" * 100, 20) == "..."

    @pytest.mark.parametrize("limit", [10, 37, 64, 150])
    def test_result_never_exceeds_limit(self, limit):
        from utils.text import truncate_at_word

        text = "lorem ipsum dolor sit amet " * 20
        assert len(truncate_at_word(text, limit)) <= limit


# =========================
# Tests for uptime.py
# =========================

class TestUptimeTracker:
    """Tests for the connection counters."""

    def test_reconnects_counted_after_first_connect(self):
        import pytz
        from uptime import UptimeTracker

        tracker = UptimeTracker.start(pytz.utc)
        tracker.mark_connect()
        tracker.mark_disconnect()
        tracker.mark_connect()

        assert tracker.connects == 2
        assert tracker.reconnects == 1
        assert tracker.disconnects == 1

    def test_format_status(self):
        import pytz
        from uptime import UptimeTracker

        tracker = UptimeTracker.start(pytz.utc)
        status = tracker.format_status()

        assert status.startswith("up 00:00:0")
        assert "reconnects: 0" in status
        assert "offline" in status

    def test_session_length_while_connected(self, monkeypatch):
        import pytz
        import uptime
        from uptime import UptimeTracker

        now = [100.0]
        monkeypatch.setattr(uptime.time, "monotonic", lambda: now[0])

        tracker = UptimeTracker.start(pytz.utc)
        tracker.mark_connect()
        now[0] = 175.0

        assert tracker.mark_disconnect() == 75.0
        assert tracker.session_length() == 0.0
