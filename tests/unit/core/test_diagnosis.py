"""
Tests for stack capture and diagnostic fingerprints.
"""

import re

from twitter_http.core.diagnosis import (
    DiagnosticFingerprint,
    StackFrame,
    capture_stack,
)

FINGERPRINT_RE = re.compile(r"^[0-9a-f]{8}:[0-9a-f]{8}$")

APP_STACK = [
    StackFrame("twitter_http.core.error_handler", "handle_http_error", 60),
    StackFrame("twitter_http.core.http_client", "request", 150),
    StackFrame("app.timeline", "sync", 42),
    StackFrame("app.main", "run", 7),
]


def _shift_lines(frames, delta):
    return [StackFrame(f.module, f.function, f.lineno + delta) for f in frames]


class TestDiagnosticFingerprint:
    """Test fingerprint computation."""

    def test_format(self):
        fingerprint = DiagnosticFingerprint.from_frames(APP_STACK)
        assert FINGERPRINT_RE.match(fingerprint.as_hex())
        assert str(fingerprint) == fingerprint.as_hex()

    def test_deterministic(self):
        """Same stack gives the same hash groups on every call."""
        first = DiagnosticFingerprint.from_frames(APP_STACK)
        second = DiagnosticFingerprint.from_frames(list(APP_STACK))
        assert first == second
        assert first.as_hex() == second.as_hex()

    def test_line_numbers_ignored(self):
        """A stack differing only in line numbers has the same fingerprint."""
        original = DiagnosticFingerprint.from_frames(APP_STACK)
        shifted = DiagnosticFingerprint.from_frames(_shift_lines(APP_STACK, 100))
        assert original.caller_hash == shifted.caller_hash
        assert original.stack_hash == shifted.stack_hash

    def test_internal_frames_only_affect_stack_hash(self):
        """Changing a library frame changes the full hash but not the caller hash."""
        changed = list(APP_STACK)
        changed[0] = StackFrame("twitter_http.core.error_handler", "handle_request_exception", 30)

        original = DiagnosticFingerprint.from_frames(APP_STACK)
        other = DiagnosticFingerprint.from_frames(changed)

        assert original.stack_hash != other.stack_hash
        assert original.caller_hash == other.caller_hash

    def test_caller_frames_affect_both_hashes(self):
        changed = list(APP_STACK)
        changed[2] = StackFrame("app.timeline", "backfill", 42)

        original = DiagnosticFingerprint.from_frames(APP_STACK)
        other = DiagnosticFingerprint.from_frames(changed)

        assert original.stack_hash != other.stack_hash
        assert original.caller_hash != other.caller_hash

    def test_prefix_matching_is_per_package(self):
        """A module merely starting with the prefix text is not internal."""
        lookalike = [StackFrame("twitter_httpx.client", "call", 1)]
        fingerprint = DiagnosticFingerprint.from_frames(lookalike)
        assert fingerprint.caller_hash != 0

    def test_empty_stack(self):
        fingerprint = DiagnosticFingerprint.from_frames([])
        assert fingerprint.as_hex() == "00000000:00000000"

    def test_only_internal_frames(self):
        fingerprint = DiagnosticFingerprint.from_frames(APP_STACK[:2])
        assert fingerprint.as_hex().endswith(":00000000")

    def test_custom_prefixes(self):
        fingerprint = DiagnosticFingerprint.from_frames(APP_STACK, internal_prefixes=("app",))
        only_library = DiagnosticFingerprint.from_frames(APP_STACK[:2], internal_prefixes=())
        assert fingerprint.caller_hash == only_library.caller_hash


class TestCaptureStack:
    """Test live stack capture."""

    def test_innermost_frame_is_caller(self):
        frames = capture_stack()
        assert frames[0].function == "test_innermost_frame_is_caller"
        assert frames[0].module == __name__

    def test_skip(self):
        def inner():
            return capture_stack(skip=1)

        frames = inner()
        assert frames[0].function == "test_skip"

    def test_limit(self):
        assert len(capture_stack(limit=2)) == 2

    def test_signature_strips_line_number(self):
        frame = StackFrame("app.main", "run", 7)
        assert frame.signature() == "app.main.run"
        assert str(frame) == "app.main.run:7"
