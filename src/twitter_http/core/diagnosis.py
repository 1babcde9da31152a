"""
Diagnostic fingerprint of an exception call stack.

The fingerprint is a pair of CRC-32 hashes over the stack shape
(module + function, never line numbers), rendered as ``XXXXXXXX:YYYYYYYY``.
It stays stable across releases that only move code around, which makes
it searchable in issue trackers and log aggregation.
"""

import sys
import zlib
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

# Frames from these modules are library internals
DEFAULT_INTERNAL_PREFIXES: Tuple[str, ...] = ("twitter_http",)


@dataclass(frozen=True)
class StackFrame:
    """One captured call frame.

    Attributes:
        module: Module ``__name__`` of the frame
        function: Function name
        lineno: Source line number (ignored by hashing)
    """

    module: str
    function: str
    lineno: int = 0

    def signature(self) -> str:
        """Frame identity without the line number."""
        return f"{self.module}.{self.function}"

    def __str__(self) -> str:
        return f"{self.module}.{self.function}:{self.lineno}"


def capture_stack(skip: int = 0, limit: Optional[int] = None) -> List[StackFrame]:
    """
    Capture the current call stack, innermost frame first.

    Args:
        skip: Number of innermost frames to drop (the caller itself is
            always dropped)
        limit: Maximum number of frames to keep

    Returns:
        List of StackFrame
    """
    frames: List[StackFrame] = []
    frame = sys._getframe(skip + 1)
    while frame is not None:
        frames.append(
            StackFrame(
                module=frame.f_globals.get("__name__", "?"),
                function=frame.f_code.co_name,
                lineno=frame.f_lineno,
            )
        )
        if limit is not None and len(frames) >= limit:
            break
        frame = frame.f_back
    return frames


def _hash(signatures: Iterable[str]) -> int:
    crc = 0
    for signature in signatures:
        crc = zlib.crc32(signature.encode("utf-8"), crc)
        crc = zlib.crc32(b"\n", crc)
    return crc & 0xFFFFFFFF


def _is_internal(frame: StackFrame, prefixes: Sequence[str]) -> bool:
    return any(
        frame.module == prefix or frame.module.startswith(prefix + ".")
        for prefix in prefixes
    )


@dataclass(frozen=True)
class DiagnosticFingerprint:
    """
    Two-part stack hash.

    Attributes:
        stack_hash: Hash of every frame, line numbers stripped
        caller_hash: Hash of frames outside the internal prefixes,
            line numbers stripped

    Example:
        >>> frames = [StackFrame("twitter_http.core.http_client", "request", 10),
        ...           StackFrame("app.jobs", "sync_timeline", 42)]
        >>> fingerprint = DiagnosticFingerprint.from_frames(frames)
        >>> len(fingerprint.as_hex())
        17
    """

    stack_hash: int
    caller_hash: int

    @classmethod
    def from_frames(
        cls,
        frames: Sequence[StackFrame],
        internal_prefixes: Sequence[str] = DEFAULT_INTERNAL_PREFIXES,
    ) -> "DiagnosticFingerprint":
        """Compute the fingerprint. An empty stack hashes to ``00000000``."""
        return cls(
            stack_hash=_hash(frame.signature() for frame in frames),
            caller_hash=_hash(
                frame.signature()
                for frame in frames
                if not _is_internal(frame, internal_prefixes)
            ),
        )

    def as_hex(self) -> str:
        return f"{self.stack_hash:08x}:{self.caller_hash:08x}"

    def __str__(self) -> str:
        return self.as_hex()
