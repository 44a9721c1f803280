"""Byte-stream inputs: sniffing, incremental decoding and line counting.

Seekable inputs are scanned in full for the encoding decision and rewound;
pipes are sniffed on a bounded prefix which is replayed ahead of the rest.
Nothing here holds more than one chunk of raw bytes at a time.
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional

from .encoding import EncodingDecision, decode_chunks, resolve_encoding

_log = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
SNIFF_SIZE = 64 * 1024


@dataclass
class InputSource:
    """One logical input: a file or the stdin stream."""

    stream: BinaryIO
    name: Optional[str] = None

    @property
    def seekable(self) -> bool:
        try:
            return self.stream.seekable()
        except (AttributeError, OSError, ValueError):
            return False


class DecodedInput:
    """A decided, decodable view of an :class:`InputSource`.

    Usage:
        decoded = DecodedInput.open(source, user_encoding, default_encoding)
        first_line = decoded.first_line()
        for chunk in decoded.chunks():
            ...
    """

    def __init__(
        self,
        source: InputSource,
        decision: EncodingDecision,
        prefix: bytes = b"",
        start: int = 0,
    ):
        self.source = source
        self.decision = decision
        self._prefix = prefix
        self._start = start
        self._pending: list[str] = []
        self._iter: Optional[Iterator[str]] = None
        self._consumed = False

    @classmethod
    def open(
        cls,
        source: InputSource,
        user_encoding: Optional[str] = None,
        default_encoding: Optional[str] = None,
    ) -> "DecodedInput":
        """Resolve the encoding of ``source`` and prepare it for decoding."""
        stream = source.stream
        if source.seekable:
            start = stream.tell()
            head = stream.read(SNIFF_SIZE)
            decision = resolve_encoding(
                head,
                user_encoding,
                default_encoding,
                tail=_read_chunks(stream),
            )
            stream.seek(start)
            return cls(source, decision, start=start)

        head = _read_upto(stream, SNIFF_SIZE)
        complete = len(head) < SNIFF_SIZE
        decision = resolve_encoding(
            head, user_encoding, default_encoding, complete=complete,
        )
        return cls(source, decision, prefix=head)

    def _raw_chunks(self) -> Iterator[bytes]:
        if self._prefix:
            yield self._prefix
        yield from _read_chunks(self.source.stream)

    def first_line(self) -> str:
        """Peek the first decoded line without consuming it.

        Decoded text read while peeking is replayed by :meth:`chunks`.
        Scanning stops at the first newline or after ``SNIFF_SIZE``
        characters.
        """
        if self._iter is not None:
            return _first_line("".join(self._pending))
        if self._consumed:
            raise RuntimeError("input already consumed")
        self._iter = decode_chunks(self._raw_chunks(), self.decision)
        seen = 0
        for text in self._iter:
            self._pending.append(text)
            seen += len(text)
            if "\n" in text or seen >= SNIFF_SIZE:
                break
        return _first_line("".join(self._pending))

    def chunks(self) -> Iterator[str]:
        """Yield decoded text chunks for the whole input, once."""
        if self._consumed:
            raise RuntimeError("input already consumed")
        self._consumed = True
        if self._iter is not None:
            pending, self._pending = self._pending, []
            yield from pending
            yield from self._iter
        else:
            yield from decode_chunks(self._raw_chunks(), self.decision)

    def count_lines(self) -> Optional[int]:
        """Count output lines up front; None when the input cannot be rewound."""
        if not self.source.seekable or self._consumed:
            return None
        stream = self.source.stream
        position = stream.tell()
        stream.seek(self._start)
        total = 0
        last = ""
        for text in decode_chunks(_read_chunks(stream), self.decision):
            total += text.count("\n")
            last = text[-1:]
        stream.seek(position)
        if last and last != "\n":
            total += 1
        _log.debug("Counted %d lines", total)
        return total


def _read_upto(stream: BinaryIO, size: int) -> bytes:
    """Read until ``size`` bytes or end of stream; pipes may return short reads."""
    parts = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def _read_chunks(stream: BinaryIO, size: int = CHUNK_SIZE) -> Iterator[bytes]:
    while True:
        chunk = stream.read(size)
        if not chunk:
            return
        yield chunk


def _first_line(text: str) -> str:
    return text.split("\n", 1)[0]
