"""Byte-to-text decoding decisions.

Resolution order, first match wins:

    1. byte-order mark (UTF-8, UTF-16 LE/BE)
    2. the whole buffer is strict UTF-8
    3. the encoding the user asked for
    4. the configured default (locale-derived when unset)

Decoding never fails: malformed sequences become U+FFFD.
"""

import codecs
import locale
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional

_log = logging.getLogger(__name__)

# (signature, codec) pairs checked against the start of the buffer
BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)

REPLACEMENT_CHAR = "�"

# User-facing labels that differ from Python's codec names.
_ALIASES: dict[str, str] = {
    "utf8": "utf-8",
    "utf16le": "utf-16-le",
    "utf-16le": "utf-16-le",
    "utf16be": "utf-16-be",
    "utf-16be": "utf-16-be",
    "cp936": "gbk",
    "shift-jis": "shift_jis",
    "sjis": "shift_jis",
    "cp950": "big5",
    "windows-1252": "cp1252",
    "iso-8859-1": "cp1252",
    "latin1": "cp1252",
}

ENCODING_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Unicode", ("utf-8", "utf-16le", "utf-16be")),
    ("Chinese", ("gbk (Simplified Chinese)", "big5 (Traditional Chinese)")),
    ("Japanese", ("shift-jis (Shift_JIS)",)),
    ("Western European", ("windows-1252", "iso-8859-1")),
    ("Other", (
        "Any codec name Python understands",
        "(e.g. euc-jp, iso-8859-2, koi8-r, ...)",
    )),
)


class UnknownEncodingError(ValueError):
    """Raised when an encoding label does not name a known codec."""

    def __init__(self, name: str):
        super().__init__(f"Unsupported encoding: {name}")
        self.name = name


class Confidence(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DecisionSource(Enum):
    BOM = "bom"
    STRICT_UTF8 = "strict-utf8"
    USER_OVERRIDE = "user-override"
    FALLBACK_DEFAULT = "fallback-default"


@dataclass(frozen=True)
class EncodingDecision:
    """The decoding chosen for one input stream."""

    encoding: str
    confidence: Confidence
    source: DecisionSource

    @property
    def bom_length(self) -> int:
        """Number of leading signature bytes to drop before decoding."""
        if self.source is not DecisionSource.BOM:
            return 0
        for signature, name in BOMS:
            if name == self.encoding:
                return len(signature)
        return 0


def normalize_encoding(name: str) -> str:
    """Map a user label to a Python codec name.

    Raises:
        UnknownEncodingError: if no codec answers to the label.
    """
    label = name.strip().lower()
    label = _ALIASES.get(label, label)
    try:
        info = codecs.lookup(label)
    except LookupError:
        raise UnknownEncodingError(name) from None
    # bytes-to-bytes and str-to-str codecs (hex, base64, zlib, rot13) cannot decode text
    if not getattr(info, "_is_text_encoding", True):
        raise UnknownEncodingError(name)
    return info.name


def system_encoding() -> str:
    """The locale's preferred encoding, or utf-8 when it is unusable."""
    preferred = locale.getpreferredencoding(False) or "utf-8"
    try:
        return codecs.lookup(preferred).name
    except LookupError:
        return "utf-8"


def detect_bom(data: bytes) -> Optional[str]:
    """Return the codec named by a leading byte-order mark, if any."""
    for signature, name in BOMS:
        if data.startswith(signature):
            return name
    return None


def is_strict_utf8(chunks: Iterable[bytes], complete: bool = True) -> bool:
    """Validate a sequence of byte chunks as UTF-8 without joining them.

    With ``complete=False`` a sequence truncated at the very end is
    tolerated, since more bytes may follow.
    """
    decoder = codecs.getincrementaldecoder("utf-8")("strict")
    try:
        for chunk in chunks:
            decoder.decode(chunk)
        decoder.decode(b"", complete)
    except UnicodeDecodeError:
        return False
    return True


def resolve_encoding(
    head: bytes,
    user_encoding: Optional[str] = None,
    default_encoding: Optional[str] = None,
    *,
    tail: Iterable[bytes] = (),
    complete: bool = True,
) -> EncodingDecision:
    """Decide how to decode a byte stream.

    Args:
        head: The first bytes of the stream (the whole stream for small inputs).
        user_encoding: An already-normalized codec name from the user.
        default_encoding: Fallback codec; the locale's when None.
        tail: Remaining chunks, validated as UTF-8 after ``head``.
        complete: False when ``head`` plus ``tail`` is only a prefix.
    """
    bom = detect_bom(head)
    if bom is not None:
        _log.debug("BOM detected: %s", bom)
        return EncodingDecision(bom, Confidence.HIGH, DecisionSource.BOM)

    if is_strict_utf8(_chain(head, tail), complete):
        _log.debug("Valid UTF-8 detected")
        return EncodingDecision("utf-8", Confidence.HIGH, DecisionSource.STRICT_UTF8)

    if user_encoding:
        _log.debug("Using user-specified encoding: %s", user_encoding)
        return EncodingDecision(
            user_encoding, Confidence.MEDIUM, DecisionSource.USER_OVERRIDE,
        )

    fallback = default_encoding or system_encoding()
    _log.debug("Falling back to system encoding: %s", fallback)
    return EncodingDecision(fallback, Confidence.LOW, DecisionSource.FALLBACK_DEFAULT)


def decode_chunks(chunks: Iterable[bytes], decision: EncodingDecision) -> Iterator[str]:
    """Incrementally decode byte chunks, replacing malformed input.

    The byte-order mark is stripped when the decision came from one.
    """
    decoder = codecs.getincrementaldecoder(decision.encoding)("replace")
    skip = decision.bom_length
    for chunk in chunks:
        if skip:
            dropped = chunk[:skip]
            chunk = chunk[skip:]
            skip -= len(dropped)
        text = decoder.decode(chunk)
        if text:
            yield text
    text = decoder.decode(b"", True)
    if text:
        yield text


def decode_bytes(data: bytes, decision: EncodingDecision) -> str:
    """Decode a complete buffer with the same rules as :func:`decode_chunks`."""
    return "".join(decode_chunks((data,), decision))


def _chain(head: bytes, tail: Iterable[bytes]) -> Iterator[bytes]:
    yield head
    yield from tail
