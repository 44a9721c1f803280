"""Tests for cate.encoding."""

import codecs

import pytest

from cate.encoding import (
    REPLACEMENT_CHAR,
    Confidence,
    DecisionSource,
    EncodingDecision,
    UnknownEncodingError,
    decode_bytes,
    decode_chunks,
    detect_bom,
    is_strict_utf8,
    normalize_encoding,
    resolve_encoding,
    system_encoding,
)


def test_utf8_bom_detected_and_stripped():
    data = bytes([0xEF, 0xBB, 0xBF, 0x68, 0x69])
    decision = resolve_encoding(data)
    assert decision == EncodingDecision("utf-8", Confidence.HIGH, DecisionSource.BOM)
    assert decision.bom_length == 3
    assert decode_bytes(data, decision) == "hi"


def test_utf16_boms():
    le = codecs.BOM_UTF16_LE + "hé".encode("utf-16-le")
    be = codecs.BOM_UTF16_BE + "hé".encode("utf-16-be")
    assert detect_bom(le) == "utf-16-le"
    assert detect_bom(be) == "utf-16-be"
    assert decode_bytes(le, resolve_encoding(le)) == "hé"
    assert decode_bytes(be, resolve_encoding(be)) == "hé"


def test_bom_wins_over_user_override():
    data = codecs.BOM_UTF8 + b"x"
    decision = resolve_encoding(data, user_encoding="gbk")
    assert decision.source is DecisionSource.BOM


def test_strict_utf8_is_high_confidence():
    text = "naïve café ✓\n"
    data = text.encode("utf-8")
    decision = resolve_encoding(data, user_encoding="gbk")
    assert decision.encoding == "utf-8"
    assert decision.confidence is Confidence.HIGH
    assert decision.source is DecisionSource.STRICT_UTF8
    assert decision.bom_length == 0
    assert decode_bytes(data, decision) == text


def test_empty_input_is_utf8():
    decision = resolve_encoding(b"")
    assert decision.source is DecisionSource.STRICT_UTF8


def test_invalid_byte_in_tail_rejects_utf8():
    decision = resolve_encoding(b"abc", default_encoding="cp1252", tail=[b"def", b"\xff"])
    assert decision.source is DecisionSource.FALLBACK_DEFAULT
    assert decision.encoding == "cp1252"


def test_truncated_prefix_still_utf8():
    data = "é".encode("utf-8")
    assert not is_strict_utf8([data[:1]])
    assert is_strict_utf8([data[:1]], complete=False)


def test_sequence_split_across_chunks():
    data = "日本".encode("utf-8")
    assert is_strict_utf8([data[:2], data[2:4], data[4:]])


def test_user_override_is_medium():
    data = "中文".encode("gbk")
    decision = resolve_encoding(data, user_encoding="gbk")
    assert decision.confidence is Confidence.MEDIUM
    assert decision.source is DecisionSource.USER_OVERRIDE
    assert decode_bytes(data, decision) == "中文"


def test_fallback_is_low():
    decision = resolve_encoding(b"\xe9t\xe9", default_encoding="cp1252")
    assert decision.confidence is Confidence.LOW
    assert decision.source is DecisionSource.FALLBACK_DEFAULT
    assert decode_bytes(b"\xe9t\xe9", decision) == "été"


def test_fallback_uses_system_encoding(monkeypatch):
    monkeypatch.setattr("cate.encoding.system_encoding", lambda: "cp1252")
    decision = resolve_encoding(b"\xff")
    assert decision.encoding == "cp1252"


def test_malformed_bytes_become_replacement_char():
    decision = EncodingDecision("utf-8", Confidence.MEDIUM, DecisionSource.USER_OVERRIDE)
    assert decode_bytes(b"a\xffb", decision) == f"a{REPLACEMENT_CHAR}b"


def test_decode_chunks_handles_split_bom_and_sequences():
    data = codecs.BOM_UTF8 + "ü\n".encode("utf-8")
    decision = resolve_encoding(data)
    chunks = [data[:2], data[2:4], data[4:]]
    assert "".join(decode_chunks(chunks, decision)) == "ü\n"


def test_normalize_aliases():
    assert normalize_encoding("UTF8") == "utf-8"
    assert normalize_encoding("utf16le") == "utf-16-le"
    assert normalize_encoding("cp936") == "gbk"
    assert normalize_encoding("Shift-JIS") == "shift_jis"
    assert normalize_encoding("latin1") == "cp1252"
    assert normalize_encoding("koi8-r") == "koi8-r"


def test_normalize_unknown_raises():
    with pytest.raises(UnknownEncodingError) as excinfo:
        normalize_encoding("no-such-codec")
    assert excinfo.value.name == "no-such-codec"
    assert isinstance(excinfo.value, ValueError)


def test_system_encoding_falls_back_to_utf8(monkeypatch):
    monkeypatch.setattr("locale.getpreferredencoding", lambda do_setlocale=True: "bogus-enc")
    assert system_encoding() == "utf-8"


@pytest.mark.parametrize("name", ["hex", "base64", "zlib", "rot13"])
def test_normalize_rejects_non_text_codec(name):
    with pytest.raises(UnknownEncodingError):
        normalize_encoding(name)
