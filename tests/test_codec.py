import pytest

from twitchplay.irc.codec import LineBuffer, decode_frame, encode_chat, encode_control, to_wire


def test_decode_frame_splits_in_order_without_terminators():
    raw = b"PING :tmi.twitch.tv\r\n:a!a@a.tmi.twitch.tv PRIVMSG #b :hi\r\n"
    assert decode_frame(raw) == ["PING :tmi.twitch.tv", ":a!a@a.tmi.twitch.tv PRIVMSG #b :hi"]


def test_decode_frame_accepts_bare_newlines_and_drops_empty_lines():
    assert decode_frame(b"one\n\ntwo\r\rthree") == ["one", "two", "three"]
    assert decode_frame(b"") == []
    assert decode_frame(b"\r\n\r\n") == []


def test_decode_frame_replaces_invalid_utf8():
    assert decode_frame(b"bad \xff byte\r\n") == ["bad \ufffd byte"]


class TestLineBuffer:
    def test_partial_line_is_held_until_terminated(self):
        buf = LineBuffer()
        assert buf.feed(b"PING :tmi") == []
        assert buf.pending == b"PING :tmi"
        assert buf.feed(b".twitch.tv\r\n:next") == ["PING :tmi.twitch.tv"]
        assert buf.pending == b":next"

    def test_crlf_split_across_reads(self):
        buf = LineBuffer()
        assert buf.feed(b"first\r") == ["first"]
        assert buf.feed(b"\nsecond\r\n") == ["second"]
        assert buf.pending == b""

    def test_multibyte_character_split_across_reads(self):
        buf = LineBuffer()
        encoded = "héllo\r\n".encode()
        assert buf.feed(encoded[:2]) == []
        assert buf.feed(encoded[2:]) == ["héllo"]

    def test_empty_read_is_noop(self):
        buf = LineBuffer()
        buf.feed(b"abc")
        assert buf.feed(b"") == []
        assert buf.pending == b"abc"

    def test_flush_and_clear(self):
        buf = LineBuffer()
        buf.feed(b"tail")
        assert buf.flush() == ["tail"]
        assert buf.pending == b""
        buf.feed(b"again")
        buf.clear()
        assert buf.pending == b""


def test_encode_chat():
    assert encode_chat("hello", "bar") == "PRIVMSG #bar :hello"
    assert encode_chat("/w someone hi", "bar") == "PRIVMSG #bar :/w someone hi"
    assert encode_chat("RAW LINE") == "RAW LINE"


def test_encode_chat_keeps_embedded_line_breaks_on_one_wire_line():
    line = encode_chat("hi\r\nPART #bar\nJOIN #evil\rPASS oauth:x", "bar")
    assert line == "PRIVMSG #bar :hi PART #bar JOIN #evil PASS oauth:x"
    assert decode_frame(to_wire(line)) == [line]
    assert decode_frame(to_wire(encode_chat("a\r\n\r\nb"))) == ["a b"]


@pytest.mark.parametrize(
    ("verb", "args", "expected"),
    [
        ("PASS", ("oauth:abc",), "PASS oauth:abc"),
        ("NICK", ("tester",), "NICK tester"),
        ("JOIN", ("bar",), "JOIN #bar"),
        ("part", ("bar",), "PART #bar"),
        ("PONG", (), "PONG :tmi.twitch.tv"),
    ],
)
def test_encode_control(verb, args, expected):
    assert encode_control(verb, *args) == expected


def test_encode_control_rejects_unknown_verb_and_bad_arity():
    with pytest.raises(ValueError):
        encode_control("QUIT")
    with pytest.raises(ValueError):
        encode_control("JOIN")
    with pytest.raises(ValueError):
        encode_control("JOIN", "a", "b")


def test_to_wire_appends_crlf():
    assert to_wire("NICK tester") == b"NICK tester\r\n"
    assert to_wire("PRIVMSG #bar :é") == "PRIVMSG #bar :é\r\n".encode()
