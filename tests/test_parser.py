from twitchplay.irc.parser import (
    ChatLine,
    ControlLine,
    PingLine,
    is_welcome,
    parse_frame,
    parse_line,
    strip_tags,
)


def test_privmsg_content_keeps_colons():
    parsed = parse_line(":foo!foo@foo.tmi.twitch.tv PRIVMSG #bar :a:b:c")
    assert parsed == ChatLine(sender="foo", text="a:b:c", channel="bar")


def test_channel_is_lowercased():
    parsed = parse_line(":foo!foo@foo.tmi.twitch.tv PRIVMSG #SomeChan :hi")
    assert isinstance(parsed, ChatLine)
    assert parsed.channel == "somechan"


def test_exact_ping_line():
    assert parse_line("PING :tmi.twitch.tv") == PingLine()


def test_other_ping_is_control_line():
    assert parse_line("PING :elsewhere.example") == ControlLine("PING :elsewhere.example")


def test_tags_are_stripped_and_kept():
    raw = "@badge-info=;color=#FF0000;display-name=Foo :foo!foo@foo.tmi.twitch.tv PRIVMSG #bar :hello"
    parsed = parse_line(raw)
    assert isinstance(parsed, ChatLine)
    assert parsed.text == "hello"
    assert parsed.tags == {"badge-info": "", "color": "#FF0000", "display-name": "Foo"}


def test_strip_tags_without_tags():
    assert strip_tags(":a PRIVMSG #b :c") == ({}, ":a PRIVMSG #b :c")
    assert strip_tags("@only-tags") == ({}, "@only-tags")


def test_server_lines_are_control_lines():
    for raw in (
        ":tmi.twitch.tv 001 tester :Welcome, GLHF!",
        ":tmi.twitch.tv NOTICE * :Login authentication failed",
        ":foo!foo@foo.tmi.twitch.tv JOIN #bar",
        ":tmi.twitch.tv CAP * ACK :twitch.tv/tags",
    ):
        assert parse_line(raw) == ControlLine(raw)


def test_malformed_lines_do_not_raise():
    for raw in (
        ":nick!user@hostPRIVMSG#chan:hello",
        ":foo!foo@foo.tmi.twitch.tv PRIVMSG #bar :",
        ":tmi.twitch.tv PRIVMSG #bar :no sender bang",
        ":",
        "",
    ):
        assert parse_line(raw) == ControlLine(raw)


def test_parse_frame_preserves_order():
    raw = (
        b"PING :tmi.twitch.tv\r\n"
        b":a!a@a.tmi.twitch.tv PRIVMSG #c :one\r\n"
        b":tmi.twitch.tv NOTICE #c :note\r\n"
    )
    kinds = [type(p) for p in parse_frame(raw)]
    assert kinds == [PingLine, ChatLine, ControlLine]


def test_is_welcome():
    assert is_welcome(":tmi.twitch.tv 001 tester :Welcome, GLHF!")
    assert not is_welcome(":tmi.twitch.tv NOTICE * :Login authentication failed")
    assert not is_welcome(":tmi.twitch.tv 002 tester :Your host is tmi.twitch.tv")
