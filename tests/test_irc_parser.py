from __future__ import annotations

import dataclasses

import pytest

from tirc.errors import ContractViolationError, ParsingError
from tirc.irc import (
    Message,
    Prefix,
    build_join,
    build_nick,
    build_pass,
    build_ping,
    build_pong,
    build_privmsg,
    build_quit,
    build_user,
    new_message,
    parse_message,
    parse_prefix,
    serialize_message,
)


class TestParsePrefix:
    def test_full_prefix(self):
        assert parse_prefix("nick!user@host") == Prefix(nick="nick", host="host", user="user")

    def test_nick_and_host(self):
        assert parse_prefix("nick@host") == Prefix(nick="nick", host="host", user="")

    def test_nick_only(self):
        assert parse_prefix("nick") == Prefix(nick="nick", host="", user="")

    def test_user_without_host_is_dropped(self):
        # Only nick is guaranteed; user needs the host delimiter too.
        assert parse_prefix("nick!user") == Prefix(nick="nick")

    def test_server_name(self):
        prefix = parse_prefix("irc.example.net")
        assert prefix.nick == "irc.example.net"
        assert prefix.host == ""
        assert prefix.user == ""


class TestPrefixStr:
    def test_full(self):
        assert str(Prefix(nick="botn", host="localhost", user="botu")) == "botn!botu@localhost"

    def test_without_user(self):
        assert str(Prefix(nick="botn", host="localhost")) == "botn@localhost"

    def test_without_host_drops_user(self):
        assert str(Prefix(nick="botn", user="botu")) == "botn"

    def test_empty_nick_is_empty(self):
        assert str(Prefix(host="localhost", user="botu")) == ""
        assert not Prefix()

    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Prefix(nick="a").nick = "b"  # type: ignore[misc]


class TestParseMessage:
    def test_numeric_reply_is_coalesced(self):
        msg = parse_message(":irc.example.net 265 botn :2 2 Current local users: 2, Max: 2")
        assert msg.command == "265"
        assert msg.prefix.nick == "irc.example.net"
        assert msg.fields["target"] == "botn"
        assert msg.fields["reply"] == "2 2 Current local users: 2, Max: 2"
        assert len(msg.params) == 2

    def test_numeric_reply_middle_params_are_coalesced(self):
        msg = parse_message(":srv 005 botn CHANTYPES=# PREFIX=(ov)@+ :are supported by this server\r\n")
        assert msg.params == ("botn", "CHANTYPES=# PREFIX=(ov)@+ are supported by this server")
        assert msg.get("reply") == "CHANTYPES=# PREFIX=(ov)@+ are supported by this server"

    def test_privmsg_with_prefix(self):
        msg = parse_message(":guy!u@host.com PRIVMSG #asdf :Kappa slapp\r\n")
        assert msg.prefix == Prefix(nick="guy", host="host.com", user="u")
        assert msg.command == "PRIVMSG"
        assert msg.fields == {"msgtarget": "#asdf", "text": "Kappa slapp"}

    def test_user_command_fields(self):
        msg = parse_message("USER guest 0 * :Tyrus Yeah")
        assert msg.get("user") == "guest"
        assert msg.get("mode") == "0"
        assert msg.get("_") == "*"
        assert msg.get("realname") == "Tyrus Yeah"

    def test_middle_only(self):
        msg = parse_message("PONG poop.com")
        assert msg.params == ("poop.com",)
        assert msg.get("server") == "poop.com"
        assert "server2" not in msg.fields

    def test_trailing_only(self):
        msg = parse_message("PING :server1\r\n")
        assert msg.command == "PING"
        assert msg.prefix == Prefix()
        assert msg.get("server1") == "server1"

    def test_join_trailing_channel(self):
        msg = parse_message(":botn!~botu@localhost JOIN :#asdf")
        assert msg.get("channels") == "#asdf"
        assert msg.prefix.user == "~botu"

    def test_trailing_keeps_colons_and_spaces(self):
        msg = parse_message("PRIVMSG #chan :see: http://example.com  twice")
        assert msg.get("text") == "see: http://example.com  twice"

    def test_empty_trailing_is_a_param(self):
        msg = parse_message("PRIVMSG #chan :")
        assert msg.params == ("#chan", "")
        assert msg.get("text") == ""

    def test_command_without_params(self):
        msg = parse_message("QUIT\r\n")
        assert msg.command == "QUIT"
        assert msg.params == ()
        assert msg.fields == {}

    def test_unknown_command_has_no_fields(self):
        msg = parse_message(":srv NOTICE * :*** Looking up your hostname")
        assert msg.command == "NOTICE"
        assert msg.params == ("*", "*** Looking up your hostname")
        assert msg.fields == {}

    def test_error_command_message_field(self):
        msg = parse_message("ERROR :Closing Link: botn (Quit: bye)")
        assert msg.get("message") == "Closing Link: botn (Quit: bye)"

    def test_colon_inside_middle_param_is_not_trailing(self):
        msg = parse_message("JOIN #chan:x :key")
        assert msg.params == ("#chan:x", "key")

    def test_repeated_spaces_between_params(self):
        msg = parse_message("NICK   botn")
        assert msg.params == ("botn",)

    @pytest.mark.parametrize("line", ["", "\r\n", "   "])
    def test_empty_line_raises(self, line):
        with pytest.raises(ParsingError) as exc_info:
            parse_message(line)
        assert exc_info.value.data["line"] == line

    def test_prefix_without_command_raises(self):
        with pytest.raises(ParsingError):
            parse_message(":irc.example.net\r\n")

    def test_fields_are_read_only(self):
        msg = parse_message("NICK botn")
        with pytest.raises(TypeError):
            msg.fields["nick"] = "other"  # type: ignore[index]

    def test_message_is_immutable(self):
        msg = parse_message("NICK botn")
        with pytest.raises(dataclasses.FrozenInstanceError):
            msg.command = "QUIT"  # type: ignore[misc]


class TestSerialize:
    def test_privmsg_example(self):
        msg = new_message("PRIVMSG", {"msgtarget": "#general", "text": "hello #general"}, Prefix())
        assert serialize_message(msg) == "PRIVMSG #general :hello #general\r\n"

    def test_str_is_wire_form(self):
        msg = build_privmsg("#general", "hello")
        assert str(msg) == "PRIVMSG #general :hello\r\n"

    def test_last_param_always_marked_trailing(self):
        assert str(build_nick("botn")) == "NICK :botn\r\n"

    def test_user_reserved_slot_is_filled(self):
        assert str(build_user("botu", "0", "cool guy")) == "USER botu 0 * :cool guy\r\n"

    def test_stops_at_first_empty_slot(self):
        msg = Message(command="PRIVMSG", params=("", "ignored"))
        assert str(msg) == "PRIVMSG\r\n"

    def test_optional_second_param_omitted(self):
        assert str(build_pong("server1")) == "PONG :server1\r\n"
        assert str(build_ping("a", "b")) == "PING a :b\r\n"

    def test_prefix_rendered_when_present(self):
        msg = build_quit("bye", prefix=Prefix(nick="botn", host="localhost", user="botu"))
        assert str(msg) == ":botn!botu@localhost QUIT :bye\r\n"

    def test_no_params(self):
        assert str(build_quit()) == "QUIT\r\n"


class TestNewMessage:
    def test_unknown_command_is_contract_violation(self):
        with pytest.raises(ContractViolationError) as exc_info:
            new_message("FROB", {"x": "y"})
        assert exc_info.value.data["command"] == "FROB"

    def test_unknown_field_is_contract_violation(self):
        with pytest.raises(ContractViolationError):
            new_message("NICK", {"nickname": "botn"})

    def test_contract_violation_is_value_error(self):
        with pytest.raises(ValueError):
            new_message("FROB")

    def test_numeric_command_uses_reply_schema(self):
        msg = new_message("001", {"target": "botn", "reply": "Welcome"})
        assert msg.fields == {"target": "botn", "reply": "Welcome"}

    def test_empty_values_are_absent(self):
        msg = new_message("PING", {"server1": "irc", "server2": ""})
        assert msg.params == ("irc", "")
        assert msg.get("server2") == ""

    def test_default_prefix_is_empty(self):
        assert new_message("NICK", {"nick": "botn"}).prefix == Prefix()


@pytest.mark.parametrize(
    "message",
    [
        build_pass("secret"),
        build_nick("botn"),
        build_user("botu", "0", "cool guy"),
        build_quit("gone fishing"),
        build_join(["#a", "#b"], ["key"]),
        build_privmsg("#general", "hello #general"),
        build_ping("server1", "server2"),
        build_pong("server1"),
    ],
    ids=lambda m: m.command,
)
def test_parse_of_serialized_message_keeps_fields(message):
    parsed = parse_message(serialize_message(message))
    assert parsed.command == message.command
    assert {k: v for k, v in parsed.fields.items() if v} == {
        k: v for k, v in message.fields.items() if v
    }
