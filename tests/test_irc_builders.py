"""
Tests for the outgoing message builders and the parameter schema registry
"""

import pytest

from tirc.errors import ContractViolationError
from tirc.irc import (
    COMMAND_SCHEMAS,
    REPLY_SCHEMA,
    Prefix,
    build_join,
    build_pass,
    build_privmsg,
    build_user,
    get_param_schema,
    is_reply,
)


class TestBuildJoin:
    def test_single_channel(self):
        msg = build_join(["#general"])
        assert msg.get("channels") == "#general"
        assert str(msg) == "JOIN :#general\r\n"

    def test_channels_and_keys_are_comma_joined(self):
        msg = build_join(["#a", "#b", "#c"], ["ka", "kb"])
        assert msg.fields == {"channels": "#a,#b,#c", "keys": "ka,kb"}
        assert str(msg) == "JOIN #a,#b,#c :ka,kb\r\n"

    def test_no_channels_joins_zero(self):
        assert build_join([]).get("channels") == "0"
        assert str(build_join([])) == "JOIN :0\r\n"

    def test_more_keys_than_channels_is_contract_violation(self):
        with pytest.raises(ContractViolationError) as exc_info:
            build_join(["#a"], ["k1", "k2"])
        assert "Too many keys (2)" in str(exc_info.value)

    def test_keys_without_channels_is_contract_violation(self):
        with pytest.raises(ContractViolationError):
            build_join([], ["k1"])


class TestBuilders:
    def test_user_fields(self):
        msg = build_user("botu", "0", "cool guy")
        assert msg.command == "USER"
        assert msg.params == ("botu", "0", "*", "cool guy")

    def test_pass(self):
        assert str(build_pass("hunter2")) == "PASS :hunter2\r\n"

    def test_empty_password_has_no_params(self):
        assert str(build_pass("")) == "PASS\r\n"

    def test_prefix_is_kept(self):
        prefix = Prefix(nick="botn")
        assert build_privmsg("#x", "hi", prefix=prefix).prefix is prefix


class TestSchemaRegistry:
    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            COMMAND_SCHEMAS["FROB"] = ("x",)  # type: ignore[index]

    def test_user_schema(self):
        assert get_param_schema("USER") == ("user", "mode", "_", "realname")

    @pytest.mark.parametrize("command", ["001", "265", "433"])
    def test_numeric_uses_reply_schema(self, command):
        assert get_param_schema(command) == REPLY_SCHEMA == ("target", "reply")

    def test_unknown_verb_has_no_schema(self):
        assert get_param_schema("NOTICE") is None

    @pytest.mark.parametrize(
        "command,expected",
        [("001", True), ("265", True), ("PING", False), ("", False), ("+1", False), ("٣٣٣", False)],
    )
    def test_is_reply(self, command, expected):
        assert is_reply(command) is expected
