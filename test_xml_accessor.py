"""
XML Container Accessor Tests
============================

Typed getters, default wrappers, sections, narrowing, decoding and mutation.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import List

import pytest

from xmlconf.config import (
    ConfigError,
    DecodeError,
    KeyNotFoundError,
    SectionNotFoundError,
    ValueTypeError,
    XMLConfig,
    error_unused,
)

DOC = """
<config>
    <appname>demo</appname>
    <httpport>8080</httpport>
    <negative>-12</negative>
    <bignum>9223372036854775808</bignum>
    <ratio>0.75</ratio>
    <debug>true</debug>
    <enabled>F</enabled>
    <broken>maybe</broken>
    <hosts>a;b;c</hosts>
    <empty></empty>
    <mysql>
        <host>localhost</host>
        <port>3306</port>
    </mysql>
    <servers>
        <server>one</server>
        <server>two</server>
    </servers>
    <a><b><c>1</c></b></a>
</config>
"""


@pytest.fixture
def cnf():
    return XMLConfig().parse_data(DOC)


class TestBool:

    @pytest.mark.parametrize("token", ["1", "t", "T", "true", "TRUE", "True"])
    def test_truthy_tokens(self, token):
        cnf = XMLConfig().parse_data(f"<config><v>{token}</v></config>")
        assert cnf.bool("v") is True

    @pytest.mark.parametrize("token", ["0", "f", "F", "false", "FALSE", "False"])
    def test_falsy_tokens(self, token):
        cnf = XMLConfig().parse_data(f"<config><v>{token}</v></config>")
        assert cnf.bool("v") is False

    def test_unparsable_value(self, cnf):
        with pytest.raises(ValueTypeError):
            cnf.bool("broken")

    def test_section_is_not_a_bool(self, cnf):
        with pytest.raises(ValueTypeError):
            cnf.bool("mysql")

    def test_missing_key(self, cnf):
        with pytest.raises(KeyNotFoundError):
            cnf.bool("missing")

    def test_default_bool(self, cnf):
        assert cnf.default_bool("debug", False) is True
        assert cnf.default_bool("enabled", True) is False
        assert cnf.default_bool("broken", True) is True
        assert cnf.default_bool("missing", True) is True


class TestNumbers:

    def test_int(self, cnf):
        assert cnf.int("httpport") == 8080
        assert cnf.int("negative") == -12

    def test_int_missing_key_is_a_structured_error(self, cnf):
        with pytest.raises(KeyNotFoundError):
            cnf.int("missing")

    def test_int_on_section(self, cnf):
        with pytest.raises(ValueTypeError):
            cnf.int("mysql")

    def test_int_not_numeric(self, cnf):
        with pytest.raises(ValueTypeError):
            cnf.int("appname")

    def test_int_rejects_float_text(self, cnf):
        with pytest.raises(ValueTypeError):
            cnf.int("ratio")

    def test_default_int(self, cnf):
        assert cnf.default_int("httpport", 1) == 8080
        assert cnf.default_int("appname", 1) == 1
        assert cnf.default_int("missing", 7) == 7

    def test_int64(self, cnf):
        assert cnf.int64("httpport") == 8080

    def test_int64_out_of_range(self, cnf):
        assert cnf.int("bignum") == 2 ** 63
        with pytest.raises(ValueTypeError):
            cnf.int64("bignum")

    def test_default_int64(self, cnf):
        assert cnf.default_int64("bignum", -1) == -1
        assert cnf.default_int64("missing", 5) == 5

    def test_float(self, cnf):
        assert cnf.float("ratio") == pytest.approx(0.75)
        assert cnf.float("httpport") == pytest.approx(8080.0)

    def test_float_errors(self, cnf):
        with pytest.raises(KeyNotFoundError):
            cnf.float("missing")
        with pytest.raises(ValueTypeError):
            cnf.float("appname")

    def test_default_float(self, cnf):
        assert cnf.default_float("ratio", 1.5) == pytest.approx(0.75)
        assert cnf.default_float("missing", 1.5) == pytest.approx(1.5)

    @pytest.mark.parametrize("text", ["1_000", "٣", " 7 ", "7\n", "+", "", "0x10"])
    def test_non_ascii_decimal_text_is_rejected(self, cnf, text):
        cnf.set("loose", text)
        with pytest.raises(ValueTypeError):
            cnf.int("loose")
        with pytest.raises(ValueTypeError):
            cnf.int64("loose")
        with pytest.raises(ValueTypeError):
            cnf.float("loose")
        assert cnf.default_int("loose", -1) == -1
        assert cnf.default_float("loose", -1.0) == -1.0

    def test_loose_numbers_from_document_fall_back(self):
        cnf = XMLConfig().parse_data("<config><a>1_000</a><b>٣</b></config>")
        assert cnf.default_int("a", 5) == 5
        assert cnf.default_int("b", 5) == 5
        assert cnf.default_float("a", 0.5) == 0.5

    @pytest.mark.parametrize("text,expected", [
        ("+42", 42),
        ("-0", 0),
        ("007", 7),
    ])
    def test_signed_and_padded_integers(self, cnf, text, expected):
        cnf.set("n", text)
        assert cnf.int("n") == expected

    @pytest.mark.parametrize("text,expected", [
        ("1e3", 1000.0),
        ("-.5", -0.5),
        ("3.", 3.0),
        ("+2.5E-1", 0.25),
    ])
    def test_float_literals(self, cnf, text, expected):
        cnf.set("f", text)
        assert cnf.float("f") == pytest.approx(expected)

    def test_float_special_values(self, cnf):
        cnf.set("f", "Inf")
        assert cnf.float("f") == float("inf")
        cnf.set("f", "nan")
        assert cnf.float("f") != cnf.float("f")

    def test_set_then_int(self, cnf):
        cnf.set("x", "5")
        assert cnf.int("x") == 5


class TestStrings:

    def test_string(self, cnf):
        assert cnf.string("appname") == "demo"

    def test_string_never_raises(self, cnf):
        assert cnf.string("missing") == ""
        assert cnf.string("mysql") == ""

    def test_default_string(self, cnf):
        assert cnf.default_string("appname", "x") == "demo"
        assert cnf.default_string("missing", "fallback") == "fallback"
        assert cnf.default_string("empty", "fallback") == "fallback"

    def test_strings(self, cnf):
        assert cnf.strings("hosts") == ["a", "b", "c"]
        assert cnf.strings("appname") == ["demo"]

    def test_strings_empty(self, cnf):
        assert cnf.strings("empty") is None
        assert cnf.strings("missing") is None

    def test_default_strings(self, cnf):
        assert cnf.default_strings("hosts", ["x"]) == ["a", "b", "c"]
        assert cnf.default_strings("missing", ["x"]) == ["x"]


class TestSections:

    def test_get_section(self, cnf):
        assert cnf.get_section("mysql") == {"host": "localhost", "port": "3306"}

    def test_get_section_renders_composites(self, cnf):
        assert cnf.get_section("servers") == {"server": '["one","two"]'}
        assert cnf.get_section("a") == {"b": '{"c":"1"}'}

    def test_get_section_errors(self, cnf):
        with pytest.raises(SectionNotFoundError, match="section 'missing' not found"):
            cnf.get_section("missing")
        with pytest.raises(SectionNotFoundError):
            cnf.get_section("appname")

    def test_section_not_found_is_a_key_error(self, cnf):
        with pytest.raises(KeyError):
            cnf.get_section("missing")

    def test_sub_chain(self, cnf):
        assert cnf.sub("a").sub("b").diy("c") == "1"

    def test_sub_empty_key_is_current_node(self, cnf):
        assert cnf.sub("").to_dict() is cnf.to_dict()

    def test_sub_errors(self, cnf):
        with pytest.raises(KeyNotFoundError):
            cnf.sub("missing")
        with pytest.raises(ValueTypeError):
            cnf.sub("appname")

    def test_sub_shares_the_nested_mapping(self, cnf):
        child = cnf.sub("mysql")
        child.set("host", "db.internal")

        assert cnf.get_section("mysql")["host"] == "db.internal"
        assert cnf.sub("mysql").string("host") == "db.internal"

    def test_sub_does_not_see_siblings(self, cnf):
        child = cnf.sub("mysql")
        assert "appname" not in child
        assert child.string("appname") == ""


@dataclass
class MySQLSettings:
    host: str
    port: int = 0
    ssl: bool = False


@dataclass
class Servers:
    server: List[str] = field(default_factory=list)


@dataclass
class AppSettings:
    appname: str
    httpport: int
    mysql: MySQLSettings
    servers: Servers = field(default_factory=Servers)
    debug: bool = False


class TestUnmarshaler:

    def test_section_into_dataclass(self, cnf):
        settings = cnf.unmarshaler("mysql", MySQLSettings)
        assert settings == MySQLSettings(host="localhost", port=3306, ssl=False)

    def test_whole_document(self, cnf):
        settings = cnf.unmarshaler("", AppSettings)
        assert settings.appname == "demo"
        assert settings.httpport == 8080
        assert settings.mysql.port == 3306
        assert settings.servers.server == ["one", "two"]
        assert settings.debug is True

    def test_updates_existing_instance(self, cnf):
        target = MySQLSettings(host="old", ssl=True)
        result = cnf.unmarshaler("mysql", target)
        assert result is target
        assert target.host == "localhost"
        assert target.port == 3306
        assert target.ssl is True

    def test_prefix_errors(self, cnf):
        with pytest.raises(KeyNotFoundError):
            cnf.unmarshaler("missing", MySQLSettings)
        with pytest.raises(ValueTypeError):
            cnf.unmarshaler("appname", MySQLSettings)

    def test_decode_options_are_forwarded(self, cnf):
        with pytest.raises(DecodeError):
            cnf.unmarshaler("", AppSettings, error_unused())


class TestMutationAndRawAccess:

    def test_set_stores_strings(self, cnf):
        cnf.set("retries", 3)
        assert cnf.diy("retries") == "3"

    def test_diy_returns_raw_values(self, cnf):
        assert cnf.diy("mysql") == {"host": "localhost", "port": "3306"}
        assert cnf.sub("servers").diy("server") == ["one", "two"]

    def test_diy_missing(self, cnf):
        with pytest.raises(KeyNotFoundError, match="not exist key"):
            cnf.diy("missing")

    def test_errors_share_a_base_class(self, cnf):
        for call in (lambda: cnf.diy("missing"), lambda: cnf.int("appname")):
            with pytest.raises(ConfigError):
                call()

    def test_concurrent_writers(self, cnf):
        def writer(n):
            for i in range(200):
                cnf.set(f"k{n}_{i}", str(i))

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(cnf.int(f"k{n}_199") == 199 for n in range(4))

    def test_on_change_only_warns(self, cnf, caplog):
        calls = []
        with caplog.at_level(logging.WARNING, logger="xmlconf"):
            cnf.on_change("appname", calls.append)
        assert "Unsupported operation" in caplog.text
        assert calls == []
