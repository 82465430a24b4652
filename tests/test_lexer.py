"""Tests for lexer.tokenize."""

import pytest  # type: ignore

from errors import MalformedInput
from lexer import format_tokens, tokenize


@pytest.mark.parametrize("line", ["", "   ", "\t  \t"])
def test_blank_lines_yield_no_tokens(line):
    assert tokenize(line) == []


@pytest.mark.parametrize(
    "line,expected",
    [
        ("echo a \"b c\" 'd e'", ["echo", "a", "b c", "d e"]),
        ("  ls   -l  ", ["ls", "-l"]),
        ("echo 'a \"quoted\" word'", ["echo", 'a "quoted" word']),
        ('echo "it\'s"', ["echo", "it's"]),
        (r'echo "a \"b\" c"', ["echo", 'a "b" c']),
        (r"echo a\ b", ["echo", "a b"]),
        ("echo 'x'\"y\"z", ["echo", "xyz"]),
        ("echo a#b", ["echo", "a#b"]),
    ],
)
def test_quoting_rules(line, expected):
    assert tokenize(line) == expected


def test_single_quotes_keep_backslashes():
    assert tokenize(r"echo 'a\nb'") == ["echo", r"a\nb"]


def test_operators_only_split_on_whitespace():
    assert tokenize("echo hi > out.txt") == ["echo", "hi", ">", "out.txt"]
    assert tokenize("echo hi>out.txt") == ["echo", "hi>out.txt"]
    assert tokenize("cmd 2>> err.log") == ["cmd", "2>>", "err.log"]


@pytest.mark.parametrize("line", ["echo 'open", 'echo "open', "echo trailing\\"])
def test_malformed_input(line):
    with pytest.raises(MalformedInput):
        tokenize(line)


def test_malformed_input_is_value_error():
    with pytest.raises(ValueError, match="No closing quotation"):
        tokenize("echo 'oops")


def test_format_tokens_round_trips_quoting():
    tokens = ["echo", "b c", "it's"]
    assert tokenize(format_tokens(tokens)) == tokens
    assert format_tokens([]) == "<empty>"


class TestDoubleQuoteEscapes:
    @pytest.mark.parametrize(
        "line,expected",
        [
            (r'echo "a\$b"', ["echo", "a$b"]),
            ('echo "a\\`b"', ["echo", "a`b"]),
            (r'echo "a\\$b"', ["echo", r"a\$b"]),
            ('echo "a\\\nb"', ["echo", "ab"]),
            (r'echo "a\nb"', ["echo", r"a\nb"]),
        ],
    )
    def test_escapes_inside_double_quotes(self, line, expected):
        assert tokenize(line) == expected

    def test_single_quotes_do_not_resolve_escapes(self):
        assert tokenize(r"echo 'a\$b'") == ["echo", r"a\$b"]


class TestComments:
    @pytest.mark.parametrize(
        "line,expected",
        [
            ("echo a #b", ["echo", "a"]),
            ("echo a # trailing words", ["echo", "a"]),
            ("# whole line", []),
            ("   # indented", []),
            ("echo a#b c", ["echo", "a#b", "c"]),
            ("echo '#x' \"#y\"", ["echo", "#x", "#y"]),
            (r"echo \#x", ["echo", "#x"]),
        ],
    )
    def test_hash_starting_a_word(self, line, expected):
        assert tokenize(line) == expected

    def test_comment_hides_unbalanced_quote(self):
        assert tokenize("echo hi # it's fine") == ["echo", "hi"]

    def test_comment_after_redirection(self):
        assert tokenize("echo hi > out.txt # log") == ["echo", "hi", ">", "out.txt"]
