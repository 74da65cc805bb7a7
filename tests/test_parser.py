import pytest

from pbxkit.errors import ParseError
from pbxkit.xcode.elements import PBXArray, PBXDict, PBXString
from pbxkit.xcode.lexer import TokenType, tokenize
from pbxkit.xcode.parser import parse_document


def test_tokenize_kinds():
    tokens = tokenize('{ a = "b c"; /* note */ d = (e, f); }')
    kinds = [t.type for t in tokens]
    assert kinds == [
        TokenType.LBRACE,
        TokenType.STRING,
        TokenType.EQUALS,
        TokenType.QUOTED_STRING,
        TokenType.SEMICOLON,
        TokenType.COMMENT,
        TokenType.STRING,
        TokenType.EQUALS,
        TokenType.LPAREN,
        TokenType.STRING,
        TokenType.COMMA,
        TokenType.STRING,
        TokenType.RPAREN,
        TokenType.SEMICOLON,
        TokenType.RBRACE,
        TokenType.EOF,
    ]
    assert tokens[3].text == "b c"
    assert tokens[5].text == "note"


def test_tokenize_tracks_lines():
    tokens = tokenize("{\n  a = b;\n  // line comment\n  c = d;\n}")
    by_text = {t.text: t.line for t in tokens if t.type == TokenType.STRING}
    assert by_text == {"a": 2, "b": 2, "c": 4, "d": 4}


def test_bare_string_stops_at_comment():
    tokens = tokenize("abc/*x*/")
    assert tokens[0].text == "abc"
    assert tokens[1].type == TokenType.COMMENT


def test_quoted_string_escapes():
    tokens = tokenize(r'"a\"b\\c\nd\U0041"')
    assert tokens[0].text == 'a"b\\c\ndA'


def test_unterminated_string_runs_to_end():
    tokens = tokenize('"abc')
    assert tokens[0].type == TokenType.QUOTED_STRING
    assert tokens[0].text == "abc"
    assert tokens[1].type == TokenType.EOF


def test_parse_nested_values():
    root = parse_document('{ a = b; c = { d = "e f"; }; g = (h, "i", ); }')
    assert root.get_string("a") == "b"
    assert root.get_dict("c").get_string("d") == "e f"
    assert root.get_array("g").strings() == ["h", "i"]
    assert root.get_dict("c")["d"].quoted


def test_parse_attaches_comments():
    root = parse_document("{ K /* key */ = V /* value */; }")
    assert root.key_comments["K"] == "key"
    value = root["K"]
    assert isinstance(value, PBXString)
    assert value.comment == "value"


def test_parse_duplicate_keys_keep_last():
    root = parse_document("{ a = 1; a = 2; }")
    assert root.get_string("a") == "2"
    assert root.keys() == ["a"]


def test_parse_tolerates_missing_closers():
    root = parse_document("{ a = { b = (c, d")
    inner = root.get_dict("a")
    assert isinstance(inner, PBXDict)
    assert inner.get_array("b").strings() == ["c", "d"]


def test_parse_skips_stray_punctuation():
    root = parse_document("{ ; a = b;; , c = d }")
    assert root.get_string("a") == "b"
    assert root.get_string("c") == "d"


def test_parse_brace_closes_open_array():
    root = parse_document("{ a = (b, c }; d = e; }")
    assert isinstance(root.get("a"), PBXArray)
    assert root.get_array("a").strings() == ["b", "c"]


def test_parse_ignores_trailing_content():
    root = parse_document("{ a = b; } garbage ;")
    assert root.get_string("a") == "b"


@pytest.mark.parametrize("text", ["", "   ", "// only a comment", "(a, b)", "a = b;"])
def test_parse_rejects_non_documents(text):
    with pytest.raises(ParseError):
        parse_document(text)


def test_parse_error_reports_line():
    with pytest.raises(ParseError, match="line 3"):
        parse_document("\n\n(a)")
