# Tokenizer for the ASCII (NeXT style) property list dialect used by .pbxproj files.
#
# The lexer never fails: unterminated quoted strings and comments simply run to
# the end of the input and it is up to the parser to decide what to keep.

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List

from pbxkit.xcode.quoting import unescape


class TokenType(Enum):
    STRING = auto()
    QUOTED_STRING = auto()
    COMMENT = auto()
    SEMICOLON = auto()
    COMMA = auto()
    EQUALS = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    EOF = auto()


PUNCTUATION = {
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    "=": TokenType.EQUALS,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

WHITESPACE = " \t\r\n\f\v"


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str  # decoded value for strings, inner text for comments
    line: int

    @property
    def is_string(self) -> bool:
        return self.type in (TokenType.STRING, TokenType.QUOTED_STRING)


class Lexer:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1

    def _starts_comment(self, pos: int) -> bool:
        return self.text.startswith("/*", pos) or self.text.startswith("//", pos)

    def _skip_whitespace(self) -> None:
        text = self.text
        while self.pos < len(text) and text[self.pos] in WHITESPACE:
            if text[self.pos] == "\n":
                self.line += 1
            self.pos += 1

    def _scan_block_comment(self) -> Token:
        line = self.line
        start = self.pos + 2
        end = self.text.find("*/", start)
        if end == -1:
            end = len(self.text)
            self.pos = end
        else:
            self.pos = end + 2
        body = self.text[start:end]
        self.line += body.count("\n")
        return Token(TokenType.COMMENT, body.strip(), line)

    def _scan_line_comment(self) -> Token:
        line = self.line
        start = self.pos + 2
        end = self.text.find("\n", start)
        if end == -1:
            end = len(self.text)
        self.pos = end
        return Token(TokenType.COMMENT, self.text[start:end].strip(), line)

    def _scan_quoted_string(self) -> Token:
        text = self.text
        line = self.line
        start = self.pos + 1
        pos = start
        while pos < len(text):
            c = text[pos]
            if c == "\\":
                pos += 2
                continue
            if c == '"':
                break
            pos += 1
        raw = text[start : min(pos, len(text))]
        self.line += raw.count("\n")
        self.pos = pos + 1
        return Token(TokenType.QUOTED_STRING, unescape(raw), line)

    def _scan_string(self) -> Token:
        text = self.text
        start = self.pos
        pos = start
        while pos < len(text):
            c = text[pos]
            if c in WHITESPACE or c in PUNCTUATION or c == '"':
                break
            if c == "/" and self._starts_comment(pos):
                break
            pos += 1
        self.pos = pos
        return Token(TokenType.STRING, text[start:pos], self.line)

    def next_token(self) -> Token:
        self._skip_whitespace()
        if self.pos >= len(self.text):
            return Token(TokenType.EOF, "", self.line)
        c = self.text[self.pos]
        if c == '"':
            return self._scan_quoted_string()
        if self.text.startswith("/*", self.pos):
            return self._scan_block_comment()
        if self.text.startswith("//", self.pos):
            return self._scan_line_comment()
        if c in PUNCTUATION:
            self.pos += 1
            return Token(PUNCTUATION[c], c, self.line)
        return self._scan_string()

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return


def tokenize(text: str) -> List[Token]:
    return list(Lexer(text))
