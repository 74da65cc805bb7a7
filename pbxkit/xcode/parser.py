# Property list parser.
#
# Builds the generic element tree from the token stream. The grammar is small:
#
#   document := dict
#   dict     := '{' (string '=' value ';')* '}'
#   array    := '(' (value ',')* ')'
#   value    := string | dict | array
#
# The parser is deliberately forgiving. Missing closers truncate the open
# containers at end of input, duplicate keys keep the last value and stray
# punctuation is skipped. The only fatal condition is a document that does not
# start with a dictionary.

import logging
from typing import List, Optional, Tuple

from pbxkit.errors import ParseError
from pbxkit.xcode.elements import PBXArray, PBXDict, PBXElement, PBXString
from pbxkit.xcode.lexer import Token, TokenType, tokenize

logger = logging.getLogger(__name__)

# A significant token and the comment that immediately followed it, if any
TokenWithComment = Tuple[Token, Optional[str]]


def attach_comments(tokens: List[Token]) -> List[TokenWithComment]:
    result: List[TokenWithComment] = []
    for token in tokens:
        if token.type == TokenType.COMMENT:
            if result and result[-1][0].is_string and result[-1][1] is None:
                result[-1] = (result[-1][0], token.text)
            continue
        result.append((token, None))
    return result


class Parser:
    def __init__(self, text: str):
        self.tokens = attach_comments(tokenize(text))
        self.index = 0

    def _peek(self) -> TokenWithComment:
        return self.tokens[min(self.index, len(self.tokens) - 1)]

    def _next(self) -> TokenWithComment:
        item = self._peek()
        if self.index < len(self.tokens):
            self.index += 1
        return item

    def parse_document(self) -> PBXDict:
        token, _ = self._next()
        if token.type != TokenType.LBRACE:
            raise ParseError(line=token.line)
        root = self.parse_dict()
        trailing, _ = self._peek()
        if trailing.type != TokenType.EOF:
            logger.debug("ignoring content after root dictionary at line %d", trailing.line)
        return root

    def parse_value(self) -> Optional[PBXElement]:
        token, comment = self._peek()
        if token.is_string:
            self._next()
            return PBXString(
                token.text,
                quoted=token.type == TokenType.QUOTED_STRING,
                comment=comment,
            )
        if token.type == TokenType.LBRACE:
            self._next()
            return self.parse_dict()
        if token.type == TokenType.LPAREN:
            self._next()
            return self.parse_array()
        return None

    def parse_dict(self) -> PBXDict:
        result = PBXDict()
        while True:
            token, comment = self._peek()
            if token.type == TokenType.EOF:
                logger.debug("unterminated dictionary at end of input")
                return result
            if token.type == TokenType.RBRACE:
                self._next()
                return result
            if not token.is_string:
                # Stray punctuation or a value without a key
                if self.parse_value() is None:
                    self._next()
                logger.debug("skipping unexpected %s at line %d", token.type.name, token.line)
                continue
            self._next()
            key = token.text
            if self._peek()[0].type != TokenType.EQUALS:
                logger.debug("key %r without value at line %d", key, token.line)
                continue
            self._next()
            value = self.parse_value()
            if value is None:
                logger.debug("key %r without value at line %d", key, token.line)
                continue
            if key in result:
                logger.debug("duplicate key %r at line %d, keeping last value", key, token.line)
            result[key] = value
            if comment is not None:
                result.key_comments[key] = comment
            if self._peek()[0].type == TokenType.SEMICOLON:
                self._next()

    def parse_array(self) -> PBXArray:
        result = PBXArray()
        while True:
            token, _ = self._peek()
            if token.type == TokenType.EOF:
                logger.debug("unterminated array at end of input")
                return result
            if token.type == TokenType.RPAREN:
                self._next()
                return result
            if token.type == TokenType.RBRACE:
                # Closes the enclosing dictionary, leave it for the caller
                logger.debug("array closed by '}' at line %d", token.line)
                return result
            value = self.parse_value()
            if value is None:
                self._next()
                continue
            result.values.append(value)


def parse_document(text: str) -> PBXDict:
    return Parser(text).parse_document()
