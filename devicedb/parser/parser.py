"""
Command Parser - Converts tokens into statement objects

Uses recursive descent parsing. Grammar:

    INSERT (id, 'address' [, 'path']) [, (...)]
    FIND id
    WALK
    COUNT
    VALIDATE
    SHOW TREE
    SHOW STATS

Keywords are case-insensitive and a trailing ';' is optional.
"""

from dataclasses import dataclass, field
from typing import List, Union

from .lexer import Lexer, Token, TokenType
from ..core.types import IoTDevice


# ============================================================================
# Statement Types
# ============================================================================

@dataclass
class InsertStatement:
    """INSERT one or more devices"""
    devices: List[IoTDevice] = field(default_factory=list)


@dataclass
class FindStatement:
    """FIND a device by id"""
    device_id: int


@dataclass
class WalkStatement:
    """WALK all devices in id order"""
    pass


@dataclass
class CountStatement:
    pass


@dataclass
class ValidateStatement:
    pass


@dataclass
class ShowTreeStatement:
    pass


@dataclass
class ShowStatsStatement:
    pass


Statement = Union[InsertStatement, FindStatement, WalkStatement, CountStatement,
                  ValidateStatement, ShowTreeStatement, ShowStatsStatement]


# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parser error with position information"""
    def __init__(self, message: str, token: Token):
        self.token = token
        super().__init__(f"{message} at line {token.line}, column {token.column}")


class Parser:
    """Recursive descent command parser"""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def _current(self) -> Token:
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self._current()
        self.pos += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        return self._current().type in types

    def _expect(self, token_type: TokenType, message: str = None) -> Token:
        """Expect a specific token type"""
        if not self._match(token_type):
            msg = message or f"Expected {token_type.name}"
            raise ParseError(msg, self._current())
        return self._advance()

    def _consume_if(self, token_type: TokenType) -> bool:
        if self._match(token_type):
            self._advance()
            return True
        return False

    def parse(self) -> Statement:
        """Parse a single statement"""
        if self._match(TokenType.INSERT):
            statement = self._parse_insert()
        elif self._match(TokenType.FIND):
            statement = self._parse_find()
        elif self._match(TokenType.WALK):
            self._advance()
            statement = WalkStatement()
        elif self._match(TokenType.COUNT):
            self._advance()
            statement = CountStatement()
        elif self._match(TokenType.VALIDATE):
            self._advance()
            statement = ValidateStatement()
        elif self._match(TokenType.SHOW):
            statement = self._parse_show()
        else:
            raise ParseError(f"Unexpected token: {self._current().value}", self._current())

        self._consume_if(TokenType.SEMICOLON)
        if not self._match(TokenType.EOF):
            raise ParseError(f"Unexpected token: {self._current().value}", self._current())
        return statement

    def _parse_insert(self) -> InsertStatement:
        self._expect(TokenType.INSERT)

        devices = []
        while True:
            devices.append(self._parse_device())
            if not self._consume_if(TokenType.COMMA):
                break

        return InsertStatement(devices=devices)

    def _parse_device(self) -> IoTDevice:
        """Parse (id, 'address' [, 'path'])"""
        self._expect(TokenType.LPAREN)
        device_id = self._parse_device_id()
        self._expect(TokenType.COMMA)
        address = self._parse_text()

        path = ""
        if self._consume_if(TokenType.COMMA):
            path = self._parse_text()

        self._expect(TokenType.RPAREN)
        return IoTDevice(device_id, address, path)

    def _parse_device_id(self) -> int:
        if self._match(TokenType.MINUS):
            raise ParseError("Device id must be non-negative", self._current())
        return self._expect(TokenType.INTEGER, "Expected device id").value

    def _parse_text(self) -> str:
        """A quoted string or a bare identifier"""
        if self._match(TokenType.STRING, TokenType.IDENTIFIER):
            return self._advance().value
        raise ParseError(f"Expected string, got {self._current().type.name}", self._current())

    def _parse_find(self) -> FindStatement:
        self._expect(TokenType.FIND)
        return FindStatement(device_id=self._parse_device_id())

    def _parse_show(self) -> Union[ShowTreeStatement, ShowStatsStatement]:
        self._expect(TokenType.SHOW)
        if self._consume_if(TokenType.TREE):
            return ShowTreeStatement()
        if self._consume_if(TokenType.STATS):
            return ShowStatsStatement()
        raise ParseError("Expected TREE or STATS after SHOW", self._current())


def parse_command(text: str) -> Statement:
    """Parse a command string into a statement"""
    lexer = Lexer(text)
    tokens = lexer.tokenize()
    parser = Parser(tokens)
    return parser.parse()


def parse_script(text: str) -> List[Statement]:
    """
    Parse a script of ';'-separated commands.

    The text is tokenized once and cut at each SEMICOLON token, so a ';'
    inside a quoted string or a '--' comment does not end a command.
    Empty commands are skipped.

    Returns:
        The statements in script order
    """
    statements = []
    chunk: List[Token] = []
    for token in Lexer(text).tokenize():
        if token.type in (TokenType.SEMICOLON, TokenType.EOF):
            if chunk:
                chunk.append(Token(TokenType.EOF, None, token.line, token.column))
                statements.append(Parser(chunk).parse())
                chunk = []
            continue
        chunk.append(token)
    return statements
