"""
Command Lexer - Tokenizes DeviceDB commands

Converts raw command strings into a stream of tokens for the parser.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, List, Optional


class TokenType(Enum):
    """Types of tokens in the command language"""
    # Keywords
    INSERT = auto()
    FIND = auto()
    WALK = auto()
    COUNT = auto()
    VALIDATE = auto()
    SHOW = auto()
    TREE = auto()
    STATS = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    SEMICOLON = auto()
    MINUS = auto()

    # Literals
    INTEGER = auto()
    STRING = auto()
    IDENTIFIER = auto()

    # Special
    EOF = auto()


@dataclass
class Token:
    """A single token"""
    type: TokenType
    value: Any
    line: int
    column: int

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r})"


class LexError(ValueError):
    """Raised for input the lexer cannot tokenize"""

    def __init__(self, message: str, line: int, column: int):
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, column {column}")


class Lexer:
    """Command lexer - converts command text to tokens"""

    KEYWORDS = {
        'INSERT': TokenType.INSERT,
        'FIND': TokenType.FIND,
        'WALK': TokenType.WALK,
        'COUNT': TokenType.COUNT,
        'VALIDATE': TokenType.VALIDATE,
        'SHOW': TokenType.SHOW,
        'TREE': TokenType.TREE,
        'STATS': TokenType.STATS,
    }

    SINGLE_CHAR_TOKENS = {
        '(': TokenType.LPAREN,
        ')': TokenType.RPAREN,
        ',': TokenType.COMMA,
        ';': TokenType.SEMICOLON,
        '-': TokenType.MINUS,
    }

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1

    def _current_char(self) -> Optional[str]:
        """Get current character or None if at end"""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def _peek(self, offset: int = 1) -> Optional[str]:
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def _advance(self) -> str:
        """Advance position and return current char"""
        char = self._current_char()
        self.pos += 1
        if char == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _skip_whitespace(self) -> None:
        while self._current_char() is not None and self._current_char() in ' \t\r\n':
            self._advance()

    def _skip_comment(self) -> None:
        """Skip a -- comment up to the end of the line"""
        while self._current_char() is not None and self._current_char() != '\n':
            self._advance()

    def _read_string(self, quote_char: str) -> Token:
        """Read a quoted string literal"""
        start_line = self.line
        start_col = self.column
        self._advance()  # Opening quote

        value = []
        while self._current_char() is not None and self._current_char() != quote_char:
            if self._current_char() == '\\' and self._peek() == quote_char:
                self._advance()
            value.append(self._advance())

        if self._current_char() != quote_char:
            raise LexError("Unterminated string", start_line, start_col)
        self._advance()  # Closing quote

        return Token(TokenType.STRING, ''.join(value), start_line, start_col)

    def _read_number(self) -> Token:
        start_line = self.line
        start_col = self.column

        value = []
        while self._current_char() is not None and self._current_char().isdigit():
            value.append(self._advance())

        return Token(TokenType.INTEGER, int(''.join(value)), start_line, start_col)

    def _read_identifier(self) -> Token:
        """Read an identifier or keyword"""
        start_line = self.line
        start_col = self.column

        value = []
        while self._current_char() is not None and (self._current_char().isalnum() or
                                                    self._current_char() in '_/.:'):
            value.append(self._advance())

        identifier = ''.join(value)
        upper_id = identifier.upper()
        if upper_id in self.KEYWORDS:
            return Token(self.KEYWORDS[upper_id], upper_id, start_line, start_col)

        return Token(TokenType.IDENTIFIER, identifier, start_line, start_col)

    def tokenize(self) -> List[Token]:
        """Tokenize the entire input"""
        tokens = []

        while True:
            self._skip_whitespace()
            char = self._current_char()
            if char is None:
                break

            if char == '-' and self._peek() == '-':
                self._skip_comment()
                continue

            if char in '"\'':
                tokens.append(self._read_string(char))
                continue

            if char.isdigit():
                tokens.append(self._read_number())
                continue

            if char.isalpha() or char == '_':
                tokens.append(self._read_identifier())
                continue

            if char in self.SINGLE_CHAR_TOKENS:
                tokens.append(Token(self.SINGLE_CHAR_TOKENS[char], char, self.line, self.column))
                self._advance()
                continue

            raise LexError(f"Unexpected character {char!r}", self.line, self.column)

        tokens.append(Token(TokenType.EOF, None, self.line, self.column))
        return tokens
