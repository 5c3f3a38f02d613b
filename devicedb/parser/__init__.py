"""Parser module - Lexer and Parser"""

from .lexer import Lexer, LexError, Token, TokenType
from .parser import Parser, ParseError, parse_command, parse_script

__all__ = ['Lexer', 'LexError', 'Token', 'TokenType', 'Parser', 'ParseError',
           'parse_command', 'parse_script']
