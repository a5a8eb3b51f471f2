"""Character scanning stage for strict markup parsing.

Key Components:
    Scanner: Lazy, single-pass conversion of characters into tokens
    Token: Smallest lexical unit, tagged with its source line
    TokenType: Kinds of tokens the scanner emits
"""

from .scanner import CharacterSource, Scanner
from .tokens import STRUCTURAL_TOKEN_TYPES, Token, TokenType

__all__ = [
    "CharacterSource",
    "Scanner",
    "STRUCTURAL_TOKEN_TYPES",
    "Token",
    "TokenType",
]
