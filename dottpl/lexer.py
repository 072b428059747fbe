"""
Lexical analyzer for templates with {{ }} directives.

Scans the template once, left to right, and emits positioned tokens only for
directive syntax. Literal text produces no tokens at all: the renderer later
reproduces it by slicing the source between directive spans.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .tokens import KEYWORDS, Token, TokenType

logger = logging.getLogger(__name__)

# Tokens after which a '.' starts a field path
_PATH_OWNERS = (TokenType.OPEN_BRACE, TokenType.RANGE, TokenType.IF)


class TemplateLexer:
    """
    Permissive scanner for directive tokens.

    Recognizes:
    - '{{' and '}}' delimiters
    - field paths ('.foo', '.foo.bar') after '{{', 'range' or 'if'
    - keywords 'range', 'if', 'end' directly after '{{'

    Scanning never fails. Malformed constructs are reported by the parser,
    which knows what shape it expected.
    """

    def __init__(self, text: str):
        """
        Initializes the lexer with the template source.

        Args:
            text: Template text to scan
        """
        self.text = text
        self.length = len(text)
        self.position = 0
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        """
        Splits the template into directive tokens.

        Returns:
            Tokens in strictly increasing position order
        """
        self.position = 0
        self.tokens = []

        while self.position < self.length:
            token = self._match_token()
            if token is None:
                # Literal byte, nothing to record
                self.position += 1
                continue
            self.tokens.append(token)

        logger.debug(f"Tokenized template of length {self.length} into {len(self.tokens)} tokens")
        return self.tokens

    def _match_token(self) -> Optional[Token]:
        """
        Tries to recognize a token at the current position.

        Advances the position past the token when one is found.
        """
        char = self.text[self.position]

        if char == "{":
            return self._match_pair("{", TokenType.OPEN_BRACE)
        if char == "}":
            return self._match_pair("}", TokenType.CLOSE_BRACE)
        if char == "." and self._last_type() in _PATH_OWNERS:
            return self._match_path()
        if self._last_type() is TokenType.OPEN_BRACE:
            return self._match_keyword()
        return None

    def _match_pair(self, char: str, token_type: TokenType) -> Optional[Token]:
        """Recognizes a doubled brace; a lone brace stays literal text."""
        start = self.position
        if start + 1 < self.length and self.text[start + 1] == char:
            self.position += 2
            return Token(token_type, start, start + 2)
        return None

    def _match_path(self) -> Optional[Token]:
        """
        Consumes a field path after a dot.

        The path is the maximal run of characters that are neither '}' nor a
        space. An empty path produces no token; the position still moves past
        the dot and any spaces after it.
        """
        self.position += 1  # the dot itself

        while self.position < self.length and self.text[self.position] == " ":
            self.position += 1

        start = self.position
        while self.position < self.length and self.text[self.position] not in ("}", " "):
            self.position += 1

        if start == self.position:
            logger.debug(f"Dropped empty path at offset {start}")
            return None
        return Token(TokenType.IDENT, start, self.position)

    def _match_keyword(self) -> Optional[Token]:
        """Recognizes a keyword; only called right after an opening brace."""
        for word, token_type in KEYWORDS.items():
            if self.text.startswith(word, self.position):
                start = self.position
                self.position += len(word)
                return Token(token_type, start, self.position)
        return None

    def _last_type(self) -> Optional[TokenType]:
        """Type of the most recently emitted token, or None at the beginning."""
        if not self.tokens:
            return None
        return self.tokens[-1].type


def tokenize_template(text: str) -> List[Token]:
    """
    Convenience function for template tokenization.

    Args:
        text: Template source

    Returns:
        List of directive tokens
    """
    lexer = TemplateLexer(text)
    return lexer.tokenize()


__all__ = ["TemplateLexer", "tokenize_template"]
