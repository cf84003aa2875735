# pdt/tokens.py
"""
Tokenizer: raw text -> NUMBER / WORD / SYMBOL tokens, terminated by END.

Text-level normalization runs first:
  1) (parenthesised comments) are removed, they may nest
  2) case is folded
  3) '-' or '+' not immediately followed by a digit turns into a space
  4) whitespace runs collapse to one space
"""
from __future__ import annotations
from typing import Iterator, NamedTuple

from .errors import LexError, OutOfRange

NUMBER = "number"
WORD = "word"
SYMBOL = "symbol"
END = "end"

DIGITS = "0123456789"
LETTERS = "abcdefghijklmnopqrstuvwxyz"

# int() refuses longer decimal strings on current interpreters
_MAX_DIGITS = 4000


class Token(NamedTuple):
    kind: str
    text: str
    sign: str = ""
    pos: int = 0
    spaced: bool = False

    @property
    def value(self) -> int:
        digits = self.text.lstrip("0") or "0"
        if len(digits) > _MAX_DIGITS:
            raise OutOfRange(f"number with {len(digits)} digits is too large")
        n = int(digits)
        return -n if self.sign == "-" else n

    def is_word(self, *words: str) -> bool:
        return self.kind == WORD and (not words or self.text in words)

    def is_symbol(self, *chars: str) -> bool:
        return self.kind == SYMBOL and (not chars or self.text in chars)

    def is_number(self, signed: bool = False) -> bool:
        """True for NUMBER tokens; unsigned ones only unless `signed`."""
        return self.kind == NUMBER and (signed or not self.sign)

    def __str__(self) -> str:
        return self.sign + self.text

# ---------- normalization ----------

def _strip_comments(text: str) -> str:
    out = []
    depth = 0
    for ch in text:
        if ch == "(":
            if depth == 0:
                out.append(" ")
            depth += 1
        elif ch == ")":
            if depth == 0:
                raise LexError("unbalanced ')' in date string")
            depth -= 1
        elif depth == 0:
            out.append(ch)
    if depth:
        raise LexError("unterminated comment: missing ')'")
    return "".join(out)

def _drop_loose_signs(text: str) -> str:
    chars = list(text)
    n = len(chars)
    for i, ch in enumerate(chars):
        if ch in "+-" and not (i + 1 < n and chars[i + 1] in DIGITS):
            chars[i] = " "
    return "".join(chars)

def normalize(text: str) -> str:
    s = _strip_comments(text)
    s = s.lower()
    s = _drop_loose_signs(s)
    return " ".join(s.split())

# ---------- scanning ----------

def _scan(text: str) -> Iterator[Token]:
    i, n = 0, len(text)
    spaced = False
    while i < n:
        ch = text[i]
        if ch == " ":
            spaced = True
            i += 1
            continue
        start = i
        signed = (
            ch in "+-"
            and i + 1 < n and text[i + 1] in DIGITS
            and not (i > 0 and text[i - 1] in DIGITS)
        )
        if ch in DIGITS or signed:
            sign = ""
            if signed:
                sign = ch
                i += 1
            j = i
            while j < n and text[j] in DIGITS:
                j += 1
            yield Token(NUMBER, text[i:j], sign, start, spaced)
            i = j
        elif ch in LETTERS:
            j = i
            while j < n and text[j] in LETTERS:
                j += 1
            yield Token(WORD, text[i:j], "", start, spaced)
            i = j
        else:
            yield Token(SYMBOL, ch, "", start, spaced)
            i += 1
        spaced = False
    yield Token(END, "", "", n, spaced)


class TokenStream:
    """Lazy token sequence over one input. Every iteration rescans from the start."""

    def __init__(self, source: str):
        self.source = source
        self.text = normalize(source)

    def __iter__(self) -> Iterator[Token]:
        return _scan(self.text)

    def remainder(self, token: Token) -> str:
        return self.text[token.pos:]


def tokenize(source: str) -> TokenStream:
    return TokenStream(source)
