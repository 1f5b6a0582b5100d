"""Pattern tokens — ``/``-delimited pieces of a composed route pattern."""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Token:
    """One ``/``-delimited piece of a pattern.

    Literal:      ``artikel``    (input=False)
    Placeholder:  ``:kategori``  -> text="kategori", input=True

    An inline constraint such as ``:id(\\d+)`` stays inside ``text``.
    """

    text: str
    input: bool = False


def to_token(segment: str) -> Token:
    """Convert one slice of a pattern into a :class:`Token`.

    Examples::

        to_token("")          -> Token("")
        to_token("artikel")   -> Token("artikel")
        to_token(":kategori") -> Token("kategori", input=True)
    """
    if segment.startswith(":"):
        return Token(text=segment[1:], input=True)
    return Token(text=segment)


def tokenize(pattern: str) -> tuple[Token, ...]:
    """Split *pattern* on ``/`` and tokenize every piece.

    The leading ``/`` yields an empty first token.
    """
    return tuple(to_token(segment) for segment in pattern.split("/"))


def tokens_to_string(tokens: Iterable[Token]) -> str:
    """Render tokens back into a readable pattern, for logs and listings."""
    return "/".join(f":{t.text}" if t.input else t.text for t in tokens)
