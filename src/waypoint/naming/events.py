"""Traversal events recorded while routes are registered."""

from dataclasses import dataclass
from enum import Enum


class Operation(Enum):
    """Direction of a traversal event."""

    ENTER = "enter"
    EXIT = "exit"


@dataclass(frozen=True, slots=True)
class TraversalEvent:
    """A single enter or exit of a named route node.

    Events are produced in declaration order and nest like balanced
    parentheses: every EXIT matches the most recent unmatched ENTER.
    """

    operation: Operation
    name: str
    path: str

    @classmethod
    def enter(cls, name: str, path: str) -> "TraversalEvent":
        return cls(Operation.ENTER, name, path)

    @classmethod
    def exit(cls, name: str, path: str) -> "TraversalEvent":
        return cls(Operation.EXIT, name, path)


@dataclass(frozen=True, slots=True)
class Frame:
    """A node on the traversal stack."""

    name: str
    path: str
