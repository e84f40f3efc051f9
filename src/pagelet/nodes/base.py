"""Base node class for pagelet syntax trees."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all tree nodes.

    Nodes are immutable, so one parsed tree can be rendered concurrently
    against any number of contexts.

    """
