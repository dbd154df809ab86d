"""Hierarchical probe name index used for completion.

The index is a trie built from two textual dumps produced by the pipeline:
the base probe types (``kernel.function(string)``) and the probe aliases
(``syscall.read = kernel.function("sys_read")``).  Each dotted component is a
node.  Components carrying a ``(number)`` or ``(string)`` marker become
placeholder nodes that fully match a typed literal argument, e.g.

    USER INPUT              NODE KEY
    'kernel'                'kernel'
    'kernel("sys_read")'    'kernel(string)'
    'process(123)'          'process(number)'

Nodes live in a flat arena and refer to their children by index.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Pattern, Sequence, Tuple

PLACEHOLDER_NONE = "none"
PLACEHOLDER_NUMBER = "number"
PLACEHOLDER_STRING = "string"

_PLACEHOLDER_MARKERS: Sequence[Tuple[str, str, Pattern[str]]] = (
    ("(number)", PLACEHOLDER_NUMBER, re.compile(r"^\([x0-9a-fA-F]+\)$")),
    ("(string)", PLACEHOLDER_STRING, re.compile(r'^\("[^"]+"\)$')),
)

ROOT = 0


@dataclass
class MatchNode:
    segment_text: str = ""
    placeholder: str = PLACEHOLDER_NONE
    pattern: Optional[Pattern[str]] = None
    terminal: bool = False
    children: Dict[str, int] = field(default_factory=dict)

    def full_match(self, text: str) -> bool:
        """Return True when *text* completely matches this component."""
        if self.pattern is None:
            return text == self.segment_text
        prefix = self.segment_text
        if len(text) <= len(prefix) or not text.startswith(prefix):
            return False
        return self.pattern.match(text[len(prefix):]) is not None

    def partial_match(self, text: str) -> bool:
        """Prefix test against the literal part only; patterns are never partially matched."""
        if not text:
            return True
        return self.segment_text.startswith(text)


def _make_node(segment: str, handle_placeholders: bool) -> MatchNode:
    if handle_placeholders:
        for marker, kind, pattern in _PLACEHOLDER_MARKERS:
            pos = segment.find(marker)
            if pos >= 0:
                return MatchNode(segment_text=segment[:pos], placeholder=kind, pattern=pattern)
    return MatchNode(segment_text=segment)


def split_path(text: str) -> List[str]:
    return [segment for segment in text.split(".") if segment]


class NameIndex:
    """Trie of dotted probe names with an index-addressed node arena."""

    def __init__(self) -> None:
        self._nodes: List[MatchNode] = [MatchNode()]

    def __len__(self) -> int:
        return sum(1 for node in self._nodes if node.terminal)

    def node(self, index: int) -> MatchNode:
        return self._nodes[index]

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    def add_path(self, line: str, *, handle_placeholders: bool = True) -> None:
        """Index one dump line; anything from the first space on is ignored."""
        space = line.find(" ")
        if space >= 0:
            line = line[:space]
        segments = split_path(line)
        current = ROOT
        for position, segment in enumerate(segments):
            last = position == len(segments) - 1
            children = self._nodes[current].children
            child = children.get(segment)
            if child is None:
                node = _make_node(segment, handle_placeholders)
                node.terminal = last
                child = len(self._nodes)
                self._nodes.append(node)
                children[segment] = child
            elif last:
                # A shorter path ending on an existing interior node.
                self._nodes[child].terminal = True
            current = child

    def load(self, lines: Iterable[str], *, handle_placeholders: bool = True) -> int:
        """Index every non-empty line; return how many lines were consumed."""
        if isinstance(lines, str):
            lines = lines.splitlines()
        count = 0
        for line in lines:
            line = line.rstrip("\r\n")
            if not line:
                continue
            self.add_path(line, handle_placeholders=handle_placeholders)
            count += 1
        return count

    def descend(self, segments: Iterable[str]) -> int:
        """Follow fully matching children; stop at the deepest matched level."""
        current = ROOT
        for segment in segments:
            for child in self._nodes[current].children.values():
                if self._nodes[child].full_match(segment):
                    current = child
                    break
            else:
                break
        return current

    def resolve(self, path: str) -> Optional[int]:
        """Return the node reached by fully matching every component of *path*."""
        current = ROOT
        for segment in split_path(path):
            for child in self._nodes[current].children.values():
                if self._nodes[child].full_match(segment):
                    current = child
                    break
            else:
                return None
        return current

    def complete(self, path: str, text: str) -> Iterator[str]:
        """Yield terminal key paths below *path* whose next component starts with *text*.

        *path* is the dotted text typed so far before the component being
        completed.  Results are relative to the level reached by *path*, in
        insertion order, depth first.
        """
        start = self.descend(split_path(path))
        stack: List[Tuple[str, int]] = []
        for key, child in reversed(list(self._nodes[start].children.items())):
            if self._nodes[child].partial_match(text):
                stack.append((key, child))
        while stack:
            prefix, index = stack.pop()
            node = self._nodes[index]
            for key, child in reversed(list(node.children.items())):
                stack.append((f"{prefix}.{key}", child))
            if node.terminal:
                yield prefix

    def paths(self) -> Iterator[str]:
        """Yield every indexed terminal path, depth first."""
        return self.complete("", "")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [
                {
                    "segment_text": node.segment_text,
                    "placeholder": node.placeholder,
                    "terminal": node.terminal,
                    "children": dict(node.children),
                }
                for node in self._nodes
            ]
        }


__all__ = [
    "MatchNode",
    "NameIndex",
    "PLACEHOLDER_NONE",
    "PLACEHOLDER_NUMBER",
    "PLACEHOLDER_STRING",
    "split_path",
]
