"""Parsing of attribute strings such as ``#[derive(Debug)]`` into a meta-item tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

_LEFT_TO_RIGHT = {"(": ")", "[": "]", "{": "}"}
_RIGHT_BRACKETS = frozenset(_LEFT_TO_RIGHT.values())


def _is_left_bracket(c: str) -> bool:
    return c in _LEFT_TO_RIGHT


def _is_right_bracket(c: str) -> bool:
    return c in _RIGHT_BRACKETS


@dataclass(frozen=True)
class AttributeMetaItem:
    """One meta item: a path, optionally followed by ``= value`` or bracketed arguments."""

    raw_item: str
    base: str
    assigned_item: Optional[str] = None
    arguments: Optional[tuple[AttributeMetaItem, ...]] = None

    @classmethod
    def parse(cls, raw: str) -> AttributeMetaItem:
        """Parse a meta item; unrecognised forms keep the whole text as the base."""
        raw_trimmed = raw.strip()

        path_end = next(
            (
                index
                for index, c in enumerate(raw_trimmed)
                if c.isspace() or c == "=" or _is_left_bracket(c)
            ),
            None,
        )
        if path_end is not None:
            simple_path = raw_trimmed[:path_end]
            attr_input = raw_trimmed[path_end:]
            if simple_path:
                stripped_input = attr_input.strip()
                if stripped_input.startswith("="):
                    return cls(
                        raw_item=raw_trimmed,
                        base=simple_path,
                        assigned_item=stripped_input[1:].lstrip(),
                    )
                arguments = _slice_arguments(attr_input)
                if arguments is not None:
                    return cls(
                        raw_item=raw_trimmed,
                        base=simple_path,
                        arguments=arguments,
                    )

        return cls(raw_item=raw_trimmed, base=raw_trimmed)


def _slice_arguments(raw: str) -> Optional[tuple[AttributeMetaItem, ...]]:
    """Split a bracketed, comma-separated sequence of meta items, or return None."""
    raw_trimmed = raw.strip()
    if not raw_trimmed or not _is_left_bracket(raw_trimmed[0]):
        return None
    closing = _LEFT_TO_RIGHT[raw_trimmed[0]]
    inner = raw_trimmed[1:]
    if not inner.endswith(closing):
        return None
    meta_seq = inner[:-1].strip()

    index_after_last_comma = 0
    previous_is_escape = False
    inside_string_literal = False
    open_brackets: list[str] = []
    arguments: list[AttributeMetaItem] = []

    for index, c in enumerate(meta_seq):
        if c == '"' and not previous_is_escape:
            inside_string_literal = not inside_string_literal

        if not inside_string_literal:
            if _is_left_bracket(c):
                open_brackets.append(c)
            elif _is_right_bracket(c):
                # Mismatched brackets: the format is not understood.
                if not open_brackets or _LEFT_TO_RIGHT[open_brackets.pop()] != c:
                    return None
            elif c == "," and not open_brackets:
                arguments.append(
                    AttributeMetaItem.parse(meta_seq[index_after_last_comma:index])
                )
                index_after_last_comma = index + 1

        previous_is_escape = c == "\\"

    if index_after_last_comma < len(meta_seq):
        arguments.append(AttributeMetaItem.parse(meta_seq[index_after_last_comma:]))

    return tuple(arguments)


@dataclass(frozen=True)
class Attribute:
    """An outer (``#[...]``) or inner (``#![...]``) attribute."""

    is_inner: bool
    content: AttributeMetaItem

    def raw_attribute(self) -> str:
        """Return the attribute text rebuilt from its content."""
        bang = "!" if self.is_inner else ""
        return f"#{bang}[{self.content.raw_item}]"

    @classmethod
    def parse(cls, raw: str) -> Attribute:
        """Parse an attribute string; raise ValueError if it is not one."""
        raw_trimmed = raw.strip()
        if not raw_trimmed.endswith("]"):
            raise ValueError(
                f"String `{raw_trimmed}` cannot be parsed as an attribute "
                "because it is not closed with a square bracket."
            )
        without_closing = raw_trimmed[:-1]

        if without_closing.startswith("#["):
            return cls(
                is_inner=False,
                content=AttributeMetaItem.parse(without_closing[2:]),
            )
        if without_closing.startswith("#!["):
            return cls(
                is_inner=True,
                content=AttributeMetaItem.parse(without_closing[3:]),
            )
        raise ValueError(
            f"String `{raw_trimmed}` cannot be parsed as an attribute "
            "because it starts with neither `#[` nor `#![`."
        )