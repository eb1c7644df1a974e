# src/extraction/source_extractor.py - v1
"""Structural digest of TypeScript / TSX / JavaScript source via tree-sitter.

Instead of the raw source, emits what a reader needs to know about a file:
comments, classes (with heritage and members), interfaces, functions with
signatures, type aliases, enums and JSX components with their props.

Input may start with a source attribution header::

    # Source: GitHub Repository owner/repo
    # File: src/app.tsx
    <blank line>

The header is preserved verbatim in front of the digest, and its ``File:``
line decides which grammar is used.
"""

from __future__ import annotations

import logging
import re

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from kbloader.extraction.base_extractor import ExtractorInput, fallback_text, read_text_content

logger = logging.getLogger(__name__)

_TYPESCRIPT = Language(tree_sitter_typescript.language_typescript())
_TSX = Language(tree_sitter_typescript.language_tsx())

_HEADER_RE = re.compile(r"^# Source:[^\n]*\n# File:[^\n]*\n\n")
_FILE_LINE_RE = re.compile(r"^# File: (.+)$", re.MULTILINE)
_WHITESPACE_RE = re.compile(r"\s+")

_CLASS_TYPES = {"class_declaration", "abstract_class_declaration"}
_FUNCTION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
    "method_definition",
}
_FUNCTION_VALUE_TYPES = {"arrow_function", "function_expression", "function"}
_MODIFIER_TOKENS = {
    "static", "readonly", "async", "abstract", "override", "declare", "get", "set",
}


def extract_source_structure(content: ExtractorInput, filename: str = "") -> str:
    """Return a structural digest of *content*, or the raw source if none can be built."""
    try:
        raw = read_text_content(content)
    except Exception:
        logger.warning("Failed to read source %s", filename or "<content>", exc_info=True)
        return fallback_text(content)

    header, body = split_source_header(raw)
    name = _header_filename(header) or filename or "source.ts"

    try:
        tree = Parser(_language_for(name)).parse(body.encode("utf-8"))
    except Exception:
        logger.warning("Failed to parse %s, keeping raw source", name, exc_info=True)
        return raw

    digest = _DigestBuilder().build(tree.root_node)
    if not digest.strip():
        return raw
    return header + digest


def split_source_header(text: str) -> tuple[str, str]:
    """Split a leading attribution header from the source body."""
    match = _HEADER_RE.match(text)
    if match is None:
        return "", text
    return match.group(0), text[match.end():]


def _header_filename(header: str) -> str:
    match = _FILE_LINE_RE.search(header)
    if match is None:
        return ""
    return match.group(1).strip().rsplit("/", 1)[-1]


def _language_for(filename: str) -> Language:
    # .js and .jsx commonly carry JSX, which only the TSX grammar accepts.
    if filename.lower().endswith((".tsx", ".jsx", ".js")):
        return _TSX
    return _TYPESCRIPT


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def _one_line(node: Node | None) -> str:
    return _WHITESPACE_RE.sub(" ", _text(node)).strip()


def _annotation(node: Node | None) -> str:
    """Type text without the leading colon of a type_annotation node."""
    return _one_line(node).lstrip(":").strip()


class _DigestBuilder:
    """Pre-order walk of the syntax tree collecting digest lines."""

    def __init__(self) -> None:
        self._lines: list[str] = []

    def build(self, root: Node) -> str:
        # Explicit stack: deeply nested JSX would exhaust the recursion limit.
        stack = [root]
        while stack:
            node = stack.pop()
            try:
                self._visit(node)
            except Exception:
                logger.debug("Skipping node %s", node.type, exc_info=True)
            stack.extend(reversed(node.children))
        return "\n".join(self._lines) + ("\n" if self._lines else "")

    def _visit(self, node: Node) -> None:
        kind = node.type
        if kind == "comment":
            self._lines.append(_text(node))
        elif kind in _CLASS_TYPES:
            self._class(node)
        elif kind in _FUNCTION_TYPES:
            self._function(node, node.child_by_field_name("name"))
        elif kind == "variable_declarator":
            value = node.child_by_field_name("value")
            if value is not None and value.type in _FUNCTION_VALUE_TYPES:
                self._function(value, node.child_by_field_name("name"))
        elif kind == "interface_declaration":
            self._interface(node)
        elif kind == "type_alias_declaration":
            self._type_alias(node)
        elif kind == "enum_declaration":
            self._enum(node)
        elif kind in ("jsx_element", "jsx_self_closing_element"):
            self._jsx(node)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _class(self, node: Node) -> None:
        name = _text(node.child_by_field_name("name")) or "Anonymous Class"
        heritage = " ".join(
            _one_line(clause)
            for child in node.children
            if child.type == "class_heritage"
            for clause in child.named_children
        )
        suffix = f" {heritage}" if heritage else ""
        self._lines.append(f"\nClass: {name}{self._type_params(node)}{suffix}")

        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else []:
            member_name = _text(member.child_by_field_name("name"))
            if not member_name:
                continue
            modifiers = [
                _text(c) for c in member.children
                if c.type == "accessibility_modifier" or c.type in _MODIFIER_TOKENS
            ]
            type_node = member.child_by_field_name("type") or member.child_by_field_name(
                "return_type"
            )
            type_text = _annotation(type_node)
            label = " ".join(modifiers + [member_name])
            self._lines.append(f"- {label}{': ' + type_text if type_text else ''}")

    def _function(self, node: Node, name_node: Node | None) -> None:
        name = _text(name_node) or "Anonymous Function"
        params = node.child_by_field_name("parameters")
        if params is not None:
            rendered = ", ".join(self._parameter(p) for p in params.named_children)
        else:
            # Single unparenthesized arrow parameter: `x => x + 1`
            rendered = _text(node.child_by_field_name("parameter"))
        returns = _annotation(node.child_by_field_name("return_type"))
        suffix = f": {returns}" if returns else ""
        self._lines.append(
            f"\nFunction: {name}{self._type_params(node)}({rendered}){suffix}"
        )

    def _interface(self, node: Node) -> None:
        name = _text(node.child_by_field_name("name"))
        heritage = " ".join(
            _one_line(c) for c in node.children if c.type == "extends_type_clause"
        )
        suffix = f" {heritage}" if heritage else ""
        self._lines.append(f"\nInterface: {name}{self._type_params(node)}{suffix}")

        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else []:
            member_name = _text(member.child_by_field_name("name"))
            if not member_name:
                continue
            type_node = member.child_by_field_name("type") or member.child_by_field_name(
                "return_type"
            )
            type_text = _annotation(type_node)
            self._lines.append(f"- {member_name}{': ' + type_text if type_text else ''}")

    def _type_alias(self, node: Node) -> None:
        name = _text(node.child_by_field_name("name"))
        value = _one_line(node.child_by_field_name("value"))
        self._lines.append(f"\nType: {name}{self._type_params(node)} = {value}")

    def _enum(self, node: Node) -> None:
        self._lines.append(f"\nEnum: {_text(node.child_by_field_name('name'))}")
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else []:
            if member.type == "enum_assignment":
                name = _text(member.child_by_field_name("name"))
                value = _one_line(member.child_by_field_name("value"))
                self._lines.append(f"- {name} = {value}")
            elif member.type != "comment":
                self._lines.append(f"- {_text(member)}")

    def _jsx(self, node: Node) -> None:
        tag = node.child_by_field_name("open_tag") if node.type == "jsx_element" else node
        if tag is None:
            return
        name = _text(tag.child_by_field_name("name")) or "Anonymous"
        self._lines.append(f"\nReact Component: {name}")
        for attribute in tag.named_children:
            if attribute.type == "jsx_attribute" and attribute.named_children:
                self._lines.append(f"- Prop: {_text(attribute.named_children[0])}")

    # ------------------------------------------------------------------
    # Pieces
    # ------------------------------------------------------------------

    @staticmethod
    def _type_params(node: Node) -> str:
        params = node.child_by_field_name("type_parameters")
        if params is None:
            return ""
        names = [
            _text(p.child_by_field_name("name"))
            for p in params.named_children
            if p.type == "type_parameter"
        ]
        return f"<{', '.join(names)}>" if names else ""

    @staticmethod
    def _parameter(param: Node) -> str:
        pattern = param.child_by_field_name("pattern")
        if pattern is None:
            return _one_line(param)
        type_text = _annotation(param.child_by_field_name("type"))
        return f"{_one_line(pattern)}{': ' + type_text if type_text else ''}"
