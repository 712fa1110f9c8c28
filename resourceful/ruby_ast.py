"""tree-sitter helpers for reading Ruby route definitions."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import tree_sitter_ruby as tsruby
from tree_sitter import Language, Node, Parser

RUBY_LANGUAGE = Language(tsruby.language())

PUNCTUATION = {",", "(", ")", "[", "]", "{", "}"}
BLOCK_TYPES = ("do_block", "block")


def parse_ruby(source: bytes) -> Node:
    """Parse Ruby source and return the root node."""
    return Parser(RUBY_LANGUAGE).parse(source).root_node


def node_text(node: Optional[Node]) -> str:
    if node is None:
        return ""
    return node.text.decode("utf-8")


def call_parts(node: Node) -> Optional[Tuple[str, List[Node], Optional[Node]]]:
    """Split a ``call`` node into (method_name, argument_nodes, block_node).

    ``resources :hats, only: [:index] do ... end`` gives
    ("resources", [simple_symbol, pair], do_block). Returns None for
    anything that is not a call.
    """
    if node.type != "call":
        return None
    method = node.child_by_field_name("method")
    if method is None:
        return None

    arguments = node.child_by_field_name("arguments")
    block = node.child_by_field_name("block")
    if arguments is None or block is None:
        for child in node.children:
            if arguments is None and child.type == "argument_list":
                arguments = child
            elif block is None and child.type in BLOCK_TYPES:
                block = child

    args = []
    if arguments is not None:
        args = [c for c in arguments.children if c.type not in PUNCTUATION]
    return node_text(method), args, block


def block_statements(block: Optional[Node]) -> List[Node]:
    """The statements inside a ``do ... end`` or ``{ ... }`` block."""
    if block is None:
        return []
    body = block.child_by_field_name("body")
    if body is None:
        for child in block.children:
            if child.type in ("body_statement", "block_body"):
                body = child
                break
    if body is None:
        # Older grammars put the statements straight under the block
        return [c for c in block.named_children if c.type != "block_parameters"]
    return list(body.named_children)


def literal(node: Optional[Node]) -> Optional[str]:
    """The value of a symbol, string or bare word: ``:hats``, ``'hats'``, ``hats:``."""
    if node is None:
        return None
    if node.type == "string":
        return "".join(node_text(c) for c in node.children if c.type == "string_content")
    text = node_text(node).strip()
    if node.type == "hash_key_symbol":
        return text.rstrip(":")
    if node.type in ("simple_symbol", "delimited_symbol"):
        return text[1:].strip("'\"")
    if len(text) >= 2 and text[0] in "'\"" and text[-1] == text[0]:
        return text[1:-1]
    return text


def literal_list(node: Node) -> List[str]:
    """Values of ``[:index, :show]``, ``%i[index show]`` or a single ``:index``."""
    if node.type == "array":
        return [v for v in (literal(c) for c in node.named_children) if v]
    if node.type in ("symbol_array", "string_array"):
        return [node_text(c) for c in node.named_children]
    value = literal(node)
    return [value] if value else []


def keyword_options(args: List[Node]) -> Dict[str, Node]:
    """Map option names to value nodes for ``key: value`` and ``:key => value`` pairs."""
    options: Dict[str, Node] = {}
    for arg in args:
        pairs = [arg] if arg.type == "pair" else []
        if arg.type == "hash":
            pairs = [c for c in arg.named_children if c.type == "pair"]
        for pair in pairs:
            key = pair.child_by_field_name("key")
            value = pair.child_by_field_name("value")
            name = literal(key)
            if name and value is not None:
                options[name] = value
    return options


def positional(args: List[Node]) -> List[Node]:
    """The arguments that are not ``key: value`` options."""
    return [a for a in args if a.type not in ("pair", "hash", "hash_splat_argument",
                                              "block_argument")]
