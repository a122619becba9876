"""Noweb expansion: inline named code fragments into the blocks that reference them."""
from __future__ import annotations

import re
from dataclasses import replace

from .errors import CyclicReferenceError, UndefinedReferenceError
from .ir import Block, CodeBlock, Document, Heading, Quote, SourceRef
from .log import get_logger

logger = get_logger(__name__)

NOWEB_REF_RE = re.compile(r"<<(?P<name>[^<>\s()]+)>>")

# :noweb header values, seen from the export side.
NOWEB_EXPAND_MODES = frozenset({"yes", "strip-tangle"})
NOWEB_STRIP_MODES = frozenset({"strip-export"})

FragmentIndex = dict[str, tuple[CodeBlock, ...]]


def find_references(text: str) -> tuple[str, ...]:
    """Referenced names in order of first appearance."""
    seen: dict[str, None] = {}
    for match in NOWEB_REF_RE.finditer(text):
        seen.setdefault(match.group("name"), None)
    return tuple(seen)


def build_fragment_index(document: Document) -> FragmentIndex:
    """Map every ``#+name`` and ``:noweb-ref`` name to its blocks, in document order."""
    index: dict[str, list[CodeBlock]] = {}
    for block in document.code_blocks():
        for name in block.names:
            index.setdefault(name, []).append(block)
    return {name: tuple(blocks) for name, blocks in index.items()}


def resolve_references(document: Document) -> Document:
    """Return ``document`` with every noweb reference expanded in place."""
    index = build_fragment_index(document)
    blocks = _resolve_blocks(document.blocks, index, {})
    if blocks is document.blocks:
        return document
    return replace(document, blocks=blocks)


def expand_block(
    block: CodeBlock,
    index: FragmentIndex,
    expanded: dict[str, str] | None = None,
) -> CodeBlock:
    """
    Expand one block's references.

    ``expanded`` caches the full text of fragments already expanded for the
    same index, so shared fragments are expanded once per document.
    """
    if not block.references:
        return block
    if block.noweb in NOWEB_STRIP_MODES:
        text = _strip_references(block.text)
    else:
        if expanded is None:
            expanded = {}
        for name in block.references:
            _expand_fragment(name, index, block.names, block.source, expanded)
        text = _substitute(block.text, expanded)
    logger.debug(
        "noweb_expanded",
        block=block.name or block.noweb_ref,
        references=list(block.references),
    )
    return replace(block, text=text, references=())


def _resolve_blocks(
    blocks: tuple[Block, ...], index: FragmentIndex, expanded: dict[str, str]
) -> tuple[Block, ...]:
    resolved: list[Block] = []
    changed = False
    for block in blocks:
        new_block = _resolve_block(block, index, expanded)
        changed = changed or new_block is not block
        resolved.append(new_block)
    return tuple(resolved) if changed else blocks


def _resolve_block(block: Block, index: FragmentIndex, expanded: dict[str, str]) -> Block:
    if isinstance(block, CodeBlock):
        return expand_block(block, index, expanded)
    if isinstance(block, (Heading, Quote)):
        children = _resolve_blocks(block.children, index, expanded)
        return block if children is block.children else replace(block, children=children)
    return block


def _fragment_source(name: str, index: FragmentIndex) -> str:
    return "\n".join(block.text for block in index[name])


def _expand_fragment(
    name: str,
    index: FragmentIndex,
    visiting: tuple[str, ...],
    source: SourceRef | None,
    expanded: dict[str, str],
) -> None:
    """
    Fill ``expanded[name]`` and every fragment it reaches, depth first.

    The walk keeps its own stack, so long reference chains never touch the
    interpreter's recursion limit. ``chain`` is the ordered tuple of names
    being expanded, seeded with the host block's names.
    """
    if name in expanded:
        return
    _check_reference(name, index, visiting, source)
    chain = visiting + (name,)
    stack = [(name, iter(find_references(_fragment_source(name, index))))]
    while stack:
        current, pending = stack[-1]
        child = next(pending, None)
        if child is None:
            expanded[current] = _substitute(_fragment_source(current, index), expanded)
            stack.pop()
            chain = chain[:-1]
            continue
        if child in expanded:
            continue
        _check_reference(child, index, chain, source)
        chain = chain + (child,)
        stack.append((child, iter(find_references(_fragment_source(child, index)))))


def _check_reference(
    name: str,
    index: FragmentIndex,
    chain: tuple[str, ...],
    source: SourceRef | None,
) -> None:
    if name in chain:
        raise CyclicReferenceError(chain + (name,))
    if not index.get(name):
        raise UndefinedReferenceError(
            f"Undefined noweb reference <<{name}>>",
            source=source.path if source else None,
            line=source.start_line if source else None,
        )


def _substitute(text: str, expanded: dict[str, str]) -> str:
    """Replace markers whose fragments are already in ``expanded``."""
    out: list[str] = []
    for line in text.split("\n"):
        matches = list(NOWEB_REF_RE.finditer(line))
        if not matches:
            out.append(line)
        elif len(matches) == 1:
            match = matches[0]
            prefix, suffix = line[: match.start()], line[match.end() :]
            body = expanded[match.group("name")].split("\n")
            body = [prefix + part if part else prefix.rstrip() for part in body]
            body[-1] += suffix
            out.extend(body)
        else:
            out.append(NOWEB_REF_RE.sub(lambda m: expanded[m.group("name")], line))
    return "\n".join(out)


def _strip_references(text: str) -> str:
    out: list[str] = []
    for line in text.split("\n"):
        stripped = NOWEB_REF_RE.sub("", line)
        if stripped != line and not stripped.strip():
            continue
        out.append(stripped)
    return "\n".join(out)
