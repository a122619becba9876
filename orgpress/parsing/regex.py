"""All compiled regex constants used by the Org parser."""
from __future__ import annotations

import re

HEADING_RE = re.compile(r"^(?P<stars>\*+)[ \t]+(?P<title>.*?)[ \t]*$")
HEADING_TAGS_RE = re.compile(r"^(?P<title>.*?)[ \t]+(?P<tags>:(?:[\w@#%]+:)+)$")

BLOCK_BEGIN_RE = re.compile(
    r"^[ \t]*#\+begin_(?P<kind>[\w-]+)(?:[ \t]+(?P<params>.*?))?[ \t]*$",
    re.IGNORECASE,
)
BLOCK_END_PATTERN = r"^[ \t]*#\+end_{kind}[ \t]*$"
BLOCK_END_RE = re.compile(r"^[ \t]*#\+end_(?P<kind>[\w-]+)[ \t]*$", re.IGNORECASE)

KEYWORD_RE = re.compile(r"^[ \t]*#\+(?P<key>[\w-]+):[ \t]*(?P<value>.*?)[ \t]*$")
COMMENT_RE = re.compile(r"^[ \t]*#(?:[ \t].*)?$")

DRAWER_BEGIN_RE = re.compile(r"^[ \t]*:(?P<name>[\w-]+):[ \t]*$")
DRAWER_END_RE = re.compile(r"^[ \t]*:end:[ \t]*$", re.IGNORECASE)
PROPERTY_RE = re.compile(r"^[ \t]*:(?P<key>[^:\s]+):(?:[ \t]+(?P<value>.*?))?[ \t]*$")

FIXED_WIDTH_RE = re.compile(r"^[ \t]*:(?: (?P<text>.*))?$")

FOOTNOTE_DEF_RE = re.compile(r"^\[fn:(?P<label>[\w-]+)\][ \t]*(?P<text>.*)$")

# "*" only counts as a bullet when indented; at column 0 it is a heading.
LIST_ITEM_RE = re.compile(
    r"^(?P<indent>[ \t]*)(?P<bullet>[-+]|(?<=[ \t])\*|\d+[.)])(?:[ \t]+(?P<text>.*))?$"
)
DESCRIPTION_ITEM_RE = re.compile(r"^(?P<term>.*?\S)[ \t]+::(?:[ \t]+(?P<text>.*))?$", re.DOTALL)

SRC_COMMA_ESCAPE_RE = re.compile(r"^([ \t]*),(?=\*|#\+)", re.MULTILINE)

FOOTNOTE_LABEL_RE = re.compile(r"^[\w-]+$")
IMAGE_URL_RE = re.compile(r"\.(?:png|jpe?g|gif|svg|webp)$", re.IGNORECASE)

# Org emphasis border rules.
EMPHASIS_PRE = frozenset(" \t\n-('\"{")
EMPHASIS_POST = frozenset(" \t\n-.,;:!?'\")}[\\")
