"""
Parser for the key facts block on programme listings.

Key facts are rendered as a definition list: each <dt> label is followed by
one or more <dd> values, and multi-line values are separated by <br> tags.
"""

import re
import logging
from typing import Optional

from bs4 import Tag

from src.core.models import KeyFacts


logger = logging.getLogger(__name__)

_LINE_BREAK_PAT = re.compile(r"<br\s*/?>", re.IGNORECASE)


def parse_key_facts(block: Optional[Tag]) -> KeyFacts:
    """
    Parse a definition list into a label -> value mapping.

    Each value is the content of the nodes following a <dt>, up to the next
    <dt>. Content split on <br> into more than two lines becomes a list of the
    non-empty lines; otherwise only the first line is kept. When a label has
    several content nodes, the last one wins.

    Args:
        block: Element containing <dt>/<dd> pairs (None if the page has none)

    Returns:
        Dict mapping label text (colon removed) to a string or list of strings

    Examples:
        <dt>Area:</dt><dd>England</dd>          -> {"Area": "England"}
        <dt>Type:</dt><dd>A<br>B<br></dd>       -> {"Type": ["A", "B"]}
    """
    facts: KeyFacts = {}
    if block is None:
        return facts

    for term in block.find_all("dt"):
        label = term.get_text().strip().replace(":", "", 1)

        for node in term.find_next_siblings():
            if node.name == "dt":
                break

            lines = _LINE_BREAK_PAT.split(node.decode_contents())
            # Two or fewer pieces means a single value (a trailing <br> gives two)
            if len(lines) > 2:
                facts[label] = [line for line in lines if line != ""]
            else:
                facts[label] = lines[0]

    logger.debug(f"Parsed {len(facts)} key facts: {list(facts)}")
    return facts
