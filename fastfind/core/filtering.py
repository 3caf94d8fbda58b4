"""Name and attribute filtering for FastFind.

The filter engine is a pure predicate: a name must match the pattern,
then the entry's attribute bits are compared with the requested mask
according to the filter mode.
"""

import re
from functools import lru_cache
from typing import Union

from .._common.config import AttributeFilter, FilterMode


@lru_cache(maxsize=256)
def _compile_spec(spec: str):
    parts = []
    for char in spec:
        if char == '*':
            parts.append('.*')
        elif char == '?':
            parts.append('.')
        else:
            parts.append(re.escape(char))
    return re.compile(''.join(parts), re.IGNORECASE | re.DOTALL)


@lru_cache(maxsize=256)
def _split_pattern(pattern: str):
    specs = tuple(spec.lstrip() for spec in pattern.split(';'))
    return tuple(spec for spec in specs if spec)


def match_pattern(name: str, pattern: str) -> bool:
    """Case-insensitive wildcard match of a name against a pattern.

    ``*`` matches any run of characters and ``?`` exactly one. Several
    patterns may be given separated by ``;``. ``*.*`` matches every name,
    including names without a dot.

    Args:
        name: Entry base name
        pattern: Wildcard pattern, e.g. "*.txt" or "*.log; *.txt"

    Returns:
        True if any of the patterns matches the whole name
    """
    for spec in _split_pattern(pattern):
        if spec == '*.*':
            return True
        if _compile_spec(spec).fullmatch(name):
            return True
    return False


def build_attribute_mask(attribute_filter: AttributeFilter) -> int:
    """Return the attribute mask requested by a filter."""
    return int(attribute_filter.mask())


def attributes_match(attributes: int, mask: int,
                     mode: Union[FilterMode, str, None]) -> bool:
    """Compare an entry's attribute bits with a mask.

    Include: every mask bit is set. Exclude: not every mask bit is set.
    Strict: attributes equal the mask. Anything else rejects.
    """
    mode = FilterMode.coerce(mode)
    attributes = int(attributes)
    if mode is FilterMode.INCLUDE:
        return attributes & mask == mask
    if mode is FilterMode.EXCLUDE:
        return attributes & mask != mask
    if mode is FilterMode.STRICT:
        return attributes == mask
    return False


def matches_filter(name: str, attributes: int, pattern: str,
                   attribute_filter: AttributeFilter) -> bool:
    """Decide whether an entry belongs in the result set.

    Args:
        name: Entry base name
        attributes: Entry attribute bits
        pattern: Name pattern
        attribute_filter: Requested kinds, attributes and filter mode

    Returns:
        True if the name matches and the attributes satisfy the mode
    """
    if not match_pattern(name, pattern):
        return False
    return attributes_match(attributes, build_attribute_mask(attribute_filter),
                            attribute_filter.mode)
