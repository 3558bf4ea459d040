"""
Right pattern matching.

Grammar:
    - Both the required right and the granted pattern are trimmed; an empty
      value on either side never matches.
    - A pattern without ``*`` matches only the identical right.
    - ``*`` matches any run of characters, separators included, and the
      pattern is anchored at both ends. ``"*"`` covers every right and
      ``"backoffice:*"`` covers ``"backoffice:dashboard:access"``.
"""

import re
from collections.abc import Callable
from functools import lru_cache

from ..constants import MAX_PATTERN_CACHE_SIZE, RIGHT_WILDCARD
from ..utils.ids import normalize_right

RightMatcher = Callable[[str, str], bool]
"""``matcher(required_right, granted_pattern) -> bool``"""


@lru_cache(maxsize=MAX_PATTERN_CACHE_SIZE)
def _compile_pattern(pattern: str) -> re.Pattern[str]:
    parts = [re.escape(part) for part in pattern.split(RIGHT_WILDCARD)]
    return re.compile("^" + ".*".join(parts) + "$", re.DOTALL)


def matches(required_right: str, granted_pattern: str) -> bool:
    """
    Check whether a granted right pattern covers a required right.

    Args:
        required_right: Right being requested (e.g. "posts:write")
        granted_pattern: Right pattern stored on a grant (e.g. "posts:*")

    Returns:
        True if the pattern covers the requirement
    """
    required = normalize_right(required_right)
    pattern = normalize_right(granted_pattern)
    if not required or not pattern:
        return False
    if pattern == required:
        return True
    if RIGHT_WILDCARD not in pattern:
        return False
    return _compile_pattern(pattern).match(required) is not None
