"""Type compatibility rule between an inferred and a declared type string.

Rules, first match wins:
- equal strings
- either side is ``any``
- inferred ``Date`` (or text containing ``Date``) against declared ``Date``
- both arrays: element types compatible
- declared union: inferred compatible with any trimmed member
- otherwise incompatible

Union members are compared textually, so an inferred ``string`` does not
satisfy ``'light' | 'dark'``. Unknown syntax normalizes to ``any`` upstream,
which this rule always accepts; suggestions favor false positives.
"""

from __future__ import annotations

import re

from typefit.matching.models import ANY_TYPE

DATE_TYPE = "Date"
ARRAY_SUFFIX = "[]"
UNION_SEPARATOR = "|"

_GENERIC_ARGS_RE = re.compile(r"<.*>", re.DOTALL)


def strip_generics(type_name: str) -> str:
    """``Page<User>`` -> ``Page``."""
    return _GENERIC_ARGS_RE.sub("", type_name).strip()


def is_date_like(type_str: str) -> bool:
    return type_str == DATE_TYPE or DATE_TYPE in type_str


def is_array(type_str: str) -> bool:
    return type_str.endswith(ARRAY_SUFFIX)


def is_union(type_str: str) -> bool:
    return UNION_SEPARATOR in type_str


def union_members(type_str: str) -> list[str]:
    return [member.strip() for member in type_str.split(UNION_SEPARATOR)]


def is_compatible(inferred: str, declared: str) -> bool:
    """Check whether an inferred type string satisfies a declared one."""
    if inferred == declared:
        return True
    if inferred == ANY_TYPE or declared == ANY_TYPE:
        return True
    if is_date_like(inferred) and declared == DATE_TYPE:
        return True
    if is_array(inferred) and is_array(declared):
        return is_compatible(inferred[: -len(ARRAY_SUFFIX)], declared[: -len(ARRAY_SUFFIX)])
    if is_union(declared):
        return any(is_compatible(inferred, member) for member in union_members(declared))
    return False
