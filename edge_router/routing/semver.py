"""
Minimal semver range matching over MAJOR.MINOR.PATCH.

A range is a whitespace-separated list of constraints that must all hold,
e.g. ">=1.0.0 <2.0.0". A bare version means "=".
"""
import operator
import re
from typing import Callable, Dict, Optional, Tuple

Version = Tuple[int, int, int]

_VERSION_RE = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")
_CONSTRAINT_RE = re.compile(r"(>=|<=|>|<|=)?(.*)")

_OPERATORS: Dict[str, Callable[[Version, Version], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
    "=": operator.eq,
}


def parse_version(value: Optional[str]) -> Optional[Version]:
    """Parse "1.2.3" into (1, 2, 3); anything else returns None."""
    if not isinstance(value, str):
        return None
    match = _VERSION_RE.fullmatch(value)
    if match is None:
        return None
    major, minor, patch = (int(part) for part in match.groups())
    return major, minor, patch


def semver_satisfies(version: Optional[str], range_expression: Optional[str]) -> bool:
    """
    Check whether version satisfies every constraint in range_expression.

    Fails closed: an unparseable version, an empty range or any malformed
    constraint returns False.
    """
    parsed = parse_version(version)
    if parsed is None or not isinstance(range_expression, str):
        return False

    constraints = range_expression.split()
    if not constraints:
        return False

    for constraint in constraints:
        op, bound_text = _CONSTRAINT_RE.fullmatch(constraint).groups()
        bound = parse_version(bound_text)
        if bound is None:
            return False
        # Tuples compare component-wise: major, then minor, then patch.
        if not _OPERATORS[op or "="](parsed, bound):
            return False
    return True
