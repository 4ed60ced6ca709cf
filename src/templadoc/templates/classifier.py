"""
Method role classification.

Roles come from an ordered rule table; the first rule that matches wins.
This is a naming heuristic, not semantic analysis: a one-parameter method
named ``setX`` is a mutator whatever it does.
"""

from typing import Callable, List, Tuple

from ..models.code_element import MethodRole

# Identity method names, compared case-insensitively with underscores removed
IDENTITY_NAMES = {
    "hashcode": MethodRole.IDENTITY_HASH,
    "equals": MethodRole.IDENTITY_EQUALS,
    "clone": MethodRole.IDENTITY_CLONE,
    "tostring": MethodRole.IDENTITY_TOSTRING,
}

# Name prefixes of zero-argument accessors
ACCESSOR_PREFIXES = ("get", "is", "are", "can", "has", "have")

MUTATOR_PREFIX = "set"


def _normalized(name: str) -> str:
    return name.replace("_", "").lower()


def _identity_role(method):
    return IDENTITY_NAMES.get(_normalized(method.name))


def _accessor_role(method):
    if not method.parameters and method.name.lower().startswith(ACCESSOR_PREFIXES):
        return MethodRole.ACCESSOR
    return None


def _mutator_role(method):
    if len(method.parameters) == 1 and method.name.lower().startswith(MUTATOR_PREFIX):
        return MethodRole.MUTATOR
    return None


def _constructor_role(method):
    return MethodRole.CONSTRUCTOR_LIKE if method.is_constructor else None


RULES: List[Tuple[str, Callable]] = [
    ("constructor", _constructor_role),
    ("identity", _identity_role),
    ("accessor", _accessor_role),
    ("mutator", _mutator_role),
]


def classify(method) -> MethodRole:
    """Role of a method; CUSTOM when no rule matches"""
    for _, rule in RULES:
        role = rule(method)
        if role is not None:
            return role
    return MethodRole.CUSTOM
