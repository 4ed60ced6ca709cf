"""Data models for documented declarations"""

from enum import Enum


class DeclarationKind(Enum):
    """Kinds of declarations a template can document"""
    CLASS = "class"
    FIELD = "field"
    CONSTRUCTOR = "constructor"
    METHOD = "method"


class MethodRole(Enum):
    """Semantic role of a method, derived from its name and signature.

    The value of a built-in role is also its key in the template store.
    """
    CONSTRUCTOR_LIKE = "constructor"
    IDENTITY_HASH = "hashCode"
    IDENTITY_EQUALS = "equals"
    IDENTITY_CLONE = "clone"
    IDENTITY_TOSTRING = "toString"
    ACCESSOR = "getter"
    MUTATOR = "setter"
    CUSTOM = "custom"

    @property
    def has_own_template(self) -> bool:
        """Whether the store keeps a dedicated template for this role"""
        return self not in (MethodRole.CONSTRUCTOR_LIKE, MethodRole.CUSTOM)

    @classmethod
    def builtin_roles(cls):
        return [role for role in cls if role.has_own_template]
