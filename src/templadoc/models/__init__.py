from .code_element import DeclarationKind, MethodRole

__all__ = [
    "DeclarationKind",
    "MethodRole",
]
