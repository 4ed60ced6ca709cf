"""
Template persistence.

Templates live in a YAML mapping. Keys are the four template items, one key
per built-in method role, and ``CUSTOM:<name>`` for each custom method
template. A missing key means the item is disabled, or for a method role,
that the Methods template is used instead.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from ..models.code_element import MethodRole

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "/**\n *\n */"

CUSTOM_PREFIX = "CUSTOM:"


class TemplateItem(Enum):
    """Declaration groups with a template of their own"""
    CLASSES = "Classes"
    FIELDS = "Fields"
    CONSTRUCTORS = "Constructors"
    METHODS = "Methods"


@dataclass(frozen=True)
class CustomTemplateEntry:
    name: str
    template: str


class TemplateStore:
    """Key-value store of templates, optionally backed by a YAML file"""

    def __init__(self, templates: Optional[Dict[str, str]] = None, path: Optional[Path] = None):
        self.path = path
        self._templates: Dict[str, str] = dict(templates or {})

    @classmethod
    def load(cls, path: Path) -> 'TemplateStore':
        """Load templates from a YAML file; a missing file is an empty store"""
        path = Path(path).expanduser()
        if not path.exists():
            logger.debug(f"No template file at {path}, starting empty")
            return cls(path=path)

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Template file {path} must contain a mapping")

        templates = {str(key): str(value) for key, value in data.items() if value is not None}
        logger.debug(f"Loaded {len(templates)} templates from {path}")
        return cls(templates, path)

    def save(self) -> None:
        if self.path is None:
            raise ValueError("Template store has no file to save to")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self._templates, f, sort_keys=False, allow_unicode=True,
                           default_flow_style=False)

    def keys(self) -> List[str]:
        return list(self._templates)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._templates.get(key, default)

    def put(self, key: str, template: str) -> None:
        self._templates[key] = template

    def remove(self, key: str) -> bool:
        return self._templates.pop(key, None) is not None

    # Template items

    def item_template(self, item: TemplateItem, default: Optional[str] = DEFAULT_TEMPLATE) -> Optional[str]:
        return self._templates.get(item.value, default)

    def is_enabled(self, item: TemplateItem) -> bool:
        return item.value in self._templates

    @property
    def class_template(self) -> Optional[str]:
        return self.item_template(TemplateItem.CLASSES, None)

    @property
    def field_template(self) -> Optional[str]:
        return self.item_template(TemplateItem.FIELDS, None)

    @property
    def constructor_template(self) -> Optional[str]:
        return self.item_template(TemplateItem.CONSTRUCTORS, None)

    # Method templates

    def role_template(self, role: MethodRole, default: Optional[str] = None) -> Optional[str]:
        """Template of a built-in role, falling back to the Methods template"""
        if role.has_own_template and role.value in self._templates:
            return self._templates[role.value]
        return self._templates.get(TemplateItem.METHODS.value, default)

    def custom_templates(self) -> List[CustomTemplateEntry]:
        """Custom method templates in stored order"""
        return [
            CustomTemplateEntry(key[len(CUSTOM_PREFIX):], template)
            for key, template in self._templates.items()
            if key.startswith(CUSTOM_PREFIX)
        ]

    def custom_names(self) -> List[str]:
        return [entry.name for entry in self.custom_templates()]

    def custom_template(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._templates.get(CUSTOM_PREFIX + name, default)

    def add_custom_template(self, name: str, template: str) -> None:
        name = name.strip()
        if not name:
            raise ValueError("Custom template names can't be empty")
        self._templates[CUSTOM_PREFIX + name] = template

    def remove_method_template(self, name: str) -> bool:
        """Remove a role template by role key, or a custom template by name"""
        if self.remove(CUSTOM_PREFIX + name):
            return True
        return self.remove(name)

    def remove_all_method_templates(self) -> None:
        """Disable the Methods item and drop every role and custom template"""
        role_keys = {role.value for role in MethodRole.builtin_roles()}
        for key in list(self._templates):
            if key == TemplateItem.METHODS.value or key in role_keys or key.startswith(CUSTOM_PREFIX):
                del self._templates[key]
