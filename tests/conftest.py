"""Shared fixtures for templadoc tests."""

import pytest

from templadoc.parser.java_parser import ParsedClass, ParsedField, ParsedMethod
from templadoc.parser.source_document import SourceDocument
from templadoc.templates.resolver import TemplateResolver
from templadoc.templates.store import TemplateStore


PERSON_SOURCE = """\
package demo;

import java.util.List;
import java.util.Map;

public class Person {

    private String name;

    private int age;

    public Person(String name, int age) {
        this.name = name;
        this.age = age;
    }

    public String getName() {
        return name;
    }

    public void setAge(int age) {
        this.age = age;
    }

    public List<String> getTags() {
        return tags;
    }

    public Map<String, Integer> countWords(String text) {
        return counts;
    }

    public void clear() {
        age = 0;
    }
}
"""


def _make_method(name, params=(), return_type="void", body=None, owner=None, is_constructor=False):
    """Build a ParsedMethod without going through the parser."""
    method = ParsedMethod(
        name=name,
        return_type=return_type,
        parameters=list(params),
        is_constructor=is_constructor,
        body_text=body,
        owner=owner,
    )
    if owner is not None:
        owner.methods.append(method)
    return method


def _make_class(name, field_names=()):
    cls = ParsedClass(name=name, type="class")
    for field_name in field_names:
        cls.fields.append(ParsedField(name=field_name, type="String", owner=cls))
    return cls


@pytest.fixture
def store():
    """An empty in-memory template store."""
    return TemplateStore()


@pytest.fixture
def resolver(store):
    return TemplateResolver(store)


@pytest.fixture
def person_document():
    return SourceDocument(PERSON_SOURCE)


@pytest.fixture
def make_method():
    return _make_method


@pytest.fixture
def make_class():
    return _make_class
