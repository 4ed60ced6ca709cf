"""Unit tests for custom template matching."""

import pytest

from templadoc.templates.matcher import CustomTemplateMatcher
from templadoc.templates.resolver import TemplateResolver
from templadoc.templates.store import CustomTemplateEntry, TemplateStore


@pytest.fixture
def matcher(resolver):
    return CustomTemplateMatcher(resolver)


# =============================================================================
# Predicate Tests
# =============================================================================


class TestPredicates:
    """Test suite for individual predicate checks."""

    def test_name_contains(self, matcher, make_method):
        entry = CustomTemplateEntry("Value", "/**\n * <nameContains> Value\n */")
        assert matcher.applies(entry, make_method("getValue", return_type="int"))
        assert not matcher.applies(entry, make_method("getSize", return_type="int"))

    def test_name_contains_defaults_to_entry_name(self, matcher, make_method):
        entry = CustomTemplateEntry("build", "/**\n * <nameContains>\n * Builds\n */")
        assert matcher.applies(entry, make_method("buildAll"))
        assert not matcher.applies(entry, make_method("create"))

    def test_return_type_is(self, matcher, make_method):
        entry = CustomTemplateEntry("counts", "/**\n * <returnTypeIs> Map<String, Integer>\n */")
        assert matcher.applies(entry, make_method("count", return_type="Map<String, Integer>"))
        assert not matcher.applies(entry, make_method("count", return_type="Map<String, Long>"))

    def test_return_type_is_empty_never_matches(self, matcher, make_method):
        entry = CustomTemplateEntry("any", "/**\n * <returnTypeIs>\n */")
        assert not matcher.applies(entry, make_method("run"))

    def test_has_params(self, matcher, make_method):
        entry = CustomTemplateEntry("pair", "/**\n * <hasP> name, age\n */")
        method = make_method("create", [("String", "name"), ("int", "age")])
        assert matcher.applies(entry, method)
        assert not matcher.applies(entry, make_method("create", [("String", "name")]))

    def test_has_params_matches_types_too(self, matcher, make_method):
        entry = CustomTemplateEntry("strings", "/**\n * <hasP> String\n */")
        assert matcher.applies(entry, make_method("join", [("String", "separator")]))

    def test_has_params_empty_never_matches(self, matcher, make_method):
        entry = CustomTemplateEntry("none", "/**\n * <hasP>\n */")
        assert not matcher.applies(entry, make_method("run", [("int", "times")]))

    def test_all_predicates_must_pass(self, matcher, make_method):
        entry = CustomTemplateEntry("both", "/**\n * <nameContains> find\n * <returnTypeIs> int\n */")
        assert matcher.applies(entry, make_method("findIndex", return_type="int"))
        assert not matcher.applies(entry, make_method("findName", return_type="String"))

    def test_no_predicates_always_applies(self, matcher, make_method):
        entry = CustomTemplateEntry("fallback", "/**\n * Does things\n */")
        assert matcher.applies(entry, make_method("anything"))


# =============================================================================
# Selection Tests
# =============================================================================


class TestMatch:
    """Test suite for choosing and rendering a custom template."""

    def test_predicate_line_removed(self, matcher, make_method):
        entries = [CustomTemplateEntry("Value", "/**\n * <nameContains> Value\n * Returns the value\n */")]
        rendered = matcher.match(entries, make_method("getValue", return_type="int"))
        assert rendered == "/**\n * Returns the value\n */"

    def test_first_applicable_wins(self, matcher, make_method):
        entries = [
            CustomTemplateEntry("first", "/**\n * <nameContains> load\n * first\n */"),
            CustomTemplateEntry("second", "/**\n * <nameContains> load\n * second\n */"),
        ]
        assert matcher.match(entries, make_method("loadAll")) == "/**\n * first\n */"

    def test_no_match(self, matcher, make_method):
        entries = [CustomTemplateEntry("Value", "/**\n * <nameContains> Value\n */")]
        assert matcher.match(entries, make_method("process")) is None

    def test_substitution_tags_resolved(self, matcher, make_method):
        entries = [CustomTemplateEntry("find", "/**\n * <nameContains> find\n * @return <returnType>\n */")]
        method = make_method("findAll", return_type="List<String>", body="{ return items; }")
        assert matcher.match(entries, method) == "/**\n * @return List of String\n */"

    def test_through_resolver_uses_store_order(self, make_method):
        store = TemplateStore({"Methods": "/**\n *\n */"})
        store.add_custom_template("Loader", "/**\n * <nameContains> load\n * Loads data\n */")
        store.add_custom_template("Any", "/**\n * Does something\n */")
        resolver = TemplateResolver(store)

        assert resolver.comment_for(make_method("loadAll")) == "/**\n * Loads data\n */"
        assert resolver.comment_for(make_method("process")) == "/**\n * Does something\n */"
