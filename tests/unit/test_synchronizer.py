"""Unit tests for field to @param synchronization."""

from pathlib import Path

import pytest

from templadoc.errors import HostPreconditionError
from templadoc.parser.source_document import SourceDocument
from templadoc.sync.synchronizer import (
    FieldChange,
    FieldParamSynchronizer,
    SyncState,
    decode_markup,
    encode_markup,
)


ACCOUNT_SOURCE = """\
public class Account {

    /**
     * the full name
     */
    private String name;

    /**
     * the balance
     */
    private long balance;

    /**
     * Creates an account
     *
     * @param name: the name
     * @param balance: the balance
     */
    public Account(String name, long balance) {
        this.name = name;
        this.balance = balance;
    }

    /**
     * @param name: the name
     */
    public void setName(String name) {
        this.name = name;
    }

    /**
     * @param name: the name
     */
    public void rename(String name) {
        this.name = name;
    }
}
"""


@pytest.fixture
def synchronizer():
    return FieldParamSynchronizer()


@pytest.fixture
def account():
    return SourceDocument(ACCOUNT_SOURCE)


def edit_field_comment(document, old, new):
    """Document with the first occurrence of a field description replaced"""
    text = document.text.replace(f"* {old}\n     */\n    private", f"* {new}\n     */\n    private", 1)
    assert text != document.text
    return SourceDocument(text, document.file_path)


# =============================================================================
# Markup Encoding Tests
# =============================================================================


class TestMarkupEncoding:
    """Test suite for the placeholder alphabet."""

    def test_encoded_text_has_no_markup(self):
        encoded = encode_markup("the {@code name} *value*")
        assert not any(char in encoded for char in "{}*")
        assert decode_markup(encoded) == "the {@code name} *value*"

    def test_rewrite_params_with_markup(self):
        text = "/**\n * @param name: the {@code old} name\n */"
        changes = [FieldChange("name", "the {@code old} name", "the {@code new} name")]
        assert FieldParamSynchronizer.rewrite_params(text, changes) == \
            "/**\n * @param name: the {@code new} name\n */"

    def test_rewrite_params_leaves_other_descriptions(self):
        text = "/**\n * @param name: something else\n * @param names: the name\n */"
        changes = [FieldChange("name", "the name", "the full name")]
        assert FieldParamSynchronizer.rewrite_params(text, changes) == text

    def test_rewrite_params_to_empty(self):
        text = " * @param name: the name"
        changes = [FieldChange("name", "the name", "")]
        assert FieldParamSynchronizer.rewrite_params(text, changes) == " * @param name:"

    def test_first_param_description(self):
        text = "/**\n * @param age: years\n * @param name: the {@code name}\n */"
        assert FieldParamSynchronizer.first_param_description(text, "name") == "the {@code name}"
        assert FieldParamSynchronizer.first_param_description(text, "size") is None


# =============================================================================
# Synchronization Pass Tests
# =============================================================================


class TestFieldParamSynchronizer:
    """Test suite for FieldParamSynchronizer."""

    def test_first_observation_rewrites_stale_params(self, synchronizer, account):
        result = synchronizer.on_document_changed(account)

        assert result.container == "Account"
        assert result.changes == [FieldChange("name", "the name", "the full name")]
        assert result.rewritten_comments == 2
        assert account.text.count("@param name: the full name") == 2
        assert "@param balance: the balance" in account.text

    def test_only_constructors_and_setters_rewritten(self, synchronizer, account):
        synchronizer.on_document_changed(account)
        rename = [m for m in account.parsed.main_class.methods if m.name == "rename"][0]
        assert "@param name: the name" in rename.doc_comment.text

    def test_snapshot_taken(self, synchronizer, account):
        assert synchronizer.state == SyncState.UNINITIALIZED
        synchronizer.on_document_changed(account)

        assert synchronizer.state == SyncState.TRACKING
        assert synchronizer.snapshot == {
            ("Account", "name"): "the full name",
            ("Account", "balance"): "the balance",
        }

    def test_converges(self, synchronizer, account):
        synchronizer.on_document_changed(account)
        once = account.text

        result = synchronizer.on_document_changed(account)
        assert not result.changed
        assert account.text == once

    def test_edited_description_propagates(self, synchronizer, account):
        synchronizer.on_document_changed(account)
        edited = edit_field_comment(account, "the full name", "the holder name")

        result = synchronizer.on_document_changed(edited)

        assert result.changes == [FieldChange("name", "the full name", "the holder name")]
        assert edited.text.count("@param name: the holder name") == 2

    def test_description_with_markup(self, synchronizer, account):
        synchronizer.on_document_changed(account)

        edited = edit_field_comment(account, "the full name", "the {@code name} of the holder")
        synchronizer.on_document_changed(edited)
        assert edited.text.count("@param name: the {@code name} of the holder") == 2

        edited = edit_field_comment(edited, "the {@code name} of the holder", "the holder")
        synchronizer.on_document_changed(edited)
        assert edited.text.count("@param name: the holder\n") == 2
        assert "{@code name}" not in edited.text

    def test_unchanged_fields_untouched(self, synchronizer, account):
        synchronizer.on_document_changed(account)
        edited = edit_field_comment(account, "the balance", "the amount")

        result = synchronizer.on_document_changed(edited)

        assert [change.field_name for change in result.changes] == ["balance"]
        assert "@param balance: the amount" in edited.text
        assert edited.text.count("@param name: the full name") == 2

    def test_hand_written_params_kept(self, synchronizer):
        source = ACCOUNT_SOURCE.replace("     * @param name: the name\n     */\n    public void setName",
                                        "     * @param name: a new name\n     */\n    public void setName")
        document = SourceDocument(source)

        synchronizer.on_document_changed(document)

        assert "@param name: a new name" in document.text

    # =========================================================================
    # Container Tests
    # =========================================================================

    def test_new_container_resets_snapshot(self, synchronizer, account):
        synchronizer.on_document_changed(account)
        other = SourceDocument("public class Other {\n    /** the id */\n    private int id;\n}\n",
                               Path("Other.java"))

        synchronizer.on_document_changed(other)

        assert synchronizer.snapshot == {("Other", "id"): "the id"}

    def test_reset(self, synchronizer, account):
        synchronizer.on_document_changed(account)
        synchronizer.reset()
        assert synchronizer.state == SyncState.UNINITIALIZED
        assert synchronizer.snapshot == {}

    def test_nested_class_fields(self, synchronizer):
        document = SourceDocument(
            "public class Outer {\n"
            "    static class Inner {\n"
            "        /** the depth */\n"
            "        private int depth;\n"
            "\n"
            "        /**\n"
            "         * @param depth: old depth\n"
            "         */\n"
            "        public void setDepth(int depth) {\n"
            "            this.depth = depth;\n"
            "        }\n"
            "    }\n"
            "}\n"
        )

        result = synchronizer.on_document_changed(document)

        assert result.rewritten_comments == 1
        assert "@param depth: the depth" in document.text

    def test_no_fields(self, synchronizer):
        document = SourceDocument("public class Empty {\n    void run() {\n    }\n}\n")
        result = synchronizer.on_document_changed(document)
        assert not result.changed
        assert result.changes == []

    def test_no_class(self, synchronizer):
        with pytest.raises(HostPreconditionError):
            synchronizer.on_document_changed(SourceDocument("package demo;\n"))

    def test_unparseable(self, synchronizer):
        with pytest.raises(HostPreconditionError):
            synchronizer.on_document_changed(SourceDocument("public class {"))
