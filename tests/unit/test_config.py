"""Unit tests for configuration and file discovery."""

from pathlib import Path

import pytest

from templadoc.utils.config import Config
from templadoc.utils.file_handler import FileHandler


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("TEMPLADOC_TEMPLATES", "TEMPLADOC_ENCODING", "TEMPLADOC_POLL_INTERVAL"):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Config Tests
# =============================================================================


class TestConfig:
    """Test suite for Config."""

    def test_defaults(self):
        config = Config()
        assert config.encoding == "utf-8"
        assert config.poll_interval == 1.0
        assert config.templates_file.name == "templates.yaml"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TEMPLADOC_TEMPLATES", str(tmp_path / "t.yaml"))
        monkeypatch.setenv("TEMPLADOC_POLL_INTERVAL", "0.25")

        config = Config()

        assert config.templates_file == tmp_path / "t.yaml"
        assert config.poll_interval == 0.25

    def test_bad_poll_interval_ignored(self, monkeypatch):
        monkeypatch.setenv("TEMPLADOC_POLL_INTERVAL", "soon")
        assert Config().poll_interval == 1.0

    def test_invalid_values_reset(self):
        config = Config(poll_interval=-3, max_file_size_mb=0)
        assert config.poll_interval == 1.0
        assert config.max_file_size_mb == 5.0

    def test_from_file(self, tmp_path):
        config_path = tmp_path / ".templadoc.yaml"
        config_path.write_text(
            "templates_file: ~/custom.yaml\n"
            "poll_interval: 0.5\n"
            "ignore_patterns: ['*Test.java']\n"
            "unknown_key: 1\n"
        )

        config = Config.from_file(config_path)

        assert config.templates_file == Path.home() / "custom.yaml"
        assert config.poll_interval == 0.5
        assert config.ignore_patterns == ["*Test.java"]
        assert not hasattr(config, "unknown_key")

    def test_from_missing_file(self, tmp_path):
        assert Config.from_file(tmp_path / "missing.yaml").poll_interval == 1.0

    def test_from_file_rejects_non_mapping(self, tmp_path):
        config_path = tmp_path / ".templadoc.yaml"
        config_path.write_text("just text\n")
        with pytest.raises(ValueError):
            Config.from_file(config_path)

    @pytest.mark.parametrize("path,skipped", [
        ("src/FooGenerated.java", True),
        ("src/package-info.java", True),
        ("target/classes/Foo.java", True),
        ("src/main/java/Foo.java", False),
    ])
    def test_should_skip_file(self, tmp_path, path, skipped):
        assert Config().should_skip_file(tmp_path / path, tmp_path) == skipped


# =============================================================================
# File Handler Tests
# =============================================================================


class TestFileHandler:
    """Test suite for FileHandler."""

    @pytest.fixture
    def project(self, tmp_path):
        for relative in ("src/A.java", "src/sub/B.java", "build/C.java", "src/notes.txt"):
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("class X {}\n")
        return tmp_path

    def test_find_java_files(self, project):
        files = FileHandler(Config()).find_java_files(project)
        assert files == [project / "src" / "A.java", project / "src" / "sub" / "B.java"]

    def test_collect(self, project):
        handler = FileHandler(Config())
        files = handler.collect([project / "src" / "A.java", project / "src" / "notes.txt"])
        assert files == [project / "src" / "A.java"]

    def test_output_path_in_place(self, project):
        source = project / "src" / "A.java"
        assert FileHandler(Config()).output_path(source, project, None) == source

    def test_output_path_mirrors_tree(self, project, tmp_path):
        handler = FileHandler(Config(output_suffix="_documented"))
        source = project / "src" / "sub" / "B.java"
        out = tmp_path / "out"
        assert handler.output_path(source, project, out) == out / "src" / "sub" / "B_documented.java"
