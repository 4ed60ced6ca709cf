import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DEFAULT_TEMPLATES_FILE = Path.home() / ".templadoc" / "templates.yaml"


@dataclass
class Config:
    """Configuration for templadoc"""

    # Where templates are stored
    templates_file: Path = DEFAULT_TEMPLATES_FILE

    # File processing
    encoding: str = "utf-8"
    max_file_size_mb: float = 5.0  # Skip huge files
    output_suffix: str = ""  # e.g. "_documented" when writing to an output dir

    # Watch mode
    poll_interval: float = 1.0  # Seconds between polls

    # Files to skip
    ignore_patterns: List[str] = field(default_factory=lambda: [
        "*Generated*.java", "*generated*.java",
        "package-info.java", "module-info.java"
    ])

    # Directories to skip
    ignore_dirs: List[str] = field(default_factory=lambda: [
        "target", "build", "out",
        ".git", ".idea", ".vscode", "node_modules"
    ])

    def __post_init__(self):
        """Load from environment and validate settings"""
        self._load_from_env()
        self._validate_settings()

    def _load_from_env(self):
        """Load settings from environment variables"""
        if os.getenv('TEMPLADOC_TEMPLATES'):
            self.templates_file = Path(os.getenv('TEMPLADOC_TEMPLATES'))

        if os.getenv('TEMPLADOC_ENCODING'):
            self.encoding = os.getenv('TEMPLADOC_ENCODING')

        if os.getenv('TEMPLADOC_POLL_INTERVAL'):
            try:
                self.poll_interval = float(os.getenv('TEMPLADOC_POLL_INTERVAL'))
            except ValueError:
                pass

    def _validate_settings(self):
        """Validate and adjust settings"""
        self.templates_file = Path(self.templates_file).expanduser()

        if self.poll_interval <= 0:
            self.poll_interval = 1.0

        if self.max_file_size_mb <= 0:
            self.max_file_size_mb = 5.0

    @classmethod
    def from_file(cls, config_path: Path) -> 'Config':
        """Load configuration from YAML file"""
        config = cls()

        if not config_path.exists():
            return config

        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")

        # Update config with file values
        for key, value in data.items():
            if hasattr(config, key):
                setattr(config, key, value)

        config._validate_settings()
        return config

    def should_skip_file(self, file_path: Path, root: Optional[Path] = None) -> bool:
        """Check if a file should be skipped; directories are checked below ``root``"""
        # Check file size
        try:
            size_mb = file_path.stat().st_size / (1024 * 1024)
            if size_mb > self.max_file_size_mb:
                return True
        except OSError:
            pass

        # Check filename patterns
        for pattern in self.ignore_patterns:
            if file_path.match(pattern):
                return True

        # Check directory names
        relative = file_path.relative_to(root) if root else file_path
        parts = [p.lower() for p in relative.parts[:-1]]
        for ignore_dir in self.ignore_dirs:
            if ignore_dir.lower() in parts:
                return True

        return False
