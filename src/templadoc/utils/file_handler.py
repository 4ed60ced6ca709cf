"""File handling utilities for templadoc"""

from pathlib import Path
from typing import Iterable, List, Optional

from .logger import setup_logger

logger = setup_logger(__name__)


class FileHandler:
    """Finds Java sources and decides where results are written"""

    def __init__(self, config):
        self.config = config

    def find_java_files(self, root_path: Path) -> List[Path]:
        """Find all Java files under a directory, excluding ignored patterns"""
        java_files = []

        for file_path in root_path.rglob("*.java"):
            if self.config.should_skip_file(file_path, root_path):
                logger.debug(f"Ignoring file: {file_path}")
                continue
            java_files.append(file_path)

        return sorted(java_files)

    def collect(self, paths: Iterable[Path]) -> List[Path]:
        """Expand files and directories into the Java files to process"""
        java_files = []
        for path in paths:
            path = Path(path)
            if path.is_dir():
                java_files.extend(self.find_java_files(path))
            elif path.suffix == ".java" and path.exists():
                java_files.append(path)
            else:
                logger.warning(f"Skipping {path}: not a Java file or directory")
        return java_files

    def output_path(self, source_file: Path, root: Optional[Path], output_dir: Optional[Path]) -> Path:
        """Where the processed version of ``source_file`` goes"""
        if output_dir is None:
            return source_file

        relative = source_file.relative_to(root) if root and root in source_file.parents else Path(source_file.name)
        target = output_dir / relative
        if self.config.output_suffix:
            target = target.parent / f"{target.stem}{self.config.output_suffix}{target.suffix}"
        return target
