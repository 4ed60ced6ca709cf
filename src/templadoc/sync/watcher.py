"""
Polling change notifications for Java files.

Each poll compares modification times against the previous poll and
reports the files touched in between.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ChangeNotification:
    """Files touched since the last notification, in the order seen"""
    paths: List[Path] = field(default_factory=list)


class FileWatcher:
    """Watch a set of files, or every Java file under some directories"""

    def __init__(self, roots: Iterable[Path], find_files: Callable[[Path], List[Path]],
                 interval: float = 1.0):
        self.roots = [Path(root) for root in roots]
        self.find_files = find_files
        self.interval = interval
        self._mtimes: Dict[Path, float] = self._scan()

    def _files(self) -> List[Path]:
        files = []
        for root in self.roots:
            if root.is_dir():
                files.extend(self.find_files(root))
            elif root.exists():
                files.append(root)
        return files

    def _scan(self) -> Dict[Path, float]:
        mtimes = {}
        for path in self._files():
            try:
                mtimes[path] = path.stat().st_mtime
            except OSError:
                continue
        return mtimes

    def poll(self) -> Optional[ChangeNotification]:
        """Notification for files changed since the previous poll, if any"""
        current = self._scan()
        changed = [path for path, mtime in current.items() if self._mtimes.get(path) != mtime]
        self._mtimes = current
        if not changed:
            return None
        changed.sort(key=lambda p: current[p])
        logger.debug(f"{len(changed)} files changed")
        return ChangeNotification(changed)

    def acknowledge(self, path: Path) -> None:
        """Record our own write to ``path`` so it isn't reported back"""
        try:
            self._mtimes[path] = path.stat().st_mtime
        except OSError:
            self._mtimes.pop(path, None)

    def run(self, callback: Callable[[ChangeNotification], None],
            max_polls: Optional[int] = None) -> None:
        """Poll until interrupted, handing each notification to ``callback``"""
        polls = 0
        while max_polls is None or polls < max_polls:
            notification = self.poll()
            if notification is not None:
                callback(notification)
            polls += 1
            if max_polls is None or polls < max_polls:
                time.sleep(self.interval)
