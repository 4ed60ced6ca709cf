from .synchronizer import (
    FieldParamSynchronizer,
    FieldChange,
    SyncResult,
    SyncState,
    encode_markup,
    decode_markup,
)
from .watcher import ChangeNotification, FileWatcher

__all__ = [
    "FieldParamSynchronizer",
    "FieldChange",
    "SyncResult",
    "SyncState",
    "encode_markup",
    "decode_markup",
    "ChangeNotification",
    "FileWatcher",
]
