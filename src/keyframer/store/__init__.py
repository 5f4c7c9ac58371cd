"""Frame Store: the session's ordered sequence of annotated frames."""

from keyframer.store.frame_store import FrameStore, StoreEvent, StoreListener

__all__ = [
    "FrameStore",
    "StoreEvent",
    "StoreListener",
]
