from .channel import ChangeReceiver, ChangeSender, OverflowPolicy, open_channel
from .container import TrackedContainer
from .events import ChangeEvent
from .modifier import Modifier
from .tracker import DataTracker

__all__ = [
    "ChangeEvent",
    "ChangeReceiver",
    "ChangeSender",
    "DataTracker",
    "Modifier",
    "OverflowPolicy",
    "TrackedContainer",
    "open_channel",
]
