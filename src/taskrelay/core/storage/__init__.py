from .kv import KeyValueStore, default_state_dir
from .state import RunState

__all__ = ["KeyValueStore", "RunState", "default_state_dir"]
