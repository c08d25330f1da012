from .async_state import Action, AsyncSlice, AsyncState
from .effects import fetch_effect, register_fetch
from .store import Store

__all__ = ["Action", "AsyncSlice", "AsyncState", "Store", "fetch_effect", "register_fetch"]
