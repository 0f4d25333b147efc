"""Editor session: actions, pure reducer and the store that runs fetches"""
from .reducer import reduce
from .state import EditorState, FetchRequest, StatusMessage
from .store import EditorStore

__all__ = ["EditorState", "EditorStore", "FetchRequest", "StatusMessage", "reduce"]
