"""chatgbt — conversational assistant core with context pruning and token budgets."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from chatgbt.core.session.session import ChatSession as ChatSession
    from chatgbt.factory import build_session as build_session
    from chatgbt.settings import load_settings as load_settings

_LAZY_EXPORTS = {
    "ChatSession": "chatgbt.core.session.session",
    "build_session": "chatgbt.factory",
    "load_settings": "chatgbt.settings",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'chatgbt' has no attribute {name!r}")
