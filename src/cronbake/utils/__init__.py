"""Utility helpers."""

from cronbake.utils.callbacks import Callback, invoke

__all__ = ["Callback", "invoke"]
