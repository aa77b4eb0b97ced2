"""Headless browser automation for extension activation."""

from prewarm.browser.quick_open import HeadlessEditorSession, QuickOpenTrigger, find_target_file

__all__ = [
    "HeadlessEditorSession",
    "QuickOpenTrigger",
    "find_target_file",
]
