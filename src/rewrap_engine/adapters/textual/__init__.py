"""Textual host adapter for the rewrite engine."""

from .controller import TextualRewrapAdapter, TextualUIHooks

__all__ = ["TextualRewrapAdapter", "TextualUIHooks"]
