"""Prompt Construction Package"""

from commitcraft.prompts.builder import PromptBuilder, PromptConfig

__all__ = ["PromptBuilder", "PromptConfig"]
