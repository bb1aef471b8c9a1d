"""Commit Message Orchestrator - Staged diff in, generated commit message out."""

import asyncio
import logging

from commitcraft.git.gateway import VcsGateway
from commitcraft.llm.base import LLMClient
from commitcraft.prompts import PromptBuilder, PromptConfig

logger = logging.getLogger(__name__)

STAGE_CHANGES_FIRST = "Please stage your changes before generating a commit message."
DIFF_UNAVAILABLE = "Unable to retrieve the diff of the staged files."

GUIDANCE_MESSAGES = frozenset({STAGE_CHANGES_FIRST, DIFF_UNAVAILABLE})


def is_guidance(text: str) -> bool:
    """True if text is an instructional message rather than a generated commit message."""
    return text in GUIDANCE_MESSAGES


class CommitMessageOrchestrator:
    """Generates a commit message from the staged diff.

    Stateless: two reads from the VCS gateway and at most one AI call per
    `generate()`. Nothing is retried; GenerationError reaches the caller.
    """

    def __init__(self, vcs: VcsGateway, ai: LLMClient,
                 prompt_config: PromptConfig | None = None,
                 builder: PromptBuilder | None = None):
        self.vcs = vcs
        self.ai = ai
        self.prompt_config = prompt_config or PromptConfig()
        self.builder = builder or PromptBuilder()

    async def generate(self) -> str:
        staged = await self.vcs.list_staged()
        if not staged:
            return STAGE_CHANGES_FIRST

        diff = await self.vcs.diff(staged=True)
        if not diff or not diff.strip():
            logger.warning("%d staged file(s) but the staged diff is empty", len(staged))
            return DIFF_UNAVAILABLE

        prompt = self.builder.build(diff, self.prompt_config)
        logger.debug("Prompt: ~%d tokens (%d chars)", len(prompt) // 4, len(prompt))
        return await asyncio.to_thread(self.ai.generate_text, prompt)
