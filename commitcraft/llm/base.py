"""LLM Base Classes and Shared Code"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


SYSTEM_PROMPT = """You are a senior software engineer specialized in writing precise, informative git commit messages. You have reviewed thousands of pull requests at major tech companies and open-source projects.

Your expertise:
- Deep understanding of conventional commit format (type, scope, subject, body)
- Ability to identify the PRIMARY purpose of a change from a diff
- Writing for future developers who will read git log at 2am debugging production

Your standards:
- Every word earns its place, no filler, no fluff
- The diff shows WHAT; you explain WHY
- Specific verbs over vague ones (never "update", "change", "modify")
- Bullets add context the subject line can't capture"""


@dataclass
class LLMResponse:
    """Structured response from any LLM provider."""
    content: str
    model: str = ""
    tokens_used: int = 0


class GenerationError(Exception):
    """Raised when an AI backend fails to produce text."""
    pass


class LLMClient(ABC):
    """Abstract base for LLM clients.

    Subclasses implement `generate()`; callers use `generate_text()`, which
    turns an empty completion into a GenerationError instead of handing back
    a blank message.
    """

    @abstractmethod
    def generate(self, prompt: str) -> LLMResponse:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    def generate_text(self, prompt: str) -> str:
        response = self.generate(prompt)
        content = (response.content or "").strip()
        if not content:
            raise GenerationError(f"{self.name} returned an empty response")
        return content
