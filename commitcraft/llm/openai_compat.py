"""OpenAI-compatible LLM Client (OpenAI or any server speaking its chat API)"""

import os

from commitcraft.llm.base import LLMClient, LLMResponse, GenerationError, SYSTEM_PROMPT


class OpenAICompatClient(LLMClient):
    """Chat-completions client. Requires OPENAI_API_KEY; OPENAI_BASE_URL selects another server."""

    DEFAULT_MODEL = "gpt-4o-mini"
    MAX_TOKENS = 1000
    TEMPERATURE = 0.4

    def __init__(self, api_key: str | None = None, model: str | None = None,
                 base_url: str | None = None, **_ignored):
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.model = model or self.DEFAULT_MODEL
        self.base_url = base_url or os.environ.get("OPENAI_BASE_URL")

        if not self.api_key:
            raise GenerationError(
                "No API key found. Set OPENAI_API_KEY environment variable:\n"
                "  export OPENAI_API_KEY='your-key-here'"
            )

        try:
            import openai
            self._client = openai.Client(api_key=self.api_key, base_url=self.base_url)
        except ImportError:
            raise GenerationError(
                "OpenAI SDK not installed. Run:\n"
                "  pip install openai"
            )

    @property
    def name(self) -> str:
        if self.base_url:
            return f"OpenAI-compatible ({self.model} @ {self.base_url})"
        return f"OpenAI ({self.model})"

    def generate(self, prompt: str) -> LLMResponse:
        import openai

        try:
            response = self._client.chat.completions.create(
                model=self.model,
                max_tokens=self.MAX_TOKENS,
                temperature=self.TEMPERATURE,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
            )
        except openai.AuthenticationError:
            raise GenerationError("Invalid API key. Check your OPENAI_API_KEY.")
        except openai.APIError as e:
            raise GenerationError(f"OpenAI API error: {e.message}")

        if not response.choices:
            raise GenerationError(f"{self.name} returned no choices")

        usage = response.usage
        return LLMResponse(
            content=(response.choices[0].message.content or "").strip(),
            model=self.model,
            tokens_used=usage.total_tokens if usage else 0,
        )
