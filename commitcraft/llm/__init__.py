"""LLM Client Package"""

from commitcraft.llm.base import LLMClient, LLMResponse, GenerationError, SYSTEM_PROMPT
from commitcraft.llm.claude import ClaudeClient
from commitcraft.llm.ollama import OllamaClient
from commitcraft.llm.openai_compat import OpenAICompatClient

PROVIDERS = {
    "claude": ClaudeClient,
    "ollama": OllamaClient,
    "openai": OpenAICompatClient,
}

AUTO_DETECT_ORDER = [OllamaClient, ClaudeClient, OpenAICompatClient]


def get_client(provider: str = "auto", model: str | None = None, base_url: str | None = None) -> LLMClient:
    """Get an LLM client. Provider can be 'claude', 'ollama', 'openai', or 'auto'.

    For an explicit 'ollama' provider, base_url is the Ollama host. During
    auto-detection Ollama is tried at its usual host and base_url only goes
    to the OpenAI-compatible client.
    """
    if provider == "ollama":
        return OllamaClient(model=model, host=base_url)
    if provider in PROVIDERS:
        return PROVIDERS[provider](model=model, base_url=base_url)

    if provider == "auto":
        for client_class in AUTO_DETECT_ORDER:
            try:
                if client_class is OllamaClient:
                    return OllamaClient(model=model)
                return client_class(model=model, base_url=base_url)
            except GenerationError:
                continue

        raise GenerationError(
            "No LLM provider available.\n\n"
            "Option 1 - Use Ollama (free, local):\n"
            "  1. Install: https://ollama.ai\n"
            "  2. Start: ollama serve\n"
            "  3. Pull: ollama pull llama3.2:3b\n\n"
            "Option 2 - Use Claude API:\n"
            "  export ANTHROPIC_API_KEY='your-key-here'\n\n"
            "Option 3 - Use an OpenAI-compatible API:\n"
            "  export OPENAI_API_KEY='your-key-here'\n"
            "  export OPENAI_BASE_URL='https://...'  (optional)"
        )

    raise GenerationError(f"Unknown provider: {provider}. Use 'claude', 'ollama', 'openai', or 'auto'.")


__all__ = [
    "LLMClient",
    "LLMResponse",
    "GenerationError",
    "ClaudeClient",
    "OllamaClient",
    "OpenAICompatClient",
    "get_client",
    "PROVIDERS",
    "SYSTEM_PROMPT",
]
