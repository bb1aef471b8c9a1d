"""Prompt Builder - Construct LLM prompts for commit message generation."""

from dataclasses import dataclass

from commitcraft import COMMIT_TYPES

# Example template components
_SUBJECT_SIMPLE = "[subject: imperative verb + what changed]"
_SUBJECT_TYPED = "type(scope): [imperative verb + what changed]"

_BULLETS_SIMPLE = """\
- [bullet: specific detail from the diff]
- [bullet: another detail if needed]"""

_BULLETS_CONVENTIONAL = """\
- [bullet: specific detail from the diff]
- [bullet: why or impact if relevant]"""

_BULLETS_DETAILED = """\
- [bullet: specific implementation detail]
- [bullet: why this approach was chosen]
- [bullet: what problem this solves]
- [bullet: any notable side effects]"""

# Lookup table: (style, include_body) -> (subject_template, body_template or None)
EXAMPLE_TEMPLATES: dict[tuple[str, bool], tuple[str, str | None]] = {
    ("simple", True): (_SUBJECT_SIMPLE, _BULLETS_SIMPLE),
    ("simple", False): (_SUBJECT_SIMPLE, None),
    ("detailed", True): (_SUBJECT_TYPED, _BULLETS_DETAILED),
    ("detailed", False): (_SUBJECT_TYPED, _BULLETS_DETAILED),  # detailed always has body
    ("conventional", True): (_SUBJECT_TYPED, _BULLETS_CONVENTIONAL),
    ("conventional", False): (_SUBJECT_TYPED, None),
}


@dataclass
class PromptConfig:
    """User-provided context that shapes the prompt."""
    hint: str | None = None
    forced_type: str | None = None
    style: str = "conventional"
    include_body: bool = True
    max_subject_length: int = 50
    language: str = "English"


class PromptBuilder:
    """Constructs prompts for commit message generation.

    The diff is embedded verbatim; it is never parsed or trimmed here.
    """

    def build(self, diff: str, config: PromptConfig | None = None) -> str:
        config = config or PromptConfig()
        sections = [
            self._build_role_section(),
            self._build_format_section(config),
            self._build_rules_section(config),
            self._build_examples_section(config),
            self._build_diff_section(diff),
            self._build_hints_section(config),
            self._build_final_instructions(config),
        ]
        return "\n\n".join(filter(None, sections))

    def _build_role_section(self) -> str:
        return """You are an expert at writing git commit messages. Your commit messages are documentation for future developers.

Core principles:
- The DIFF shows WHAT changed. Your job is to explain WHY.
- Identify the PRIMARY purpose; if the commit does several things, lead with the most significant.
- Write a subject that completes: "If applied, this commit will..."

Scope selection (for type(scope): format):
- Use ONE WORD: module name (auth, api, cli), feature (login, checkout), or component (Button, config)
- NEVER use file paths like 'cli/utils.py' or 'src/config' - just use 'cli' or 'config'"""

    def _build_format_section(self, config: PromptConfig) -> str:
        max_len = config.max_subject_length

        if config.style == "simple":
            format_desc = f"subject line (imperative mood, max {max_len} chars)"
            type_instruction = "Use a simple, direct subject line without type prefixes."
        else:
            format_desc = f"type(scope): subject line (imperative mood, max {max_len} chars)"
            type_instruction = self._build_type_instruction(config.forced_type)

        include_body = config.include_body or config.style == "detailed"
        if include_body:
            body_desc = "\n<blank line>\n- optional bullet points explaining the changes"
        else:
            body_desc = "\nDo NOT include a body or bullet points. Subject line only."

        return f"""<format>
Write commit messages in this exact format:

{format_desc}{body_desc}

{type_instruction}
</format>"""

    def _build_type_instruction(self, forced_type: str | None) -> str:
        if forced_type:
            return f"IMPORTANT: Use type '{forced_type}' for this commit."
        types_list = "\n".join(f"  - {t}: {desc}" for t, desc in COMMIT_TYPES.items())
        return f"Choose the most appropriate type:\n{types_list}"

    def _build_rules_section(self, config: PromptConfig) -> str:
        return f"""<rules>
1. The subject uses the imperative present tense ("add", not "added" or "adds").
2. The subject is at most {config.max_subject_length} characters and has no trailing period.
3. The body, when present, is a bulleted list; each bullet explains what changed and why.
4. No emojis, no decorative symbols, no markdown formatting.
5. Be professional and precise; do not speculate beyond the diff.
6. Write the message in {config.language}; keep the type keyword in English.
</rules>"""

    def _build_examples_section(self, config: PromptConfig) -> str:
        warning = "CRITICAL: These show FORMAT only. Never use words from these examples. Analyze the ACTUAL diff below."

        key = (config.style, config.include_body)
        subject, bullets = EXAMPLE_TEMPLATES.get(key, EXAMPLE_TEMPLATES[("conventional", True)])

        example = subject
        if bullets:
            example += "\n\n" + bullets

        return f"""<format-examples>
{warning}

{example}
</format-examples>"""

    def _build_diff_section(self, diff: str) -> str:
        return f"""<changes>
{diff}
</changes>"""

    def _build_hints_section(self, config: PromptConfig) -> str:
        if not config.hint:
            return ""

        return f"""<context>
The developer provided this context about the changes:
"{config.hint}"

Use this to inform your message, but verify it matches what you see in the diff.
</context>"""

    def _build_final_instructions(self, config: PromptConfig) -> str:
        format_example = "Subject line here" if config.style == "simple" else "type(scope): subject line"

        return f"""<instructions>
Generate exactly ONE commit message.

Rules:
- Start directly with the {format_example} line
- No preamble like "Here's a commit message:"
- No explanation after the message
- Just the raw commit message, ready to use
</instructions>"""
