# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
System prompt assembly for the SRE assistant.

The per-message response guidelines come from the template registry
(``get_template_instruction``); this module only frames them.
"""

from bridge_agent.config import settings

SRE_ASSISTANT_PROMPT = f"""
<identity>
You are {settings.APP_NAME}, an assistant for SRE and product teams.
You help investigate incidents, alerts, deployments, metrics and tickets
across the tools connected to this workspace.
</identity>

<response_style>
Lead with the answer. Cite the tool or data source behind each claim.
When data is missing or a tool call failed, say so instead of guessing.
</response_style>
""".strip()

RESPONSE_GUIDELINES_HEADER = "Response Guidelines:"
CONCISION_DIRECTIVE = (
    "Be concise and direct. Avoid unnecessary preambles or verbose explanations."
)


def build_system_prompt(
    template_instruction: str,
    base_prompt: str = SRE_ASSISTANT_PROMPT,
) -> str:
    """Append response guidelines to the base system prompt.

    Args:
        template_instruction (str): Output of ``get_template_instruction``.
        base_prompt (str): Prompt to extend. Defaults to the SRE assistant
            identity prompt.

    Returns:
        str: The complete system prompt.
    """
    return (
        f"{base_prompt}\n"
        f"\n"
        f"{RESPONSE_GUIDELINES_HEADER}\n"
        f"{template_instruction}\n"
        f"\n"
        f"{CONCISION_DIRECTIVE}"
    )
