"""Prompt template for the message generator.

The prompt is assembled from three parts:

1. a format block selected by message type (or the generic text rule),
2. the universal instructions (goal, tone, key points, length, recipient),
3. a signature block and the JSON output contract.
"""

from __future__ import annotations

from typing import Optional

from typewise.config import get_settings
from typewise.models.request_models import MessageRequest, MessageType

DEFAULT_LENGTH_GUIDANCE = "- Aim for a concise but complete message (around 150-200 words)."
DEFAULT_SIGN_OFF = "Best regards"
NAME_PLACEHOLDER = "[Your Name]"

GENERIC_RULES = """### RULES & CONSTRAINTS ###
- **Formatting:** Generate only the raw text of the message. Do NOT include any markdown, titles, or introductory phrases like "Here is the draft:"."""

FORMAT_RULES: dict[MessageType, str] = {
    MessageType.RESUME_BULLET_POINT: """### MESSAGE-TYPE SPECIFIC RULES ###
- **Output Format:** Generate a single, powerful, action-oriented bullet point.
- **Content:** Start with an action verb. Quantify achievements where possible based on the key points.
- **Exclusions:** Do NOT include any greetings, sign-offs, or conversational text. Output ONLY the bullet point.""",
    MessageType.EMAIL: """### MESSAGE-TYPE SPECIFIC RULES ###
- **Output Format:** Format as a standard professional email with a clear, specific subject line and a separate body.
- **Content:** Maintain a formal or specified tone throughout the email body. Start the body with an appropriate greeting.""",
    MessageType.LINKEDIN_MESSAGE: """### MESSAGE-TYPE SPECIFIC RULES ###
- **Output Format:** Format as a professional but slightly more casual direct message.
- **Content:** Keep the message concise and to the point. The tone can be friendlier than a formal email.""",
    MessageType.COVER_LETTER_PARAGRAPH: """### MESSAGE-TYPE SPECIFIC RULES ###
- **Output Format:** Generate a well-structured paragraph suitable for a cover letter.
- **Content:** The paragraph should be formal and persuasive, directly addressing the key points and goal.
- **Exclusions:** Do NOT include a greeting, sign-off, or signature.""",
    MessageType.COLD_OUTREACH: """### MESSAGE-TYPE SPECIFIC RULES ###
- **Output Format:** A concise and compelling message for initial contact, suitable for an email.
- **Content:** Focus on grabbing attention quickly and providing a clear call to action. Write a compelling subject line.""",
}

# Formats that stand alone inside a larger document
UNSIGNED_TYPES = frozenset({MessageType.RESUME_BULLET_POINT, MessageType.COVER_LETTER_PARAGRAPH})

TEXT_OUTPUT_CONTRACT = """### OUTPUT FORMAT ###
Respond ONLY with a strict JSON object with exactly one field:
- "message" (string): the complete message text, with line breaks as \\n.

```json
{
  "message": "..."
}
```"""

STRUCTURED_OUTPUT_CONTRACT = """### OUTPUT FORMAT ###
Respond ONLY with a strict JSON object with exactly these fields:
- "subject" (string): the subject line only, without the "Subject:" prefix.
- "body"    (string): the message body including greeting and sign-off, with line breaks as \\n.

```json
{
  "subject": "...",
  "body": "..."
}
```"""


def build_message_prompt(request: MessageRequest) -> str:
    """Build the full generation prompt for a validated request."""
    message_type = request.message_type

    type_line = f"\nYou are writing a: **{message_type.value}**.\n" if message_type else ""
    format_rules = FORMAT_RULES.get(message_type, GENERIC_RULES)

    general_rules = "\n".join(
        line for line in (
            _word_limit_instruction(request.word_limit),
            _recipient_instruction(request.recipient),
        ) if line
    )

    signature_block = build_signature_block(request)
    contract = STRUCTURED_OUTPUT_CONTRACT if is_structured(message_type) else TEXT_OUTPUT_CONTRACT

    sections = [
        "You are an expert career communications assistant. Your task is to write a professional "
        "message based on the user's specifications." + type_line,
        format_rules,
        f"""### CORE INSTRUCTIONS ###
- **Goal:** Your primary objective is to: {request.goal}.
- **Tone:** The message must be written in a {request.tone} tone.
- **Key Points:** You must incorporate the following key points provided by the user: {request.key_points}.""",
        f"### GENERAL RULES & CONSTRAINTS ###\n{general_rules}",
    ]
    if signature_block:
        sections.append(signature_block)
    sections.append(contract)

    return "\n\n".join(sections) + "\n"


def build_signature_block(request: MessageRequest) -> str:
    """Return the sign-off instructions, or an empty string for unsigned formats."""
    if request.message_type in UNSIGNED_TYPES:
        return ""
    return f"""### SIGNATURE ###
- Conclude the message with the sign-off "{request.signature or DEFAULT_SIGN_OFF}".
- Sign the message with the name "{request.your_name or NAME_PLACEHOLDER}". If no name is provided, use the placeholder."""


def compute_max_output_tokens(word_limit: Optional[int]) -> int:
    """Output-length hint for the LLM: a fixed multiple of the word limit, or the default cap.

    Never below ``min_output_tokens``; tiny limits would truncate the JSON reply.
    """
    settings = get_settings()
    if word_limit:
        return max(word_limit * settings.word_limit_token_multiplier, settings.min_output_tokens)
    return settings.default_max_output_tokens


def is_structured(message_type: Optional[MessageType]) -> bool:
    return message_type is not None and message_type.is_structured


def _word_limit_instruction(word_limit: Optional[int]) -> str:
    if word_limit:
        return f"- Strictly adhere to a word limit of approximately {word_limit} words."
    return DEFAULT_LENGTH_GUIDANCE


def _recipient_instruction(recipient: Optional[str]) -> str:
    if recipient:
        return f'- For personalization, subtly mention the recipient: "{recipient}".'
    return ""
