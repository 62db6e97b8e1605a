# Prompt fragments for persona critiques and the next-sentence helper.
# The generator stitches these into system/user messages.

from __future__ import annotations

RESPONSE_FORMAT_RULES = """\
You must respond with ONLY a valid JSON array of comment objects. Do not include any other text, explanations, or markdown formatting.

Each comment object must have exactly these fields:
- "selectedText": exact text from the original that you're commenting on (5-15 words)
- "comment": your brief comment about that selection (1-2 sentences max)
- "position": object with "start" and "end" character positions

Example format:
[
  {
    "selectedText": "example text",
    "comment": "Your comment here.",
    "position": {"start": 0, "end": 12}
  }
]
"""

MODE_FRAMING = {
    "complete": "This is a complete piece of writing. Provide detailed feedback.",
    "progress": "This is a draft in progress. Focus on encouragement and developmental feedback.",
}

INSPIRE_SYSTEM_PROMPT = (
    "You are a writing assistant. Continue the given text with exactly ONE natural, "
    "flowing sentence that maintains the writing style and tone. Return only the next "
    "sentence, nothing else. No quotes, no explanations."
)


def build_system_prompt(instructions: str, mode: str) -> str:
    return f"""{instructions}

{RESPONSE_FORMAT_RULES}
Provide 2-4 comments maximum. Comment on passages in the order they appear in the text. {MODE_FRAMING[mode]} Be concise but maintain your personality. Return ONLY the JSON array.
"""


def build_user_prompt(document: str, purpose: str = "") -> str:
    return f'Analyze this {purpose or "text"} and provide specific comments on selected portions:\n\n"{document}"'


def build_inspire_prompt(document: str, purpose: str = "") -> str:
    return f'Continue this {purpose or "text"} with one natural sentence:\n\n"{document}"'
