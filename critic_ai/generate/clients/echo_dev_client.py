# Offline model client for local dev and tests.
# Critique requests get a JSON comment array quoting the first
# sentences of the document; anything else is echoed back.

import json
import re
from typing import List, Tuple, Dict, Any
from ..types import Message, ModelParams

_SENTENCE = re.compile(r"[^.!?\n]+[.!?]?")


def _quoted_document(content: str) -> str:
    # user prompts end with the document wrapped in double quotes
    body = content.split("\n\n", 1)[-1].strip()
    if len(body) >= 2 and body[0] == body[-1] == '"':
        return body[1:-1]
    return body


class EchoDevClient:
    def __init__(self, max_comments: int = 2):
        self.model = "echo-dev"
        self.max_comments = max_comments

    def ensure_configured(self) -> None:
        return None

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        user_inputs = [m.content for m in messages if m.role == "user"]
        last = user_inputs[-1] if user_inputs else ""
        meta = {"engine": "echo", "model": self.model, "temp": params.temperature, "max_tokens": params.max_tokens}

        if not last.startswith("Analyze this"):
            return f"[ECHO RESPONSE] {_quoted_document(last) or '(no user input)'}", meta

        document = _quoted_document(last)
        comments = []
        for m in _SENTENCE.finditer(document):
            sentence = m.group(0).strip()
            if not sentence:
                continue
            comments.append({
                "selectedText": sentence,
                "comment": f"[ECHO] {len(sentence.split())} words here.",
                "position": {"start": m.start(), "end": m.end()},
            })
            if len(comments) >= self.max_comments:
                break
        return "```json\n" + json.dumps(comments, indent=2) + "\n```", meta
