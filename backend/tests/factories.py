import json
from examiner.services.ai_client import AICompletion

THESIS_TEXT = (
    "Chapter 1 Introduction\n"
    "This thesis examines how rural clinics adopt telemedicine.\n"
    "Chapter 2 Methods\n"
    "We interviewed forty practitioners across three regions.\n"
)

DEFAULT_SCORES = {
    "structure": 80,
    "argumentation": 75,
    "methodology": 70,
    "writingQuality": 85,
    "examinability": 78,
    "overall": 78,
}

DEFAULT_FEEDBACK = [
    {
        "section": "Intro",
        "type": "WEAKNESS",
        "severity": "HIGH",
        "title": "Research question is vague",
        "content": "State the research question explicitly in the first chapter.",
        "pageReference": "p. 3",
    },
    {
        "section": "Methods",
        "type": "STRENGTH",
        "severity": "LOW",
        "title": "Sound sampling",
        "content": "The sampling strategy is well justified.",
        "pageReference": "Section 3.2",
    },
]


def make_payload(scores=None, feedback=None, **extra) -> dict:
    payload = {
        "scores": dict(DEFAULT_SCORES if scores is None else scores),
        "feedback": list(DEFAULT_FEEDBACK if feedback is None else feedback),
        "vivaQuestions": [
            {
                "question": "Why did you choose a mixed-methods design?",
                "category": "Methodology",
                "difficulty": "MEDIUM",
                "preparation": "Review the trade-offs discussed in chapter 3.",
            }
        ],
        "summary": "A solid thesis that needs a sharper research question.",
    }
    payload.update(extra)
    return payload


def fenced(payload: dict) -> str:
    return f"Here is my assessment:\n\n```json\n{json.dumps(payload, indent=2)}\n```\n\nGood luck!"


class FakeAIClient:
    """Stands in for AIClient; records prompts and replays a canned answer or error."""

    def __init__(
        self,
        response: str = "",
        error: Exception | None = None,
        tokens_used: int | None = 1500,
        elapsed_seconds: float = 0.0,
    ):
        self.response = response
        self.error = error
        self.tokens_used = tokens_used
        self.elapsed_seconds = elapsed_seconds
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> AICompletion:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return AICompletion(
            text=self.response, tokens_used=self.tokens_used, elapsed_seconds=self.elapsed_seconds
        )

    async def call(self, prompt: str) -> str:
        return (await self.complete(prompt)).text
