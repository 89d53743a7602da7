import json
from examiner.models import DocumentType
from examiner.services.rubric import (
    DIMENSIONS,
    FEEDBACK_TYPES,
    SCORE_KEYS,
    SCORE_MAX,
    SCORE_MIN,
    SEVERITIES,
    VIVA_DIFFICULTIES,
)

DEFAULT_MAX_DOCUMENT_CHARS = 120_000
TRUNCATION_MARKER = "...[TRUNCATED]..."


def truncate_head_tail(text: str, max_chars: int = DEFAULT_MAX_DOCUMENT_CHARS) -> str:
    """Keep the beginning and end of an over-long document, dropping the middle."""
    t = text or ""
    if max_chars <= 0 or len(t) <= max_chars:
        return t
    half = max_chars // 2
    return "\n\n".join([t[:half], TRUNCATION_MARKER, t[-half:]])


def _response_schema() -> str:
    schema = {
        "scores": {key: "<number>" for key in SCORE_KEYS},
        "feedback": [
            {
                "section": "<section name>",
                "type": "|".join(FEEDBACK_TYPES),
                "severity": "|".join(SEVERITIES),
                "title": "<brief title>",
                "content": "<detailed feedback>",
                "pageReference": "<page or section reference>",
            }
        ],
        "vivaQuestions": [
            {
                "question": "<question text>",
                "category": "<category>",
                "difficulty": "|".join(VIVA_DIFFICULTIES),
                "preparation": "<suggested preparation strategy>",
            }
        ],
        "summary": "<overall assessment summary>",
    }
    return json.dumps(schema, indent=2)


def _rubric_section() -> str:
    blocks = []
    for idx, (_, heading, criteria) in enumerate(DIMENSIONS, start=1):
        lines = [f"{idx}. {heading} (Score {SCORE_MIN}-{SCORE_MAX}):"]
        lines.extend(f"   - {c}" for c in criteria)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_prompt(
    document_text: str,
    document_type: DocumentType | str,
    max_chars: int = DEFAULT_MAX_DOCUMENT_CHARS,
) -> str:
    """Render the evaluation prompt for one document.

    Deterministic: identical inputs always produce an identical prompt.
    Documents longer than ``max_chars`` are cut head+tail around a
    truncation marker.
    """
    doc_type = DocumentType(document_type).value
    excerpt = truncate_head_tail(document_text, max_chars)
    return f"""You are an expert thesis examiner and academic assessor. Analyze the following {doc_type} document comprehensively.

Please evaluate the document across these dimensions:

{_rubric_section()}

The "{SCORE_KEYS[-1]}" score is your overall judgement across all dimensions.
Every score must be a number between {SCORE_MIN} and {SCORE_MAX}.
List feedback items in the order a reader would meet them in the document.

Provide your response in the following JSON format:
{_response_schema()}

Document to analyze:
{excerpt}
"""
