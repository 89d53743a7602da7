import json
import logging
from typing import Annotated, Literal
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from examiner.services.rubric import SCORE_MAX, SCORE_MIN
from examiner.core.exceptions import MalformedResponseError

logger = logging.getLogger(__name__)

JSON_FENCE = "```json"
FENCE = "```"

Score = Annotated[float, Field(strict=True, ge=SCORE_MIN, le=SCORE_MAX)]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class DimensionScores(_Frozen):
    structure: Score
    argumentation: Score
    methodology: Score
    writing_quality: Score = Field(alias="writingQuality")
    examinability: Score
    overall: Score


class FeedbackItem(_Frozen):
    section: str
    type: Literal["STRENGTH", "WEAKNESS", "SUGGESTION", "QUESTION"]
    severity: Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]
    title: str | None = None
    content: str | None = None
    page_reference: str | None = Field(default=None, alias="pageReference")


class VivaQuestion(_Frozen):
    question: str | None = None
    category: str | None = None
    difficulty: str | None = None
    preparation: str | None = None


class AnalysisResult(_Frozen):
    scores: DimensionScores
    feedback: tuple[FeedbackItem, ...] = ()
    viva_questions: tuple[VivaQuestion, ...] = Field(default=(), alias="vivaQuestions")
    summary: str = ""


def extract_json_block(raw: str) -> str:
    """Return the body of a ```json fence if the text has one, else the text itself."""
    start = raw.find(JSON_FENCE)
    if start == -1:
        return raw.strip()
    start += len(JSON_FENCE)
    end = raw.rfind(FENCE)
    if end < start:
        return raw[start:].strip()
    return raw[start:end].strip()


def _describe(error: ValidationError) -> str:
    parts = []
    for err in error.errors()[:5]:
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def parse(raw: str) -> AnalysisResult:
    """Parse raw model output into an AnalysisResult.

    Any missing score, non-numeric score or unknown feedback enum fails the
    whole parse; nothing is defaulted to zero or silently dropped.
    """
    if not raw or not raw.strip():
        raise MalformedResponseError("AI response was empty")

    payload = extract_json_block(raw)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.debug("Unparseable AI response: %s", payload[:500])
        raise MalformedResponseError(f"AI response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponseError("AI response JSON is not an object")
    if data.get("summary") is None:
        data.pop("summary", None)
    for key in ("feedback", "vivaQuestions"):
        if data.get(key) is None:
            data.pop(key, None)

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(f"AI response failed validation: {_describe(e)}") from e
