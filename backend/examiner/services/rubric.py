"""Wire contract between the evaluation prompt and the response parser.

Both sides read these constants; a rubric change is made here only.
"""

from examiner.models import FeedbackType, Severity

# (JSON key in "scores", rubric heading, criteria)
DIMENSIONS: list[tuple[str, str, list[str]]] = [
    ("structure", "STRUCTURE ANALYSIS", [
        "Overall organization and logical flow",
        "Chapter/section arrangement",
        "Coherence between sections",
        "Clarity of progression",
    ]),
    ("argumentation", "ARGUMENTATION ANALYSIS", [
        "Clarity of thesis statement/research question",
        "Strength of arguments and evidence",
        "Logical reasoning",
        "Critical analysis depth",
    ]),
    ("methodology", "METHODOLOGY ANALYSIS", [
        "Research design appropriateness",
        "Methodological rigor",
        "Justification of methods",
        "Limitations acknowledgment",
    ]),
    ("writingQuality", "WRITING QUALITY", [
        "Academic tone and style",
        "Clarity and precision",
        "Grammar and mechanics",
        "Citation practices",
    ]),
    ("examinability", "EXAMINABILITY SCORE", [
        "Overall readiness for examination",
        "Potential for successful defense",
        "Contribution to field",
    ]),
]

OVERALL_KEY = "overall"
SCORE_KEYS: list[str] = [key for key, _, _ in DIMENSIONS] + [OVERALL_KEY]

SCORE_MIN = 0
SCORE_MAX = 100

FEEDBACK_TYPES: list[str] = [t.value for t in FeedbackType]
SEVERITIES: list[str] = [s.value for s in Severity]
# Suggested to the model only; the parser accepts any difficulty string.
VIVA_DIFFICULTIES: list[str] = ["EASY", "MEDIUM", "HARD"]
