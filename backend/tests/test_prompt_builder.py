from examiner.models import DocumentType
from examiner.services.prompt_builder import TRUNCATION_MARKER, build_prompt, truncate_head_tail
from examiner.services.rubric import FEEDBACK_TYPES, SCORE_KEYS, SEVERITIES


def test_prompt_is_deterministic():
    first = build_prompt("Some thesis text.", DocumentType.THESIS)
    second = build_prompt("Some thesis text.", DocumentType.THESIS)
    assert first == second


def test_prompt_names_document_type_and_embeds_text():
    prompt = build_prompt("Chapter 1: Telemedicine adoption.", "CHAPTER")
    assert "Analyze the following CHAPTER document" in prompt
    assert prompt.rstrip().endswith("Chapter 1: Telemedicine adoption.")


def test_prompt_carries_the_wire_contract():
    prompt = build_prompt("text", DocumentType.PROPOSAL)
    for key in SCORE_KEYS + ["scores", "feedback", "vivaQuestions", "summary", "pageReference"]:
        assert f'"{key}"' in prompt
    assert "|".join(FEEDBACK_TYPES) in prompt
    assert "|".join(SEVERITIES) in prompt
    for heading in ["STRUCTURE", "ARGUMENTATION", "METHODOLOGY", "WRITING QUALITY", "EXAMINABILITY"]:
        assert heading in prompt


def test_long_documents_are_truncated_head_and_tail():
    text = "A" * 600 + "B" * 600
    prompt = build_prompt(text, DocumentType.THESIS, max_chars=200)
    assert TRUNCATION_MARKER in prompt
    assert "A" * 100 in prompt and "B" * 100 in prompt
    assert "A" * 101 not in prompt


def test_short_text_is_not_truncated():
    assert truncate_head_tail("short", 100) == "short"
    assert truncate_head_tail("", 100) == ""
