import pytest

from talenttrek.core.errors import QuestionGenerationError
from talenttrek.services.question_service import QuestionGenerator, extract_json, to_questions


def test_extract_json_strips_code_fences():
    assert extract_json('```json\n{"questions": []}\n```') == {"questions": []}
    assert extract_json('  {"a": 1} ') == {"a": 1}


def test_to_questions_renumbers_and_skips_blanks():
    questions = to_questions({"questions": [
        {"id": 7, "question": "What is REST?", "answer": "An architectural style."},
        {"question": "   ", "answer": "skipped"},
        "not a dict",
        {"question": "What is a deadlock?"},
    ]})
    assert [(q.id, q.question) for q in questions] == [(1, "What is REST?"), (2, "What is a deadlock?")]
    assert questions[1].answer == ""


def test_to_questions_accepts_bare_list():
    assert len(to_questions([{"question": "Q", "answer": "A"}])) == 1


def test_generator_parses_model_output(monkeypatch):
    generator = QuestionGenerator()
    monkeypatch.setattr(
        generator, "_call_api",
        lambda *args, **kwargs: '```json\n{"questions": [{"question": "Q1", "answer": "A1"}]}\n```'
    )
    questions = generator.generate("Data Engineer")
    assert [q.question for q in questions] == ["Q1"]


@pytest.mark.parametrize("raw", ["not json at all", '{"questions": []}', '{"questions": "nope"}'])
def test_generator_rejects_unusable_output(monkeypatch, raw):
    generator = QuestionGenerator()
    monkeypatch.setattr(generator, "_call_api", lambda *args, **kwargs: raw)
    with pytest.raises(QuestionGenerationError):
        generator.generate("Data Engineer")


def test_generate_page(student, generator):
    page = student.get("/student/generate").json()
    assert page["page"] == "generate"

    response = student.post("/student/generate", json={"job_title": "  Backend Developer "})
    assert response.status_code == 200
    result = response.json()
    assert result["job_title"] == "Backend Developer"
    assert [q["id"] for q in result["questions"]] == [1, 2]
    assert generator.calls == ["Backend Developer"]


def test_generate_requires_job_title(student, generator):
    response = student.post("/student/generate", json={"job_title": "   "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Please enter a job title"
    assert generator.calls == []


def test_generation_failure_becomes_notification(student, generator):
    generator.fail = True
    response = student.post("/student/generate", json={"job_title": "Designer"})
    assert response.status_code == 502
    assert response.json()["notification"] == {
        "level": "error", "message": "Failed to generate questions. Please try again."
    }


def test_recruiters_cannot_generate(recruiter, generator):
    response = recruiter.post("/student/generate", json={"job_title": "Designer"})
    assert response.status_code == 303
