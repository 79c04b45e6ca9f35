from __future__ import annotations

from blitz_quiz.models import ImagePart, Question, QuizModule


def test_question_helpers():
    question = Question(question="2+2?", options=("3", "4", "5", "6"), answer=1)
    assert question.is_correct(1)
    assert not question.is_correct(0)
    assert question.answer_text == "4"


def test_module_dict_roundtrip():
    module = QuizModule(
        id="99",
        title="Maths",
        content="sums",
        questions=(Question("2+2?", ("3", "4", "5", "6"), 1),),
        high_score=1200,
    )
    payload = module.to_dict()
    assert payload["questions"][0]["options"] == ["3", "4", "5", "6"]
    assert QuizModule.from_dict(payload) == module
    assert module.question_count == 1


def test_module_from_dict_defaults():
    module = QuizModule.from_dict(
        {
            "id": 5,
            "title": "T",
            "questions": [{"question": "q", "options": ["a", "b", "c", "d"], "answer": "2"}],
        }
    )
    assert module.id == "5"
    assert module.high_score == 0
    assert module.content == ""
    assert module.questions[0].answer == 2


def test_image_part_data_url():
    image = ImagePart(data="AAAA", mime_type="image/webp", name="x.webp")
    assert image.data_url == "data:image/webp;base64,AAAA"
