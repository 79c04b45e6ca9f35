from __future__ import annotations

from blitz_quiz.generator.prompts import (
    build_instruction,
    build_user_content,
    truncate_content,
)
from blitz_quiz.models import ImagePart


def test_truncate_content_caps_length():
    assert truncate_content("x" * 6000, 5000) == "x" * 5000
    assert truncate_content("short", 5000) == "short"
    assert truncate_content("", 10) == ""


def test_instruction_mentions_count_images_and_text():
    text = build_instruction("Mitochondria make ATP.", 7)
    assert "7 distinct" in text
    assert "images" in text
    assert 'Text Context: "Mitochondria make ATP."' in text


def test_user_content_orders_text_then_images():
    images = [
        ImagePart(data="AAAA", mime_type="image/png", name="a.png"),
        ImagePart(data="BBBB", mime_type="image/jpeg", name="b.jpg"),
    ]
    parts = build_user_content(
        "y" * 20, images, question_count=3, max_chars=10
    )
    assert parts[0]["type"] == "text"
    assert '"' + "y" * 10 + '"' in parts[0]["text"]
    assert "y" * 11 not in parts[0]["text"]
    assert parts[1] == {
        "type": "image_url",
        "image_url": {"url": "data:image/png;base64,AAAA"},
    }
    assert parts[2]["image_url"]["url"] == "data:image/jpeg;base64,BBBB"


def test_user_content_without_images_is_single_part():
    parts = build_user_content("notes", [], question_count=5, max_chars=5000)
    assert len(parts) == 1
