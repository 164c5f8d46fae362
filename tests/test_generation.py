import asyncio

import pytest

from conftest import USER_ID
from studygenie import config
from studygenie.services.errors import GenerationError, InvalidRequestError, NotFoundError
from studygenie.services.generation_service import NO_TEXT_MESSAGE, build_prompts, generate_content

SUMMARY = {"short": "Plants make food.", "long": "Plants use light to make sugar.", "bullets": ["light", "sugar"]}
FLASHCARDS = {"flashcards": [{"term": "ATP", "definition": "Energy currency", "concept": "Cells spend it"}]}


def run(coro):
    return asyncio.run(coro)


def test_prompt_sees_only_head_of_text():
    text = "x" * config.PROMPT_TEXT_CHARS + "TAIL"
    system_prompt, user_prompt = build_prompts("summary", text)
    assert "educational summaries" in system_prompt
    assert "TAIL" not in user_prompt
    assert '"bullets": ["...", "..."]' in user_prompt


@pytest.mark.parametrize("output_type, marker", [
    ("quiz", '"trueFalse"'),
    ("questions", '"fifteen_mark"'),
    ("flashcards", '"definition"'),
])
def test_each_type_has_its_json_format(output_type, marker):
    _, user_prompt = build_prompts(output_type, "some text")
    assert marker in user_prompt
    assert "Text: some text" in user_prompt


def test_unknown_output_type():
    with pytest.raises(InvalidRequestError, match="Invalid output type"):
        build_prompts("mindmap", "text")


def test_generate_summary_is_stored(store, fake_gateway, pdf_record):
    fake_gateway.reply(SUMMARY)
    content = run(generate_content(store, fake_gateway.client(), pdf_record["id"], "summary"))

    assert content == SUMMARY
    outputs = store.list_outputs(pdf_record["id"])
    assert [(o["output_type"], o["user_id"]) for o in outputs] == [("summary", USER_ID)]


def test_flashcards_are_stored_as_a_list(store, fake_gateway, pdf_record):
    fake_gateway.reply(FLASHCARDS)
    content = run(generate_content(store, fake_gateway.client(), pdf_record["id"], "flashcards"))
    assert content == FLASHCARDS["flashcards"]
    assert store.list_outputs(pdf_record["id"])[0]["content"] == FLASHCARDS["flashcards"]


def test_regenerate_replaces_previous_output(store, fake_gateway, pdf_record):
    fake_gateway.reply(SUMMARY)
    fake_gateway.reply({**SUMMARY, "short": "Second take."})
    gateway = fake_gateway.client()
    run(generate_content(store, gateway, pdf_record["id"], "summary"))
    run(generate_content(store, gateway, pdf_record["id"], "summary", regenerate=True))

    outputs = store.list_outputs(pdf_record["id"])
    assert len(outputs) == 1
    assert outputs[0]["content"]["short"] == "Second take."


def test_existing_output_is_reused_by_default(store, fake_gateway, pdf_record):
    fake_gateway.reply(SUMMARY)
    gateway = fake_gateway.client()
    run(generate_content(store, gateway, pdf_record["id"], "summary"))
    content = run(generate_content(store, gateway, pdf_record["id"], "summary"))

    assert content == SUMMARY
    assert len(fake_gateway.requests) == 1


def test_pdf_without_text_is_rejected(store, fake_gateway):
    pdf = store.insert_pdf(USER_ID, "empty.pdf", f"{USER_ID}/2.pdf", 10)
    with pytest.raises(InvalidRequestError) as excinfo:
        run(generate_content(store, fake_gateway.client(), pdf["id"], "quiz"))
    assert excinfo.value.message == NO_TEXT_MESSAGE
    assert fake_gateway.requests == []


def test_malformed_content_is_not_stored(store, fake_gateway, pdf_record):
    fake_gateway.reply({"mcqs": [{"question": "Q?", "options": ["a"]}]})
    with pytest.raises(GenerationError):
        run(generate_content(store, fake_gateway.client(), pdf_record["id"], "quiz"))
    assert store.list_outputs(pdf_record["id"]) == []


def test_other_users_pdf_is_not_found(store, fake_gateway, pdf_record):
    with pytest.raises(NotFoundError):
        run(generate_content(store, fake_gateway.client(), pdf_record["id"], "summary", user_id="someone-else"))
