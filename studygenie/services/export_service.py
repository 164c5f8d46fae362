# services/export_service.py
# Plain-text rendering of stored outputs, for copy to clipboard / download.


def _numbered(items) -> list[str]:
    return [f"{i}. {item}" for i, item in enumerate(items or [], start=1)]


def render_summary(content: dict) -> str:
    lines = ["Short Summary", content.get("short", ""), "", "Detailed Summary", content.get("long", ""), "", "Key Points"]
    lines += [f"- {b}" for b in content.get("bullets") or []]
    return "\n".join(lines)


def render_quiz(content: dict) -> str:
    lines = ["Multiple Choice Questions"]
    for i, q in enumerate(content.get("mcqs") or [], start=1):
        lines.append(f"{i}. {q.get('question', '')}")
        for j, opt in enumerate(q.get("options") or []):
            lines.append(f"   {chr(65 + j)}. {opt}")
        lines.append(f"   Answer: {q.get('answer', '')}")
    lines += ["", "True or False"]
    for i, q in enumerate(content.get("trueFalse") or [], start=1):
        lines.append(f"{i}. {q.get('question', '')} ({'True' if q.get('answer') else 'False'})")
    lines += ["", "Short Answer Questions"]
    lines += _numbered(content.get("shortQuestions"))
    return "\n".join(lines)


def render_questions(content: dict) -> str:
    lines = []
    for key, title in (("five_mark", "5 Mark Questions"), ("ten_mark", "10 Mark Questions"), ("fifteen_mark", "15 Mark Questions")):
        if lines:
            lines.append("")
        lines.append(title)
        lines += _numbered(content.get(key))
    return "\n".join(lines)


def render_flashcards(content: list) -> str:
    blocks = []
    for card in content or []:
        block = f"{card.get('term', '')}\n{card.get('definition', '')}"
        if card.get("concept"):
            block += f"\n{card['concept']}"
        blocks.append(block)
    return "\n\n".join(blocks)


RENDERERS = {
    "summary": render_summary,
    "quiz": render_quiz,
    "questions": render_questions,
    "flashcards": render_flashcards,
}


def render_output(output_type: str, content) -> str:
    return RENDERERS[output_type](content).strip() + "\n"
