# services/quiz_service.py
# Grades a user's answers against a stored quiz (MCQ + true/false; short questions are ungraded).


def _status(user_answer, correct_answer) -> str:
    if user_answer is None or user_answer == "":
        return "unanswered"
    return "correct" if user_answer == correct_answer else "wrong"


def _as_bool(value):
    """Radio groups post "true"/"false" strings; accept those as well as real booleans."""
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return value


def grade_quiz(quiz: dict, answers: dict) -> dict:
    """
    Compares answers keyed "mcq-{i}" (option text) and "tf-{i}" (bool) with the quiz.

    Returns per-question results plus the score over all gradable questions.
    """
    results = []

    for i, q in enumerate(quiz.get("mcqs") or []):
        question_id = f"mcq-{i}"
        user_answer = answers.get(question_id)
        results.append({
            "id": question_id,
            "question": q.get("question"),
            "user_answer": user_answer,
            "correct_answer": q.get("answer"),
            "status": _status(user_answer, q.get("answer")),
        })

    for i, q in enumerate(quiz.get("trueFalse") or []):
        question_id = f"tf-{i}"
        user_answer = _as_bool(answers.get(question_id))
        results.append({
            "id": question_id,
            "question": q.get("question"),
            "user_answer": user_answer,
            "correct_answer": q.get("answer"),
            "status": _status(user_answer, q.get("answer")),
        })

    correct = sum(1 for r in results if r["status"] == "correct")
    return {
        "results": results,
        "correct": correct,
        "total": len(results),
        "answered": sum(1 for r in results if r["status"] != "unanswered"),
    }
