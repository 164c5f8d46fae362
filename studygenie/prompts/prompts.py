from langchain_core.prompts import PromptTemplate

JSON_ONLY = "IMPORTANT: Return ONLY valid JSON, no markdown formatting, no extra text."

# --- Summary ---
SUMMARY_SYSTEM_PROMPT = (
    "You are an expert at creating educational summaries. "
    f"Generate clear, concise summaries from study materials. {JSON_ONLY}"
)
summary_template = """Create a summary from this text with:
1. A short summary (2-3 sentences)
2. A long detailed summary (5-7 sentences)
3. Key bullet points (5-7 points)

Text: {text}

Return ONLY this JSON format (no markdown, no extra text):
{{
  "short": "...",
  "long": "...",
  "bullets": ["...", "..."]
}}"""
SUMMARY_PROMPT = PromptTemplate(
    input_variables=["text"],
    template=summary_template,
)

# --- Quiz ---
QUIZ_SYSTEM_PROMPT = f"You are an expert at creating educational quizzes and assessments. {JSON_ONLY}"
quiz_template = """Generate a quiz from this text:
1. 5 multiple choice questions with 4 options each and the correct answer
2. 5 true/false questions with answers
3. 3 short answer questions

Text: {text}

Return ONLY this JSON format (no markdown, no extra text):
{{
  "mcqs": [{{"question": "...", "options": ["a", "b", "c", "d"], "answer": "a"}}],
  "trueFalse": [{{"question": "...", "answer": true}}],
  "shortQuestions": ["Question 1?", "Question 2?"]
}}"""
QUIZ_PROMPT = PromptTemplate(
    input_variables=["text"],
    template=quiz_template,
)

# --- Exam questions ---
QUESTIONS_SYSTEM_PROMPT = f"You are an expert at creating exam questions for students. {JSON_ONLY}"
questions_template = """Generate important exam questions from this text:
1. 5 questions worth 5 marks each
2. 3 questions worth 10 marks each
3. 2 questions worth 15 marks each

Text: {text}

Return ONLY this JSON format (no markdown, no extra text):
{{
  "five_mark": ["Q1...", "Q2..."],
  "ten_mark": ["Q1...", "Q2..."],
  "fifteen_mark": ["Q1...", "Q2..."]
}}"""
QUESTIONS_PROMPT = PromptTemplate(
    input_variables=["text"],
    template=questions_template,
)

# --- Flashcards ---
FLASHCARDS_SYSTEM_PROMPT = f"You are an expert at creating educational flashcards for study and revision. {JSON_ONLY}"
flashcards_template = """Create 10 flashcards from this text. Each flashcard should have:
- A term/concept name
- A clear definition
- A brief explanation of the concept

Text: {text}

Return ONLY this JSON format (no markdown, no extra text):
{{
  "flashcards": [
    {{"term": "...", "definition": "...", "concept": "..."}}
  ]
}}"""
FLASHCARDS_PROMPT = PromptTemplate(
    input_variables=["text"],
    template=flashcards_template,
)

# output_type -> (system prompt, user prompt template)
PROMPTS = {
    "summary": (SUMMARY_SYSTEM_PROMPT, SUMMARY_PROMPT),
    "quiz": (QUIZ_SYSTEM_PROMPT, QUIZ_PROMPT),
    "questions": (QUESTIONS_SYSTEM_PROMPT, QUESTIONS_PROMPT),
    "flashcards": (FLASHCARDS_SYSTEM_PROMPT, FLASHCARDS_PROMPT),
}
