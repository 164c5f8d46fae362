from pydantic import BaseModel, Field


class Summary(BaseModel):
    short: str
    long: str
    bullets: list[str] = Field(default_factory=list)


class MultipleChoice(BaseModel):
    question: str
    options: list[str]
    answer: str


class TrueFalse(BaseModel):
    question: str
    answer: bool


class Quiz(BaseModel):
    mcqs: list[MultipleChoice] = Field(default_factory=list)
    trueFalse: list[TrueFalse] = Field(default_factory=list)
    shortQuestions: list[str] = Field(default_factory=list)


class ExamQuestions(BaseModel):
    five_mark: list[str] = Field(default_factory=list)
    ten_mark: list[str] = Field(default_factory=list)
    fifteen_mark: list[str] = Field(default_factory=list)


class Flashcard(BaseModel):
    term: str
    definition: str
    concept: str = ""


class FlashcardSet(BaseModel):
    flashcards: list[Flashcard]


# output_type -> model the gateway's JSON must satisfy
OUTPUT_SCHEMAS = {
    "summary": Summary,
    "quiz": Quiz,
    "questions": ExamQuestions,
    "flashcards": FlashcardSet,
}
