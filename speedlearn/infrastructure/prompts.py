"""Prompt templates for the LLM-backed study assistants."""

import json

from ..domain.entities.study_material import AnswerRecord

QUESTION_COUNT = 3


def summary_prompt(text: str) -> str:
    return f"Summarize the following text in 3-4 sentences in the same language:\n\n{text}"


def questions_prompt(text: str, count: int = QUESTION_COUNT) -> str:
    return (
        f"Create {count} flashcard questions from the following text in the same language as the text. "
        "Respond in JSON format like this:\n"
        "[\n"
        '  { "question": "Is the sky blue?", "type": "yesno" },\n'
        '  { "question": "What is the main idea?", "type": "text" }\n'
        "]\n"
        f"Text:\n\n{text}"
    )


def grading_prompt(answers: list[AnswerRecord], original_text: str) -> str:
    records = [{"question": record.question, "userAnswer": record.answer} for record in answers]
    return (
        "Based on the following text:\n\n"
        f'"{original_text}"\n\n'
        "Grade the user's answers as true or false. Respond with JSON in this format:\n"
        "[\n"
        '  { "question": "...", "answer": "...", "correct": true }\n'
        "]\n\n"
        "Questions and user answers:\n"
        f"{json.dumps(records, indent=2, ensure_ascii=False)}\n"
    )
