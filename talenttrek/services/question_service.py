"""
Interview Question Generator

DeepSeek uses OpenAI-compatible API, so we use the openai library.

Given a job title, asks the model for a fixed number of interview
questions with model answers and returns them as {id, question, answer}.
Output is JSON-only and low temperature so it parses reliably.
"""
import json
import logging
from typing import List

from openai import OpenAI, OpenAIError

from talenttrek.core.config import get_settings
from talenttrek.core.errors import QuestionGenerationError
from talenttrek.schemas.schemas import InterviewQuestion

settings = get_settings()
logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an experienced hiring manager preparing interview questions.
Return ONLY valid JSON in this format:
{{
  "questions": [
    {{"question": "string", "answer": "string"}}
  ]
}}
Write exactly {count} questions for the given job title. Mix technical and
behavioural questions. Each answer is a concise model answer (2-4 sentences).
Return ONLY the JSON, no explanation."""


def extract_json(text: str):
    """
    Extract JSON from API response.
    Handles cases where model wraps JSON in markdown code blocks.
    """
    # Remove markdown code blocks if present
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]

    return json.loads(text.strip())


def to_questions(payload) -> List[InterviewQuestion]:
    """Accept {"questions": [...]} or a bare list; ids are renumbered from 1."""
    items = payload.get("questions", []) if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        raise ValueError("questions is not a list")

    questions = []
    for item in items:
        if not isinstance(item, dict):
            continue
        question = str(item.get("question", "")).strip()
        if not question:
            continue
        questions.append(InterviewQuestion(
            id=len(questions) + 1,
            question=question,
            answer=str(item.get("answer", "")).strip()
        ))
    return questions


class QuestionGenerator:
    """
    Wrapper for DeepSeek API, question generation only.
    """

    def __init__(self):
        self.client = OpenAI(
            api_key=settings.deepseek_api_key or "not-configured",
            base_url=settings.deepseek_base_url
        )
        self.model = settings.deepseek_model

    def _call_api(self, system_prompt: str, user_content: str, max_tokens: int = 1500) -> str:
        """
        Internal method to call DeepSeek API.
        Returns raw text response.
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            max_tokens=max_tokens,
            temperature=0.3
        )
        return response.choices[0].message.content

    def generate(self, job_title: str) -> List[InterviewQuestion]:
        prompt = SYSTEM_PROMPT.format(count=settings.interview_question_count)
        try:
            raw = self._call_api(prompt, f"Job title: {job_title}")
            questions = to_questions(extract_json(raw or ""))
        except OpenAIError as e:
            logger.error("Question generation request failed: %s", e)
            raise QuestionGenerationError("Failed to generate questions. Please try again.") from e
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            logger.error("Question generation returned unusable output: %s", e)
            raise QuestionGenerationError("Failed to generate questions. Please try again.") from e

        if not questions:
            raise QuestionGenerationError("Failed to generate questions. Please try again.")
        return questions


# Singleton instance
_question_generator: QuestionGenerator = None


def get_question_generator() -> QuestionGenerator:
    """Get or create question generator (singleton pattern)"""
    global _question_generator
    if _question_generator is None:
        _question_generator = QuestionGenerator()
    return _question_generator
