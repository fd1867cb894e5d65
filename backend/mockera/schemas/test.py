from __future__ import annotations

from pydantic import BaseModel, Field

from mockera.models.test import Difficulty, QuestionType, Subject, Visibility


class QuestionCreate(BaseModel):
    subject: Subject
    question_type: QuestionType = QuestionType.single
    difficulty: Difficulty = Difficulty.moderate
    correct_option: str | None = None
    correct_options: list[str] = Field(default_factory=list)
    correct_numeric: str | None = None
    marks_correct: int | None = None
    marks_incorrect: int | None = None
    prompt: str = ""
    options: list[str] = Field(default_factory=list)
    image_url: str | None = None


class TestCreateRequest(BaseModel):
    title: str
    visibility: Visibility = Visibility.public
    access_code: str | None = None
    duration_minutes: int = Field(default=180, ge=1)
    marking_correct: int = 4
    marking_incorrect: int = -1
    lock_navigation: bool = False
    questions: list[QuestionCreate]


class QuestionPublic(BaseModel):
    id: str
    position: int
    subject: str
    question_type: str
    difficulty: str
    correct_option: str | None
    correct_options: list[str]
    correct_numeric: str | None
    marks_correct: int
    marks_incorrect: int
    prompt: str
    options: list[str]
    image_url: str | None


class TestPublic(BaseModel):
    id: str
    title: str
    visibility: str
    owner_id: str | None
    access_code: str | None
    duration_minutes: int
    marking_correct: int
    marking_incorrect: int
    lock_navigation: bool
    created_at: str
    questions: list[QuestionPublic]
