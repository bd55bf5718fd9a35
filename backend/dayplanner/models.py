from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import Optional, Union

from .engine.dates import format_day_key, parse_day_key
from .engine.scoring import DEFAULT_TASK_POINTS
from .engine.transitions import MAX_QUESTION_COUNT


class TaskCreate(BaseModel):
    text: str = Field(min_length=1, max_length=500)
    date: str
    points: int = Field(default=DEFAULT_TASK_POINTS, ge=0)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("task text must not be blank")
        return v

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        # MalformedDateError is a ValueError, so pydantic reports it as a 422
        return format_day_key(parse_day_key(v))


class QuestionCountPatch(BaseModel):
    count: int = Field(ge=0, le=MAX_QUESTION_COUNT)


class ProfileImagePatch(BaseModel):
    # data URL or empty string to clear; upload handling lives in the client
    image: str = ""


class TaskRecord(BaseModel):
    """A stored task; strict so imported values keep the types the engine sums."""
    id: Union[int, str]
    date: str
    text: str = ""
    completed: bool = False
    points: Optional[int] = Field(default=None, ge=0)
    model_config = {"extra": "ignore", "strict": True}

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return format_day_key(parse_day_key(v))


class LeetCodeRecord(BaseModel):
    id: Union[int, str]
    date: str
    completed: bool = False
    question_count: int = Field(
        default=0, ge=0, le=MAX_QUESTION_COUNT,
        validation_alias=AliasChoices("question_count", "questionCount"),
    )
    model_config = {"extra": "ignore", "strict": True}

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return format_day_key(parse_day_key(v))


class PlannerExport(BaseModel):
    # camelCase names are accepted so older browser exports still import
    tasks: list[TaskRecord] = []
    leetcode_tasks: list[LeetCodeRecord] = Field(
        default=[], validation_alias=AliasChoices("leetcode_tasks", "leetcodeTasks")
    )
    profile_image: Optional[str] = Field(
        default="", validation_alias=AliasChoices("profile_image", "profileImage")
    )
    export_date: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("export_date", "exportDate")
    )
    model_config = {"extra": "ignore"}

    @field_validator("profile_image")
    @classmethod
    def validate_profile_image(cls, v):
        return v or ""
