"""
LRID — Submission schema (version 1).

One respondent's answers for one assessment instance, exactly as the intake
layer posts them.  This is the only accepted shape; payloads that do not
conform are rejected at the boundary instead of being guessed at.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# Scalar answer payload: Likert value, choice index, yes/no, or free text.
RawResponse = Optional[Union[bool, int, float, str]]


class Answer(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    question_id: str = Field(min_length=1)
    # The intake form posts ``value``; scored files carry ``response``.
    response: RawResponse = Field(
        default=None,
        validation_alias=AliasChoices("response", "value"),
    )


class Respondent(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    email: str = ""
    organization: str = ""


class Timestamps(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    started_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None

    @property
    def elapsed_seconds(self) -> float | None:
        if self.started_at is None or self.submitted_at is None:
            return None
        return (self.submitted_at - self.started_at).total_seconds()


class Submission(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    schema_version: Literal["1"] = "1"
    case_id: str = Field(min_length=1)
    respondent: Respondent = Field(default_factory=Respondent)
    timestamps: Optional[Timestamps] = None
    answers: list[Answer] = Field(default_factory=list)
