"""Pydantic models describing the LeetCode payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LeetCodeBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# Submission details (GraphQL) ------------------------------------------------


class LanguagePayload(LeetCodeBaseModel):
    name: str | None = None
    verbose_name: str | None = Field(default=None, alias="verboseName")


class QuestionPayload(LeetCodeBaseModel):
    # questionId is the internal id; only the frontend id matches the catalog and filenames.
    question_id: str | None = Field(default=None, alias="questionId")
    frontend_id: str | None = Field(default=None, alias="questionFrontendId")
    title_slug: str | None = Field(default=None, alias="titleSlug")

    @field_validator("question_id", "frontend_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class TopicTagPayload(LeetCodeBaseModel):
    tag_id: str = Field(alias="tagId")
    slug: str
    name: str

    @field_validator("tag_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class SubmissionDetails(LeetCodeBaseModel):
    runtime: int | float | str | None = None
    runtime_display: str | None = Field(default=None, alias="runtimeDisplay")
    runtime_percentile: float | None = Field(default=None, alias="runtimePercentile")
    memory: int | float | str | None = None
    memory_display: str | None = Field(default=None, alias="memoryDisplay")
    memory_percentile: float | None = Field(default=None, alias="memoryPercentile")
    code: str | None = None
    timestamp: int | None = None
    status_code: int | None = Field(default=None, alias="statusCode")
    lang: LanguagePayload | None = None
    question: QuestionPayload | None = None
    topic_tags: list[TopicTagPayload] = Field(default_factory=list, alias="topicTags")

    @field_validator("topic_tags", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class SubmissionDetailsData(LeetCodeBaseModel):
    submission_details: SubmissionDetails | None = Field(
        default=None, alias="submissionDetails"
    )


class GraphQLError(LeetCodeBaseModel):
    message: str


class SubmissionDetailsResponse(LeetCodeBaseModel):
    data: SubmissionDetailsData | None = None
    errors: list[GraphQLError] | None = None


# Problem catalog -------------------------------------------------------------


class CatalogStat(LeetCodeBaseModel):
    question_id: int
    frontend_question_id: int
    title_slug: str | None = Field(default=None, alias="question__title_slug")


class CatalogDifficulty(LeetCodeBaseModel):
    level: int


class CatalogPair(LeetCodeBaseModel):
    stat: CatalogStat
    difficulty: CatalogDifficulty
    paid_only: bool = False


class CatalogResponse(LeetCodeBaseModel):
    num_total: int | None = None
    stat_status_pairs: list[CatalogPair]
