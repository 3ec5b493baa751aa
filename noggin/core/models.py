"""
Document models for everything noggin keeps on disk.

Attributes are snake_case in Python and camelCase in the JSON files
(``createdAt``, ``currentBox``...), so libraries written by earlier versions
of the app, or edited by hand, stay readable.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Callable, Literal, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
)
from pydantic.alias_generators import to_camel

from noggin.core.dates import ensure_utc

# Naive timestamps found on disk are taken to be UTC
Timestamp = Annotated[datetime, AfterValidator(ensure_utc)]

LeitnerBox = Annotated[int, Field(ge=1, le=5)]
LetterGrade = Literal["A", "B", "C", "D", "F"]


class NogginModel(BaseModel):
    """Base model: camelCase aliases, construction by field name allowed."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Plain JSON-ready dict with on-disk key names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Libraries
# =============================================================================


class LibraryMetadata(NogginModel):
    """Contents of ``<library>/.lib/meta.json``."""

    name: str
    description: str = ""
    slug: str
    created_at: Timestamp


class Library(LibraryMetadata):
    """A library as seen by callers: metadata plus its root directory."""

    path: str

    def metadata(self) -> LibraryMetadata:
        return LibraryMetadata(
            name=self.name,
            description=self.description,
            slug=self.slug,
            created_at=self.created_at,
        )


# =============================================================================
# Modules
# =============================================================================


class ModuleMetadata(NogginModel):
    """Contents of ``<module>/.mod/meta.json``."""

    id: str
    title: str
    slug: str
    overview: str = ""
    library_id: str
    created_at: Timestamp
    updated_at: Timestamp
    path: str


class ModuleStats(NogginModel):
    """Current stats document: a single ``nextReviewDate``."""

    module_id: str
    current_box: LeitnerBox = 1
    next_review_date: Timestamp
    last_review_date: Timestamp | None = None


class LegacyModuleStats(NogginModel):
    """Older stats document using ``lastReviewDate``/``nextDueDate``."""

    module_id: str
    current_box: LeitnerBox = 1
    last_review_date: Timestamp | None = None
    next_due_date: Timestamp


def _stats_shape(value: Any) -> str:
    if isinstance(value, dict):
        # nextDueDate wins: older writers added it next to a stale nextReviewDate
        if "nextDueDate" in value or "next_due_date" in value:
            return "legacy"
        return "current"
    return "legacy" if isinstance(value, LegacyModuleStats) else "current"


StoredModuleStats = Annotated[
    Union[
        Annotated[ModuleStats, Tag("current")],
        Annotated[LegacyModuleStats, Tag("legacy")],
    ],
    Discriminator(_stats_shape),
]


def normalize_stats(stats: ModuleStats | LegacyModuleStats) -> ModuleStats:
    """Migrate either stats shape to the current one."""
    if isinstance(stats, ModuleStats):
        return stats
    return ModuleStats(
        module_id=stats.module_id,
        current_box=stats.current_box,
        next_review_date=stats.next_due_date,
        last_review_date=stats.last_review_date,
    )


class ModuleOverview(NogginModel):
    """Lightweight projection used to enumerate modules."""

    id: str
    slug: str
    display_name: str
    library_slug: str


# =============================================================================
# Quizzes
# =============================================================================


class Choice(NogginModel):
    option_text: str


class MultipleChoiceQuestion(NogginModel):
    question_type: Literal["multiple_choice"] = "multiple_choice"
    question: str
    choices: list[Choice] = Field(default_factory=list)


class WrittenQuestion(NogginModel):
    question_type: Literal["written"] = "written"
    question: str


def _tag(alias: str, name: str) -> Callable[[Any], Any]:
    # Raw input may be an on-disk dict or an already-built model
    def get(value: Any) -> Any:
        if isinstance(value, dict):
            return value.get(alias, value.get(name))
        return getattr(value, name, None)

    return get


Question = Annotated[
    Union[
        Annotated[MultipleChoiceQuestion, Tag("multiple_choice")],
        Annotated[WrittenQuestion, Tag("written")],
    ],
    Discriminator(_tag("questionType", "question_type")),
]


class Quiz(NogginModel):
    """Contents of ``.mod/quizzes/<quizId>.json``."""

    id: str
    title: str
    time_limit: int = Field(default=0, ge=0)  # seconds, 0 = unlimited
    sources: list[str] = Field(default_factory=list)
    questions: list[Question] = Field(default_factory=list)
    created_at: Timestamp


# =============================================================================
# Submissions
# =============================================================================


class PendingResponse(NogginModel):
    status: Literal["pending"] = "pending"
    created_at: Timestamp
    quiz_id: str
    submission_id: int
    question: Question
    student_answer: str


class GradedResponse(NogginModel):
    status: Literal["graded"] = "graded"
    created_at: Timestamp
    quiz_id: str
    submission_id: int
    question: Question
    student_answer: str
    correct_answer: str
    verdict: Literal["pass", "fail"]
    feedback: str = ""


Response = Annotated[
    Union[
        Annotated[PendingResponse, Tag("pending")],
        Annotated[GradedResponse, Tag("graded")],
    ],
    Discriminator(_tag("status", "status")),
]


class Submission(NogginModel):
    """Contents of ``.mod/submissions/<quizId>-<attempt>.json``."""

    quiz_id: str
    attempt_number: int = Field(ge=1)
    quiz_title: str
    library_id: str
    module_slug: str
    completed_at: Timestamp
    time_elapsed: float = 0
    time_limit: int = 0
    status: Literal["pending", "graded"] = "pending"
    grade: int | None = Field(default=None, ge=0, le=100)
    letter_grade: LetterGrade | None = None
    responses: list[Response] = Field(default_factory=list)

    @property
    def is_graded(self) -> bool:
        return self.status == "graded" and self.grade is not None


# =============================================================================
# Aggregate
# =============================================================================


class Mod(NogginModel):
    """Full in-memory assembly of a module."""

    metadata: ModuleMetadata
    stats: ModuleStats | None = None
    sources: list[str] = Field(default_factory=list)
    quizzes: list[Quiz] = Field(default_factory=list)
    submissions: list[Submission] = Field(default_factory=list)
