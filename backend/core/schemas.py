from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

import config

SimilarityRow = Dict[str, int]
SimilarityMatrix = Dict[str, SimilarityRow]


class InvalidSubmissionError(ValueError):
    """Raised before any computation when the input batch is malformed."""


class SubmissionRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    assignment_id: Optional[str] = Field(default=None, alias="assignmentId")
    content: Optional[str] = None

    # Analysis results, unset until a run includes this submission
    ai_score: Optional[int] = Field(default=None, alias="aiScore")
    plagiarism_score: Optional[int] = Field(default=None, alias="plagiarismScore")
    result_json: Optional[str] = Field(default=None, alias="resultJson")

    @field_validator("id", "user_id", "assignment_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value):
        # Integer primary keys are accepted and keyed as strings
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def has_content(self) -> bool:
        return bool(self.content)


class PlagiarismDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    partner_id: str = Field(alias="partnerId")
    similarity: int


class AnalysisData(BaseModel):
    """Serialized into every scored submission's `resultJson`.

    By default `similarityMatrix` carries the whole assignment matrix, so any one
    result is enough to rebuild every pair. When the matrix is stored once per
    assignment instead, `similarityRow` carries this submission's own row and
    `matrixRef` names the assignment whose stored matrix holds the rest.
    """

    model_config = ConfigDict(populate_by_name=True)

    ai_score: int = Field(alias="aiScore")
    plagiarism_score: int = Field(alias="plagiarismScore")
    plagiarism_details: List[PlagiarismDetail] = Field(default_factory=list, alias="plagiarismDetails")
    similarity_row: Optional[SimilarityRow] = Field(default=None, alias="similarityRow")
    matrix_ref: Optional[str] = Field(default=None, alias="matrixRef")
    similarity_matrix: Optional[SimilarityMatrix] = Field(default=None, alias="similarityMatrix")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class AnalysisSettings(BaseModel):
    plagiarism_threshold: int = config.PLAGIARISM_THRESHOLD
    ai_word_length_threshold: float = config.AI_WORD_LENGTH_THRESHOLD
    token_window: int = Field(default=config.TOKEN_WINDOW, gt=0)
    max_partners: int = Field(default=config.MAX_PLAGIARISM_PARTNERS, ge=0)
    embed_similarity_matrix: bool = config.EMBED_SIMILARITY_MATRIX


class AnalysisReport(BaseModel):
    """One run over one assignment: updated submissions plus the shared matrix."""

    assignment_id: Optional[str] = None
    submissions: List[SubmissionRecord]
    similarity_matrix: SimilarityMatrix = Field(default_factory=dict)
    analyzed: int = 0
    skipped: int = 0
    flagged: int = 0
