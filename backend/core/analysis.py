"""Assignment-wide integrity analysis.

`AnalysisEngine.analyze` takes every submission of one assignment and returns
copies with `aiScore`, `plagiarismScore` and `resultJson` filled in, plus the
assignment's similarity matrix. It does no I/O; persisting the result fields
and the matrix, and making sure only one run per assignment happens at a time,
is up to the caller.
"""
import logging
import random
from collections.abc import Iterable, Mapping
from typing import Any, List, Optional

from pydantic import ValidationError

from core.ai_detector import AIDetector
from core.schemas import (
    AnalysisData,
    AnalysisReport,
    AnalysisSettings,
    InvalidSubmissionError,
    PlagiarismDetail,
    SimilarityRow,
    SubmissionRecord,
)
from core.similarity import SimilarityEngine

logger = logging.getLogger(__name__)


def rank_partners(row: SimilarityRow, threshold: int = 60, limit: int = 3) -> List[PlagiarismDetail]:
    """Peers strictly above `threshold`, highest first, at most `limit`.

    Ties keep the row's insertion order (`sorted` is stable).
    """
    suspects = [(partner_id, sim) for partner_id, sim in row.items() if sim > threshold]
    suspects = sorted(suspects, key=lambda item: item[1], reverse=True)[:limit]
    return [PlagiarismDetail(partner_id=partner_id, similarity=sim) for partner_id, sim in suspects]


def max_similarity(row: SimilarityRow) -> int:
    return max(row.values(), default=0)


def validate_submissions(submissions: Any) -> List[SubmissionRecord]:
    """Copy the batch into fresh records, failing fast on malformed input."""
    if isinstance(submissions, (str, bytes, Mapping)) or not isinstance(submissions, Iterable):
        raise InvalidSubmissionError(f"Expected a list of submissions, got {type(submissions).__name__}")

    records = []
    for index, item in enumerate(submissions):
        try:
            if isinstance(item, SubmissionRecord):
                records.append(item.model_copy(deep=True))
            elif isinstance(item, Mapping):
                records.append(SubmissionRecord.model_validate(dict(item)))
            else:
                records.append(SubmissionRecord.model_validate(item, from_attributes=True))
        except ValidationError as e:
            raise InvalidSubmissionError(f"Submission at position {index} is invalid: {e}") from e
    return records


class AnalysisEngine:
    def __init__(self, settings: Optional[AnalysisSettings] = None, rng: Optional[random.Random] = None):
        self.settings = settings or AnalysisSettings()
        self.similarity = SimilarityEngine(token_window=self.settings.token_window)
        self.detector = AIDetector(rng=rng, word_length_threshold=self.settings.ai_word_length_threshold)

    def analyze(self, submissions: Any, assignment_id: Optional[str] = None) -> AnalysisReport:
        records = validate_submissions(submissions)
        if assignment_id is None:
            assignment_id = next((r.assignment_id for r in records if r.assignment_id), None)

        matrix = self.similarity.build_matrix(records)

        analyzed = skipped = flagged = 0
        for record in records:
            if not record.has_content:
                skipped += 1
                logger.debug(f"Skipping submission {record.id}: no content")
                continue

            row = matrix.get(record.user_id, {})
            details = rank_partners(
                row,
                threshold=self.settings.plagiarism_threshold,
                limit=self.settings.max_partners,
            )
            data = AnalysisData(
                ai_score=self.detector.detect(record.content),
                plagiarism_score=max_similarity(row),
                plagiarism_details=details,
            )
            if self.settings.embed_similarity_matrix or assignment_id is None:
                # Without an assignment to point at, the matrix travels with the result
                data.similarity_matrix = matrix
            else:
                data.similarity_row = dict(row)
                data.matrix_ref = assignment_id

            record.ai_score = data.ai_score
            record.plagiarism_score = data.plagiarism_score
            record.result_json = data.to_json()

            analyzed += 1
            if details:
                flagged += 1

        logger.info(
            f"Analysis for assignment {assignment_id}: {analyzed} scored, "
            f"{skipped} skipped, {flagged} flagged"
        )
        return AnalysisReport(
            assignment_id=assignment_id,
            submissions=records,
            similarity_matrix=matrix,
            analyzed=analyzed,
            skipped=skipped,
            flagged=flagged,
        )

    def run_analysis(self, submissions: Any) -> List[SubmissionRecord]:
        return self.analyze(submissions).submissions


def run_analysis(submissions: Any, settings: Optional[AnalysisSettings] = None,
                 rng: Optional[random.Random] = None) -> List[SubmissionRecord]:
    """Score one assignment's submissions; the input objects are left untouched."""
    return AnalysisEngine(settings=settings, rng=rng).run_analysis(submissions)
