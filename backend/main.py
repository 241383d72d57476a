from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
import uvicorn
import json
import logging
import threading
from contextlib import contextmanager

import config
from database import engine, Base, get_db
from models import Submission, SimilarityMatrixRecord
from core.analysis import AnalysisEngine
from core.schemas import AnalysisSettings, InvalidSubmissionError

logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(name)s - %(message)s')
logger = logging.getLogger(__name__)

# Create Tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title=config.APP_TITLE, version=config.APP_VERSION)

_analysis_engine = None

# One analysis run per assignment at a time
# assignment id -> [lock, number of requests holding or waiting on it]
_assignment_locks: dict[str, list] = {}
_assignment_locks_guard = threading.Lock()


def get_analysis_engine() -> AnalysisEngine:
    global _analysis_engine
    if _analysis_engine is None:
        logger.info("Creating analysis engine")
        settings = AnalysisSettings(embed_similarity_matrix=not config.STORE_MATRIX_BY_ASSIGNMENT)
        _analysis_engine = AnalysisEngine(settings=settings)
    return _analysis_engine


@contextmanager
def assignment_lock(assignment_id: str):
    with _assignment_locks_guard:
        entry = _assignment_locks.setdefault(assignment_id, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _assignment_locks_guard:
            entry[1] -= 1
            if entry[1] == 0:
                del _assignment_locks[assignment_id]


def serialize_submission(sub: Submission) -> dict:
    return {
        "id": sub.id,
        "assignmentId": sub.assignment_id,
        "userId": sub.user_id,
        "content": sub.content,
        "aiScore": sub.ai_score,
        "plagiarismScore": sub.plagiarism_score,
        "resultJson": sub.result_json,
        "createdAt": sub.created_at,
    }


# CORS Setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
def health_check():
    return {"status": "healthy", "version": config.APP_VERSION}

@app.post("/api/assignments/{assignment_id}/submissions")
async def create_submission_api(assignment_id: str, request: dict, db: Session = Depends(get_db)):
    user_id = request.get("user_id")
    content = request.get("content") or ""

    if user_id is None or str(user_id).strip() == "":
        raise HTTPException(status_code=400, detail="user_id is required")
    if not isinstance(content, str):
        raise HTTPException(status_code=400, detail="content must be text")

    submission = Submission(assignment_id=assignment_id, user_id=str(user_id), content=content)
    db.add(submission)
    db.commit()
    db.refresh(submission)

    return {"success": True, "submission": serialize_submission(submission)}

@app.get("/api/assignments/{assignment_id}/submissions")
async def list_submissions_api(assignment_id: str, db: Session = Depends(get_db)):
    submissions = (
        db.query(Submission)
        .filter(Submission.assignment_id == assignment_id)
        .order_by(Submission.created_at, Submission.id)
        .all()
    )
    return {"success": True, "submissions": [serialize_submission(s) for s in submissions]}

@app.post("/api/assignments/{assignment_id}/analyze")
def analyze_assignment_api(assignment_id: str, db: Session = Depends(get_db)):
    with assignment_lock(assignment_id):
        submissions = (
            db.query(Submission)
            .filter(Submission.assignment_id == assignment_id)
            .order_by(Submission.created_at, Submission.id)
            .all()
        )
        if not submissions:
            return {"success": True, "analyzed": 0, "skipped": 0, "flagged": 0, "submissions": []}

        try:
            report = get_analysis_engine().analyze(submissions, assignment_id=assignment_id)
        except InvalidSubmissionError as e:
            raise HTTPException(status_code=400, detail=str(e))

        # All result fields and the matrix land in one transaction
        try:
            by_id = {s.id: s for s in submissions}
            for record in report.submissions:
                if not record.has_content:
                    continue
                stored = by_id[record.id]
                stored.ai_score = record.ai_score
                stored.plagiarism_score = record.plagiarism_score
                stored.result_json = record.result_json

            db.merge(SimilarityMatrixRecord(
                assignment_id=assignment_id,
                matrix=report.similarity_matrix,
                submission_count=report.analyzed,
            ))
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"Failed to store analysis for assignment {assignment_id}")
            raise

    return {
        "success": True,
        "analyzed": report.analyzed,
        "skipped": report.skipped,
        "flagged": report.flagged,
        "submissions": [serialize_submission(s) for s in submissions],
    }

@app.get("/api/assignments/{assignment_id}/similarity-matrix")
async def get_similarity_matrix_api(assignment_id: str, db: Session = Depends(get_db)):
    record = db.get(SimilarityMatrixRecord, assignment_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Assignment has not been analyzed")

    return {
        "success": True,
        "assignmentId": record.assignment_id,
        "similarityMatrix": record.matrix,
        "submissionCount": record.submission_count,
        "updatedAt": record.updated_at,
    }

@app.get("/api/submissions/{submission_id}")
async def get_submission_api(submission_id: str, db: Session = Depends(get_db)):
    submission = db.get(Submission, submission_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="Submission not found")

    result = json.loads(submission.result_json) if submission.result_json else None
    return {"success": True, "submission": serialize_submission(submission), "result": result}

@app.get("/")
def read_root():
    return {"message": "Submission Integrity API is running", "version": config.APP_VERSION}

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
