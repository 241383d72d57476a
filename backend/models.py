import uuid

from sqlalchemy import Column, Integer, String, DateTime, JSON, Text
from sqlalchemy.sql import func

from database import Base


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    assignment_id = Column(String, index=True, nullable=False)
    user_id = Column(String, index=True, nullable=False)
    content = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Analysis Results (unset until the assignment is analyzed)
    ai_score = Column(Integer, nullable=True)
    plagiarism_score = Column(Integer, nullable=True)
    result_json = Column(Text, nullable=True)


class SimilarityMatrixRecord(Base):
    """One pairwise matrix per assignment, shared by all of its submissions."""
    __tablename__ = "similarity_matrices"

    assignment_id = Column(String, primary_key=True, index=True)
    matrix = Column(JSON, nullable=False, default=dict)
    submission_count = Column(Integer, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
