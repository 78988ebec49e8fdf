from sqlalchemy import Column, Integer, String, Text, Date, DateTime, JSON, Float, ForeignKey
from sqlalchemy.sql import func

from .base import Base, new_id


class Recommendation(Base):
    __tablename__ = "recommendations"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True)

    # Content
    category = Column(String, nullable=False)  # school/program/activity/general
    title = Column(String, nullable=False)
    subtitle = Column(String)
    reasoning = Column(Text, nullable=False)
    fit_score = Column(Float)
    priority = Column(String)  # high/medium/low
    action_items = Column(JSON, default=list)
    relevant_grade = Column(String)
    expires_at = Column(Date)

    # Catalog links, set only when the agent output resolved to a row
    school_id = Column(String(36), ForeignKey("schools.id", ondelete="SET NULL"))
    summer_program_id = Column(String(36), ForeignKey("summer_programs.id", ondelete="SET NULL"))

    # Lifecycle: active -> dismissed/saved/acted_upon
    status = Column(String, nullable=False, default="active", index=True)
    user_feedback = Column(Text)
    dismissed_at = Column(DateTime(timezone=True))
    saved_at = Column(DateTime(timezone=True))

    # Batch metadata
    generated_by = Column(String, default="recommendation_engine")
    profile_version = Column(String)
    display_order = Column(Integer, default=0)
    generated_at = Column(DateTime(timezone=True), server_default=func.now())
