from sqlalchemy import Column, Integer, String, Text, Date, DateTime, JSON, Float, Boolean

from .base import Base, new_id


class School(Base):
    __tablename__ = "schools"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)
    city = Column(String)
    state = Column(String)
    type = Column(String)  # public/private
    acceptance_rate = Column(Float)
    sat_range_25 = Column(Integer)
    sat_range_75 = Column(Integer)
    act_range_25 = Column(Integer)
    act_range_75 = Column(Integer)
    undergrad_enrollment = Column(Integer)
    notes = Column(Text)
    last_reviewed_at = Column(DateTime)


class SummerProgram(Base):
    __tablename__ = "summer_programs"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    organization = Column(String, nullable=False)
    category = Column(String)
    focus_areas = Column(JSON, default=list)

    # Inclusive grade window; NULL means unbounded on that side
    min_grade = Column(Integer)
    max_grade = Column(Integer)

    program_year = Column(Integer, index=True)
    application_deadline = Column(Date)
    is_active = Column(Boolean, default=True)

    # Free-text context written for prompts
    llm_context = Column(Text)
    website_url = Column(String)
