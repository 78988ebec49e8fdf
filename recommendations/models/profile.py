from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Float, Boolean, ForeignKey
from sqlalchemy.sql import func

from .base import Base, new_id


class StudentProfile(Base):
    __tablename__ = "student_profiles"

    id = Column(String(36), primary_key=True, default=new_id)
    first_name = Column(String, nullable=False)
    last_name = Column(String)

    # Stored grade ("9th".."12th") is treated as ground truth when graduation_year is missing
    grade = Column(String)
    graduation_year = Column(Integer)

    high_school_name = Column(String)
    high_school_state = Column(String)
    high_school_type = Column(String)
    residency_status = Column(String)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Academics(Base):
    __tablename__ = "student_academics"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"), unique=True, nullable=False)
    gpa_unweighted = Column(Float)
    gpa_weighted = Column(Float)
    class_rank = Column(Integer)
    class_size = Column(Integer)


class SATScore(Base):
    __tablename__ = "sat_scores"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    total = Column(Integer, nullable=False)
    math = Column(Integer)
    reading_writing = Column(Integer)
    is_primary = Column(Boolean, default=False)
    test_date = Column(DateTime)


class ACTScore(Base):
    __tablename__ = "act_scores"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    composite = Column(Integer, nullable=False)
    is_primary = Column(Boolean, default=False)
    test_date = Column(DateTime)


class Activity(Base):
    __tablename__ = "student_activities"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    organization = Column(String, nullable=False, default="")
    description = Column(Text)
    is_leadership = Column(Boolean, default=False)
    is_spike = Column(Boolean, default=False)
    display_order = Column(Integer, default=0)


class Award(Base):
    __tablename__ = "student_awards"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    level = Column(String, nullable=False)  # school/local/state/national/international
    display_order = Column(Integer, default=0)


class AboutMe(Base):
    __tablename__ = "student_about_me"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"), unique=True, nullable=False)
    interests = Column(JSON, default=list)
    values = Column(JSON, default=list)
    aspirations = Column(Text)


class StudentSchool(Base):
    __tablename__ = "student_school_list"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    school_id = Column(String(36), ForeignKey("schools.id", ondelete="SET NULL"))
    tier = Column(String)  # reach/target/safety
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class StudentSummerProgram(Base):
    __tablename__ = "student_summer_program_list"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    summer_program_id = Column(String(36), ForeignKey("summer_programs.id", ondelete="SET NULL"))
    status = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class RecommendationPreferences(Base):
    __tablename__ = "recommendation_preferences"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"), unique=True, nullable=False)

    # Free-text asks per recommendation category
    school_preferences = Column(Text)
    program_preferences = Column(Text)
    general_preferences = Column(Text)

    preferred_regions = Column(JSON, default=list)
    avoid_regions = Column(JSON, default=list)
    preferred_school_size = Column(String)  # small/medium/large/any
    require_need_blind = Column(Boolean, default=False)
    require_merit_scholarships = Column(Boolean, default=False)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
