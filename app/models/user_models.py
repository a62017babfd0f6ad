"""User Models Module

This module defines SQLAlchemy models for the interview practice application: the
user record carrying the credit balance, the profile carrying the experience
counter, interview definitions, and the feedback generated for completed sessions.

Users and profiles are keyed by the Firebase UID so the credit gate can read and
update both rows with nothing more than the caller's identifier.

Dependencies:
- sqlalchemy: For ORM functionality and database modeling.
- uuid: For UUID generation for primary keys.
- datetime: For timestamp handling.
- typing: For type annotations and optional fields.

Author: @kcaparas1630
"""

import uuid
from typing import List, Optional
from sqlalchemy import ForeignKey, String, Text, DateTime, Boolean, func, JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from datetime import datetime


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Provides the foundation for all database models in the application.
    """
    pass

class User(Base):
    """Core user entity that owns the credit balance.

    Attributes:
        id (str): Primary key, the Firebase user identifier
        name (str, optional): Display name passed to the voice agent
        email (str, optional): User's email address
        credits (int, optional): Consumable session credits; NULL means never provisioned
        profile (Profile): One-to-one relationship with the experience profile
        interviews (List[Interview]): One-to-many relationship with interviews
        created_at (datetime): Timestamp when user was created
        updated_at (datetime): Timestamp when user was last updated
    """
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(100), unique=True, nullable=True)
    credits: Mapped[Optional[int]] = mapped_column(nullable=True, default=0)
    profile: Mapped["Profile"] = relationship("Profile", back_populates="user", cascade="all", uselist=False)
    interviews: Mapped[List["Interview"]] = relationship("Interview", back_populates="user", cascade="all")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"User(id={self.id}, credits={self.credits})"

class Profile(Base):
    """Gamification profile holding the experience counter.

    Shares its primary key with the owning user.

    Attributes:
        id (str): Primary key and foreign key to User table
        experience (int): Experience points earned by starting sessions
        user (User): One-to-one relationship with User
    """
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(ForeignKey("users.id"), primary_key=True)
    experience: Mapped[int] = mapped_column(default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())
    # Establish one-to-one relationship with User
    user: Mapped["User"] = relationship("User", back_populates="profile")

    def __repr__(self):
        return f"Profile(id={self.id}, experience={self.experience})"

class Interview(Base):
    """Interview definition a voice session is run against.

    Attributes:
        id (str): Primary key, UUID string
        user_id (str): Foreign key to User table
        role (str): Target job role
        level (str): Target seniority
        interview_type (str): Type/category of interview (technical, behavioral, mixed)
        techstack (List[str]): Technologies the interview covers
        questions (List[str]): Questions the interviewer assistant asks
        finalized (bool): Whether the interview is ready to be taken
        created_at (datetime): Timestamp when record was created
        user (User): Many-to-one relationship with User
        feedback (List[Feedback]): Feedback records generated for this interview
    """
    __tablename__ = "interviews"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"))
    role: Mapped[str] = mapped_column(String(100))
    level: Mapped[str] = mapped_column(String(50))
    interview_type: Mapped[str] = mapped_column(String(50))
    techstack: Mapped[List[str]] = mapped_column(JSON, default=list)
    questions: Mapped[List[str]] = mapped_column(JSON, default=list)
    finalized: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    # Establish many-to-one relationship with User
    user: Mapped["User"] = relationship("User", back_populates="interviews")
    feedback: Mapped[List["Feedback"]] = relationship("Feedback", back_populates="interview", cascade="all")

    def __repr__(self):
        return f"Interview(id={self.id}, role={self.role}, type={self.interview_type})"

class Feedback(Base):
    """Evaluation of a completed interview session's transcript.

    Attributes:
        id (str): Primary key, UUID string
        interview_id (str): Foreign key to Interview table
        user_id (str): Foreign key to User table
        total_score (int): Overall score between 0 and 100
        category_scores (List[dict]): Per-category {name, score, comment} entries
        strengths (List[str]): Identified strengths
        areas_for_improvement (List[str]): Suggested improvement areas
        final_assessment (str): Closing summary
        created_at (datetime): Timestamp when the feedback was generated
    """
    __tablename__ = "feedback"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    interview_id: Mapped[str] = mapped_column(ForeignKey("interviews.id"))
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"))
    total_score: Mapped[int] = mapped_column()
    category_scores: Mapped[List[dict]] = mapped_column(JSON, default=list)
    strengths: Mapped[List[str]] = mapped_column(JSON, default=list)
    areas_for_improvement: Mapped[List[str]] = mapped_column(JSON, default=list)
    final_assessment: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    interview: Mapped["Interview"] = relationship("Interview", back_populates="feedback")

    def __repr__(self):
        return f"Feedback(id={self.id}, interview_id={self.interview_id}, total_score={self.total_score})"
