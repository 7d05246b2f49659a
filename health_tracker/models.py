"""
Defines the SQLAlchemy ORM models for the database tables.

Each class represents a table and its columns. Every user-owned table carries
a ``user_id`` so that all reads and writes can be scoped to the caller.
"""

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Numeric, Date, DateTime, JSON,
    ForeignKey, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .database_types import EncryptedJSON


class User(Base):
    """Represents the 'users' table in the database."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    # Age, sex, height, weight, allergies... kept encrypted at rest
    health_profile = Column(EncryptedJSON, nullable=True)
    # {"is_complete": bool, "skipped_at": iso-str | None, "last_updated": iso-str | None}
    health_profile_status = Column(JSON, nullable=True)


class LabResult(Base):
    """An uploaded lab report and the state of its AI extraction."""
    __tablename__ = "lab_results"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    file_name = Column(String, nullable=False)
    upload_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    raw_text = Column(Text, nullable=True)
    # processing, completed, error
    status = Column(String, nullable=False, default="processing")

    markers = relationship("HealthMarker", back_populates="lab_result", cascade="all, delete")
    recommendations = relationship("Recommendation", back_populates="lab_result", cascade="all, delete")


class HealthMarker(Base):
    """A single measured value extracted from a lab result."""
    __tablename__ = "health_markers"

    id = Column(Integer, primary_key=True, index=True)
    lab_result_id = Column(Integer, ForeignKey("lab_results.id", ondelete="CASCADE"), index=True)
    name = Column(String, nullable=False)
    value = Column(Numeric(10, 3), nullable=True)
    unit = Column(String, nullable=True)
    normal_min = Column(Numeric(10, 3), nullable=True)
    normal_max = Column(Numeric(10, 3), nullable=True)
    # low, normal, high
    status = Column(String, nullable=False)
    # vitamins, minerals, blood, hormones, lipids, metabolic
    category = Column(String, nullable=False)

    lab_result = relationship("LabResult", back_populates="markers")


class Recommendation(Base):
    """An AI recommendation attached to a lab result."""
    __tablename__ = "recommendations"

    id = Column(Integer, primary_key=True, index=True)
    lab_result_id = Column(Integer, ForeignKey("lab_results.id", ondelete="CASCADE"), index=True)
    # supplement, dietary, physical
    type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    # high, medium, low
    priority = Column(String, nullable=False)
    related_marker = Column(String, nullable=True)
    action_items = Column(JSON, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    lab_result = relationship("LabResult", back_populates="recommendations")


class Medication(Base):
    """Represents the 'medications' table, including pill planner fields."""
    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String, nullable=False)
    dosage = Column(String, nullable=False)
    frequency = Column(String, nullable=False)

    # Legacy scheduling fields
    time_of_day = Column(String, nullable=True)
    with_food = Column(Boolean, default=False, nullable=False)

    # Pill planner fields
    time_block = Column(String, default="morning", nullable=True)
    scheduled_time = Column(String, nullable=True)
    food_rule = Column(String, default="either", nullable=False)
    separation_rules = Column(JSON, default=list, nullable=False)
    allowed_together_with = Column(JSON, default=list, nullable=False)
    user_override = Column(Boolean, default=False, nullable=False)
    stack_id = Column(Integer, nullable=True)

    notes = Column(Text, nullable=True)
    why_taking = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    interactions = relationship("Interaction", back_populates="medication", cascade="all, delete")


class Supplement(Base):
    """Represents the 'supplements' table; mirrors Medication plus reason/source."""
    __tablename__ = "supplements"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String, nullable=False)
    dosage = Column(String, nullable=False)
    frequency = Column(String, nullable=False)

    time_of_day = Column(String, nullable=True)
    with_food = Column(Boolean, default=False, nullable=False)

    time_block = Column(String, default="morning", nullable=True)
    scheduled_time = Column(String, nullable=True)
    food_rule = Column(String, default="either", nullable=False)
    separation_rules = Column(JSON, default=list, nullable=False)
    allowed_together_with = Column(JSON, default=list, nullable=False)
    user_override = Column(Boolean, default=False, nullable=False)
    stack_id = Column(Integer, nullable=True)

    reason = Column(Text, nullable=True)
    why_taking = Column(String, nullable=True)
    # Link to a clinical guideline
    source = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    interactions = relationship("Interaction", back_populates="supplement", cascade="all, delete")


class PillStack(Base):
    """A label grouping pills that are taken together. Not enforced referentially."""
    __tablename__ = "pill_stacks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String, nullable=False)
    time_block = Column(String, nullable=False)
    scheduled_time = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class PillDose(Base):
    """One day's scheduled instance of a medication or supplement."""
    __tablename__ = "pill_doses"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "pill_type", "pill_id", "scheduled_date", "scheduled_time_block",
            name="uq_pill_dose_natural_key",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    # medication, supplement
    pill_type = Column(String, nullable=False)
    pill_id = Column(Integer, nullable=False)
    scheduled_date = Column(Date, index=True, nullable=False)
    scheduled_time_block = Column(String, nullable=False)
    # pending, taken, skipped, snoozed
    status = Column(String, nullable=False, default="pending")
    taken_at = Column(DateTime(timezone=True), nullable=True)
    snoozed_until = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Interaction(Base):
    """A medication/supplement interaction warning produced by the AI check."""
    __tablename__ = "interactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    medication_id = Column(Integer, ForeignKey("medications.id", ondelete="CASCADE"), index=True)
    supplement_id = Column(Integer, ForeignKey("supplements.id", ondelete="CASCADE"), index=True)
    # mild, moderate, severe
    severity = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    recommendation = Column(Text, nullable=False)
    separation_minutes = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    medication = relationship("Medication", back_populates="interactions")
    supplement = relationship("Supplement", back_populates="interactions")


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String, nullable=False)
    time = Column(String, nullable=False)  # HH:MM
    days = Column(JSON, default=list, nullable=False)  # ["monday", "tuesday", ...]
    # medication, supplement, activity
    type = Column(String, nullable=False)
    related_id = Column(Integer, nullable=True)
    enabled = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
