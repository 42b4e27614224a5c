"""SQLAlchemy ORM models for the dietitian practice.

A User is a dietitian. Clients belong to a user; measurements, diet plans
and appointments hang off a client. Activities form the per-user feed and
blog articles are shared, read-only content. List-valued fields are stored
as JSON-encoded text.
"""

from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime, timezone

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp; every stored datetime uses this convention."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """A dietitian account."""

    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    bio = Column(Text, nullable=True)
    phone = Column(String, nullable=True)
    profile_picture = Column(String, nullable=True)
    telegram_token = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    clients = relationship("Client", back_populates="user", cascade="all, delete-orphan")


class Client(Base):
    """A person followed by a dietitian."""

    __tablename__ = "clients"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    birth_date = Column(Date, nullable=True)
    gender = Column(String, nullable=True)
    height = Column(Float, nullable=True)
    starting_weight = Column(Float, nullable=True)
    target_weight = Column(Float, nullable=True)
    activity_level = Column(String, nullable=True)
    medical_history = Column(Text, nullable=True)
    dietary_restrictions = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    profile_picture = Column(String, nullable=True)
    status = Column(String, nullable=False, default="active")
    telegram_chat_id = Column(String, nullable=True)
    reference_code = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow)

    user = relationship("User", back_populates="clients")
    measurements = relationship("Measurement", back_populates="client", cascade="all, delete-orphan")
    diet_plans = relationship("DietPlan", back_populates="client", cascade="all, delete-orphan")
    appointments = relationship("Appointment", back_populates="client", cascade="all, delete-orphan")


class Measurement(Base):
    """Body measurements of a client on a given date (lengths in cm)."""

    __tablename__ = "measurements"
    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    date = Column(DateTime, nullable=False, default=utcnow)
    weight = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    neck = Column(Float, nullable=True)
    arm = Column(Float, nullable=True)
    chest = Column(Float, nullable=True)
    waist = Column(Float, nullable=True)
    abdomen = Column(Float, nullable=True)
    hip = Column(Float, nullable=True)
    thigh = Column(Float, nullable=True)
    calf = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    images = Column(Text, nullable=True)
    body_fat_percentage = Column(Float, nullable=True)

    client = relationship("Client", back_populates="measurements")


class DietPlan(Base):
    """A diet plan written for a client.

    `meals` is the only place structured meals live; `content` is free text.
    """

    __tablename__ = "diet_plans"
    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=False, default="")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    status = Column(String, nullable=False, default="active")
    daily_calories = Column(Float, nullable=False, default=0)
    macro_protein = Column(Float, nullable=False, default=0)
    macro_carbs = Column(Float, nullable=False, default=0)
    macro_fat = Column(Float, nullable=False, default=0)
    meals = Column(Text, nullable=True)
    attachments = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    client = relationship("Client", back_populates="diet_plans")


class Appointment(Base):
    """A scheduled meeting between a dietitian and a client."""

    __tablename__ = "appointments"
    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(DateTime, nullable=False)
    duration = Column(Integer, nullable=False)
    type = Column(String, nullable=False, default="in-person")
    status = Column(String, nullable=False, default="scheduled")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    client = relationship("Client", back_populates="appointments")


class Activity(Base):
    """Append-only feed entry shown on the dashboard."""

    __tablename__ = "activities"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)


class BlogArticle(Base):
    """Public nutrition article."""

    __tablename__ = "blog_articles"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, unique=True)
    summary = Column(Text, nullable=False)
    content = Column(Text, nullable=True)
    author = Column(String, nullable=False)
    category = Column(String, nullable=True)
    published_at = Column(DateTime, nullable=False, default=utcnow)
    read_time = Column(Integer, nullable=False, default=5)
    image_url = Column(String, nullable=True)
