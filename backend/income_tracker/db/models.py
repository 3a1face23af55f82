# income_tracker/db/models.py: User, SecurityQuestion, Entity, Income
import enum
import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from .base import Base


def new_id() -> str:
    return uuid.uuid4().hex


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class EntityType(str, enum.Enum):
    MAIN = "MAIN"
    SUB = "SUB"
    EMPLOYEE = "EMPLOYEE"


class IncomeType(str, enum.Enum):
    SUBSCRIPTION = "SUBSCRIPTION"
    LEGAL_FEES = "LEGAL_FEES"
    PENALTIES = "PENALTIES"
    AUTOMATION = "AUTOMATION"
    OTHER = "OTHER"


class User(Base):
    __tablename__ = "users"
    id = Column(String(32), primary_key=True, default=new_id)
    username = Column(String(20), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(32), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    password = Column(String(255), nullable=False)
    role = Column(Enum(Role), nullable=False, default=Role.USER)
    is_active = Column(Boolean, nullable=False, default=True)
    is_approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # children are removed explicitly (see crud.delete_user); the ORM must not
    # try to blank out their foreign keys
    security_question = relationship(
        "SecurityQuestion", back_populates="user", uselist=False, passive_deletes="all"
    )
    incomes = relationship("Income", back_populates="user", passive_deletes="all")


class SecurityQuestion(Base):
    __tablename__ = "security_questions"
    id = Column(String(32), primary_key=True, default=new_id)
    question = Column(String(500), nullable=False)
    # hashed like the password
    answer_hash = Column(String(255), nullable=False)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, unique=True)

    user = relationship("User", back_populates="security_question")


class Entity(Base):
    __tablename__ = "entities"
    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, index=True)
    province = Column(String(255), nullable=False, index=True)
    main_entity_id = Column(String(32), ForeignKey("entities.id"), nullable=True, index=True)
    type = Column(Enum(EntityType), nullable=False, default=EntityType.MAIN)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    main_entity = relationship("Entity", remote_side=[id], back_populates="sub_entities")
    sub_entities = relationship("Entity", back_populates="main_entity", order_by="Entity.name")
    incomes = relationship("Income", back_populates="entity", passive_deletes="all")


class Income(Base):
    __tablename__ = "incomes"
    id = Column(String(32), primary_key=True, default=new_id)
    amount = Column(Numeric(14, 2), nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    entity_id = Column(String(32), ForeignKey("entities.id"), nullable=False, index=True)
    # month/year are set independently of due_date
    month = Column(Integer, nullable=False, index=True)
    year = Column(Integer, nullable=False, index=True)
    type = Column(Enum(IncomeType), nullable=False)
    description = Column(Text, nullable=True)
    gp_number = Column(String(100), nullable=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    entity = relationship("Entity", back_populates="incomes")
    user = relationship("User", back_populates="incomes")
