from __future__ import annotations

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text

from .db import Base


class Contact(Base):
    __tablename__ = "contacts"
    __table_args__ = (Index("idx_contacts_type", "type"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, default="")
    phone = Column(String, default="")
    company = Column(String, default="")
    job_title = Column(String, default="")
    address = Column(String, default="")
    notes = Column(Text, default="")
    type = Column(String, default="lead")
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_activity = Column(DateTime(timezone=True))


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, default="")
    phone = Column(String, default="")
    website = Column(String, default="")
    address = Column(String, default="")
    type = Column(String, default="")
    created_at = Column(DateTime(timezone=True), nullable=False)


class Lead(Base):
    __tablename__ = "leads"
    __table_args__ = (Index("idx_leads_status", "status"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    company = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    source = Column(String, default="Website")
    status = Column(String, default="New")
    priority = Column(String, default="Medium")
    assigned_to = Column(String)
    notes = Column(Text, default="")
    created_at = Column(DateTime(timezone=True), nullable=False)


class Deal(Base):
    __tablename__ = "deals"
    __table_args__ = (Index("idx_deals_stage", "stage"),)

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    value = Column(Numeric(14, 2), nullable=False, default=0)
    stage = Column(String, nullable=False, default="Prospecting")
    contact_id = Column(Integer, ForeignKey("contacts.id"), nullable=False)
    expected_close_date = Column(Date)
    probability = Column(Integer, default=0)
    sales_rep = Column(String)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (Index("idx_tasks_status_due", "status", "due_date"),)

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, default="")
    due_date = Column(Date, nullable=False)
    due_at = Column(DateTime(timezone=True))
    status = Column(String, nullable=False, default="to-do")
    contact_id = Column(Integer, ForeignKey("contacts.id"))
    created_at = Column(DateTime(timezone=True), nullable=False)


class Activity(Base):
    __tablename__ = "activities"
    __table_args__ = (Index("idx_activities_timestamp", "timestamp"),)

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String, nullable=False)
    description = Column(Text, default="")
    contact_id = Column(Integer, ForeignKey("contacts.id"))
    deal_id = Column(Integer, ForeignKey("deals.id"))
    timestamp = Column(DateTime(timezone=True), nullable=False)
