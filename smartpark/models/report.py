# smartpark/models/report.py
"""
Daily and monthly activity reports.
One row per (report_type, period_key); regeneration overwrites the data block
in place. The signature block is only written by signing.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from smartpark.database import Base

REPORT_TYPES = ("daily", "monthly")
REPORT_STATUSES = ("draft", "generated", "signed", "archived")


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    report_type = Column(String(20), nullable=False)            # daily | monthly
    period_key = Column(String(10), nullable=False)             # YYYY-MM-DD | YYYY-MM
    report_date = Column(DateTime, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    generated_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    data = Column(JSON, nullable=False, default=dict)
    signature = Column(JSON)                                    # NULL until signed
    status = Column(String(20), default="generated", nullable=False, index=True)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    generated_by = relationship("User", lazy="joined")

    __table_args__ = (
        UniqueConstraint("report_type", "period_key", name="uq_report_period"),
        Index("idx_report_type_date", "report_type", "report_date"),
    )

    def __repr__(self):
        return f"<Report {self.id} {self.report_type} {self.period_key} status={self.status}>"
