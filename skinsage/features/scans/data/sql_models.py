# File: skinsage/features/scans/data/sql_models.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Float, Boolean, DateTime, ForeignKey, JSON, Uuid, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from skinsage.core.database.base import Base
from skinsage.core.common.enums import ScanAngle, ScanStatus

def utc_now():
    return datetime.now(timezone.utc)

class ScanModel(Base):
    """One capture session for a patient."""
    __tablename__ = "scans"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    patient_id = Column(String, nullable=False, index=True)
    captured_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    status = Column(SQLEnum(ScanStatus), default=ScanStatus.PENDING, nullable=False)

    # Stored as JSON lists of strings; rebuilt in full by every ingestion pass.
    quality_flags = Column(JSON, default=list)
    missing_angles = Column(JSON, default=list)

    ingest_job_id = Column(Uuid(as_uuid=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    images = relationship(
        "ScanImageModel",
        back_populates="scan",
        cascade="all, delete-orphan",
        order_by="ScanImageModel.created_at"
    )

class ScanImageModel(Base):
    """One angle's photograph. At most one row per (scan, angle)."""
    __tablename__ = "scan_images"
    __table_args__ = (
        UniqueConstraint("scan_id", "angle", name="uq_scan_images_scan_angle"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    scan_id = Column(Uuid(as_uuid=True), ForeignKey("scans.id"), nullable=False, index=True)
    angle = Column(SQLEnum(ScanAngle), nullable=False)

    storage_key = Column(String, nullable=True)
    url = Column(String, nullable=True)
    checksum = Column(String, nullable=True)

    # Filled in by ingestion
    blur_score = Column(Float, nullable=True)
    light_score = Column(Float, nullable=True)
    pose_ok = Column(Boolean, nullable=True)
    landmarks = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    scan = relationship("ScanModel", back_populates="images")
