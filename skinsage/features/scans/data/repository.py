# File: skinsage/features/scans/data/repository.py
import logging
from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from skinsage.core.database.connection import SessionLocal
from skinsage.core.common.enums import ScanAngle, ScanStatus
from skinsage.core.common.angles import compute_missing_angles
from skinsage.core.common.exceptions import ScanNotFoundError
from .sql_models import ScanModel, ScanImageModel
from ..domain.interfaces import IScanRepository
from ..domain.models import Scan, ScanImage, AngleDeclaration, ImageAnalysisRecord

logger = logging.getLogger(__name__)


def _to_image(row: ScanImageModel) -> ScanImage:
    return ScanImage(
        id=row.id,
        scan_id=row.scan_id,
        angle=row.angle,
        storage_key=row.storage_key,
        url=row.url,
        checksum=row.checksum,
        blur_score=row.blur_score,
        light_score=row.light_score,
        pose_ok=row.pose_ok,
        landmarks=row.landmarks
    )

def _to_scan(row: ScanModel) -> Scan:
    return Scan(
        id=row.id,
        patient_id=row.patient_id,
        captured_at=row.captured_at,
        status=row.status,
        quality_flags=list(row.quality_flags or []),
        missing_angles=[ScanAngle(a) for a in (row.missing_angles or [])],
        images=[_to_image(img) for img in row.images],
        ingest_job_id=row.ingest_job_id
    )


class SqlScanRepo(IScanRepository):
    """
    SQLAlchemy implementation. Works against Postgres in production
    and SQLite in test mode.
    """

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def get_scan(self, scan_id: UUID) -> Optional[Scan]:
        with self.session_factory() as db:
            row = (
                db.query(ScanModel)
                .options(selectinload(ScanModel.images))
                .filter(ScanModel.id == scan_id)
                .first()
            )
            return _to_scan(row) if row else None

    def create_scan(self,
                    patient_id: str,
                    captured_at: Optional[datetime],
                    angles: Sequence[AngleDeclaration]) -> Scan:
        # Later declarations of the same angle win (one row per angle).
        by_angle = {decl.angle: decl for decl in angles}

        with self.session_factory() as db:
            try:
                scan = ScanModel(
                    patient_id=patient_id,
                    status=ScanStatus.PENDING,
                    quality_flags=[],
                    missing_angles=[a.value for a in compute_missing_angles(by_angle)]
                )
                if captured_at is not None:
                    scan.captured_at = captured_at
                db.add(scan)
                db.flush()  # Flush to generate ID

                for decl in by_angle.values():
                    db.add(ScanImageModel(scan_id=scan.id, angle=decl.angle, checksum=decl.checksum))

                db.commit()
                db.refresh(scan)
                return _to_scan(scan)
            except Exception as e:
                db.rollback()
                raise e

    def list_scans(self, patient_id: Optional[str] = None) -> List[Scan]:
        with self.session_factory() as db:
            query = db.query(ScanModel).options(selectinload(ScanModel.images))
            if patient_id:
                query = query.filter(ScanModel.patient_id == patient_id)
            rows = query.order_by(ScanModel.captured_at.desc()).all()
            return [_to_scan(row) for row in rows]

    def upsert_image(self,
                     scan_id: UUID,
                     angle: ScanAngle,
                     storage_key: str,
                     url: str,
                     checksum: Optional[str]) -> ScanImage:
        with self.session_factory() as db:
            try:
                return self._upsert_in_session(db, scan_id, angle, storage_key, url, checksum)
            except IntegrityError:
                # A concurrent caller inserted the same (scan, angle) first.
                # Retry once; this time the row exists and we update it.
                db.rollback()
                logger.warning(f"Upsert race on scan {scan_id} angle {angle.value}, retrying as update")
                return self._upsert_in_session(db, scan_id, angle, storage_key, url, checksum)

    @staticmethod
    def _upsert_in_session(db, scan_id, angle, storage_key, url, checksum) -> ScanImage:
        row = db.query(ScanImageModel).filter(
            ScanImageModel.scan_id == scan_id,
            ScanImageModel.angle == angle
        ).first()

        if row:
            row.storage_key = storage_key
            row.url = url
            # A re-issue without a checksum keeps the one declared earlier.
            if checksum is not None:
                row.checksum = checksum
        else:
            row = ScanImageModel(
                scan_id=scan_id,
                angle=angle,
                storage_key=storage_key,
                url=url,
                checksum=checksum
            )
            db.add(row)

        db.commit()
        db.refresh(row)
        return _to_image(row)

    def list_image_angles(self, scan_id: UUID) -> List[ScanAngle]:
        with self.session_factory() as db:
            rows = db.query(ScanImageModel.angle).filter(ScanImageModel.scan_id == scan_id).all()
            return [r[0] for r in rows]

    def update_missing_angles(self, scan_id: UUID, missing_angles: Sequence[ScanAngle]) -> None:
        with self.session_factory() as db:
            scan = db.get(ScanModel, scan_id)
            if not scan:
                raise ScanNotFoundError(scan_id)
            scan.missing_angles = [a.value for a in missing_angles]
            db.commit()

    def save_image_analysis(self, image_id: UUID, analysis: ImageAnalysisRecord) -> None:
        with self.session_factory() as db:
            try:
                row = db.get(ScanImageModel, image_id)
                if not row:
                    raise LookupError(f"Scan image {image_id} not found.")
                row.blur_score = analysis.blur_score
                row.light_score = analysis.light_score
                row.pose_ok = analysis.pose_ok
                row.landmarks = analysis.landmarks
                db.commit()
            except Exception as e:
                db.rollback()
                raise e

    def finalize_ingestion(self,
                           scan_id: UUID,
                           quality_flags: Sequence[str],
                           missing_angles: Sequence[ScanAngle],
                           status: ScanStatus) -> Scan:
        with self.session_factory() as db:
            try:
                scan = db.get(ScanModel, scan_id)
                if not scan:
                    raise ScanNotFoundError(scan_id)
                scan.quality_flags = list(quality_flags)
                scan.missing_angles = [a.value for a in missing_angles]
                scan.status = status
                db.commit()
                db.refresh(scan)
                return _to_scan(scan)
            except Exception as e:
                db.rollback()
                raise e

    def set_ingest_job(self, scan_id: UUID, job_id: UUID) -> None:
        with self.session_factory() as db:
            scan = db.get(ScanModel, scan_id)
            if not scan:
                raise ScanNotFoundError(scan_id)
            scan.ingest_job_id = job_id
            db.commit()
