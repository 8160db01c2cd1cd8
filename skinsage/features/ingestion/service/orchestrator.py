# File: skinsage/features/ingestion/service/orchestrator.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional
from uuid import UUID

from skinsage.core.config.settings import settings
from skinsage.core.common import flags as qf
from skinsage.core.common.angles import compute_missing_angles
from skinsage.core.common.enums import REQUIRED_ANGLES
from skinsage.core.common.exceptions import ScanNotFoundError, ObjectNotFoundError
from skinsage.core.common.flags import QualityFlagSet
from skinsage.features.integrity.service.verifier import ChecksumVerifier
from skinsage.features.media_storage.domain.interfaces import IObjectStorage
from skinsage.features.quality.service.analyzer import QualityAnalyzer
from skinsage.features.scans.data.repository import SqlScanRepo
from skinsage.features.scans.domain.interfaces import IScanRepository
from skinsage.features.scans.domain.models import Scan, ScanImage, ImageAnalysisRecord
from ..domain.models import ImageOutcome
from .status import resolve_status

logger = logging.getLogger(__name__)


class IngestionOrchestrator:
    """
    Runs one ingestion pass over a scan:
    fetch -> checksum -> quality score for every recorded angle,
    then rebuilds the flag set, missing angles and status in one write.

    Per-image problems become flags; they never abort the pass.
    """

    def __init__(self,
                 storage: IObjectStorage,
                 repo: Optional[IScanRepository] = None,
                 analyzer: Optional[QualityAnalyzer] = None,
                 verifier: Optional[ChecksumVerifier] = None,
                 max_workers: Optional[int] = None):
        self.storage = storage
        self.repo = repo or SqlScanRepo()
        self.analyzer = analyzer or QualityAnalyzer()
        self.verifier = verifier or ChecksumVerifier()
        workers = settings.INGEST_MAX_WORKERS if max_workers is None else max_workers
        self.max_workers = max(1, min(workers, len(REQUIRED_ANGLES)))

    def ingest(self, scan_id: UUID) -> Scan:
        scan = self.repo.get_scan(scan_id)
        if not scan:
            raise ScanNotFoundError(scan_id)

        logger.info(f"Ingesting scan {scan.id} ({len(scan.images)} recorded images)")

        images = sorted(scan.images, key=self._angle_order)
        outcomes = self._evaluate_all(images)

        # Flags are rebuilt from scratch on every pass.
        flags = QualityFlagSet()
        for outcome in outcomes:
            flags.update(outcome.flags)
            if outcome.analysis is not None:
                try:
                    self._persist_analysis(outcome)
                except Exception:
                    logger.exception(f"Failed to store analysis for {outcome.angle.value} on scan {scan.id}")
                    flags.add_for(qf.PROCESSING_ERROR, outcome.angle)

        # Missing angles come from the images we loaded, not a re-fetch.
        missing = compute_missing_angles(image.angle for image in scan.images)
        for angle in missing:
            flags.add_for(qf.MISSING_ANGLE, angle)

        status = resolve_status(flags, missing)
        updated = self.repo.finalize_ingestion(scan.id, flags.to_list(), missing, status)

        logger.info(f"Scan {scan.id} ingested: status={status.value}, flags={flags.to_list()}")
        return updated

    def _evaluate_all(self, images: List[ScanImage]) -> List[ImageOutcome]:
        if self.max_workers == 1 or len(images) <= 1:
            return [self.evaluate_image(image) for image in images]

        # Angles share no data; fetch + analysis may overlap. map() keeps order.
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(images))) as pool:
            return list(pool.map(self.evaluate_image, images))

    def evaluate_image(self, image: ScanImage) -> ImageOutcome:
        """
        Fetch, verify and score a single image.
        Never raises: every failure is recorded as a flag on the outcome.
        """
        outcome = ImageOutcome(angle=image.angle, image_id=image.id)

        if not image.storage_key:
            outcome.flags.append(qf.angle_flag(qf.MISSING_STORAGE, image.angle))
            return outcome

        try:
            try:
                data = self.storage.fetch_object(image.storage_key)
            except ObjectNotFoundError:
                logger.warning(f"No object at {image.storage_key} for angle {image.angle.value}")
                outcome.flags.append(qf.angle_flag(qf.MISSING_OBJECT, image.angle))
                return outcome

            if self.verifier.is_mismatch(data, image.checksum):
                logger.warning(f"Checksum mismatch for {image.storage_key}")
                outcome.flags.append(qf.angle_flag(qf.CHECKSUM_MISMATCH, image.angle))

            analysis = self.analyzer.analyze(data)
            if self.analyzer.is_blurry(analysis):
                outcome.flags.append(qf.angle_flag(qf.BLUR, image.angle))
            if self.analyzer.is_underlit(analysis):
                outcome.flags.append(qf.angle_flag(qf.LOW_LIGHT, image.angle))
            if not analysis.pose_ok:
                outcome.flags.append(qf.angle_flag(qf.POSE, image.angle))

            outcome.analysis = analysis
        except Exception:
            logger.exception(f"Processing failed for {image.storage_key} ({image.angle.value})")
            outcome.flags.append(qf.angle_flag(qf.PROCESSING_ERROR, image.angle))

        return outcome

    def _persist_analysis(self, outcome: ImageOutcome) -> None:
        analysis = outcome.analysis
        self.repo.save_image_analysis(outcome.image_id, ImageAnalysisRecord(
            blur_score=analysis.blur_score,
            light_score=analysis.light_score,
            pose_ok=analysis.pose_ok,
            landmarks=analysis.landmarks.to_dict()
        ))

    @staticmethod
    def _angle_order(image: ScanImage) -> int:
        return REQUIRED_ANGLES.index(image.angle)
