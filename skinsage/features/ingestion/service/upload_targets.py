# File: skinsage/features/ingestion/service/upload_targets.py
import logging
from dataclasses import replace
from typing import Iterable, List, Mapping, Optional, Union
from uuid import UUID

from skinsage.core.config.settings import settings
from skinsage.core.common.angles import parse_angle, compute_missing_angles
from skinsage.core.common.enums import ScanAngle
from skinsage.core.common.exceptions import ScanNotFoundError
from skinsage.features.media_storage.domain.interfaces import IObjectStorage
from skinsage.features.scans.data.repository import SqlScanRepo
from skinsage.features.scans.domain.interfaces import IScanRepository
from ..domain.models import UploadRequestItem, IssuedUpload

logger = logging.getLogger(__name__)

ItemInput = Union[UploadRequestItem, Mapping[str, Optional[str]]]


def extension_for_content_type(content_type: str) -> str:
    """
    Loose substring match, not a MIME parser.
    'image/png' -> png, 'image/webp' -> webp, anything else -> jpg.
    """
    content_type = (content_type or "").lower()
    if "png" in content_type:
        return "png"
    if "webp" in content_type:
        return "webp"
    return "jpg"


def storage_key_for(scan_id: UUID, patient_id: str, angle: ScanAngle, extension: str) -> str:
    """scans/<patient>/<scan>/<angle>.<ext>"""
    return f"scans/{patient_id}/{scan_id}/{angle.value}.{extension}"


class UploadTargetIssuer:
    """
    Hands out direct-to-storage write targets for scan angles and records
    the per-angle metadata. No quality scoring happens here.
    """

    def __init__(self,
                 storage: IObjectStorage,
                 repo: Optional[IScanRepository] = None,
                 ttl_seconds: int = settings.UPLOAD_URL_TTL_SECONDS):
        self.storage = storage
        self.repo = repo or SqlScanRepo()
        self.ttl_seconds = ttl_seconds

    def issue(self, scan_id: UUID, items: Iterable[ItemInput]) -> List[IssuedUpload]:
        scan = self.repo.get_scan(scan_id)
        if not scan:
            raise ScanNotFoundError(scan_id)

        # Validate the whole request before touching storage.
        requests = [self._to_item(item) for item in items]

        results: List[IssuedUpload] = []
        for req in requests:
            extension = extension_for_content_type(req.content_type)
            storage_key = storage_key_for(scan.id, scan.patient_id, req.angle, extension)

            target = self.storage.issue_write_target(storage_key, req.content_type, self.ttl_seconds)
            display_url = self.storage.public_url(storage_key)

            self.repo.upsert_image(
                scan_id=scan.id,
                angle=req.angle,
                storage_key=storage_key,
                url=display_url,
                checksum=req.checksum
            )

            results.append(IssuedUpload(
                angle=req.angle,
                upload_target=target,
                storage_key=storage_key,
                display_url=display_url
            ))

        # Recompute over every image row of the scan, not just this request.
        missing = compute_missing_angles(self.repo.list_image_angles(scan.id))
        self.repo.update_missing_angles(scan.id, missing)

        logger.info(f"Issued {len(results)} upload targets for scan {scan.id}; "
                    f"missing angles: {[a.value for a in missing]}")
        return results

    @staticmethod
    def _to_item(item: ItemInput) -> UploadRequestItem:
        if isinstance(item, UploadRequestItem):
            return replace(item, angle=parse_angle(item.angle))
        content_type = item.get("content_type", item.get("contentType")) or ""
        return UploadRequestItem(
            angle=parse_angle(item["angle"]),
            content_type=content_type,
            checksum=item.get("checksum")
        )
