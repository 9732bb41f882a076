"""
Receipt storage backed by the Supabase Storage REST API.

    upload(receipt, owner_id)
        ├── rejects oversize files and disallowed MIME types (never retried)
        ├── POST /storage/v1/object/{bucket}/receipts/{owner}-{ts}.{ext}
        │     each attempt bounded by RECEIPT_UPLOAD_TIMEOUT_SECONDS
        ├── transport errors / 5xx  → retried with increasing backoff
        ├── 409 duplicate object    → object renamed, then next attempt
        └── returns the object's public URL

The caller chooses whether a failed upload is fatal. Booking creation is not
(the customer can attach the receipt later); replacing a receipt is.
"""

import logging
import mimetypes
import time
import uuid
from dataclasses import dataclass
from typing import Optional

import requests

from seatbook.core.config import Settings, settings as default_settings
from seatbook.core.exceptions import UploadError
from seatbook.services.side_effects import RetryPolicy, SideEffectResult

logger = logging.getLogger(__name__)


@dataclass
class ReceiptFile:
    data: bytes
    content_type: str
    filename: str = "receipt"


class TransientUploadError(UploadError):
    """Network failure or server-side error; worth another attempt."""


class DuplicateObjectError(UploadError):
    """The object name is taken; retried only under a new name."""


class ReceiptStorage:
    def __init__(self, settings: Settings = default_settings, session: Optional[requests.Session] = None, sleep=time.sleep):
        self.settings = settings
        self.session = session or requests.Session()
        self.sleep = sleep

    @property
    def configured(self) -> bool:
        return bool(self.settings.SUPABASE_URL and self.settings.SUPABASE_SERVICE_ROLE_KEY)

    def validate(self, receipt: ReceiptFile) -> None:
        if not receipt.data:
            raise UploadError("Receipt file is empty.")
        if len(receipt.data) > self.settings.RECEIPT_MAX_BYTES:
            limit_mb = self.settings.RECEIPT_MAX_BYTES // (1024 * 1024)
            raise UploadError(f"Receipt file is too large. Maximum size is {limit_mb}MB.")
        if receipt.content_type not in self.settings.RECEIPT_ALLOWED_TYPES:
            raise UploadError("Receipt file type not supported. Please use JPG, PNG, GIF, or PDF.")

    def upload(self, receipt: ReceiptFile, owner_id, fatal: bool = True) -> SideEffectResult:
        """Upload `receipt`; the result's value is the public URL."""
        policy = RetryPolicy(
            max_attempts=self.settings.RECEIPT_UPLOAD_MAX_ATTEMPTS,
            backoff_seconds=self.settings.RECEIPT_UPLOAD_BACKOFF_SECONDS,
            fatal=fatal,
            retry_on=(TransientUploadError, DuplicateObjectError),
            sleep=self.sleep,
        )
        state = {"path": self._object_path(receipt, owner_id)}

        def attempt():
            self.validate(receipt)
            if not self.configured:
                raise UploadError("Receipt storage is not configured.")
            try:
                return self._put(state["path"], receipt)
            except DuplicateObjectError:
                state["path"] = self._object_path(receipt, owner_id, suffix=uuid.uuid4().hex[:6])
                raise

        try:
            return policy.run("receipt upload", attempt)
        except TransientUploadError as exc:
            raise UploadError(
                f"Receipt upload failed after {policy.max_attempts} attempts. Please try again."
            ) from exc

    def _object_path(self, receipt: ReceiptFile, owner_id, suffix: Optional[str] = None) -> str:
        ext = receipt.filename.rsplit(".", 1)[-1].lower() if "." in receipt.filename else None
        if not ext:
            ext = (mimetypes.guess_extension(receipt.content_type) or ".bin").lstrip(".")
        stamp = int(time.time() * 1000)
        name = f"{owner_id}-{stamp}" if not suffix else f"{owner_id}-{stamp}-{suffix}"
        return f"receipts/{name}.{ext}"

    def _put(self, path: str, receipt: ReceiptFile) -> str:
        base = self.settings.SUPABASE_URL.rstrip("/")
        bucket = self.settings.STORAGE_BUCKET
        key = self.settings.SUPABASE_SERVICE_ROLE_KEY
        try:
            response = self.session.post(
                f"{base}/storage/v1/object/{bucket}/{path}",
                data=receipt.data,
                headers={
                    "Authorization": f"Bearer {key}",
                    "apikey": key,
                    "Content-Type": receipt.content_type,
                    "x-upsert": "false",
                },
                timeout=self.settings.RECEIPT_UPLOAD_TIMEOUT_SECONDS,
            )
        except requests.RequestException as exc:
            raise TransientUploadError(f"Receipt upload request failed: {exc}") from exc

        if response.status_code == 409 or (response.status_code >= 400 and "Duplicate" in response.text):
            raise DuplicateObjectError(f"Object {path} already exists")
        if response.status_code >= 500:
            raise TransientUploadError(f"Storage returned {response.status_code}")
        if response.status_code >= 400:
            raise UploadError(f"Storage rejected the receipt ({response.status_code}).")

        logger.info("Uploaded receipt to %s/%s", bucket, path)
        return f"{base}/storage/v1/object/public/{bucket}/{path}"
