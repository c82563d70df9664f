# portal/services/uploads.py
from __future__ import annotations

import logging
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from portal.core import errors
from portal.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class ProofFile:
    """A validated proof, read into memory, not yet on disk."""

    content: bytes
    extension: str


def upload_dir() -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def read_proof(upload: Optional[UploadFile]) -> Optional[ProofFile]:
    if upload is None or not upload.filename:
        return None

    ext = os.path.splitext(upload.filename)[1].lower()
    allowed = {e.lower() for e in settings.ALLOWED_PROOF_EXTENSIONS}
    if ext not in allowed:
        raise errors.ValidationError(
            f"Payment proof must be one of: {', '.join(sorted(allowed))}"
        )

    # Leemos un byte de más para detectar el exceso sin cargar todo
    content = upload.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if not content:
        raise errors.ValidationError("Payment proof file is empty")
    if len(content) > settings.MAX_UPLOAD_BYTES:
        max_mb = settings.MAX_UPLOAD_BYTES / (1024 * 1024)
        raise errors.ValidationError(f"Payment proof must be at most {max_mb:g} MB")

    return ProofFile(content=content, extension=ext)


def save_proof(proof: ProofFile) -> str:
    filename = f"paymentProof-{int(time.time() * 1000)}-{secrets.token_hex(8)}{proof.extension}"
    (upload_dir() / filename).write_bytes(proof.content)
    return filename


def remove_proof(filename: Optional[str]) -> None:
    if not filename:
        return
    path = resolve_proof_path(filename)
    if path is not None and path.exists():
        path.unlink()
        logger.info("Removed orphan proof %s", filename)


def is_safe_filename(filename: str) -> bool:
    return bool(filename) and filename not in (".", "..") and Path(filename).name == filename and "\\" not in filename


def resolve_proof_path(filename: str) -> Optional[Path]:
    if not is_safe_filename(filename):
        return None
    return upload_dir() / filename
