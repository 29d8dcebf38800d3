from __future__ import annotations

import os
from typing import Iterable, List, Tuple

import requests

from .models import UnassignedImage, UploadedFile
from .utils import logger

ACCEPTED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".gif")


class UploadError(RuntimeError):
    pass


def _parse_response(r: requests.Response, original_name: str) -> UploadedFile:
    if r.status_code != 200:
        try:
            message = r.json().get("message")
        except Exception:
            message = None
        raise UploadError(message or f"Upload failed with status: {r.status_code}")

    try:
        results = r.json()
    except ValueError as e:
        raise UploadError("Invalid response structure from upload API.") from e
    result = results[0] if isinstance(results, list) and results else None
    if not isinstance(result, dict) or not result.get("fileId") or not result.get("url"):
        raise UploadError("Invalid response structure from upload API.")
    return UploadedFile(file_id=str(result["fileId"]), url=result["url"], original_name=original_name)


def upload_file(name: str, data: bytes, endpoint: str, timeout: int = 60) -> UploadedFile:
    r = requests.post(endpoint, files={"files": (name, data)}, timeout=timeout)
    return _parse_response(r, name)


def read_files(paths: Iterable[str]) -> List[Tuple[str, bytes]]:
    out: List[Tuple[str, bytes]] = []
    for path in paths:
        with open(path, "rb") as fh:
            out.append((os.path.basename(path), fh.read()))
    return out


def upload_files(
    files: Iterable[Tuple[str, bytes]], endpoint: str, timeout: int = 60
) -> Tuple[List[UploadedFile], List[UnassignedImage]]:
    """Uploads one file per request. A failing file is reported with its error; the rest carry on."""
    uploaded: List[UploadedFile] = []
    failed: List[UnassignedImage] = []
    for i, (name, data) in enumerate(files):
        if not name.lower().endswith(ACCEPTED_EXTENSIONS):
            failed.append(UnassignedImage(id=f"failed-{i}-{name}", url="", original_name=name, error="Formato não suportado"))
            continue
        try:
            uploaded.append(upload_file(name, data, endpoint, timeout=timeout))
        except (requests.RequestException, UploadError) as e:
            logger.warning(f"upload of {name} failed: {e}")
            failed.append(UnassignedImage(id=f"failed-{i}-{name}", url="", original_name=name, error=str(e) or "Upload failed"))
    if failed:
        logger.warning(f"{len(failed)} out of {len(uploaded) + len(failed)} images could not be uploaded")
    return uploaded, failed
