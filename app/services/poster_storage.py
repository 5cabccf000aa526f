"""
Poster object storage: local directory for development, Firebase Storage in production.

Download URLs of both backends carry the URL-encoded storage key after an
``/o/`` marker, which is what ``extract_poster_path`` relies on.
"""

import os
import uuid
from pathlib import Path
from urllib.parse import quote

from google.api_core.exceptions import GoogleAPICallError

from app.core.config import settings
from app.core.exceptions import PersistenceError
from app.services.firebase_client import get_storage_bucket
from app.services.repositories import use_firestore


class PosterStorage:
    """Interface of the poster object storage"""

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``path`` and return its public download URL"""
        raise NotImplementedError

    def delete(self, path: str) -> None:
        raise NotImplementedError


class LocalPosterStorage(PosterStorage):
    """Keeps posters under UPLOAD_DIR, served by the public ``/storage/o/`` route"""

    def __init__(self, root: str = settings.UPLOAD_DIR, base_url: str = settings.BASE_URL):
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")

    def resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root not in target.parents:
            raise ValueError(f"Storage key escapes the upload directory: {path}")
        return target

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        target = self.resolve(path)
        try:
            os.makedirs(target.parent, exist_ok=True)
            with open(target, "wb") as f:
                f.write(data)
        except OSError as e:
            raise PersistenceError(f"Could not store {path}: {e}") from e
        return f"{self.base_url}/storage/o/{quote(path, safe='')}"

    def delete(self, path: str) -> None:
        self.resolve(path).unlink()


class FirebasePosterStorage(PosterStorage):
    def __init__(self, bucket=None):
        self.bucket = bucket or get_storage_bucket()

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        token = uuid.uuid4().hex
        blob = self.bucket.blob(path)
        blob.metadata = {"firebaseStorageDownloadTokens": token}
        try:
            blob.upload_from_string(data, content_type=content_type)
        except GoogleAPICallError as e:
            raise PersistenceError(f"Could not upload {path}: {e}") from e
        return (
            f"https://firebasestorage.googleapis.com/v0/b/{self.bucket.name}"
            f"/o/{quote(path, safe='')}?alt=media&token={token}"
        )

    def delete(self, path: str) -> None:
        self.bucket.blob(path).delete()


def get_poster_storage() -> PosterStorage:
    if use_firestore():
        return FirebasePosterStorage()
    return LocalPosterStorage()
