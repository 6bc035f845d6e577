"""
Local image storage for product galleries and site banners.

Files live under MEDIA_ROOT/<folder>/ and are addressed by their public URL
(/uploads/<folder>/<name>). Deletion only ever targets files that resolve
inside the expected folder.
"""
import logging
import os
import posixpath
import random
import re
import time
from urllib.parse import unquote, urlparse

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation
from django.core.files.storage import default_storage

from authentication.core.exceptions import UploadRejectedException

logger = logging.getLogger(__name__)

PRODUCTS_FOLDER = 'products'
BANNERS_FOLDER = 'banners'

_UNSAFE_CHARS = re.compile(r'[^a-zA-Z0-9.\-_]')


def build_upload_name(original_name):
    """Collision-resistant file name: `{clean-stem}-{epoch-ms}-{random}{ext}`"""
    clean = _UNSAFE_CHARS.sub('_', os.path.basename(original_name or ''))
    stem, ext = os.path.splitext(clean)
    suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}"
    return f"{stem or 'image'}-{suffix}{ext.lower()}"


def validate_uploads(files):
    """Reject the whole batch when it is too large or contains a non-image"""
    files = list(files)
    if len(files) > settings.UPLOAD_MAX_FILES:
        raise UploadRejectedException(f"At most {settings.UPLOAD_MAX_FILES} images can be uploaded at once.")

    for upload in files:
        content_type = getattr(upload, 'content_type', None)
        if content_type not in settings.UPLOAD_ALLOWED_CONTENT_TYPES:
            raise UploadRejectedException(f"Only images are allowed ('{upload.name}' is {content_type}).")
        if upload.size > settings.UPLOAD_MAX_FILE_SIZE:
            limit_mb = settings.UPLOAD_MAX_FILE_SIZE // (1024 * 1024)
            raise UploadRejectedException(f"'{upload.name}' exceeds the {limit_mb}MB limit.")
    return files


def save_upload(upload, folder):
    """Store one uploaded file under `folder` and return its public URL"""
    stored_name = default_storage.save(posixpath.join(folder, build_upload_name(upload.name)), upload)
    url = f"{settings.MEDIA_URL}{stored_name}"
    logger.info(f"Stored upload {upload.name} as {url}")
    return url


def save_uploads(files, folder):
    """
    Validate then store a batch, returning URLs in upload order. When one file
    cannot be stored, the ones already written are removed before re-raising.
    """
    urls = []
    try:
        for upload in validate_uploads(files):
            urls.append(save_upload(upload, folder))
    except OSError:
        logger.error(f"Storing upload batch failed, discarding {len(urls)} stored file(s)", exc_info=True)
        discard_uploads(urls, folder)
        raise
    return urls


def resolve_upload_path(url, folder):
    """
    Map a public upload URL to its storage-relative path.

    Returns None unless the URL points inside /uploads/<folder>/ once
    normalized, so `..` segments or foreign hosts' paths outside the folder
    can never be targeted.
    """
    if not url or not isinstance(url, str):
        return None

    path = unquote(urlparse(url).path)
    media_url = settings.MEDIA_URL
    if not path.startswith(f"{media_url}{folder}/"):
        return None

    relative = posixpath.normpath(path[len(media_url):])
    if not relative.startswith(f"{folder}/") or '..' in relative.split('/'):
        return None
    return relative


def delete_upload(url, folder):
    """
    Best-effort removal of one stored file. Never raises; returns True only
    when a file was actually removed.
    """
    relative = resolve_upload_path(url, folder)
    if relative is None:
        logger.info(f"Skipping deletion of {url}: not under {settings.MEDIA_URL}{folder}/")
        return False

    try:
        if not default_storage.exists(relative):
            logger.info(f"Upload already gone, nothing to delete: {relative}")
            return False
        default_storage.delete(relative)
        logger.info(f"Deleted orphaned upload {relative}")
        return True
    except (OSError, SuspiciousFileOperation) as e:
        logger.warning(f"Failed to delete upload {relative}: {str(e)}")
        return False


def discard_uploads(urls, folder):
    """Remove files stored earlier in a request that did not go through"""
    for url in urls:
        delete_upload(url, folder)
