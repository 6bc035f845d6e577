import logging
from celery import shared_task

from content.models import SiteSettings
from .models import Product, Variant
from .services.uploads import delete_upload

logger = logging.getLogger("store.tasks")


def referenced_image_urls():
    """Every image URL a product gallery, a variant or a site banner still points at"""
    referenced = set()
    for gallery in Product.objects.values_list('image', flat=True):
        referenced.update(url for url in (gallery or []) if isinstance(url, str))
    referenced.update(Variant.objects.exclude(image__isnull=True).values_list('image', flat=True))
    for banners in SiteSettings.objects.values_list('banners', flat=True):
        referenced.update(
            banner.get('banner_image') for banner in (banners or [])
            if isinstance(banner, dict) and banner.get('banner_image')
        )
    return referenced


@shared_task(name="store.delete_orphaned_uploads")
def delete_orphaned_uploads_task(urls, folder):
    """
    Remove image files that are no longer referenced after a product or the
    site settings were saved. Runs once the write has committed; a file that
    is still referenced elsewhere is kept, and one that cannot be removed is
    logged and skipped, never retried.
    """
    urls = list(urls or [])
    logger.info(f"[OrphanCleanupTask] Removing {len(urls)} orphaned upload(s) from '{folder}'")

    still_referenced = referenced_image_urls()
    removed = 0
    for url in urls:
        if url in still_referenced:
            logger.info(f"[OrphanCleanupTask] Keeping {url}: still referenced")
            continue
        if delete_upload(url, folder):
            removed += 1

    logger.info(f"[OrphanCleanupTask] Removed {removed}/{len(urls)} file(s) from '{folder}'")
    return {"status": "success", "requested": len(urls), "removed": removed}
