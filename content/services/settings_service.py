import logging
import re

from django.db import transaction
from rest_framework.exceptions import ValidationError

from authentication.core.exceptions import MalformedPayloadException
from authentication.core.task_dispatch import dispatch_on_commit
from content.models import SiteSettings
from content.serializers import BannerSerializer, SiteSettingsWriteSerializer
from store.services.gallery import reconcile_gallery
from store.services.payloads import parse_json_list
from store.services.uploads import BANNERS_FOLDER, discard_uploads, save_upload, validate_uploads
from store.tasks import delete_orphaned_uploads_task

logger = logging.getLogger(__name__)

_BANNER_FILE = re.compile(r'^banner_(\d+)$')


def banner_images(banners):
    return [banner.get('banner_image') for banner in banners if banner.get('banner_image')]


def banner_files(files):
    """Map `banner_<index>` multipart files to their banner index"""
    indexed = {}
    for key in files.keys():
        match = _BANNER_FILE.match(key)
        if match:
            indexed[int(match.group(1))] = files[key]
    return indexed


class SettingsService:

    @staticmethod
    def parse_banners(raw):
        entries = parse_json_list(raw, 'banners')
        if not all(isinstance(entry, dict) for entry in entries):
            raise MalformedPayloadException("'banners' must be a list of objects.")
        serializer = BannerSerializer(data=entries, many=True)
        if not serializer.is_valid():
            raise ValidationError({'banners': serializer.errors})
        return [dict(banner) for banner in serializer.validated_data]

    @staticmethod
    def update_settings(data, files):
        """
        Apply an admin edit of the site settings. Banner images that are no
        longer used are removed from uploads/banners/ after the save commits.
        """
        serializer = SiteSettingsWriteSerializer(data=data, partial=True)
        serializer.is_valid(raise_exception=True)

        site_settings = SiteSettings.load()
        current_banners = list(site_settings.banners or [])
        if 'banners' in data:
            new_banners = SettingsService.parse_banners(data['banners'])
        else:
            new_banners = [dict(banner) for banner in current_banners]

        replacements = banner_files(files)
        out_of_range = [index for index in replacements if index >= len(new_banners)]
        if out_of_range:
            raise MalformedPayloadException(f"No banner at index {out_of_range[0]} for the uploaded image.")

        uploaded = []
        try:
            validate_uploads(replacements.values())
            for index, upload in sorted(replacements.items()):
                url = save_upload(upload, BANNERS_FOLDER)
                uploaded.append(url)
                new_banners[index]['banner_image'] = url

            _, to_delete = reconcile_gallery(banner_images(current_banners), banner_images(new_banners), [])

            with transaction.atomic():
                for field, value in serializer.validated_data.items():
                    setattr(site_settings, field, value)
                site_settings.banners = new_banners
                site_settings.save()

                if to_delete:
                    dispatch_on_commit(delete_orphaned_uploads_task, to_delete, BANNERS_FOLDER)
        except Exception:
            if uploaded:
                logger.error(f"Settings update failed, discarding {len(uploaded)} banner upload(s)", exc_info=True)
                discard_uploads(uploaded, BANNERS_FOLDER)
            raise

        logger.info(
            f"Site settings updated: fields={sorted(serializer.validated_data)}, "
            f"{len(new_banners)} banner(s), {len(to_delete)} queued for deletion"
        )
        return site_settings
