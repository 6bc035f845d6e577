from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import APIException


class SlugConflictException(APIException):
    """
    Raised when a category's brand+name slug is already taken.
    Status code: 400 Bad Request
    """
    status_code = 400
    default_detail = _('A category with this brand and name already exists.')
    default_code = 'slug_conflict'


class MalformedPayloadException(APIException):
    """
    Raised when a JSON-encoded multipart field (variants, existingGallery,
    banners) cannot be decoded into the expected shape.
    """
    status_code = 400
    default_detail = _('Malformed JSON payload.')
    default_code = 'malformed_payload'


class UploadRejectedException(APIException):
    status_code = 400
    default_detail = _('Only images up to the configured size limit are allowed.')
    default_code = 'upload_rejected'
