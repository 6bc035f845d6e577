import io
import shutil
import tempfile

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from PIL import Image

from h2o_api.celery import app as celery_app


def make_image(name='photo.png', color='blue', size=(20, 20)):
    """A small real PNG wrapped as an uploaded file"""
    image = Image.new('RGB', size, color=color)
    image_io = io.BytesIO()
    image.save(image_io, format='PNG')
    return SimpleUploadedFile(name, image_io.getvalue(), content_type='image/png')


def create_admin(email='admin@h2o.test'):
    User = get_user_model()
    return User.objects.create_user(email=email, password='Admin@123', role=User.Role.ADMIN)


class TempMediaMixin:
    """Point MEDIA_ROOT at a throwaway directory and run Celery tasks in-process"""

    def setUp(self):
        super().setUp()
        self.media_root = tempfile.mkdtemp()
        media_override = override_settings(MEDIA_ROOT=self.media_root)
        media_override.enable()
        self.addCleanup(media_override.disable)
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)

        previous_eager = celery_app.conf.task_always_eager
        celery_app.conf.task_always_eager = True
        self.addCleanup(setattr, celery_app.conf, 'task_always_eager', previous_eager)
