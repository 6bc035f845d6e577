from django.core.cache import cache
from django.db import models


# ==========================================
# Video Model
# ==========================================
class Video(models.Model):
    """A how-to or product guide video; video_url is always a canonical embed URL"""
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    video_url = models.CharField(max_length=500)
    thumbnail = models.CharField(max_length=500, blank=True, null=True)
    date = models.DateField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.title


# ==========================================
# Site Settings Model
# ==========================================
class SiteSettings(models.Model):
    """
    Storefront contact details and homepage banners. A single row with
    pk=1; use SiteSettings.load() to read it.
    """
    SINGLETON_PK = 1
    CACHE_KEY = 'content:site_settings'
    CACHE_TIMEOUT = 60 * 60

    DEFAULTS = {
        'phone': '012 999 996',
        'email': 'chhaylyhh@online.com.kh',
        'address': 'ភូមិត្រពាំងថ្លឹង សង្កាត់ចោមចៅ ខណ្ឌពោធិ៍សែនជ័យ រាជធានីភ្នំពេញ ព្រះរាជាណាចក្រកម្ពុជា',
        'map_url': (
            'https://www.google.com/maps/embed?pb=!1m18!1m12!1m3!1d3908.770519363063!2d104.8906643'
            '!3d11.5682859!2m3!1f0!2f0!3f0!3m2!1i1024!2i768!4f13.1!3m3!1m2!1s0x3109519fe4077d69'
            '%3A0x20138e822e434660!2sPhnom%20Penh!5e0!3m2!1sen!2skh!4v1715000000000!5m2!1sen!2skh'
        ),
        'facebook_url': '#',
        'youtube_url': '#',
    }

    phone = models.CharField(max_length=50, blank=True, default='')
    email = models.CharField(max_length=255, blank=True, default='')
    address = models.TextField(blank=True, default='')
    map_url = models.TextField(blank=True, default='')
    facebook_url = models.CharField(max_length=500, blank=True, default='')
    youtube_url = models.CharField(max_length=500, blank=True, default='')
    banners = models.JSONField(default=list, blank=True, help_text="Ordered list of {name, banner_image}")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Site settings"
        verbose_name_plural = "Site settings"

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)
        cache.delete(self.CACHE_KEY)

    def delete(self, *args, **kwargs):
        cache.delete(self.CACHE_KEY)
        return super().delete(*args, **kwargs)

    @classmethod
    def load(cls):
        settings_row = cache.get(cls.CACHE_KEY)
        if settings_row is None:
            settings_row, created = cls.objects.get_or_create(pk=cls.SINGLETON_PK, defaults=cls.DEFAULTS)
            cache.set(cls.CACHE_KEY, settings_row, cls.CACHE_TIMEOUT)
        return settings_row

    def __str__(self):
        return "Site settings"
