import json

from django.core.cache import cache
from django.core.files.storage import default_storage
from django.test import SimpleTestCase, TestCase
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from content.models import SiteSettings, Video
from content.normalizers import classify_map_url, extract_map_src, normalize_video_url
from store.services.uploads import BANNERS_FOLDER, resolve_upload_path, save_upload
from store.tests.helpers import TempMediaMixin, create_admin, make_image

CANONICAL = 'https://www.youtube.com/embed/dQw4w9WgXcQ'


class VideoUrlNormalizationTests(SimpleTestCase):

    def test_common_youtube_shapes(self):
        for raw in [
            'https://youtu.be/dQw4w9WgXcQ',
            'https://www.youtube.com/watch?v=dQw4w9WgXcQ',
            'https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ',
            'https://www.youtube.com/v/dQw4w9WgXcQ?version=3',
            'https://www.youtube.com/u/1/dQw4w9WgXcQ',
            '  youtu.be/dQw4w9WgXcQ#t=30  ',
        ]:
            with self.subTest(raw=raw):
                self.assertEqual(normalize_video_url(raw), CANONICAL)

    def test_canonical_url_is_unchanged(self):
        self.assertEqual(normalize_video_url(CANONICAL), CANONICAL)
        self.assertEqual(normalize_video_url(normalize_video_url('https://youtu.be/dQw4w9WgXcQ')), CANONICAL)

    def test_non_youtube_url_gets_scheme(self):
        self.assertEqual(normalize_video_url('vimeo.com/12345'), 'https://vimeo.com/12345')
        self.assertEqual(normalize_video_url('http://example.com/clip.mp4'), 'http://example.com/clip.mp4')

    def test_wrong_length_id_is_not_rewritten(self):
        self.assertEqual(normalize_video_url('https://youtu.be/short'), 'https://youtu.be/short')


class MapUrlTests(SimpleTestCase):

    def test_iframe_src_is_extracted(self):
        snippet = '<iframe src="https://maps.example/abc" width="600" height="450" loading="lazy"></iframe>'
        self.assertEqual(extract_map_src(snippet), 'https://maps.example/abc')

    def test_single_quoted_src(self):
        self.assertEqual(extract_map_src("<iframe src='https://maps.example/abc'></iframe>"), 'https://maps.example/abc')

    def test_bare_url_passes_through_and_is_idempotent(self):
        url = 'https://www.google.com/maps/embed?pb=!1m18'
        self.assertEqual(extract_map_src(url), url)
        self.assertEqual(extract_map_src(extract_map_src(url)), url)

    def test_classification(self):
        self.assertIsNone(classify_map_url(''))
        self.assertIsNone(classify_map_url('https://www.google.com/maps/embed?pb=!1m18'))
        self.assertEqual(classify_map_url('https://maps.app.goo.gl/xyz'), 'share_link')
        self.assertEqual(classify_map_url('https://maps.google.com/?q=phnom+penh'), 'share_link')
        self.assertEqual(classify_map_url('https://maps.example/abc'), 'not_embed')


class SiteSettingsModelTests(TestCase):

    def setUp(self):
        cache.clear()

    def test_load_creates_defaults_once(self):
        first = SiteSettings.load()
        second = SiteSettings.load()
        self.assertEqual(first.pk, SiteSettings.SINGLETON_PK)
        self.assertEqual(second.phone, '012 999 996')
        self.assertEqual(SiteSettings.objects.count(), 1)

    def test_save_invalidates_cache(self):
        site_settings = SiteSettings.load()
        site_settings.phone = '099 000 111'
        site_settings.save()
        self.assertEqual(SiteSettings.load().phone, '099 000 111')


class SiteSettingsApiTests(TempMediaMixin, APITestCase):

    def setUp(self):
        super().setUp()
        cache.clear()
        self.client = APIClient()
        self.admin = create_admin()

    def test_get_returns_defaults(self):
        resp = self.client.get('/api/settings/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['phone'], '012 999 996')
        self.assertIsNone(resp.data['data']['mapUrlWarning'])

    def test_update_requires_admin(self):
        resp = self.client.put('/api/settings/', {'phone': '1'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_extracts_map_src(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.put(
            '/api/settings/',
            {'phone': '099 000 111', 'mapUrl': '<iframe src="https://maps.example/abc"></iframe>'},
            format='json'
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['mapUrl'], 'https://maps.example/abc')
        self.assertEqual(resp.data['data']['mapUrlWarning'], 'not_embed')
        self.assertEqual(SiteSettings.objects.get().phone, '099 000 111')

    def test_banner_upload_replaces_and_deletes_orphans(self):
        old_banner = save_upload(make_image('old.png'), BANNERS_FOLDER)
        site_settings = SiteSettings.load()
        site_settings.banners = [{'name': 'Summer', 'banner_image': old_banner}]
        site_settings.save()

        self.client.force_authenticate(user=self.admin)
        payload = {
            'banners': json.dumps([{'name': 'Summer', 'banner_image': old_banner}, {'name': 'Winter'}]),
            'banner_0': make_image('new.png'),
        }
        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.put('/api/settings/', payload, format='multipart')

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        banners = SiteSettings.objects.get().banners
        self.assertEqual([banner['name'] for banner in banners], ['Summer', 'Winter'])
        self.assertTrue(banners[0]['banner_image'].startswith('/uploads/banners/new-'))
        self.assertTrue(default_storage.exists(resolve_upload_path(banners[0]['banner_image'], BANNERS_FOLDER)))
        self.assertFalse(default_storage.exists(resolve_upload_path(old_banner, BANNERS_FOLDER)))

    def test_malformed_banners_is_bad_request(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.put('/api/settings/', {'banners': '{oops'}, format='multipart')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error_code'], 'malformed_payload')

    def test_banner_file_without_banner_is_bad_request(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.put('/api/settings/', {'banner_3': make_image()}, format='multipart')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)


class VideoApiTests(APITestCase):

    def setUp(self):
        self.client = APIClient()
        self.admin = create_admin()

    def test_create_normalizes_url(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.post(
            '/api/videos/',
            {'title': 'Installing your dispenser', 'videoUrl': 'https://youtu.be/dQw4w9WgXcQ'},
            format='json'
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['data']['videoUrl'], CANONICAL)
        self.assertEqual(Video.objects.get().video_url, CANONICAL)

    def test_create_requires_title_and_url(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.post('/api/videos/', {'description': 'nothing else'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('title', resp.data['error'])
        self.assertIn('videoUrl', resp.data['error'])

    def test_list_update_and_delete(self):
        older = Video.objects.create(title='Older', video_url=CANONICAL)
        newer = Video.objects.create(title='Newer', video_url=CANONICAL)

        resp = self.client.get('/api/videos/')
        self.assertEqual([v['id'] for v in resp.data['data']], [newer.id, older.id])

        self.client.force_authenticate(user=self.admin)
        resp = self.client.put(
            f'/api/videos/{older.id}/',
            {'videoUrl': 'https://www.youtube.com/watch?v=abcdefghijk'},
            format='json'
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['videoUrl'], 'https://www.youtube.com/embed/abcdefghijk')
        self.assertEqual(resp.data['data']['title'], 'Older')

        resp = self.client.delete(f'/api/videos/{older.id}/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(Video.objects.filter(pk=older.pk).exists())

    def test_unknown_video_is_not_found(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.delete('/api/videos/999/')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)


class HealthCheckTests(APITestCase):

    def test_health_reports_ok(self):
        resp = self.client.get('/api/health/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['status'], 'ok')
        self.assertIn(resp.data['mode'], ('development', 'production'))
        self.assertIn('timestamp', resp.data)
