import json

from django.test import RequestFactory, TestCase
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.test import APIClient

from .exceptions import Conflict, envelope_exception_handler, first_error_message
from .responses import build_envelope, is_envelope
from .views import server_error


class EnvelopeTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_build_envelope_infers_success(self):
        self.assertTrue(build_envelope(200, "ok")["success"])
        self.assertFalse(build_envelope(409, "taken")["success"])
        self.assertTrue(is_envelope(build_envelope(201)))
        self.assertFalse(is_envelope({"data": 1}))

    def test_home_is_enveloped(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["statusCode"], 200)

    def test_framework_payload_gets_wrapped(self):
        """Plain viewset output is wrapped by the renderer"""
        response = self.client.get('/api/courses/')
        body = response.json()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "OK")
        self.assertEqual(body["data"], [])

    def test_validation_error_envelope(self):
        response = self.client.post('/api/auth/register/', {}, format='json')
        body = response.json()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(body["success"])
        self.assertEqual(body["statusCode"], 400)
        self.assertIn("email", body["data"])

    def test_unauthenticated_envelope(self):
        response = self.client.get('/api/auth/me/')
        body = response.json()
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(body["success"])
        self.assertIsNone(body["data"])

    def test_custom_errors_keep_their_status(self):
        response = envelope_exception_handler(Conflict("Webinar is full"), {})
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["message"], "Webinar is full")

        response = envelope_exception_handler(NotFound("Course not found"), {})
        self.assertEqual(response.data["statusCode"], 404)

    def test_unhandled_error_becomes_500(self):
        with self.assertLogs('core.exceptions', level='ERROR'):
            response = envelope_exception_handler(RuntimeError("database exploded"), {})
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["message"], "Internal server error")
        self.assertNotIn("exploded", str(response.data))

    def test_first_error_message(self):
        self.assertEqual(first_error_message({"email": ["Enter a valid email."]}), "email: Enter a valid email.")
        self.assertEqual(first_error_message({"non_field_errors": ["Nope"]}), "Nope")
        self.assertEqual(first_error_message({"answers": [{"answer": ["Bad"]}]}), "answers: answer: Bad")
        self.assertEqual(first_error_message([]), "Validation failed")

    def test_unmatched_url_is_enveloped(self):
        for path in ('/api/webinars/abc/', '/api/certificates/verify/bad_id!/'):
            response = self.client.get(path)
            self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
            self.assertEqual(response['Content-Type'], 'application/json')
            body = response.json()
            self.assertFalse(body["success"])
            self.assertEqual(body["statusCode"], 404)

    def test_server_error_page_is_enveloped(self):
        request = RequestFactory().get('/api/anything/')
        with self.assertLogs('core.views', level='ERROR'):
            response = server_error(request)
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(json.loads(response.content)["message"], "Internal server error")
