from django.contrib.auth.models import Group, User
from django.db import IntegrityError
from django.db.models import ProtectedError
from django.test import SimpleTestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.test import APITestCase

from api.exceptions import api_exception_handler


class ApiAuthTokenTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="ventas_api", password="pass123", email="ventas@example.com")
        self.user.groups.add(Group.objects.get_or_create(name="VENTAS")[0])

    def test_token_y_permisos(self):
        resp = self.client.post(
            reverse("api_auth_token"),
            {"username": "ventas_api", "password": "pass123"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data["token"])
        self.assertEqual(resp.data["user"]["username"], "ventas_api")
        self.assertFalse(resp.data["user"]["puede_gestionar_sedes"])
        self.assertTrue(resp.data["user"]["puede_gestionar_produccion"])

        self.client.credentials(HTTP_AUTHORIZATION=f"Token {resp.data['token']}")
        resp_sedes = self.client.get(reverse("api_sedes"))
        self.assertEqual(resp_sedes.status_code, status.HTTP_200_OK)

    def test_credenciales_invalidas(self):
        resp = self.client.post(
            reverse("api_auth_token"),
            {"username": "ventas_api", "password": "incorrecta"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)


class ApiExceptionHandlerTests(SimpleTestCase):
    def test_protected_error_es_400(self):
        resp = api_exception_handler(ProtectedError("protegido", set()), {"view": None})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "REGISTROS_ASOCIADOS")

    def test_integrity_error_es_400(self):
        resp = api_exception_handler(IntegrityError("unique"), {"view": None})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "INTEGRIDAD")

    def test_error_no_controlado_es_500(self):
        resp = api_exception_handler(RuntimeError("boom"), {"view": None})
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(resp.data["error"], "boom")

    def test_errores_drf_pasan_intactos(self):
        resp = api_exception_handler(NotFound(), {"view": None})
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
