from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import IntegrityError, transaction
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils.datastructures import MultiValueDict

from core.access import ROLE_ADMIN, ROLE_LECTURA, ROLE_VENTAS, can_manage_produccion, can_manage_sedes, can_view_sedes
from core.audit import log_event
from core.models import AuditLog, Sede
from core.utils.imagenes import (
    CODIGO_CAMPO_INESPERADO,
    CODIGO_TAMANO_EXCEDIDO,
    CODIGO_TIPO_INVALIDO,
    ImagenInvalida,
    ImagenUploadError,
    cloudinary_configurado,
    subir_imagen,
    validar_archivos_imagen,
)
from core.validators import limpiar_telefono, longitud_valida, telefono_valido


class TelefonoValidatorTests(SimpleTestCase):
    def test_acepta_celular_colombiano(self):
        self.assertTrue(telefono_valido("3001234567"))
        self.assertTrue(telefono_valido("300 123 4567"))

    def test_rechaza_formatos_invalidos(self):
        self.assertFalse(telefono_valido("2001234567"))
        self.assertFalse(telefono_valido("300123456"))
        self.assertFalse(telefono_valido("30012345678"))
        self.assertFalse(telefono_valido(""))
        self.assertFalse(telefono_valido(None))

    def test_limpiar_telefono_quita_espacios(self):
        self.assertEqual(limpiar_telefono(" 300 123\t4567 "), "3001234567")

    def test_longitud_valida_usa_texto_recortado(self):
        self.assertTrue(longitud_valida("  Norte ", 2, 20))
        self.assertFalse(longitud_valida(" N ", 2, 20))
        self.assertFalse(longitud_valida("x" * 21, 2, 20))


@override_settings(SEDE_IMAGEN_MAX_BYTES=1024)
class ValidarArchivosImagenTests(SimpleTestCase):
    def _files(self, **archivos):
        return MultiValueDict({campo: [archivo] for campo, archivo in archivos.items()})

    def test_sin_archivo_regresa_none(self):
        self.assertIsNone(validar_archivos_imagen(self._files()))

    def test_acepta_imagen_valida(self):
        archivo = SimpleUploadedFile("sede.png", b"x" * 100, content_type="image/png")
        self.assertIs(validar_archivos_imagen(self._files(imagen=archivo)), archivo)

    def test_rechaza_campo_inesperado(self):
        archivo = SimpleUploadedFile("sede.png", b"x", content_type="image/png")
        with self.assertRaises(ImagenInvalida) as ctx:
            validar_archivos_imagen(self._files(foto=archivo))
        self.assertEqual(ctx.exception.codigo, CODIGO_CAMPO_INESPERADO)

    def test_rechaza_tipo_no_imagen(self):
        archivo = SimpleUploadedFile("sede.pdf", b"x", content_type="application/pdf")
        with self.assertRaises(ImagenInvalida) as ctx:
            validar_archivos_imagen(self._files(imagen=archivo))
        self.assertEqual(ctx.exception.codigo, CODIGO_TIPO_INVALIDO)

    def test_rechaza_archivo_grande(self):
        archivo = SimpleUploadedFile("sede.jpg", b"x" * 2048, content_type="image/jpeg")
        with self.assertRaises(ImagenInvalida) as ctx:
            validar_archivos_imagen(self._files(imagen=archivo))
        self.assertEqual(ctx.exception.codigo, CODIGO_TAMANO_EXCEDIDO)


class SubirImagenTests(SimpleTestCase):
    @override_settings(CLOUDINARY_CLOUD_NAME="", CLOUDINARY_API_KEY="", CLOUDINARY_API_SECRET="")
    def test_sin_credenciales_falla(self):
        self.assertFalse(cloudinary_configurado())
        archivo = SimpleUploadedFile("sede.png", b"x", content_type="image/png")
        with self.assertRaises(ImagenUploadError):
            subir_imagen(archivo)

    @override_settings(
        CLOUDINARY_CLOUD_NAME="demo",
        CLOUDINARY_API_KEY="key",
        CLOUDINARY_API_SECRET="secret",
        CLOUDINARY_SEDES_FOLDER="pruebas/sedes",
    )
    def test_regresa_secure_url(self):
        archivo = SimpleUploadedFile("sede.png", b"x", content_type="image/png")
        with patch("core.utils.imagenes.cloudinary.uploader.upload") as upload:
            upload.return_value = {"secure_url": "https://res.cloudinary.com/demo/sede.png"}
            url = subir_imagen(archivo)

        self.assertEqual(url, "https://res.cloudinary.com/demo/sede.png")
        self.assertEqual(upload.call_args.kwargs["folder"], "pruebas/sedes")

    @override_settings(CLOUDINARY_CLOUD_NAME="demo", CLOUDINARY_API_KEY="key", CLOUDINARY_API_SECRET="secret")
    def test_error_del_proveedor_se_envuelve(self):
        archivo = SimpleUploadedFile("sede.png", b"x", content_type="image/png")
        with patch("core.utils.imagenes.cloudinary.uploader.upload", side_effect=RuntimeError("timeout")):
            with self.assertRaises(ImagenUploadError):
                subir_imagen(archivo)


class AccessAndAuditTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        self.admin = user_model.objects.create_user(username="admin_sedes", password="test12345")
        self.admin.groups.add(Group.objects.get_or_create(name=ROLE_ADMIN)[0])
        self.ventas = user_model.objects.create_user(username="ventas", password="test12345")
        self.ventas.groups.add(Group.objects.get_or_create(name=ROLE_VENTAS)[0])
        self.lectura = user_model.objects.create_user(username="lectura", password="test12345")
        self.lectura.groups.add(Group.objects.get_or_create(name=ROLE_LECTURA)[0])

    def test_roles(self):
        self.assertTrue(can_manage_sedes(self.admin))
        self.assertFalse(can_manage_sedes(self.ventas))
        self.assertTrue(can_manage_produccion(self.ventas))
        self.assertTrue(can_view_sedes(self.lectura))
        self.assertFalse(can_manage_produccion(self.lectura))

    def test_log_event_guarda_registro(self):
        log_event(self.admin, "CREATE", "core.Sede", "7", {"nombre": "Norte"})
        entry = AuditLog.objects.get()
        self.assertEqual(entry.user, self.admin)
        self.assertEqual(entry.object_id, "7")
        self.assertEqual(entry.payload["nombre"], "Norte")


class HealthCheckTests(TestCase):
    def test_health(self):
        resp = self.client.get(reverse("health"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})


class SedeModelTests(TestCase):
    def test_nombre_normalizado_se_calcula_al_guardar(self):
        sede = Sede.objects.create(nombre="  Chapinero  Alto", telefono="3001234567", direccion="Calle 60 # 9")
        self.assertEqual(sede.nombre_normalizado, "chapinero alto")

    def test_no_permite_nombres_que_solo_cambian_mayusculas(self):
        Sede.objects.create(nombre="Norte", telefono="3001234567", direccion="Calle 1 # 2")
        with self.assertRaises(IntegrityError), transaction.atomic():
            Sede.objects.create(nombre="NORTE", telefono="3007654321", direccion="Calle 3 # 4")
