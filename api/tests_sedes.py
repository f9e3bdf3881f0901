from datetime import date
from unittest.mock import patch

from django.contrib.auth.models import Group, User
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from core.models import AuditLog, Sede
from core.utils.imagenes import ImagenUploadError
from inventario.models import ExistenciaSede
from produccion.models import DetalleProduccion, Produccion
from recetas.models import Producto, VentaHistorica


def _imagen(nombre="sede.png", content_type="image/png", size=64):
    return SimpleUploadedFile(nombre, b"\x89PNG" + b"0" * size, content_type=content_type)


class SedesApiTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(username="admin_api", password="pass123")
        self.admin.groups.add(Group.objects.get_or_create(name="ADMIN")[0])

        self.lectura = User.objects.create_user(username="lectura_api", password="pass123")
        self.lectura.groups.add(Group.objects.get_or_create(name="LECTURA")[0])

        self.sede = Sede.objects.create(nombre="Centro", telefono="3001112233", direccion="Calle 10 # 5-20")
        self.url = reverse("api_sedes")

    def _detalle_url(self, sede_id):
        return reverse("api_sede_detalle", kwargs={"sede_id": sede_id})

    def test_list_ordenado_por_id_descendente(self):
        Sede.objects.create(nombre="Norte", telefono="3002223344", direccion="Av 68 # 1-1")
        self.client.force_authenticate(self.lectura)

        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([row["nombre"] for row in resp.data], ["Norte", "Centro"])

    def test_list_filtros(self):
        Sede.objects.create(nombre="Norte", telefono="3002223344", direccion="Av 68 # 1-1", activa=False)
        self.client.force_authenticate(self.lectura)

        resp = self.client.get(self.url, {"activa": "false"})
        self.assertEqual([row["nombre"] for row in resp.data], ["Norte"])

        resp = self.client.get(self.url, {"nombre": "cen"})
        self.assertEqual([row["nombre"] for row in resp.data], ["Centro"])

    def test_requiere_autenticacion(self):
        resp = self.client.get(self.url)
        self.assertIn(resp.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_lectura_no_puede_crear(self):
        self.client.force_authenticate(self.lectura)
        resp = self.client.post(
            self.url,
            {"nombre": "Sur", "telefono": "3001234567", "direccion": "Calle 1 # 2"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Sede.objects.filter(nombre="Sur").exists())

    def test_crear_sede_json(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.post(
            self.url,
            {"nombre": " Sur ", "telefono": "300 123 4567", "direccion": "Calle 1 # 2"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["nombre"], "Sur")
        self.assertEqual(resp.data["telefono"], "3001234567")
        self.assertTrue(resp.data["activa"])
        self.assertEqual(resp.data["imagen_url"], "")
        self.assertTrue(AuditLog.objects.filter(action="CREATE", model="core.Sede").exists())

    def test_crear_sede_validaciones(self):
        self.client.force_authenticate(self.admin)

        resp = self.client.post(
            self.url,
            {"nombre": "Sur", "telefono": "2001234567", "direccion": "Calle 1 # 2"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("telefono", resp.data)

        resp = self.client.post(
            self.url,
            {"nombre": "S", "telefono": "3001234567", "direccion": "Cll"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("nombre", resp.data)
        self.assertIn("direccion", resp.data)

        resp = self.client.post(self.url, {"nombre": "Sur"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("telefono", resp.data)

    def test_crear_sede_nombre_duplicado(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.post(
            self.url,
            {"nombre": "Centro", "telefono": "3001234567", "direccion": "Calle 1 # 2"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("nombre", resp.data)

    def test_crear_sede_con_imagen(self):
        self.client.force_authenticate(self.admin)
        with patch("api.sedes_views.subir_imagen", return_value="https://res.cloudinary.com/demo/sur.png") as subir:
            resp = self.client.post(
                self.url,
                {
                    "nombre": "Sur",
                    "telefono": "3001234567",
                    "direccion": "Calle 1 # 2",
                    "activa": "true",
                    "imagen": _imagen(),
                },
                format="multipart",
            )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["imagen_url"], "https://res.cloudinary.com/demo/sur.png")
        subir.assert_called_once()

    def test_crear_sede_si_falla_la_subida_queda_sin_imagen(self):
        self.client.force_authenticate(self.admin)
        with patch("api.sedes_views.subir_imagen", side_effect=ImagenUploadError("sin red")):
            resp = self.client.post(
                self.url,
                {"nombre": "Sur", "telefono": "3001234567", "direccion": "Calle 1 # 2", "imagen": _imagen()},
                format="multipart",
            )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["imagen_url"], "")

    def test_crear_sede_rechaza_tipo_de_archivo(self):
        self.client.force_authenticate(self.admin)
        with patch("api.sedes_views.subir_imagen") as subir:
            resp = self.client.post(
                self.url,
                {
                    "nombre": "Sur",
                    "telefono": "3001234567",
                    "direccion": "Calle 1 # 2",
                    "imagen": _imagen("sede.txt", "text/plain"),
                },
                format="multipart",
            )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "INVALID_FILE_TYPE")
        self.assertIn("image/png", resp.data["tipos_permitidos"])
        subir.assert_not_called()
        self.assertFalse(Sede.objects.filter(nombre="Sur").exists())

    @override_settings(SEDE_IMAGEN_MAX_BYTES=32)
    def test_crear_sede_rechaza_archivo_grande(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.post(
            self.url,
            {"nombre": "Sur", "telefono": "3001234567", "direccion": "Calle 1 # 2", "imagen": _imagen(size=128)},
            format="multipart",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "LIMIT_FILE_SIZE")

    def test_crear_sede_rechaza_campo_de_archivo_inesperado(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.post(
            self.url,
            {"nombre": "Sur", "telefono": "3001234567", "direccion": "Calle 1 # 2", "foto": _imagen()},
            format="multipart",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "LIMIT_UNEXPECTED_FILE")

    def test_detalle_y_404(self):
        self.client.force_authenticate(self.lectura)
        resp = self.client.get(self._detalle_url(self.sede.id))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["nombre"], "Centro")

        resp = self.client.get(self._detalle_url(999999))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_actualizar_sede_conserva_imagen_sin_archivo(self):
        self.sede.imagen_url = "https://res.cloudinary.com/demo/centro.png"
        self.sede.save()
        self.client.force_authenticate(self.admin)

        resp = self.client.put(
            self._detalle_url(self.sede.id),
            {"nombre": "Centro 2", "telefono": "3009998877", "direccion": "Calle 11 # 5", "activa": False},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.sede.refresh_from_db()
        self.assertEqual(self.sede.nombre, "Centro 2")
        self.assertFalse(self.sede.activa)
        self.assertEqual(self.sede.imagen_url, "https://res.cloudinary.com/demo/centro.png")

    def test_actualizar_sede_reemplaza_imagen(self):
        self.sede.imagen_url = "https://res.cloudinary.com/demo/centro.png"
        self.sede.save()
        self.client.force_authenticate(self.admin)

        with patch("api.sedes_views.subir_imagen", return_value="https://res.cloudinary.com/demo/nueva.png"):
            resp = self.client.put(
                self._detalle_url(self.sede.id),
                {
                    "nombre": "Centro",
                    "telefono": "3001112233",
                    "direccion": "Calle 10 # 5-20",
                    "activa": "true",
                    "imagen": _imagen(),
                },
                format="multipart",
            )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["imagen_url"], "https://res.cloudinary.com/demo/nueva.png")

    def test_actualizar_sede_falla_subida_conserva_imagen_anterior(self):
        self.sede.imagen_url = "https://res.cloudinary.com/demo/centro.png"
        self.sede.save()
        self.client.force_authenticate(self.admin)

        with patch("api.sedes_views.subir_imagen", side_effect=ImagenUploadError("sin red")):
            resp = self.client.put(
                self._detalle_url(self.sede.id),
                {
                    "nombre": "Centro",
                    "telefono": "3001112233",
                    "direccion": "Calle 10 # 5-20",
                    "activa": "true",
                    "imagen": _imagen(),
                },
                format="multipart",
            )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["imagen_url"], "https://res.cloudinary.com/demo/centro.png")

    def test_actualizar_sede_inexistente(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.put(
            self._detalle_url(999999),
            {"nombre": "Nada", "telefono": "3001234567", "direccion": "Calle 1 # 2"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_crear_sede_nombre_duplicado_sin_importar_mayusculas_ni_acentos(self):
        self.client.force_authenticate(self.admin)
        for nombre in ("CENTRO", " céntro "):
            resp = self.client.post(
                self.url,
                {"nombre": nombre, "telefono": "3001234567", "direccion": "Calle 1 # 2"},
                format="json",
            )
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertIn("nombre", resp.data)
        self.assertEqual(Sede.objects.count(), 1)

    def test_actualizar_sede_puede_cambiar_mayusculas_de_su_nombre(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.put(
            self._detalle_url(self.sede.id),
            {"nombre": "CENTRO", "telefono": "3001112233", "direccion": "Calle 10 # 5-20"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.sede.refresh_from_db()
        self.assertEqual(self.sede.nombre, "CENTRO")
        self.assertEqual(self.sede.nombre_normalizado, "centro")

    def test_actualizar_sede_json_sin_activa_conserva_estado(self):
        self.sede.activa = False
        self.sede.save()
        self.client.force_authenticate(self.admin)

        resp = self.client.put(
            self._detalle_url(self.sede.id),
            {"nombre": "Centro", "telefono": "3009998877", "direccion": "Calle 10 # 5-20"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(resp.data["activa"])
        self.sede.refresh_from_db()
        self.assertFalse(self.sede.activa)
        self.assertEqual(self.sede.telefono, "3009998877")

    def test_actualizar_sede_multipart_sin_activa_conserva_estado(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.put(
            self._detalle_url(self.sede.id),
            {"nombre": "Centro", "telefono": "3009998877", "direccion": "Calle 10 # 5-20"},
            format="multipart",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.sede.refresh_from_db()
        self.assertTrue(self.sede.activa)

    def test_crear_sede_multipart_sin_activa_queda_activa(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.post(
            self.url,
            {"nombre": "Sur", "telefono": "3001234567", "direccion": "Calle 1 # 2"},
            format="multipart",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertTrue(resp.data["activa"])

    def test_crear_sede_imagen_mayor_al_limite_de_formularios(self):
        # 3 MB supera DATA_UPLOAD_MAX_MEMORY_SIZE por defecto pero no el límite de imagen.
        self.client.force_authenticate(self.admin)
        with patch("api.sedes_views.subir_imagen", return_value="https://res.cloudinary.com/demo/sur.png"):
            resp = self.client.post(
                self.url,
                {
                    "nombre": "Sur",
                    "telefono": "3001234567",
                    "direccion": "Calle 1 # 2",
                    "imagen": _imagen(size=3 * 1024 * 1024),
                },
                format="multipart",
            )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["imagen_url"], "https://res.cloudinary.com/demo/sur.png")

    def test_actualizar_sede_inexistente_con_archivo_invalido(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.put(
            self._detalle_url(999999),
            {
                "nombre": "Nada",
                "telefono": "3001234567",
                "direccion": "Calle 1 # 2",
                "imagen": _imagen("sede.txt", "text/plain"),
            },
            format="multipart",
        )
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_eliminar_sede_sin_registros(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.delete(self._detalle_url(self.sede.id))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["sede_eliminada"], {"id": self.sede.id, "nombre": "Centro"})
        self.assertFalse(Sede.objects.filter(pk=self.sede.id).exists())

    def test_eliminar_sede_inexistente(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.delete(self._detalle_url(999999))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def _assert_eliminacion_bloqueada(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.delete(self._detalle_url(self.sede.id))
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "SEDE_CON_REGISTROS")
        self.assertIn("sugerencia", resp.data)
        self.assertTrue(Sede.objects.filter(pk=self.sede.id).exists())

    def test_eliminar_sede_con_existencias(self):
        producto = Producto.objects.create(nombre="Pan")
        ExistenciaSede.objects.create(sede=self.sede, producto=producto, stock_actual=10)
        self._assert_eliminacion_bloqueada()

    def test_eliminar_sede_con_ventas(self):
        producto = Producto.objects.create(nombre="Pan")
        VentaHistorica.objects.create(producto=producto, sede=self.sede, fecha=date(2026, 1, 5), cantidad=3)
        self._assert_eliminacion_bloqueada()

    def test_eliminar_sede_con_produccion(self):
        producto = Producto.objects.create(nombre="Pan")
        produccion = Produccion.objects.create(tipo_produccion="fabrica", nombre="Corrida")
        DetalleProduccion.objects.create(produccion=produccion, producto=producto, cantidad=4, sede=self.sede)
        self._assert_eliminacion_bloqueada()
