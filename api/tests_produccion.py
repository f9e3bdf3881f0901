from decimal import Decimal

from django.contrib.auth.models import Group, User
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from core.models import Sede
from maestros.models import Insumo, UnidadMedida
from produccion.models import DetalleProduccion, Produccion
from recetas.models import LineaReceta, Producto, Receta


class ProduccionApiTests(APITestCase):
    def setUp(self):
        self.user_produccion = User.objects.create_user(username="produccion_api", password="pass123")
        self.user_produccion.groups.add(Group.objects.get_or_create(name="PRODUCCION")[0])

        self.user_lectura = User.objects.create_user(username="lectura_prod", password="pass123")
        self.user_lectura.groups.add(Group.objects.get_or_create(name="LECTURA")[0])

        self.sede_a = Sede.objects.create(nombre="SedeA", telefono="3001234567", direccion="Calle 1 # 2-3")
        self.sede_b = Sede.objects.create(nombre="SedeB", telefono="3007654321", direccion="Carrera 4 # 5")

        gramo = UnidadMedida.objects.create(codigo="g", nombre="Gramo")
        receta = Receta.objects.create(nombre="Croissant", especificaciones="Laminar 3 veces")
        LineaReceta.objects.create(
            receta=receta,
            posicion=1,
            insumo=Insumo.objects.create(nombre="Mantequilla", unidad_base=gramo),
            cantidad=Decimal("250"),
            unidad=gramo,
        )
        LineaReceta.objects.create(receta=receta, posicion=2, insumo=None, cantidad=None, unidad=None)
        self.croissant = Producto.objects.create(
            nombre="Croissant", receta=receta, imagen_url="https://res.cloudinary.com/demo/croissant.png"
        )
        self.torta = Producto.objects.create(nombre="Torta de chocolate")

        self.url = reverse("api_producciones")

    def _detalle_url(self, produccion_id):
        return reverse("api_produccion_detalle", kwargs={"produccion_id": produccion_id})

    def test_crear_fabrica_y_consultar_resumen(self):
        self.client.force_authenticate(self.user_produccion)
        resp = self.client.post(
            self.url,
            {
                "tipo_produccion": "fabrica",
                "nombre": "Corrida lunes",
                "fecha_pedido": "2026-03-02",
                "productos": [
                    {"id": self.croissant.id, "cantidades_por_sede": {"SedeA": 5, "SedeB": 3}},
                ],
            },
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(resp.data["numero_pedido"])
        self.assertEqual(DetalleProduccion.objects.filter(produccion_id=resp.data["id"]).count(), 2)

        resp_get = self.client.get(self._detalle_url(resp.data["id"]))
        self.assertEqual(resp_get.status_code, status.HTTP_200_OK)
        detalles = resp_get.data["detalles"]
        self.assertEqual(len(detalles), 1)
        self.assertEqual(detalles[0]["cantidad_total"], 8.0)
        self.assertEqual(detalles[0]["cantidades_por_sede"], {"SedeA": 5.0, "SedeB": 3.0})
        self.assertEqual(detalles[0]["imagen"], "https://res.cloudinary.com/demo/croissant.png")
        self.assertEqual(detalles[0]["receta"]["nombre"], "Croissant")
        insumos = detalles[0]["insumos"]
        self.assertEqual(insumos[0]["nombre"], "Mantequilla")
        self.assertEqual(insumos[0]["unidad"], "g")
        self.assertEqual(insumos[1]["nombre"], "Sin nombre")
        self.assertEqual(insumos[1]["unidad"], "unidad")
        self.assertEqual(insumos[1]["cantidad"], 0.0)
        self.assertEqual(resp_get.data["sedes_disponibles"], ["SedeA", "SedeB"])

    def test_crear_pedidos_numeracion_consecutiva(self):
        self.client.force_authenticate(self.user_produccion)
        payload = {
            "tipo_produccion": "Pedido",
            "nombre": "Cumpleaños Ana",
            "fecha_entrega": "2026-03-10",
            "productos": [{"id": self.torta.id, "cantidad": "2"}],
        }
        primero = self.client.post(self.url, payload, format="json")
        segundo = self.client.post(self.url, payload, format="json")

        self.assertEqual(primero.status_code, status.HTTP_201_CREATED)
        self.assertEqual(primero.data["numero_pedido"], "P-001")
        self.assertEqual(segundo.data["numero_pedido"], "P-002")
        self.assertEqual(primero.data["tipo_produccion"], "pedido")
        self.assertEqual(primero.data["estado_produccion"], Produccion.ESTADO_PRODUCCION_POR_CONFIRMAR)
        self.assertEqual(primero.data["estado_pedido"], Produccion.ESTADO_PEDIDO_ABIERTO)
        self.assertEqual(primero.data["fecha_entrega"], "2026-03-10")
        self.assertEqual(primero.data["detalles"][0]["cantidad_total"], 2.0)
        self.assertEqual(primero.data["detalles"][0]["cantidades_por_sede"], {})

    def test_pedido_sin_cantidad_usa_uno(self):
        self.client.force_authenticate(self.user_produccion)
        resp = self.client.post(
            self.url,
            {"tipo_produccion": "pedido", "nombre": "Cliente", "productos": [{"id": self.torta.id}]},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["detalles"][0]["cantidad_total"], 1.0)

    def test_crear_datos_incompletos(self):
        self.client.force_authenticate(self.user_produccion)
        resp = self.client.post(self.url, {"nombre": "Sin tipo"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("tipo_produccion", resp.data)

        resp = self.client.post(self.url, {"tipo_produccion": "mayorista", "nombre": "X"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Produccion.objects.exists())

    def test_crear_con_sede_desconocida(self):
        self.client.force_authenticate(self.user_produccion)
        resp = self.client.post(
            self.url,
            {
                "tipo_produccion": "fabrica",
                "nombre": "Corrida",
                "productos": [{"id": self.croissant.id, "cantidades_por_sede": {"SedeZ": 4}}],
            },
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("SedeZ", resp.data["detail"])
        self.assertFalse(Produccion.objects.exists())

    def test_sede_con_nombre_en_otras_mayusculas_no_se_crea_ni_desvia_cantidades(self):
        admin = User.objects.create_superuser(username="admin_prod", password="pass123")
        self.client.force_authenticate(admin)
        resp_sede = self.client.post(
            reverse("api_sedes"),
            {"nombre": "SEDEA", "telefono": "3005556677", "direccion": "Calle 7 # 8"},
            format="json",
        )
        self.assertEqual(resp_sede.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Sede.objects.filter(nombre_normalizado="sedea").count(), 1)

        self.client.force_authenticate(self.user_produccion)
        resp = self.client.post(
            self.url,
            {
                "tipo_produccion": "fabrica",
                "nombre": "Corrida",
                "productos": [{"id": self.croissant.id, "cantidades_por_sede": {"SEDEA": 3}}],
            },
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["detalles"][0]["cantidades_por_sede"], {"SedeA": 3.0})
        detalle = DetalleProduccion.objects.get(produccion_id=resp.data["id"])
        self.assertEqual(detalle.sede, self.sede_a)

    def test_crear_con_producto_inexistente(self):
        self.client.force_authenticate(self.user_produccion)
        resp = self.client.post(
            self.url,
            {"tipo_produccion": "pedido", "nombre": "Cliente", "productos": [{"id": 999999}]},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Produccion.objects.exists())

    def test_listado_y_filtros(self):
        Produccion.objects.create(tipo_produccion="fabrica", nombre="Corrida")
        Produccion.objects.create(tipo_produccion="pedido", nombre="Cliente", numero_pedido="P-001")
        self.client.force_authenticate(self.user_lectura)

        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([row["nombre"] for row in resp.data], ["Cliente", "Corrida"])

        resp = self.client.get(self.url, {"tipo_produccion": "FABRICA"})
        self.assertEqual([row["nombre"] for row in resp.data], ["Corrida"])

    def test_lectura_no_puede_crear(self):
        self.client.force_authenticate(self.user_lectura)
        resp = self.client.post(self.url, {"tipo_produccion": "fabrica", "nombre": "Corrida"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_patch_encabezado(self):
        self.client.force_authenticate(self.user_produccion)
        creado = self.client.post(
            self.url,
            {"tipo_produccion": "pedido", "nombre": "Cliente", "productos": [{"id": self.torta.id}]},
            format="json",
        )
        resp = self.client.patch(
            self._detalle_url(creado.data["id"]),
            {"estado_produccion": Produccion.ESTADO_PRODUCCION_EN_PROCESO, "fecha_entrega": "2026-04-01"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["estado_produccion"], Produccion.ESTADO_PRODUCCION_EN_PROCESO)
        self.assertEqual(resp.data["estado_produccion_display"], "En proceso")
        self.assertEqual(resp.data["fecha_entrega"], "2026-04-01")

        resp = self.client.patch(self._detalle_url(creado.data["id"]), {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_patch_fabrica_rechaza_campos_de_pedido(self):
        produccion = Produccion.objects.create(tipo_produccion="fabrica", nombre="Corrida")
        self.client.force_authenticate(self.user_produccion)
        resp = self.client.patch(self._detalle_url(produccion.id), {"fecha_entrega": "2026-04-01"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_eliminar_produccion(self):
        produccion = Produccion.objects.create(tipo_produccion="fabrica", nombre="Corrida")
        DetalleProduccion.objects.create(produccion=produccion, producto=self.croissant, cantidad=3, sede=self.sede_a)
        self.client.force_authenticate(self.user_produccion)

        resp = self.client.delete(self._detalle_url(produccion.id))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(Produccion.objects.filter(pk=produccion.id).exists())
        self.assertFalse(DetalleProduccion.objects.exists())

        resp = self.client.get(self._detalle_url(produccion.id))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
