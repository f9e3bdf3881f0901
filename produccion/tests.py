from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase

from core.models import Sede
from maestros.models import Insumo, UnidadMedida, seed_unidades_basicas
from produccion.models import DetalleProduccion, Produccion
from produccion.services import (
    ProduccionInvalida,
    actualizar_encabezado,
    construir_lineas,
    crear_produccion,
    generar_numero_pedido,
    indice_sedes_activas,
    siguiente_numero_pedido,
)
from produccion.utils.agrupacion import (
    InsumoRecetaDTO,
    LineaProduccionDTO,
    RecetaDTO,
    agrupar_por_producto,
    resumir_detalles,
)
from recetas.models import LineaReceta, Producto, Receta


class AgruparPorProductoTests(SimpleTestCase):
    def test_suma_total_y_por_sede(self):
        resumen = agrupar_por_producto(
            [
                LineaProduccionDTO(producto_id=1, producto_nombre="Pan", cantidad=Decimal("5"), sede="SedeA"),
                LineaProduccionDTO(producto_id=1, producto_nombre="Pan", cantidad=Decimal("3"), sede="SedeB"),
                LineaProduccionDTO(producto_id=1, producto_nombre="Pan", cantidad=Decimal("2"), sede="SedeA"),
            ]
        )
        self.assertEqual(len(resumen), 1)
        self.assertEqual(resumen[0].cantidad_total, Decimal("10"))
        self.assertEqual(resumen[0].cantidades_por_sede, {"SedeA": Decimal("7"), "SedeB": Decimal("3")})

    def test_cantidad_nula_cuenta_como_cero(self):
        resumen = agrupar_por_producto(
            [
                LineaProduccionDTO(producto_id=1, producto_nombre="Pan", cantidad=None, sede="SedeA"),
                LineaProduccionDTO(producto_id=1, producto_nombre="Pan", cantidad=Decimal("4"), sede="SedeA"),
            ]
        )
        self.assertEqual(resumen[0].cantidad_total, Decimal("4"))
        self.assertEqual(resumen[0].cantidades_por_sede["SedeA"], Decimal("4"))

    def test_linea_sin_sede_solo_suma_al_total(self):
        resumen = agrupar_por_producto(
            [
                LineaProduccionDTO(producto_id=1, producto_nombre="Pan", cantidad=Decimal("2")),
                LineaProduccionDTO(producto_id=1, producto_nombre="Pan", cantidad=Decimal("1"), sede="SedeA"),
            ]
        )
        self.assertEqual(resumen[0].cantidad_total, Decimal("3"))
        self.assertEqual(resumen[0].cantidades_por_sede, {"SedeA": Decimal("1")})

    def test_orden_de_primera_aparicion_y_receta(self):
        receta = RecetaDTO(
            id=9,
            nombre="Masa madre",
            insumos=(InsumoRecetaDTO(id=1, nombre="Harina", cantidad=Decimal("2"), unidad="kg"),),
        )
        resumen = agrupar_por_producto(
            [
                LineaProduccionDTO(producto_id=2, producto_nombre="Torta", cantidad=Decimal("1")),
                LineaProduccionDTO(producto_id=1, producto_nombre="Pan", cantidad=Decimal("1"), receta=receta),
                LineaProduccionDTO(producto_id=2, producto_nombre="Torta", cantidad=Decimal("1")),
            ]
        )
        self.assertEqual([r.id for r in resumen], [2, 1])
        self.assertEqual(resumen[1].insumos[0].nombre, "Harina")
        self.assertEqual(resumen[0].insumos, ())

    def test_sin_lineas(self):
        self.assertEqual(agrupar_por_producto([]), [])


class SiguienteNumeroPedidoTests(SimpleTestCase):
    def test_primer_pedido(self):
        self.assertEqual(siguiente_numero_pedido([]), "P-001")

    def test_incrementa_el_mayor(self):
        self.assertEqual(siguiente_numero_pedido(["P-001", "P-002"]), "P-003")
        self.assertEqual(siguiente_numero_pedido(["P-010", "P-002", None, "X-999"]), "P-011")

    def test_pasa_de_tres_digitos(self):
        self.assertEqual(siguiente_numero_pedido(["P-999"]), "P-1000")


class ProduccionServiceTests(TestCase):
    def setUp(self):
        seed_unidades_basicas()
        self.sede_a = Sede.objects.create(nombre="SedeA", telefono="3001234567", direccion="Calle 1 # 2-3")
        self.sede_b = Sede.objects.create(nombre="SedeB", telefono="3007654321", direccion="Carrera 4 # 5")
        self.sede_inactiva = Sede.objects.create(
            nombre="Cerrada", telefono="3000000000", direccion="Calle 9 # 9", activa=False
        )
        receta = Receta.objects.create(nombre="Pan francés", especificaciones="Hornear 20 min")
        harina = Insumo.objects.create(nombre="Harina", unidad_base=UnidadMedida.objects.get(codigo="kg"))
        LineaReceta.objects.create(
            receta=receta,
            posicion=1,
            insumo=harina,
            cantidad=Decimal("2.5"),
            unidad=UnidadMedida.objects.get(codigo="kg"),
        )
        self.pan = Producto.objects.create(nombre="Pan francés", receta=receta)
        self.torta = Producto.objects.create(nombre="Torta")

    def test_generar_numero_pedido_usa_respaldo_si_falla_la_consulta(self):
        with patch("produccion.services.Produccion.objects.filter", side_effect=DatabaseError("caida")):
            numero = generar_numero_pedido()
        self.assertRegex(numero, r"^P-\d{3}$")

    def test_generar_numero_pedido_compara_numericamente(self):
        for codigo in ("P-002", "P-999", "P-1000", "P-XYZ", "OTRO-5000"):
            Produccion.objects.create(tipo_produccion="pedido", nombre=codigo, numero_pedido=codigo)
        self.assertEqual(generar_numero_pedido(), "P-1001")

    def test_generar_numero_pedido_sin_pedidos(self):
        Produccion.objects.create(tipo_produccion="fabrica", nombre="Corrida")
        self.assertEqual(generar_numero_pedido(), "P-001")

    def test_indice_sedes_activas_por_nombre_e_id(self):
        indice = indice_sedes_activas()
        self.assertEqual(indice["sedea"], self.sede_a)
        self.assertEqual(indice[str(self.sede_b.id)], self.sede_b)
        self.assertNotIn("cerrada", indice)

    def test_construir_lineas_fabrica_reparte_por_sede(self):
        lineas = construir_lineas(
            Produccion.TIPO_FABRICA,
            [{"id": self.pan.id, "cantidades_por_sede": {"SedeA": 5, "sedeb": 3, "SedeA ": 0}}],
            indice_sedes_activas(),
        )
        self.assertEqual(len(lineas), 2)
        self.assertEqual(sum(linea.cantidad for linea in lineas), Decimal("8"))

    def test_construir_lineas_reparto_vacio_no_genera_lineas(self):
        lineas = construir_lineas(
            Produccion.TIPO_FABRICA,
            [{"id": self.pan.id, "cantidades_por_sede": {}}],
            indice_sedes_activas(),
        )
        self.assertEqual(lineas, [])

    def test_construir_lineas_pedido_cantidad_por_defecto(self):
        lineas = construir_lineas(Produccion.TIPO_PEDIDO, [{"id": self.torta.id}], indice_sedes_activas())
        self.assertEqual(len(lineas), 1)
        self.assertEqual(lineas[0].cantidad, Decimal("1"))
        self.assertIsNone(lineas[0].sede)

    def test_construir_lineas_rechaza_sede_inactiva(self):
        with self.assertRaises(ProduccionInvalida):
            construir_lineas(
                Produccion.TIPO_FABRICA,
                [{"id": self.pan.id, "cantidades_por_sede": {"Cerrada": 2}}],
                indice_sedes_activas(),
            )

    def test_crear_produccion_fabrica(self):
        produccion = crear_produccion(
            tipo_produccion="FABRICA",
            nombre="Corrida lunes",
            productos=[{"id": self.pan.id, "cantidades_por_sede": {"SedeA": 5, "SedeB": 3}}],
        )
        self.assertEqual(produccion.tipo_produccion, Produccion.TIPO_FABRICA)
        self.assertIsNone(produccion.numero_pedido)
        self.assertIsNone(produccion.estado_pedido)
        self.assertEqual(produccion.estado_produccion, Produccion.ESTADO_PRODUCCION_PENDIENTE)
        self.assertEqual(DetalleProduccion.objects.filter(produccion=produccion).count(), 2)

        resumen = resumir_detalles(produccion.detalles.select_related("producto__receta", "sede"))
        self.assertEqual(len(resumen), 1)
        self.assertEqual(resumen[0].cantidad_total, Decimal("8"))
        self.assertEqual(resumen[0].cantidades_por_sede, {"SedeA": Decimal("5"), "SedeB": Decimal("3")})
        self.assertEqual(resumen[0].insumos[0].unidad, "kg")

    def test_crear_pedido_asigna_folios_consecutivos(self):
        primero = crear_produccion(tipo_produccion="pedido", nombre="Cliente A", productos=[{"id": self.torta.id}])
        segundo = crear_produccion(tipo_produccion="pedido", nombre="Cliente B", productos=[{"id": self.torta.id}])
        self.assertEqual(primero.numero_pedido, "P-001")
        self.assertEqual(segundo.numero_pedido, "P-002")
        self.assertEqual(primero.estado_produccion, Produccion.ESTADO_PRODUCCION_POR_CONFIRMAR)
        self.assertEqual(primero.estado_pedido, Produccion.ESTADO_PEDIDO_ABIERTO)

    def test_crear_pedido_reintenta_si_el_folio_ya_existe(self):
        Produccion.objects.create(tipo_produccion="pedido", nombre="Previo", numero_pedido="P-001")
        with patch("produccion.services.generar_numero_pedido", side_effect=["P-001", "P-002"]):
            produccion = crear_produccion(tipo_produccion="pedido", nombre="Cliente", productos=[])
        self.assertEqual(produccion.numero_pedido, "P-002")

    def test_crear_produccion_producto_inexistente(self):
        with self.assertRaises(ProduccionInvalida):
            crear_produccion(tipo_produccion="pedido", nombre="Cliente", productos=[{"id": 99999}])
        self.assertFalse(Produccion.objects.exists())

    def test_tipo_invalido(self):
        with self.assertRaises(ProduccionInvalida):
            crear_produccion(tipo_produccion="mayorista", nombre="X")

    def test_actualizar_encabezado(self):
        pedido = crear_produccion(tipo_produccion="pedido", nombre="Cliente", productos=[])
        cambios = actualizar_encabezado(
            pedido, {"nombre": " Cliente VIP ", "estado_pedido": Produccion.ESTADO_PEDIDO_ENTREGADO}
        )
        pedido.refresh_from_db()
        self.assertEqual(pedido.nombre, "Cliente VIP")
        self.assertEqual(set(cambios), {"nombre", "estado_pedido"})

        fabrica = crear_produccion(tipo_produccion="fabrica", nombre="Corrida", productos=[])
        with self.assertRaises(ProduccionInvalida):
            actualizar_encabezado(fabrica, {"estado_pedido": Produccion.ESTADO_PEDIDO_ABIERTO})
