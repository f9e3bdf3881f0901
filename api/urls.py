from django.urls import path

from .produccion_views import ProduccionDetailView, ProduccionesView
from .sedes_views import SedeDetailView, SedesView
from .views import ApiAuthTokenView

urlpatterns = [
    path("auth/token/", ApiAuthTokenView.as_view(), name="api_auth_token"),
    path("sedes/", SedesView.as_view(), name="api_sedes"),
    path("sedes/<int:sede_id>/", SedeDetailView.as_view(), name="api_sede_detalle"),
    path("producciones/", ProduccionesView.as_view(), name="api_producciones"),
    path("producciones/<int:produccion_id>/", ProduccionDetailView.as_view(), name="api_produccion_detalle"),
]
