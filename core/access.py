from django.contrib.auth.models import AbstractBaseUser

ROLE_DG = "DG"
ROLE_ADMIN = "ADMIN"
ROLE_PRODUCCION = "PRODUCCION"
ROLE_VENTAS = "VENTAS"
ROLE_LECTURA = "LECTURA"


def _group_names(user: AbstractBaseUser) -> set[str]:
    if not user or not user.is_authenticated:
        return set()
    return set(user.groups.values_list("name", flat=True))


def has_any_role(user: AbstractBaseUser, *roles: str) -> bool:
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    return bool(_group_names(user).intersection(set(roles)))


def can_view_sedes(user: AbstractBaseUser) -> bool:
    return has_any_role(user, ROLE_DG, ROLE_ADMIN, ROLE_PRODUCCION, ROLE_VENTAS, ROLE_LECTURA)


def can_manage_sedes(user: AbstractBaseUser) -> bool:
    return has_any_role(user, ROLE_DG, ROLE_ADMIN)


def can_view_produccion(user: AbstractBaseUser) -> bool:
    return has_any_role(user, ROLE_DG, ROLE_ADMIN, ROLE_PRODUCCION, ROLE_VENTAS, ROLE_LECTURA)


def can_manage_produccion(user: AbstractBaseUser) -> bool:
    # Ventas captura pedidos de clientes; Producción arma las corridas de fábrica.
    return has_any_role(user, ROLE_ADMIN, ROLE_PRODUCCION, ROLE_VENTAS)
