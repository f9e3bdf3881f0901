from django.http import HttpRequest, JsonResponse


def health_check(_request: HttpRequest) -> JsonResponse:
    return JsonResponse({"status": "ok"})
