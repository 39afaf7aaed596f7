from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse
from django_htmx.http import HttpResponseClientRedirect

from .api import SessionExpired


class SessionExpiredMiddleware:
    """API token'ı reddettiğinde (401) kullanıcıyı giriş sayfasına gönderir."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not isinstance(exception, SessionExpired):
            return None
        messages.warning(request, "Oturumunuzun süresi doldu. Lütfen tekrar giriş yapın.")
        if getattr(request, "htmx", False):
            return HttpResponseClientRedirect(reverse("login"))
        return redirect("login")
