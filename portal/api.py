"""
Uzak Randevu API'si için ince HTTP istemcisi.

Her istek, oturumda token varsa `Authorization: Bearer <token>` başlığıyla
gönderilir. Yeniden deneme yok; hatalar ApiError olarak çağırana döner.
"""
import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"


class ApiError(Exception):
    """Uzak çağrı başarısız oldu (ağ hatası veya 2xx dışı yanıt)."""

    def __init__(self, message: str, status: int | None = None, payload=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload


class SessionExpired(Exception):
    """Sunucu saklanan token'ı reddetti (401); oturum temizlendi."""


def _error_message(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason or ""
    if isinstance(body, str):
        return body
    if isinstance(body, dict):
        return str(body.get("message") or body.get("title") or "")
    if isinstance(body, list):
        # Identity hataları: [{"code": ..., "description": ...}]
        return " ".join(str(e.get("description", "")) for e in body if isinstance(e, dict)).strip()
    return ""


class ApiClient:
    def __init__(self, base_url: str, token: str | None = None, timeout: float = 10, on_unauthorized=None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.on_unauthorized = on_unauthorized
        self.http = requests.Session()

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, path: str, *, params=None, json=None):
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.http.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("API %s %s failed: %s", method, path, exc)
            raise ApiError(str(exc)) from exc

        if response.status_code == 401 and self.token:
            logger.info("API %s %s rejected the stored token", method, path)
            if self.on_unauthorized:
                self.on_unauthorized()
            raise SessionExpired(path)

        if not response.ok:
            message = _error_message(response)
            logger.warning("API %s %s -> %s %s", method, path, response.status_code, message)
            raise ApiError(message, status=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def get(self, path: str, params=None):
        return self.request("GET", path, params=params)

    def post(self, path: str, json=None):
        return self.request("POST", path, json=json)

    def put(self, path: str, json=None):
        return self.request("PUT", path, json=json)

    def delete(self, path: str):
        return self.request("DELETE", path)


def client_for(request) -> ApiClient:
    """İsteğin oturumundaki token ile yapılandırılmış istemci."""
    from .session import logout

    return ApiClient(
        f"{settings.API_BASE_URL}/api",
        token=request.session.get(TOKEN_KEY),
        timeout=settings.API_TIMEOUT,
        on_unauthorized=lambda: logout(request),
    )
