import json
import logging

from .api import TOKEN_KEY, client_for

logger = logging.getLogger(__name__)

EMAIL_KEY = "email"
ROLES_KEY = "roles"

ADMIN = "Admin"
OPERATOR = "Operator"
PROVIDER = "ServiceProvider"
USER = "User"
ROLES = (ADMIN, OPERATOR, PROVIDER, USER)


def login(request, email: str, password: str, recaptcha_token: str = "") -> dict:
    logout(request)
    data = client_for(request).post("/auth/login", json={
        "email": email,
        "password": password,
        "recaptchaToken": recaptcha_token,
    }) or {}
    roles = list(data.get("roles") or [])
    # token yalnızca yeni bir oturum anahtarına yazılır
    request.session.cycle_key()
    request.session[TOKEN_KEY] = data.get("token", "")
    request.session[EMAIL_KEY] = data.get("email", email)
    request.session[ROLES_KEY] = json.dumps(roles)
    logger.info("Logged in %s with roles %s", request.session[EMAIL_KEY], roles)
    return {"token": request.session[TOKEN_KEY], "email": request.session[EMAIL_KEY], "roles": roles}


def register(request, email: str, password: str, full_name: str | None = None, recaptcha_token: str = ""):
    client_for(request).post("/auth/register", json={
        "email": email,
        "password": password,
        "fullName": full_name,
        "recaptchaToken": recaptcha_token,
    })


def logout(request, flush: bool = False):
    """Oturum üçlüsünü siler; `flush` ile tüm oturum atılır ve anahtar yenilenir."""
    if request.session.get(TOKEN_KEY):
        logger.info("Logged out %s", request.session.get(EMAIL_KEY, ""))
    if flush:
        request.session.flush()
        return
    for key in (TOKEN_KEY, EMAIL_KEY, ROLES_KEY):
        request.session.pop(key, None)


def is_authenticated(request) -> bool:
    return bool(request.session.get(TOKEN_KEY))


def get_email(request) -> str:
    return request.session.get(EMAIL_KEY) or ""


def get_roles(request) -> list:
    raw = request.session.get(ROLES_KEY)
    if not raw:
        return []
    try:
        roles = json.loads(raw)
    except (TypeError, ValueError):
        return []
    return roles if isinstance(roles, list) else []


def has_role(request, role: str) -> bool:
    return role in get_roles(request)


def landing_url(roles) -> str:
    """Girişten sonra rolüne göre açılacak ilk sayfa."""
    if ADMIN in roles:
        return "/admin/"
    if OPERATOR in roles:
        return "/operator/"
    if PROVIDER in roles:
        return "/provider/appointments/"
    return "/"
