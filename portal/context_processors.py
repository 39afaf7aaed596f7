from django.conf import settings

from .session import ADMIN, OPERATOR, PROVIDER, get_email, get_roles, is_authenticated

# (başlık, yol, gerekli rol); rol None ise her oturum açmış kullanıcı görür
NAV_SECTIONS = [
    ("Kullanıcı", None, [
        ("Randevu Al", "/"),
        ("Randevularım", "/my-appointments/"),
        ("Görüşmelerim", "/my-sessions/"),
        ("Profilim", "/profile/"),
    ]),
    ("Yönetim", ADMIN, [
        ("Özet", "/admin/"),
        ("Departmanlar", "/admin/departments/"),
        ("Roller", "/admin/roles/"),
        ("Randevu Onayı", "/admin/confirmation/"),
    ]),
    ("Operatör", OPERATOR, [
        ("Randevular", "/operator/"),
        ("Gösterge Paneli", "/operator/dashboard/"),
        ("Walk-in Kayıt", "/operator/walk-in/"),
    ]),
    ("Hizmet Sağlayıcı", PROVIDER, [
        ("Randevularım", "/provider/appointments/"),
        ("Bekleyenler", "/provider/waiting/"),
        ("Görüşmeler", "/provider/sessions/"),
        ("Parametreler", "/provider/"),
    ]),
]


def _is_active(path: str, href: str) -> bool:
    if href in ("/", "/admin/", "/operator/", "/provider/"):
        return path == href
    return path.startswith(href)


def build_navigation(path: str, roles) -> list:
    sections = []
    for title, role, items in NAV_SECTIONS:
        if role is not None and role not in roles:
            continue
        sections.append({
            "title": title,
            "items": [
                {"label": label, "href": href, "active": _is_active(path, href)}
                for label, href in items
            ],
        })
    return sections


def navigation(request):
    context = {
        "nav_sections": [],
        "session_email": "",
        "session_roles": [],
        "recaptcha_site_key": settings.RECAPTCHA_SITE_KEY,
    }
    if is_authenticated(request):
        roles = get_roles(request)
        context.update(
            nav_sections=build_navigation(request.path, roles),
            session_email=get_email(request),
            session_roles=roles,
        )
    return context
