from datetime import datetime, timedelta

from django.conf import settings
from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone
from django.utils.http import url_has_allowed_host_and_scheme, urlencode
from django.views.decorators.http import require_GET, require_POST

from . import session
from .api import ApiError, client_for
from .decorators import role_required, session_required
from .forms import (
    AssignProviderForm, AssignRoleForm, BookingForm, BranchForm, CheckInForm,
    DepartmentForm, LoginForm, ProfileForm, ProviderNoteForm, RegisterForm,
    SessionDurationForm, SessionStartForm, VisitSessionForm, WalkInForm,
)
from .schedule import (
    DAY_LABELS, DAY_ORDER, PERIODS, appointment_start, checked_in_order, count_waiting,
    default_hours, filter_waiting, hhmm, hourly_distribution, match_name,
    partition_appointments, validate_time_ranges,
)
from .session import ADMIN, OPERATOR, PROVIDER

PROFILE_INCOMPLETE = "Profilinizdeki gerekli bilgileri tamamlayın"

# ───────────────────────────────────────────────────────────────────────────────
# Healthcheck
# ───────────────────────────────────────────────────────────────────────────────

@require_GET
def health(_request):
    return JsonResponse({"ok": True})

# ───────────────────────────────────────────────────────────────────────────────
# Helpers
# ───────────────────────────────────────────────────────────────────────────────

def _now() -> datetime:
    """Yerel saat, naive (API tarih/saatleriyle karşılaştırmak için)."""
    return timezone.localtime().replace(tzinfo=None)


def _int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _fail(request, exc: ApiError, fallback: str):
    messages.error(request, exc.message or fallback)


def _form_errors(request, form):
    for errors in form.errors.values():
        for err in errors:
            messages.error(request, err)


def _send(request, method: str, path: str, body, ok_msg: str, fail_msg: str) -> bool:
    """Tek bir yazma çağrısı; sonucu flash mesajı olarak bildirir."""
    try:
        client_for(request).request(method, path, json=body)
    except ApiError as exc:
        _fail(request, exc, fail_msg)
        return False
    messages.success(request, ok_msg)
    return True


def _back(request, default: str):
    """POST sonrası formun geldiği sayfaya (aynı sorgu parametreleriyle) dön."""
    target = request.POST.get("next") or default
    if not url_has_allowed_host_and_scheme(target, allowed_hosts={request.get_host()}):
        target = default
    return redirect(target)


def _branches(departments) -> list:
    rows = []
    for d in departments or []:
        for b in d.get("branches") or []:
            rows.append({"id": b.get("id"), "name": b.get("name"), "department": d.get("name")})
    return rows


def _slots(data) -> list:
    return [
        {"start": x.get("start") or x.get("Start"), "end": x.get("end") or x.get("End")}
        for x in data or []
    ]


def _load_booking_choices(request, branch_id, provider_id, day) -> dict:
    """Şube → ilgili → tarih → uygun saat zinciri; bir adım başarısızsa sonrakiler boş kalır."""
    api = client_for(request)
    ctx = {"departments": [], "branches": [], "providers": [], "slots": [],
           "branch_id": branch_id, "provider_id": provider_id, "date": day}
    try:
        ctx["departments"] = api.get("/user/departments") or []
    except ApiError:
        messages.error(request, "Departman/şube listesi yüklenemedi.")
        return ctx
    ctx["branches"] = _branches(ctx["departments"])
    if not branch_id:
        return ctx
    try:
        ctx["providers"] = api.get(f"/user/branches/{branch_id}/providers") or []
    except ApiError:
        messages.error(request, "İlgili listesi yüklenemedi.")
        return ctx
    if provider_id and day:
        try:
            ctx["slots"] = _slots(api.get(f"/user/providers/{provider_id}/slots", params={"date": day}))
        except ApiError:
            messages.error(request, "Uygun saatler yüklenemedi.")
    return ctx

# ───────────────────────────────────────────────────────────────────────────────
# Auth
# ───────────────────────────────────────────────────────────────────────────────

def login_view(request):
    form = LoginForm(request.POST or None)
    next_url = request.POST.get("next") or request.GET.get("next", "")
    if request.method == "POST" and form.is_valid():
        try:
            data = session.login(
                request,
                form.cleaned_data["email"].strip(),
                form.cleaned_data["password"],
                request.POST.get("g-recaptcha-response", ""),
            )
        except ApiError as exc:
            msg = exc.message if exc.status == 400 else ""
            messages.error(request, msg or "Giriş başarısız. Email veya şifrenizi kontrol ediniz.")
            form.add_error("password", "E-posta veya şifre hatalı.")
        else:
            if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
                return redirect(next_url)
            return redirect(session.landing_url(data["roles"]))
    return render(request, "auth/login.html", {"form": form, "next": next_url})


def register(request):
    form = RegisterForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        d = form.cleaned_data
        try:
            session.register(
                request, d["email"].strip(), d["password"], d["full_name"].strip(),
                request.POST.get("g-recaptcha-response", ""),
            )
        except ApiError as exc:
            _fail(request, exc, "Kayıt başarısız. Lütfen bilgilerinizi kontrol ediniz.")
        else:
            messages.success(request, "Kayıt başarılı! Giriş yapabilirsiniz.")
            return redirect("login")
    return render(request, "auth/register.html", {"form": form})


def logout_view(request):
    session.logout(request, flush=True)
    return redirect("login")

# ───────────────────────────────────────────────────────────────────────────────
# User: randevu al / randevularım / profil
# ───────────────────────────────────────────────────────────────────────────────

@session_required
def home(request):
    ctx = _load_booking_choices(
        request, _int(request.GET.get("branch")), _int(request.GET.get("provider")), request.GET.get("date", ""),
    )
    ctx.update(today=timezone.localdate().isoformat(), book_url=reverse("book"), next=request.get_full_path())
    return render(request, "user/home.html", ctx)


@session_required
@require_GET
def booking_providers(request):
    """HTMX: seçilen şubenin ilgilileri."""
    branch_id = _int(request.GET.get("branch"))
    providers, error = [], None
    if branch_id:
        try:
            providers = client_for(request).get(f"/user/branches/{branch_id}/providers") or []
        except ApiError:
            error = "İlgili listesi yüklenemedi."
    return render(request, "partials/providers.html", {"providers": providers, "provider_id": None, "error": error})


@session_required
@require_GET
def booking_slots(request):
    """HTMX: ilgili + tarih için uygun saatler."""
    branch_id = _int(request.GET.get("branch"))
    provider_id = _int(request.GET.get("provider"))
    day = request.GET.get("date", "")
    slots, error = [], None
    if provider_id and day:
        try:
            slots = _slots(client_for(request).get(f"/user/providers/{provider_id}/slots", params={"date": day}))
        except ApiError:
            error = "Uygun saatler yüklenemedi."
    back = f"{reverse('home')}?{urlencode({'branch': branch_id or '', 'provider': provider_id or '', 'date': day})}"
    return render(request, "partials/slots.html", {
        "slots": slots, "provider_id": provider_id, "date": day, "error": error,
        "book_url": reverse("book"), "next": back,
    })


@session_required
@require_POST
def book(request):
    form = BookingForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Lütfen ilgili, tarih ve saat seçiniz.")
        return _back(request, reverse("home"))
    try:
        client_for(request).post("/user/appointments", json=form.payload())
    except ApiError as exc:
        if PROFILE_INCOMPLETE in exc.message:
            messages.error(request, exc.message, extra_tags="profile")
        else:
            _fail(request, exc, "Randevu alınamadı")
    else:
        messages.success(request, "Randevunuz başarıyla oluşturuldu! Randevunuzu 'Randevularım' bölümünden görüntüleyebilirsiniz.")
    return _back(request, reverse("home"))


@session_required
def my_appointments(request):
    items = []
    try:
        items = client_for(request).get("/user/appointments") or []
    except ApiError:
        messages.error(request, "Randevular yüklenemedi.")
    upcoming, past = partition_appointments(items, _now())
    tab = request.GET.get("tab", "upcoming")
    rows = {"upcoming": upcoming, "past": past}.get(tab, upcoming + past)
    return render(request, "user/appointments.html", {
        "tab": tab, "rows": rows, "upcoming": upcoming, "past": past,
        "cancellable": {a.get("id") for a in upcoming},
    })


@session_required
@require_POST
def cancel_appointment(request, appt_id: int):
    _send(request, "DELETE", f"/user/appointments/{appt_id}", None,
          "Randevunuz başarıyla iptal edildi.", "Randevu iptal edilemedi.")
    return redirect("my_appointments")


@session_required
def profile(request):
    if request.method == "POST":
        form = ProfileForm(request.POST)
        if form.is_valid() and _send(request, "PUT", "/user/profile", form.payload(),
                                     "Profil güncellendi", "Profil güncellenemedi"):
            return redirect("profile")
        return render(request, "user/profile.html", {"form": form, "email": session.get_email(request)})

    data = {}
    try:
        data = client_for(request).get("/user/profile") or {}
    except ApiError:
        messages.error(request, "Profil yüklenemedi")
    form = ProfileForm(initial=ProfileForm.initial_from(data))
    return render(request, "user/profile.html", {"form": form, "email": data.get("email") or session.get_email(request)})


@session_required
def my_sessions(request):
    items = []
    try:
        items = client_for(request).get("/user/sessions") or []
    except ApiError:
        messages.error(request, "Görüşme geçmişi yüklenemedi.")
    return render(request, "user/sessions.html", {"sessions": items})


@session_required
def my_session_detail(request, session_id: int):
    try:
        detail = client_for(request).get(f"/user/sessions/{session_id}") or {}
    except ApiError:
        messages.error(request, "Görüşme detayı yüklenemedi.")
        return redirect("my_sessions")
    return render(request, "user/session_detail.html", {"s": detail})

# ───────────────────────────────────────────────────────────────────────────────
# Service provider
# ───────────────────────────────────────────────────────────────────────────────

def _merge_hours(loaded) -> list:
    hours = {h["dayOfWeek"]: h for h in default_hours()}
    for h in loaded or []:
        if h.get("dayOfWeek") in hours:
            hours[h["dayOfWeek"]] = {
                "dayOfWeek": h["dayOfWeek"],
                "startTime": hhmm(h.get("startTime")),
                "endTime": hhmm(h.get("endTime")),
            }
    return [hours[d] for d in DAY_ORDER]


def _hours_from_post(post) -> list:
    return [
        {"dayOfWeek": d, "startTime": post.get(f"start_{d}", ""), "endTime": post.get(f"end_{d}", "")}
        for d in DAY_ORDER
        if post.get(f"on_{d}")
    ]


def _breaks_from_post(post) -> list:
    rows = zip(post.getlist("break_day"), post.getlist("break_start"), post.getlist("break_end"))
    return [
        {"dayOfWeek": _int(day), "startTime": start, "endTime": end}
        for day, start, end in rows
        if _int(day) in DAY_LABELS and (start or end)
    ]


def _save_ranges(request, action: str):
    if action == "hours":
        entries = _hours_from_post(request.POST)
        path, label = "/provider/working-hours", "Çalışma saatleri"
    else:
        entries = _breaks_from_post(request.POST)
        path, label = "/provider/breaks", "Molalar"
    errors = validate_time_ranges(entries)
    if action == "hours" and not entries:
        errors.append("En az bir çalışma günü seçiniz.")
    for err in errors:
        messages.error(request, err)
    if errors:
        return
    body = [{**e, "startTime": hhmm(e["startTime"]), "endTime": hhmm(e["endTime"])} for e in entries]
    _send(request, "POST", path, body, f"{label} kaydedildi.", f"{label} kaydedilemedi.")


@session_required
@role_required(PROVIDER)
def provider_parameters(request):
    if request.method == "POST":
        action = request.POST.get("action")
        if action == "session":
            form = SessionDurationForm(request.POST)
            if form.is_valid():
                _send(request, "POST", f"/provider/session-duration/{form.cleaned_data['minutes']}", None,
                      "Seans süresi kaydedildi.", "Seans süresi kaydedilemedi.")
            else:
                _form_errors(request, form)
        elif action in ("hours", "breaks"):
            _save_ranges(request, action)
        return redirect("provider_parameters")

    params = {}
    try:
        params = client_for(request).get("/provider/parameters") or {}
    except ApiError:
        messages.error(request, "Parametreler yüklenemedi. Varsayılan değerler kullanılıyor.")

    reset = request.GET.get("reset")
    hours = _merge_hours(params.get("workingHours"))
    breaks = [
        {"dayOfWeek": b.get("dayOfWeek"), "startTime": hhmm(b.get("startTime")), "endTime": hhmm(b.get("endTime"))}
        for b in params.get("breaks") or []
    ]
    if reset == "hours":
        hours = default_hours()
        messages.info(request, "Çalışma saatleri varsayana döndürüldü (09:00–17:00). Kaydetmeyi unutmayın.")
    elif reset == "breaks":
        breaks = []
        messages.info(request, "Molalar varsayana döndürüldü. Kaydetmeyi unutmayın.")

    configured = {h.get("dayOfWeek") for h in params.get("workingHours") or []}
    for h in hours:
        h["label"] = DAY_LABELS[h["dayOfWeek"]]
        h["enabled"] = not configured or reset == "hours" or h["dayOfWeek"] in configured

    return render(request, "provider/parameters.html", {
        "session_minutes": params.get("sessionDurationMinutes") or 30,
        "hours": hours,
        "breaks": breaks,
        "days": [(d, DAY_LABELS[d]) for d in DAY_ORDER],
    })


@session_required
@role_required(PROVIDER)
def provider_appointments(request):
    items = []
    try:
        items = client_for(request).get("/provider/appointments") or []
    except ApiError:
        messages.error(request, "Randevular yüklenemedi.")
    q = request.GET.get("q", "")
    upcoming, past = partition_appointments([a for a in items if match_name(a, q)], _now())
    past.reverse()
    tab = request.GET.get("tab", "upcoming")
    return render(request, "provider/appointments.html", {
        "tab": tab, "q": q, "upcoming": upcoming, "past": past,
        "rows": past if tab == "past" else upcoming,
    })


@session_required
@role_required(PROVIDER)
@require_POST
def provider_note(request):
    form = ProviderNoteForm(request.POST)
    if form.is_valid():
        _send(request, "POST", "/provider/appointments/add-note", {
            "appointmentId": form.cleaned_data["appointment_id"],
            "providerNotes": form.cleaned_data["provider_notes"],
        }, "Not kaydedildi.", "Not kaydedilemedi.")
    else:
        _form_errors(request, form)
    return _back(request, reverse("provider_appointments"))


@session_required
@role_required(PROVIDER)
def provider_waiting(request):
    period = request.GET.get("period", "today")
    if period not in PERIODS:
        period = "today"
    q = request.GET.get("q", "")
    auto = request.GET.get("auto", "1") == "1"

    items, error = [], None
    try:
        items = client_for(request).get("/provider/waiting") or []
    except ApiError:
        error = "Bekleyen kullanıcılar yüklenemedi."

    now = _now()
    ctx = {
        "period": period, "q": q, "auto": auto, "error": error,
        "rows": filter_waiting(items, period, now, q),
        "counts": count_waiting(items, now),
        "last_updated": timezone.localtime(),
        "refresh_seconds": settings.WAITING_REFRESH_SECONDS,
        "poll_url": f"{reverse('provider_waiting')}?{urlencode({'period': period, 'q': q, 'auto': '1'})}",
    }
    if request.htmx:
        return render(request, "partials/waiting_list.html", ctx)
    return render(request, "provider/waiting.html", ctx)

# ───────────────────────────────────────────────────────────────────────────────
# Service provider: görüşmeler
# ───────────────────────────────────────────────────────────────────────────────

SESSION_IN_PROGRESS, SESSION_COMPLETED, SESSION_CANCELLED, SESSION_NO_SHOW = 0, 1, 2, 3
SESSION_STATUS_LABELS = {
    SESSION_IN_PROGRESS: "Devam ediyor",
    SESSION_COMPLETED: "Tamamlandı",
    SESSION_CANCELLED: "İptal edildi",
    SESSION_NO_SHOW: "Gelmedi",
}
SESSION_TABS = {"in_progress": SESSION_IN_PROGRESS, "completed": SESSION_COMPLETED}


def _with_status(item: dict) -> dict:
    return {**item, "status_label": SESSION_STATUS_LABELS.get(item.get("status"), "-"),
            "editable": item.get("status") == SESSION_IN_PROGRESS}


@session_required
@role_required(PROVIDER)
@require_POST
def provider_session_start(request):
    form = SessionStartForm(request.POST)
    if form.is_valid():
        _send(request, "POST", "/provider/sessions/start", {
            "appointmentId": form.cleaned_data["appointment_id"],
            "summary": form.cleaned_data["summary"],
        }, "Görüşme başarıyla başlatıldı!", "Görüşme başlatılamadı")
    else:
        _form_errors(request, form)
    return _back(request, reverse("provider_appointments"))


@session_required
@role_required(PROVIDER)
def provider_sessions(request):
    items = []
    try:
        items = client_for(request).get("/provider/sessions") or []
    except ApiError:
        messages.error(request, "Görüşmeler yüklenemedi.")
    tab = request.GET.get("tab", "all")
    q = request.GET.get("q", "")
    counts = {name: sum(1 for s in items if s.get("status") == status) for name, status in SESSION_TABS.items()}
    counts["all"] = len(items)
    if tab in SESSION_TABS:
        items = [s for s in items if s.get("status") == SESSION_TABS[tab]]
    rows = [_with_status(s) for s in items if match_name(s, q, "userName", "summary")]
    return render(request, "provider/sessions.html", {"tab": tab, "q": q, "rows": rows, "counts": counts})


@session_required
@role_required(PROVIDER)
def provider_session_detail(request, session_id: int):
    path = f"/provider/sessions/{session_id}"
    if request.method == "POST":
        action = request.POST.get("action")
        if action == "cancel":
            if _send(request, "POST", f"{path}/cancel", None, "Görüşme iptal edildi!", "Görüşme iptal edilemedi."):
                return redirect("provider_sessions")
            return redirect("provider_session_detail", session_id=session_id)
        form = VisitSessionForm(request.POST)
        if not form.is_valid():
            _form_errors(request, form)
            return redirect("provider_session_detail", session_id=session_id)
        if action == "complete":
            if _send(request, "POST", f"{path}/complete", form.payload(),
                     "Görüşme tamamlandı!", "Görüşme tamamlanamadı."):
                return redirect("provider_sessions")
        else:
            _send(request, "PUT", path, form.payload(), "Görüşme güncellendi!", "Görüşme güncellenemedi.")
        return redirect("provider_session_detail", session_id=session_id)

    try:
        detail = client_for(request).get(path) or {}
    except ApiError:
        messages.error(request, "Görüşme detayı yüklenemedi.")
        return redirect("provider_sessions")
    return render(request, "provider/session_detail.html", {
        "s": _with_status(detail),
        "form": VisitSessionForm(initial=VisitSessionForm.initial_from(detail)),
    })

# ───────────────────────────────────────────────────────────────────────────────
# Admin
# ───────────────────────────────────────────────────────────────────────────────

def _role_counts(users) -> dict:
    counts = {"Admin": 0, "Operator": 0, "ServiceProvider": 0, "User": 0, "Other": 0}
    for u in users:
        roles = u.get("roles") or []
        if not roles:
            counts["Other"] += 1
        for r in roles:
            counts[r if r in counts else "Other"] += 1
    return counts


@session_required
@role_required(ADMIN)
def admin_dashboard(request):
    api = client_for(request)
    departments, users = [], []
    try:
        departments = api.get("/user/departments") or []
        users = api.get("/admin/users") or []
    except ApiError:
        messages.error(request, "Özet verileri yüklenemedi.")
    ranked = sorted(departments, key=lambda d: len(d.get("branches") or []), reverse=True)
    show_all = request.GET.get("all") == "1"
    return render(request, "admin/dashboard.html", {
        "total_departments": len(departments),
        "total_branches": sum(len(d.get("branches") or []) for d in departments),
        "total_users": len(users),
        "role_counts": _role_counts(users),
        "top_departments": [{**d, "branch_count": len(d.get("branches") or [])} for d in ranked[:5]],
        "recent_users": users[:5],
        "departments": departments if show_all else departments[:10],
        "show_all": show_all,
        "has_more": len(departments) > 10,
    })


@session_required
@role_required(ADMIN)
def admin_departments(request):
    if request.method == "POST":
        if request.POST.get("action") == "branch":
            form = BranchForm(request.POST)
            if form.is_valid():
                dep_id = form.cleaned_data["department_id"]
                _send(request, "POST", f"/admin/departments/{dep_id}/branches", {"name": form.cleaned_data["name"]},
                      "Şube eklendi.", "Şube eklenemedi.")
                return redirect(f"{reverse('admin_departments')}?department={dep_id}")
        else:
            form = DepartmentForm(request.POST)
            if form.is_valid():
                _send(request, "POST", "/admin/departments", {"name": form.cleaned_data["name"]},
                      "Departman eklendi.", "Departman eklenemedi.")
                return redirect("admin_departments")
        _form_errors(request, form)
        return redirect("admin_departments")

    departments = []
    try:
        departments = client_for(request).get("/user/departments") or []
    except ApiError:
        messages.error(request, "Departmanlar yüklenemedi.")
    selected_id = _int(request.GET.get("department"))
    selected = next((d for d in departments if d.get("id") == selected_id), None)
    return render(request, "admin/departments.html", {"departments": departments, "selected": selected})


@session_required
@role_required(ADMIN)
def admin_roles(request):
    if request.method == "POST":
        if request.POST.get("action") == "provider":
            form = AssignProviderForm(request.POST)
            if form.is_valid():
                d = form.cleaned_data
                _send(request, "POST", "/admin/assign-provider", {"userId": d["user_id"], "branchId": d["branch_id"]},
                      "İlgili şubeye atandı.", "İlgili atanamadı.")
        else:
            form = AssignRoleForm(request.POST)
            if form.is_valid():
                d = form.cleaned_data
                _send(request, "POST", "/admin/assign-role", {"userId": d["user_id"], "role": d["role"]},
                      "Rol atandı.", "Rol atanamadı.")
        _form_errors(request, form)
        return _back(request, reverse("admin_roles"))

    api = client_for(request)
    departments, users = [], []
    try:
        departments = api.get("/user/departments") or []
        users = api.get("/admin/users") or []
    except ApiError:
        messages.error(request, "Kullanıcılar yüklenemedi.")
    q = request.GET.get("q", "")
    return render(request, "admin/roles.html", {
        "q": q,
        "users": [u for u in users if match_name(u, q, "fullName", "email")],
        "all_users": users,
        "branches": _branches(departments),
        "roles": session.ROLES,
    })

# ───────────────────────────────────────────────────────────────────────────────
# Randevu onay masası (Admin + Operator ortak)
# ───────────────────────────────────────────────────────────────────────────────

DESKS = {
    "admin": {"prefix": "/admin", "page": "admin_confirmation", "title": "Randevu Onayı"},
    "operator": {"prefix": "/operator", "page": "operator_home", "title": "Randevu İşlemleri"},
}


def _desk_users(request, desk: str, query: str) -> list:
    api = client_for(request)
    if desk == "operator":
        return api.get("/operator/users", params={"q": query}) or []
    return [u for u in api.get("/admin/users") or [] if match_name(u, query, "fullName", "email")]


def _desk_page(request, desk: str):
    cfg = DESKS[desk]
    tab = request.GET.get("tab", "approvals")
    ctx = {"desk": desk, "title": cfg["title"], "tab": tab,
           "page_url": reverse(cfg["page"]), "book_url": reverse(f"{desk}_book"),
           "checkin_url": reverse(f"{desk}_check_in"), "next": request.get_full_path()}

    if tab == "create":
        user_q = request.GET.get("user_q", "")
        ctx.update(_load_booking_choices(
            request, _int(request.GET.get("branch")), _int(request.GET.get("provider")), request.GET.get("date", ""),
        ))
        users = []
        try:
            users = _desk_users(request, desk, user_q)
        except ApiError:
            messages.error(request, "Kullanıcılar yüklenemedi")
        ctx.update(users=users, user_q=user_q, selected_user=request.GET.get("user", ""),
                   today=timezone.localdate().isoformat())
        return render(request, "desk/appointments.html", ctx)

    name = request.GET.get("name", "")
    day = request.GET.get("date", "")
    items = []
    try:
        items = client_for(request).get(f"{cfg['prefix']}/appointments/search", params={"name": name, "date": day}) or []
    except ApiError:
        messages.error(request, "Randevular yüklenemedi")
    ctx.update(name=name, search_date=day, items=items)
    return render(request, "desk/appointments.html", ctx)


def _desk_check_in(request, desk: str):
    form = CheckInForm(request.POST)
    if form.is_valid():
        _send(request, "POST", f"{DESKS[desk]['prefix']}/appointments/check-in",
              {"appointmentId": form.cleaned_data["appointment_id"]},
              "Randevu onaylandı", "Onaylama başarısız")
    else:
        messages.error(request, "Geçersiz randevu")
    return _back(request, reverse(DESKS[desk]["page"]))


def _desk_book(request, desk: str):
    form = BookingForm(request.POST)
    if not form.is_valid() or not form.cleaned_data.get("user_id"):
        messages.error(request, "Lütfen kullanıcı, ilgili, tarih ve saat seçiniz.")
    else:
        _send(request, "POST", f"{DESKS[desk]['prefix']}/appointments", form.payload(with_user=True),
              "Randevu oluşturuldu", "Randevu oluşturulamadı")
    return _back(request, reverse(DESKS[desk]["page"]))


@session_required
@role_required(ADMIN)
def admin_confirmation(request):
    return _desk_page(request, "admin")


@session_required
@role_required(ADMIN)
@require_POST
def admin_check_in(request):
    return _desk_check_in(request, "admin")


@session_required
@role_required(ADMIN)
@require_POST
def admin_book(request):
    return _desk_book(request, "admin")

# ───────────────────────────────────────────────────────────────────────────────
# Operator
# ───────────────────────────────────────────────────────────────────────────────

@session_required
@role_required(OPERATOR)
def operator_home(request):
    return _desk_page(request, "operator")


@session_required
@role_required(OPERATOR)
@require_POST
def operator_check_in(request):
    return _desk_check_in(request, "operator")


@session_required
@role_required(OPERATOR)
@require_POST
def operator_book(request):
    return _desk_book(request, "operator")


@session_required
@role_required(OPERATOR)
def operator_dashboard(request):
    today = timezone.localdate()
    items, error = [], None
    try:
        items = client_for(request).get("/operator/appointments/search", params={"date": today.isoformat()}) or []
    except ApiError:
        error = "Dashboard verileri yüklenemedi"
    now = _now()
    checked_in = [a for a in items if a.get("checkedInAt")]
    pending = sorted((a for a in items if not a.get("checkedInAt")), key=appointment_start)
    return render(request, "operator/dashboard.html", {
        "error": error,
        "today": today,
        "total": len(items),
        "checked_in_count": len(checked_in),
        "pending_count": len(pending),
        "hourly": hourly_distribution(items),
        "recent_check_ins": sorted(checked_in, key=checked_in_order, reverse=True)[:5],
        "next_up": [a for a in pending if now <= appointment_start(a) <= now + timedelta(hours=1)],
    })


@session_required
@role_required(OPERATOR)
def operator_walk_in(request):
    branch_id = _int(request.POST.get("branch") or request.GET.get("branch"))
    form = WalkInForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        try:
            data = client_for(request).post("/operator/appointments/walk-in", json=form.payload()) or {}
        except ApiError as exc:
            _fail(request, exc, "Randevu oluşturulamadı")
        else:
            name = data.get("userFullName") or form.cleaned_data["full_name"]
            messages.success(request, f"{name} için walk-in randevu başarıyla oluşturuldu ve onaylandı!")
            if data.get("message"):
                messages.info(request, data["message"])
            return redirect(f"{reverse('operator_walk_in')}?{urlencode({'branch': branch_id or ''})}")
    ctx = _load_booking_choices(request, branch_id, None, "")
    ctx.update(form=form, selected_provider=_int(form["provider_id"].value()))
    return render(request, "operator/walk_in.html", ctx)
