from functools import wraps
from urllib.parse import urlencode

from django.shortcuts import redirect
from django.urls import reverse

from .session import get_roles, is_authenticated


def session_required(view):
    """Oturum yoksa giriş sayfasına yönlendirir (login_required karşılığı)."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not is_authenticated(request):
            query = urlencode({"next": request.get_full_path()})
            return redirect(f"{reverse('login')}?{query}")
        return view(request, *args, **kwargs)
    return wrapper


def role_required(role: str):
    """Aktif rol listesinde `role` yoksa ana sayfaya yönlendirir."""
    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            if role not in get_roles(request):
                return redirect("home")
            return view(request, *args, **kwargs)
        return wrapper
    return decorator
