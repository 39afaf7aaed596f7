from django.urls import path, include
from portal import views as v

urlpatterns = [
    path("", include("portal.urls")),
    path("login/", v.login_view, name="login"),
    path("register/", v.register, name="register"),
    path("logout/", v.logout_view, name="logout"),
]
