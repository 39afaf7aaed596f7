import pytest
from django.urls import reverse

pytestmark = pytest.mark.django_db


def test_anonymous_is_sent_to_login_with_next(client):
    response = client.get("/provider/appointments/?tab=past")
    assert response.status_code == 302
    assert response["Location"] == "/login/?next=%2Fprovider%2Fappointments%2F%3Ftab%3Dpast"


def test_missing_role_goes_home(login_as, api):
    client = login_as("User")
    response = client.get(reverse("provider_appointments"))
    assert response.status_code == 302
    assert response["Location"] == reverse("home")


def test_matching_role_renders(login_as, api):
    api.on("GET", "/provider/appointments", [])
    client = login_as("User", "ServiceProvider")
    response = client.get(reverse("provider_appointments"))
    assert response.status_code == 200


def test_session_only_page_renders_for_any_role(login_as, api):
    api.on("GET", "/user/appointments", [])
    response = login_as("Operator").get(reverse("my_appointments"))
    assert response.status_code == 200


@pytest.mark.parametrize("url", ["/admin/", "/admin/roles/", "/admin/confirmation/"])
def test_admin_pages_reject_operator(login_as, api, url):
    response = login_as("Operator").get(url)
    assert response.status_code == 302
    assert response["Location"] == "/"


def test_health_is_public(client):
    response = client.get("/api/health/")
    assert response.json() == {"ok": True}
