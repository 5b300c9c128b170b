# fs_core/case_billing/tests/test_case_billing_api.py
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from fs_core.alerts.models import Notification

pytestmark = pytest.mark.django_db

BASE = "/api/v1/case-billing/items/"


def _create(client, case_id, article, **extra):
    payload = {"case_id": str(case_id), "case_type": "business", "article": str(article.id)}
    payload.update(extra)
    return client.post(BASE, payload, format="json")


def test_technician_adds_line_with_customer_price(api_client, technician, article, scenario_b, case_id):
    resp = _create(api_client, case_id, article, customer=str(scenario_b.id), quantity=2)

    assert resp.status_code == 201
    assert resp.data["unit_price"] == "450.00"
    assert resp.data["price_source"] == "customer_list"
    assert resp.data["total_price"] == "900.00"
    assert resp.data["customer_id"] == str(scenario_b.id)
    assert resp.data["added_by_technician_id"] == technician.id
    assert resp.data["added_by_technician_name"] == "Tore Tekniker"
    assert resp.data["status"] == "pending"


def test_client_cannot_choose_the_price(api_client, article, case_id):
    resp = _create(api_client, case_id, article, unit_price="1.00")
    assert resp.status_code == 201
    assert resp.data["unit_price"] == "500.00"


def test_list_and_summary_require_case_key(api_client):
    assert api_client.get(BASE).status_code == 400
    assert api_client.get(f"{BASE}summary/", {"case_id": "x", "case_type": "private"}).status_code == 400


def test_list_update_summary_delete(api_client, article, case_id):
    line_id = _create(api_client, case_id, article, quantity=2).data["id"]
    params = {"case_id": str(case_id), "case_type": "business"}

    resp = api_client.get(BASE, params)
    assert resp.status_code == 200
    assert [line["id"] for line in resp.data] == [line_id]

    resp = api_client.patch(f"{BASE}{line_id}/", {"discount_percent": "10"}, format="json")
    assert resp.status_code == 200
    assert resp.data["total_price"] == "900.00"
    assert resp.data["requires_approval"] is True

    resp = api_client.get(f"{BASE}summary/", params)
    assert resp.status_code == 200
    assert resp.data == {
        "item_count": 1,
        "subtotal": "900.00",
        "total_discount": "100.00",
        "vat_amount": "225.00",
        "total_amount": "1125.00",
        "requires_approval": True,
    }

    resp = api_client.patch(f"{BASE}{line_id}/", {"quantity": 0}, format="json")
    assert resp.status_code == 400
    assert resp.data["error"]["code"] == "validation_error"

    resp = api_client.delete(f"{BASE}{line_id}/")
    assert resp.status_code == 204
    assert api_client.get(BASE, params).data == []


def test_discount_out_of_range_over_api(api_client, article, case_id):
    resp = _create(api_client, case_id, article, discount_percent="150")
    assert resp.status_code == 400


def test_approval_is_admin_only(api_client, admin_client, admin_user, article, case_id, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        line_id = _create(api_client, case_id, article, discount_percent="10").data["id"]
    assert Notification.objects.filter(recipient=admin_user).count() == 1

    assert api_client.post(f"{BASE}{line_id}/approve/").status_code == 403
    assert api_client.get(f"{BASE}pending-approval/").status_code == 403

    resp = admin_client.get(f"{BASE}pending-approval/")
    assert resp.status_code == 200
    assert [line["id"] for line in resp.data["results"]] == [line_id]

    resp = admin_client.post(f"{BASE}{line_id}/approve/")
    assert resp.status_code == 200
    assert resp.data["status"] == "approved"
    assert resp.data["approved_by_user_id"] == admin_user.id

    resp = admin_client.get(f"{BASE}pending-approval/")
    assert resp.data["results"] == []


def test_discount_notification_names_the_editing_technician(
    api_client, admin_user, article, case_id, django_capture_on_commit_callbacks
):
    line_id = _create(api_client, case_id, article).data["id"]

    User = get_user_model()
    bo = User.objects.create_user(username="bo", password="testpass", first_name="Bo", last_name="Bengtsson")
    bo_client = APIClient()
    bo_client.force_authenticate(user=bo)

    with django_capture_on_commit_callbacks(execute=True):
        resp = bo_client.patch(f"{BASE}{line_id}/", {"discount_percent": "10"}, format="json")
    assert resp.status_code == 200
    assert resp.data["added_by_technician_name"] == "Tore Tekniker"

    notif = Notification.objects.get(recipient=admin_user)
    assert "Bo Bengtsson" in notif.body
    assert "Tore Tekniker" not in notif.body
    assert notif.meta["technician_id"] == bo.id


def test_status_changes(api_client, admin_client, article, case_id):
    line_id = _create(api_client, case_id, article, discount_percent="10").data["id"]

    assert api_client.post(f"{BASE}{line_id}/status/", {"status": "billed"}, format="json").status_code == 403

    resp = admin_client.post(f"{BASE}{line_id}/status/", {"status": "billed"}, format="json")
    assert resp.status_code == 409
    assert resp.data["error"]["details"] == {"reason": "invalid_transition"}

    resp = admin_client.post(
        f"{BASE}case-status/",
        {"case_id": str(case_id), "case_type": "business", "status": "cancelled"},
        format="json",
    )
    assert resp.status_code == 200
    assert resp.data == {"updated": 1}

    resp = api_client.patch(f"{BASE}{line_id}/", {"quantity": 3}, format="json")
    assert resp.status_code == 409
    assert resp.data["error"]["details"] == {"reason": "line_locked"}
