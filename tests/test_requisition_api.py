import pytest
from conftest import login, make_material, make_user

from db.models.user import UserRole


def _employee_client(app, email="maria@example.com", password="maria-pass"):
    employee_id = make_user(app, email, UserRole.EMPLOYEE, password, ("Maria", "Silva"))
    client = app.test_client()
    resp = client.post("/api/employee/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return employee_id, client


@pytest.fixture
def stocked_bolt(app, stock_client):
    material_id = make_material(app)
    stock_client.post(
        "/api/stock-movements", json={"materialId": material_id, "type": "INBOUND", "quantity": 50}
    )
    return material_id


def _create(client, employee_id, material_id, quantity=5, note=None):
    return client.post(
        "/api/requisitions",
        json={"employeeId": employee_id, "materialId": material_id, "quantity": quantity, "note": note},
    )


def test_employee_signs_requisition(app, stock_client, stocked_bolt):
    employee_id, employee = _employee_client(app)
    resp = _create(stock_client, employee_id, stocked_bolt, note="for line 3")
    assert resp.status_code == 201
    req = resp.get_json()
    assert req["status"] == "PENDING"

    listed = employee.get("/api/employee/requisitions").get_json()
    assert [r["id"] for r in listed] == [req["id"]]
    assert listed[0]["material"]["code"] == "B-1"
    assert listed[0]["createdBy"]["email"] == "stock@example.com"

    resp = employee.post(
        f"/api/employee/requisitions/{req['id']}/sign",
        headers={"User-Agent": "kiosk-tablet"},
    )
    assert resp.status_code == 200
    signed = resp.get_json()
    assert signed["status"] == "SIGNED"
    assert signed["signedByDevice"] == "kiosk-tablet"
    assert signed["signedAt"] is not None

    assert stock_client.get(f"/api/materials/{stocked_bolt}").get_json()["currentStock"] == 45
    outbound = stock_client.get(f"/api/stock-movements?materialId={stocked_bolt}").get_json()[0]
    assert outbound["type"] == "OUTBOUND"
    assert outbound["quantity"] == 5
    assert outbound["requisitionId"] == req["id"]
    assert outbound["userId"] == employee_id
    assert outbound["note"] == "Requisition signed - for line 3"


def test_second_signature_is_rejected(app, stock_client, stocked_bolt):
    employee_id, employee = _employee_client(app)
    req_id = _create(stock_client, employee_id, stocked_bolt).get_json()["id"]
    assert employee.post(f"/api/employee/requisitions/{req_id}/sign").status_code == 200

    resp = employee.post(f"/api/employee/requisitions/{req_id}/sign")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Requisition already signed"
    assert stock_client.get(f"/api/materials/{stocked_bolt}").get_json()["currentStock"] == 45


def test_employee_cannot_sign_someone_elses(app, stock_client, stocked_bolt):
    owner_id, _ = _employee_client(app)
    _, intruder = _employee_client(app, "joao@example.com", "joao-pass")
    req_id = _create(stock_client, owner_id, stocked_bolt).get_json()["id"]

    assert intruder.post(f"/api/employee/requisitions/{req_id}/sign").status_code == 403
    assert intruder.post("/api/employee/requisitions/missing/sign").status_code == 404
    assert intruder.get("/api/employee/requisitions").get_json() == []


def test_staff_signs_on_behalf(app, admin_client, stocked_bolt):
    employee_id, _ = _employee_client(app)
    req_id = _create(admin_client, employee_id, stocked_bolt).get_json()["id"]
    resp = admin_client.post(f"/api/requisitions/{req_id}/sign")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "SIGNED"

    actions = [(e["action"], e["entityType"]) for e in admin_client.get("/api/audit-logs").get_json()]
    assert actions[0] == ("SIGN", "REQUISITION")
    assert ("CREATE", "REQUISITION") in actions


def test_employee_account_on_general_session_signs_only_own(app, stock_client, stocked_bolt):
    owner_id = make_user(app, "owner@example.com", UserRole.EMPLOYEE, "owner-pass")
    other_id = make_user(app, "other@example.com", UserRole.EMPLOYEE, "other-pass")
    own = _create(stock_client, owner_id, stocked_bolt).get_json()["id"]
    foreign = _create(stock_client, other_id, stocked_bolt).get_json()["id"]

    client = app.test_client()
    login(client, "owner@example.com", "owner-pass")
    assert client.post(f"/api/requisitions/{foreign}/sign").status_code == 403
    assert client.post(f"/api/requisitions/{own}/sign").status_code == 200
    assert [r["id"] for r in client.get("/api/requisitions").get_json()] == [own]


def test_requisition_needs_an_employee(app, stock_client, stocked_bolt):
    staff_id = stock_client.get("/api/auth/user").get_json()["id"]
    resp = _create(stock_client, staff_id, stocked_bolt)
    assert resp.status_code == 400
    assert resp.get_json()["errors"][0]["field"] == "employeeId"


def test_requisition_validation(app, stock_client, stocked_bolt):
    employee_id, _ = _employee_client(app)
    resp = _create(stock_client, employee_id, stocked_bolt, quantity=0)
    assert resp.status_code == 400
    assert _create(stock_client, employee_id, "missing").status_code == 404


def test_cancel_and_update(app, stock_client, stocked_bolt):
    employee_id, employee = _employee_client(app)
    req_id = _create(stock_client, employee_id, stocked_bolt).get_json()["id"]

    resp = stock_client.patch(f"/api/requisitions/{req_id}", json={"quantity": 7})
    assert resp.get_json()["quantity"] == 7

    resp = stock_client.patch(f"/api/requisitions/{req_id}", json={"status": "SIGNED"})
    assert resp.status_code == 400

    resp = stock_client.patch(f"/api/requisitions/{req_id}", json={"status": "CANCELLED"})
    assert resp.get_json()["status"] == "CANCELLED"

    assert employee.post(f"/api/employee/requisitions/{req_id}/sign").status_code == 400
    assert stock_client.patch(f"/api/requisitions/{req_id}", json={"quantity": 1}).status_code == 400
    assert stock_client.get(f"/api/materials/{stocked_bolt}").get_json()["currentStock"] == 50


def test_employees_cannot_edit_requisitions(app, stock_client, stocked_bolt):
    make_user(app, "emp@example.com", UserRole.EMPLOYEE, "emp-pass")
    client = app.test_client()
    login(client, "emp@example.com", "emp-pass")
    employee_id = client.get("/api/auth/user").get_json()["id"]
    req_id = _create(stock_client, employee_id, stocked_bolt).get_json()["id"]

    resp = client.patch(f"/api/requisitions/{req_id}", json={"status": "CANCELLED"})
    assert resp.status_code == 403


def test_details_list_for_staff(app, stock_client, stocked_bolt):
    first, _ = _employee_client(app)
    second, _ = _employee_client(app, "joao@example.com", "joao-pass")
    _create(stock_client, first, stocked_bolt)
    _create(stock_client, second, stocked_bolt)

    details = stock_client.get("/api/requisitions/details").get_json()
    assert [d["employeeId"] for d in details] == [second, first]
    assert all(d["material"]["name"] == "Bolt" for d in details)


def test_oversized_requisition_quantity(app, stock_client, stocked_bolt):
    employee_id, _ = _employee_client(app)
    resp = _create(stock_client, employee_id, stocked_bolt, quantity=2**31)
    assert resp.status_code == 400
    assert stock_client.get("/api/requisitions").get_json() == []
