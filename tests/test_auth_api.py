from conftest import login, make_user

from dao.storage import get_storage
from db.models.user import UserRole


def test_health_reports_backend(client, app):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["storage"] in {"memory", "database"}


def test_protected_routes_need_a_session(client):
    for path in ("/api/materials", "/api/stock-movements", "/api/requisitions", "/api/dashboard/stats"):
        resp = client.get(path)
        assert resp.status_code == 401, path
        assert resp.get_json() == {"message": "Not authenticated"}


def test_login_with_bad_password(app, client):
    make_user(app, "admin@example.com", UserRole.ADMIN, "right-pass")
    resp = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials"


def test_login_payload_is_validated(client):
    resp = client.post("/api/auth/login", json={"email": "not-an-email"})
    assert resp.status_code == 400
    fields = {e["field"] for e in resp.get_json()["errors"]}
    assert fields == {"email", "password"}


def test_current_user_includes_permissions(admin_client):
    body = admin_client.get("/api/auth/user").get_json()
    assert body["email"] == "admin@example.com"
    assert body["role"] == "ADMIN"
    assert "audit_logs" in body["permissions"]
    assert "passwordHash" not in body


def test_logout_ends_session(admin_client):
    assert admin_client.post("/api/auth/logout").status_code == 200
    assert admin_client.get("/api/auth/user").status_code == 401


def test_audit_logs_are_admin_only(app, admin_client, stock_client):
    assert stock_client.get("/api/audit-logs").status_code == 403
    admin_client.post("/api/materials", json={"name": "Bolt", "code": "B-1", "unit": "un"})
    resp = admin_client.get("/api/audit-logs")
    assert resp.status_code == 200
    (entry,) = resp.get_json()
    assert entry["action"] == "CREATE"
    assert entry["entityType"] == "MATERIAL"
    assert entry["changes"]["code"] == "B-1"


# ---------- employee portal ----------
def _register(client, email="a@x.com", password="secret1", name="Ana Souza"):
    return client.post(
        "/api/employee/register", json={"name": name, "email": email, "password": password}
    )


def test_register_creates_employee(client):
    resp = _register(client)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["role"] == "EMPLOYEE"
    assert body["firstName"] == "Ana"
    assert body["lastName"] == "Souza"
    assert "passwordHash" not in body


def test_register_duplicate_email_case_insensitive(client):
    assert _register(client, email="a@x.com").status_code == 201
    resp = _register(client, email="A@X.com")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Email already registered"


def test_register_validates_fields(client):
    resp = _register(client, email="bad", password="123", name="")
    assert resp.status_code == 400
    fields = {e["field"] for e in resp.get_json()["errors"]}
    assert fields == {"name", "email", "password"}


def test_employee_login_me_logout(client):
    _register(client)
    assert client.get("/api/employee/me").status_code == 401

    resp = client.post("/api/employee/login", json={"email": "A@x.com", "password": "secret1"})
    assert resp.status_code == 200
    assert client.get("/api/employee/me").get_json()["email"] == "a@x.com"

    client.post("/api/employee/logout")
    assert client.get("/api/employee/me").status_code == 401


def test_employee_login_rejects_bad_credentials(app, client):
    _register(client)
    resp = client.post("/api/employee/login", json={"email": "a@x.com", "password": "wrong!"})
    assert resp.status_code == 401
    make_user(app, "admin@example.com", UserRole.ADMIN, "admin-pass")
    resp = client.post(
        "/api/employee/login", json={"email": "admin@example.com", "password": "admin-pass"}
    )
    assert resp.status_code == 401


def test_employee_session_dropped_when_role_changes(app, client):
    user_id = _register(client).get_json()["id"]
    client.post("/api/employee/login", json={"email": "a@x.com", "password": "secret1"})
    with app.app_context():
        get_storage().upsert_user(id=user_id, role=UserRole.STOCK)

    resp = client.get("/api/employee/requisitions")
    assert resp.status_code == 403
    assert client.get("/api/employee/requisitions").status_code == 401


def test_employee_portal_is_separate_from_staff_session(admin_client):
    assert admin_client.get("/api/employee/requisitions").status_code == 401


def test_employee_can_use_general_login(app, client):
    make_user(app, "emp@example.com", UserRole.EMPLOYEE, "emp-pass")
    login(client, "emp@example.com", "emp-pass")
    body = client.get("/api/auth/user").get_json()
    assert body["permissions"] == ["requisitions"]


def test_users_list_filtered_by_role(app, stock_client):
    make_user(app, "emp@example.com", UserRole.EMPLOYEE, name=("Eva", "Lima"))
    everyone = stock_client.get("/api/users").get_json()
    assert [u["email"] for u in everyone] == ["emp@example.com", "stock@example.com"]

    employees = stock_client.get("/api/users?role=EMPLOYEE").get_json()
    assert [u["firstName"] for u in employees] == ["Eva"]
    assert all("passwordHash" not in u for u in everyone)

    assert stock_client.get("/api/users?role=BOSS").status_code == 400


def test_users_list_not_for_employees(app, client):
    make_user(app, "emp@example.com", UserRole.EMPLOYEE, "emp-pass")
    login(client, "emp@example.com", "emp-pass")
    assert client.get("/api/users").status_code == 403
