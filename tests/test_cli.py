from dao.storage import get_storage
from db.models.user import UserRole
from utils.passwords import verify_password


def test_seed_users_creates_staff(memory_app, monkeypatch):
    monkeypatch.setenv("SEED_ADMIN_PASSWORD", "admin-secret")
    monkeypatch.setenv("SEED_STOCK_PASSWORD", "stock-secret")
    runner = memory_app.test_cli_runner()

    result = runner.invoke(args=["seed-users"])
    assert result.exit_code == 0, result.output
    assert "created admin@example.com" in result.output

    with memory_app.app_context():
        admin = get_storage().get_user_by_email("admin@example.com")
        assert admin.role == UserRole.ADMIN
        assert verify_password("admin-secret", admin.password_hash)

    result = runner.invoke(args=["seed-users"])
    assert "nothing to do" in result.output


def test_seed_users_requires_passwords(memory_app, monkeypatch):
    monkeypatch.delenv("SEED_ADMIN_PASSWORD", raising=False)
    result = memory_app.test_cli_runner().invoke(args=["seed-users"])
    assert result.exit_code != 0
    assert "SEED_ADMIN_PASSWORD" in result.output


def test_init_db_needs_database(memory_app):
    result = memory_app.test_cli_runner().invoke(args=["init-db"])
    assert result.exit_code != 0
    assert "DATABASE_URL" in result.output
