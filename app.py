from flask import Flask
from configs import Config, configure_logging, db, login
from dao.storage import get_storage, init_storage
from blueprint import blue_print
from seed_user import register_commands
from utils.errors import Unauthenticated, register_error_handlers


def create_app(test_config: dict | None = None, storage=None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    configure_logging(app.config["LOG_LEVEL"])

    # relational store only when a database URL is configured
    if app.config.get("SQLALCHEMY_DATABASE_URI"):
        db.init_app(app)
    login.init_app(app)
    init_storage(app, storage)

    register_error_handlers(app)
    blue_print(app)
    register_commands(app)
    return app


@login.user_loader
def load_user(user_id):
    return get_storage().get_user(user_id)


@login.unauthorized_handler
def unauthorized():
    raise Unauthenticated()


if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=5000)
