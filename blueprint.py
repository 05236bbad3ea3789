from index import main_bp
from routes.auth import auth_bp
from routes.material import material_bp
from routes.stock_movement import stock_bp
from routes.requisition import requisition_bp
from routes.employee import employee_bp
from routes.dashboard import dashboard_bp
from routes.audit import audit_bp
from routes.user import user_bp


def blue_print(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(material_bp)
    app.register_blueprint(stock_bp)
    app.register_blueprint(requisition_bp)
    app.register_blueprint(employee_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(audit_bp)
    app.register_blueprint(user_bp)
