from .admin_controller import admin_bp
from .auth_controller import auth_bp
from .deepwork_controller import deepwork_bp
from .memoirs_controller import memoirs_bp
from .notifications_controller import notifications_bp
from .schedules_controller import schedules_bp
from .summaries_controller import summaries_bp
from .users_controller import users_bp


def register_controllers(app):
    app.register_blueprint(admin_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(deepwork_bp)
    app.register_blueprint(schedules_bp)
    app.register_blueprint(memoirs_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(summaries_bp)
