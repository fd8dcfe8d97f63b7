from flask import Flask, flash, redirect, render_template, url_for
from flask_login import login_required
from flask_wtf.csrf import CSRFError
from .extensions import api, csrf, login_manager


def create_app(config_object="config.Config"):
    """App factory.

    Every page talks to the remote backend through ``extensions.api``;
    the only local state is the auth record in the session cookie.
    """
    app = Flask(__name__)
    app.config.from_object(config_object)

    login_manager.init_app(app)
    csrf.init_app(app)
    api.init_app(app)

    from .services import session_store

    # the session cookie is the source of truth for the logged-in user
    @login_manager.user_loader
    def load_user(user_id):
        user = session_store.current_user_record()
        if user is not None and user.get_id() == user_id:
            return user
        return None

    @login_manager.request_loader
    def load_user_from_request(request):
        return session_store.current_user_record()

    from .blueprints.auth import bp as auth_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")

    from .blueprints.partners import bp as partners_bp
    app.register_blueprint(partners_bp, url_prefix="/partners")

    from .blueprints.cvs import bp as cvs_bp
    app.register_blueprint(cvs_bp, url_prefix="/cvs")

    from .layout import menu_for
    from .services import listing

    app.jinja_env.globals.update(
        row_id=listing.applicant_id,
        field_of=listing.field,
        labor_id=listing.labor_id,
        works_in=listing.works_in,
        age_from_dob=listing.age_from_dob,
        experience_label=listing.experience_label,
        section_of=lambda row, name: (row.get(name) or {}) if isinstance(row.get(name), dict) else {},
    )

    @app.context_processor
    def inject_console_user():
        user = session_store.current_user_record()
        return {
            "console_user": user,
            "nav_menu": menu_for(user.role if user else None) if user else [],
        }

    @app.errorhandler(404)
    def handle_not_found(e):
        flash("That page does not exist.", "warning")
        return redirect(url_for("index"))

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        app.logger.warning("CSRF validation failed: %s", e.description)
        flash("Your form expired. Please try again.", "warning")
        return redirect(url_for("index"))

    @app.get("/")
    @login_required
    def index():
        from .services.api_client import ApiError
        from .services.identifiers import IdentifierResolver
        from .services.metrics import owner_metrics, partner_metrics

        auth = session_store.load()
        if auth.user.is_owner:
            counts, errors = owner_metrics(api)
        else:
            user_id = auth.user.id
            errors = {}
            if user_id is None and auth.user.username:
                try:
                    user_id = IdentifierResolver(api).resolve_user_id(auth.user.username)
                except ApiError as e:
                    errors["user"] = e
                if user_id is not None:
                    session_store.remember_user_id(user_id)
            counts, metric_errors = partner_metrics(api, user_id)
            errors.update(metric_errors)

        if errors:
            for name, e in errors.items():
                app.logger.warning("Dashboard metric %s failed: %s", name, e.message)
            flash("Some dashboard figures could not be loaded.", "warning")

        return render_template("home.html", counts=counts, is_owner=auth.user.is_owner)

    return app
