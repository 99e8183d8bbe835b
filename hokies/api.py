from hokies.routes import auth_bp, admin_bp, storefront_bp


def register_api_v1(app):
    """Register blueprint routes under the API version prefix."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(storefront_bp)
