"""Flask application factory."""
from flask import Flask, jsonify


def create_app(config_object='config.Config', test_config=None):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    if test_config:
        app.config.update(test_config)

    # Store and receipt persistence
    from retail_store.services.store_service import init_store
    store = init_store(app)

    # Error Handlers
    from retail_store.exceptions import StoreError

    @app.errorhandler(StoreError)
    def handle_store_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"StoreError [{error.status_code}]: {error.message}")
        else:
            app.logger.warning(f"StoreError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'status': 'error', 'message': 'Not Found'}), 404

    # Register blueprints
    from retail_store.blueprints.catalog import catalog_bp
    from retail_store.blueprints.staff import staff_bp
    from retail_store.blueprints.sales import sales_bp
    from retail_store.blueprints.reports import reports_bp

    app.register_blueprint(catalog_bp)
    app.register_blueprint(staff_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(reports_bp)

    # Register CLI commands
    from retail_store.cli_commands import init_cli_commands
    init_cli_commands(app)

    app.logger.info(f"RECEIPTS_DIR={app.config.get('RECEIPTS_DIR')}")
    app.logger.info(
        f"Pricing: discount={store.sale_discount_rate}, near_expiry_days={store.near_expiry_days}, "
        f"atomic_baskets={store.atomic_baskets}"
    )

    return app
