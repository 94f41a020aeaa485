from flask import Flask, current_app
import logging
import os
from dotenv import load_dotenv

from .store import StoreClient, StoreConfig

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level):
    root = logging.getLogger("mission_control")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


def get_store() -> StoreClient:
    return current_app.extensions['store']


def create_app(config=None, store=None):
    load_dotenv()
    root_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
    static_dir = os.path.join(root_dir, 'static')

    app = Flask(__name__, static_folder=static_dir, static_url_path='/static')
    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', os.urandom(24))
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')
    app.config['STORE_TIMEOUT'] = float(os.getenv('STORE_TIMEOUT', '10'))
    app.config['CALENDAR_NEXT_UP_ORDER'] = os.getenv('CALENDAR_NEXT_UP_ORDER', 'asc')
    app.config['ALLOWED_EMAIL'] = os.getenv('ALLOWED_EMAIL')
    app.config['AUTH_EMAIL_HEADER'] = os.getenv('AUTH_EMAIL_HEADER', 'X-Forwarded-Email')
    app.config['SIGN_IN_URL'] = os.getenv('SIGN_IN_URL', '/sign-in')
    app.config['STORE_CONFIG'] = StoreConfig.from_env()
    if config:
        app.config.update(config)

    setup_logging(app.config['LOG_LEVEL'])

    if store is None:
        store = StoreClient(app.config['STORE_CONFIG'], timeout=app.config['STORE_TIMEOUT'])
    if not store.is_configured:
        logger.warning("Data store URL or key missing; pages will render without data")
    app.extensions['store'] = store

    from .formatting import format_relative_time, format_short_date
    app.jinja_env.filters['relative_time'] = format_relative_time
    app.jinja_env.filters['short_date'] = format_short_date

    from .auth import register_access_gate
    register_access_gate(app)

    from .routes import register_routes
    register_routes(app)

    return app
