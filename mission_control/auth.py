import logging
from flask import request, redirect, url_for, current_app
from urllib.parse import urlencode

logger = logging.getLogger(__name__)

PUBLIC_ENDPOINTS = {'pages.unauthorized', 'pages.healthz', 'static'}


def is_allowed(email, allowed_email):
    return bool(email) and email.strip().lower() == allowed_email.strip().lower()


def check_access():
    """
    Single-account gate. Identity comes from the authenticating proxy in front of the app,
    which puts the signed-in email in AUTH_EMAIL_HEADER.
    """
    allowed_email = current_app.config.get('ALLOWED_EMAIL')
    # Unmatched routes fall through to a 404; the sign-in page usually lives on the proxy
    if not allowed_email or request.endpoint is None or request.endpoint in PUBLIC_ENDPOINTS:
        return None

    email = request.headers.get(current_app.config['AUTH_EMAIL_HEADER'])
    if not email:
        sign_in_url = current_app.config['SIGN_IN_URL']
        return redirect(f"{sign_in_url}?{urlencode({'redirect_url': request.url})}")

    if not is_allowed(email, allowed_email):
        logger.warning(f"Access denied for {email}")
        return redirect(url_for('pages.unauthorized'))
    return None


def register_access_gate(app):
    app.before_request(check_access)
