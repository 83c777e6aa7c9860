"""
Error responders
Not-found page, generic error page, and the catch-all that logs unexpected exceptions
"""

from flask import render_template, request
from flask_wtf.csrf import CSRFError
from werkzeug.exceptions import HTTPException
from eventsite import db
from eventsite.logger import get_logger

logger = get_logger("eventsite.errors")


def register_error_handlers(app):

    @app.errorhandler(404)
    def not_found(error):
        logger.debug(f"Not found: {request.path}")
        return render_template('not_found.html', title='Not found'), 404

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        logger.warning(f"CSRF validation failed for {request.method} {request.path}: {error.description}")
        return render_template('error.html', title='Error'), 400

    @app.errorhandler(Exception)
    def unhandled_exception(error):
        # Routing redirects and aborts keep their own responses
        if isinstance(error, HTTPException):
            return error

        logger.exception(f"Unhandled exception on {request.method} {request.path}")
        db.session.rollback()
        return render_template('error.html', title='Error'), 500
