from flask import jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
import logging

from retail_inventory.exceptions import InventoryError

logger = logging.getLogger(__name__)


def validation_error_payload(error):
    """Response body for a marshmallow ValidationError"""
    return {
        'error': 'ValidationError',
        'kind': 'validation_error',
        'message': 'Request data validation failed',
        'details': error.messages,
        'status_code': 400
    }


def register_error_handlers(app):
    """Register application error handlers"""

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({
            'error': 'Bad Request',
            'message': 'The request could not be understood by the server',
            'status_code': 400
        }), 400

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'error': 'Not Found',
            'message': 'The requested resource was not found',
            'status_code': 404
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'error': 'Method Not Allowed',
            'message': 'The method is not allowed for the requested URL',
            'status_code': 405
        }), 405

    @app.errorhandler(409)
    def conflict(error):
        return jsonify({
            'error': 'Conflict',
            'message': 'The request conflicts with the current state of the resource',
            'status_code': 409
        }), 409

    @app.errorhandler(422)
    def unprocessable_entity(error):
        return jsonify({
            'error': 'Unprocessable Entity',
            'message': 'The request was well-formed but contains semantic errors',
            'status_code': 422
        }), 422

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return jsonify({
            'error': 'Internal Server Error',
            'message': 'An unexpected error occurred',
            'status_code': 500
        }), 500

    @app.errorhandler(InventoryError)
    def inventory_error(error):
        if error.status_code >= 500:
            logger.error(f"{error.kind}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(ValidationError)
    def validation_error(error):
        return jsonify(validation_error_payload(error)), 400

    @app.errorhandler(HTTPException)
    def http_exception(error):
        return jsonify({
            'error': error.name,
            'message': error.description,
            'status_code': error.code
        }), error.code
