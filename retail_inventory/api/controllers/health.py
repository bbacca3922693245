"""
Health check endpoint for the retail inventory service
"""

from flask import Blueprint, jsonify
from datetime import datetime
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import os
import time
import logging

from retail_inventory.database import db

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__)


def check_database():
    """Round-trip a trivial query; returns a status dict"""
    started = time.time()
    try:
        db.session.execute(text('SELECT 1'))
        return {
            'status': 'healthy',
            'response_time': round(time.time() - started, 4)
        }
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Database health check failed: {e}")
        return {'status': 'unhealthy', 'error': str(e)}


@health_bp.route('/health', methods=['GET'])
def health():
    """Service and database health"""
    database = check_database()
    healthy = database['status'] == 'healthy'

    return jsonify({
        'status': 'healthy' if healthy else 'unhealthy',
        'service': os.environ.get('NAME', 'retail-inventory-service'),
        'timestamp': datetime.utcnow().isoformat() + 'Z',
        'version': os.environ.get('VERSION', '1.0.0'),
        'checks': {'database': database}
    }), 200 if healthy else 503
