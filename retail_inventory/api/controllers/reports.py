"""
Reports Controller - financial report over completed orders
"""

from flask import request
from flask_restx import Namespace, Resource
from marshmallow import ValidationError
import logging

from retail_inventory.api.middlewares.correlation_id import get_correlation_id
from retail_inventory.services import FinancialReportService
from retail_inventory.utils.error_handlers import validation_error_payload
from retail_inventory.utils.schemas import FinancialReportQuerySchema, FinancialReportResponseSchema

logger = logging.getLogger(__name__)

reports_ns = Namespace('reports', description='Financial reports')

report_query_schema = FinancialReportQuerySchema()
report_response_schema = FinancialReportResponseSchema()


@reports_ns.route('/financial')
class FinancialReport(Resource):
    @reports_ns.doc('financial_report', params={
        'start': 'Period start (YYYY-MM-DD or ISO datetime)',
        'end': 'Period end (YYYY-MM-DD covers the whole day)'
    })
    def get(self):
        """Revenue, profit, top products and daily revenue for completed orders"""
        try:
            params = report_query_schema.load(request.args.to_dict())
            report = FinancialReportService().report(params['start'], params['end'])
            return report_response_schema.dump(report), 200

        except ValidationError as e:
            return validation_error_payload(e), 400
        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error building financial report: {e}")
            return {'error': 'Internal server error'}, 500
