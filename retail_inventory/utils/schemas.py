import re
from datetime import date, datetime, time

from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from retail_inventory.models import OrderStatus

BARE_DATE = re.compile(r'\d{4}-\d{2}-\d{2}')


class DayBoundary(fields.Field):
    """
    Accepts 'YYYY-MM-DD' or an ISO 8601 datetime.

    A bare date becomes 00:00:00, or 23:59:59.999999 when ``end_of_day`` is set,
    so a date-only end bound covers the whole day. Aware datetimes are
    converted to server-local naive time, matching stored timestamps.
    """
    default_error_messages = {
        'invalid': 'Not a valid date. Use YYYY-MM-DD or an ISO 8601 datetime.'
    }

    def __init__(self, end_of_day=False, **kwargs):
        super().__init__(**kwargs)
        self.end_of_day = end_of_day

    def _deserialize(self, value, attr, data, **kwargs):
        if not isinstance(value, str):
            raise self.make_error('invalid')
        try:
            if BARE_DATE.fullmatch(value):
                day = date.fromisoformat(value)
                return datetime.combine(day, time.max if self.end_of_day else time.min)
            if value.endswith(('Z', 'z')):
                value = value[:-1] + '+00:00'
            parsed = datetime.fromisoformat(value)
        except ValueError as error:
            raise self.make_error('invalid') from error
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone().replace(tzinfo=None)
        return parsed


class DateRangeQuerySchema(Schema):
    """Optional [start, end] window from query parameters"""
    start = DayBoundary()
    end = DayBoundary(end_of_day=True)

    @validates_schema
    def validate_range(self, data, **kwargs):
        start, end = data.get('start'), data.get('end')
        if start and end and start > end:
            raise ValidationError('start must not be after end', field_name='start')


class FinancialReportQuerySchema(DateRangeQuerySchema):
    """Report window; both bounds required"""
    start = DayBoundary(required=True)
    end = DayBoundary(end_of_day=True, required=True)


class StockMovementQuerySchema(DateRangeQuerySchema):
    product_id = fields.Int(validate=validate.Range(min=1))


class OrderItemRequestSchema(Schema):
    """Schema for one requested order line"""
    product_id = fields.Int(required=True, validate=validate.Range(min=1))
    quantity = fields.Int(required=True, validate=validate.Range(min=1))
    size = fields.Str(validate=validate.Length(max=50), allow_none=True)
    color = fields.Str(validate=validate.Length(max=50), allow_none=True)


class OrderCreateRequestSchema(Schema):
    """Schema for creating orders"""
    customer_name = fields.Str(validate=validate.Length(max=255), allow_none=True)
    customer_phone = fields.Str(validate=validate.Length(max=50), allow_none=True)
    notes = fields.Str(allow_none=True)
    items = fields.List(
        fields.Nested(OrderItemRequestSchema),
        required=True,
        validate=validate.Length(min=1, error='At least one item is required.')
    )


class OrderStatusRequestSchema(Schema):
    """Schema for order status changes"""
    status = fields.Str(
        required=True,
        validate=validate.OneOf([status.value for status in OrderStatus])
    )


class StockInRequestSchema(Schema):
    """Schema for receiving goods"""
    product_id = fields.Int(required=True, validate=validate.Range(min=1))
    quantity = fields.Int(required=True, validate=validate.Range(min=1))
    unit_cost = fields.Decimal(required=True, places=2, validate=validate.Range(min=0))
    supplier = fields.Str(validate=validate.Length(max=255), allow_none=True)
    notes = fields.Str(allow_none=True)


class ProductRequestSchema(Schema):
    """Schema for creating/updating products"""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    sku = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    category = fields.Str(validate=validate.Length(max=100), allow_none=True)
    size = fields.Str(validate=validate.Length(max=50), allow_none=True)
    color = fields.Str(validate=validate.Length(max=50), allow_none=True)
    hpp = fields.Decimal(places=2, validate=validate.Range(min=0), load_default=0)
    selling_price = fields.Decimal(required=True, places=2, validate=validate.Range(min=0))
    stock = fields.Int(validate=validate.Range(min=0), load_default=0)
    min_stock = fields.Int(validate=validate.Range(min=0))
    description = fields.Str(allow_none=True)


class ReportPeriodSchema(Schema):
    start_date = fields.DateTime()
    end_date = fields.DateTime()


class ReportSummarySchema(Schema):
    total_revenue = fields.Float()
    total_profit = fields.Float()
    total_cost = fields.Float()
    total_orders = fields.Int()
    avg_order_value = fields.Float()
    profit_margin = fields.Float()
    period = fields.Nested(ReportPeriodSchema)


class TopProductSchema(Schema):
    product_id = fields.Int()
    product_name = fields.Str()
    product_sku = fields.Str()
    quantity_sold = fields.Int()
    revenue = fields.Float()
    profit = fields.Float()


class DailyRevenueSchema(Schema):
    date = fields.Str()
    revenue = fields.Float()
    orders = fields.Int()


class FinancialReportResponseSchema(Schema):
    """Schema for financial report responses"""
    summary = fields.Nested(ReportSummarySchema)
    top_products = fields.List(fields.Nested(TopProductSchema))
    revenue_by_day = fields.List(fields.Nested(DailyRevenueSchema))
