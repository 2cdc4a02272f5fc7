"""Handlers for reports and the dashboard's due-today summary."""

from typing import Optional

from utils.http import api_handler, json_response, parse_body

# Lazy-loaded service to avoid import-time DB/SES connections
_report_service: Optional["ReportService"] = None


def _get_report_service():
    """Lazy-load ReportService."""
    global _report_service
    if _report_service is None:
        from repositories.db import get_record_store
        from services.report_service import ReportService
        _report_service = ReportService(get_record_store())
    return _report_service


@api_handler
def stats_handler(event, context):
    return json_response(200, _get_report_service().get_stats())


@api_handler
def daily_handler(event, context):
    return json_response(200, _get_report_service().generate_daily_report())


@api_handler
def send_daily_handler(event, context):
    """POST /reports/daily/send, optionally {"recipient": "..."}."""
    recipient = parse_body(event).get("recipient")
    report = _get_report_service().send_daily_report(recipient)
    return json_response(200, {"status": "sent", "report_date": report.report_date.isoformat()})


@api_handler
def today_handler(event, context):
    """GET /dashboard/today"""
    return json_response(200, _get_report_service().get_today_tasks())
