"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

Routing uses the HTTP API ``routeKey`` (e.g. ``"POST /customers/{id}/actions"``),
so path parameters arrive already parsed in ``pathParameters``. Requests
without a route key (local invocation) are matched against the same route
templates by method + path, and ``{name}`` segments fill ``pathParameters``.
"""

from typing import Callable, Dict, Optional, Tuple
import json
import re

from . import customers, health_check, reminders, reports, visits


def _response(status: int, body: Dict) -> Dict:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def _route_table() -> Dict[str, Callable]:
    # Looked up per request so tests can monkeypatch handler functions.
    return {
        "GET /health": health_check.lambda_handler,
        "GET /reminders": reminders.list_handler,
        "POST /reminders/{id}/complete": reminders.complete_handler,
        "GET /customers": customers.list_handler,
        "POST /customers": customers.create_handler,
        "GET /customers/{id}": customers.get_handler,
        "PUT /customers/{id}": customers.update_handler,
        "DELETE /customers/{id}": customers.delete_handler,
        "POST /customers/{id}/actions": customers.action_handler,
        "GET /visits": visits.list_handler,
        "POST /visits": visits.create_handler,
        "GET /reports/stats": reports.stats_handler,
        "GET /reports/daily": reports.daily_handler,
        "POST /reports/daily/send": reports.send_daily_handler,
        "GET /dashboard/today": reports.today_handler,
    }


def _match_template(route_key: str, routes: Dict[str, Callable]) -> Tuple[Optional[str], Dict[str, str]]:
    """Find the route template a literal ``METHOD /path`` key belongs to."""
    for template in routes:
        pattern = re.sub(r"\\\{(\w+)\\\}", r"(?P<\1>[^/]+)", re.escape(template))
        match = re.fullmatch(pattern, route_key)
        if match:
            return template, match.groupdict()
    return None, {}


def lambda_handler(event, context):
    """Entry point invoked by API Gateway HTTP API."""
    route_key = event.get("routeKey")
    if not route_key or route_key == "$default":
        http = event.get("requestContext", {}).get("http", {})
        route_key = f"{http.get('method', '').upper()} {http.get('path', '')}"

    routes = _route_table()
    handler = routes.get(route_key)
    if handler is None:
        template, params = _match_template(route_key, routes)
        if template is not None:
            handler = routes[template]
            event = {**event, "routeKey": template, "pathParameters": params}
    if handler is None:
        return _response(404, {"message": "Route not found", "route": route_key})
    return handler(event, context)
