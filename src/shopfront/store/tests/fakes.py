"""Fake backends and sample payloads for store tests."""

import httpx

SEED_URL = "http://seed.test"
LIVE_URL = "http://live.test"


class FakeBackends:
    """Programmable seed and live backends behind one httpx.MockTransport.

    Routes are keyed by method, host and path. Unrouted requests get a 404.
    Every request is recorded in ``calls``.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, url, json=None, status=200, content=None, error=None):
        parsed = httpx.URL(url)
        self.routes[(method.upper(), parsed.host, parsed.path)] = {
            "status": status,
            "json": json,
            "content": content,
            "error": error,
        }

    def fail(self, method, url, error=httpx.ConnectError):
        """Make a route raise a transport error instead of answering."""
        self.add(method, url, error=error)

    def handler(self, request):
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.host, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "Not found"})
        if route["error"] is not None:
            raise route["error"]("backend unreachable", request=request)
        if route["content"] is not None:
            return httpx.Response(route["status"], content=route["content"])
        if route["json"] is None:
            return httpx.Response(route["status"])
        return httpx.Response(route["status"], json=route["json"])

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    def calls_to(self, host, method=None):
        return [
            call
            for call in self.calls
            if call.url.host == host and (method is None or call.method == method)
        ]

    @property
    def mutating_calls(self):
        return [call for call in self.calls if call.method in ("POST", "PUT", "PATCH", "DELETE")]


SEED_PRODUCTS = {
    "products": [
        {"id": 5, "name": "Rice Cooker", "price": 990, "category": "Kitchen", "stock": 20,
         "description": "1.8L rice cooker", "brand": "Sharp"},
        {"id": 12, "name": "Desk Fan", "price": "1490.50", "category": "Home", "stock": 3},
        {"id": 30, "name": "Kettle", "price": 450, "category": "Kitchen", "stock": 0},
    ]
}

LIVE_PRODUCTS = [
    {"id": 5, "name": "Rice Cooker (copy)", "price": 1200, "category": "Kitchen", "stock": 1},
    {"id": 150, "name": "Blender", "price": 2500, "category": "Kitchen", "stock": 40},
    {"id": 151, "name": "Air Purifier", "price": 5900, "category": "Home", "stock": 8},
]

SEED_ORDERS = {
    "orders": [
        {
            "id": 12,
            "createAt": "2025-01-06T03:15:00Z",
            "items": [{"productId": 5, "qty": 2, "price": 990}],
            "total": 1980,
            "status": "success",
            "customerInfo": {"name": "Somchai", "email": "somchai@example.com", "phone": "0812345678"},
        },
    ]
}

LIVE_ORDERS = [
    {
        "id": 120,
        "createAt": "2025-01-07T05:30:00Z",
        "items": [{"productId": 150, "qty": 1, "price": 2500}],
        "total": 2500,
        "status": "pending",
        "customerInfo": {"name": "Malee", "email": "malee@example.com", "phone": "0898765432"},
    },
]

# Seed orders as the mock catalog keys them.
PREFIXED_SEED_ORDERS = {
    "orders": [
        {
            "id": "ORD-00042",
            "createAt": "2025-01-05T09:00:00Z",
            "items": [{"productId": 30, "qty": 1, "price": 450}],
            "total": 450,
            "status": "shipped",
            "customerInfo": {"name": "Nok", "email": "nok@example.com", "phone": "0861112222"},
        },
    ]
}
