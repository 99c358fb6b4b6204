"""Mock JWT Pizza backend for UI testing.

This mock implements the service endpoints the JWT Pizza frontend calls:
- /api/auth: login (PUT), register (POST), logout (DELETE)
- /api/user/me: current user lookup by bearer token
- /api/order/menu, /api/order, /api/order/verify: menu, order history, ordering
- /api/franchise/...: paginated listing, franchise/store create and close
- /api/docs: endpoint documentation page

All state lives in a ``MockPizzaState`` created per scenario. The same
dispatcher backs the Playwright request interception (see ``route_mocks``)
and the standalone Flask app returned by ``create_mock_api_app``.
"""
from __future__ import annotations

import itertools
import json
import logging
import random
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Pattern, Tuple
from urllib.parse import parse_qs, urlsplit

from flask import Flask, Response, request
from flask_cors import CORS

from pizza_ui_tests.mock_data import (
    MOCK_PASSWORD,
    SEEDED_TOKENS,
    Franchise,
    MenuItem,
    MockUsers,
    Role,
    Store,
    User,
    default_franchises,
    default_menu,
    default_orders,
    default_users,
)

logger = logging.getLogger(__name__)

# Claims returned by the order verification stub
VERIFY_CLAIMS = {"sub": "order", "iat": 1700000000, "aud": "jwt-pizza"}

# Name filter value that disables franchise filtering
WILDCARD_NAME = "*"


@dataclass
class MockApiError(Exception):
    """Raised by endpoint handlers to produce a JSON error response."""

    status: int
    message: str

    def __str__(self) -> str:  # pragma: no cover - human readable helper
        return f"{self.status} {self.message}"


@dataclass
class MockResponse:
    status: int
    payload: Any

    @property
    def body(self) -> str:
        return json.dumps(self.payload)


@dataclass
class MockRequest:
    """Request as seen by an endpoint handler."""

    method: str
    path: str
    query: Dict[str, str]
    headers: Mapping[str, str]
    body: Any
    params: Tuple[str, ...] = ()

    @property
    def bearer_token(self) -> Optional[str]:
        header = self.headers.get("authorization") or ""
        token = header.replace("Bearer ", "", 1).strip()
        return token or None


def _iso_today() -> str:
    return date.today().isoformat()


def _random_user_ids(seed: int = 0) -> Callable[[], int]:
    rng = random.Random(seed)
    return lambda: 1000 + rng.randrange(1000)


@dataclass
class MockPizzaState:
    """In-memory records for one scenario.

    Id sources are injectable so scenarios stay reproducible: franchise, store
    and order ids come from counters, registered user ids from a seeded RNG.
    """

    users: MockUsers = field(default_factory=default_users)
    menu: List[MenuItem] = field(default_factory=default_menu)
    franchises: List[Franchise] = field(default_factory=list)
    orders_by_user_id: Dict[int, List[Dict[str, Any]]] = field(default_factory=dict)
    token_by_email: Dict[str, str] = field(default_factory=dict)
    user_by_token: Dict[str, User] = field(default_factory=dict)
    franchise_ids: Iterator[int] = field(default_factory=lambda: itertools.count(200))
    store_ids: Iterator[int] = field(default_factory=lambda: itertools.count(300))
    order_ids: Iterator[int] = field(default_factory=lambda: itertools.count(2))
    user_id_factory: Callable[[], int] = field(default_factory=_random_user_ids)
    today: Callable[[], str] = field(default=_iso_today)

    @classmethod
    def seeded(cls, **overrides: Any) -> "MockPizzaState":
        """Build the default scenario state: seeded users, tokens, franchises and orders."""
        state = cls(**overrides)
        if "franchises" not in overrides:
            state.franchises = default_franchises(state.users)
        if "orders_by_user_id" not in overrides:
            state.orders_by_user_id = default_orders(state.users, state.menu)
        for role, token in SEEDED_TOKENS.items():
            user = state.users.get(role)
            state.token_by_email[user.email] = token
            state.user_by_token[token] = user
        return state

    def issue_token(self, user: User) -> str:
        """Mint a token for ``user`` and record it in both lookup tables."""
        token = f"token-{user.email}"
        suffix = itertools.count(2)
        while token in self.user_by_token and self.user_by_token[token] is not user:
            token = f"token-{user.email}-{next(suffix)}"
        self.token_by_email[user.email] = token
        self.user_by_token[token] = user
        return token

    def user_for_token(self, token: Optional[str]) -> Optional[User]:
        if not token:
            return None
        return self.user_by_token.get(token)

    def token_for(self, role: str) -> str:
        """Token a seeded user would carry after logging in."""
        user = self.users.get(role)
        return self.token_by_email.get(user.email) or f"token-{user.email}"

    def find_franchise(self, franchise_id: str) -> Optional[Franchise]:
        return next((f for f in self.franchises if f.id == franchise_id), None)

    def new_user_id(self) -> int:
        taken = {u.id for u in self.user_by_token.values()}
        taken.update(u.id for u in self.users.all())
        user_id = self.user_id_factory()
        while user_id in taken:
            user_id = self.user_id_factory()
        return user_id


Handler = Callable[[MockRequest], Any]


@dataclass
class EndpointRoute:
    method: Optional[str]  # None matches any method
    pattern: Pattern[str]
    handler: Handler


def _int_param(query: Dict[str, str], name: str) -> int:
    try:
        return int(query.get(name) or 0)
    except ValueError:
        return 0


class MockPizzaApi:
    """Dispatches HTTP-shaped requests to the mock endpoint handlers.

    Routes are evaluated in order and the first one matching both path and
    method wins. A path that only matches with another method answers 405.
    """

    def __init__(self, state: Optional[MockPizzaState] = None) -> None:
        self.state = state if state is not None else MockPizzaState.seeded()
        self.routes: List[EndpointRoute] = self._build_routes()

    def _build_routes(self) -> List[EndpointRoute]:
        def route(method: Optional[str], pattern: str, handler: Handler) -> EndpointRoute:
            return EndpointRoute(method, re.compile(pattern), handler)

        return [
            route("PUT", r"/api/auth$", self.login),
            route("POST", r"/api/auth$", self.register),
            route("DELETE", r"/api/auth$", self.logout),
            route(None, r"/api/user/me$", self.current_user),
            route(None, r"/api/order/menu$", self.menu),
            route(None, r"/api/order/verify$", self.verify_order),
            route("GET", r"/api/order$", self.list_orders),
            route("POST", r"/api/order$", self.create_order),
            route(None, r"/api/docs$", self.docs),
            route("GET", r"/api/franchise$", self.list_franchises),
            route("POST", r"/api/franchise$", self.create_franchise),
            route("POST", r"/api/franchise/(\w+)/store$", self.create_store),
            route("DELETE", r"/api/franchise/(\w+)/store/(\w+)$", self.close_store),
            route("GET", r"/api/franchise/(\w+)$", self.user_franchises),
            route("DELETE", r"/api/franchise/(\w+)$", self.delete_franchise),
            route(None, r"/api/franchise(/.*)?$", self.franchise_not_found),
        ]

    # ---- dispatch ---------------------------------------------------------------
    def handle(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[str] = None,
    ) -> Optional[MockResponse]:
        """Answer one request, or return None when ``url`` is not a mock endpoint."""
        parts = urlsplit(url)
        method = method.upper()
        path_known = False

        for endpoint in self.routes:
            match = endpoint.pattern.search(parts.path)
            if not match:
                continue
            if endpoint.method is not None and endpoint.method != method:
                path_known = True
                continue

            mock_request = MockRequest(
                method=method,
                path=parts.path,
                query={k: v[0] for k, v in parse_qs(parts.query, keep_blank_values=True).items()},
                headers={k.lower(): v for k, v in (headers or {}).items()},
                body=self._parse_body(body),
                params=tuple(g for g in match.groups() if g is not None),
            )
            response = self._invoke(endpoint, mock_request)
            logger.debug("%s %s -> %d", method, parts.path, response.status)
            return response

        if path_known:
            logger.debug("%s %s -> 405", method, parts.path)
            return MockResponse(405, {"message": "Method not allowed"})
        return None

    def _invoke(self, endpoint: EndpointRoute, mock_request: MockRequest) -> MockResponse:
        try:
            return MockResponse(200, endpoint.handler(mock_request))
        except MockApiError as exc:
            return MockResponse(exc.status, {"message": exc.message})
        except Exception as exc:
            logger.exception("Mock handler failed for %s %s", mock_request.method, mock_request.path)
            return MockResponse(500, {"message": str(exc)})

    @staticmethod
    def _parse_body(body: Optional[str]) -> Any:
        if not body:
            return None
        try:
            return json.loads(body)
        except ValueError:
            logger.debug("Ignoring non-JSON request body")
            return None

    def _caller(self, req: MockRequest) -> Optional[User]:
        return self.state.user_for_token(req.bearer_token)

    # ---- auth ---------------------------------------------------------------------
    def login(self, req: MockRequest) -> Dict[str, Any]:
        body = req.body or {}
        email = body.get("email")
        known = isinstance(email, str) and email in self.state.token_by_email
        if body.get("password") != MOCK_PASSWORD or not known:
            raise MockApiError(401, "Invalid credentials")
        token = self.state.token_by_email[email]
        user = self.state.user_by_token[token]
        return {"user": user.to_json(), "token": token}

    def register(self, req: MockRequest) -> Dict[str, Any]:
        body = req.body or {}
        user = User(
            id=self.state.new_user_id(),
            name=body.get("name") or "New User",
            email=body.get("email") or "new@jwt.com",
            roles=[Role("diner")],
        )
        token = self.state.issue_token(user)
        logger.info("Registered mock user %s (id=%d)", user.email, user.id)
        return {"user": user.to_json(), "token": token}

    def logout(self, req: MockRequest) -> Dict[str, Any]:
        # Tokens stay valid after logout
        return {"message": "Logged out"}

    def current_user(self, req: MockRequest) -> Dict[str, Any]:
        user = self._caller(req)
        if user is None:
            raise MockApiError(401, "Unauthorized")
        return user.to_json()

    # ---- orders -------------------------------------------------------------------
    def menu(self, req: MockRequest) -> List[Dict[str, Any]]:
        return [item.to_json() for item in self.state.menu]

    def list_orders(self, req: MockRequest) -> Dict[str, Any]:
        # The app may ask for orders before login; that is not an error
        user = self._caller(req)
        orders = self.state.orders_by_user_id.get(user.id, []) if user else []
        return {"orders": orders}

    def create_order(self, req: MockRequest) -> Dict[str, Any]:
        user = self._caller(req) or self.state.users.diner
        order_id = f"o-{next(self.state.order_ids)}"
        order = dict(req.body or {})
        order.update(id=order_id, date=self.state.today())
        self.state.orders_by_user_id.setdefault(user.id, []).insert(0, order)
        return {"order": order, "jwt": f"jwt-{order_id}"}

    def verify_order(self, req: MockRequest) -> Dict[str, Any]:
        return {"message": "valid", "payload": json.dumps(VERIFY_CLAIMS, indent=2)}

    def docs(self, req: MockRequest) -> Dict[str, Any]:
        return {
            "endpoints": [
                {
                    "method": "GET",
                    "path": "/api/order/menu",
                    "description": "List menu items",
                    "response": self.menu(req),
                },
                {"method": "GET", "path": "/api/order", "description": "List orders", "response": {"orders": []}},
                {
                    "method": "POST",
                    "path": "/api/order",
                    "description": "Place order",
                    "response": {"order": {}, "jwt": "..."},
                },
            ]
        }

    # ---- franchises ---------------------------------------------------------------
    def list_franchises(self, req: MockRequest) -> Dict[str, Any]:
        raw_name = req.query.get("name") or ""
        name_filter = "" if raw_name == WILDCARD_NAME else raw_name.lower()
        page = max(_int_param(req.query, "page"), 0)
        limit = _int_param(req.query, "limit")

        filtered = [f for f in self.state.franchises if name_filter in f.name.lower()]
        if limit > 0:
            paged = filtered[page * limit:page * limit + limit]
            more = (page + 1) * limit < len(filtered)
        else:
            paged, more = filtered, False
        return {"franchises": [f.to_json() for f in paged], "more": more}

    def create_franchise(self, req: MockRequest) -> Dict[str, Any]:
        body = req.body or {}
        franchise = Franchise(
            id=str(next(self.state.franchise_ids)),
            name=body.get("name") or "New Franchise",
            admins=[a["email"] for a in body.get("admins") or [] if a.get("email")],
        )
        self.state.franchises.insert(0, franchise)
        logger.info("Created mock franchise %s (id=%s)", franchise.name, franchise.id)
        return franchise.to_json()

    def user_franchises(self, req: MockRequest) -> List[Dict[str, Any]]:
        user = self._caller(req)
        if user is None or not user.has_role("franchisee"):
            return []
        return [f.to_json() for f in self.state.franchises if f.is_admin(user.email)]

    def delete_franchise(self, req: MockRequest) -> Dict[str, Any]:
        franchise = self.state.find_franchise(req.params[0])
        if franchise is not None:
            self.state.franchises.remove(franchise)
        return {"message": "Deleted"}

    def create_store(self, req: MockRequest) -> Dict[str, Any]:
        franchise = self._franchise_or_404(req.params[0])
        body = req.body or {}
        store = Store(id=str(next(self.state.store_ids)), name=body.get("name") or "New Store")
        franchise.stores.append(store)
        return store.to_json()

    def close_store(self, req: MockRequest) -> None:
        franchise = self._franchise_or_404(req.params[0])
        store_id = req.params[1]
        franchise.stores = [s for s in franchise.stores if s.id != store_id]
        return None

    def franchise_not_found(self, req: MockRequest) -> None:
        raise MockApiError(404, "Not found")

    def _franchise_or_404(self, franchise_id: str) -> Franchise:
        franchise = self.state.find_franchise(franchise_id)
        if franchise is None:
            raise MockApiError(404, "Franchise not found")
        return franchise


def create_mock_api_app(state: Optional[MockPizzaState] = None) -> Flask:
    """Create a Flask app serving the mock API (for local frontend work and HTTP tests)."""
    app = Flask(__name__)
    app.config['TESTING'] = True
    api = MockPizzaApi(state)
    app.extensions['mock_pizza_api'] = api
    # The frontend dev server runs on another origin
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    @app.route('/api/<path:subpath>', methods=['GET', 'POST', 'PUT', 'DELETE', 'PATCH'])
    def api_endpoint(subpath: str):
        result = api.handle(
            request.method,
            request.url,
            dict(request.headers),
            request.get_data(as_text=True),
        )
        if result is None:
            result = MockResponse(404, {"message": "Not found"})
        return Response(result.body, status=result.status, mimetype='application/json')

    return app


def main() -> None:
    """Serve the mock API for local frontend development."""
    from pizza_ui_tests.config import settings

    logging.basicConfig(level=logging.DEBUG)
    app = create_mock_api_app()
    print(f"Mock JWT Pizza API running on http://{settings.mock_api_host}:{settings.mock_api_port}/api")
    print(f"Seeded accounts: diner@jwt.com, fran@jwt.com, admin@jwt.com (password '{MOCK_PASSWORD}')")
    app.run(host=settings.mock_api_host, port=settings.mock_api_port, debug=True)


if __name__ == '__main__':
    main()
