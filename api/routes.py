"""Inbound route table for the restaurant API surface."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from core.exceptions import InvalidQueryError

PREP_TIMEOUT_MS = 10_000
SYNC_TIMEOUT_MS = 15_000


@dataclass(frozen=True)
class RouteSpec:
    """One inbound path and how it maps onto the upstream API.

    ``upstream`` defaults to the inbound path without its ``/api`` prefix,
    so placeholders keep the same names on both sides.
    """

    path: str
    methods: tuple[str, ...]
    upstream: str | None = None
    creates: tuple[str, ...] = ()
    require_auth: bool = True
    timeout_ms: int | None = None
    query_defaults: Mapping[str, str] = field(default_factory=dict)
    optional_query: tuple[str, ...] = ()
    required_query: tuple[str, ...] = ()
    body_fields: tuple[str, ...] = ()

    @property
    def upstream_path(self) -> str:
        return self.upstream or self.path.removeprefix("/api")

    @property
    def forwards_all_query(self) -> bool:
        return not (self.query_defaults or self.optional_query or self.required_query)

    def build_query(self, inbound: Mapping[str, str]) -> dict[str, str] | None:
        """Query to forward, or None to pass the inbound query through."""
        if self.forwards_all_query:
            return None
        for name in self.required_query:
            if not inbound.get(name):
                raise InvalidQueryError(f"Query parameter '{name}' is required")
        query = {name: inbound.get(name) or default for name, default in self.query_defaults.items()}
        for name in (*self.optional_query, *self.required_query):
            if inbound.get(name):
                query[name] = inbound[name]
        return query

    def pick_body(self, body: Any) -> Any:
        """Keep only the whitelisted top-level fields of a JSON object."""
        if not self.body_fields or not isinstance(body, dict):
            return body
        return {name: body[name] for name in self.body_fields if name in body}


RESTAURANT = "/api/restaurants/{restaurant_id}"
PAGING = {"page": "1", "limit": "20"}

AUTH_ROUTES = [
    RouteSpec(
        "/api/auth/login",
        ("POST",),
        require_auth=False,
        body_fields=("email", "password", "restaurantId"),
    ),
    RouteSpec(
        "/api/auth/refresh",
        ("POST",),
        require_auth=False,
        body_fields=("refreshToken",),
    ),
    RouteSpec(
        "/api/restaurants/setup-complete",
        ("POST",),
        require_auth=False,
        body_fields=("restaurant", "user"),
    ),
]

# Literal segments are listed before sibling parameter segments
MENU_ROUTES = [
    RouteSpec(f"{RESTAURANT}/menu/categories", ("GET", "POST"), creates=("POST",)),
    RouteSpec(f"{RESTAURANT}/menu/categories/with-items", ("GET",), timeout_ms=PREP_TIMEOUT_MS),
    RouteSpec(f"{RESTAURANT}/menu/categories/{{category_id}}", ("GET", "PUT", "DELETE")),
    RouteSpec(
        f"{RESTAURANT}/menu/items",
        ("GET", "POST"),
        creates=("POST",),
        query_defaults=PAGING,
    ),
    RouteSpec(f"{RESTAURANT}/menu/items/{{item_id}}", ("GET", "PUT", "DELETE")),
    RouteSpec(f"{RESTAURANT}/menu/items/{{item_id}}/availability", ("PUT",)),
    RouteSpec(f"{RESTAURANT}/menu/items/{{item_id}}/options", ("GET", "POST"), creates=("POST",)),
    RouteSpec(f"{RESTAURANT}/menu/search", ("GET",), required_query=("query",)),
    RouteSpec(f"{RESTAURANT}/menu/weekly-menus/import-categories", ("POST",)),
]

PREP_ROUTES = [
    RouteSpec(f"{RESTAURANT}/prep/items/{{item_id}}", ("PUT",), timeout_ms=PREP_TIMEOUT_MS),
    RouteSpec(
        f"{RESTAURANT}/prep/presets/{{day_of_week}}/load", ("GET",), timeout_ms=PREP_TIMEOUT_MS
    ),
    RouteSpec(
        f"{RESTAURANT}/prep/presets/{{day_of_week}}/save", ("POST",), timeout_ms=PREP_TIMEOUT_MS
    ),
    RouteSpec(f"{RESTAURANT}/prep/{{date}}", ("GET",), timeout_ms=PREP_TIMEOUT_MS),
    RouteSpec(f"{RESTAURANT}/prep/{{date}}/finalize", ("POST",), timeout_ms=PREP_TIMEOUT_MS),
    RouteSpec(f"{RESTAURANT}/prep/{{date}}/sync", ("POST",), timeout_ms=SYNC_TIMEOUT_MS),
]

USER_ROUTES = [
    RouteSpec(f"{RESTAURANT}/roles", ("GET",)),
    RouteSpec(
        f"{RESTAURANT}/users",
        ("GET", "POST"),
        creates=("POST",),
        query_defaults=PAGING,
        optional_query=("role", "isActive", "search"),
    ),
    RouteSpec(f"{RESTAURANT}/users/{{user_id}}", ("GET", "PUT", "DELETE")),
    RouteSpec(f"{RESTAURANT}/users/{{user_id}}/role", ("PUT",)),
    RouteSpec(f"{RESTAURANT}/users/{{user_id}}/reset-password", ("POST",)),
]

ROUTES: list[RouteSpec] = [*AUTH_ROUTES, *MENU_ROUTES, *PREP_ROUTES, *USER_ROUTES]


def route_name(route: RouteSpec, method: str) -> str:
    """Stable endpoint name, e.g. ``get_restaurants_restaurant_id_menu_items``."""
    path = route.upstream_path.strip("/")
    for char in "{}":
        path = path.replace(char, "")
    return f"{method.lower()}_{path.replace('/', '_').replace('-', '_')}"
