"""JSON response envelope and pagination shared by the service family."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

# Response types the services are known to emit. Not enforced.
KNOWN_RESPONSE_TYPES = frozenset(
    {
        "error",
        "syslog",
        "syslog-list",
        "uuid",
        "uuid-list",
        "job",
        "job-list",
        "service",
        "service-list",
        "event",
        "event-list",
        "eventtype",
        "eventtype-list",
        "trigger",
        "trigger-list",
        "alert",
        "alert-list",
        "stats",
        "health",
    }
)


class PaginationOrder(str, Enum):
    """Sort direction of a paginated listing."""

    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class JsonPagination:
    """Paging parameters of a listing request.

    Attributes:
        count: Total number of items, when known.
        page: Zero-based page number.
        per_page: Page size.
        sort_by: Field to sort by.
        order: Sort direction.
    """

    count: int = 0
    page: int = 0
    per_page: int = 10
    sort_by: str = ""
    order: PaginationOrder = PaginationOrder.ASCENDING

    @property
    def start_index(self) -> int:
        return self.page * self.per_page

    @property
    def end_index(self) -> int:
        return self.start_index + self.per_page

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, str | list[str]],
        default: "JsonPagination | None" = None,
    ) -> "JsonPagination":
        """Build pagination from query parameters.

        Missing or empty values fall back to ``default``.

        Args:
            params: Query parameters, either flat or as returned by
                urllib.parse.parse_qs.
            default: Values used for absent parameters.

        Returns:
            The resolved pagination.

        Raises:
            ValueError: If perPage or page is not an integer, or order is
                neither ``asc`` nor ``desc``.
        """
        default = default or cls()

        per_page = _parse_int_param(params, "perPage", default.per_page)
        page = _parse_int_param(params, "page", default.page)
        sort_by = _first(params, "sortBy") or default.sort_by

        order_raw = _first(params, "order")
        if order_raw:
            try:
                order = PaginationOrder(order_raw.lower())
            except ValueError:
                raise ValueError(
                    "query argument for '?order' must be \"asc\" or \"desc\""
                ) from None
        else:
            order = default.order

        return cls(
            count=default.count,
            page=page,
            per_page=per_page,
            sort_by=sort_by,
            order=order,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "page": self.page,
            "perPage": self.per_page,
            "sortBy": self.sort_by,
            "order": self.order.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "JsonPagination":
        """Build pagination from its JSON form.

        Raises:
            ValueError: If data is not an object or holds a malformed field.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"pagination must be a JSON object, got {type(data).__name__}")
        defaults = cls()
        try:
            return cls(
                count=int(data.get("count", defaults.count)),
                page=int(data.get("page", defaults.page)),
                per_page=int(data.get("perPage", defaults.per_page)),
                sort_by=str(data.get("sortBy", defaults.sort_by)),
                order=PaginationOrder(data.get("order", defaults.order.value)),
            )
        except TypeError as e:
            raise ValueError(f"malformed pagination: {e}") from e


def _first(params: Mapping[str, str | list[str]], key: str) -> str | None:
    value = params.get(key)
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _parse_int_param(
    params: Mapping[str, str | list[str]], key: str, default: int
) -> int:
    raw = _first(params, key)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"query argument for '?{key}' is invalid: {raw}") from None
    return value


@dataclass
class JsonResponse:
    """The JSON envelope every service in the family answers with.

    Attributes:
        status_code: HTTP status of the response.
        type: Payload type name, usually one of KNOWN_RESPONSE_TYPES.
        data: Decoded payload.
        pagination: Paging of a listing payload.
        message: Human-readable message, set on errors.
        origin: Service that produced the response.
        inner: Wrapped upstream response.
        metadata: Free-form extra information.
    """

    status_code: int
    type: str | None = None
    data: Any = None
    pagination: JsonPagination | None = None
    message: str | None = None
    origin: str | None = None
    inner: "JsonResponse | None" = None
    metadata: Any = None

    def is_error(self) -> bool:
        """Return True for 4xx and 5xx status codes."""
        return 400 <= self.status_code <= 599

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form, omitting absent optional fields."""
        result: dict[str, Any] = {"statusCode": self.status_code}
        if self.type is not None:
            result["type"] = self.type
        if self.data is not None:
            result["data"] = self.data
        if self.pagination is not None:
            result["pagination"] = self.pagination.to_dict()
        if self.message is not None:
            result["message"] = self.message
        if self.origin is not None:
            result["origin"] = self.origin
        if self.inner is not None:
            result["inner"] = self.inner.to_dict()
        if self.metadata is not None:
            result["metadata"] = self.metadata
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "JsonResponse":
        """Build an envelope from its JSON form.

        Raises:
            ValueError: If data is not an object, statusCode is missing or not an
                integer, or a nested pagination or inner envelope is malformed.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"response must be a JSON object, got {type(data).__name__}")
        try:
            status_code = int(data["statusCode"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError("response has no valid statusCode") from e

        pagination = data.get("pagination")
        inner = data.get("inner")
        return cls(
            status_code=status_code,
            type=data.get("type"),
            data=data.get("data"),
            pagination=None if pagination is None else JsonPagination.from_dict(pagination),
            message=data.get("message"),
            origin=data.get("origin"),
            inner=None if inner is None else cls.from_dict(inner),
            metadata=data.get("metadata"),
        )
