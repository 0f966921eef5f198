"""
Typed contracts for the Mux API endpoints the agent can reach.

Each ``Endpoint`` knows its REST path and derives the name the MCP
mirror exposes it under (``<action>_<resource>`` with ``/`` → ``_``).
Argument models allow extra keys so the agent can pass through options we
don't model explicitly; the known ones are validated before either
transport sees them.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Metric ids are interpolated into REST paths.
METRIC_ID_PATTERN = r"^[a-z0-9_]+$"


def _check_filters(value: list[str] | None) -> list[str] | None:
    if value is None:
        return value
    for item in value:
        dimension, sep, match = item.partition(":")
        if not sep or not dimension or not match:
            raise ValueError(f"filter {item!r} must look like 'dimension:value'")
    return value


class EndpointArgs(BaseModel):
    """Base for endpoint arguments; unknown keys pass through untouched."""

    model_config = ConfigDict(extra="allow")

    def to_params(self) -> dict:
        return self.model_dump(exclude_none=True)


class TimeframedArgs(EndpointArgs):
    timeframe: list[str] = Field(
        min_length=2, max_length=2,
        description="Epoch-second pair [start, end] as strings",
    )
    filters: list[str] | None = Field(
        default=None, description="Filters such as 'operating_system:iOS'"
    )

    @field_validator("timeframe", mode="before")
    @classmethod
    def stringify_timeframe(cls, value):
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return value

    @field_validator("filters")
    @classmethod
    def check_filters(cls, value):
        return _check_filters(value)


class OverallValuesArgs(TimeframedArgs):
    METRIC_ID: str = Field(default="video_startup_failure_percentage", pattern=METRIC_ID_PATTERN)


class ErrorsArgs(TimeframedArgs):
    pass


class VideoViewsArgs(TimeframedArgs):
    limit: int = Field(default=25, ge=1, le=1000)
    page: int | None = Field(default=None, ge=1)


class BreakdownArgs(TimeframedArgs):
    METRIC_ID: str = Field(default="video_startup_failure_percentage", pattern=METRIC_ID_PATTERN)
    group_by: str = "operating_system"
    order_by: str | None = "negative_impact"
    order_direction: str | None = Field(default="desc", pattern="^(asc|desc)$")
    limit: int = Field(default=20, ge=1, le=1000)


class AssetsArgs(EndpointArgs):
    limit: int | None = Field(default=None, ge=1, le=100)
    page: int | None = Field(default=None, ge=1)


@dataclass(frozen=True)
class Endpoint:
    """One backend operation, addressable over REST or the MCP mirror."""

    action: str
    resource: str
    path: str
    args_model: type[EndpointArgs]

    @property
    def name(self) -> str:
        return f"{self.action}_{self.resource.replace('/', '_')}"

    def validate(self, args: dict | EndpointArgs | None) -> EndpointArgs:
        if isinstance(args, self.args_model):
            return args
        if isinstance(args, EndpointArgs):
            args = args.model_dump()
        return self.args_model.model_validate(args or {})

    def rest_path(self, args: EndpointArgs) -> str:
        """Fill path placeholders (e.g. ``{METRIC_ID}``) from *args*."""
        params = {k: quote(str(v), safe="") for k, v in args.model_dump().items()}
        return self.path.format(**params)


OVERALL_VALUES = Endpoint(
    action="get_overall_values",
    resource="data/metrics",
    path="/data/v1/metrics/{METRIC_ID}/overall",
    args_model=OverallValuesArgs,
)
LIST_ERRORS = Endpoint(
    action="list",
    resource="data/errors",
    path="/data/v1/errors",
    args_model=ErrorsArgs,
)
LIST_VIDEO_VIEWS = Endpoint(
    action="list",
    resource="data/video_views",
    path="/data/v1/video-views",
    args_model=VideoViewsArgs,
)
LIST_BREAKDOWN_VALUES = Endpoint(
    action="list_breakdown_values",
    resource="data/metrics",
    path="/data/v1/metrics/{METRIC_ID}/breakdown",
    args_model=BreakdownArgs,
)
LIST_ASSETS = Endpoint(
    action="list",
    resource="video/assets",
    path="/video/v1/assets",
    args_model=AssetsArgs,
)

ENDPOINTS: dict[str, Endpoint] = {
    e.name: e
    for e in (OVERALL_VALUES, LIST_ERRORS, LIST_VIDEO_VIEWS, LIST_BREAKDOWN_VALUES, LIST_ASSETS)
}


def get_endpoint(name: str) -> Endpoint:
    try:
        return ENDPOINTS[name]
    except KeyError:
        raise KeyError(f"Unknown endpoint {name!r}") from None
