"""Controller-aware URL helpers for Rails-style resource routes."""

from .errors import (
    NoParentResource,
    ResourcefulError,
    RouteGenerationError,
    RoutesFileError,
    UnknownRouteHelper,
)
from .models import (
    InvocationRequest,
    ParentLinkage,
    RequestContext,
    Resolution,
    ResourceDescriptor,
)
from .route_helpers import RouteHelper, RouteHelpers, RouteSet
from .urls import URLHelpers, dispatch, resolve

__version__ = "0.3.0"

__all__ = [
    "InvocationRequest",
    "NoParentResource",
    "ParentLinkage",
    "RequestContext",
    "Resolution",
    "ResourceDescriptor",
    "ResourcefulError",
    "RouteGenerationError",
    "RouteHelper",
    "RouteHelpers",
    "RouteSet",
    "RoutesFileError",
    "URLHelpers",
    "UnknownRouteHelper",
    "dispatch",
    "resolve",
]
