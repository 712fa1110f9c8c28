"""Exceptions raised by resourceful."""

from __future__ import annotations


class ResourcefulError(Exception):
    """Base class for every resourceful error."""


class UnknownRouteHelper(ResourcefulError, LookupError):
    """The computed helper name has no route behind it.

    This is a configuration error: the resource was declared nested or
    namespaced differently from the routes that were actually drawn.
    """

    def __init__(self, attempted_name: str):
        self.attempted_name = attempted_name
        super().__init__(f"No route helper named '{attempted_name}'")


class RouteGenerationError(ResourcefulError, ValueError):
    """A route helper could not build a path from the arguments it got."""


class RoutesFileError(ResourcefulError, ValueError):
    """A routes file is missing or unreadable."""


class NoParentResource(ResourcefulError, ValueError):
    """``parent_path`` was called on a controller that declares no parent."""

    def __init__(self, model_name: str):
        self.model_name = model_name
        super().__init__(f"{model_name} has no parent resource")
