"""Routing helper namespace: named route helpers and the DSL that draws them."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple
from urllib.parse import quote, urlencode

from .errors import RouteGenerationError, UnknownRouteHelper
from .inflection import pluralize, singularize
from .models import RouteContext, ResourceScope

logger = logging.getLogger(__name__)

RESOURCE_ACTIONS = ["index", "create", "new", "edit", "show", "update", "destroy"]
SINGULAR_RESOURCE_ACTIONS = ["create", "new", "edit", "show", "update", "destroy"]

# Options that shape the URL itself rather than becoming query parameters
URL_OPTIONS = {"host", "protocol", "port", "format", "anchor"}

SEGMENT = re.compile(r":(\w+)")
OPTIONAL_GROUP = re.compile(r"\([^()]*\)")


def to_param(value: Any) -> Optional[str]:
    """Return the URL identity of a record: ``to_param()``, then ``id``, then ``str``."""
    if value is None:
        return None
    to_param_method = getattr(value, "to_param", None)
    if callable(to_param_method):
        value = to_param_method()
    elif hasattr(value, "id"):
        value = value.id
    return None if value is None else str(value)


class RouteHelper:
    """A named route helper such as ``person_hat_path``.

    Called with positional values for the dynamic segments in order,
    optionally followed by a mapping of options:

        person_hat_path(person, hat)                 #=> "/people/42/hats/7"
        person_hat_path(person, hat, {"status": 1})  #=> "/people/42/hats/7?status=1"

    Optional groups such as ``(:locale)`` or ``(.:format)`` are expanded when
    the options fill every segment inside them and dropped otherwise.
    """

    def __init__(self, name: str, template: str, kind: str = "path",
                 default_url_options: Optional[Mapping[str, Any]] = None):
        self.name = name
        self.template = template or "/"
        self.kind = kind  # "path" | "url"
        self.segments: List[str] = SEGMENT.findall(OPTIONAL_GROUP.sub("", self.template))
        self.optional_segments: List[str] = [
            s for group in OPTIONAL_GROUP.findall(self.template) for s in SEGMENT.findall(group)
        ]
        self.default_url_options = default_url_options if default_url_options is not None else {}

    def __repr__(self) -> str:
        return f"<RouteHelper {self.name} {self.template}>"

    def __call__(self, *args: Any) -> str:
        options: Dict[str, Any] = {}
        if args and isinstance(args[-1], Mapping):
            options = dict(args[-1])
            args = args[:-1]

        if len(args) > len(self.segments):
            raise RouteGenerationError(
                f"{self.name} takes {len(self.segments)} positional argument(s) "
                f"but {len(args)} were given"
            )

        values: Dict[str, str] = {}
        for segment, arg in zip(self.segments, args):
            param = to_param(arg)
            if param is not None:
                values[segment] = param
        for segment in self.segments[len(args):] + self.optional_segments:
            if segment in options:
                param = to_param(options.pop(segment))
                if param is not None:
                    values[segment] = param

        missing = [s for s in self.segments if s not in values]
        if missing:
            raise RouteGenerationError(
                f"{self.name} is missing required keys: {', '.join(missing)}"
            )

        path = OPTIONAL_GROUP.sub(lambda m: self._expand_group(m.group(0), values),
                                  self.template)
        path = SEGMENT.sub(lambda m: quote(values[m.group(1)], safe=""), path)
        path = re.sub(r"/{2,}", "/", path)
        if len(path) > 1:
            path = path.rstrip("/")
        return self._finish(path or "/", options)

    @staticmethod
    def _expand_group(group: str, values: Dict[str, str]) -> str:
        if all(s in values for s in SEGMENT.findall(group)):
            return group[1:-1]
        return ""

    def _finish(self, path: str, options: Dict[str, Any]) -> str:
        url_options = {k: options.pop(k) for k in list(options) if k in URL_OPTIONS}
        if url_options.get("format"):
            path = f"{path}.{url_options['format']}"
        query = [(k, v) for k, v in options.items() if v is not None]
        if query:
            path = f"{path}?{urlencode(query, doseq=True)}"
        if url_options.get("anchor"):
            path = f"{path}#{url_options['anchor']}"
        if self.kind == "path":
            return path

        merged = {**self.default_url_options,
                  **{k: v for k, v in url_options.items() if v is not None}}
        host = merged.get("host")
        if not host:
            raise RouteGenerationError(
                f"Missing host to link to for {self.name}; "
                "pass a host option or set default_url_options"
            )
        protocol = str(merged.get("protocol", "http")).rstrip(":/")
        port = f":{merged['port']}" if merged.get("port") else ""
        return f"{protocol}://{host}{port}{path}"


class RouteHelpers(Mapping):
    """Helper name -> RouteHelper, populated as routes are drawn."""

    def __init__(self):
        self._helpers: Dict[str, RouteHelper] = {}

    def __getitem__(self, name: str) -> RouteHelper:
        try:
            return self._helpers[name]
        except KeyError:
            raise UnknownRouteHelper(name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._helpers)

    def __len__(self) -> int:
        return len(self._helpers)

    def __contains__(self, name: object) -> bool:
        return name in self._helpers

    def get(self, name: str, default=None):
        return self._helpers.get(name, default)

    def register(self, helper: RouteHelper) -> bool:
        """Add a helper. The first definition of a name wins, as in Rails."""
        if helper.name in self._helpers:
            logger.warning("Route name '%s' already in use by %s; ignoring %s",
                           helper.name, self._helpers[helper.name].template,
                           helper.template)
            return False
        self._helpers[helper.name] = helper
        logger.debug("Registered %s -> %s", helper.name, helper.template)
        return True

    def call(self, name: str, *args: Any) -> str:
        return self[name](*args)


class RouteSet:
    """Draw Rails-style routes and collect their named helpers.

        routes = RouteSet(default_url_options={"host": "example.com"})
        with routes.namespace("admin"):
            with routes.resources("people"):
                routes.resources("hats")

        routes.helpers["edit_admin_person_hat_path"]  # /admin/people/:person_id/hats/:id/edit
    """

    def __init__(self, default_url_options: Optional[Mapping[str, Any]] = None):
        self.helpers = RouteHelpers()
        self.default_url_options: Dict[str, Any] = dict(default_url_options or {})
        self.routes: List[Tuple[str, str]] = []  # (name, template) in draw order
        self._stack: List[RouteContext] = [RouteContext()]

    @property
    def context(self) -> RouteContext:
        return self._stack[-1]

    @contextmanager
    def within(self, context: RouteContext) -> Iterator[RouteContext]:
        self._stack.append(context)
        try:
            yield context
        finally:
            self._stack.pop()

    # ---- Route naming ----

    def add_route(self, name: Optional[str], template: str) -> None:
        """Register ``<name>_path`` and ``<name>_url`` for a path template."""
        if not name:
            return
        name = re.sub(r"[^0-9a-zA-Z_]+", "_", name).strip("_")
        if not name:
            return
        template = template or "/"
        if self.helpers.register(RouteHelper(f"{name}_path", template, "path")):
            self.routes.append((name, template))
            self.helpers.register(RouteHelper(
                f"{name}_url", template, "url", self.default_url_options))

    # ---- DSL ----

    def resources(self, name: str, only: Optional[Sequence[str]] = None,
                  except_: Optional[Sequence[str]] = None, path: Optional[str] = None,
                  as_: Optional[str] = None, param: str = "id",
                  context: Optional[RouteContext] = None):
        """Draw the plural resource routes; usable as a context manager for nesting."""
        ctx = context or self.context
        plural = as_ or name
        singular = singularize(plural)
        collection_path = self._nested_base(ctx, path or name)
        scope = ResourceScope(
            singular=singular,
            plural=plural,
            collection_path=collection_path,
            member_path=f"{collection_path}/:{param}",
            nested_path=f"{collection_path}/:{singular}_{param}",
            name_prefix=ctx.name_prefix,
        )
        actions = filter_actions(RESOURCE_ACTIONS, only, except_)
        prefix = ctx.name_prefix
        if actions & {"index", "create"}:
            self.add_route(f"{prefix}{plural}", scope.collection_path)
        if "new" in actions:
            self.add_route(f"new_{prefix}{singular}", f"{scope.collection_path}/new")
        if "edit" in actions:
            self.add_route(f"edit_{prefix}{singular}", f"{scope.member_path}/edit")
        if actions & {"show", "update", "destroy"}:
            self.add_route(f"{prefix}{singular}", scope.member_path)
        return self._enter_resource(ctx, scope)

    def resource(self, name: str, only: Optional[Sequence[str]] = None,
                 except_: Optional[Sequence[str]] = None, path: Optional[str] = None,
                 as_: Optional[str] = None, context: Optional[RouteContext] = None):
        """Draw a singular resource (no index, no :id); usable as a context manager."""
        ctx = context or self.context
        singular = as_ or name
        base = self._nested_base(ctx, path or name)
        scope = ResourceScope(
            singular=singular,
            plural=pluralize(singular),
            collection_path=base,
            member_path=base,
            nested_path=base,
            name_prefix=ctx.name_prefix,
            is_singular=True,
        )
        actions = filter_actions(SINGULAR_RESOURCE_ACTIONS, only, except_)
        prefix = ctx.name_prefix
        if "new" in actions:
            self.add_route(f"new_{prefix}{singular}", f"{base}/new")
        if "edit" in actions:
            self.add_route(f"edit_{prefix}{singular}", f"{base}/edit")
        if actions & {"show", "create", "update", "destroy"}:
            self.add_route(f"{prefix}{singular}", base)
        return self._enter_resource(ctx, scope)

    def namespace(self, name: str, path: Optional[str] = None,
                  as_: Optional[str] = None, context: Optional[RouteContext] = None):
        """Prefix both paths and helper names: ``namespace :admin``."""
        ctx = context or self.context
        new_ctx = ctx.copy()
        new_ctx.path_prefix = join_path(ctx.path_prefix, path if path is not None else name)
        new_ctx.name_prefix = f"{ctx.name_prefix}{as_ or name}_"
        new_ctx.resource = None
        new_ctx.scope_type = None
        return self.within(new_ctx)

    def scope(self, path: Optional[str] = None, as_: Optional[str] = None,
              context: Optional[RouteContext] = None):
        """Prefix paths, and helper names only when ``as_`` is given."""
        ctx = context or self.context
        new_ctx = ctx.copy()
        if path:
            new_ctx.path_prefix = join_path(ctx.path_prefix, path)
        if as_:
            new_ctx.name_prefix = f"{ctx.name_prefix}{as_}_"
        return self.within(new_ctx)

    def member(self, context: Optional[RouteContext] = None):
        return self._on("member", context)

    def collection(self, context: Optional[RouteContext] = None):
        return self._on("collection", context)

    def match(self, path: str, as_: Optional[str] = None, on: Optional[str] = None,
              context: Optional[RouteContext] = None) -> None:
        """Draw a verb route (``get :publish``) and name it the way Rails does."""
        ctx = context or self.context
        scope_type = on or ctx.scope_type
        resource = ctx.resource
        action = path.strip("/")

        if resource is not None and scope_type == "member":
            template = join_path(resource.member_path, action)
            name = as_ or f"{action}_{resource.name_prefix}{resource.singular}"
        elif resource is not None and scope_type == "collection":
            template = join_path(resource.collection_path, action)
            plural = resource.singular if resource.is_singular else resource.plural
            name = as_ or f"{action}_{resource.name_prefix}{plural}"
        else:
            template = join_path(ctx.path_prefix, path)
            name = f"{ctx.name_prefix}{as_}" if as_ else self._default_name(ctx, path)

        self.add_route(name, template)

    def root(self, context: Optional[RouteContext] = None) -> None:
        ctx = context or self.context
        self.add_route(f"{ctx.name_prefix}root", ctx.path_prefix or "/")

    # ---- Internals ----

    def _on(self, scope_type: str, context: Optional[RouteContext]):
        ctx = context or self.context
        new_ctx = ctx.copy()
        new_ctx.scope_type = scope_type
        return self.within(new_ctx)

    def _enter_resource(self, ctx: RouteContext, scope: ResourceScope):
        """Context for routes drawn inside the resource's block."""
        new_ctx = ctx.copy()
        new_ctx.resource = scope
        new_ctx.path_prefix = scope.nested_path
        new_ctx.name_prefix = f"{ctx.name_prefix}{scope.singular}_"
        new_ctx.scope_type = None
        return self.within(new_ctx)

    @staticmethod
    def _nested_base(ctx: RouteContext, path: str) -> str:
        if ctx.resource is not None and ctx.scope_type == "member":
            return join_path(ctx.resource.member_path, path)
        return join_path(ctx.path_prefix, path)

    @staticmethod
    def _default_name(ctx: RouteContext, path: str) -> Optional[str]:
        """``get 'photos/search'`` is named ``photos_search``; dynamic paths get no name."""
        stripped = OPTIONAL_GROUP.sub("", path).strip("/")
        if not stripped or ":" in stripped or "*" in stripped:
            return None
        return f"{ctx.name_prefix}{stripped}"


def filter_actions(all_actions: Sequence[str], only: Optional[Sequence[str]],
                   except_: Optional[Sequence[str]]) -> set:
    """Filter resource actions by only:/except: options."""
    if only is not None:
        return {a for a in all_actions if a in only}
    if except_ is not None:
        return {a for a in all_actions if a not in except_}
    return set(all_actions)


def join_path(prefix: str, suffix: Optional[str]) -> str:
    """Join path segments, normalizing slashes."""
    if not suffix or suffix == "/":
        return prefix or "/"
    suffix = suffix.lstrip("/")
    if prefix and prefix != "/":
        return f"{prefix.rstrip('/')}/{suffix}"
    return f"/{suffix}"
