"""Load a Rails config/routes.rb into a RouteSet."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from tree_sitter import Node

from .errors import RoutesFileError
from .models import RouteContext
from .route_helpers import RouteSet
from .ruby_ast import (
    block_statements,
    call_parts,
    keyword_options,
    literal,
    literal_list,
    parse_ruby,
    positional,
)

logger = logging.getLogger(__name__)

HTTP_VERBS = {"get", "post", "put", "patch", "delete", "match"}

# Calls whose blocks hold routes in the same context
PASSTHROUGH = {"constraints", "defaults", "with_options", "controller"}


class RoutesLoader:
    """Replay the route DSL of a routes.rb file into a RouteSet."""

    def __init__(self, routes_file: str, route_set: Optional[RouteSet] = None):
        self.routes_file = routes_file
        self.route_set = route_set if route_set is not None else RouteSet()
        self.concerns: Dict[str, Node] = {}  # name -> block AST node

    def load(self) -> RouteSet:
        if not os.path.isfile(self.routes_file):
            raise RoutesFileError(f"Routes file not found: {self.routes_file}")
        self._load_file(self.routes_file, self.route_set.context)
        logger.info("Loaded %d named routes from %s",
                    len(self.route_set.routes), self.routes_file)
        return self.route_set

    def _load_file(self, path: str, context: RouteContext) -> None:
        try:
            with open(path, "rb") as f:
                source = f.read()
        except OSError as e:
            raise RoutesFileError(f"Cannot read {path}: {e}") from e
        self._walk(parse_ruby(source), context)

    def _walk(self, node: Node, context: RouteContext) -> None:
        for child in node.named_children:
            self._visit(child, context)

    def _walk_block(self, block: Optional[Node], context: RouteContext) -> None:
        for stmt in block_statements(block):
            self._visit(stmt, context)

    def _visit(self, node: Node, context: RouteContext) -> None:
        parts = call_parts(node)
        if parts is None:
            # if/unless bodies, begin blocks and the like
            self._walk(node, context)
            return

        method, args, block = parts
        handler = self._get_handler(method)
        if method in HTTP_VERBS:
            self._handle_verb(args, context)
        elif handler is not None:
            handler(args, block, context)
        elif block is not None:
            if method not in PASSTHROUGH:
                logger.debug("Walking block of unrecognised call '%s'", method)
            self._walk_block(block, context)

    def _get_handler(self, method_name: str):
        """Get the handler function for a route DSL method."""
        handlers = {
            "resources": self._handle_resources,
            "resource": self._handle_resource,
            "namespace": self._handle_namespace,
            "scope": self._handle_scope,
            "member": self._handle_member,
            "collection": self._handle_collection,
            "root": self._handle_root,
            "concern": self._handle_concern,
            "concerns": self._handle_concerns,
            "draw": self._handle_draw,
        }
        return handlers.get(method_name)

    # ---- DSL Handlers ----

    def _handle_resources(self, args: List[Node], block: Optional[Node],
                          context: RouteContext) -> None:
        """``resources :hats, only: [:index, :show] do ... end``"""
        opts = keyword_options(args)
        for name in self._names(args):
            with self.route_set.resources(
                name,
                only=self._list_option(opts, "only"),
                except_=self._list_option(opts, "except"),
                path=self._option(opts, "path"),
                as_=self._option(opts, "as"),
                param=self._option(opts, "param") or "id",
                context=context,
            ) as inner:
                self._replay_concerns(self._list_option(opts, "concerns") or [], inner)
                self._walk_block(block, inner)

    def _handle_resource(self, args: List[Node], block: Optional[Node],
                         context: RouteContext) -> None:
        """``resource :profile`` (singular, no index, no :id)."""
        opts = keyword_options(args)
        for name in self._names(args):
            with self.route_set.resource(
                name,
                only=self._list_option(opts, "only"),
                except_=self._list_option(opts, "except"),
                path=self._option(opts, "path"),
                as_=self._option(opts, "as"),
                context=context,
            ) as inner:
                self._replay_concerns(self._list_option(opts, "concerns") or [], inner)
                self._walk_block(block, inner)

    def _handle_namespace(self, args: List[Node], block: Optional[Node],
                          context: RouteContext) -> None:
        names = self._names(args)
        if not names:
            return
        opts = keyword_options(args)
        with self.route_set.namespace(names[0], path=self._option(opts, "path"),
                                      as_=self._option(opts, "as"),
                                      context=context) as inner:
            self._walk_block(block, inner)

    def _handle_scope(self, args: List[Node], block: Optional[Node],
                      context: RouteContext) -> None:
        """``scope '/v1', as: :v1 do ... end``; ``module:`` only affects controllers."""
        opts = keyword_options(args)
        names = self._names(args)
        path = self._option(opts, "path") or (names[0] if names else None)
        with self.route_set.scope(path=path, as_=self._option(opts, "as"),
                                  context=context) as inner:
            self._walk_block(block, inner)

    def _handle_member(self, args: List[Node], block: Optional[Node],
                       context: RouteContext) -> None:
        with self.route_set.member(context=context) as inner:
            self._walk_block(block, inner)

    def _handle_collection(self, args: List[Node], block: Optional[Node],
                           context: RouteContext) -> None:
        with self.route_set.collection(context=context) as inner:
            self._walk_block(block, inner)

    def _handle_root(self, args: List[Node], block: Optional[Node],
                     context: RouteContext) -> None:
        self.route_set.root(context=context)

    def _handle_concern(self, args: List[Node], block: Optional[Node],
                        context: RouteContext) -> None:
        names = self._names(args)
        if names and block is not None:
            self.concerns[names[0]] = block

    def _handle_concerns(self, args: List[Node], block: Optional[Node],
                         context: RouteContext) -> None:
        names: List[str] = []
        for arg in positional(args):
            names.extend(literal_list(arg))
        self._replay_concerns(names, context)

    def _handle_draw(self, args: List[Node], block: Optional[Node],
                     context: RouteContext) -> None:
        """``routes.draw do ... end`` or ``draw(:admin)`` loading config/routes/admin.rb."""
        names = self._names(args)
        if not names:
            self._walk_block(block, context)
            return
        draw_file = os.path.join(os.path.dirname(self.routes_file), "routes",
                                 f"{names[0]}.rb")
        if os.path.isfile(draw_file):
            self._load_file(draw_file, context)
        else:
            logger.warning("draw(%s) referenced but file not found: %s", names[0], draw_file)

    def _handle_verb(self, args: List[Node], context: RouteContext) -> None:
        """``get :publish``, ``get 'search', as: :search``, ``get 'a' => 'b#c'``."""
        opts = keyword_options(args)
        names = self._names(args)
        if names:
            path = names[0]
        else:
            # get '/photos/:id' => 'photos#show'
            path = next((key for key, value in opts.items()
                         if key.startswith("/") or "#" in (literal(value) or "")), None)
        if not path:
            return
        self.route_set.match(path, as_=self._option(opts, "as"),
                             on=self._option(opts, "on"), context=context)

    # ---- Helper methods ----

    def _replay_concerns(self, names: List[str], context: RouteContext) -> None:
        for name in names:
            block = self.concerns.get(name)
            if block is None:
                logger.warning("Concern '%s' referenced but not defined", name)
                continue
            self._walk_block(block, context)

    @staticmethod
    def _names(args: List[Node]) -> List[str]:
        return [v for v in (literal(a) for a in positional(args)
                            if a.type in ("simple_symbol", "string", "delimited_symbol"))
                if v is not None]

    @staticmethod
    def _option(opts: Mapping[str, Node], key: str) -> Optional[str]:
        node = opts.get(key)
        return literal(node) if node is not None else None

    @staticmethod
    def _list_option(opts: Mapping[str, Node], key: str) -> Optional[List[str]]:
        node = opts.get(key)
        return literal_list(node) if node is not None else None


def find_routes_file(source: str) -> str:
    """Accept an application root or a routes file path."""
    source = os.path.abspath(source)
    if os.path.isdir(source):
        source = os.path.join(source, "config", "routes.rb")
    if not os.path.isfile(source):
        raise RoutesFileError(f"Not a Rails project (no config/routes.rb): {source}")
    return source


def load_routes(source: str,
                default_url_options: Optional[Mapping[str, Any]] = None) -> RouteSet:
    """Build a RouteSet from a Rails app directory or routes file."""
    route_set = RouteSet(default_url_options=default_url_options)
    return RoutesLoader(find_routes_file(source), route_set).load()
