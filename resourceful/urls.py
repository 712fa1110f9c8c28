"""URL helpers that know the shape of the controller.

They are the counterparts of the plain ``foo_path``/``foo_url`` helpers, but
work out which helper to call and which parent objects it needs from the
controller's resource, its namespaces and its parent. In a HatsController
nested under people (``parent_object`` is person 42):

    object_path()          #=> hat_path(hat)                 "/hats/12"
    nested_object_path()   #=> person_hat_path(person, hat)  "/people/42/hats/12"
    objects_path()         #=> person_hats_path(person)      "/people/42/hats"
    new_object_path()      #=> new_person_hat_path(person)   "/people/42/hats/new"
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Tuple

from .errors import NoParentResource, UnknownRouteHelper
from .models import (
    COLLECTION,
    INSTANCE,
    InvocationRequest,
    ParentLinkage,
    RequestContext,
    Resolution,
    ResourceDescriptor,
)

logger = logging.getLogger(__name__)

# URLHelpers methods the seven RESTful actions rely on, keyed by action
STANDARD_HELPERS = {
    "index": "objects_path",
    "show": "object_path",
    "new": "new_object_path",
    "create": "object_path",
    "edit": "edit_object_path",
    "update": "object_path",
    "destroy": "objects_path",
}


def resolve(request: InvocationRequest, descriptor: ResourceDescriptor,
            parent: Optional[ParentLinkage] = None,
            prefix: Optional[str] = None) -> Resolution:
    """Work out the helper name and arguments for one URL helper call.

    ``prefix`` replaces the namespace prefix derived from the descriptor.
    A nested request whose parent record is absent resolves exactly like the
    non-nested request.
    """
    nested = request.nested and parent is not None and parent.present

    if request.kind == INSTANCE or request.action == "new":
        base = descriptor.singular_name
    else:
        base = descriptor.plural_name

    name_prefix = descriptor.helper_prefix if prefix is None else prefix
    if nested:
        name_prefix = f"{name_prefix}{parent.helper_segment}_"

    action_prefix = f"{request.action}_" if request.action else ""
    suffix = "url" if request.url else "path"
    helper_name = f"{action_prefix}{name_prefix}{base}_{suffix}"

    args = []
    if nested:
        args.append(parent.instance)
    if request.kind == INSTANCE and request.target is not None:
        args.append(request.target)

    options = dict(request.options) if request.options else None
    return Resolution(helper_name, tuple(args), options)


def dispatch(resolution: Resolution, helpers: Mapping[str, Any]) -> Any:
    """Call the resolved helper.

    Raises UnknownRouteHelper when ``helpers`` has no such name; options are
    only passed when there are some.
    """
    try:
        helper = helpers[resolution.helper_name]
    except KeyError:
        raise UnknownRouteHelper(resolution.helper_name) from None
    logger.debug("Dispatching %s%r", resolution.helper_name, resolution.args)
    if resolution.options is None:
        return helper(*resolution.args)
    return helper(*resolution.args, resolution.options)


class URLHelpers:
    """The URL helpers for one controller handling one request.

    Override ``url_helper_prefix`` when the generated route names don't
    follow the controller's namespaces.
    """

    def __init__(self, context: RequestContext, helpers: Mapping[str, Any],
                 locale: str = "en"):
        self.context = context
        self.helpers = helpers
        self.locale = locale
        self.descriptor = ResourceDescriptor.for_model(
            context.current_model_name, context.namespaces, locale)
        self.last_resolution: Optional[Resolution] = None

    def url_helper_prefix(self) -> str:
        """The underscored namespaces, e.g. ``admin_content_`` in Admin::Content::PagesController."""
        return self.descriptor.helper_prefix

    # ---- Instance helpers ----

    def object_path(self, *args, **options):
        """Path to the object, by default the current object: ``hat_path(hat)``."""
        return self._instance(args, options, url=False)

    def object_url(self, *args, **options):
        return self._instance(args, options, url=True)

    def nested_object_path(self, *args, **options):
        """Same as object_path, but nested under the parent when there is one."""
        return self._instance(args, options, url=False, nested=True)

    def nested_object_url(self, *args, **options):
        return self._instance(args, options, url=True, nested=True)

    def edit_object_path(self, *args, **options):
        return self._instance(args, options, url=False, action="edit")

    def edit_object_url(self, *args, **options):
        return self._instance(args, options, url=True, action="edit")

    def nested_edit_object_path(self, *args, **options):
        return self._instance(args, options, url=False, action="edit", nested=True)

    def nested_edit_object_url(self, *args, **options):
        return self._instance(args, options, url=True, action="edit", nested=True)

    # ---- Collection helpers ----

    def objects_path(self, **options):
        """Path to the collection, nested under the parent when there is one."""
        return self._collection(options, url=False)

    def objects_url(self, **options):
        return self._collection(options, url=True)

    def new_object_path(self, **options):
        return self._collection(options, url=False, action="new")

    def new_object_url(self, **options):
        return self._collection(options, url=True, action="new")

    # ---- Parent helpers ----

    def parent_path(self, *args, **options):
        """Path to the parent object: ``person_path(person)``."""
        return self._parent(args, options, url=False)

    def parent_url(self, *args, **options):
        return self._parent(args, options, url=True)

    # ---- Internals ----

    def _instance(self, args: Tuple[Any, ...], options: Mapping[str, Any],
                  url: bool, action: Optional[str] = None, nested: bool = False):
        target = self._pick_object(args, self.context.current_object)
        request = InvocationRequest(INSTANCE, action=action, target=target,
                                    options=options, nested=nested, url=url)
        return self._call(request, self.descriptor)

    def _collection(self, options: Mapping[str, Any], url: bool,
                    action: Optional[str] = None):
        request = InvocationRequest(COLLECTION, action=action, options=options,
                                    nested=True, url=url)
        return self._call(request, self.descriptor)

    def _parent(self, args: Tuple[Any, ...], options: Mapping[str, Any], url: bool):
        parent = self.context.parent_linkage
        if parent is None:
            raise NoParentResource(self.context.current_model_name)
        descriptor = ResourceDescriptor.for_model(parent.resource_name,
                                                  self.descriptor.namespaces, self.locale)
        target = self._pick_object(args, parent.instance)
        request = InvocationRequest(INSTANCE, target=target, options=options, url=url)
        self.last_resolution = resolve(request, descriptor, None, self.url_helper_prefix())
        return dispatch(self.last_resolution, self.helpers)

    def _call(self, request: InvocationRequest, descriptor: ResourceDescriptor):
        resolution = resolve(request, descriptor, self.context.parent_linkage,
                             self.url_helper_prefix())
        self.last_resolution = resolution
        return dispatch(resolution, self.helpers)

    @staticmethod
    def _pick_object(args: Tuple[Any, ...], default: Any) -> Any:
        # An explicit argument always wins over the current object
        if args:
            return args[0]
        return default
