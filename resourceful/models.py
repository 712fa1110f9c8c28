"""Data models for resourceful."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, NamedTuple, Optional, Tuple

from .inflection import pluralize, singularize, underscore

INSTANCE = "instance"
COLLECTION = "collection"
KINDS = (INSTANCE, COLLECTION)

# Action qualifiers that prefix a helper name: new_hat_path, edit_hat_path
ACTION_QUALIFIERS = ("new", "edit")


def _helper_segment(name: str) -> str:
    """``Admin::PersonHat`` -> ``admin_person_hat``."""
    return underscore(name).replace("/", "_")


@dataclass(frozen=True)
class ResourceDescriptor:
    """The resource a controller manages, fixed when the controller is set up."""

    singular_name: str  # hat
    plural_name: str  # hats
    namespaces: Tuple[str, ...] = ()  # ("admin", "content")

    @classmethod
    def for_model(cls, model_name: str, namespaces=(),
                  locale: str = "en") -> ResourceDescriptor:
        singular = _helper_segment(model_name)
        return cls(
            singular_name=singular,
            plural_name=pluralize(singular, locale),
            namespaces=tuple(_helper_segment(ns) for ns in namespaces),
        )

    @classmethod
    def from_controller(cls, controller_name: str,
                        locale: str = "en") -> ResourceDescriptor:
        """Build a descriptor from ``Admin::Content::PagesController``."""
        *namespaces, name = controller_name.split("::")
        if name.endswith("Controller"):
            name = name[: -len("Controller")]
        return cls.for_model(singularize(name, locale), namespaces, locale)

    @property
    def helper_prefix(self) -> str:
        """``admin_content_`` for a namespaced resource, ``""`` otherwise."""
        if not self.namespaces:
            return ""
        return "_".join(self.namespaces) + "_"


@dataclass(frozen=True)
class ParentLinkage:
    """A declared parent resource and, once known, the parent record."""

    resource_name: str  # Person
    instance: Any = None

    @property
    def present(self) -> bool:
        return self.instance is not None

    @property
    def helper_segment(self) -> str:
        return _helper_segment(self.resource_name)


@dataclass(frozen=True)
class InvocationRequest:
    """One URL helper call: which route, for what, with which options."""

    kind: str  # "instance" | "collection"
    action: Optional[str] = None  # None | "new" | "edit"
    target: Any = None
    options: Mapping[str, Any] = field(default_factory=dict)
    nested: bool = False
    url: bool = False  # fully-qualified URL instead of a path

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"Unknown request kind: {self.kind!r}")
        if self.action is not None and self.action not in ACTION_QUALIFIERS:
            raise ValueError(f"Unknown action qualifier: {self.action!r}")
        if self.kind == COLLECTION and self.target is not None:
            raise ValueError("A collection request cannot carry a target object")


@dataclass
class RequestContext:
    """What the controller knows about the request being handled."""

    current_model_name: str
    current_object: Any = None
    parent_object: Any = None
    parent_class_name: Optional[str] = None
    namespaces: Tuple[str, ...] = ()

    @property
    def parent_linkage(self) -> Optional[ParentLinkage]:
        if not self.parent_class_name:
            return None
        return ParentLinkage(self.parent_class_name, self.parent_object)


class Resolution(NamedTuple):
    """A helper name plus the exact arguments it should be called with."""

    helper_name: str
    args: Tuple[Any, ...]
    options: Optional[Mapping[str, Any]]  # None means "do not pass options"


@dataclass
class ResourceScope:
    """The resource a block of nested routes hangs off."""

    singular: str  # post
    plural: str  # posts
    collection_path: str  # /posts
    member_path: str  # /posts/:id
    nested_path: str  # /posts/:post_id
    name_prefix: str = ""  # helper prefix in effect where the resource was declared
    is_singular: bool = False


@dataclass
class RouteContext:
    """Tracks nesting state while routes are drawn."""

    path_prefix: str = ""
    name_prefix: str = ""  # admin_person_
    resource: Optional[ResourceScope] = None
    scope_type: Optional[str] = None  # "member" | "collection" | None

    def copy(self) -> RouteContext:
        return RouteContext(
            path_prefix=self.path_prefix,
            name_prefix=self.name_prefix,
            resource=self.resource,
            scope_type=self.scope_type,
        )
