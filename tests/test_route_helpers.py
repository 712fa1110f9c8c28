"""Tests for route helpers and the route-drawing DSL."""

import pytest

from resourceful.errors import RouteGenerationError, UnknownRouteHelper
from resourceful.route_helpers import RouteHelper, RouteSet, join_path, to_param


class Record:
    def __init__(self, id):
        self.id = id


class Slugged:
    id = 3

    def to_param(self):
        return "3-red-hat"


def _names(routes):
    return [name for name, _ in routes.routes]


def _template(routes, name):
    return routes.helpers[f"{name}_path"].template


class TestRouteHelper:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.helper = RouteHelper("person_hat_path", "/people/:person_id/hats/:id")

    def test_positional_segments(self):
        assert self.helper(Record(42), Record(7)) == "/people/42/hats/7"

    def test_query_options(self):
        path = self.helper(Record(42), Record(7), {"status": 1, "page": 2})
        assert path == "/people/42/hats/7?status=1&page=2"

    def test_segments_from_options(self):
        assert self.helper({"person_id": 4, "id": 5}) == "/people/4/hats/5"

    def test_format_and_anchor(self):
        path = self.helper(1, 2, {"format": "json", "anchor": "top"})
        assert path == "/people/1/hats/2.json#top"

    def test_missing_segment(self):
        with pytest.raises(RouteGenerationError, match="id"):
            self.helper(Record(42))

    def test_too_many_arguments(self):
        with pytest.raises(RouteGenerationError):
            self.helper(1, 2, 3)

    def test_optional_format_group(self):
        helper = RouteHelper("hats_path", "/hats(.:format)")
        assert helper.segments == []
        assert helper() == "/hats"
        assert helper({"format": "json"}) == "/hats.json"

    def test_url_needs_host(self):
        helper = RouteHelper("hats_url", "/hats", "url")
        with pytest.raises(RouteGenerationError, match="host"):
            helper()
        assert helper({"host": "example.com"}) == "http://example.com/hats"

    def test_url_options(self):
        helper = RouteHelper("hats_url", "/hats", "url", {"host": "example.com"})
        assert helper() == "http://example.com/hats"
        assert helper({"protocol": "https", "port": 8443}) == "https://example.com:8443/hats"


class TestToParam:
    def test_to_param_method(self):
        assert to_param(Slugged()) == "3-red-hat"

    def test_id_attribute(self):
        assert to_param(Record(9)) == "9"

    def test_plain_values(self):
        assert to_param(9) == "9"
        assert to_param("abc") == "abc"
        assert to_param(None) is None


class TestRouteSet:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.routes = RouteSet()

    def test_resources_names(self):
        self.routes.resources("posts")
        assert _names(self.routes) == ["posts", "new_post", "edit_post", "post"]
        assert _template(self.routes, "posts") == "/posts"
        assert _template(self.routes, "new_post") == "/posts/new"
        assert _template(self.routes, "edit_post") == "/posts/:id/edit"
        assert _template(self.routes, "post") == "/posts/:id"
        assert "post_url" in self.routes.helpers

    def test_only_filter(self):
        self.routes.resources("posts", only=["index", "show"])
        assert _names(self.routes) == ["posts", "post"]

    def test_except_filter(self):
        self.routes.resources("posts", except_=["new", "edit"])
        assert _names(self.routes) == ["posts", "post"]

    def test_singular_resource(self):
        self.routes.resource("profile")
        assert set(_names(self.routes)) == {"profile", "new_profile", "edit_profile"}
        assert _template(self.routes, "profile") == "/profile"
        assert _template(self.routes, "edit_profile") == "/profile/edit"

    def test_nested_resources(self):
        with self.routes.resources("people"):
            self.routes.resources("hats")
        assert _template(self.routes, "person_hats") == "/people/:person_id/hats"
        assert _template(self.routes, "person_hat") == "/people/:person_id/hats/:id"
        assert _template(self.routes, "new_person_hat") == "/people/:person_id/hats/new"
        assert _template(self.routes, "edit_person_hat") == "/people/:person_id/hats/:id/edit"

    def test_namespace(self):
        with self.routes.namespace("admin"):
            with self.routes.namespace("content"):
                self.routes.resources("pages")
        assert _template(self.routes, "admin_content_pages") == "/admin/content/pages"
        assert _template(self.routes, "edit_admin_content_page") == "/admin/content/pages/:id/edit"

    def test_namespace_with_nesting(self):
        with self.routes.namespace("admin"):
            with self.routes.resources("people"):
                self.routes.resources("hats")
        assert _template(self.routes, "edit_admin_person_hat") == \
            "/admin/people/:person_id/hats/:id/edit"

    def test_member_and_collection_routes(self):
        with self.routes.namespace("admin"):
            with self.routes.resources("posts"):
                with self.routes.member():
                    self.routes.match("publish")
                with self.routes.collection():
                    self.routes.match("drafts")
        assert _template(self.routes, "publish_admin_post") == "/admin/posts/:id/publish"
        assert _template(self.routes, "drafts_admin_posts") == "/admin/posts/drafts"

    def test_on_member_option(self):
        with self.routes.resources("posts"):
            self.routes.match("archive", on="member")
        assert _template(self.routes, "archive_post") == "/posts/:id/archive"

    def test_nested_verb_route(self):
        with self.routes.resources("posts"):
            self.routes.match("preview")
        assert _template(self.routes, "post_preview") == "/posts/:post_id/preview"

    def test_verb_route_names(self):
        self.routes.match("about")
        self.routes.match("photos/search")
        self.routes.match("/health", as_="health_check")
        self.routes.match("/users/:id/preview")
        assert _names(self.routes) == ["about", "photos_search", "health_check"]

    def test_root(self):
        self.routes.root()
        with self.routes.namespace("admin"):
            self.routes.root()
        assert _template(self.routes, "root") == "/"
        assert _template(self.routes, "admin_root") == "/admin"

    def test_scope(self):
        with self.routes.scope(path="/v1"):
            self.routes.resources("items", only=["index"])
        with self.routes.scope(path="/v2", as_="v2"):
            self.routes.resources("items", only=["index"])
        assert _template(self.routes, "items") == "/v1/items"
        assert _template(self.routes, "v2_items") == "/v2/items"

    def test_optional_locale_scope(self):
        with self.routes.scope("(:locale)"):
            self.routes.resources("hats")
        assert _template(self.routes, "hats") == "/(:locale)/hats"
        assert self.routes.helpers["hats_path"]() == "/hats"
        assert self.routes.helpers["hats_path"]({"locale": "en"}) == "/en/hats"
        assert self.routes.helpers["hat_path"](Record(7), {"locale": "fr"}) == "/fr/hats/7"
        assert self.routes.helpers["hat_path"](Record(7), {"page": 2}) == "/hats/7?page=2"

    def test_custom_param(self):
        with self.routes.resources("posts", param="slug"):
            self.routes.resources("comments", only=["index"])
        assert _template(self.routes, "post") == "/posts/:slug"
        assert _template(self.routes, "post_comments") == "/posts/:post_slug/comments"

    def test_duplicate_name_keeps_first(self, caplog):
        self.routes.resources("hats")
        with self.routes.scope(path="/other"):
            self.routes.resources("hats")
        assert _template(self.routes, "hats") == "/hats"
        assert len(self.routes.routes) == 4
        assert "already in use" in caplog.text

    def test_unknown_helper(self):
        with pytest.raises(UnknownRouteHelper) as exc:
            self.routes.helpers["hats_path"]
        assert exc.value.attempted_name == "hats_path"
        assert "hats_path" not in self.routes.helpers
        assert self.routes.helpers.get("hats_path") is None

    def test_call_by_name(self):
        self.routes.resources("hats")
        assert self.routes.helpers.call("hat_path", Record(3)) == "/hats/3"


def test_join_path():
    assert join_path("", "hats") == "/hats"
    assert join_path("/people/:person_id", "/hats") == "/people/:person_id/hats"
    assert join_path("/admin", None) == "/admin"
    assert join_path("/", "about") == "/about"
