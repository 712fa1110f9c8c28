"""Tests for loading routes.rb files."""

import os
import tempfile

import pytest

from resourceful.errors import RoutesFileError
from resourceful.route_loader import RoutesLoader, find_routes_file, load_routes

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures", "sample_app")


def _template(route_set, name):
    return route_set.helpers[f"{name}_path"].template


class TestRoutesLoaderSampleApp:
    """Load the sample app fixture."""

    @pytest.fixture(autouse=True)
    def setup(self):
        self.route_set = load_routes(FIXTURES)
        self.names = {name for name, _ in self.route_set.routes}

    def test_root_route(self):
        assert _template(self.route_set, "root") == "/"

    def test_resources_generate_four_names(self):
        assert {"posts", "new_post", "edit_post", "post"} <= self.names

    def test_member_route(self):
        assert _template(self.route_set, "publish_post") == "/posts/:id/publish"

    def test_collection_route(self):
        assert _template(self.route_set, "drafts_posts") == "/posts/drafts"

    def test_concern_replay(self):
        assert _template(self.route_set, "post_comments") == "/posts/:post_id/comments"

    def test_nested_resources(self):
        assert _template(self.route_set, "person_hats") == "/people/:person_id/hats"
        assert _template(self.route_set, "person_hat") == "/people/:person_id/hats/:id"
        assert "new_person_hat" in self.names

    def test_singular_resource_with_only(self):
        assert _template(self.route_set, "profile") == "/profile"
        assert "edit_profile" in self.names
        assert "new_profile" not in self.names

    def test_namespace(self):
        assert _template(self.route_set, "admin_person_hats") == \
            "/admin/people/:person_id/hats"
        assert _template(self.route_set, "edit_admin_person_hat") == \
            "/admin/people/:person_id/hats/:id/edit"
        assert _template(self.route_set, "admin_root") == "/admin"

    def test_scope_with_as(self):
        assert _template(self.route_set, "internal_health") == "/internal/health"

    def test_verb_with_as(self):
        assert _template(self.route_set, "about") == "/about"

    def test_conditional_routes_are_loaded(self):
        assert _template(self.route_set, "debug_routes") == "/debug/routes"

    def test_draw_external_file(self):
        assert _template(self.route_set, "old_dashboard") == "/old-dashboard"

    def test_helpers_generate_paths(self):
        helper = self.route_set.helpers["edit_admin_person_hat_path"]
        assert helper(42, 7) == "/admin/people/42/hats/7/edit"


class TestRoutesLoaderInline:
    """Test route loading with inline route definitions."""

    def _load(self, ruby_source: str):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_dir = os.path.join(tmpdir, "config")
            os.makedirs(config_dir)
            routes_file = os.path.join(config_dir, "routes.rb")
            with open(routes_file, "w") as f:
                f.write(ruby_source)
            return load_routes(tmpdir)

    def test_simple_resources(self):
        route_set = self._load("""
Rails.application.routes.draw do
  resources :users
end
""")
        assert [name for name, _ in route_set.routes] == \
            ["users", "new_user", "edit_user", "user"]

    def test_optional_locale_scope(self):
        route_set = self._load("""
Rails.application.routes.draw do
  scope '(:locale)' do
    resources :hats, only: [:index, :show]
  end
end
""")
        assert _template(route_set, "hats") == "/(:locale)/hats"
        assert route_set.helpers["hats_path"]() == "/hats"
        assert route_set.helpers["hat_path"](3, {"locale": "en"}) == "/en/hats/3"

    def test_hash_rocket_options(self):
        route_set = self._load("""
Rails.application.routes.draw do
  resources :users, :only => [:index, :show]
end
""")
        assert [name for name, _ in route_set.routes] == ["users", "user"]

    def test_symbol_array_option(self):
        route_set = self._load("""
Rails.application.routes.draw do
  resources :users, except: %i[new edit]
end
""")
        assert [name for name, _ in route_set.routes] == ["users", "user"]

    def test_resources_with_path_option(self):
        route_set = self._load("""
Rails.application.routes.draw do
  resources :users, path: 'people'
end
""")
        assert _template(route_set, "users") == "/people"

    def test_deeply_nested_namespace(self):
        route_set = self._load("""
Rails.application.routes.draw do
  namespace :api do
    namespace :v2 do
      resources :metrics, only: [:index]
    end
  end
end
""")
        assert _template(route_set, "api_v2_metrics") == "/api/v2/metrics"

    def test_scope_module_does_not_rename(self):
        route_set = self._load("""
Rails.application.routes.draw do
  scope module: :v1 do
    resources :items, only: [:index]
  end
end
""")
        assert _template(route_set, "items") == "/items"

    def test_multiple_resources_in_one_call(self):
        route_set = self._load("""
Rails.application.routes.draw do
  resources :photos, :books, only: [:index]
end
""")
        assert {name for name, _ in route_set.routes} == {"photos", "books"}

    def test_default_url_options(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            routes_file = os.path.join(tmpdir, "routes.rb")
            with open(routes_file, "w") as f:
                f.write("Rails.application.routes.draw do\n  resources :hats\nend\n")
            route_set = load_routes(routes_file, {"host": "example.com"})
        assert route_set.helpers["hat_url"](5) == "http://example.com/hats/5"

    def test_missing_concern_is_skipped(self, caplog):
        route_set = self._load("""
Rails.application.routes.draw do
  resources :posts, only: [:index], concerns: :taggable
end
""")
        assert [name for name, _ in route_set.routes] == ["posts"]
        assert "taggable" in caplog.text


class TestFindRoutesFile:
    def test_missing_routes_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(RoutesFileError):
                find_routes_file(tmpdir)

    def test_accepts_app_root(self):
        assert find_routes_file(FIXTURES).endswith(os.path.join("config", "routes.rb"))

    def test_loader_missing_file(self):
        with pytest.raises(RoutesFileError):
            RoutesLoader("/nonexistent/routes.rb").load()
