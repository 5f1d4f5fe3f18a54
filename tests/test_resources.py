"""
Unit tests for the declarative resource tree.
"""

from unittest.mock import MagicMock

import pytest

from usabilla import UsabillaError
from usabilla.resources import PRODUCTS, ResourceSpec, build_tree, find_resource


@pytest.fixture
def fetch() -> MagicMock:
    """Stand-in for the client's signed GET."""
    return MagicMock(return_value={"items": []})


@pytest.fixture
def tree(fetch):
    """Interpreted production resource table."""
    return build_tree(PRODUCTS, "/live", fetch)


class TestBuildTree:
    """Tests for build_tree()."""

    def test_websites_paths(self, tree):
        """Every endpoint gets its full path template."""
        websites = tree["websites"]

        assert websites.path_template == "/live/websites"
        assert websites.buttons.path_template == "/live/websites/button"
        assert websites.buttons.feedback.path_template == "/live/websites/button/:id/feedback"
        assert websites.campaigns.path_template == "/live/websites/campaign"
        assert websites.campaigns.results.path_template == "/live/websites/campaign/:id/results"
        assert websites.campaigns.stats.path_template == "/live/websites/campaign/:id/stats"

    def test_base_path_trailing_slash(self, fetch):
        """A trailing slash on the base path is not doubled."""
        tree = build_tree(PRODUCTS, "/live/", fetch)
        assert tree["websites"].buttons.path_template == "/live/websites/button"

    def test_custom_table(self, fetch):
        """Any table can be interpreted."""
        spec = ResourceSpec("apps", "/apps", children=(ResourceSpec("forms", "/:id/forms"),))
        tree = build_tree((spec,), "/live", fetch)
        assert tree["apps"].forms.path_template == "/live/apps/:id/forms"

    def test_unknown_child(self, tree):
        """Unknown children raise AttributeError."""
        with pytest.raises(AttributeError, match="no child 'surveys'"):
            tree["websites"].surveys


class TestResourceGet:
    """Tests for Resource.get()."""

    def test_get_forwards_to_fetch(self, tree, fetch):
        """get() hands the template, id and params to the fetch callable."""
        result = tree["websites"].buttons.feedback.get(id="42", params={"limit": 5})

        fetch.assert_called_once_with("/live/websites/button/:id/feedback", "42", {"limit": 5})
        assert result == {"items": []}

    def test_get_without_arguments(self, tree, fetch):
        """get() with no arguments fetches the collection."""
        tree["websites"].campaigns.get()
        fetch.assert_called_once_with("/live/websites/campaign", None, None)

    def test_grouping_node_not_gettable(self, tree, fetch):
        """Product nodes have no endpoint of their own."""
        with pytest.raises(UsabillaError, match="no endpoint"):
            tree["websites"].get()
        fetch.assert_not_called()


class TestFindResource:
    """Tests for find_resource() and iter_paths()."""

    def test_iter_paths(self, tree):
        """iter_paths() yields every node by dotted name."""
        names = [name for name, _ in tree["websites"].iter_paths()]
        assert names == [
            "websites",
            "websites.buttons",
            "websites.buttons.feedback",
            "websites.campaigns",
            "websites.campaigns.results",
            "websites.campaigns.stats",
        ]

    def test_find_by_dotted_name(self, tree):
        """Dotted names resolve to the matching node."""
        assert find_resource(tree, "websites.campaigns.stats") is tree["websites"].campaigns.stats

    def test_find_unknown(self, tree):
        """Unknown names raise KeyError."""
        with pytest.raises(KeyError):
            find_resource(tree, "websites.nothing")
