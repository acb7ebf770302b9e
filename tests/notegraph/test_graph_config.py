"""
Tests for GraphConfig.
"""
import pytest

from notegraph.exceptions import GrammarConfigError
from notegraph.graph_config import GraphConfig, NotesQuery
from notegraph.note_graph import URLKind


class TestGraphConfigDefaults:
    def test_default_instantiation(self):
        config = GraphConfig()

        assert config.note_url_kind == "WebLink"
        assert config.url_kind is URLKind.WEB_LINK
        assert config.page_size == 100
        assert config.include_all_notes is False
        assert config.show_progress is True
        assert config.query == NotesQuery(order="created", ascending=False)
        assert config.output_format == "graphml"

    def test_app_link(self):
        assert GraphConfig(note_url_kind="AppLink").url_kind is URLKind.APP_LINK


class TestGraphConfigValidation:
    @pytest.mark.parametrize("page_size", [0, -1])
    def test_invalid_page_size(self, page_size):
        with pytest.raises(ValueError, match="page_size"):
            GraphConfig(page_size=page_size)

    def test_invalid_output_format(self):
        with pytest.raises(ValueError, match="output_format"):
            GraphConfig(output_format="gexf")

    @pytest.mark.parametrize("kind", ["PublicLink", "ShortenedLink"])
    def test_unsupported_note_url_kind(self, kind):
        with pytest.raises(GrammarConfigError):
            GraphConfig(note_url_kind=kind)

    def test_unknown_note_url_kind(self):
        with pytest.raises(GrammarConfigError):
            GraphConfig(note_url_kind="Bookmark")


class TestGraphConfigSerialization:
    def test_round_trip(self, tmp_path):
        config = GraphConfig(
            note_url_kind="AppLink",
            page_size=25,
            include_all_notes=True,
            query=NotesQuery(order="title", ascending=True),
            output_format="jsonl",
        )
        path = tmp_path / "graph_config.json"

        config.save(path)
        loaded = GraphConfig.load(path)

        assert loaded == config
        assert isinstance(loaded.query, NotesQuery)

    def test_to_dict(self):
        data = GraphConfig().to_dict()
        assert data["query"] == {"order": "created", "ascending": False}
        assert data["note_url_kind"] == "WebLink"
