"""Unit tests for the BGG XML feed parsers."""

import pytest

from enricher.exceptions import DecodeError, InvalidOwner
from enricher.feeds import (
    CollectionItem,
    GameName,
    parse_collection,
    parse_game_metadata,
)


COLLECTION_XML = b"""<?xml version="1.0" encoding="utf-8" standalone="yes"?>
<items totalitems="3" termsofuse="https://boardgamegeek.com/xmlapi/termsofuse" pubdate="Sat, 17 Feb 2018 03:49:30 +0000">
    <item objecttype="thing" objectid="13" subtype="boardgame" collid="1">
        <name sortindex="1">Catan</name>
        <status own="1" />
    </item>
    <item objecttype="thing" objectid="822" subtype="boardgame" collid="2">
        <name sortindex="1">Carcassonne</name>
    </item>
    <item objecttype="thing" objectid="30549" subtype="boardgame" collid="3">
        <name sortindex="1">Pandemic</name>
    </item>
</items>
"""

THING_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<items termsofuse="https://boardgamegeek.com/xmlapi/termsofuse">
    <item type="boardgame" id="13">
        <thumbnail>https://example.test/pic.jpg</thumbnail>
        <name type="alternate" sortindex="1" value="Die Siedler von Catan" />
        <name type="primary" sortindex="1" value="Catan" />
        <description>Trade, build and settle.</description>
        <minplayers value="3" />
        <maxplayers value="4" />
        <poll name="suggested_numplayers" title="User Suggested Number of Players" totalvotes="2000">
            <results numplayers="3">
                <result value="Best" numvotes="900" />
                <result value="Recommended" numvotes="700" />
                <result value="Not Recommended" numvotes="50" />
            </results>
            <results numplayers="4+">
                <result value="Best" numvotes="10" />
                <result value="Recommended" numvotes="60" />
                <result value="Not Recommended" numvotes="700" />
            </results>
        </poll>
        <poll name="language_dependence" title="Language Dependence" totalvotes="300">
        </poll>
    </item>
</items>
"""


class TestParseCollection:
    """Tests for parse_collection()."""

    def test_items_in_feed_order(self):
        items = parse_collection(COLLECTION_XML)
        assert items == [
            CollectionItem("13"),
            CollectionItem("822"),
            CollectionItem("30549"),
        ]

    def test_empty_collection(self):
        assert parse_collection(b'<items totalitems="0"></items>') == []

    def test_item_without_objectid_skipped(self):
        raw = b'<items><item objecttype="thing" /><item objectid="5" /></items>'
        assert parse_collection(raw) == [CollectionItem("5")]

    def test_errors_document(self):
        """BGG answers unknown usernames with 200 and an <errors> body."""
        raw = b"<errors><error><message>Invalid username specified</message></error></errors>"
        with pytest.raises(InvalidOwner, match="Invalid username specified"):
            parse_collection(raw)

    def test_malformed_xml(self):
        with pytest.raises(DecodeError):
            parse_collection(b"<items><item objectid='1'></items>")


class TestParseGameMetadata:
    """Tests for parse_game_metadata()."""

    def test_names_and_primary(self):
        meta = parse_game_metadata(THING_XML)
        assert meta.names[0] == GameName(value="Die Siedler von Catan", type="alternate")
        assert meta.primary_name == "Catan"

    def test_player_bounds(self):
        meta = parse_game_metadata(THING_XML)
        assert meta.min_players == 3
        assert meta.max_players == 4

    def test_polls_and_rows(self):
        meta = parse_game_metadata(THING_XML)
        assert [p.name for p in meta.polls] == ["suggested_numplayers", "language_dependence"]
        poll = meta.polls[0]
        assert poll.total_votes == 2000
        assert [r.num_players for r in poll.results] == ["3", "4+"]
        row = poll.results[0]
        assert (row.best, row.recommended, row.not_recommended) == (900, 700, 50)
        assert meta.polls[1].results == []

    def test_no_primary_name(self):
        raw = b'<items><item><name type="alternate" value="Alt" /></item></items>'
        assert parse_game_metadata(raw).primary_name is None

    def test_missing_counts_read_as_zero(self):
        meta = parse_game_metadata(b"<items><item></item></items>")
        assert meta.min_players == 0
        assert meta.max_players == 0
        assert meta.polls == []

    def test_no_item(self):
        meta = parse_game_metadata(b"<items></items>")
        assert meta.names == []
        assert meta.primary_name is None

    def test_row_with_too_few_votes(self):
        raw = (
            b'<items><item><poll name="suggested_numplayers">'
            b'<results numplayers="2"><result value="Best" numvotes="1" /></results>'
            b"</poll></item></items>"
        )
        with pytest.raises(DecodeError, match="expected 3 vote counts"):
            parse_game_metadata(raw)

    def test_non_integer_attribute(self):
        raw = b'<items><item><minplayers value="three" /></item></items>'
        with pytest.raises(DecodeError):
            parse_game_metadata(raw)

    def test_malformed_xml(self):
        with pytest.raises(DecodeError):
            parse_game_metadata(b"<items><item>")

    def test_short_row_in_other_poll_dropped(self):
        """Only the suggested-player-count poll must have three votes per row."""
        raw = (
            b'<items><item>'
            b'<poll name="suggested_numplayers"><results numplayers="2">'
            b'<result value="Best" numvotes="4" /><result value="Recommended" numvotes="1" />'
            b'<result value="Not Recommended" numvotes="0" /></results></poll>'
            b'<poll name="suggested_playerage"><results>'
            b'<result value="8" numvotes="3" /></results></poll>'
            b"</item></items>"
        )
        meta = parse_game_metadata(raw)
        assert [p.name for p in meta.polls] == ["suggested_numplayers", "suggested_playerage"]
        assert len(meta.polls[0].results) == 1
        assert meta.polls[1].results == []

    def test_short_row_in_superseded_player_poll_dropped(self):
        """When the player poll repeats, only the last one is checked."""
        raw = (
            b'<items><item>'
            b'<poll name="suggested_numplayers"><results numplayers="2">'
            b'<result value="Best" numvotes="4" /></results></poll>'
            b'<poll name="suggested_numplayers"><results numplayers="3">'
            b'<result value="Best" numvotes="4" /><result value="Recommended" numvotes="1" />'
            b'<result value="Not Recommended" numvotes="0" /></results></poll>'
            b"</item></items>"
        )
        meta = parse_game_metadata(raw)
        assert meta.polls[0].results == []
        assert meta.polls[1].results[0].num_players == "3"
