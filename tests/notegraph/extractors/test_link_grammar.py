"""
Tests for the note link grammar.
"""
import unittest
import uuid

from notegraph.exceptions import GrammarConfigError
from notegraph.extractors.link_grammar import NoteLinkParser, decode_path, split_path
from notegraph.extractors.protocols import AccountIdentity
from notegraph.note_graph import URLKind

HOST = "www.evernote.com"
USER_ID = "76136038"
SHARD_ID = "s12"


def new_guid() -> str:
    return str(uuid.uuid4())


class TestCreateURLs(unittest.TestCase):
    def setUp(self):
        self.parser = NoteLinkParser(HOST, USER_ID, SHARD_ID)

    def test_create_web_link_url(self):
        guid = new_guid()
        self.assertEqual(
            self.parser.create_web_link_url(guid),
            f"https://{HOST}/shard/{SHARD_ID}/nl/{USER_ID}/{guid}/",
        )

    def test_create_app_link_url(self):
        guid = new_guid()
        self.assertEqual(
            self.parser.create_app_link_url(guid),
            f"evernote:///view/{USER_ID}/{SHARD_ID}/{guid}/{guid}/",
        )

    def test_create_public_link_url(self):
        guid = new_guid()
        share_key = "25771cdb535e9183"
        self.assertEqual(
            self.parser.create_public_link_url(guid, share_key),
            f"https://{HOST}/shard/{SHARD_ID}/sh/{guid}/{share_key}/",
        )

    def test_create_shortened_link_url(self):
        token = "AAxNlxMzi2VF1oV7JDyFDKv1JXcc21NekYM"
        self.assertEqual(
            self.parser.create_shortened_link_url(token),
            f"https://{HOST}/l/{token}",
        )

    def test_create_note_url_canonical_kinds(self):
        guid = new_guid()
        self.assertEqual(
            self.parser.create_note_url(guid, URLKind.WEB_LINK),
            self.parser.create_web_link_url(guid),
        )
        self.assertEqual(
            self.parser.create_note_url(guid, URLKind.APP_LINK),
            self.parser.create_app_link_url(guid),
        )

    def test_create_note_url_rejects_other_kinds(self):
        for kind in (URLKind.PUBLIC_LINK, URLKind.SHORTENED_LINK):
            with self.assertRaises(GrammarConfigError):
                self.parser.create_note_url("1", kind)

    def test_from_identity(self):
        parser = NoteLinkParser.from_identity(AccountIdentity(HOST, USER_ID, SHARD_ID))
        self.assertEqual(parser.host, HOST)
        self.assertEqual(parser.user_id, USER_ID)
        self.assertEqual(parser.shard_id, SHARD_ID)


class TestParseNoteLink(unittest.TestCase):
    def setUp(self):
        self.parser = NoteLinkParser(HOST, USER_ID, SHARD_ID)
        self.source = new_guid()
        self.target = new_guid()

    def test_non_note_link(self):
        self.assertIsNone(self.parser.parse_note_link(self.source, "https://example.org/", "example.org"))

    def test_empty_url(self):
        self.assertIsNone(self.parser.parse_note_link(self.source, "", ""))

    def test_web_link(self):
        url = self.parser.create_web_link_url(self.target)
        link = self.parser.parse_note_link(self.source, url, "WebLink")

        self.assertEqual(link.url_kind, URLKind.WEB_LINK)
        self.assertEqual(link.source_note_guid, self.source)
        self.assertEqual(link.target_note_guid, self.target)
        self.assertEqual(link.url, url)
        self.assertEqual(link.text, "WebLink")

    def test_web_link_without_trailing_slash(self):
        url = f"https://{HOST}/shard/{SHARD_ID}/nl/{USER_ID}/{self.target}"
        link = self.parser.parse_note_link(self.source, url, "WebLink")
        self.assertEqual(link.target_note_guid, self.target)

    def test_web_link_of_other_user(self):
        url = f"https://{HOST}/shard/{SHARD_ID}/nl/1234/{self.target}/"
        self.assertIsNone(self.parser.parse_note_link(self.source, url, "WebLink"))

    def test_web_link_of_other_shard(self):
        url = f"https://{HOST}/shard/s1/nl/{USER_ID}/{self.target}/"
        self.assertIsNone(self.parser.parse_note_link(self.source, url, "WebLink"))

    def test_web_link_of_other_host(self):
        url = f"https://sandbox.evernote.com/shard/{SHARD_ID}/nl/{USER_ID}/{self.target}/"
        self.assertIsNone(self.parser.parse_note_link(self.source, url, "WebLink"))

    def test_web_link_over_http(self):
        url = f"http://{HOST}/shard/{SHARD_ID}/nl/{USER_ID}/{self.target}/"
        self.assertIsNone(self.parser.parse_note_link(self.source, url, "WebLink"))

    def test_app_link(self):
        url = self.parser.create_app_link_url(self.target)
        link = self.parser.parse_note_link(self.source, url, "AppLink")

        self.assertEqual(link.url_kind, URLKind.APP_LINK)
        self.assertEqual(link.source_note_guid, self.source)
        self.assertEqual(link.target_note_guid, self.target)
        self.assertEqual(link.url, url)
        self.assertEqual(link.text, "AppLink")

    def test_app_link_of_other_user(self):
        url = f"evernote:///view/1234/{SHARD_ID}/{self.target}/{self.target}/"
        self.assertIsNone(self.parser.parse_note_link(self.source, url, "AppLink"))

    def test_app_link_of_other_shard(self):
        url = f"evernote:///view/{USER_ID}/s1/{self.target}/{self.target}/"
        self.assertIsNone(self.parser.parse_note_link(self.source, url, "AppLink"))

    def test_app_link_with_different_guids(self):
        url = f"evernote:///view/{USER_ID}/{SHARD_ID}/{self.target}/{new_guid()}/"
        self.assertIsNone(self.parser.parse_note_link(self.source, url, "AppLink"))

    def test_public_link(self):
        url = self.parser.create_public_link_url(self.target, "25771cdb535e9183")
        link = self.parser.parse_note_link(self.source, url, "PublicLink")

        self.assertEqual(link.url_kind, URLKind.PUBLIC_LINK)
        self.assertEqual(link.source_note_guid, self.source)
        self.assertEqual(link.target_note_guid, self.target)

    def test_public_link_of_any_shard(self):
        url = f"https://{HOST}/shard/s99/sh/{self.target}/25771cdb535e9183/"
        link = self.parser.parse_note_link(self.source, url, "PublicLink")
        self.assertEqual(link.url_kind, URLKind.PUBLIC_LINK)
        self.assertEqual(link.target_note_guid, self.target)

    def test_shortened_link(self):
        url = self.parser.create_shortened_link_url("AAxNlxMzi2VF1oV7JDyFDKv1JXcc21NekYM")
        link = self.parser.parse_note_link(self.source, url, "ShortenedLink")

        self.assertEqual(link.url_kind, URLKind.SHORTENED_LINK)
        self.assertEqual(link.source_note_guid, self.source)
        self.assertIsNone(link.target_note_guid)

    def test_wrong_segment_counts(self):
        urls = [
            f"https://{HOST}/l/",
            f"https://{HOST}/l/abc/def",
            f"https://{HOST}/shard/{SHARD_ID}/nl/{USER_ID}/",
            f"https://{HOST}/shard/{SHARD_ID}/nl/{USER_ID}/{self.target}/extra/",
            f"evernote:///view/{USER_ID}/{SHARD_ID}/{self.target}/",
        ]
        for url in urls:
            with self.subTest(url=url):
                self.assertIsNone(self.parser.parse_note_link(self.source, url, "x"))

    def test_round_trip_for_kinds_with_target(self):
        urls = [
            self.parser.create_app_link_url(self.target),
            self.parser.create_web_link_url(self.target),
            self.parser.create_public_link_url(self.target, "key"),
        ]
        for url in urls:
            with self.subTest(url=url):
                link = self.parser.parse_note_link(self.source, url, "x")
                self.assertEqual(link.target_note_guid, self.target)

    def test_unparseable_url(self):
        with self.assertRaises(ValueError):
            self.parser.parse_note_link(self.source, "https://[::1/note", "x")

    def test_invalid_escape_in_path(self):
        url = f"https://{HOST}/shard/{SHARD_ID}/nl/{USER_ID}/%zz/"
        with self.assertRaises(ValueError):
            self.parser.parse_note_link(self.source, url, "x")

    def test_truncated_escape_in_path(self):
        url = f"https://{HOST}/shard/{SHARD_ID}/nl/{USER_ID}/abc%2/"
        with self.assertRaises(ValueError):
            self.parser.parse_note_link(self.source, url, "x")

    def test_whitespace_in_host(self):
        with self.assertRaises(ValueError):
            self.parser.parse_note_link(self.source, "https://www evernote.com/l/abc", "x")

    def test_control_character_in_url(self):
        with self.assertRaises(ValueError):
            self.parser.parse_note_link(self.source, "https://www.evernote.com/l/a\x7fb", "x")

    def test_escaped_target_is_decoded(self):
        url = f"https://{HOST}/shard/{SHARD_ID}/nl/{USER_ID}/ab%2Dcd/"
        link = self.parser.parse_note_link(self.source, url, "x")

        self.assertEqual(link.url_kind, URLKind.WEB_LINK)
        self.assertEqual(link.target_note_guid, "ab-cd")
        self.assertEqual(link.url, url)


class TestSplitPath(unittest.TestCase):
    def test_decode_path(self):
        self.assertEqual(decode_path("/nl/ab%2dcd/"), "/nl/ab-cd/")
        self.assertEqual(decode_path("/nl/abc/"), "/nl/abc/")

    def test_decode_path_rejects_invalid_utf8(self):
        with self.assertRaises(ValueError):
            decode_path("/nl/%ff/")

    def test_trims_one_trailing_slash(self):
        self.assertEqual(split_path("/l/abc/"), ["", "l", "abc"])
        self.assertEqual(split_path("/l/abc//"), ["", "l", "abc", ""])

    def test_empty_path(self):
        self.assertEqual(split_path(""), [""])
        self.assertEqual(split_path("/"), [""])


class TestURLKind(unittest.TestCase):
    def test_display_names(self):
        self.assertEqual(
            [str(kind) for kind in URLKind],
            ["AppLink", "WebLink", "PublicLink", "ShortenedLink"],
        )

    def test_from_name(self):
        self.assertIs(URLKind.from_name("WebLink"), URLKind.WEB_LINK)
        self.assertIs(URLKind.from_name("applink"), URLKind.APP_LINK)

    def test_from_unknown_name(self):
        with self.assertRaises(GrammarConfigError):
            URLKind.from_name("NoteLink")


if __name__ == '__main__':
    unittest.main()
