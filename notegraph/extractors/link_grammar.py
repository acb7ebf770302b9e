"""
URL grammar for links that reference notes.

Recognizes four URL shapes and extracts the referenced note's guid:

- AppLink:       evernote:///view/[userId]/[shardId]/[noteGuid]/[noteGuid]/
- WebLink:       https://[host]/shard/[shardId]/nl/[userId]/[noteGuid]/
- PublicLink:    https://[host]/shard/[shardId]/sh/[noteGuid]/[shareKey]/
- ShortenedLink: https://[host]/l/[random string]

AppLinks and WebLinks are only accepted for the configured user and shard,
links into other accounts cannot be fetched. PublicLinks are accepted for any
shard because shared notes may live in other accounts. ShortenedLinks carry no
target guid; resolving them needs a redirect round-trip.
"""
import re
from typing import Optional
from urllib.parse import unquote, urlsplit

from ..exceptions import GrammarConfigError
from ..note_graph import NoteLink, URLKind
from .protocols import AccountIdentity


APP_LINK_SCHEME = "evernote"
WEB_SCHEME = "https"

EVERNOTE_HOST = "www.evernote.com"
SANDBOX_EVERNOTE_HOST = "sandbox.evernote.com"

# A "%" not followed by two hex digits
INVALID_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
INVALID_HOST_CHARS = re.compile(r"[\x00-\x20\x7f]")


def split_path(path: str) -> list:
    """
    Split a URL path into segments after trimming one trailing slash.

    A leading slash yields an empty first segment, so "/l/abc/" becomes
    ["", "l", "abc"].
    """
    if path.endswith("/"):
        path = path[:-1]
    return path.split("/")


def decode_path(path: str) -> str:
    """
    Percent-decode a URL path.

    Raises:
        ValueError: If the path contains a malformed escape or the escapes
            do not decode to UTF-8
    """
    if INVALID_ESCAPE.search(path):
        raise ValueError(f"invalid URL escape in path [{path}]")
    return unquote(path, errors="strict")


def split_url(link_url: str):
    """
    Split a URL into its components with the path percent-decoded.

    Raises:
        ValueError: If the URL contains control characters, its host part
            contains whitespace, or its path cannot be decoded
    """
    if CONTROL_CHARS.search(link_url):
        raise ValueError(f"invalid control character in URL [{link_url!r}]")
    parts = urlsplit(link_url)
    if INVALID_HOST_CHARS.search(parts.netloc):
        raise ValueError(f"invalid character in host [{parts.netloc!r}]")
    return parts._replace(path=decode_path(parts.path))


class NoteLinkParser:
    """
    Creates and parses note URLs for one account.

    Examples:
        >>> parser = NoteLinkParser("www.evernote.com", "76136038", "s12")
        >>> parser.create_web_link_url("d72d")
        'https://www.evernote.com/shard/s12/nl/76136038/d72d/'
        >>> parser.parse_note_link("1", "https://example.org/", "x") is None
        True
    """

    def __init__(self, host: str, user_id: str, shard_id: str):
        """
        Args:
            host: Web hostname of the note service
            user_id: Id of the account owning the notes
            shard_id: Storage partition of the account
        """
        self.host = host.lower()
        self.user_id = str(user_id)
        self.shard_id = shard_id

    @classmethod
    def from_identity(cls, identity: AccountIdentity) -> "NoteLinkParser":
        return cls(identity.host, identity.user_id, identity.shard_id)

    def __repr__(self):
        return (f"NoteLinkParser(host={self.host!r}, user_id={self.user_id!r}, "
                f"shard_id={self.shard_id!r})")

    def parse_note_link(self, note_guid: str, link_url: str, link_text: str) -> Optional[NoteLink]:
        """
        Classify ``link_url`` found in the note ``note_guid``.

        Args:
            note_guid: Guid of the note containing the link
            link_url: The href of the link
            link_text: Anchor text of the link

        Returns:
            A NoteLink, or None if the URL does not reference a note of this
            account (or a public note)

        Raises:
            ValueError: If ``link_url`` cannot be parsed as a URL
        """
        parts = split_url(link_url)
        segments = split_path(parts.path)

        def note_link(target_guid: Optional[str], url_kind: URLKind) -> NoteLink:
            return NoteLink(
                source_note_guid=note_guid,
                target_note_guid=target_guid,
                text=link_text,
                url=link_url,
                url_kind=url_kind,
            )

        if parts.scheme == APP_LINK_SCHEME:
            if (len(segments) == 6
                    and segments[1] == "view"
                    and segments[2] == self.user_id
                    and segments[3] == self.shard_id
                    and segments[4] == segments[5]):
                return note_link(segments[4], URLKind.APP_LINK)
            return None

        if parts.scheme != WEB_SCHEME or parts.hostname != self.host:
            return None

        if len(segments) == 3 and segments[1] == "l":
            return note_link(None, URLKind.SHORTENED_LINK)

        if len(segments) == 6 and segments[1] == "shard":
            if (segments[3] == "nl"
                    and segments[2] == self.shard_id
                    and segments[4] == self.user_id):
                return note_link(segments[5], URLKind.WEB_LINK)
            # Shard is not checked: shared notes may belong to other accounts
            if segments[3] == "sh":
                return note_link(segments[4], URLKind.PUBLIC_LINK)

        return None

    def create_app_link_url(self, note_guid: str) -> str:
        return f"{APP_LINK_SCHEME}:///view/{self.user_id}/{self.shard_id}/{note_guid}/{note_guid}/"

    def create_web_link_url(self, note_guid: str) -> str:
        return f"{WEB_SCHEME}://{self.host}/shard/{self.shard_id}/nl/{self.user_id}/{note_guid}/"

    def create_public_link_url(self, note_guid: str, share_key: str) -> str:
        return f"{WEB_SCHEME}://{self.host}/shard/{self.shard_id}/sh/{note_guid}/{share_key}/"

    def create_shortened_link_url(self, random: str) -> str:
        return f"{WEB_SCHEME}://{self.host}/l/{random}"

    def create_note_url(self, note_guid: str, url_kind: URLKind) -> str:
        """
        Create the canonical URL of a note.

        Raises:
            GrammarConfigError: If ``url_kind`` is not AppLink or WebLink
        """
        if url_kind is URLKind.WEB_LINK:
            return self.create_web_link_url(note_guid)
        if url_kind is URLKind.APP_LINK:
            return self.create_app_link_url(note_guid)
        raise GrammarConfigError(
            f"Failed to create URL for note with GUID [{note_guid}]: "
            f"unsupported URL kind [{url_kind}]"
        )
