import re

YOUTUBE_ID_LENGTH = 11
YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{video_id}"

_YOUTUBE_URL = re.compile(r'^.*(youtu.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*')
_IFRAME_SRC = re.compile(r'src=["\']([^"\']+)["\']')


def normalize_video_url(raw):
    """
    Turn a pasted YouTube link (watch, youtu.be, embed, /v/, /u/<n>/) into
    its embed URL. Anything that does not carry an 11-character video id is
    kept, with `https://` added when no scheme was given.
    """
    value = (raw or '').strip()
    if not value:
        return value

    match = _YOUTUBE_URL.match(value)
    if match and len(match.group(2)) == YOUTUBE_ID_LENGTH:
        return YOUTUBE_EMBED_URL.format(video_id=match.group(2))

    if not value.startswith('http'):
        return f"https://{value}"
    return value


def extract_map_src(raw):
    """
    Pull the src out of a pasted Google Maps `<iframe>` snippet; a bare URL
    comes back trimmed but otherwise unchanged.
    """
    value = (raw or '').strip()
    match = _IFRAME_SRC.search(value)
    if match:
        return match.group(1)
    return value


def classify_map_url(raw):
    """
    Returns None for an embeddable map URL, "share_link" for a Maps share
    link that cannot be framed and "not_embed" for anything else.
    """
    url = extract_map_src(raw)
    if not url:
        return None
    if 'maps.app.goo.gl' in url or ('maps.google.com' in url and 'embed' not in url):
        return 'share_link'
    if 'google.com/maps/embed' not in url:
        return 'not_embed'
    return None
