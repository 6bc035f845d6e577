import json

from authentication.core.exceptions import MalformedPayloadException


def parse_json_list(raw, field_name):
    """
    Decode a list that arrives either as JSON text (multipart forms) or as an
    already-parsed list (JSON bodies). A blank form value is an empty list;
    anything else is a malformed payload.
    """
    if isinstance(raw, (list, tuple)):
        return list(raw)

    if isinstance(raw, (str, bytes)):
        if not raw.strip():
            return []
        try:
            value = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise MalformedPayloadException(f"'{field_name}' is not valid JSON: {str(e)}")
        if isinstance(value, list):
            return value

    raise MalformedPayloadException(f"'{field_name}' must be a JSON array.")


def parse_url_list(raw, field_name):
    """A JSON list whose entries must all be URL strings"""
    urls = parse_json_list(raw, field_name)
    if not all(isinstance(url, str) and url for url in urls):
        raise MalformedPayloadException(f"'{field_name}' must contain only image URLs.")
    return urls
