"""
Content negotiation library for JSON, XML and YAML representations

The representation of a response is selected by the ``Accept`` header of
the request, while the representation of a request body is determined by
its ``Content-Type`` header. JSON is the default whenever the client
doesn't care. All three representations transport the same data: the
XML representation of a single object is an element named after its
schema with one child element per field, a list is an element ``List``
with one child element ``item`` per entry and ``null`` is an empty element.
"""

import enum
import json
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Tuple

import yaml
from fastapi import Response


@enum.unique
class MediaType(enum.Enum):
    JSON = "application/json"
    XML = "application/xml"
    YAML = "application/yaml"


DEFAULT_MEDIA_TYPE: MediaType = MediaType.JSON

MEDIA_TYPE_ALIASES: Dict[str, MediaType] = {
    "application/json": MediaType.JSON,
    "application/xml": MediaType.XML,
    "text/xml": MediaType.XML,
    "application/yaml": MediaType.YAML,
    "application/x-yaml": MediaType.YAML,
    "text/yaml": MediaType.YAML
}

LIST_ROOT_TAG = "List"
LIST_ITEM_TAG = "item"
DEFAULT_ROOT_TAG = "Object"

_ILLEGAL_XML_CHARACTERS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


class DecodeError(ValueError):
    """
    Exception raised when a body can't be decoded with the given media type
    """


def _specificity(media_range: str) -> int:
    if media_range == "*/*":
        return 0
    if media_range.endswith("/*"):
        return 1
    return 2


def parse_accept(header: Optional[str]) -> List[Tuple[str, float]]:
    """
    Parse the value of an ``Accept`` header into media ranges and their quality

    The result is sorted by descending preference: higher quality first, more
    specific media ranges before wildcards and the header order otherwise.
    """

    entries = []
    for position, part in enumerate((header or "").split(",")):
        fields = [field.strip() for field in part.split(";")]
        media_range = fields[0].lower()
        if not media_range:
            continue
        quality = 1.0
        for parameter in fields[1:]:
            key, _, value = parameter.partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        entries.append((media_range, quality, position))
    entries.sort(key=lambda e: (-e[1], -_specificity(e[0]), e[2]))
    return [(media_range, quality) for media_range, quality, _ in entries]


def _expand_wildcard(media_range: str) -> List[MediaType]:
    if media_range == "*/*":
        return list(MediaType)
    main_type = media_range[:-1]
    result = []
    for alias, media_type in MEDIA_TYPE_ALIASES.items():
        if alias.startswith(main_type) and media_type not in result:
            result.append(media_type)
    return result


def select_media_type(accept: Optional[str]) -> Optional[MediaType]:
    """
    Select the media type of a response based on the ``Accept`` header

    :param accept: value of the ``Accept`` header (may be missing)
    :return: the preferred supported media type or None if nothing is acceptable
    """

    entries = parse_accept(accept)
    if not entries:
        return DEFAULT_MEDIA_TYPE

    rejected = {MEDIA_TYPE_ALIASES[m] for m, q in entries if q <= 0 and m in MEDIA_TYPE_ALIASES}
    for media_range, quality in entries:
        if quality <= 0:
            continue
        if media_range in MEDIA_TYPE_ALIASES:
            return MEDIA_TYPE_ALIASES[media_range]
        if media_range.endswith("/*"):
            for media_type in _expand_wildcard(media_range):
                if media_type not in rejected:
                    return media_type
    return None


def parse_content_type(content_type: Optional[str]) -> Optional[MediaType]:
    """
    Determine the media type of a request body based on its ``Content-Type`` header

    A missing header is treated as JSON, while None is returned for unsupported types.
    """

    if not content_type:
        return DEFAULT_MEDIA_TYPE
    return MEDIA_TYPE_ALIASES.get(content_type.split(";")[0].strip().lower())


def _to_element(tag: str, value: Any) -> ET.Element:
    element = ET.Element(tag)
    if isinstance(value, dict):
        for key, item in value.items():
            element.append(_to_element(str(key), item))
    elif isinstance(value, list):
        for item in value:
            element.append(_to_element(LIST_ITEM_TAG, item))
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif value is not None:
        element.text = _ILLEGAL_XML_CHARACTERS.sub("\ufffd", str(value))
    return element


def _from_element(element: ET.Element) -> Any:
    children = list(element)
    if not children:
        if element.tag == LIST_ROOT_TAG:
            return []
        return element.text or None
    if all(child.tag == LIST_ITEM_TAG for child in children):
        return [_from_element(child) for child in children]
    result = {}
    for child in children:
        value = _from_element(child)
        if child.tag not in result:
            result[child.tag] = value
        elif isinstance(result[child.tag], list):
            result[child.tag].append(value)
        else:
            result[child.tag] = [result[child.tag], value]
    return result


def encode(data: Any, media_type: MediaType, root: str = DEFAULT_ROOT_TAG) -> bytes:
    """
    Encode JSON-compatible data using the given media type

    :param data: JSON-compatible data (e.g. the result of ``jsonable_encoder``)
    :param media_type: target representation
    :param root: tag of the root element (XML only; lists always use ``List``)
    """

    if media_type == MediaType.XML:
        if isinstance(data, list):
            root = LIST_ROOT_TAG
        return ET.tostring(_to_element(root, data), encoding="utf-8", xml_declaration=True)
    if media_type == MediaType.YAML:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True).encode("utf-8")
    return json.dumps(data, ensure_ascii=False, allow_nan=False, separators=(",", ":")).encode("utf-8")


def decode(content: bytes, media_type: MediaType) -> Any:
    """
    Decode a body of the given media type into JSON-compatible data

    Note that XML carries no type information, so all scalar values
    are returned as strings (or None for empty elements).

    :raises DecodeError: when the content is malformed
    """

    try:
        if media_type == MediaType.XML:
            return _from_element(ET.fromstring(content))
        if media_type == MediaType.YAML:
            return yaml.safe_load(content)
        return json.loads(content)
    except (ET.ParseError, yaml.YAMLError, ValueError) as exc:
        raise DecodeError(f"Invalid {media_type.name} content: {exc}") from exc


def render(
        data: Any,
        media_type: MediaType,
        status_code: int = 200,
        root: str = DEFAULT_ROOT_TAG,
        headers: Optional[Dict[str, str]] = None
) -> Response:
    """
    Create a response of the given media type carrying the encoded data
    """

    response = Response(
        content=encode(data, media_type, root),
        status_code=status_code,
        headers=headers,
        media_type=media_type.value
    )
    response.headers["Vary"] = "Accept"
    return response
