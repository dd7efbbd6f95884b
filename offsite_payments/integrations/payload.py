"""Decoding of inbound callback bodies into flat, read-only payloads."""

import json
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Union
from urllib.parse import parse_qsl
from xml.etree import ElementTree

from ..exceptions import MalformedPayload

FORM = "application/x-www-form-urlencoded"
JSON = "application/json"
XML = "application/xml"

ALL_CONTENT_TYPES = (FORM, JSON, XML)


def normalize_content_type(content_type: Optional[str]) -> str:
    """Reduce a Content-Type header to one of FORM, JSON or XML.

    A missing header is treated as form encoding, which is what the providers
    in this package post by default.
    """
    if not content_type:
        return FORM
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == FORM:
        return FORM
    if media_type == JSON or media_type.endswith("+json"):
        return JSON
    if media_type in (XML, "text/xml") or media_type.endswith("+xml"):
        return XML
    raise MalformedPayload(f"Unsupported content type: {content_type}")


def _flatten(value: Any, prefix: str, out: Dict[str, str]) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            _flatten(item, f"{prefix}.{key}" if prefix else str(key), out)
    elif isinstance(value, list):
        for index, item in enumerate(value):
            _flatten(item, f"{prefix}.{index}" if prefix else str(index), out)
    elif value is None:
        out[prefix] = ""
    elif isinstance(value, bool):
        out[prefix] = "true" if value else "false"
    else:
        out[prefix] = str(value)


def _decode_form(text: str) -> Dict[str, str]:
    return dict(parse_qsl(text, keep_blank_values=True))


def _decode_json(text: str) -> Dict[str, str]:
    try:
        document = json.loads(text)
    except ValueError as exc:
        raise MalformedPayload(f"Invalid JSON payload: {exc}") from exc
    if not isinstance(document, dict):
        raise MalformedPayload("JSON payload must be an object")
    out: Dict[str, str] = {}
    _flatten(document, "", out)
    return out


def _element_fields(element: ElementTree.Element, prefix: str, out: Dict[str, str]) -> None:
    for child in element:
        key = f"{prefix}.{child.tag}" if prefix else child.tag
        if len(child):
            _element_fields(child, key, out)
        else:
            out[key] = (child.text or "").strip()


def _decode_xml(text: str) -> Dict[str, str]:
    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError as exc:
        raise MalformedPayload(f"Invalid XML payload: {exc}") from exc
    out: Dict[str, str] = {}
    _element_fields(root, "", out)
    return out


_DECODERS = {FORM: _decode_form, JSON: _decode_json, XML: _decode_xml}


def parse_payload(
    raw_body: Union[bytes, str, Mapping[str, Any], None],
    content_type: Optional[str] = None,
    accepted: Iterable[str] = ALL_CONTENT_TYPES,
) -> Mapping[str, str]:
    """Decode a callback body into an immutable ``str -> str`` mapping.

    Args:
        raw_body: Raw request body, or an already-decoded mapping (as some web
            frameworks hand over form posts)
        content_type: Request Content-Type header
        accepted: Content types the provider is known to send

    Returns:
        Read-only mapping of wire field names to string values

    Raises:
        MalformedPayload: If the content type is unsupported or not accepted
            by the provider, or the body fails to decode
    """
    if isinstance(raw_body, Mapping):
        out: Dict[str, str] = {}
        _flatten(dict(raw_body), "", out)
        return MappingProxyType(out)

    media_type = normalize_content_type(content_type)
    if media_type not in accepted:
        raise MalformedPayload(f"Content type {media_type} is not accepted by this provider")

    if raw_body is None:
        raw_body = b""
    if isinstance(raw_body, bytes):
        try:
            raw_body = raw_body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedPayload(f"Payload is not valid UTF-8: {exc}") from exc

    return MappingProxyType(_DECODERS[media_type](raw_body))
