"""Multistatus (PROPFIND) response parsing."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from .constants import DAV_NAMESPACE, OC_NAMESPACE
from .errors import ParseError
from .models import TrashProperties

_D = f"{{{DAV_NAMESPACE}}}"
_OC = f"{{{OC_NAMESPACE}}}"


def parse_trash_multistatus(body: bytes) -> list[TrashProperties]:
    """Parse every `d:response` item into a property bag, in document order."""
    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        raise ParseError(f"Invalid multistatus XML: {exc}") from exc

    if root.tag != f"{_D}multistatus":
        raise ParseError(f"Expected d:multistatus root element, found {root.tag}")

    return [
        _parse_response(index, item)
        for index, item in enumerate(root.findall(f"{_D}response"))
    ]


def _parse_response(index: int, item: ET.Element) -> TrashProperties:
    href = _text(item.find(f"{_D}href"))
    if not href:
        raise ParseError(f"Multistatus response #{index} has no d:href")

    props = _successful_props(item)
    resource_type = _first(props, f"{_D}resourcetype")
    is_collection = (
        resource_type is not None and resource_type.find(f"{_D}collection") is not None
    )

    return TrashProperties(
        href=href,
        original_filename=_first_text(props, f"{_OC}trashbin-original-filename"),
        original_location=_first_text(props, f"{_OC}trashbin-original-location"),
        deleted_at_raw=_first_text(props, f"{_OC}trashbin-delete-datetime"),
        is_collection=is_collection,
        content_length=_parse_int(_first_text(props, f"{_D}getcontentlength")),
    )


def _successful_props(item: ET.Element) -> list[ET.Element]:
    """Collect d:prop blocks whose propstat reports a 2xx status (or none)."""
    props: list[ET.Element] = []
    for propstat in item.findall(f"{_D}propstat"):
        status_line = _text(propstat.find(f"{_D}status"))
        if status_line and not _is_success_status_line(status_line):
            continue
        prop = propstat.find(f"{_D}prop")
        if prop is not None:
            props.append(prop)
    return props


def _is_success_status_line(status_line: str) -> bool:
    # "HTTP/1.1 200 OK"
    parts = status_line.split()
    return len(parts) >= 2 and parts[1].startswith("2")


def _first(props: list[ET.Element], tag: str) -> ET.Element | None:
    for prop in props:
        element = prop.find(tag)
        if element is not None:
            return element
    return None


def _first_text(props: list[ET.Element], tag: str) -> str | None:
    value = _text(_first(props, tag))
    return value or None


def _text(element: ET.Element | None) -> str:
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
