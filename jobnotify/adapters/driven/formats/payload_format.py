"""Serialization of job state records into notification payloads."""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Any

from pydantic import BaseModel

from jobnotify.core.errors import SerializationError
from jobnotify.ports.job_state import JobState
from jobnotify.ports.transport import content_type as content_type_for

__all__ = ["Format"]

logger = logging.getLogger(__name__)

XML_ROOT_TAG = "job"
REPLACEMENT_CHARACTER = "\ufffd"
# Characters outside the XML 1.0 Char production (control codes such as ANSI escapes)
_XML_ILLEGAL_RE = re.compile(r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


class Format(str, Enum):
    """Wire format of the notification payload.

    XML keeps the record's own (camelCase) field names as tags; JSON
    rewrites them to lower_case_with_underscores keys. Both omit unset
    (None) fields and encode to UTF-8.
    """

    XML = "XML"
    JSON = "JSON"

    @classmethod
    def from_name(cls, name: str) -> Format:
        """Parse a format name case-insensitively.

        Raises:
            ValueError: If the name is not a known format.
        """
        try:
            return cls(name.strip().upper())
        except ValueError as e:
            raise ValueError(f"Unknown format '{name}' (expected JSON or XML)") from e

    @property
    def is_json(self) -> bool:
        return self is Format.JSON

    @property
    def content_type(self) -> str:
        return content_type_for(self.is_json)

    def serialize(self, job_state: JobState) -> bytes:
        """Encode a job state record.

        Args:
            job_state: Record to encode.

        Returns:
            UTF-8 encoded payload.

        Raises:
            SerializationError: If the record cannot be encoded.
        """
        try:
            if self is Format.JSON:
                data = job_state.model_dump_json(exclude_none=True).encode("utf-8")
            else:
                root = ET.Element(XML_ROOT_TAG)
                _append_model(root, job_state)
                data = ET.tostring(root, encoding="unicode").encode("utf-8")
        except (ValueError, TypeError) as e:
            raise SerializationError(f"Cannot serialize job state as {self.value}: {e}") from e

        logger.debug(f"Serialized job '{job_state.name}' as {self.value} ({len(data)} bytes)")
        return data


def _append_model(parent: ET.Element, model: BaseModel) -> None:
    for name, field in type(model).model_fields.items():
        value = getattr(model, name)
        if value is None:
            continue
        _append_value(parent, field.alias or name, value)


def _append_value(parent: ET.Element, tag: str, value: Any) -> None:
    element = ET.SubElement(parent, tag)
    _fill(element, value)


def _fill(element: ET.Element, value: Any) -> None:
    if isinstance(value, BaseModel):
        _append_model(element, value)
    elif isinstance(value, dict):
        for key, item in value.items():
            if item is None:
                continue
            entry = ET.SubElement(element, "entry", key=_xml_safe(str(key)))
            _fill(entry, item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            if item is None:
                continue
            _append_value(element, "item", item)
    else:
        element.text = _xml_safe(_scalar_text(value))


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _xml_safe(text: str) -> str:
    return _XML_ILLEGAL_RE.sub(REPLACEMENT_CHARACTER, text)
