"""SOAP helpers for the insurance back-office.

Builds request envelopes in the `<param name=".." value=".." />` convention the
back-office expects, and flattens responses into plain records.

Responses are parsed with ElementTree and matched on local tag names, so the
SOAP and vendor namespaces never get in the way. Only the flat record shape is
supported: each record element holds leaf children with text values.
"""

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional
from xml.etree import ElementTree
from xml.sax.saxutils import escape

from travelfunnel.integrations.policy.response_wrappers import IntegrationResponseError

logger = logging.getLogger(__name__)

CORIS_NAMESPACE = "http://www.coris.com.br/WebService/"

_ATTR_ENTITIES = {'"': "&quot;"}


class SoapParseError(IntegrationResponseError):
    pass


def soap_action(method: str, namespace: str = CORIS_NAMESPACE) -> str:
    return f"{namespace}{method}"


def build_envelope(method: str, params: Mapping[str, Any], namespace: str = CORIS_NAMESPACE) -> str:
    """Build a SOAP 1.1 envelope calling `method` with `params`.

    Args:
        method: Remote operation name (e.g. "BuscarPlanosNovosV13").
        params: Parameter name -> value, serialized in insertion order.
        namespace: Operation namespace.

    Returns:
        Envelope XML as a string.
    """
    params_xml = "".join(_serialize_param(key, value) for key, value in params.items())
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<soap:Envelope xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
        'xmlns:xsd="http://www.w3.org/2001/XMLSchema" '
        'xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">'
        "<soap:Body>"
        f'<{method} xmlns="{namespace}">{params_xml}</{method}>'
        "</soap:Body>"
        "</soap:Envelope>"
    )


def _serialize_param(key: str, value: Any) -> str:
    text = "" if value is None else str(value)
    return f'<param name="{escape(str(key), _ATTR_ENTITIES)}" value="{escape(text, _ATTR_ENTITIES)}" />'


def parse_records(xml_text: str, tag: str) -> List[Dict[str, str]]:
    """Every `<tag>` element flattened to {child local name: text}, in document order.

    Children without text, or with nested elements, are left out of the record.
    """
    records: List[Dict[str, str]] = []
    for elem in _iter_local(_parse(xml_text), tag):
        item: Dict[str, str] = {}
        for child in elem:
            if len(child) > 0:
                continue
            value = (child.text or "").strip()
            if value:
                item[_local_name(child.tag)] = value
        records.append(item)
    return records


def extract_tag_value(xml_text: str, tag: str) -> Optional[str]:
    """Text of the first `<tag>` element, or None when absent."""
    for elem in _iter_local(_parse(xml_text), tag):
        return (elem.text or "").strip()
    return None


def extract_tag_values(xml_text: str, tag: str) -> List[str]:
    return [(elem.text or "").strip() for elem in _iter_local(_parse(xml_text), tag) if (elem.text or "").strip()]


def _parse(xml_text: str) -> List[ElementTree.Element]:
    """Parse a response into its root plus any XML payload embedded as escaped text."""
    try:
        root = ElementTree.fromstring(xml_text)
    except ElementTree.ParseError as e:
        logger.error("Error parsing SOAP XML: %s", e)
        raise SoapParseError(f"Malformed SOAP response: {e}", payload={"body": xml_text[:500]}) from e

    roots = [root]
    for elem in root.iter():
        text = (elem.text or "").strip()
        if len(elem) == 0 and text.startswith("<"):
            if text.startswith("<?xml"):
                text = text.split("?>", 1)[-1]
            try:
                roots.append(ElementTree.fromstring(f"<embedded>{text}</embedded>"))
            except ElementTree.ParseError:
                logger.debug("Element %s carries non-XML text; left as a value", _local_name(elem.tag))
    return roots


def _iter_local(roots: List[ElementTree.Element], tag: str) -> Iterator[ElementTree.Element]:
    for root in roots:
        for elem in root.iter():
            if _local_name(elem.tag) == tag:
                yield elem


def _local_name(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag
