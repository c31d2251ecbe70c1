from .envelope import (
    CORIS_NAMESPACE,
    SoapParseError,
    build_envelope,
    extract_tag_value,
    extract_tag_values,
    parse_records,
    soap_action,
)

__all__ = [
    "CORIS_NAMESPACE",
    "SoapParseError",
    "build_envelope",
    "extract_tag_value",
    "extract_tag_values",
    "parse_records",
    "soap_action",
]
