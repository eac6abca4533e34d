"""Request definition parsers."""

from .yaml_parser import parse_request_file, parse_request_from_dict, validate_request_file

__all__ = [
    "parse_request_file",
    "validate_request_file",
    "parse_request_from_dict",
]
