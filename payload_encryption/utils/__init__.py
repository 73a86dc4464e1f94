"""Utility modules for the payload encryption SDK."""

from .config_loader import load_config, parse_config
from .data_masker import DataMasker
from .document_mutator import delete_node, write_value
from .path_matcher import match_path_rule
from .path_resolver import pair_resolutions, parse_path, resolve
from .wire_codec import frame, frame_fields, parse_fields, unframe

__all__ = [
    "load_config",
    "parse_config",
    "DataMasker",
    "delete_node",
    "write_value",
    "match_path_rule",
    "pair_resolutions",
    "parse_path",
    "resolve",
    "frame",
    "frame_fields",
    "parse_fields",
    "unframe",
]
