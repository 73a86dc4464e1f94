"""
Endpoint to rule set matching.
"""

import re
from typing import Optional, Sequence

from ..models.config import PathRule


def strip_query_string(endpoint: str) -> str:
    """Drop everything from the first '?' on."""
    return endpoint.split("?", 1)[0]


def match_path_rule(rules: Optional[Sequence[PathRule]], endpoint: Optional[str]) -> Optional[PathRule]:
    """
    Find the rule set that applies to an endpoint.

    Rules are tried in declaration order and the first one whose pattern
    matches anywhere in the endpoint (query string removed) wins.

    Args:
        rules: Configured path rules
        endpoint: Request URL or path

    Returns:
        Matching PathRule, or None if nothing matches or an argument is missing
    """
    if not rules or not endpoint:
        return None
    endpoint = strip_query_string(endpoint)
    for rule in rules:
        if re.search(rule.path, endpoint):
            return rule
    return None
