"""Code to description lookups for statuses and payment methods"""

from typing import Dict, Iterable

from paydash.domain.models import CodeLabel


def build_label_map(codes: Iterable[CodeLabel]) -> Dict[str, str]:
    return {c.code: c.description for c in codes}


def resolve_label(code: str, labels: Dict[str, str]) -> str:
    """Description for code, or the code itself when it is not in the table"""
    return labels.get(code, code)
