"""JSON report helpers for extraction results."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List

from .core.types import LinkInfo, OutlineItem, TextSelection


def outline_to_dict(outline: Iterable[OutlineItem]) -> List[Dict[str, object]]:
    return [item.to_dict() for item in outline]


def links_to_dict(links: Iterable[LinkInfo]) -> List[Dict[str, object]]:
    return [link.to_dict() for link in links]


def selection_to_dict(selection: TextSelection) -> Dict[str, object]:
    return selection.to_dict()


def write_json_report(data: object, path: str | Path) -> None:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, ensure_ascii=False, indent=2)


def to_json(data: object) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)
