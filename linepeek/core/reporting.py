from __future__ import annotations
import json
from collections import Counter
from pathlib import Path
from typing import Dict, List

from .models import IndexEntry


class Reporter:
    def __init__(self, out_dir: Path) -> None:
        self.out_dir = out_dir

    def write_all(self, entries: List[IndexEntry]) -> Dict[str, int]:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        index = [e.__dict__ for e in entries]
        (self.out_dir / "index.json").write_text(json.dumps(index, indent=2))

        statuses = Counter(e.status for e in entries)
        encodings = Counter(e.encoding for e in entries if e.encoding)
        lines = ["# Render Summary", ""]
        lines.append("## Files")
        for status, count in sorted(statuses.items()):
            lines.append(f"- {status}: {count}")
        lines.append("")
        lines.append("## Encodings")
        for encoding, count in encodings.most_common():
            lines.append(f"- {encoding}: {count}")
        lines.append("")
        fallbacks = [e for e in entries if e.used_fallback]
        if fallbacks:
            lines.append("## Plain-text fallbacks")
            for e in fallbacks:
                lines.append(f"- {e.file_location}")
            lines.append("")
        (self.out_dir / "summary.md").write_text("\n".join(lines))
        return dict(statuses)
