#!/usr/bin/env python3
"""
Fail the build if services/controllers touch the session or build queries.
"""

import sys
from pathlib import Path


FORBIDDEN = [
    "db.session",
    "transactional_session(",
    "from extensions import db",
    "session.execute(",
    "select(",
]

ALLOWLIST: set = set()


def scan_paths(paths):
    violations = []
    for path in paths:
        for file in Path(path).rglob("*.py"):
            if file in ALLOWLIST:
                continue
            text = file.read_text(encoding="utf-8")
            for idx, line in enumerate(text.splitlines(), start=1):
                for token in FORBIDDEN:
                    if token in line:
                        violations.append(f"{file}:{idx}: {line.strip()}")
                        break
    return violations


def main(root: Path = Path(".")) -> int:
    roots = [root / "backend" / "services", root / "backend" / "controllers"]
    violations = scan_paths(roots)
    if violations:
        print("Forbidden data-layer usage found:")
        for v in violations:
            print(v)
        return 1
    print("Layering check passed: no data-layer access in services/controllers.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
