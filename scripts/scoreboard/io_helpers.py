"""I/O operations — reading score sheets from disk, JSON writing."""

import json

from scoreboard.constants import OUTPUT_DIR


# ─── Source Files ───────────────────────────────────────────────

def read_source(path):
    """Read a score sheet. A missing file raises FileNotFoundError."""
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    print(f"  Read {path.name} ({len(text.splitlines())} lines)")
    return text


def read_optional(path):
    """Read a reference sheet that may be absent. Returns '' if not found."""
    if not path.exists():
        print(f"  Warning: {path} not found, skipping")
        return ""
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


# ─── JSON Writers ────────────────────────────────────────────────

def write_json(filename, data, out_dir=OUTPUT_DIR, compact=False):
    """Write data to a JSON file in the output directory."""
    path = out_dir / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        if compact:
            json.dump(data, f, separators=(",", ":"), default=str)
        else:
            json.dump(data, f, indent=2, default=str)
    size_kb = path.stat().st_size / 1024
    print(f"  Wrote {path.name} ({size_kb:.0f} KB)")
    return path
