"""
Folder extractor — pure function, no I/O.

Converts a loaded file collection into a markdown summary: files grouped
by MIME type, each marked with how much of its content is held.
"""

from collections import defaultdict

from models import FileRecord


def extract_collection_summary(files: list[FileRecord], link: str = "") -> str:
    """
    Summarize a file collection as markdown.

    Args:
        files: Records from aggregation, in listing order
        link: Source link, echoed in the heading when given

    Returns:
        Markdown with one section per MIME type. Names are listed in
        collection order with a (preview) or (full, N chars) marker.
    """
    lines: list[str] = []

    lines.append(f"# {link}" if link else "# Files")
    lines.append("")

    if not files:
        lines.append("**(no files loaded)**")
        lines.append("")
        return "\n".join(lines)

    # Group by MIME type for compact rendering
    by_type: dict[str, list[FileRecord]] = defaultdict(list)
    for record in files:
        by_type[record.mime_type].append(record)

    for mime_type, records in sorted(by_type.items()):
        count = len(records)
        label = f"## Files ({count} · {mime_type or 'unknown type'})" if len(by_type) > 1 else f"## Files ({count})"
        lines.append(label)
        lines.append("")
        for record in records:
            held = f"full, {len(record.content)} chars" if record.is_full_content else "preview"
            lines.append(f"- {record.name}  →  `{record.id}` ({held})")
        lines.append("")

    return "\n".join(lines)
