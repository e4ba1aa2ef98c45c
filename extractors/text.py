"""
Text extractor — pure function, no I/O.

Turns bytes downloaded or exported from Drive into a string.
"""

_UTF8_BOM = "\ufeff"


def decode_text(data: bytes | str) -> str:
    """
    Decode Drive text bytes as UTF-8.

    A leading byte-order mark is dropped (Docs plain-text exports start with
    one). Undecodable bytes become U+FFFD rather than failing the file.
    Everything else is returned verbatim.
    """
    text = data if isinstance(data, str) else data.decode("utf-8", errors="replace")
    if text.startswith(_UTF8_BOM):
        text = text[len(_UTF8_BOM):]
    return text
