HEXDUMP_WIDTH = 16


def _printable(b: int) -> str:
    return chr(b) if 32 <= b <= 126 else "."


def xdump(data, title: str = "Data", width: int = HEXDUMP_WIDTH) -> str:
    """
    offset, hex bytes and printable ASCII, `width` bytes per line:

        Received data (5 bytes):
        0000  68 65 6c 6c 6f                                   hello
    """
    data = bytes(data)
    lines = [f"{title} ({len(data)} bytes):"]
    for offset in range(0, len(data), width):
        chunk = data[offset:offset + width]
        hex_part = " ".join(f"{b:02x}" for b in chunk)
        text = "".join(_printable(b) for b in chunk)
        lines.append(f"{offset:04x}  {hex_part:<{width * 3 - 1}}  {text}")
    return "\n".join(lines)
