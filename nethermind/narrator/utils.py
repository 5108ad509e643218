from eth_utils import decode_hex, is_hex


def pprint_list(write_array: list[str], term_width: int) -> list[str]:
    """
    Prints an array of strings to the console, wrapping lines with a max width of term_width

    :param write_array:
    :param term_width:
    :return:
    """
    current_line, output = "", []
    for write_val in write_array:
        if len(current_line) + len(write_val) + 1 > term_width:
            output.append(current_line)
            current_line = ""
        current_line += f"'{write_val}', "
    output.append(current_line)
    return output


def hex_to_bytes(value: str | bytes) -> bytes:
    """
    Converts 0x prefixed or bare hex strings into bytes.  Bytes are returned unchanged

    >>> hex_to_bytes("0xa9059cbb")
    b'\\xa9\\x05\\x9c\\xbb'
    """
    if isinstance(value, bytes):
        return value
    if value in ("", "0x"):
        return b""
    if not is_hex(value):
        raise ValueError(f"Invalid hex string: {value}")
    return decode_hex(value)
