import json
from enum import Enum


class HexEnabledJsonEncoder(json.JSONEncoder):
    """JSON Encoder that converts bytes to hex, and enums to their values"""

    def default(self, o):
        if isinstance(o, bytes):
            return "0x" + o.hex()
        if isinstance(o, Enum):
            return o.value
        return json.JSONEncoder.default(self, o)

