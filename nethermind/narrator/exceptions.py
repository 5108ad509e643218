class DecodingError(Exception):
    """

    Raised when transaction input cannot be decoded.  Carries the selector, the signature that was attempted
    (if any), and the length of the raw input so callers can log or surface a diagnostic.

    """

    selector: str
    signature: str | None
    input_length: int

    def __init__(self, message: str, selector: str = "0x", signature: str | None = None, input_length: int = 0):
        super().__init__(message)
        self.selector = selector
        self.signature = signature
        self.input_length = input_length


class MalformedInput(DecodingError):
    """Raised when transaction input is non-empty but shorter than a 4 byte function selector"""


class AbiMismatch(DecodingError):
    """
    Raised when a selector matches a registered signature, but the argument bytes do not conform to the
    declared parameter types.  Typical causes:

        * Calldata truncated before the end of the static head
        * Dynamic offsets or lengths pointing outside of the calldata
        * Non-zero padding bytes in a fixed width word

    """


class TokenMetadataError(Exception):
    """

    Raised when token metadata cannot be fetched from the JSON RPC.  Handled inside the metadata cache, which
    falls back to default decimals.

    """
