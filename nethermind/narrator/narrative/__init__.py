from .formatting import abbreviate, format_amount
from .generator import (
    NarrativeGenerator,
    NarrativeRequest,
    format_tx_hash,
    generate_sequential_narrative,
)
from .labels import (
    KNOWN_MAINNET_LABELS,
    AddressLabelResolver,
    CachingLabelResolver,
    StaticLabelResolver,
    safe_resolve,
)
