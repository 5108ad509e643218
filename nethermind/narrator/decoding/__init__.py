from .classifier import classify
from .decoder import TransactionDecoder
from .function_decoders import SelectorEntry
from .registry import SelectorRegistry, default_registry
