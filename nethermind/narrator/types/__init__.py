from .decoding import (
    CONTRACT_ADDRESS_KEY,
    NATIVE_ASSET,
    ZERO_SELECTOR,
    ContractType,
    DecodedCall,
    RawTransaction,
    TransactionReceipt,
    with_deployed_address,
)
