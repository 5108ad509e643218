from .metadata import TokenMetadataCache
