import logging
import shutil
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Sequence

from rich.table import Table

from nethermind.narrator.types import ContractType
from nethermind.narrator.utils import pprint_list

from .function_decoders import SelectorEntry
from .interfaces import KNOWN_INTERFACES
from .utils import filter_functions

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("narrator").getChild("decoding")


class SelectorRegistry:
    """

    Immutable mapping from 4 byte function selectors to known function signatures.  Built once from a list of
    interfaces, and shared read-only between every decode and classify call.

    Selector collisions are resolved by registration order.  Interfaces are loaded in the order they are passed,
    and the first interface to register a selector keeps it.  Shadowed functions are logged, and never reachable
    through :meth:`lookup`.

    """

    _entries: Mapping[bytes, SelectorEntry]
    """ Mapping of 4 byte selector to the entry that won registration """

    _shadowed: tuple[SelectorEntry, ...]
    """ Entries that lost a selector collision to an earlier interface """

    def __init__(self, interfaces: Sequence[tuple[str, list[dict[str, Any]], ContractType]]):
        entries: dict[bytes, SelectorEntry] = {}
        shadowed: list[SelectorEntry] = []

        for interface_name, abi_data, family in interfaces:
            if family in (ContractType.contract_creation, ContractType.unknown):
                raise ValueError(f"Interface {interface_name} cannot be registered under the {family.value} family")

            functions = [SelectorEntry.from_abi(f, interface_name, family) for f in filter_functions(abi_data)]
            logger.debug(f"Registering {interface_name} Functions: {', '.join(f.name for f in functions)}")

            for func in functions:
                existing = entries.get(func.selector)
                if existing is None:
                    entries[func.selector] = func
                    continue

                if existing.signature != func.signature:
                    logger.warning(
                        f"Selector collision between {existing.signature} ({existing.interface}) and "
                        f"{func.signature} ({func.interface}) on {func.selector_hex}.  Keeping {existing.interface}"
                    )
                else:
                    logger.debug(
                        f"Function {func.signature} from {func.interface} already registered by "
                        f"{existing.interface} as {existing.family.value}"
                    )
                shadowed.append(func)

        self._entries = MappingProxyType(entries)
        self._shadowed = tuple(shadowed)

    def lookup(self, selector: bytes | str) -> SelectorEntry | None:
        """
        Returns the registered entry for a selector, or None if the selector is unknown

        :param selector: 4 raw bytes, or 0x prefixed hex string
        """
        if isinstance(selector, str):
            selector = bytes.fromhex(selector.removeprefix("0x"))
        return self._entries.get(selector)

    def entries_for(self, family: ContractType) -> list[SelectorEntry]:
        """Returns all reachable entries registered under a contract family, in registration order"""
        return [entry for entry in self._entries.values() if entry.family == family]

    @property
    def shadowed(self) -> tuple[SelectorEntry, ...]:
        """Functions that were not registered because an earlier interface owns their selector"""
        return self._shadowed

    def __contains__(self, selector: object) -> bool:
        if isinstance(selector, (bytes, str)):
            return self.lookup(selector) is not None
        return False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SelectorEntry]:
        return iter(self._entries.values())

    def decoder_table(self, full_signatures: bool = True) -> Table:
        """
        Returns a rich table listing every contract family with its registered functions.
        Used for printing out registry information in the CLI

        :param full_signatures: If True, print function signatures.  If False, only print function names
        """
        term_width = shutil.get_terminal_size().columns
        table = Table(title="[bold magenta]Registered Function Selectors", min_width=80, show_lines=True)

        table.add_column("Family")
        table.add_column("Interfaces")
        table.add_column("Functions")

        for family in ContractType:
            entries = self.entries_for(family)
            if not entries:
                continue
            interfaces = ", ".join(dict.fromkeys(entry.interface for entry in entries))
            functions = sorted(f"{entry.id_str(full_signatures)} {entry.selector_hex}" for entry in entries)
            table.add_row(family.value, interfaces, "\n".join(pprint_list(functions, int(term_width * 0.6))))

        return table


@lru_cache(maxsize=1)
def default_registry() -> SelectorRegistry:
    """Returns the registry of all known interfaces.  Built on first use, then shared"""
    return SelectorRegistry(KNOWN_INTERFACES)
