"""Region caches: region name -> region info, and region server client -> regions."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable

from sortedcontainers import SortedDict

log = logging.getLogger(__name__)


def _ref(obj: object) -> str:
    return f"{id(obj):#x}"


@dataclass(eq=False)
class RegionClient:
    """Connection to a region server, identified by its address."""

    addr: str
    closed: bool = False

    def close(self) -> None:
        self.closed = True


@dataclass(eq=False)
class RegionInfo:
    """Description of one region of a table and the client currently serving it."""

    id: int
    namespace: bytes | None
    table: bytes | None
    name: bytes | None
    start_key: bytes | None = b""
    stop_key: bytes | None = b""
    client: RegionClient | None = field(default=None, repr=False)
    available: bool = field(default=True, repr=False)
    _dead: threading.Event = field(default_factory=threading.Event, init=False, repr=False)

    def __post_init__(self) -> None:
        self.namespace = bytes(self.namespace or b"")
        self.table = bytes(self.table or b"")
        self.name = bytes(self.name or b"")
        self.start_key = bytes(self.start_key or b"")
        self.stop_key = bytes(self.stop_key or b"")

    def mark_unavailable(self) -> bool:
        """Mark the region unavailable; return True if it was available before."""
        was_available = self.available
        self.available = False
        return was_available

    def mark_available(self) -> None:
        self.available = True

    def mark_dead(self) -> None:
        """Signal that this region was removed and anyone waiting on it may give up."""
        self._dead.set()

    @property
    def is_dead(self) -> bool:
        return self._dead.is_set()


def region_search_key(table: bytes, key: bytes) -> bytes:
    """Build the meta search key for ``key`` in ``table``.

    ':' is the first byte greater than '9', so the key sorts right after every
    region name that shares the table and start key.
    """
    return bytes(table) + b"," + bytes(key) + b",:"


def _fully_qualified_table(region: RegionInfo) -> bytes:
    if not region.namespace:
        return region.table
    return region.namespace + b":" + region.table


def _name_sort_key(name: bytes) -> tuple[bytes, bytes, bytes, bytes]:
    first = name.find(b",")
    if first < 0:
        return name, b"", b"", name
    last = name.rfind(b",")
    return name[:first], name[first + 1 : last], name[last + 1 :], name


def is_region_overlap(reg_a: RegionInfo, reg_b: RegionInfo) -> bool:
    """Return True if the two regions belong to the same table and their key ranges meet."""
    # An empty stop key stands for the greatest key.
    return (
        reg_a.namespace == reg_b.namespace
        and reg_a.table == reg_b.table
        and (not reg_b.stop_key or reg_a.start_key < reg_b.stop_key)
        and (not reg_a.stop_key or reg_a.stop_key > reg_b.start_key)
    )


class ClientRegionCache:
    """Maps each region server client to the set of regions it serves."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._regions: dict[RegionClient, set[RegionInfo]] = {}

    def put(
        self, addr: str, region: RegionInfo, new_client: Callable[[], RegionClient]
    ) -> RegionClient:
        """Associate ``region`` with the client at ``addr``, creating it when unknown."""
        with self._lock:
            for existing, regions in self._regions.items():
                if existing.addr == addr:
                    regions.add(region)
                    log.debug("region client is already in client's cache: %r", existing)
                    return existing
            client = new_client()
            self._regions[client] = {region}
        log.info("added new region client: %r", client)
        return client

    def delete(self, region: RegionInfo) -> None:
        with self._lock:
            client = region.client
            if client is not None:
                region.client = None
                regions = self._regions.get(client)
                if regions is not None:
                    regions.discard(region)

    def close_all(self) -> None:
        with self._lock:
            for client, regions in self._regions.items():
                for region in regions:
                    region.mark_unavailable()
                    region.client = None
                client.close()

    def client_down(self, client: RegionClient) -> set[RegionInfo]:
        """Forget ``client`` and return the regions it was serving."""
        with self._lock:
            regions = self._regions.pop(client, None)
        if regions is None:
            return set()
        log.info("removed region client: %r", client)
        return regions

    def debug_info(
        self,
    ) -> tuple[dict[str, list[str]], dict[str, RegionInfo], dict[str, RegionClient]]:
        """Return client ref -> region refs, plus the regions and clients by ref."""
        cache_map: dict[str, list[str]] = {}
        regions_by_ref: dict[str, RegionInfo] = {}
        clients_by_ref: dict[str, RegionClient] = {}
        with self._lock:
            for client, regions in self._regions.items():
                client_ref = _ref(client)
                clients_by_ref[client_ref] = client
                refs = []
                for region in regions:
                    region_ref = _ref(region)
                    refs.append(region_ref)
                    regions_by_ref[region_ref] = region
                cache_map[client_ref] = refs
        return cache_map, regions_by_ref, clients_by_ref


class KeyRegionCache:
    """Regions ordered by region name, for looking up the region holding a key."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._regions: SortedDict = SortedDict(_name_sort_key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._regions)

    def get(self, key: bytes) -> tuple[bytes | None, RegionInfo | None]:
        """Return the name and region sorting right before the search ``key``."""
        with self._lock:
            if key in self._regions:
                raise ValueError(f"got exact match for region search key {key!r}")
            index = self._regions.bisect_left(key)
            if index == 0:
                return None, None
            return self._regions.peekitem(index - 1)

    def debug_info(self) -> tuple[dict[str, str], dict[str, RegionInfo]]:
        """Return region name -> region ref, plus the regions by ref."""
        with self._lock:
            items = list(self._regions.items())
        cache_map = {}
        regions_by_ref = {}
        for name, region in items:
            region_ref = _ref(region)
            regions_by_ref[region_ref] = region
            cache_map[name.decode("utf-8", errors="replace")] = region_ref
        return cache_map, regions_by_ref

    def get_overlaps(self, region: RegionInfo) -> list[RegionInfo]:
        """Return the cached regions whose key range overlaps ``region``."""
        with self._lock:
            if not self._regions:
                return []
            key = region_search_key(_fully_qualified_table(region), region.start_key)
            if key in self._regions:
                raise ValueError(f"found a region with exact name as the search key {key!r}")
            # Start from the region just before the landing spot, or from the first.
            start = max(self._regions.bisect_left(key) - 1, 0)
            candidates = iter(self._regions.values()[start:])
            overlaps = []
            first = next(candidates)
            if is_region_overlap(first, region):
                overlaps.append(first)
            for candidate in candidates:
                if not is_region_overlap(candidate, region):
                    break
                overlaps.append(candidate)
            return overlaps

    def put(self, region: RegionInfo) -> tuple[list[RegionInfo], bool]:
        """Cache ``region`` unless a younger overlapping region exists.

        Returns the overlapping regions and whether ``region`` was put. Older
        overlapping regions are removed and marked dead.
        """
        with self._lock:
            existing = self._regions.get(region.name)
            if existing is not None:
                log.debug("region is already in cache: %r", region)
                return [existing], False
            overlaps = self.get_overlaps(region)
            if any(o.id > region.id for o in overlaps):
                log.debug("region is already in cache: %r overlaps=%r", region, overlaps)
                return overlaps, False
            self._regions[region.name] = region
            for overlap in overlaps:
                self._regions.pop(overlap.name, None)
                overlap.mark_dead()
        log.info("added new region: %r overlaps=%r", region, overlaps)
        return overlaps, True

    def delete(self, region: RegionInfo) -> bool:
        """Remove ``region``, mark it dead and return whether it was cached."""
        with self._lock:
            removed = self._regions.pop(region.name, None) is not None
        region.mark_dead()
        log.debug("removed region: %r", region)
        return removed