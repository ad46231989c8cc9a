"""
nodesource/inventory - Node inventory snapshots and refresh coordination

Classes:
    - Node, NodeSet: immutable inventory snapshot types
    - InventoryFetcher, Ec2InventoryFetcher, FetchHandle: EC2 fetch (sync/async)
    - NodeSource: refresh-cache coordinator
    - SourceState: coordinator state

Usage:
    from nodesource.inventory import NodeSource

    source = NodeSource(config)
    nodes = source.get_nodes()

Note:
    This module uses the lazy import pattern.
"""

__all__ = [
    # Types
    "Node",
    "NodeSet",
    # Fetcher
    "InventoryFetcher",
    "Ec2InventoryFetcher",
    "FetchHandle",
    "parse_filters",
    # Coordinator
    "NodeSource",
    "SourceState",
]

_IMPORT_MAPPING = {
    "Node": (".types", "Node"),
    "NodeSet": (".types", "NodeSet"),
    "InventoryFetcher": (".fetcher", "InventoryFetcher"),
    "Ec2InventoryFetcher": (".fetcher", "Ec2InventoryFetcher"),
    "FetchHandle": (".fetcher", "FetchHandle"),
    "parse_filters": (".fetcher", "parse_filters"),
    "NodeSource": (".coordinator", "NodeSource"),
    "SourceState": (".coordinator", "SourceState"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
