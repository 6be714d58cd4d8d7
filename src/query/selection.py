from dataclasses import dataclass
from typing import Mapping

from src.consts import DEFAULT_NETWORK, NETWORKS


@dataclass(frozen=True)
class QuerySelection:
    address: str = ''
    network: str = DEFAULT_NETWORK


def normalize_network(network: str | None) -> str:
    n = (network or DEFAULT_NETWORK).strip().lower()
    return n if n in NETWORKS else DEFAULT_NETWORK


def selection_from_params(params: Mapping[str, str]) -> QuerySelection:
    """
    seeds the selection from shareable ?address=&network= query params
    """
    return QuerySelection(
        address=(params.get('address') or '').strip(),
        network=normalize_network(params.get('network')),
    )


def selection_to_params(selection: QuerySelection) -> dict[str, str]:
    params = {}
    if selection.address:
        params['address'] = selection.address
    params['network'] = normalize_network(selection.network)
    return params
