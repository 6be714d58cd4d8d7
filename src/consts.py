from types import MappingProxyType

UNIT_API_MAINNET_URL = 'https://api.hyperunit.xyz'
UNIT_API_TESTNET_URL = 'https://api.hyperunit-testnet.xyz'

NETWORKS = ('mainnet', 'testnet')
DEFAULT_NETWORK = 'mainnet'

# bridge assets are keyed by lowercase ticker
ASSET_DECIMALS = MappingProxyType({
    'btc': 8,
    'eth': 18,
    'sol': 9,
})
DEFAULT_ASSET_DECIMALS = 6

# lifecycle order as reported by unit, failure can follow any non-terminal state
OPERATION_STATES = (
    'sourceTxDiscovered',
    'waitForSrcTxFinalization',
    'buildingDstTx',
    'signTx',
    'broadcastTx',
    'waitForDstTxFinalization',
    'readyForWithdrawQueue',
    'queuedForWithdraw',
    'done',
    'failure',
)
TERMINAL_STATES = frozenset({'done', 'failure'})

STATE_COLORS = MappingProxyType({
    'sourceTxDiscovered': '#6b7280',
    'waitForSrcTxFinalization': '#0891b2',
    'buildingDstTx': '#7c3aed',
    'signTx': '#7c3aed',
    'broadcastTx': '#2563eb',
    'waitForDstTxFinalization': '#0ea5e9',
    'readyForWithdrawQueue': '#a16207',
    'queuedForWithdraw': '#a16207',
    'done': '#16a34a',
    'failure': '#dc2626',
})
DEFAULT_STATE_COLOR = '#4b5563'
ASSET_BADGE_COLOR = '#111827'

# deposits land on hyperliquid, everything else is a withdrawal
DEPOSIT_DESTINATION_CHAIN = 'hyperliquid'

PLACEHOLDER = '-'
ASSET_PLACEHOLDER = 'ASSET'

# relay cache hints, mirrors streamlit cache ttl below
RELAY_CACHE_CONTROL = 's-maxage=10, stale-while-revalidate=60'
OPERATIONS_CACHE_TTL_S = 10

EXPORT_MIME = 'text/csv'
