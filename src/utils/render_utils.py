from html import escape
from typing import Sequence

from src.bridge.operations import OperationRecord, ProtocolAddress, state_color
from src.consts import ASSET_BADGE_COLOR, PLACEHOLDER
from src.table.columns import ColumnLayout
from src.table.projection import project_row

table_css = """
<style>
.ops-wrap { overflow-x: auto; border: 1px solid #2C2C2C; border-radius: 6px; }
.ops-table { border-collapse: collapse; table-layout: fixed; }
.ops-table th, .ops-table td {
    padding: 6px 10px;
    border-bottom: 1px solid #2C2C2C;
    text-align: left;
    vertical-align: middle;
    overflow: hidden;
}
.ops-table th { color: #D3D3D3; font-weight: 600; }
.ops-table tr.row-hover:hover td { background-color: #1a1d24; }
.ops-table tr.failure td { background-color: rgba(220, 38, 38, 0.08); }
.ops-table .mono { font-family: monospace; }
/* single-line cells scroll instead of truncating */
.ops-table .nowrap { white-space: nowrap; overflow-x: auto; display: block; }
.ops-table .badge {
    color: #fff;
    padding: 2px 8px;
    border-radius: 999px;
    font-size: 12px;
    white-space: nowrap;
}
.ops-empty { padding: 12px; color: #A9A9A9; }
.proto-list code { font-family: monospace; }
.ops-table .copy-cell { display: flex; align-items: center; gap: 6px; }
.ops-table .copy-cell .nowrap { flex: 1 1 auto; min-width: 0; }
.ops-table .copy-btn { cursor: pointer; color: #A9A9A9; transition: color 0.2s; user-select: none; }
.ops-table .copy-btn:hover { color: #87CEEB; }
</style>
"""

COPYABLE_COLUMNS = frozenset({
    'sourceAddress',
    'destinationAddress',
    'protocolAddress',
    'sourceTxHash',
    'destinationTxHash',
})

# JavaScript component for copy functionality, one delegated listener on the
# parent document covers every copy button of the re-rendered table
copy_script = """
<script>
function copy_to_clipboard(btn) {
    var copyText = btn.getAttribute('data-copy');
    var label = btn.textContent;

    function flash(symbol, title) {
        btn.textContent = symbol;
        btn.setAttribute('title', title);
        setTimeout(function() {
            btn.textContent = label;
            btn.setAttribute('title', 'Copy to clipboard');
        }, 1500);
    }

    function fallbackCopy() {
        var doc = parent.document;
        var ta = doc.createElement('textarea');
        ta.value = copyText;
        ta.style.position = 'fixed';
        ta.style.left = '-9999px';
        doc.body.appendChild(ta);
        ta.select();
        try {
            if (doc.execCommand('copy')) {
                flash('\\u2713', 'Copied');
            } else {
                flash('\\u2717', 'Copy failed');
            }
        } catch (e) {
            flash('\\u2717', 'Copy failed');
        }
        doc.body.removeChild(ta);
    }

    var clipboard = parent.navigator.clipboard || navigator.clipboard;
    if (clipboard && clipboard.writeText) {
        clipboard.writeText(copyText).then(function() {
            flash('\\u2713', 'Copied');
        }).catch(fallbackCopy);
    } else {
        fallbackCopy();
    }
}

(function attachCopyEvent() {
    var doc = parent.document;
    if (doc.body.hasAttribute('data-copy-listener-attached')) {
        return;
    }
    doc.addEventListener('click', function(event) {
        var btn = event.target.closest ? event.target.closest('.copy-btn[data-copy]') : null;
        if (btn) {
            copy_to_clipboard(btn);
        }
    });
    doc.body.setAttribute('data-copy-listener-attached', 'true');
})();
</script>
"""


def copy_button_html(value: str) -> str:
    return (
        f'<span class="copy-btn" data-copy="{escape(value)}" '
        'title="Copy to clipboard">&#x29C9;</span>'
    )


def badge_html(text: str, color: str) -> str:
    return f'<span class="badge" style="background:{escape(color)}">{escape(text)}</span>'


def render_cell_html(record: OperationRecord, key: str, layout: ColumnLayout) -> str:
    """
    display-only wrapping around the plain projected value;
    the full value is always kept in the title attribute
    """
    value = project_row(record, key)
    spec = layout.spec(key)

    if key == 'asset':
        inner = badge_html(value, ASSET_BADGE_COLOR)
    elif key == 'state':
        inner = badge_html(value, state_color(record.state))
    else:
        classes = ' '.join(c for c in (
            'mono' if spec.mono else '',
            'nowrap' if spec.force_one_line else '',
        ) if c)
        inner = f'<span class="{classes}" title="{escape(value)}">{escape(value)}</span>'
        if key in COPYABLE_COLUMNS and value != PLACEHOLDER:
            inner = f'<div class="copy-cell">{inner}{copy_button_html(value)}</div>'

    return f'<td style="width:{layout.width(key)}px">{inner}</td>'


def render_operations_table(
    records: Sequence[OperationRecord],
    layout: ColumnLayout,
    empty_message: str | None = None,
) -> str:
    header = ''.join(
        f'<th style="width:{layout.width(c.key)}px">{escape(c.label)}</th>'
        for c in layout.columns
    )

    rows = []
    for record in records:
        row_class = 'row-hover failure' if record.state == 'failure' else 'row-hover'
        cells = ''.join(render_cell_html(record, c.key, layout) for c in layout.columns)
        rows.append(f'<tr class="{row_class}">{cells}</tr>')

    if not records and empty_message:
        rows.append(
            f'<tr><td class="ops-empty" colspan="{len(layout.columns)}">'
            f'{escape(empty_message)}</td></tr>'
        )

    total_width = sum(layout.width(c.key) for c in layout.columns)
    return (
        f'<div class="ops-wrap"><table class="ops-table" style="width:{total_width}px">'
        f'<thead><tr>{header}</tr></thead>'
        f'<tbody>{"".join(rows)}</tbody>'
        '</table></div>'
    )


def render_protocol_addresses(addresses: Sequence[ProtocolAddress]) -> str:
    items = ''.join(
        f'<li>[{escape(a.source_coin_type)} → {escape(a.destination_chain)}]: '
        f'<code>{escape(a.address)}</code></li>'
        for a in addresses
    )
    return f'<ul class="proto-list">{items}</ul>'
