from datetime import datetime, timezone
import logging

import pandas as pd
import plotly.express as px
import streamlit as st
import streamlit.components.v1 as components

from src.bridge.operations import order_by_recency
from src.bridge.unit_bridge_api import RelayResponse, UnitBridgeInfo, relay_with
from src.bridge.unit_bridge_utils import count_by_state, summarize_operations
from src.consts import EXPORT_MIME, NETWORKS, OPERATIONS_CACHE_TTL_S, STATE_COLORS
from src.query.controller import QueryController
from src.query.selection import QuerySelection, selection_from_params, selection_to_params
from src.table.columns import ColumnLayout
from src.table.export import export_filename, to_delimited_text
from src.utils.render_utils import (
    copy_script,
    render_operations_table,
    render_protocol_addresses,
    table_css,
)

# setup and configure logging
logging.basicConfig(
    format="%(asctime)s [%(levelname)s] %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

DATE_FORMAT = '%Y-%m-%d %H:%M:%S UTC'
EMPTY_MESSAGE = 'No operations found for this address.'


@st.cache_data(ttl=OPERATIONS_CACHE_TTL_S, show_spinner=False)
def _get_cached_operations(address: str, network: str) -> RelayResponse:
    """
    short ttl so repeated reruns don't refetch, while a new click soon sees fresh data.
    only upstream responses are cached, transport errors raise and are never stored
    """
    return UnitBridgeInfo(network).passthrough(address)


def _fetch(selection: QuerySelection) -> RelayResponse:
    return relay_with(
        selection.address,
        lambda address: _get_cached_operations(address, selection.network),
    )


def init_session_state():
    """
    runs once per session: the url is read only at mount
    """
    if 'initial_selection' in st.session_state:
        return
    selection = selection_from_params(st.query_params)
    st.session_state['initial_selection'] = selection
    st.session_state['ops_address'] = selection.address
    st.session_state['ops_network'] = selection.network
    st.session_state['query_controller'] = QueryController(fetcher=_fetch, logger=logger)
    st.session_state['column_layout'] = ColumnLayout()


def sync_query_params(selection: QuerySelection):
    params = selection_to_params(selection)
    if 'address' in params:
        st.query_params['address'] = params['address']
    else:
        st.query_params.pop('address', None)
    st.query_params['network'] = params['network']


def display_summary(ops):
    summary_df = summarize_operations(ops)
    if summary_df is None:
        return

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Total Operations", int(summary_df['Total Operations'].sum()))
    with col2:
        st.metric("Deposits", int(summary_df['Deposits'].sum()))
    with col3:
        st.metric("Withdrawals", int(summary_df['Withdrawals'].sum()))

    display_df = summary_df.copy()
    for col in ['First Operation', 'Last Operation']:
        display_df[col] = display_df[col].apply(
            lambda x: x.strftime(DATE_FORMAT) if pd.notna(x) else "N/A"
        )

    st.dataframe(
        display_df,
        use_container_width=True,
        hide_index=True,
        column_config={
            'Asset': st.column_config.TextColumn('Asset', width='small'),
            'Deposits': st.column_config.NumberColumn('Deposits', width='small'),
            'Deposit Volume': st.column_config.TextColumn('Deposit Volume', width='medium'),
            'Withdrawals': st.column_config.NumberColumn('Withdrawals', width='small'),
            'Withdraw Volume': st.column_config.TextColumn('Withdraw Volume', width='medium'),
            'Total Operations': st.column_config.NumberColumn('Ops', width='small'),
            'First Operation': st.column_config.TextColumn('First Operation', width='medium'),
            'Last Operation': st.column_config.TextColumn('Last Operation', width='medium'),
        }
    )

    state_df = count_by_state(ops)
    if len(state_df) > 1:
        fig = px.bar(
            state_df,
            x='State',
            y='Operations',
            color='State',
            color_discrete_map=dict(STATE_COLORS),
        )
        fig.update_layout(
            xaxis_title='State',
            yaxis_title='Operations',
            showlegend=False,
        )
        st.plotly_chart(fig, use_container_width=True)


def display_column_widths(layout: ColumnLayout):
    with st.expander("Column Widths"):
        if st.button("Reset widths", key="reset_widths"):
            layout.reset()
            for c in layout.columns:
                st.session_state.pop(f'width_{c.key}', None)

        cols = st.columns(4)
        for i, c in enumerate(layout.columns):
            with cols[i % 4]:
                width = st.number_input(
                    c.label,
                    min_value=c.min_width,
                    value=layout.width(c.key),
                    step=20,
                    key=f'width_{c.key}',
                )
            if width != layout.width(c.key):
                layout.resize_to(c.key, width)


def display_export(ops, address: str):
    try:
        st.download_button(
            "Download CSV",
            data=to_delimited_text(ops),
            file_name=export_filename(address),
            mime=EXPORT_MIME,
            disabled=not ops,
            icon=":material/download:",
        )
    except Exception as e:
        logger.error(f'unable to export operations for {address}: {e}')
        st.toast("Export failed, please try again", icon="⚠️")


def main():
    init_session_state()
    controller: QueryController = st.session_state['query_controller']
    layout: ColumnLayout = st.session_state['column_layout']

    st.title("Unit Operations Viewer")
    st.markdown(
        "Enter a Hyperliquid / EVM address to view its Unit deposit and withdrawal operations "
        "(data source: HyperUnit API)."
    )

    with st.container(vertical_alignment='center', horizontal=True):
        address_input: str = st.text_input(
            "Address",
            placeholder="e.g. 0xa6f1Ef42D335Ec7CbfC39f57269c851568300132",
            label_visibility='collapsed',
            key='ops_address',
        )
        network = st.selectbox(
            "Network",
            NETWORKS,
            format_func=str.capitalize,
            label_visibility='collapsed',
            key='ops_network',
        )
        submitted = st.button(
            "Query",
            type="primary",
            disabled=not address_input.strip() or controller.loading,
        )

    selection = QuerySelection(address=address_input.strip(), network=network)
    sync_query_params(selection)

    if submitted:
        with st.spinner(f'Loading operations for {selection.address}...', show_time=True):
            controller.run(selection)
            st.session_state['last_updated'] = datetime.now(timezone.utc)
    elif controller.run_initial(st.session_state['initial_selection']) is not None:
        st.session_state['last_updated'] = datetime.now(timezone.utc)

    if controller.error:
        st.error(controller.error)

    data = controller.data
    ops = order_by_recency(data.operations) if data else []

    if 'last_updated' in st.session_state and data is not None:
        st.caption(f"Last updated: {st.session_state['last_updated'].strftime(DATE_FORMAT)}")

    if data is not None and data.addresses:
        with st.container(border=True):
            st.markdown("**Related protocol addresses**")
            st.markdown(render_protocol_addresses(data.addresses), unsafe_allow_html=True)

    display_summary(ops)
    display_column_widths(layout)

    queried_address = controller.selection.address if controller.selection else ''
    empty_message = EMPTY_MESSAGE if controller.show_empty_state and queried_address else None
    st.markdown(
        table_css + render_operations_table(ops, layout, empty_message),
        unsafe_allow_html=True,
    )
    # separate component so the script can reach the table in the parent document
    components.html(copy_script, height=0)

    display_export(ops, queried_address)


if __name__ == '__main__':
    main()
