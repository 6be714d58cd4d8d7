import streamlit as st

st.set_page_config(
    'Unit Operations Viewer',
    "🌉",
    layout="wide",
)

pg = st.navigation(
    pages={
        'Navigation': [
            st.Page('pages/operations.py', title="🌉 Unit Operations", default=True),
        ]
    }
)

pg.run()
