import streamlit as st

def inject_css():
    st.markdown(
        "<style>"
        ".card{padding:0.8rem 1rem;border:1px solid #e5e7eb;border-radius:10px;}"
        ".kpi{font-size:1.6rem;font-weight:600;}"
        ".caption{color:#6b7280;font-size:0.85rem;}"
        "</style>",
        unsafe_allow_html=True,
    )

def header(title: str, subtitle: str = ""):
    st.markdown(f"## {title}")
    if subtitle:
        st.caption(subtitle)

def helptext(text: str):
    st.caption(text)

def kpi_card(col, caption: str, value: str, note: str = ""):
    extra = f"<div class='caption'>{note}</div>" if note else ""
    col.markdown(
        f"<div class='card'><div class='caption'>{caption}</div>"
        f"<div class='kpi'>{value}</div>{extra}</div>",
        unsafe_allow_html=True,
    )
