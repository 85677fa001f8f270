"""Mobile-friendly CSS styles for the app."""
import streamlit as st


def apply_mobile_styles():
    """Apply mobile-responsive CSS styles."""
    st.markdown("""
    <style>
    /* Fix sidebar width */
    section[data-testid="stSidebar"] {
        width: 16rem !important;
        min-width: 16rem !important;
        max-width: 16rem !important;
    }

    /* Net cash and low stock highlights */
    .net-positive { color: #166534; font-weight: 600; }
    .net-negative { color: #b91c1c; font-weight: 600; }
    .low-stock { color: #b91c1c; font-weight: 600; }
    .muted { color: #6b7280; font-size: 0.9rem; }

    /* Compact number inputs in the drawer count tables */
    div[data-testid="stNumberInput"] input {
        max-width: 6rem;
    }

    /* Mobile-friendly adjustments (counting the drawer at the stall) */
    @media (max-width: 768px) {
        /* Larger touch targets for buttons */
        .stButton button {
            min-height: 48px !important;
            font-size: 16px !important;
        }

        .block-container {
            padding-left: 1rem !important;
            padding-right: 1rem !important;
        }

        /* Form inputs - prevent zoom on iOS */
        input, select, textarea {
            font-size: 16px !important;
        }
    }
    </style>
    """, unsafe_allow_html=True)
