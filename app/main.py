"""
Streamlit Dashboard for Personal Ledger

A read-mostly view over the ledger's data files:
1. Active accounts and their full version history
2. Expenses and earnings of a month
3. Assets and their latest values
4. Monthly account archiving, behind an explicit confirmation

Each page opens its own LedgerSession, so a page only writes the
collections it actually changed.
"""

from datetime import date

import streamlit as st

from ledger.audit import configure_logging
from ledger.config import get_settings
from ledger.models.entities import end_of_previous_month
from ledger.session import LedgerSession
from ledger.storage import LedgerError


# Page configuration
st.set_page_config(
    page_title="Personal Ledger",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


def main():
    """Main application entry point."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    st.sidebar.title("💰 Personal Ledger")
    st.sidebar.caption(f"Data directory: {settings.data_dir}")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏦 Accounts", "📅 Month", "📈 Assets", "🗄️ Archive"],
        index=0,
    )

    try:
        if page == "🏦 Accounts":
            render_accounts_page()
        elif page == "📅 Month":
            render_month_page()
        elif page == "📈 Assets":
            render_assets_page()
        elif page == "🗄️ Archive":
            render_archive_page()
    except LedgerError as e:
        st.error(str(e))


def render_accounts_page():
    """Render active accounts and their history."""
    st.title("🏦 Accounts")

    with LedgerSession() as session:
        active = session.queries.active_accounts()
        st.metric("Total", f"{session.queries.total(active):,.2f}")
        st.dataframe(
            [{"ID": a.id, "Name": a.name, "Amount": float(a.amount)} for a in active],
            use_container_width=True,
        )

        with st.expander("📜 All versions"):
            st.dataframe(
                [
                    {
                        "ID": a.id,
                        "Name": a.name,
                        "Amount": float(a.amount),
                        "Since": a.since.isoformat(),
                        "Until": a.until.isoformat(),
                    }
                    for a in session.all_accounts()
                ],
                use_container_width=True,
            )


def render_month_page():
    """Render the expenses and earnings of one month."""
    st.title("📅 Month")

    today = date.today()
    col1, col2 = st.columns(2)
    with col1:
        month = st.selectbox("Month", options=list(range(1, 13)), index=today.month - 1)
    with col2:
        year = st.number_input("Year", value=today.year, step=1, format="%d")

    with LedgerSession() as session:
        queries = session.queries
        expenses = queries.expenses_for_month(int(year), month)
        earnings = queries.earnings_for_month(int(year), month)

        col1, col2, col3 = st.columns(3)
        col1.metric("Earnings", f"{queries.total(earnings):,.2f}")
        col2.metric("Expenses", f"{queries.total(expenses):,.2f}")
        col3.metric("Balance", f"{queries.total(earnings) - queries.total(expenses):,.2f}")

        for label, records in (("Expenses", expenses), ("Earnings", earnings)):
            st.subheader(label)
            if not records:
                st.info(f"No {label.lower()} for {month}-{int(year)}")
                continue
            st.dataframe(
                [
                    {
                        "ID": r.id,
                        "Date": r.date.isoformat(),
                        "Account": queries.account_name(r.account),
                        "Name": r.name,
                        "Amount": float(r.amount),
                    }
                    for r in records
                ],
                use_container_width=True,
            )


def render_assets_page():
    """Render assets with their allocation and latest value."""
    st.title("📈 Assets")

    with LedgerSession() as session:
        latest = session.queries.latest_asset_values()
        rows = []
        for asset in session.all_assets():
            value = latest.get(asset.id)
            rows.append({
                "ID": asset.id,
                "Name": asset.name,
                "Int. Stocks": f"{asset.int_stocks}%",
                "Dom. Stocks": f"{asset.dom_stocks}%",
                "Bonds": f"{asset.bonds}%",
                "Cash": f"{asset.cash}%",
                "Currency": asset.currency,
                "Value": float(value.amount) if value else None,
                "As of": value.set_date.isoformat() if value else "",
            })

        if rows:
            st.dataframe(rows, use_container_width=True)
        else:
            st.info("No assets yet. Use `ledger asset add` to create one.")


def render_archive_page():
    """Render the monthly archiving action."""
    st.title("🗄️ Archive Accounts")

    boundary = end_of_previous_month(date.today())
    st.markdown(f"""
    <div class="warning-box">
        <h4>⚠️ This creates new account versions</h4>
        <p>Every active account is closed on <strong>{boundary.isoformat()}</strong>
        and reopened the day after. Expenses and earnings of the current month
        are moved to the new versions.</p>
    </div>
    """, unsafe_allow_html=True)

    confirmed = st.checkbox("I understand, archive the accounts")

    if st.button("🗄️ Archive", type="primary", disabled=not confirmed):
        with LedgerSession() as session:
            mapping = session.archive_accounts()
        if mapping:
            st.success(f"{len(mapping)} accounts have been archived")
        else:
            st.info("All accounts are already archived for this month")


if __name__ == "__main__":
    main()
