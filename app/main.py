"""
Streamlit Frontend for Debt Tracker

A single-user dashboard for everyday money: wallet balance, what friends
owe, monthly salary and simple reports.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Clear error messages in simple language
3. Every change is saved immediately
4. Visual feedback for all operations
5. No hidden actions

The UI never touches the ledger directly: every action goes through the
LedgerSession, which validates, saves and logs it.
"""

from decimal import Decimal

import streamlit as st

from debt_tracker.config import get_settings, validate_all_settings
from debt_tracker.events import setup_logging
from debt_tracker.ledger.errors import ValidationError
from debt_tracker.models.ledger import SplitSelection, Transaction, TransactionKind
from debt_tracker.models.report import Period
from debt_tracker.orchestrator import LedgerSession, create_session
from debt_tracker.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="Debt Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
    .positive { color: #28a745; }
    .negative { color: #dc3545; }
</style>
""", unsafe_allow_html=True)


KIND_LABELS = {
    TransactionKind.EXPENSE: "Expense",
    TransactionKind.INCOME: "Income",
    TransactionKind.LEND: "Lend to a friend",
    TransactionKind.REPAYMENT: "Friend paid back",
    TransactionKind.SPLIT: "Split a bill",
}

KIND_ICONS = {
    TransactionKind.INCOME: "💵",
    TransactionKind.SALARY: "💼",
    TransactionKind.EXPENSE: "🛒",
    TransactionKind.LEND: "🤝",
    TransactionKind.REPAYMENT: "↩️",
    TransactionKind.SPLIT: "🍕",
}

PERIOD_LABELS = {
    Period.THIS_MONTH: "This month",
    Period.LAST_MONTH: "Last month",
    Period.LAST_30_DAYS: "Last 30 days",
    Period.LAST_1_YEAR: "Last year",
    Period.ALL_TIME: "All time",
}


def format_currency(amount: Decimal) -> str:
    symbol = get_settings().ledger.currency_symbol
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def get_session() -> LedgerSession:
    """Session for the current profile, kept across reruns."""
    user_id = st.session_state.user_id
    session = st.session_state.get("ledger_session")
    if session is None or session.user_id != user_id:
        try:
            session = create_session(user_id, use_storage=True)
        except StorageError as e:
            st.error(f"Could not read your saved data: {e}")
            session = create_session(user_id, use_storage=False)
        st.session_state.ledger_session = session
    return session


def run_action(action, success_message: str) -> bool:
    """Run a session operation and show the outcome."""
    try:
        action()
    except ValidationError as e:
        st.error(e.message)
        return False
    except StorageError as e:
        st.error(f"Saved in this session, but writing to disk failed: {e}")
        return False
    st.success(success_message)
    return True


def main():
    """Main application entry point."""
    setup_logging(get_settings().app.log_level)

    st.sidebar.title("💰 Debt Tracker")
    st.sidebar.markdown("---")

    user_id = st.sidebar.text_input(
        "Profile name",
        value=st.session_state.get("user_id", ""),
        help="Each profile keeps its own ledger",
    ).strip()

    if not user_id:
        render_welcome_page()
        return
    st.session_state.user_id = user_id

    session = get_session()

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Dashboard", "➕ Add Transaction", "👥 Friends", "📊 Reports",
         "📜 History", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How it works:**
        - Lending adds to what a friend owes you
        - Splitting a bill lets friends owe their share
        - Your salary is added automatically each month
        """
    )

    # Route to appropriate page
    if page == "🏠 Dashboard":
        render_dashboard_page(session)
    elif page == "➕ Add Transaction":
        render_add_transaction_page(session)
    elif page == "👥 Friends":
        render_friends_page(session)
    elif page == "📊 Reports":
        render_reports_page(session)
    elif page == "📜 History":
        render_history_page(session)
    elif page == "⚙️ Settings":
        render_settings_page(session)


def render_welcome_page():
    st.title("💰 Debt Tracker")
    st.info("Enter a profile name in the sidebar to open your ledger.")


def render_transaction_row(session: LedgerSession, transaction: Transaction):
    """One line of the transaction list."""
    friend_names = {friend.id: friend.name for friend in session.friends}
    icon = KIND_ICONS.get(transaction.kind, "")
    details = transaction.date.astimezone().strftime("%d %b %Y")

    if transaction.friend_id is not None:
        details += f" · {friend_names.get(transaction.friend_id, 'Unknown friend')}"
    elif transaction.split_details is not None:
        split = transaction.split_details
        details += (
            f" · {split.total_participants} people, "
            f"{format_currency(split.amount_per_person)} each"
        )

    col1, col2 = st.columns([4, 1])
    with col1:
        st.markdown(f"{icon} **{transaction.description}**  \n{details}")
    with col2:
        st.markdown(f"{transaction.kind.value}: **{format_currency(transaction.amount)}**")


def render_dashboard_page(session: LedgerSession):
    """Balance cards and recent activity."""
    st.title("🏠 Dashboard")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Wallet balance", format_currency(session.total_balance))
    with col2:
        st.metric("Friends owe you", format_currency(session.total_owed))
    with col3:
        this_month = session.report(Period.THIS_MONTH)
        st.metric("Spent this month", format_currency(this_month.expense))

    st.markdown("---")
    st.subheader("Recent transactions")

    recent = session.recent_transactions()
    if not recent:
        st.info("No transactions yet. Add one, or load the demo data from Settings.")
        return

    for transaction in recent:
        render_transaction_row(session, transaction)


def render_add_transaction_page(session: LedgerSession):
    """Form for every user-entered transaction kind."""
    st.title("➕ Add Transaction")

    kind = st.selectbox(
        "Type",
        options=list(KIND_LABELS),
        format_func=lambda k: KIND_LABELS[k],
    )
    friends = session.friends
    friend_names = {friend.id: friend.name for friend in friends}

    with st.form("add_transaction", clear_on_submit=True):
        description = st.text_input("Description *", placeholder="e.g., Groceries")
        amount = st.number_input(
            f"Amount ({get_settings().ledger.currency_symbol}) *",
            min_value=0.0,
            step=1.0,
            format="%.2f",
        )

        friend_id = None
        split = None
        if kind in (TransactionKind.LEND, TransactionKind.REPAYMENT):
            friend_id = st.selectbox(
                "Friend *",
                options=[None] + [friend.id for friend in friends],
                format_func=lambda i: "Select a friend" if i is None else friend_names[i],
            )
        elif kind == TransactionKind.SPLIT:
            selected = st.multiselect(
                "Split with",
                options=[friend.id for friend in friends],
                format_func=lambda i: friend_names[i],
            )
            include_self = st.checkbox("Include me", value=True)
            split = SplitSelection(friend_ids=tuple(selected), include_self=include_self)

        submitted = st.form_submit_button("💾 Save", type="primary")

    if submitted:
        run_action(
            lambda: session.record_transaction(
                kind,
                Decimal(str(amount)),
                description,
                friend_id=friend_id,
                split=split,
            ),
            "Transaction saved",
        )


def render_friends_page(session: LedgerSession):
    """Friend balances, settle buttons and the add-friend form."""
    st.title("👥 Friends")

    with st.form("add_friend", clear_on_submit=True):
        name = st.text_input("Friend's name")
        if st.form_submit_button("Add friend"):
            run_action(lambda: session.add_friend(name), f"Added {name.strip()}")

    st.markdown("---")
    st.metric("Net balance with friends", format_currency(session.net_friend_balance))

    if not session.friends:
        st.info("No friends yet.")
        return

    for friend in session.friends:
        col1, col2, col3 = st.columns([3, 2, 1])
        with col1:
            st.markdown(f"**{friend.name}**")
        with col2:
            if friend.balance > 0:
                st.markdown(f"Owes you {format_currency(friend.balance)}")
            elif friend.balance < 0:
                st.markdown(f"You owe {format_currency(-friend.balance)}")
            else:
                st.markdown("Settled")
        with col3:
            if friend.balance > 0 and st.button("Settle", key=f"settle_{friend.id}"):
                if run_action(
                    lambda friend_id=friend.id: session.settle_debt(friend_id),
                    f"{friend.name} is settled",
                ):
                    st.rerun()


def render_reports_page(session: LedgerSession):
    """Income, expense and top spending categories."""
    st.title("📊 Reports")

    period = st.selectbox(
        "Period",
        options=list(PERIOD_LABELS),
        format_func=lambda p: PERIOD_LABELS[p],
    )
    summary = session.report(period)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Income", format_currency(summary.income))
    with col2:
        st.metric("Expense", format_currency(summary.expense))
    with col3:
        st.metric("Savings", format_currency(summary.savings))

    st.markdown("---")
    st.subheader("Top spending")

    if not summary.has_expenses:
        st.info("No spending in this period.")
        return

    for category in summary.top_categories:
        st.markdown(f"**{category.label}** · {format_currency(category.amount)}")
        st.progress(min(1.0, category.share_percent / 100))


def render_history_page(session: LedgerSession):
    """Filtered transaction list with CSV download."""
    st.title("📜 History")

    period = st.selectbox(
        "Period",
        options=list(PERIOD_LABELS),
        index=list(PERIOD_LABELS).index(Period.ALL_TIME),
        format_func=lambda p: PERIOD_LABELS[p],
    )
    transactions = session.history(period)

    filename, csv_text = session.export_csv(period)
    st.download_button(
        "⬇️ Export CSV",
        data=csv_text,
        file_name=filename,
        mime="text/csv",
        disabled=not transactions,
    )

    st.markdown("---")
    if not transactions:
        st.info("No transactions in this period.")
        return

    for transaction in transactions:
        render_transaction_row(session, transaction)


def render_settings_page(session: LedgerSession):
    """Salary settings, data management and configuration status."""
    st.title("⚙️ Settings")

    st.markdown("### Monthly Salary")
    settings = session.settings
    with st.form("salary_settings"):
        amount = st.number_input(
            "Salary amount",
            min_value=0.0,
            value=float(settings.salary_amount),
            step=100.0,
            format="%.2f",
        )
        day = st.number_input(
            "Credited on day",
            min_value=1,
            max_value=31,
            value=settings.salary_day,
            step=1,
        )
        if st.form_submit_button("Save salary settings"):
            run_action(
                lambda: session.save_salary_settings(Decimal(str(amount)), int(day)),
                "Salary settings saved",
            )

    if settings.last_salary_month:
        st.caption(f"Last credited: {settings.last_salary_month}")

    st.markdown("---")
    st.markdown("### Data")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("📥 Load demo data"):
            if run_action(session.load_demo_data, "Demo data loaded"):
                st.rerun()
    with col2:
        confirm = st.checkbox("I understand this deletes everything")
        if st.button("🗑️ Clear all data", disabled=not confirm):
            if run_action(session.clear_all_data, "All data cleared"):
                st.rerun()

    st.markdown("---")
    st.markdown("### Configuration Status")

    status = validate_all_settings()
    for section in ("storage", "ledger", "app"):
        if status.get(section, False):
            st.success(f"✅ {section.title()} settings loaded")
        else:
            st.error(f"❌ {section.title()} settings - {status.get(f'{section}_error')}")

    app_settings = get_settings().app
    st.caption(f"Environment: {app_settings.app_environment}")
    if app_settings.debug_mode:
        with st.expander("🔍 Stored snapshot"):
            st.json(session.snapshot().to_storage_dict())


if __name__ == "__main__":
    main()
