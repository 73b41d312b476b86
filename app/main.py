"""
Streamlit Frontend for Jarbook

The dashboard a single user opens every day to log spending, track
debts and split their income into jars.

DESIGN PRINCIPLES:
1. Every number on screen comes from the engine, never from inline math
2. Forms submit drafts; the session validates, saves and reloads
3. A failed save shows a message and leaves the screen as it was
4. Nothing is deleted without an explicit button press
"""

import asyncio
from datetime import datetime, time
from decimal import Decimal

import streamlit as st

from jarbook.config import get_settings, validate_all_settings
from jarbook.engine import debts as debt_model
from jarbook.engine.money import (
    format_currency,
    month_label,
    next_month,
    previous_month,
    year_label,
)
from jarbook.models import (
    CATEGORIES,
    CategoryType,
    ColorTag,
    DebtDraft,
    ExpenseDraft,
    IncomeDraft,
    IncomeType,
    JarDraft,
    TimeRange,
    categories_of_type,
    find_category,
    find_sub_category,
)
from jarbook.orchestrator import FinanceSession, MutationOutcome, create_app_components


# Page configuration
st.set_page_config(
    page_title="Jarbook",
    page_icon="🫙",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .hero-card {
        padding: 24px;
        border-radius: 16px;
        background: linear-gradient(135deg, #fbcfe8, #f9a8d4);
        margin: 10px 0;
    }
    .card {
        padding: 16px;
        border-radius: 12px;
        background-color: #fdf2f8;
        margin: 6px 0;
    }
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
        color: #2c3e50;
    }
    .bubble {
        display: inline-flex;
        align-items: center;
        justify-content: center;
        border-radius: 50%;
        background: #fce7f3;
        margin: 6px;
        text-align: center;
    }
</style>
""", unsafe_allow_html=True)

CATEGORY_TYPE_LABELS = {
    CategoryType.NEEDS: "จำเป็น",
    CategoryType.LIFESTYLE: "ไลฟ์สไตล์",
    CategoryType.SAVINGS: "ออม/ลงทุน",
    CategoryType.DEBT: "หนี้",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_session() -> FinanceSession:
    """Get or create the finance session (cached), loading all data once."""
    session, _ = create_app_components()
    try:
        run_async(session.start())
    except Exception as e:
        st.error(f"Failed to load your data: {e}")
        run_async(session.audit_logger.log_error(
            error_type="load_failed",
            error_message=str(e),
            details={"backend": get_settings().storage.backend},
        ))
    return session


def money(amount: Decimal, decimals: int = 2) -> str:
    return format_currency(amount, decimals, symbol=get_settings().app.currency_symbol)


def handle_outcome(outcome: MutationOutcome, success_message: str) -> None:
    """Show the result of a mutation and refresh the page on success."""
    if outcome.ok:
        st.toast(success_message)
        st.rerun()
    elif outcome.notification:
        st.error(outcome.notification)
    # SKIPPED: the form was incomplete; nothing to say


def main():
    """Main application entry point."""
    session = get_session()

    if "month" not in st.session_state:
        today = datetime.now()
        st.session_state.month = today.month
        st.session_state.year = today.year

    st.sidebar.title("🫙 Jarbook")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "💳 Debts", "🫙 Jars", "⚙️ Settings"],
        index=0,
    )

    if page == "📊 Dashboard":
        render_dashboard_page(session)
    elif page == "💳 Debts":
        render_debts_page(session)
    elif page == "🫙 Jars":
        render_jars_page(session)
    elif page == "⚙️ Settings":
        render_settings_page(session)


# =============================================================================
# DASHBOARD
# =============================================================================

def render_month_navigation() -> None:
    col1, col2, col3 = st.columns([1, 3, 1])
    with col1:
        if st.button("◀", key="prev_month"):
            st.session_state.month, st.session_state.year = previous_month(
                st.session_state.month, st.session_state.year
            )
            st.rerun()
    with col2:
        st.markdown(
            f"<h3 style='text-align:center'>"
            f"{month_label(st.session_state.month, st.session_state.year)}</h3>",
            unsafe_allow_html=True,
        )
    with col3:
        if st.button("▶", key="next_month"):
            st.session_state.month, st.session_state.year = next_month(
                st.session_state.month, st.session_state.year
            )
            st.rerun()


def render_dashboard_page(session: FinanceSession):
    """Monthly totals, category breakdown and the expense list."""
    st.title("📊 รายจ่าย")
    render_month_navigation()

    time_range = st.radio(
        "Range",
        list(TimeRange),
        format_func=lambda r: "เดือนนี้" if r == TimeRange.MONTH else "ทั้งปี",
        horizontal=True,
    )
    month, year = st.session_state.month, st.session_state.year
    summary = session.state.dashboard(
        month,
        year,
        time_range,
        top_limit=get_settings().app.top_categories_limit,
    )

    col1, col2, col3 = st.columns(3)
    with col1:
        st.markdown(f"""
        <div class="card"><p>ใช้ไปเดือนนี้</p>
        <p class="big-number">{money(summary.monthly_total)}</p></div>
        """, unsafe_allow_html=True)
    with col2:
        st.markdown(f"""
        <div class="card"><p>{year_label(year)}</p>
        <p class="big-number">{money(summary.yearly_total)}</p></div>
        """, unsafe_allow_html=True)
    with col3:
        st.markdown(f"""
        <div class="card"><p>ถ้าใช้แบบนี้ทั้งปี</p>
        <p class="big-number">{money(summary.yearly_projection, 0)}</p></div>
        """, unsafe_allow_html=True)

    if not summary.shares:
        st.info("ยังไม่มีรายจ่ายในช่วงนี้")
    else:
        view = st.radio("View", ["Grid", "Bubbles"], horizontal=True)
        if view == "Grid":
            render_category_grid(summary.grid)
        else:
            render_category_bubbles(summary.bubbles)

        st.markdown("### Top categories")
        for share in summary.top:
            name = share.category.name if share.category else share.category_id
            icon = share.category.icon if share.category else "❔"
            st.markdown(
                f"{icon} **{name}** · {money(share.amount)} "
                f"({share.percentage:.1f}%) · {share.expense_count} รายการ"
            )

    st.markdown("---")
    render_expense_form(session)
    render_expense_list(session, month, year)


def render_category_grid(cells):
    hero, rest = cells[0], cells[1:]
    share = hero.share
    label = share.category.name if share.category else share.category_id
    icon = share.category.icon if share.category else "❔"
    st.markdown(f"""
    <div class="hero-card">
        <h2>{icon} {label}</h2>
        <p class="big-number">{money(share.amount)}</p>
        <p>{share.percentage:.1f}%</p>
    </div>
    """, unsafe_allow_html=True)

    columns = st.columns(3)
    for idx, cell in enumerate(rest):
        share = cell.share
        label = share.category.name if share.category else share.category_id
        icon = share.category.icon if share.category else "❔"
        with columns[idx % 3]:
            st.markdown(f"""
            <div class="card">
                <b>{icon} {label}</b><br/>
                {money(share.amount)} · {share.percentage:.1f}%
            </div>
            """, unsafe_allow_html=True)


def render_category_bubbles(bubbles):
    html = []
    for bubble in bubbles:
        share = bubble.share
        icon = share.category.icon if share.category else "❔"
        html.append(
            f"<div class='bubble' style='width:{bubble.size}px;height:{bubble.size}px'>"
            f"{icon}<br/>{share.percentage:.0f}%</div>"
        )
    st.markdown("".join(html), unsafe_allow_html=True)


def render_expense_form(session: FinanceSession):
    with st.expander("➕ เพิ่มรายจ่าย"):
        category_type = st.selectbox(
            "ประเภท",
            list(CategoryType),
            format_func=lambda t: CATEGORY_TYPE_LABELS[t],
        )
        categories = categories_of_type(category_type)
        category = st.selectbox(
            "หมวดหมู่",
            categories,
            format_func=lambda c: f"{c.icon} {c.name}",
        )
        sub_category = None
        if category and category.sub_categories:
            sub_category = st.selectbox(
                "หมวดย่อย",
                [None, *category.sub_categories],
                format_func=lambda s: "-" if s is None else f"{s.icon} {s.name}",
            )

        with st.form("expense_form", clear_on_submit=True):
            name = st.text_input("รายการ")
            amount = st.number_input("จำนวนเงิน", min_value=0.0, step=10.0)
            day = st.date_input("วันที่", value=datetime.now().date())
            color = st.selectbox("สี", list(ColorTag), format_func=lambda c: c.value)
            note = st.text_area("โน้ต")
            submitted = st.form_submit_button("💾 บันทึก")

        if submitted:
            draft = ExpenseDraft(
                name=name,
                amount=Decimal(str(amount)),
                category_id=category.id if category else None,
                sub_category_id=sub_category.id if sub_category else None,
                date=datetime.combine(day, time(12, 0)),
                color=color,
                note=note or None,
            )
            handle_outcome(run_async(session.add_expense(draft)), "บันทึกแล้ว")


def render_expense_list(session: FinanceSession, month: int, year: int):
    expenses = session.state.expenses_for(month, year)
    st.markdown(f"### รายการ ({len(expenses)})")
    for expense in expenses:
        category = find_category(expense.category_id)
        sub = find_sub_category(expense.category_id, expense.sub_category_id)
        icon = sub.icon if sub else (category.icon if category else "❔")
        col1, col2, col3 = st.columns([5, 2, 1])
        with col1:
            st.markdown(f"{icon} **{expense.name}**  \n{expense.date:%d/%m} {expense.note or ''}")
        with col2:
            st.markdown(money(expense.amount))
        with col3:
            if st.button("🗑️", key=f"del_expense_{expense.id}"):
                handle_outcome(run_async(session.remove_expense(expense.id)), "ลบแล้ว")
        with st.expander("✏️ แก้ไข"):
            render_expense_edit_form(session, expense)


def render_expense_edit_form(session: FinanceSession, expense):
    """Edit every field of an expense; the id is kept."""
    with st.form(f"edit_expense_{expense.id}"):
        name = st.text_input("รายการ", value=expense.name)
        amount = st.number_input(
            "จำนวนเงิน", min_value=0.0, step=10.0, value=float(expense.amount)
        )
        category_ids = [c.id for c in CATEGORIES]
        category = st.selectbox(
            "หมวดหมู่",
            CATEGORIES,
            index=category_ids.index(expense.category_id)
            if expense.category_id in category_ids else 0,
            format_func=lambda c: f"{c.icon} {c.name}",
        )
        current = find_category(expense.category_id)
        subs = [None, *(current.sub_categories if current else ())]
        sub_ids = [s.id if s else None for s in subs]
        sub_category = st.selectbox(
            "หมวดย่อย",
            subs,
            index=sub_ids.index(expense.sub_category_id)
            if expense.sub_category_id in sub_ids else 0,
            format_func=lambda s: "-" if s is None else f"{s.icon} {s.name}",
        )
        day = st.date_input("วันที่", value=expense.date.date())
        colors = list(ColorTag)
        color = st.selectbox(
            "สี", colors, index=colors.index(expense.color), format_func=lambda c: c.value
        )
        note = st.text_area("โน้ต", value=expense.note or "")
        submitted = st.form_submit_button("💾 บันทึก")

    if submitted:
        sub_id = sub_category.id if sub_category else None
        # The sub-category list follows the stored category until the form reruns
        if find_sub_category(category.id, sub_id) is None:
            sub_id = None
        draft = ExpenseDraft.from_record(expense).model_copy(update={
            "name": name,
            "amount": Decimal(str(amount)),
            "category_id": category.id,
            "sub_category_id": sub_id,
            "date": datetime.combine(day, expense.date.time()),
            "color": color,
            "note": note or None,
        })
        handle_outcome(run_async(session.edit_expense(expense.id, draft)), "แก้ไขแล้ว")


# =============================================================================
# DEBTS
# =============================================================================

def render_debts_page(session: FinanceSession):
    """Debt portfolio with per-debt payments."""
    st.title("💳 หนี้")

    overview = session.state.debt_portfolio()
    col1, col2, col3 = st.columns(3)
    col1.metric("หนี้ทั้งหมด", money(overview.total_debt))
    col2.metric("จ่ายแล้ว", money(overview.total_paid))
    col3.metric("คงเหลือ", money(overview.remaining_debt))
    st.progress(float(overview.overall_progress) / 100)

    for debt in session.state.debts:
        progress = debt_model.progress_percent(debt)
        with st.container(border=True):
            st.markdown(
                f"{debt.icon} **{debt.name}** · "
                f"{money(debt.paid_amount)} / {money(debt.total_amount)}"
            )
            st.progress(float(progress) / 100, text=f"{progress:.0f}%")
            col1, col2, col3 = st.columns([3, 1, 1])
            with col1:
                delta = st.number_input(
                    "จำนวนเงิน",
                    min_value=0.0,
                    step=100.0,
                    key=f"pay_{debt.id}",
                )
            with col2:
                if st.button("จ่าย", key=f"pay_btn_{debt.id}"):
                    outcome = run_async(session.apply_payment(debt.id, Decimal(str(delta))))
                    handle_outcome(outcome, "บันทึกการจ่ายแล้ว")
                if st.button("ยกเลิก", key=f"undo_btn_{debt.id}"):
                    outcome = run_async(session.apply_payment(debt.id, -Decimal(str(delta))))
                    handle_outcome(outcome, "ยกเลิกการจ่ายแล้ว")
            with col3:
                if st.button("🗑️", key=f"del_debt_{debt.id}"):
                    handle_outcome(run_async(session.remove_debt(debt.id)), "ลบแล้ว")
            with st.expander("✏️ แก้ไข"):
                render_debt_edit_form(session, debt)

    with st.expander("➕ เพิ่มหนี้"):
        with st.form("debt_form", clear_on_submit=True):
            name = st.text_input("ชื่อหนี้")
            total = st.number_input("ยอดหนี้ทั้งหมด", min_value=0.0, step=1000.0)
            paid = st.number_input("จ่ายไปแล้ว", min_value=0.0, step=1000.0)
            color = st.selectbox("สี", list(ColorTag), format_func=lambda c: c.value)
            submitted = st.form_submit_button("💾 บันทึก")

        if submitted:
            draft = DebtDraft(
                name=name,
                total_amount=Decimal(str(total)),
                paid_amount=Decimal(str(paid)),
                color=color,
            )
            handle_outcome(run_async(session.add_debt(draft)), "บันทึกแล้ว")


def render_debt_edit_form(session: FinanceSession, debt):
    with st.form(f"edit_debt_{debt.id}"):
        name = st.text_input("ชื่อหนี้", value=debt.name)
        icon = st.text_input("ไอคอน", value=debt.icon)
        total = st.number_input(
            "ยอดหนี้ทั้งหมด", min_value=0.0, step=1000.0, value=float(debt.total_amount)
        )
        paid = st.number_input(
            "จ่ายไปแล้ว", min_value=0.0, step=1000.0, value=float(debt.paid_amount)
        )
        colors = list(ColorTag)
        color = st.selectbox(
            "สี", colors, index=colors.index(debt.color), format_func=lambda c: c.value
        )
        submitted = st.form_submit_button("💾 บันทึก")

    if submitted:
        draft = DebtDraft.from_record(debt).model_copy(update={
            "name": name,
            "icon": icon,
            "total_amount": Decimal(str(total)),
            "paid_amount": Decimal(str(paid)),
            "color": color,
        })
        outcome = run_async(session.edit_debt(debt.id, draft))
        for warning in outcome.validation.warnings if outcome.validation else []:
            st.warning(warning)
        handle_outcome(outcome, "แก้ไขแล้ว")


# =============================================================================
# JARS
# =============================================================================

def render_jars_page(session: FinanceSession):
    """Income list and its split across jars."""
    st.title("🫙 โหลเงิน")

    summary = session.state.allocation_summary()
    col1, col2, col3 = st.columns(3)
    col1.metric("รายได้ประจำ", money(summary.regular_income))
    col2.metric("รายได้เสริม", money(summary.irregular_income))
    col3.metric("รวม", money(summary.total_income))

    if summary.over_allocated:
        st.warning(f"แบ่งเกิน 100% ไปแล้ว {-summary.remaining_percentage}%")
    elif summary.show_remaining_hint:
        st.info(f"ยังเหลือ {summary.remaining_percentage}% ที่ยังไม่ได้แบ่ง")

    if not session.state.jars:
        st.markdown("ยังไม่มีโหลเงิน เริ่มด้วยสูตรมาตรฐาน 6 โหลได้เลย")
        if st.button("✨ ใช้สูตร 6 โหล"):
            handle_outcome(run_async(session.apply_preset()), "สร้างโหลเงินแล้ว")

    for allocation in summary.allocations:
        jar = allocation.jar
        with st.container(border=True):
            st.markdown(
                f"{jar.emoji} **{jar.name}** · {jar.percentage}% · "
                f"{money(allocation.allocated_amount)}"
            )
            if jar.description:
                st.caption(jar.description)
            if allocation.progress is not None:
                st.progress(
                    min(float(allocation.progress), 100.0) / 100,
                    text=f"{money(jar.current_amount)} / {money(jar.target_amount)}",
                )
            if st.button("🗑️", key=f"del_jar_{jar.id}"):
                handle_outcome(run_async(session.remove_jar(jar.id)), "ลบแล้ว")
            with st.expander("✏️ แก้ไข"):
                render_jar_edit_form(session, jar)

    col1, col2 = st.columns(2)
    with col1:
        with st.expander("➕ เพิ่มโหล"):
            with st.form("jar_form", clear_on_submit=True):
                name = st.text_input("ชื่อโหล")
                description = st.text_input("คำอธิบาย")
                percentage = st.number_input("เปอร์เซ็นต์", min_value=0.0, max_value=100.0, step=5.0)
                emoji = st.text_input("อีโมจิ", value="💰")
                target = st.number_input("เป้าหมาย (ไม่บังคับ)", min_value=0.0, step=1000.0)
                submitted = st.form_submit_button("💾 บันทึก")
            if submitted:
                draft = JarDraft(
                    name=name,
                    description=description,
                    percentage=Decimal(str(percentage)),
                    emoji=emoji,
                    target_amount=Decimal(str(target)) if target else None,
                )
                outcome = run_async(session.save_jar(draft))
                for warning in outcome.validation.warnings if outcome.validation else []:
                    st.warning(warning)
                handle_outcome(outcome, "บันทึกแล้ว")

    with col2:
        with st.expander("➕ เพิ่มรายได้"):
            with st.form("income_form", clear_on_submit=True):
                name = st.text_input("แหล่งรายได้")
                amount = st.number_input("จำนวนเงิน", min_value=0.0, step=1000.0)
                income_type = st.selectbox(
                    "ประเภท",
                    list(IncomeType),
                    format_func=lambda t: "ประจำ" if t == IncomeType.REGULAR else "เสริม",
                )
                submitted = st.form_submit_button("💾 บันทึก")
            if submitted:
                draft = IncomeDraft(
                    name=name,
                    amount=Decimal(str(amount)),
                    type=income_type,
                )
                handle_outcome(run_async(session.add_income(draft)), "บันทึกแล้ว")

    for income in session.state.incomes:
        col1, col2 = st.columns([5, 1])
        with col1:
            st.markdown(f"**{income.name}** · {money(income.amount)} · {income.type.value}")
        with col2:
            if st.button("🗑️", key=f"del_income_{income.id}"):
                handle_outcome(run_async(session.remove_income(income.id)), "ลบแล้ว")


def render_jar_edit_form(session: FinanceSession, jar):
    """Edit a jar in place; its position and balance are kept."""
    with st.form(f"edit_jar_{jar.id}"):
        name = st.text_input("ชื่อโหล", value=jar.name)
        description = st.text_input("คำอธิบาย", value=jar.description)
        percentage = st.number_input(
            "เปอร์เซ็นต์",
            min_value=0.0,
            max_value=100.0,
            step=5.0,
            value=float(jar.percentage),
        )
        emoji = st.text_input("อีโมจิ", value=jar.emoji)
        target = st.number_input(
            "เป้าหมาย (ไม่บังคับ)",
            min_value=0.0,
            step=1000.0,
            value=float(jar.target_amount or 0),
        )
        submitted = st.form_submit_button("💾 บันทึก")

    if submitted:
        draft = JarDraft.from_record(jar).model_copy(update={
            "name": name,
            "description": description,
            "percentage": Decimal(str(percentage)),
            "emoji": emoji,
            "target_amount": Decimal(str(target)) if target else None,
        })
        outcome = run_async(session.save_jar(draft, jar_id=jar.id))
        for warning in outcome.validation.warnings if outcome.validation else []:
            st.warning(warning)
        handle_outcome(outcome, "แก้ไขแล้ว")


# =============================================================================
# SETTINGS
# =============================================================================

def render_settings_page(session: FinanceSession):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Storage")
    settings = get_settings()
    st.markdown(f"**Backend:** {settings.storage.backend}")

    status = validate_all_settings()
    for name, key in [("Local storage", "storage"), ("Google Sheets", "google_sheets")]:
        if key not in status:
            continue
        if status[key]:
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "Set `JARBOOK_STORAGE_BACKEND=sheets` and the `GOOGLE_SHEETS_*` "
        "variables in a `.env` file to keep your data in Google Sheets."
    )

    events = run_async(session.audit_logger.recent_events(limit=20))
    if events:
        st.markdown("---")
        st.markdown("### Recent activity")
        for event in events:
            icon = "❌" if event.error_message else "•"
            st.markdown(
                f"{icon} `{event.timestamp:%Y-%m-%d %H:%M}` {event.description}"
            )


if __name__ == "__main__":
    main()
