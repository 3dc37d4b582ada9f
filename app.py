"""
app.py
Streamlit front-end for gym member administration.
Run: streamlit run app.py
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

import utils
from models import MEMBER_TYPES, TYPE_PREMIUM, TYPE_STUDENT
from search import MemberSearcher, SearchField
from sorting import SORT_FIELDS, MemberSorter, SortAlgorithm, SortOrder
from store import DuplicateMemberError, MemberStore

st.set_page_config(page_title="Gym Member Administration", layout="wide")


def init_once():
    # One store/searcher/sorter per browser session
    if "store" in st.session_state:
        return
    utils.setup_logger()
    store = MemberStore()
    if store.data_file.exists():
        store.load_from_file()
    st.session_state.store = store
    st.session_state.searcher = MemberSearcher(store)
    st.session_state.sorter = MemberSorter()


def get_store() -> MemberStore:
    return st.session_state.store


def get_searcher() -> MemberSearcher:
    return st.session_state.searcher


def get_sorter() -> MemberSorter:
    return st.session_state.sorter


def commit_changes():
    # Persist and drop stale search indexes after any store mutation
    get_store().save_to_file()
    get_searcher().invalidate_indexes()


# ---------- Pages ----------

def members_page():
    st.header("👥 Members")

    with st.sidebar:
        st.subheader("Search & Sort")
        text = st.text_input("Search")
        field = st.selectbox("Search in", [f.value for f in SearchField], index=len(SearchField) - 1)
        sort_by = st.selectbox("Sort by", SORT_FIELDS)
        order = st.radio("Order", [o.value for o in SortOrder], horizontal=True)
        algorithm = st.selectbox("Algorithm", ["Auto"] + [a.value for a in SortAlgorithm])

    results = get_searcher().search(text, field)
    results = get_sorter().sort(results, sort_by, order, None if algorithm == "Auto" else algorithm)

    st.dataframe(utils.members_to_dataframe(results), use_container_width=True, hide_index=True)
    stats = get_sorter().get_sort_statistics()
    st.caption(
        f"{len(results)} member(s) · {stats['last_algorithm_used']} · {stats['last_sort_time_ms']:.3f} ms"
    )

    st.divider()

    colA, colB = st.columns([1, 2])
    with colA:
        st.subheader("Select member")
        ids = [m.member_id for m in results]
        selected_id = st.selectbox("Member ID", options=["(none)"] + ids)

    with colB:
        if selected_id != "(none)":
            member = get_store().find_by_id(selected_id)
            st.subheader("Member details")
            st.text(member.generate_performance_report())
            c1, c2 = st.columns(2)
            with c1:
                if st.button("Edit"):
                    st.session_state.edit_member_id = selected_id
                    st.rerun()
            with c2:
                delete_confirm = st.checkbox("Confirm delete", value=False, key="del_confirm")
                if st.button("Delete", type="secondary", disabled=not delete_confirm):
                    get_store().remove_member(selected_id)
                    commit_changes()
                    st.success("Member deleted.")
                    st.rerun()

    st.divider()

    if st.session_state.get("edit_member_id"):
        member = get_store().find_by_id(st.session_state.edit_member_id)
        if member:
            update_form(member)
        if st.button("Cancel edit"):
            st.session_state.edit_member_id = None
            st.rerun()
    else:
        add_member_form()


def add_member_form():
    st.subheader("➕ Add Member")

    member_type = st.selectbox("Membership", MEMBER_TYPES)
    st.caption(utils.describe_fee_rules(member_type))

    col1, col2, col3 = st.columns(3)
    with col1:
        member_id = st.text_input("Member ID")
        first_name = st.text_input("First name")
        last_name = st.text_input("Last name")
    with col2:
        email = st.text_input("Email")
        phone = st.text_input("Phone")
        rating = st.number_input("Performance rating", min_value=0, max_value=10, value=5, step=1)
        goal = st.checkbox("Goal achieved")
    with col3:
        extra1, extra2 = "", ""
        if member_type == TYPE_PREMIUM:
            extra1 = st.text_input("Trainer name")
            extra2 = str(st.number_input("Sessions per month", min_value=0, value=4, step=1))
        elif member_type == TYPE_STUDENT:
            extra1 = st.text_input("Student ID")
            extra2 = st.text_input("University")

    errors = utils.validate_member_inputs(
        member_type, member_id, first_name, last_name, email,
        performance_rating=rating,
        sessions_per_month=extra2 if member_type == TYPE_PREMIUM else None,
        store=get_store(),
    )
    if errors and member_id:
        for e in errors:
            st.error(e)

    if st.button("Save", type="primary", disabled=bool(errors)):
        member = utils.build_member(member_type, member_id, first_name, last_name, email, phone,
                                    int(rating), goal, extra1, extra2)
        try:
            get_store().add_member(member)
        except DuplicateMemberError as e:
            st.error(str(e))
            return
        commit_changes()
        st.success("Member added.")
        st.rerun()


def update_form(member):
    st.subheader(f"✏️ Edit Member (ID: {member.member_id})")

    col1, col2 = st.columns(2)
    with col1:
        email = st.text_input("Email", value=member.email)
        phone = st.text_input("Phone", value=member.phone)
    with col2:
        rating = st.number_input("Performance rating", min_value=0, max_value=10,
                                 value=member.performance_rating, step=1)
        goal = st.checkbox("Goal achieved", value=member.goal_achieved)

    if st.button("Update", type="primary"):
        get_store().update_member(member.member_id, {
            "email": email.strip(),
            "phone": phone.strip(),
            "performance_rating": int(rating),
            "goal_achieved": goal,
        })
        commit_changes()
        st.session_state.edit_member_id = None
        st.success("Member updated.")
        st.rerun()


def advanced_search_page():
    st.header("🔎 Advanced Search")
    st.caption("Members must match every filled-in field.")

    c1, c2, c3 = st.columns(3)
    with c1:
        member_id = st.text_input("ID contains")
        name = st.text_input("Name contains")
    with c2:
        email = st.text_input("Email contains")
        member_type = st.selectbox("Type", ["Any"] + list(MEMBER_TYPES))
    with c3:
        goal = st.selectbox("Goal achieved", ["Any", "true", "false"])

    criteria = {k: v for k, v in {"id": member_id, "name": name, "email": email}.items() if v.strip()}
    if member_type != "Any":
        criteria["type"] = member_type
    if goal != "Any":
        criteria["goal"] = goal

    results = get_searcher().advanced_search(criteria)
    st.dataframe(utils.members_to_dataframe(results), use_container_width=True, hide_index=True)

    st.divider()
    st.subheader("Multi-field sort")
    fields = st.multiselect("Sort fields (priority order)", SORT_FIELDS, default=["Type", "Name"])
    descending = st.multiselect("Descending fields", fields)
    orders = [SortOrder.DESCENDING if f in descending else SortOrder.ASCENDING for f in fields]
    ordered = get_sorter().multi_field_sort(results, fields, orders)
    st.dataframe(utils.members_to_dataframe(ordered), use_container_width=True, hide_index=True)


def performance_page():
    st.header("🏅 Performance & Fees")

    tab1, tab2, tab3 = st.tabs(["Appreciation Letters", "Reminder Letters", "Monthly Fees"])
    with tab1:
        letters = utils.appreciation_letters(get_store())
        if letters:
            for letter in letters:
                st.text(letter)
                st.divider()
        else:
            st.caption("No appreciation letters to generate. (Members need performance rating >= 8)")
    with tab2:
        letters = utils.reminder_letters(get_store())
        if letters:
            for letter in letters:
                st.text(letter)
                st.divider()
        else:
            st.caption("No reminder letters to generate. (Members need performance rating < 5)")
    with tab3:
        members = get_store().get_all_members()
        df = utils.members_to_dataframe(members)[["member_id", "full_name", "type", "monthly_fee"]]
        st.dataframe(df, use_container_width=True, hide_index=True)
        st.subheader("By membership type")
        st.dataframe(utils.fee_summary_by_type(members), use_container_width=True, hide_index=True)


def statistics_page():
    st.header("📊 Statistics")

    s = get_store().statistics()
    if s["total"] == 0:
        st.info("No members in the system.")
        return

    c1, c2, c3 = st.columns(3)
    c1.metric("Total members", s["total"])
    c2.metric("Average performance", f"{s['average_performance']:.2f}")
    c3.metric("Goal achievers", s["goal_achievers"])

    counts = pd.DataFrame(
        {"members": [s["regular"], s["premium"], s["student"]]},
        index=list(MEMBER_TYPES),
    )
    st.bar_chart(counts)

    st.subheader("Search index")
    st.json(get_searcher().get_search_statistics())


def reports_page():
    st.header("🧾 Reports")

    st.subheader("Export members to CSV")
    members = get_store().get_all_members()
    if members:
        st.download_button(
            "Download members.csv",
            data=utils.members_to_csv_bytes(members),
            file_name="members.csv",
            mime="text/csv",
        )
    else:
        st.caption("No members to export.")

    st.divider()

    st.subheader("Sorting benchmark")
    sort_by = st.selectbox("Field", SORT_FIELDS, key="bench_field")
    if st.button("Run benchmark"):
        results = get_sorter().benchmark(members, sort_by)
        df = pd.DataFrame(sorted(results.items(), key=lambda kv: kv[1]), columns=["algorithm", "nanoseconds"])
        st.dataframe(df, use_container_width=True, hide_index=True)


def settings_page():
    st.header("⚙️ Settings")

    st.caption(f"Data file: {get_store().data_file}")
    if st.button("Reload from file"):
        try:
            count = get_store().load_from_file()
        except FileNotFoundError:
            st.error("Data file not found.")
        else:
            get_searcher().invalidate_indexes()
            st.success(f"Loaded {count} members.")

    st.divider()

    st.subheader("Sample data")
    st.caption("Insert the 9 sample members (IDs already present are skipped).")
    if st.button("Insert sample data"):
        added = utils.insert_sample_data(get_store())
        commit_changes()
        st.success(f"{added} sample member(s) inserted.")
        st.rerun()


def main_app():
    st.sidebar.title("🏋️ Gym Members")

    pages = ["Members", "Advanced Search", "Performance", "Statistics", "Reports", "Settings"]
    if "page" not in st.session_state:
        st.session_state.page = "Members"
    st.session_state.page = st.sidebar.radio("Navigate", pages, index=pages.index(st.session_state.page))

    if st.session_state.page == "Members":
        members_page()
    elif st.session_state.page == "Advanced Search":
        advanced_search_page()
    elif st.session_state.page == "Performance":
        performance_page()
    elif st.session_state.page == "Statistics":
        statistics_page()
    elif st.session_state.page == "Reports":
        reports_page()
    elif st.session_state.page == "Settings":
        settings_page()


# --------- App entry ---------

def run():
    init_once()
    main_app()


if __name__ == "__main__":
    run()
