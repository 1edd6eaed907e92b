"""Study limits plus backup export / restore"""

import streamlit as st
from datetime import date
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from vocab.backup import export_data, import_data
from vocab.exceptions import VocabError
from vocab.schemas import UserSettings


def show_settings_page(store):
    """Display settings and backup tools
    
    Args:
        store: Learner-scoped VocabStore
    """
    st.title("⚙️ Settings")
    current = store.get_settings()
    
    with st.form("limits_form"):
        col1, col2 = st.columns(2)
        with col1:
            new_limit = st.number_input("New Words Per Day", min_value=0, max_value=200, value=current.daily_new_card_limit)
        with col2:
            review_limit = st.number_input("Reviews Per Day", min_value=0, max_value=1000, value=current.daily_review_limit)
        if st.form_submit_button("Save", type="primary"):
            store.update_settings(UserSettings(
                daily_new_card_limit=int(new_limit),
                daily_review_limit=int(review_limit),
                enabled_list_ids=current.enabled_list_ids
            ))
            st.success("✅ Settings saved")
    
    st.divider()
    st.subheader("💾 Backup")
    st.download_button(
        "Download Backup",
        data=export_data(store),
        file_name=f"vocab-backup-{date.today().isoformat()}.json",
        mime="application/json"
    )
    
    uploaded = st.file_uploader("Restore from backup (replaces current data)", type=["json"])
    if uploaded is not None and st.button("Restore", type="primary"):
        try:
            bundle = import_data(store, uploaded.getvalue().decode("utf-8"))
            st.session_state.pop("orchestrator", None)
            st.success(f"✅ Restored {len(bundle.words)} words")
        except VocabError as e:
            st.error(f"Restore failed: {e}")
