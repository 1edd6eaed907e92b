"""Learner profile setup page"""

import streamlit as st
import sys
import os

# Add parent directory to path to import vocab
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from vocab.config import settings
from vocab.crud import create_user
from vocab.schemas import UserCreate


def show_setup_page(db):
    """Display learner profile setup form
    
    Args:
        db: Database session
    """
    st.title("📖 Welcome to Vocab Trainer!")
    st.markdown("### Let's set up your profile")
    
    with st.form("user_setup_form"):
        name = st.text_input("Your Name *", placeholder="e.g., Alex")
        
        st.subheader("Daily Limits")
        col1, col2 = st.columns(2)
        with col1:
            new_limit = st.number_input(
                "New Words Per Day *",
                min_value=0,
                max_value=200,
                value=settings.default_daily_new_card_limit,
                step=5,
                help="How many unseen words to introduce each day?"
            )
        with col2:
            review_limit = st.number_input(
                "Reviews Per Day *",
                min_value=0,
                max_value=1000,
                value=settings.default_daily_review_limit,
                step=10,
                help="Upper bound on due cards shown each day"
            )
        
        submitted = st.form_submit_button("Create Profile", type="primary", use_container_width=True)
    
    if submitted:
        if not name:
            st.error("Please enter your name")
        else:
            new_user = create_user(db, UserCreate(
                name=name,
                daily_new_card_limit=int(new_limit),
                daily_review_limit=int(review_limit)
            ))
            st.session_state.user_id = new_user.id
            st.success(f"✅ Profile created for {name}!")
            st.rerun()
