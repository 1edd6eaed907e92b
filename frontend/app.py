"""Vocab Trainer - Main application file"""

import streamlit as st
import sys
import os

# Add parent directory to path to import vocab
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from vocab.config import settings
from vocab.crud import get_user
from vocab.database import SessionLocal, init_db
from vocab.logging_config import setup_logging
from vocab.store import VocabStore

# Import page modules
from modules.setup_profile import show_setup_page
from modules.study_session import show_study_page
from modules.quiz_page import show_quiz_page
from modules.progress_report import show_progress_report_page
from modules.word_lists import show_word_lists_page
from modules.settings_page import show_settings_page

setup_logging(settings.log_level)
init_db()

# ===================================================================
# PAGE CONFIGURATION & SESSION STATE
# ===================================================================

st.set_page_config(
    page_title="Vocab Trainer",
    page_icon="📖",
    layout="wide"
)

if 'user_id' not in st.session_state:
    st.session_state.user_id = 1  # Default user, can be made configurable

# Get database session
@st.cache_resource
def get_db():
    return SessionLocal()

db = get_db()

# ===================================================================
# USER PROFILE CHECK
# ===================================================================

user = get_user(db, st.session_state.user_id)
if not user:
    show_setup_page(db)
    st.stop()

store = VocabStore(db, user.id)

# ===================================================================
# SIDEBAR NAVIGATION
# ===================================================================

st.sidebar.title("📖 Vocab Trainer")
st.sidebar.markdown(f"**Learner:** {user.name}")
st.sidebar.markdown(f"**Daily:** {user.daily_new_card_limit} new / {user.daily_review_limit} reviews")
st.sidebar.divider()

page = st.sidebar.radio(
    "Navigate",
    ["🧠 Study", "📝 Quiz", "📊 Progress Report", "📚 Word Lists", "⚙️ Settings"]
)

# ===================================================================
# PAGE ROUTING
# ===================================================================

if page == "🧠 Study":
    show_study_page(store)

elif page == "📝 Quiz":
    show_quiz_page(store)

elif page == "📊 Progress Report":
    show_progress_report_page(store, user)

elif page == "📚 Word Lists":
    show_word_lists_page(db, user)

elif page == "⚙️ Settings":
    show_settings_page(store)

# ===================================================================
# FOOTER
# ===================================================================

st.sidebar.divider()
st.sidebar.caption("Vocab Trainer v0.1")
st.sidebar.caption("Powered by SM-2 Algorithm")
