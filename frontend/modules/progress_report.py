"""Progress report / analytics dashboard page"""

import streamlit as st
import pandas as pd
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from vocab.stats import compute_progress

STATUS_ORDER = ["new", "learning", "review", "mastered", "retired"]


def show_progress_report_page(store, user):
    """Display learning progress and analytics
    
    Args:
        store: Learner-scoped VocabStore
        user: User row
    """
    st.title("📊 Learning Progress Report")
    st.markdown(f"### Insights for {user.name}")
    
    progress = compute_progress(store)
    if not progress.total_words:
        st.info("No words tracked yet. Enable a word list or add your own words to get started.")
        return
    
    _show_key_metrics(progress)
    st.divider()
    _show_status_breakdown(progress)
    _show_review_history(progress)
    _show_forecast(progress)


def _show_key_metrics(progress):
    """Display key metrics at the top"""
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Study Streak", f"{progress.streak.current_streak} days", delta="🔥")
    with col2:
        st.metric("Longest Streak", f"{progress.streak.longest_streak} days")
    with col3:
        st.metric("Total Reviews", progress.total_reviews)
    with col4:
        accuracy = progress.quiz_accuracy
        st.metric("Quiz Accuracy", f"{accuracy:.0%}" if accuracy is not None else "-")


def _show_status_breakdown(progress):
    """Bar per card status"""
    st.subheader("📚 Words by Stage")
    
    for status in STATUS_ORDER:
        count = progress.status_counts.get(status, 0)
        col_name, col_bar = st.columns([1, 4])
        with col_name:
            st.markdown(f"**{status.title()}**")
        with col_bar:
            st.progress(count / progress.total_words, text=f"{count} words")


def _show_review_history(progress):
    st.subheader("📈 Reviews Per Day")
    df = pd.DataFrame([{"date": d.date, "reviews": d.count} for d in progress.daily_reviews])
    st.bar_chart(df.set_index("date"))


def _show_forecast(progress):
    st.subheader("📅 Upcoming Reviews")
    st.caption("Overdue cards are counted on today")
    df = pd.DataFrame([{"date": d.date, "due": d.count} for d in progress.due_forecast])
    st.bar_chart(df.set_index("date"))
