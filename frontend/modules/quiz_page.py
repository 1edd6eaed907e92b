"""Standalone quiz over every studied word"""

import streamlit as st
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from vocab.config import settings
from vocab.quiz import QuizGenerator, QuizRun
from vocab.schemas import MCQQuestion
from vocab.streak import StreakTracker


def show_quiz_page(store):
    """Display the quiz setup form or the running quiz
    
    Args:
        store: Learner-scoped VocabStore
    """
    st.title("📝 Quiz")
    run = st.session_state.get("quiz_run")
    
    if run is None or run.store.user_id != store.user_id:
        _show_quiz_setup(store)
    elif run.is_complete:
        _show_quiz_result(run)
    else:
        _show_question(run)


def _show_quiz_setup(store):
    with st.form("quiz_setup"):
        mode = st.radio("Quiz Type", ["mcq", "spelling"], format_func=lambda m: "Multiple Choice" if m == "mcq" else "Spelling", horizontal=True)
        count = st.number_input("Questions", min_value=1, max_value=100, value=settings.quiz_question_count)
        submitted = st.form_submit_button("Start Quiz", type="primary")
    
    if submitted:
        generator = QuizGenerator(store)
        if mode == "mcq":
            questions = generator.generate_mcq(int(count))
        else:
            questions = generator.generate_spelling(int(count))
        
        if not questions:
            st.warning("Not enough studied words yet. Multiple choice needs at least 4.")
            return
        st.session_state.quiz_run = QuizRun(store, questions, mode=mode, streak=StreakTracker(store))
        st.rerun()


def _show_question(run):
    question = run.current_question
    st.progress(run.index / len(run.questions), text=f"Question {run.index + 1} / {len(run.questions)}")
    
    with st.form(f"quiz_question_{run.index}"):
        if isinstance(question, MCQQuestion):
            st.markdown(f"## {question.question_text}")
            response = st.radio("Meaning", question.options, index=None)
        else:
            st.markdown(f"### {question.hint}")
            response = st.text_input("Spelling")
        submitted = st.form_submit_button("Submit", type="primary")
    
    if submitted and response:
        if run.answer(response):
            st.toast("✅ Correct")
        else:
            st.toast(f"❌ {question.correct_answer}")
        st.rerun()


def _show_quiz_result(run):
    result = run.result
    st.success(f"🎯 Score: {result.correct_count}/{result.total_questions}")
    st.caption(f"Took {result.duration_seconds} seconds")
    if result.wrong_word_ids:
        missed = run.store.get_words(result.wrong_word_ids)
        st.markdown("**Words to revisit:** " + ", ".join(w.word for w in missed.values()))
    if st.button("New Quiz"):
        del st.session_state.quiz_run
        st.rerun()
