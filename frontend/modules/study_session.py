"""Daily study session page: learning, reinforcement and the end-of-day quiz"""

import streamlit as st
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from vocab.daily_state import load_daily_state, save_daily_state
from vocab.exceptions import VocabError
from vocab.session import SessionOrchestrator, SessionPhase
from vocab.sm2 import RATING_QUALITIES, format_interval
from vocab.streak import StreakTracker

RATING_BUTTONS = {1: "😵 Forget", 3: "🤔 Hard", 4: "🙂 Good", 5: "😎 Easy"}


def _get_orchestrator(store):
    """One orchestrator per learner, kept across reruns"""
    orchestrator = st.session_state.get("orchestrator")
    if orchestrator is None or orchestrator.store.user_id != store.user_id:
        if orchestrator is not None:
            orchestrator.close()
        daily_state = load_daily_state(store.user_id)
        orchestrator = SessionOrchestrator(store, daily_state, streak=StreakTracker(store))
        orchestrator.start_learning()
        st.session_state.orchestrator = orchestrator
        st.session_state.flipped = False
    return orchestrator


def _persist_daily_state(orchestrator):
    save_daily_state(orchestrator.store.user_id, orchestrator.daily_state)


def _show_definitions(word):
    for definition in word.definitions:
        pos = f"*{definition.pos}* " if definition.pos else ""
        st.markdown(f"{pos}{definition.meaning}")
    if word.example:
        st.caption(word.example)
    if word.example_translation:
        st.caption(word.example_translation)


def show_study_page(store):
    """Display today's study session
    
    Args:
        store: Learner-scoped VocabStore
    """
    st.title("🧠 Today's Study")
    orchestrator = _get_orchestrator(store)
    
    try:
        if orchestrator.phase == SessionPhase.LEARNING and not orchestrator.complete:
            _show_learning(orchestrator)
        elif orchestrator.phase == SessionPhase.REINFORCING and not orchestrator.complete:
            _show_reinforcement(orchestrator)
        elif orchestrator.phase == SessionPhase.QUIZZING and not orchestrator.complete:
            _show_quiz(orchestrator)
        else:
            _show_summary(orchestrator)
    except VocabError as e:
        st.error(f"⚠️ {e}")


def _show_learning(orchestrator):
    card = orchestrator.current_card
    st.progress(orchestrator.index / len(orchestrator.queue), text=f"{orchestrator.index + 1} / {len(orchestrator.queue)}")
    
    st.markdown(f"## {card.word.word}")
    if card.word.phonetic:
        st.caption(card.word.phonetic)
    if card.word.audio:
        st.audio(card.word.audio)
    
    if not st.session_state.get("flipped"):
        if st.button("Show Answer", type="primary", use_container_width=True):
            st.session_state.flipped = True
            st.rerun()
        return
    
    _show_definitions(card.word)
    st.divider()
    
    previews = orchestrator.preview_intervals()
    cols = st.columns(len(RATING_QUALITIES))
    for col, quality in zip(cols, RATING_QUALITIES):
        with col:
            label = f"{RATING_BUTTONS[quality]}\n\n{format_interval(previews[quality])}"
            if st.button(label, key=f"rate_{quality}", use_container_width=True):
                orchestrator.rate(quality)
                _persist_daily_state(orchestrator)
                st.session_state.flipped = False
                st.rerun()


def _show_summary(orchestrator):
    stats = orchestrator.stats
    touched = orchestrator.touched_words()
    if not touched:
        if not orchestrator.store.get_all_card_states():
            st.info("No words yet. Enable a word list or add your own words first.")
        else:
            st.success("🎉 Nothing due today. Come back tomorrow!")
        return
    
    st.success("✅ Today's learning is complete!")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Reviewed", stats.reviewed)
    with col2:
        st.metric("Remembered", stats.correct)
    with col3:
        st.metric("Accuracy", f"{stats.accuracy:.0%}" if stats.accuracy is not None else "-")
    
    if orchestrator.quiz and orchestrator.quiz.result:
        result = orchestrator.quiz.result
        st.info(f"Quiz score: {result.correct_count}/{result.total_questions}")
    
    if orchestrator.buffer.pending:
        st.warning(f"{len(orchestrator.buffer)} rating(s) are not saved yet.")
        if st.button("Retry Saving"):
            orchestrator.flush()
            st.rerun()
    
    col_a, col_b, col_c = st.columns(3)
    with col_a:
        if st.button("🔁 Reinforce Today's Words", use_container_width=True):
            orchestrator.start_reinforcement()
            st.session_state.flipped = False
            st.rerun()
    with col_b:
        if st.button("📝 Quiz Today's Words", use_container_width=True):
            if not orchestrator.start_quiz():
                st.warning("A quiz needs at least 4 words studied today.")
            else:
                st.rerun()
    with col_c:
        if st.button("↩️ Restart Today's Learning", use_container_width=True):
            orchestrator.restart_learning()
            _persist_daily_state(orchestrator)
            st.session_state.flipped = False
            st.rerun()


def _show_reinforcement(orchestrator):
    word = orchestrator.current_word
    total = len(orchestrator.reinforcement_queue)
    st.progress(orchestrator.index / total, text=f"Reinforcing {orchestrator.index + 1} / {total}")
    st.markdown(f"## {word.word}")
    
    if st.session_state.get("flipped"):
        _show_definitions(word)
        if st.button("Next", type="primary", use_container_width=True):
            orchestrator.next_card()
            st.session_state.flipped = False
            st.rerun()
    elif st.button("Show Answer", type="primary", use_container_width=True):
        st.session_state.flipped = True
        st.rerun()


def _show_quiz(orchestrator):
    question = orchestrator.current_question
    total = len(orchestrator.quiz.questions)
    st.progress(orchestrator.index / total, text=f"Question {orchestrator.index + 1} / {total}")
    st.markdown(f"## {question.question_text}")
    
    with st.form(f"quiz_{orchestrator.index}"):
        choice = st.radio("Meaning", question.options, index=None)
        submitted = st.form_submit_button("Submit", type="primary")
    
    if submitted and choice is not None:
        if orchestrator.answer_quiz(choice):
            st.toast("✅ Correct")
        else:
            st.toast(f"❌ {question.correct_answer}")
        st.rerun()
