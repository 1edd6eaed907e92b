"""Word list management and personal word entry"""

import streamlit as st
import json
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from pydantic import ValidationError

from vocab.crud import (
    create_word, create_word_list, get_word_lists, enable_word_list, disable_word_list
)
from vocab.schemas import Definition, RawWordEntry, WordCreate


def show_word_lists_page(db, user):
    """Enable builtin lists, import new ones and add personal words
    
    Args:
        db: Database session
        user: User row
    """
    st.title("📚 Word Lists")
    
    _show_available_lists(db, user)
    st.divider()
    _show_list_import(db)
    st.divider()
    _show_add_word(db, user)


def _show_available_lists(db, user):
    word_lists = get_word_lists(db)
    if not word_lists:
        st.info("No word lists imported yet")
        return
    
    enabled = set(user.enabled_list_ids or [])
    for word_list in word_lists:
        col_name, col_count, col_toggle = st.columns([3, 1, 1])
        with col_name:
            st.markdown(f"**{word_list.name}**")
            if word_list.description:
                st.caption(word_list.description)
        with col_count:
            st.caption(f"{len(word_list.words)} words")
        with col_toggle:
            if word_list.id in enabled:
                if st.button("Disable", key=f"disable_{word_list.id}"):
                    disable_word_list(db, user.id, word_list.id)
                    st.rerun()
            elif st.button("Enable", key=f"enable_{word_list.id}", type="primary"):
                created = enable_word_list(db, user.id, word_list.id)
                st.toast(f"Added {created} new cards")
                st.rerun()


def _show_list_import(db):
    st.subheader("📤 Import a Word List")
    with st.form("import_list_form"):
        name = st.text_input("List Name *")
        description = st.text_input("Description")
        uploaded = st.file_uploader("Word list (.json)", type=["json"])
        submitted = st.form_submit_button("Import")
    
    if submitted:
        if not name or uploaded is None:
            st.error("Please provide a name and a file")
            return
        try:
            raw_entries = json.loads(uploaded.getvalue().decode("utf-8"))
        except ValueError as e:
            st.error(f"Could not read file: {e}")
            return
        
        entries, skipped = [], 0
        for raw in raw_entries:
            try:
                entries.append(RawWordEntry(**raw))
            except ValidationError:
                skipped += 1
        
        word_list = create_word_list(db, name, entries, description=description)
        st.success(f"✅ Imported '{word_list.name}' with {len(entries)} words")
        if skipped:
            st.warning(f"Skipped {skipped} malformed entries")


def _show_add_word(db, user):
    st.subheader("✍️ Add Your Own Word")
    with st.form("add_word_form", clear_on_submit=True):
        word = st.text_input("Word *")
        col1, col2 = st.columns([1, 3])
        with col1:
            pos = st.text_input("Part of Speech", placeholder="n.")
        with col2:
            meaning = st.text_input("Meaning *")
        phonetic = st.text_input("Phonetic")
        example = st.text_area("Example Sentence")
        tags = st.text_input("Tags (comma-separated)")
        submitted = st.form_submit_button("Add Word", type="primary")
    
    if submitted:
        if not word.strip() or not meaning.strip():
            st.error("Word and meaning are required")
            return
        create_word(db, user.id, WordCreate(
            word=word.strip(),
            phonetic=phonetic or None,
            definitions=[Definition(pos=pos, meaning=meaning.strip())],
            example=example or None,
            tags=[t.strip() for t in tags.split(",") if t.strip()]
        ))
        st.success(f"✅ Added '{word.strip()}'")
