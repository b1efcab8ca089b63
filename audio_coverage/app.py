import os
import sys

import pandas as pd
import streamlit as st

# Ensure project root is in path
current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

from audio_coverage.assistant import AlignmentAssistant
from audio_coverage.output_manager import build_chapter_rows, build_range_rows
from audio_coverage.scanner import ScanError
from audio_coverage.script_loader import ProjectLoadError, ProjectLoader
from audio_coverage.utils import setup_logging, status_icon

setup_logging()

# Page Config
st.set_page_config(
    page_title="Audio Coverage Assistant",
    page_icon="🎙️",
    layout="wide"
)

# Initialize Session State
if 'assistant' not in st.session_state:
    st.session_state.assistant = None

# Sidebar
st.sidebar.title("Configuration")
project_path = st.sidebar.text_input("Project JSON", value="")
audio_dir = st.sidebar.text_input("Audio Folder", value="")
repo_dir = st.sidebar.text_input("State Folder", value="repo")

if st.sidebar.button("Open Project") and project_path:
    try:
        project = ProjectLoader(project_path).load()
        assistant = AlignmentAssistant(project, base_repo=repo_dir)
        assistant.load()
        st.session_state.assistant = assistant
    except ProjectLoadError as e:
        st.sidebar.error(str(e))

st.title("Audio Coverage Assistant 🎙️")
st.markdown("Check that every character's lines have a recorded audio file.")

assistant = st.session_state.assistant
if assistant is None:
    st.info("Open a project JSON from the sidebar to begin.")
    st.stop()

# --- Step 1: Scan ---
st.header("1. Audio Folder")
col1, col2 = st.columns(2)
with col1:
    if st.button("Scan Folder", disabled=not audio_dir):
        with st.spinner("Scanning..."):
            try:
                assistant.select_directory(audio_dir)
            except ScanError as e:
                st.error(f"Error scanning folder: {e}")
with col2:
    if st.button("Rescan", disabled=not assistant.directory_path):
        with st.spinner("Rescanning..."):
            try:
                assistant.rescan()
            except ScanError as e:
                st.error(f"Error rescanning folder: {e}")

st.caption(f"Folder: {assistant.directory_name or '(none)'} | Files: {len(assistant.scanned_files)}")

status = assistant.status

# --- Step 2: Ranges ---
st.header("2. Chapter Ranges")
ranges = assistant.chapter_ranges
if not ranges:
    st.info("This project has no chapters.")
    st.stop()

range_rows = build_range_rows(assistant.project, status)
labels = [f"{row['range']} {status_icon(row['covered'])}" for row in range_rows]
current_range = assistant.selected_range_index if assistant.selected_range_index is not None else 0
picked = st.radio("Range", options=list(range(len(labels))), format_func=lambda i: labels[i],
                  index=current_range, horizontal=True)
if picked != assistant.selected_range_index:
    assistant.select_range(picked)

# --- Step 3: Chapters ---
st.header("3. Chapters")
chapter_rows = build_chapter_rows(assistant.project, status, assistant.chapters_in_selected_range)
df = pd.DataFrame(chapter_rows)
df["covered"] = df["covered"].map(status_icon)
st.dataframe(df[["position", "title", "ordinal", "covered"]], hide_index=True, width='stretch')

chapter_ids = [row["id"] for row in chapter_rows]
titles = {row["id"]: f"{row['position']}. {row['title']}" for row in chapter_rows}
selected = st.selectbox("Chapter", options=chapter_ids, format_func=lambda cid: titles[cid],
                        index=chapter_ids.index(assistant.selected_chapter_id)
                        if assistant.selected_chapter_id in chapter_ids else 0)
if selected != assistant.selected_chapter_id:
    assistant.select_chapter(selected)
    status = assistant.status

# --- Step 4: Characters ---
st.header("4. Characters")
characters = assistant.characters_in_selected_chapter
statuses = status.characters if status else {}

data = []
for c in characters:
    data.append({
        "ID": c.id,
        "Character": c.name,
        "CV": c.cv_name or "",
        "Recorded": bool(statuses.get(c.id, False)),
    })

if not data:
    st.info("No attributed lines in this chapter.")
else:
    edited_df = st.data_editor(
        pd.DataFrame(data),
        column_config={
            "Recorded": st.column_config.CheckboxColumn(
                "Recorded",
                help="Toggle to override the detected status",
                default=False,
            )
        },
        disabled=["ID", "Character", "CV"],
        hide_index=True,
        width='stretch'
    )

    changed = [
        row["ID"] for row, original in zip(edited_df.to_dict("records"), data)
        if row["Recorded"] != original["Recorded"]
    ]
    if changed:
        for char_id in changed:
            assistant.toggle_character(char_id)
        st.rerun()
