import streamlit as st

from lms.logging_config import setup_logging
from lms.db import init_db


def init_app():
    setup_logging()
    init_db()

    if "user" not in st.session_state:
        st.session_state.user = None

    if "selected_course_id" not in st.session_state:
        st.session_state.selected_course_id = None

    if "selected_lesson_id" not in st.session_state:
        st.session_state.selected_lesson_id = None


def current_user():
    return st.session_state.get("user")


def is_admin() -> bool:
    user = current_user()
    return bool(user) and user.get("role") == "admin"
