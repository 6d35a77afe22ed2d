import logging
from datetime import datetime

import streamlit as st

from lms import config
from lms.auth import create_user, authenticate_user
from lms.errors import LMSError

logger = logging.getLogger(__name__)


def apply_global_styles():
    st.markdown(
        """
        <style>
        @import url('https://fonts.googleapis.com/css2?family=Space+Grotesk:wght@400;600;700&family=IBM+Plex+Sans:wght@400;600&display=swap');

        :root {
            --bg-0: #0b0f14;
            --bg-1: #0f141b;
            --fg-0: #e6edf3;
            --fg-1: #c6d1dc;
            --accent: #4cc9f0;
            --done: #80ed99;
        }

        .stApp {
            background: radial-gradient(1200px 600px at 15% -10%, #1a2230 0%, var(--bg-0) 60%);
            color: var(--fg-0);
            font-family: "IBM Plex Sans", sans-serif;
        }

        h1, h2, h3, h4 {
            font-family: "Space Grotesk", sans-serif;
            letter-spacing: 0.3px;
        }

        .hero {
            padding: 1.5rem 1.75rem;
            background: linear-gradient(120deg, #141b24 0%, #0f141b 55%, #111925 100%);
            border: 1px solid #1f2a38;
            border-radius: 16px;
            margin-bottom: 1.5rem;
        }

        .hero p {
            color: var(--fg-1);
            margin: 0;
        }

        [data-testid="stSidebarNav"] {
            display: none;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_hero(title: str, subtitle: str = ""):
    st.markdown(
        f"""
        <div class="hero">
            <h2>{title}</h2>
            <p>{subtitle}</p>
        </div>
        """,
        unsafe_allow_html=True,
    )


def render_sidebar():
    with st.sidebar:
        st.header("Account")
        render_auth()

        st.divider()

        render_nav()


def render_auth():
    if st.session_state.user is None:
        auth_options = ["Sign in", "Register"]
        if st.session_state.get("pending_auth_tab"):
            st.session_state["auth_tab"] = auth_options[0]
            st.session_state.reg_success = True
            st.session_state.pending_auth_tab = False
        auth_tab = st.selectbox("Account", auth_options, key="auth_tab")
        if auth_tab == auth_options[0]:
            if st.session_state.get("reg_success"):
                st.success("Registration complete. You can sign in now.")
                st.session_state.reg_success = False
            email = st.text_input("Email", key="login_email")
            password = st.text_input("Password", type="password", key="login_password")
            if st.button("Sign in", key="login_btn"):
                try:
                    user = authenticate_user(email, password)
                    if user:
                        st.session_state.user = {
                            "id": user.id,
                            "email": user.email,
                            "role": user.role,
                            "name": user.name,
                        }
                        st.rerun()
                    else:
                        st.error("Wrong email or password")
                except Exception:
                    logger.exception("Sign in failed")
                    st.error("Could not sign in. Please try again.")
        else:
            reg_email = st.text_input("Email", key="reg_email")
            reg_name = st.text_input("Name", key="reg_name")
            reg_password = st.text_input("Password", type="password", key="reg_password")
            if st.button("Register", key="reg_btn"):
                try:
                    create_user(reg_email, reg_password, name=reg_name)
                    st.session_state.pending_auth_tab = True
                    st.rerun()
                except LMSError as e:
                    st.error(e.message)
                except Exception:
                    logger.exception("Registration failed")
                    st.error("Could not register. Please try again.")
    else:
        name = st.session_state.user.get("name") or st.session_state.user.get("email")
        st.markdown(f"**Signed in as:** {name}")
        if st.button("Sign out", key="logout_btn"):
            st.session_state.user = None
            st.rerun()


def render_nav():
    user = st.session_state.get("user")
    role = user.get("role") if user else "student"

    st.header("Menu")
    st.page_link("app.py", label="Home", icon="🏠")
    st.page_link("pages/1_Course.py", label="Course", icon="🎬")
    if role == "admin":
        st.page_link("pages/2_Responses.py", label="Quiz responses", icon="📊")


def format_date(value) -> str:
    if not value:
        return ""
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value))
        except ValueError:
            return str(value)
    if dt.tzinfo:
        dt = dt.astimezone()
    return dt.strftime("%d/%m/%Y")


def video_url(video_ref: str | None) -> str | None:
    if not video_ref:
        return None
    if video_ref.startswith(("http://", "https://")):
        return video_ref
    return f"{config.VIDEO_BASE_URL}{video_ref}"


def course_options(courses, all_label: str | None = None) -> dict:
    """Map course id to selectbox label; duplicated titles get their id appended."""
    counts = {}
    for c in courses:
        counts[c.title] = counts.get(c.title, 0) + 1
    options = {None: all_label} if all_label else {}
    for c in courses:
        options[c.id] = f"{c.title} (#{c.id})" if counts[c.title] > 1 else c.title
    return options
