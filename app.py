import streamlit as st

from lms.app_state import init_app
from lms.courses import list_courses
from lms.ui import apply_global_styles, render_hero, render_sidebar

st.set_page_config(
    page_title="Course Platform",
    page_icon="📚",
    layout="wide",
    initial_sidebar_state="expanded",
)

init_app()
apply_global_styles()
render_sidebar()

render_hero("Course Platform", "Watch the lessons, track your progress and take the final quiz.")

if st.session_state.user is None:
    st.info("Sign in from the sidebar to follow a course.")
    st.stop()

courses = list_courses()
if not courses:
    st.warning("No courses yet.")
    st.stop()

for course in courses:
    with st.container(border=True):
        st.subheader(course.title)
        st.write(course.description or "")
        if st.button("Open course", key=f"open_course_{course.id}"):
            st.session_state.selected_course_id = course.id
            st.session_state.selected_lesson_id = None
            st.switch_page("pages/1_Course.py")
