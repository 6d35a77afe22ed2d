import logging

import streamlit as st

from lms.app_state import init_app
from lms.courses import find_next_lesson, get_course_outline, iter_lessons, list_courses
from lms.errors import LMSError
from lms.progress import all_lessons_completed, get_completed_lesson_ids, mark_lesson_complete
from lms.quiz import (
    get_questions_for_quiz,
    get_quiz_for_course,
    get_user_quiz_response,
    quiz_for_student,
    submit_quiz_response,
)
from lms.ui import apply_global_styles, course_options, format_date, render_sidebar, video_url

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Course", page_icon="🎬", layout="wide")

init_app()
apply_global_styles()
render_sidebar()

if st.session_state.user is None:
    st.info("Please sign in first.")
    st.stop()

user_id = st.session_state.user["id"]

courses = list_courses()
if not courses:
    st.warning("No courses yet.")
    st.stop()

course_titles = course_options(courses)
course_ids = list(course_titles.keys())
current_index = 0
if st.session_state.selected_course_id in course_ids:
    current_index = course_ids.index(st.session_state.selected_course_id)
selected_id = st.selectbox(
    "Course",
    course_ids,
    index=current_index,
    format_func=lambda cid: course_titles[cid],
)
if selected_id != st.session_state.selected_course_id:
    st.session_state.selected_course_id = selected_id
    st.session_state.selected_lesson_id = None

course_id = st.session_state.selected_course_id
outline = get_course_outline(course_id)
if outline is None:
    st.error("Course not found")
    st.stop()

completed = get_completed_lesson_ids(user_id, course_id)
quiz = get_quiz_for_course(course_id)
quiz_response = get_user_quiz_response(user_id, course_id) if quiz else None

lessons = list(iter_lessons(outline))
selected_lesson = None
for lesson in lessons:
    if lesson["_id"] == st.session_state.selected_lesson_id:
        selected_lesson = lesson
        break
if selected_lesson is None and lessons:
    # first lesson is shown by default
    selected_lesson = lessons[0]
    st.session_state.selected_lesson_id = selected_lesson["_id"]


@st.dialog("Final quiz", width="large")
def take_quiz(payload):
    st.caption(
        f"{len(payload['questions'])} questions · minimum score {payload['minimumScore']}% · "
        f"{payload['timeLimit']} minutes"
    )
    answers = []
    for idx, q in enumerate(payload["questions"], start=1):
        key = f"quiz_{payload['_id']}_q_{q['_id']}"
        if q["type"] == "essay":
            selected = st.text_area(f"{idx}. {q['question']}", key=key)
        elif q["type"] == "true_false":
            options = q["options"] or ["true", "false"]
            selected = st.radio(f"{idx}. {q['question']}", options, index=None, key=key)
        else:
            selected = st.radio(f"{idx}. {q['question']}", q["options"], index=None, key=key)
        answers.append({"questionId": q["_id"], "selectedAnswer": selected})

    if st.button("Submit answers", type="primary"):
        if any(a["selectedAnswer"] in (None, "") for a in answers):
            st.warning("Answer every question before submitting.")
            return
        try:
            result = submit_quiz_response(payload["_id"], user_id, answers)
            st.session_state.last_quiz_score = result["score"]
            st.rerun()
        except LMSError as e:
            st.error(e.message)
        except Exception:
            logger.exception("Quiz submission failed")
            st.error("Could not submit the quiz. Please try again.")


head_col, quiz_col = st.columns([3, 1])
with head_col:
    st.markdown(f"## {outline['title']}")
    st.write(outline["description"])
with quiz_col:
    if quiz and all_lessons_completed(outline, completed):
        if quiz_response:
            st.caption(
                f"Quiz completed on {format_date(quiz_response['completedAt'])} - {quiz_response['score']}%"
            )
            st.button("🔒 Quiz completed", disabled=True)
        elif st.button("📝 Final quiz"):
            take_quiz(quiz_for_student(quiz, get_questions_for_quiz(quiz.id)))

main_col, nav_col = st.columns([2, 1])

with main_col:
    if selected_lesson:
        url = video_url(selected_lesson.get("videoRef"))
        if url:
            st.video(url)
        else:
            st.info("This lesson has no video.")
        st.markdown(f"### {selected_lesson['title']}")
        st.write(selected_lesson["description"])

        if selected_lesson["_id"] in completed:
            st.success("Lesson completed")
        if st.button("Mark as complete and continue", type="primary"):
            try:
                mark_lesson_complete(user_id, course_id, selected_lesson["_id"])
                next_lesson = find_next_lesson(outline, selected_lesson["_id"])
                if next_lesson:
                    st.session_state.selected_lesson_id = next_lesson["_id"]
                st.rerun()
            except LMSError as e:
                st.error(e.message)
            except Exception:
                logger.exception("Could not save lesson progress")
                st.error("Could not save your progress. Please try again.")
    else:
        st.info("This course has no lessons yet.")

with nav_col:
    for module_index, module in enumerate(outline["modules"], start=1):
        contains_selected = any(
            lesson["_id"] == st.session_state.selected_lesson_id for lesson in module["lessons"]
        )
        with st.expander(f"Module {module_index} · {module['title']}", expanded=contains_selected):
            for lesson in module["lessons"]:
                if lesson["_id"] in completed:
                    icon = "✅"
                elif lesson["_id"] == st.session_state.selected_lesson_id:
                    icon = "▶️"
                else:
                    icon = "⚪"
                if st.button(f"{icon} {lesson['title']}", key=f"lesson_{lesson['_id']}"):
                    st.session_state.selected_lesson_id = lesson["_id"]
                    st.rerun()
