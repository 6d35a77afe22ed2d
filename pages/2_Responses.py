import csv
import io

import altair as alt
import pandas as pd
import streamlit as st

from lms.app_state import init_app, is_admin
from lms.courses import list_courses
from lms.quiz import list_quiz_responses
from lms.ui import apply_global_styles, course_options, format_date, render_hero, render_sidebar

st.set_page_config(page_title="Quiz responses", page_icon="📊", layout="wide")

init_app()
apply_global_styles()
render_sidebar()

render_hero("Quiz responses", "Submitted quizzes across all courses.")

if st.session_state.user is None:
    st.info("Please sign in first.")
    st.stop()

if not is_admin():
    st.error("Access denied")
    st.stop()

course_opts = course_options(list_courses(), all_label="All courses")
sel_course = st.selectbox(
    "Course",
    list(course_opts.keys()),
    index=0,
    format_func=lambda cid: course_opts[cid],
)

responses = list_quiz_responses(sel_course)

if not responses:
    st.info("No responses yet.")
    st.stop()

rows = [
    {
        "Student": r["user"]["name"],
        "Email": r["user"]["email"],
        "Course": r["quiz"]["course"]["title"] if r["quiz"]["course"] else "",
        "Quiz": r["quiz"]["title"],
        "Score (%)": r["score"],
        "Passed": r["passed"],
        "Completed": format_date(r["completedAt"]),
    }
    for r in responses
]
df = pd.DataFrame(rows)

k1, k2, k3 = st.columns(3)
k1.metric("Responses", str(len(df)))
k2.metric("Average score", f"{df['Score (%)'].mean():.1f}%")
k3.metric("Pass rate", f"{df['Passed'].mean() * 100:.1f}%")

st.dataframe(df, use_container_width=True, hide_index=True)

output = io.StringIO()
writer = csv.writer(output)
writer.writerow(["response_id", "name", "email", "course", "score", "completed_at"])
for r in responses:
    writer.writerow(
        [
            r["_id"],
            r["user"]["name"],
            r["user"]["email"],
            r["quiz"]["course"]["title"] if r["quiz"]["course"] else "",
            r["score"],
            r["completedAt"],
        ]
    )
st.download_button(
    "Download CSV",
    data=output.getvalue(),
    file_name="quiz_responses.csv",
    mime="text/csv",
)

st.markdown("---")
st.subheader("Score distribution")
chart = alt.Chart(df).mark_bar(color="#4cc9f0").encode(
    x=alt.X("Score (%):Q", bin=alt.Bin(step=10), scale=alt.Scale(domain=[0, 100]), title="Score (%)"),
    y=alt.Y("count():Q", title="Responses"),
    tooltip=[alt.Tooltip("count():Q", title="Responses")],
).properties(height=240)
st.altair_chart(chart, use_container_width=True)
