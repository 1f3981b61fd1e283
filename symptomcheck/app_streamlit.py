# Streamlit front end for the SymptomCheck API.
# Run with: streamlit run symptomcheck/app_streamlit.py
from datetime import date, datetime, time, timedelta

import streamlit as st

from symptomcheck.wizard import (
    ApiError, BODY_PARTS, COMMON_SYMPTOMS, DEFAULT_SEVERITY, DURATION_OPTIONS,
    PAGES, RESULT_PAGE, STEP_TITLES, SymptomCheckClient, TOTAL_STEPS, WizardState,
    booking_assessment_id, open_assessment,
)

URGENCY_LABELS = {
    "low": ("Low urgency", "Self-care at home is likely appropriate."),
    "medium": ("Medium urgency", "Consider booking an appointment with a doctor."),
    "high": ("High urgency", "Seek medical attention soon."),
    "emergency": ("Emergency", "Seek emergency care immediately."),
}
STATUS_ICONS = {"pending": "🕒", "confirmed": "✅", "completed": "✔️", "cancelled": "✖️"}
CATEGORY_LABELS = {
    "all": "All", "wellness": "Wellness", "mental-health": "Mental Health",
    "nutrition": "Nutrition", "conditions": "Conditions", "medications": "Medications",
}

st.set_page_config(page_title="SymptomCheck", page_icon="🩺", layout="centered")

if "client" not in st.session_state:
    st.session_state.client = SymptomCheckClient()
if "wizard" not in st.session_state:
    st.session_state.wizard = WizardState()
st.session_state.setdefault("assessment_id", None)
st.session_state.setdefault("article_slug", None)
st.session_state.setdefault("page", RESULT_PAGE)

client: SymptomCheckClient = st.session_state.client


def show_error(err: ApiError, fallback: str):
    st.toast(f"Error: {err.message or fallback}", icon="⚠️")


# -------------------- Sidebar: account --------------------
st.sidebar.header("Account")
if client.token:
    try:
        me = client.current_user()
        st.sidebar.success(f"Signed in as {me['email']}")
    except ApiError:
        client.token = None
        st.sidebar.warning("Session expired, please sign in again.")
    if st.sidebar.button("Sign out"):
        client.token = None
        st.rerun()
else:
    with st.sidebar.form("login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        col_login, col_register = st.columns(2)
        do_login = col_login.form_submit_button("Sign in")
        do_register = col_register.form_submit_button("Register")
    if do_login or do_register:
        try:
            if do_register:
                client.register(email, password)
            client.login(email, password)
            st.rerun()
        except ApiError as err:
            show_error(err, "Authentication failed")

page = st.sidebar.radio("Navigate", PAGES, key="page")

st.title("🩺 SymptomCheck")
st.info("This tool is for informational purposes only. It does not provide medical advice.")


# -------------------- Assessment result --------------------
def render_assessment(assessment_id: int):
    try:
        assessment = client.get_assessment(assessment_id)
    except ApiError as err:
        show_error(err, "Failed to load assessment")
        return

    label, description = URGENCY_LABELS.get(assessment.get("urgencyLevel"), ("Unknown urgency", ""))
    st.subheader(label)
    st.caption(description)

    analysis = assessment.get("aiAnalysis") or {}
    st.markdown(f"**Summary:** {analysis.get('summary', '')}")
    for cond in analysis.get("conditions", []):
        st.markdown(
            f"**{cond['name']}** ({cond['probability']:.0f}% · {cond['severity']})  \n{cond['description']}"
        )
    st.subheader("Recommendations")
    for rec in assessment.get("recommendations") or []:
        st.markdown(f"- **{rec['title']}** [{rec['type']}, {rec['urgency']}]: {rec['description']}")
    st.subheader("Reported symptoms")
    for s in assessment["symptoms"]:
        st.write(f"• {s['name']} ({BODY_PARTS.get(s['bodyPart'], s['bodyPart'])}), severity {s['severity']}/10, {s['duration']}")
    st.caption(analysis.get("disclaimer", ""))


# -------------------- Symptom checker wizard --------------------
def render_wizard(wizard: WizardState):
    st.subheader(f"Step {wizard.step} of {TOTAL_STEPS}: {STEP_TITLES[wizard.step]}")
    st.progress(wizard.progress)

    if wizard.step == 1:
        cols = st.columns(2)
        for i, (part_id, part_label) in enumerate(BODY_PARTS.items()):
            checked = cols[i % 2].checkbox(part_label, value=part_id in wizard.body_parts, key=f"part-{part_id}")
            if checked != (part_id in wizard.body_parts):
                wizard.toggle_body_part(part_id)

    elif wizard.step == 2:
        with st.form("symptom", clear_on_submit=True):
            name = st.selectbox("Symptom", [""] + COMMON_SYMPTOMS)
            custom = st.text_input("Or describe another symptom")
            body_part = st.selectbox("Body part", wizard.body_parts, format_func=lambda p: BODY_PARTS.get(p, p))
            severity = st.slider("Severity", 1, 10, DEFAULT_SEVERITY)
            duration = st.selectbox("Duration", [""] + DURATION_OPTIONS)
            description = st.text_area("Description (optional)")
            if st.form_submit_button("Add symptom"):
                if not wizard.add_symptom(custom or name, body_part, duration, severity, description):
                    st.warning("Please fill in the symptom, body part and duration.")
        for i, s in enumerate(wizard.symptoms):
            col_text, col_remove = st.columns([5, 1])
            col_text.write(f"{s['name']} ({BODY_PARTS.get(s['bodyPart'], s['bodyPart'])}), {s['severity']}/10, {s['duration']}")
            if col_remove.button("Remove", key=f"remove-{i}"):
                wizard.remove_symptom(i)
                st.rerun()

    elif wizard.step == 3:
        wizard.additional_info = st.text_area(
            "Medical history, medications, recent travel or anything else relevant",
            value=wizard.additional_info,
        )

    else:
        st.markdown("**Affected areas:** " + ", ".join(BODY_PARTS.get(p, p) for p in wizard.body_parts))
        for s in wizard.symptoms:
            st.write(f"• {s['name']}: severity {s['severity']}/10, {s['duration']}")
        if wizard.additional_info:
            st.markdown(f"**Additional information:** {wizard.additional_info}")

    col_back, col_next = st.columns(2)
    if wizard.step > 1 and col_back.button("Back"):
        wizard.previous_step()
        st.rerun()
    if wizard.step < TOTAL_STEPS:
        if col_next.button("Continue", disabled=not wizard.can_proceed()):
            wizard.next_step()
            st.rerun()
    elif col_next.button("Get assessment", disabled=not client.token):
        with st.spinner("Analyzing your symptoms..."):
            try:
                created = client.submit_assessment(wizard)
            except ApiError as err:
                show_error(err, "Failed to submit assessment")
            else:
                st.session_state.assessment_id = created["id"]
                st.session_state.wizard = WizardState()
                st.rerun()


# -------------------- Pages --------------------
if page == "Symptom Checker":
    if st.session_state.assessment_id:
        render_assessment(st.session_state.assessment_id)
        if st.button("Start a new assessment"):
            st.session_state.assessment_id = None
            st.rerun()
    else:
        render_wizard(st.session_state.wizard)

elif not client.token and page in ("History", "Consultations", "Profile"):
    st.warning("Please sign in to continue.")

elif page == "History":
    try:
        assessments = client.list_assessments()
    except ApiError as err:
        show_error(err, "Failed to load history")
        assessments = []
    if not assessments:
        st.write("No assessments yet.")
    for a in assessments:
        names = ", ".join(s["name"] for s in a["symptoms"])
        with st.expander(f"{a['createdAt'][:10]} · {names} · {a.get('urgencyLevel') or 'n/a'}"):
            st.button(
                "View details", key=f"view-{a['id']}",
                on_click=open_assessment, args=(st.session_state, a["id"]),
            )

elif page == "Consultations":
    doctors = client.list_doctors()
    available = [d for d in doctors if d["available"]]
    with st.form("book"):
        doctor = st.selectbox("Doctor", available, format_func=lambda d: f"{d['name']} ({d['specialty']})")
        day = st.date_input("Date", min_value=date.today() + timedelta(days=1))
        slot = st.time_input("Time", value=time(9, 0))
        notes = st.text_area("Notes (optional)")
        link_assessment = False
        if st.session_state.assessment_id:
            link_assessment = st.checkbox(
                f"Attach assessment #{st.session_state.assessment_id} to this booking", value=False
            )
        if st.form_submit_button("Book consultation"):
            try:
                client.book_consultation(
                    doctor["name"], doctor["specialty"],
                    datetime.combine(day, slot).isoformat(),
                    assessment_id=booking_assessment_id(st.session_state, link_assessment),
                    notes=notes or None,
                )
                st.toast("Consultation booked", icon="✅")
            except ApiError as err:
                show_error(err, "Failed to book consultation")
    for c in client.list_consultations():
        icon = STATUS_ICONS.get(c["status"], "")
        st.write(f"{icon} {c['doctorName']} · {c['doctorSpecialty']} · {c['scheduledAt'][:16].replace('T', ' ')} · {c['status']}")
        if c["status"] in ("pending", "confirmed") and st.button("Cancel", key=f"cancel-{c['id']}"):
            try:
                client.update_consultation_status(c["id"], "cancelled")
                st.rerun()
            except ApiError as err:
                show_error(err, "Failed to cancel consultation")

elif page == "Articles":
    if st.session_state.article_slug:
        try:
            article = client.get_article(st.session_state.article_slug)
            st.header(article["title"])
            st.caption(f"{CATEGORY_LABELS.get(article['category'], article['category'])} · {article['readTime']} min read")
            st.markdown(article["content"])
        except ApiError as err:
            show_error(err, "Failed to load article")
        if st.button("Back to articles"):
            st.session_state.article_slug = None
            st.rerun()
    else:
        category = st.selectbox("Category", list(CATEGORY_LABELS), format_func=CATEGORY_LABELS.get)
        query = st.text_input("Search articles")
        for art in client.list_articles(category=None if category == "all" else category, query=query):
            st.markdown(f"### {'⭐ ' if art['featured'] else ''}{art['title']}")
            st.write(art.get("excerpt") or "")
            if st.button("Read", key=f"read-{art['slug']}"):
                st.session_state.article_slug = art["slug"]
                st.rerun()

elif page == "Profile":
    me = client.current_user()
    with st.form("profile"):
        first_name = st.text_input("First name", value=me.get("firstName") or "")
        last_name = st.text_input("Last name", value=me.get("lastName") or "")
        phone = st.text_input("Phone", value=me.get("phone") or "")
        gender = st.text_input("Gender", value=me.get("gender") or "")
        if st.form_submit_button("Save"):
            try:
                client.update_profile(firstName=first_name, lastName=last_name, phone=phone, gender=gender)
                st.toast("Profile updated", icon="✅")
            except ApiError as err:
                show_error(err, "Failed to update profile")
