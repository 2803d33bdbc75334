# streamlit_app.py
import os
import streamlit as st
from app.client import DashboardClient, DashboardError

API_URL = os.getenv("API_URL", "http://localhost:8000")

st.title("Site Dashboard")

if "client" not in st.session_state:
    st.session_state.client = DashboardClient(API_URL)
client = st.session_state.client

if not st.session_state.get("logged_in"):
    password = st.text_input("Dashboard password", type="password")
    if st.button("Log in"):
        try:
            client.login(password)
            st.session_state.logged_in = True
            st.rerun()
        except DashboardError as e:
            st.error(e.message)
    st.stop()

days = st.selectbox("Traffic window (days)", [7, 30, 90], index=0)
try:
    stats = client.traffic_stats(days)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Page views", stats["pageViews"]["value"], f"{stats['pageViews']['change']}%")
    c2.metric("Visitors", stats["visitors"]["value"], f"{stats['visitors']['change']}%")
    c3.metric("Bounce rate", f"{stats['bounceRate']['value']}%", f"{stats['bounceRate']['change']} pts")
    c4.metric("Avg. session", stats["avgSession"]["value"], f"{stats['avgSession']['change']}%")
    st.bar_chart({d["date"]: d["pageViews"] for d in stats["daily"]})
    st.subheader("Top pages")
    st.table(stats["topPages"])
except DashboardError as e:
    st.error(e.message)

st.subheader("Applications")
for sub in client.submissions():
    with st.expander(f"{sub.get('businessName', 'Unknown')} - {sub.get('submittedDate', '')}"):
        st.json(sub)
        if st.button("Delete", key=f"del-{sub['id']}"):
            client.delete_submission(sub["id"])
            st.rerun()

st.subheader("Email signups")
st.table([{k: s.get(k) for k in ("email", "name", "source", "submittedDate")} for s in client.email_signups()])

st.subheader("Blog posts")
for post in client.blog_posts():
    cols = st.columns([4, 1])
    cols[0].write(f"**{post['title']}** ({post['status']})")
    if post["status"] == "published":
        if cols[1].button("Unpublish", key=f"unpub-{post['slug']}"):
            client.unpublish(post["slug"])
            st.rerun()
    elif cols[1].button("Publish", key=f"pub-{post['slug']}"):
        client.publish(post["slug"])
        st.rerun()
