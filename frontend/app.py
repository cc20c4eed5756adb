"""Streamlit page to manage the reading list.

The FastAPI backend stores the articles and extracts their metadata, this page
only talks to its HTTP API.
"""

import streamlit as st
from loguru import logger

from readinglist.client import ReadingListClient, ReadingListError, filter_articles

STATUS_LABELS = {
    "to_be_read": "To be read",
    "in_progress": "In progress",
    "finished": "Finished",
}

client = ReadingListClient()

st.set_page_config(page_title="Article Reading List")
st.title("Article Reading List")

if "pending_article" not in st.session_state:
    st.session_state.pending_article = None
if "confirm_delete" not in st.session_state:
    st.session_state.confirm_delete = None

stats = client.statistics()
columns = st.columns(4)
columns[0].metric("Total", stats["total"])
columns[1].metric("To be read", stats["toBeRead"])
columns[2].metric("In progress", stats["inProgress"])
columns[3].metric("Finished", stats["finished"])
st.progress(stats["completionPercentage"] / 100, text=f"{stats['completionPercentage']}% read")

with st.form("quick_add", clear_on_submit=True):
    url = st.text_input("Article URL")
    if st.form_submit_button("Add") and url.strip():
        try:
            data = client.add_article(url)
        except ReadingListError as e:
            logger.info(f"Could not add {url}: {e}")
            st.error(str(e))
        else:
            if data.get("needsMetadata"):
                st.session_state.pending_article = data["article"]
            st.rerun()

if (pending := st.session_state.pending_article) is not None:
    st.warning(f"No metadata could be extracted from {pending['url']}. Please add a title.")
    with st.form("manual_metadata"):
        title = st.text_input("Title")
        description = st.text_area("Description (optional)")
        save, skip = st.columns(2)
        if save.form_submit_button("Save") and title.strip():
            try:
                client.set_metadata(pending["id"], title, description)
            except ReadingListError as e:
                st.error(str(e))
            else:
                st.session_state.pending_article = None
                st.rerun()
        if skip.form_submit_button("Skip"):
            st.session_state.pending_article = None
            st.rerun()

search = st.text_input("Search articles")
articles = filter_articles(client.list_articles(), search)

if not articles:
    st.info("No articles yet." if not search else "No articles match your search.")

for article in articles:
    with st.container(border=True):
        if article["image_url"]:
            st.image(article["image_url"], width=160)
        st.markdown(f"### [{article['title'] or article['url']}]({article['url']})")
        if article["description"]:
            st.write(article["description"])
        status_column, delete_column = st.columns([3, 1])
        status = status_column.selectbox(
            "Status",
            options=list(STATUS_LABELS),
            index=list(STATUS_LABELS).index(article["status"]),
            format_func=STATUS_LABELS.get,
            key=f"status-{article['id']}",
        )
        if status != article["status"]:
            client.update_status(article["id"], status)
            st.rerun()
        if delete_column.button("Delete", key=f"delete-{article['id']}"):
            st.session_state.confirm_delete = article["id"]
        if st.session_state.confirm_delete == article["id"]:
            st.warning("Are you sure you want to delete this article?")
            yes_column, cancel_column = st.columns(2)
            if yes_column.button("Yes, delete", key=f"confirm-{article['id']}"):
                client.delete_article(article["id"])
                st.session_state.confirm_delete = None
                st.rerun()
            if cancel_column.button("Cancel", key=f"cancel-{article['id']}"):
                st.session_state.confirm_delete = None
                st.rerun()
