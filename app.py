# app.py
import streamlit as st

from config import APP_CAPTION, APP_TITLE, configure_logging
from studyjam import db
from studyjam.errors import StorageError
from studyjam.ranking import summary
from studyjam.service import load_leaderboard

configure_logging()
st.set_page_config(page_title=APP_TITLE, page_icon="🏆", layout="wide")


def main():
    st.title(f"🏆 {APP_TITLE}")
    st.caption(APP_CAPTION)

    try:
        db.init_db()
        entries, ledger = load_leaderboard()
    except StorageError as e:
        st.error(f"Failed to fetch data: {e}")
        st.stop()

    if not entries:
        st.info("No progress uploaded yet. An admin can upload the latest CSV export on the Admin page.")
    else:
        stats = summary(entries, ledger)
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Participants", stats["participants"])
        c2.metric("Completed everything", stats["completed"])
        c3.metric("Skill badges earned", stats["skill_badges"])
        c4.metric("Arcade games played", stats["arcade_games"])

    st.divider()
    st.subheader("Tips")
    st.write(
        "- The Leaderboard page shows current standings. Search by name or email.\n"
        "- Ranks go to whoever completed all skill badges and games first, then by badges + games.\n"
        "- 🔒 marks a locked rank: once you complete everything your rank never drops on later uploads."
    )


if __name__ == "__main__":
    main()
