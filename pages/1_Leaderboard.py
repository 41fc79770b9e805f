# pages/1_Leaderboard.py
import streamlit as st

from config import configure_logging
from studyjam import db
from studyjam.errors import StorageError
from studyjam.ranking import search
from studyjam.service import load_leaderboard
from studyjam.table import export_csv, leaderboard_frame

configure_logging()
st.set_page_config(page_title="Leaderboard", page_icon="📊", layout="wide")


def main():
    st.title("📊 Current Standings")

    try:
        db.init_db()
        entries, ledger = load_leaderboard()
    except StorageError as e:
        st.error(f"Failed to fetch data: {e}")
        return

    if not entries:
        st.info("No progress uploaded yet. Standings will appear after the first upload.")
        return

    query_text = st.text_input("Search by name or email", placeholder="Search by name or email...")
    shown = search(entries, query_text)
    if not shown:
        st.warning("No participants match your search.")
        return

    st.dataframe(
        leaderboard_frame(shown, ledger),
        use_container_width=True,
        hide_index=True,
        column_config={
            "Profile": st.column_config.LinkColumn("Profile", display_text="Open profile"),
            "Locked": st.column_config.TextColumn(
                "🔒", help="Rank locked: this participant completed all badges and games at this rank."
            ),
        },
    )

    st.download_button("Download Leaderboard (CSV)", export_csv(entries), "leaderboard.csv", "text/csv")


if __name__ == "__main__":
    main()
