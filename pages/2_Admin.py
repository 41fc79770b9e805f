# pages/2_Admin.py
import logging

import streamlit as st

from config import admin_code_matches, configure_logging
from studyjam import db
from studyjam.errors import ConcurrentUpdateError, LeaderboardError, UploadError
from studyjam.service import process_upload
from studyjam.table import ledger_frame

logger = logging.getLogger(__name__)

configure_logging()
st.set_page_config(page_title="Admin", page_icon="🛠️", layout="wide")


def require_admin() -> bool:
    """Unlock the page for this session once the shared admin code is entered."""
    if not st.session_state.get("is_admin"):
        with st.form("admin_login"):
            code = st.text_input("Enter Admin Code", type="password")
            if st.form_submit_button("Unlock Admin"):
                try:
                    st.session_state["is_admin"] = admin_code_matches(code)
                except LookupError as e:
                    st.error(str(e))
                else:
                    if not st.session_state["is_admin"]:
                        st.error("Incorrect admin code.")
    return bool(st.session_state.get("is_admin"))


def upload_ui():
    st.subheader("Upload Progress Export")
    st.caption("The Skills Boost CSV export. Rows without a User Email are ignored.")
    f = st.file_uploader("progress.csv", type=["csv"], key="progress_upload")
    if f and st.button("Update Leaderboard", type="primary"):
        try:
            result = process_upload(f.getvalue(), f.name)
        except UploadError as e:
            st.error(str(e))
        except ConcurrentUpdateError as e:
            st.warning(str(e))
        except LeaderboardError as e:
            logger.exception("Upload failed")
            st.error(f"Failed to process CSV: {e}")
        else:
            st.success(result.message)
            if result.newly_frozen:
                st.write("Newly locked: " + ", ".join(result.newly_frozen))


def ledger_ui():
    st.subheader("Locked Ranks")
    snapshot = db.get_snapshot()
    if snapshot is None or not snapshot.ledger:
        st.info("Nobody has completed everything yet.")
        return
    st.caption(f"Document version {snapshot.version}, last updated {snapshot.updated_at:%Y-%m-%d %H:%M} UTC"
               if snapshot.updated_at else f"Document version {snapshot.version}")
    st.dataframe(ledger_frame(snapshot.ledger), use_container_width=True, hide_index=True)


def main():
    st.title("🛠️ Admin")

    if not require_admin():
        st.stop()

    try:
        db.init_db()
    except LeaderboardError as e:
        st.error(str(e))
        st.stop()

    tabs = st.tabs(["Upload", "Locked Ranks"])
    with tabs[0]:
        upload_ui()
    with tabs[1]:
        try:
            ledger_ui()
        except LeaderboardError as e:
            st.error(str(e))


if __name__ == "__main__":
    main()
