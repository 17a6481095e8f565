# mltestor_streamlit.py
import streamlit as st
import html
import logging
from concurrent.futures import ThreadPoolExecutor, wait

from mltestor import config
from mltestor.services.cv_service import ModelLoadError
from mltestor.ui.screen import ClassifierScreen
from mltestor.utils.image_loader import bytes_to_kb, load_picked_image

# Streamlit page config
st.set_page_config(page_title=config.APP_TITLE, layout="centered")

logging.basicConfig(level=getattr(logging, config.LOG_LEVEL, logging.INFO))
logger = logging.getLogger("mltestor_app")


# ----------------------------
# Shared resources
# ----------------------------

@st.cache_resource(show_spinner=False)
def get_executor() -> ThreadPoolExecutor:
    return ThreadPoolExecutor(
        max_workers=config.INFERENCE_WORKERS,
        thread_name_prefix="inference",
    )


def get_screen() -> ClassifierScreen:
    if "screen" not in st.session_state:
        screen = ClassifierScreen(executor=get_executor())
        screen.view_did_load()
        st.session_state.screen = screen
        st.session_state.sheet = None
        st.session_state.picker_open = False
        st.session_state.last_file_id = None
    return st.session_state.screen


screen = get_screen()


# ----------------------------
# Gallery picking
# ----------------------------

def handle_pick(uploaded_file) -> None:
    image = load_picked_image(uploaded_file)
    if image is None:
        st.warning("Picked file is not a supported image.")
        return

    future = screen.on_image_picked(image)
    if future is None:
        st.error("The classifier is unavailable.")
        return

    with st.spinner("Classifying..."):
        wait([future])
    screen.dispatcher.drain()

    error = future.exception()
    if isinstance(error, ModelLoadError):
        st.error(f"Failed to load Vision ML model: {error}")
        st.stop()
    elif error is not None:
        raise error


# ----------------------------
# Main area
# ----------------------------

st.title(config.APP_TITLE)

label_slot = st.empty()

button = screen.gallery_button
if st.button(button.title):
    st.session_state.sheet = screen.on_gallery_button_clicked()

sheet = st.session_state.get("sheet")
if sheet is not None:
    st.subheader(sheet.title)
    action_cols = st.columns(len(sheet.actions) + 1)
    for col, action in zip(action_cols, sheet.actions):
        with col:
            if st.button(action):
                st.session_state.picker_open = screen.choose_action(action)
                st.session_state.sheet = None
                st.rerun()
    with action_cols[-1]:
        if st.button(sheet.cancel):
            screen.choose_action(sheet.cancel)
            st.session_state.sheet = None
            st.rerun()

if st.session_state.picker_open:
    uploaded_file = st.file_uploader(
        "Photo library",
        type=config.ALLOWED_EXTENSIONS,
        accept_multiple_files=False,
    )
    if uploaded_file is not None and uploaded_file.file_id != st.session_state.last_file_id:
        st.session_state.last_file_id = uploaded_file.file_id
        st.session_state.picker_open = False
        logger.info(f"Picked {uploaded_file.name} ({bytes_to_kb(uploaded_file.size):.0f} KB)")
        handle_pick(uploaded_file)

label = screen.classification_label
if label is not None:
    label_slot.markdown(
        f"<div style='color:{label.text_color};font-size:{label.font_size}px;"
        f"white-space:pre-wrap'>{html.escape(label.text)}</div>",
        unsafe_allow_html=True,
    )

if screen.image_view is not None:
    st.image(screen.image_view.image, width="stretch")
    if st.button("Tap image"):
        screen.on_image_tapped()
