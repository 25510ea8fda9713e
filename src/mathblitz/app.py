import time

import streamlit as st

from mathblitz.engine import RoundEngine
from mathblitz.levels import MAX_DIFFICULTY, MIN_DIFFICULTY
from mathblitz.mechanics import load_mechanics
from mathblitz.models import Phase
from mathblitz.utils import clamp

# ------------------------------------------------------------
# STREAMLIT PAGE CONFIG
# ------------------------------------------------------------
st.set_page_config(
    page_title="Math Blitz",
    page_icon="🧮",
    layout="wide",
)

KEYPAD = [
    ("AC", "DEL", "."),
    ("7", "8", "9"),
    ("4", "5", "6"),
    ("1", "2", "3"),
    ("RESULT", "0", None),
]

# ------------------------------------------------------------
# SESSION INITIALISATION
# ------------------------------------------------------------
if "engine" not in st.session_state:
    st.session_state.engine = RoundEngine()

if "last_tick" not in st.session_state:
    st.session_state.last_tick = time.time()

engine: RoundEngine = st.session_state.engine

# ------------------------------------------------------------
# LEVEL TABLE SELECTOR
# ------------------------------------------------------------
st.sidebar.header("Game Setup")
mechanics_path = st.sidebar.text_input("Level table CSV path (optional)", value="")
if st.sidebar.button("Load table") and mechanics_path:
    try:
        st.session_state.engine = engine = RoundEngine(table=load_mechanics(mechanics_path))
        st.sidebar.success("Level table loaded.")
    except (FileNotFoundError, ValueError) as e:
        st.sidebar.error(str(e))

# ------------------------------------------------------------
# GAME TICK UPDATE
# ------------------------------------------------------------
now = time.time()
engine.update(now - st.session_state.last_tick)
st.session_state.last_tick = now


def render_keypad():
    for row in KEYPAD:
        cols = st.columns(3)
        for i, key in enumerate(row):
            if key is not None and cols[i].button(key, key=f"key_{key}", use_container_width=True):
                return key
    return None


def render_stats():
    s = engine.summary()
    st.markdown("### Session Stats")
    st.metric("Score", s["score"])
    st.metric("Accuracy", f"{s['accuracy']:.0f}%")
    st.metric("Streak", f"{s['streak']} 🔥")
    st.write(f"**Correct:** {s['correct']}  **Incorrect:** {s['incorrect']}")
    st.write(f"Level {s['difficulty']} · {s['total']} / {s['questions_per_round']}")
    st.progress(clamp(s["progress"] / 100, 0.0, 1.0))


def render_history():
    st.markdown("### Question History")
    if not engine.history:
        st.caption("Your question history will appear here.")
        return
    frame = engine.history_frame().iloc[::-1]  # newest on top
    st.dataframe(frame, hide_index=True, use_container_width=True)


# ------------------------------------------------------------
# SCREENS
# ------------------------------------------------------------
st.markdown("<h1 style='text-align:center;'>Math Blitz</h1>", unsafe_allow_html=True)

if engine.phase == Phase.SELECTING_DIFFICULTY:
    st.write("Choose your challenge level.")
    levels = list(range(MIN_DIFFICULTY, MAX_DIFFICULTY + 1))
    for start in range(0, len(levels), 5):
        cols = st.columns(5)
        for col, lvl in zip(cols, levels[start:start + 5]):
            if col.button(str(lvl), key=f"level_{lvl}", use_container_width=True):
                engine.select_difficulty(lvl)
                st.rerun()
    st.stop()

if engine.phase == Phase.GAME_OVER:
    s = engine.summary()
    st.subheader("Game Over")
    st.write(f"**Final Score:** {s['score']}")
    st.write(f"**Accuracy:** {s['accuracy']:.0f}%")
    st.write(f"**Final Difficulty:** {s['difficulty']} / {MAX_DIFFICULTY}")
    if st.button("Play Again"):
        engine.restart()
        st.rerun()
    render_history()
    st.stop()

left, middle, right = st.columns([1, 1.4, 1])

with left:
    render_stats()

with middle:
    top = st.columns(2)
    if top[0].button("↺ Reset level"):
        engine.reset_level()
        st.rerun()
    if top[1].button("⌂ Levels"):
        engine.show_difficulty_selection()
        st.rerun()

    problem = engine.current_problem
    st.markdown(f"## {problem.display if problem else 'Loading...'}")
    if engine.feedback is True:
        st.success("Correct!")
    elif engine.feedback is False:
        st.error("Wrong")
    st.markdown(f"### {engine.pending_input or '&nbsp;'}", unsafe_allow_html=True)

    key_pressed = render_keypad()
    if key_pressed:
        engine.handle_input_key(key_pressed)
        st.rerun()

with right:
    render_history()

# ------------------------------------------------------------
# AUTOTICK while feedback is showing - must be last
# ------------------------------------------------------------
if engine.feedback_pending:
    time.sleep(0.1)
    st.rerun()
