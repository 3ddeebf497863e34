import os, json, threading, queue, time
from datetime import datetime
import streamlit as st
from dotenv import load_dotenv
import redis

# ── Configuración desde .env ──
load_dotenv()
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PWD  = os.getenv("REDIS_PWD", None)
SECTION = os.getenv("SECTION", "sec10")
TOPO    = os.getenv("TOPO", "topo1")
ROUTERS = [r.strip() for r in os.getenv("ROUTERS", "A,B,C").split(",") if r.strip()]

CHANNELS = [f"{SECTION}.{TOPO}.{r}" for r in ROUTERS]

# ── Estado global ──
if "incoming" not in st.session_state:
    st.session_state.incoming = queue.Queue()
if "listener_thread" not in st.session_state:
    st.session_state.listener_thread = None
if "stop_event" not in st.session_state:
    st.session_state.stop_event = threading.Event()
if "listening" not in st.session_state:
    st.session_state.listening = False
if "tables" not in st.session_state:
    st.session_state.tables = {}

# ── Utilidades ──
def now(ts=None):
    return datetime.fromtimestamp(ts or time.time()).strftime("%H:%M:%S")

def get_client():
    return redis.Redis(
        host=REDIS_HOST,
        port=REDIS_PORT,
        password=REDIS_PWD,
        decode_responses=True
    )

def listener(stop_event, inbox):
    pubsub = get_client().pubsub()
    pubsub.subscribe(*CHANNELS)
    while not stop_event.is_set():
        msg = pubsub.get_message(timeout=1.0)
        if msg and msg["type"] == "message":
            inbox.put(msg["data"])
    pubsub.close()

# ── UI ──
st.set_page_config(page_title=f"DV routers {SECTION}.{TOPO}", layout="wide")
st.title(f"Routing tables · {SECTION}.{TOPO}")

toggle = st.checkbox("🟢 Escuchar tablas", value=st.session_state.listening)
if toggle and not st.session_state.listening:
    st.session_state.stop_event.clear()
    th = threading.Thread(target=listener,
                          args=(st.session_state.stop_event, st.session_state.incoming),
                          daemon=True)
    st.session_state.listener_thread = th
    th.start()
    st.session_state.listening = True
elif not toggle and st.session_state.listening:
    st.session_state.stop_event.set()
    st.session_state.listening = False

# latest snapshot per router wins
while not st.session_state.incoming.empty():
    raw = st.session_state.incoming.get()
    try:
        snap = json.loads(raw)
        st.session_state.tables[snap["router"]] = snap
    except (ValueError, KeyError, TypeError):
        continue

if st.button("Refrescar"):
    st.rerun()

cols = st.columns(max(1, len(ROUTERS)))
for col, rid in zip(cols, ROUTERS):
    snap = st.session_state.tables.get(rid)
    col.subheader(f"Router {rid}")
    if not snap:
        col.caption("(sin tabla aún)")
        continue
    col.caption(f"actualizada {now(snap.get('ts'))}")
    rows = [{"destino": r["dest"],
             "costo": "inf" if r["distance"] is None else r["distance"],
             "next hop": r["next_hop"]} for r in snap.get("routes", [])]
    col.table(rows)
