from __future__ import annotations
import argparse
import asyncio
from flask import Flask, request, jsonify, Response, send_file
from nextword.engine import Engine, STATUS_READY
from nextword.remote import make_remote
from nextword import config as CFG

app = Flask(__name__)
_engine: Engine | None = None

# ---------- API ----------
@app.get("/api/predict")
def api_predict():
    # raw query: a trailing space selects next-word mode
    q = request.args.get("q", "", type=str)
    if _engine is None or not q:
        return jsonify([])
    return jsonify(_engine.predict(q))

@app.get("/api/suggest")
async def api_suggest():
    q = request.args.get("q", "", type=str)
    if _engine is None or not q:
        return jsonify([])
    rows = await _engine.suggest(q)
    return jsonify([r.to_dict() for r in rows])

@app.get("/api/health")
def api_health():
    status = _engine.status if _engine is not None else "loading"
    body = {"ok": status == STATUS_READY, "status": status}
    if _engine is not None and _engine.error:
        body["error"] = _engine.error
    return jsonify(body)

@app.get("/model.json")
def model_json():
    # static model resource for cold-cache fetches
    return send_file(CFG.BUNDLED_MODEL, mimetype="application/json")

# ---------- UI ----------
@app.get("/")
def home():
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Next Word Prediction • Flask UI</title>
<style>
:root{
  --bg:#0b0f14;
  --panel:#0f141b;
  --ink:#cfd8e3;
  --muted:#8a94a6;
  --accent:#6ee7ff;
  --remote:#c084fc;
  --border:#1c2530;
  --danger:#ff5d5d;
}
*{box-sizing:border-box}
body{
  margin:0; background:var(--bg); color:var(--ink);
  font:16px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,"Helvetica Neue",Arial;
}
.container{ max-width:860px; margin:24px auto; padding:0 16px; }
.card{
  background:var(--panel); border:1px solid var(--border);
  border-radius:16px; padding:18px; box-shadow:0 10px 30px rgba(0,0,0,.25);
}
h1{ font-size:20px; margin:0 0 8px 0; letter-spacing:.3px; }
.chips{ display:flex; gap:8px; min-height:40px; align-items:center; flex-wrap:wrap; padding:6px 0; }
.chip{
  padding:6px 14px; border-radius:999px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); cursor:pointer; font-size:14px;
}
.chip:hover{ border-color:var(--accent) }
.chip.remote{ color:var(--remote); border-color:rgba(192,132,252,.4) }
.hint{ color:var(--muted); font-size:13px }
textarea{
  width:100%; height:240px; padding:12px 14px; border-radius:12px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); outline:none; font-size:16px; resize:none;
}
textarea:focus{ border-color:var(--accent) }
.err{
  display:none; margin-bottom:12px; padding:10px 12px; border-radius:10px;
  background:rgba(255,93,93,.12); border:1px solid rgba(255,93,93,.35); color:#ffb0b0;
}
footer{ margin:26px 0 6px 0; color:var(--muted); font-size:12px; text-align:center; }
</style>
</head>
<body>
  <div class="container">
    <div class="card">
      <h1>Next Word Prediction</h1>
      <div id="err" class="err"></div>
      <div id="chips" class="chips"><span class="hint">Start typing for suggestions…</span></div>
      <textarea id="txt" placeholder="Start writing here…" autofocus></textarea>
    </div>
    <footer>Offline n-gram suggestions • remote words in purple</footer>
  </div>

<script>
const $ = (sel) => document.querySelector(sel);
const txt = $("#txt"), chips = $("#chips"), err = $("#err");

let t;          // debounce timer
let gen = 0;    // generation: stale replies are dropped

function render(items){
  if(!items.length){
    chips.innerHTML = txt.value ? '<span class="hint">Continue typing for suggestions…</span>' : "";
    return;
  }
  chips.innerHTML = "";
  for(const it of items){
    const b = document.createElement("button");
    b.className = "chip" + (it.is_remote ? " remote" : "");
    b.textContent = it.text;
    b.onclick = () => pick(it.text);
    chips.appendChild(b);
  }
}

function pick(word){
  const v = txt.value;
  const endsWs = /\s$/.test(v);
  const base = endsWs ? v : v.replace(/\S+$/, "");
  txt.value = base + word + " ";
  txt.focus();
  onInput();
}

async function local(text, mine){
  const resp = await fetch(`/api/predict?q=${encodeURIComponent(text)}`);
  if(!resp.ok) return;
  const words = await resp.json();
  if(mine === gen) render(words.map(w => ({text:w, is_remote:false})));
}

async function remote(text, mine){
  if(!text.trim() || !/\s$/.test(text)) return;
  try{
    const resp = await fetch(`/api/suggest?q=${encodeURIComponent(text)}`);
    if(!resp.ok) return;
    const items = await resp.json();
    if(mine === gen) render(items);
  }catch(e){ /* remote is optional */ }
}

function onInput(){
  const text = txt.value;
  const mine = ++gen;
  local(text, mine);
  clearTimeout(t);
  t = setTimeout(() => remote(text, mine), 500);
}

async function health(){
  try{
    const resp = await fetch("/api/health");
    const data = await resp.json();
    if(data.status === "failed"){
      err.style.display = "block";
      err.textContent = "Offline suggestions are unavailable: the prediction model failed to load.";
    }
  }catch(e){}
}

txt.addEventListener("input", onInput);
health();
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run Flask UI on top of Engine")
    ap.add_argument("--store", default=None, help=f"Model cache DSN (default {CFG.STORE_DSN})")
    ap.add_argument("--model-url", default=None, help="Model JSON URL or path (cold-cache source)")
    ap.add_argument("--remote", action=argparse.BooleanOptionalAction, default=True,
                    help="Blend in Gemini suggestions when an API key is set")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    global _engine
    _engine = Engine(
        store_dsn=args.store,
        model_source=args.model_url,
        remote=make_remote() if args.remote else None,
        verbose=args.verbose,
    )
    # a failed load leaves the UI up in degraded mode (see /api/health)
    asyncio.run(_engine.load())

    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _engine.shutdown()
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
