import json
import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from string import Template
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic_settings import BaseSettings
from starlette.concurrency import run_in_threadpool

from . import __version__
from .address import validate_hex_address
from .pipeline import PipelineDeps, validate
from .rules import DEFAULT_RULES_PATH, RuleEngine

# -------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("nft_lint_service")


# -------------------------------------------------------------------
# Settings
# -------------------------------------------------------------------
class Settings(BaseSettings):
    scratch_dir: str = "./tmp"
    rules_path: str = str(DEFAULT_RULES_PATH)
    cors_origins: List[str] = ["*"]
    lint_url: str = "http://localhost:3000/lint"
    port: int = 3000

    model_config = {
        "env_file": None,
        "env_prefix": "",
        "case_sensitive": False,
        "extra": "ignore",
    }


def get_settings() -> Settings:
    return Settings()


@lru_cache(maxsize=8)
def load_engine(rules_path: str) -> RuleEngine:
    engine = RuleEngine.from_file(rules_path)
    logger.info("Loaded %d lint rules from %s", len(engine.rules), rules_path)
    return engine


def get_deps(settings: Settings = Depends(get_settings)) -> PipelineDeps:
    return PipelineDeps(
        address_validator=validate_hex_address,
        engine=load_engine(settings.rules_path),
        scratch_dir=settings.scratch_dir,
    )


# -------------------------------------------------------------------
# FastAPI App
# -------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fail at startup on a broken rule file
    settings = app.dependency_overrides.get(get_settings, get_settings)()
    load_engine(settings.rules_path)
    yield


app = FastAPI(title="NFT Descriptor Lint Service", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


DEMO_PAGE = Template("""<html>
<body>
<script>
async function submitForm() {
  document.getElementById("linted").style.display = "none";
  try {
    const data = JSON.parse(document.querySelector("#descriptor").value);
    const response = await fetch($lint_url, {
      method: "POST",
      headers: {"Content-Type": "application/json"},
      body: JSON.stringify(data),
    });
    const verdict = await response.json();
    if (verdict.valid) {
      document.querySelector("#valid").textContent = "PASS - valid data";
      document.querySelector("#message").textContent = "";
      document.querySelector("#safeJson").value = verdict.linted;
      document.getElementById("linted").style.display = "block";
    } else {
      document.querySelector("#valid").textContent = "FAIL - ";
      document.querySelector("#message").textContent = verdict.message;
    }
  } catch (e) {
    console.log(e);
    document.querySelector("#valid").textContent = "FAIL - Invalid JSON / unable to parse form data";
    document.querySelector("#message").textContent = "";
  }
}
</script>
<h1>QRL NFT JSON microservice</h1>
<p>Paste an NFT descriptor and press Check.</p>
<textarea id="descriptor" style="width: 100%; height: 300px;"></textarea>
<p><button id="check" onclick="submitForm()">Check</button></p>
<p><span id="valid"></span><span id="message"></span></p>
<div id="linted" style="display: none;">Linted data:<br />
<textarea id="safeJson" style="width: 100%; height: 200px;"></textarea>
</div>
</body>
</html>
""")


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------
@app.get("/", response_class=HTMLResponse)
def index(settings: Settings = Depends(get_settings)):
    return DEMO_PAGE.substitute(lint_url=json.dumps(settings.lint_url))


@app.get("/health")
def health(settings: Settings = Depends(get_settings)):
    return {
        "status": "ok",
        "SCRATCH_DIR": settings.scratch_dir,
        "RULES_PATH": settings.rules_path,
        "rule_count": len(load_engine(settings.rules_path).rules),
    }


@app.post("/lint")
async def lint(req: Request, deps: PipelineDeps = Depends(get_deps)):
    """
    Input: an NFT descriptor
      {
        "provider": "Q0105...",
        "metadata": {...},
        "filehash": "<128 hex chars>",
        "metahash": "<sha512 of canonical metadata>",
        "standard": 1
      }
    Output: {"valid": true, "linted": "..."} or {"valid": false, "message": "..."}
    """
    try:
        descriptor = await req.json()
    except ValueError:
        logger.error("Bad request: malformed JSON")
        raise HTTPException(status_code=400, detail="Bad request: malformed JSON")

    verdict = await run_in_threadpool(validate, descriptor, deps)
    return verdict.as_response()


def run() -> None:
    import uvicorn

    settings = get_settings()
    logger.info("QRL-NFT linting microservice listening on port %d", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
