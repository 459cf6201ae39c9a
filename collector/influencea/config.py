"""設定モジュール: NationStates API・出力先・ログの定数と環境変数."""

import os
from pathlib import Path

from dotenv import load_dotenv

# .env はプロジェクトルートに配置
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# --- バージョン / 識別情報 ---
VERSION = "0.1.0"
DEVELOPER_NATION = "Volstrostia"

# NationStates の利用規約で User-Agent に運用者の nation を含める必要がある
USER_AGENT_TEMPLATE = (
    "Influencea/{version} "
    "(Developed by nation={developer}; In use by nation={nation})"
)

# 運用者の nation（CLI の --nation が優先）
OPERATOR_NATION: str | None = os.environ.get("INFLUENCEA_NATION") or None

# --- NationStates API ---
API_URL_TEMPLATE = (
    "https://www.nationstates.net/cgi-bin/api.cgi"
    "?region={region}&q=censusranks;scale={census_id};start={start}"
)

# --- リクエスト設定 ---
REQUEST_TIMEOUT = 5  # 秒
RATE_LIMIT_INTERVAL = 2.0  # 秒

# --- センサス ---
DEFAULT_CENSUS_ID = 65  # Influence
MAX_CENSUS_ID = 255

# --- 出力 ---
OUTPUT_DIR = Path(os.environ.get("INFLUENCEA_OUTPUT_DIR", "."))

# --- ログ ---
LOG_DIR = Path(
    os.environ.get(
        "INFLUENCEA_LOG_DIR",
        Path(__file__).resolve().parent.parent / "logs",
    )
)
LOG_DIR.mkdir(parents=True, exist_ok=True)
