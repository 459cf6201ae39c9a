"""NationStates センサスランキング API の取得モジュール.

1 ページ = 1 リクエスト。レスポンス XML の構造:
  <REGION>
    <CENSUSRANKS>
      <NATIONS>
        <NATION><NAME/><RANK/><SCORE/></NATION> ...

取得・パースの失敗はすべて FetchError として呼び出し元へ送出する。
リトライはしない（打ち切り判断は collector 側の責務）。
"""

from __future__ import annotations

import logging
import math

import requests
from bs4 import BeautifulSoup

from influencea.config import (
    API_URL_TEMPLATE,
    DEVELOPER_NATION,
    REQUEST_TIMEOUT,
    USER_AGENT_TEMPLATE,
    VERSION,
)
from influencea.models import PageRequest, RankingRecord

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """ページ取得の失敗（通信エラー・タイムアウト・レスポンス形式不一致）."""


def build_user_agent(nation: str) -> str:
    """NationStates の利用規約に沿った User-Agent を組み立てる."""
    if not nation or not nation.strip():
        raise ValueError("運用者の nation が指定されていません")
    return USER_AGENT_TEMPLATE.format(
        version=VERSION,
        developer=DEVELOPER_NATION,
        nation=nation.strip(),
    )


def create_session(nation: str) -> requests.Session:
    """User-Agent を設定した Session を生成する."""
    session = requests.Session()
    session.headers.update({"User-Agent": build_user_agent(nation)})
    return session


def build_page_url(request: PageRequest) -> str:
    return API_URL_TEMPLATE.format(
        region=request.region,
        census_id=request.census_id,
        start=request.start_rank,
    )


def fetch_page_xml(session: requests.Session, request: PageRequest) -> str:
    """1 ページ分の XML を取得する.

    Raises:
        FetchError: 通信失敗・タイムアウト・HTTP エラーステータス
    """
    url = build_page_url(request)
    try:
        resp = session.get(url, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp.text
    except requests.RequestException as e:
        raise FetchError(f"ページ取得失敗: start={request.start_rank}, error={e}") from e


def parse_rankings(xml: str) -> list[RankingRecord]:
    """センサスランキング XML から RankingRecord のリストを抽出する.

    NATIONS 要素が空の場合は空リスト（有効な空ページ）。

    Raises:
        FetchError: 想定した構造でない、または値が不正な場合
    """
    soup = BeautifulSoup(xml, "xml")

    census = soup.find("CENSUSRANKS")
    if census is None:
        raise FetchError("CENSUSRANKS 要素がありません")

    nations = census.find("NATIONS")
    if nations is None:
        raise FetchError("NATIONS 要素がありません")

    records: list[RankingRecord] = []
    for entry in nations.find_all("NATION", recursive=False):
        records.append(_parse_entry(entry))
    return records


def _parse_entry(entry) -> RankingRecord:
    name = _child_text(entry, "NAME")
    rank_text = _child_text(entry, "RANK")
    score_text = _child_text(entry, "SCORE")

    try:
        rank = int(rank_text)
    except ValueError as e:
        raise FetchError(f"RANK が整数ではありません: {rank_text!r}") from e
    if rank < 1:
        raise FetchError(f"RANK は 1 以上である必要があります: {rank}")

    try:
        score = float(score_text)
    except ValueError as e:
        raise FetchError(f"SCORE が数値ではありません: {score_text!r}") from e
    # NaN / inf は不正なレスポンスとして扱う
    if not math.isfinite(score):
        raise FetchError(f"SCORE が有限値ではありません: {score_text!r}")

    return RankingRecord(nation=name, rank=rank, score=score)


def _child_text(entry, tag: str) -> str:
    """NATION 直下の子要素のテキストを取得する."""
    child = entry.find(tag, recursive=False)
    if child is None:
        raise FetchError(f"NATION に {tag} 要素がありません")
    return child.get_text(strip=True)


class PageFetcher:
    """Session を使って 1 ページずつ取得・パースする."""

    def __init__(self, session: requests.Session):
        self._session = session

    def __call__(self, request: PageRequest) -> list[RankingRecord]:
        xml = fetch_page_xml(self._session, request)
        records = parse_rankings(xml)
        logger.debug(
            "ページ取得: region=%s, census_id=%d, start=%d, %d 件",
            request.region, request.census_id, request.start_rank, len(records),
        )
        return records
