"""ページ送りによるセンサスランキングの収集.

終端マーカーは API 側に存在しないため、最高順位が伸びなくなった時点で
取得完了とみなす。状態遷移:

  FETCHING ──(取得失敗)──────────→ TERMINATED_FAILURE
     │
     ├──(最高順位が更新されない)──→ TERMINATED_NO_PROGRESS
     │
     └──(最高順位が更新された)────→ FETCHING（レート制限分待機してから次ページ）
"""

from __future__ import annotations

import enum
import logging
import time
from typing import Callable

from influencea.config import RATE_LIMIT_INTERVAL
from influencea.fetcher import FetchError
from influencea.models import CollectionState, PageRequest, RankingRecord

logger = logging.getLogger(__name__)

Fetcher = Callable[[PageRequest], list[RankingRecord]]


class CollectorStatus(enum.Enum):
    FETCHING = "fetching"
    TERMINATED_NO_PROGRESS = "terminated_no_progress"
    TERMINATED_FAILURE = "terminated_failure"


class RankCollector:
    """1 地域 × 1 センサスのランキングを全ページ取得する.

    Args:
        fetcher: PageRequest を受け取り RankingRecord のリストを返す。
            失敗時は FetchError を送出すること。
        region: 対象地域
        census_id: センサス ID
        interval: ページ間の待機秒数
        sleep: 待機関数（テストで差し替える）
    """

    def __init__(
        self,
        fetcher: Fetcher,
        region: str,
        census_id: int,
        interval: float = RATE_LIMIT_INTERVAL,
        sleep: Callable[[float], None] | None = None,
    ):
        self._fetcher = fetcher
        self.region = region
        self.census_id = census_id
        self._interval = interval
        self._sleep = sleep or time.sleep
        self.state = CollectionState()
        self.status = CollectorStatus.FETCHING
        self.pages_fetched = 0

    @property
    def terminated(self) -> bool:
        return self.status is not CollectorStatus.FETCHING

    def step(self) -> CollectorStatus:
        """1 ページ取得して状態を遷移させる（待機はしない）."""
        if self.terminated:
            return self.status

        request = PageRequest(
            region=self.region,
            census_id=self.census_id,
            start_rank=self.state.next_start_rank(),
        )
        logger.info("Counting from rank %d", request.start_rank)
        self.pages_fetched += 1

        try:
            page = self._fetcher(request)
        except FetchError as e:
            # 順位を使い切ると API はエラー応答を返すので、ここで取得終了とする
            logger.info("取得終了: start=%d (%s)", request.start_rank, e)
            self.status = CollectorStatus.TERMINATED_FAILURE
            return self.status

        if not self.state.merge(page):
            logger.info("取得終了: start=%d で新しい順位なし", request.start_rank)
            self.status = CollectorStatus.TERMINATED_NO_PROGRESS

        return self.status

    def run(self) -> list[RankingRecord]:
        """終了状態になるまで step() を繰り返し、蓄積したレコードを返す."""
        while self.step() is CollectorStatus.FETCHING:
            self._sleep(self._interval)

        logger.info(
            "収集完了: region=%s, census_id=%d, %d ページ, %d 件 (%s)",
            self.region, self.census_id, self.pages_fetched,
            len(self.state.records), self.status.value,
        )
        return list(self.state.records)


def collect(
    fetcher: Fetcher,
    region: str,
    census_id: int,
    interval: float = RATE_LIMIT_INTERVAL,
    sleep: Callable[[float], None] | None = None,
) -> list[RankingRecord]:
    """地域のランキングを全件取得する。初回取得に失敗した場合は空リスト."""
    return RankCollector(fetcher, region, census_id, interval, sleep).run()
