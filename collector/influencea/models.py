"""データモデル定義."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RankingRecord:
    """センサスランキングの1 nation を表す."""

    nation: str  # nation 名
    rank: int  # 地域内の順位（1始まり）
    score: float  # センサス値


@dataclass(frozen=True)
class PageRequest:
    """1ページ分の取得リクエスト."""

    region: str
    census_id: int
    start_rank: int  # このページの先頭順位（1始まり）


@dataclass
class CollectionState:
    """1回の収集で蓄積するレコードと最高順位."""

    records: list[RankingRecord] = field(default_factory=list)  # 取得順
    highest_rank_seen: int = 0

    def next_start_rank(self) -> int:
        return self.highest_rank_seen + 1

    def merge(self, page: list[RankingRecord]) -> bool:
        """ページを追加し、最高順位が更新されたかを返す.

        重複排除はしない。順位は完全なページ列の中で一意である前提。
        """
        self.records.extend(page)
        if not self.records:
            return False

        new_highest = max(r.rank for r in self.records)
        if new_highest == self.highest_rank_seen:
            return False

        self.highest_rank_seen = new_highest
        return True
