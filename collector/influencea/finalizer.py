"""収集結果の整列と CSV 出力.

出力形式:
  Region: {region}, CensusID: {census_id}
  Rank,Name,Value
  {rank},{name},{score}   ← スコア昇順（順位順ではない）
"""

from __future__ import annotations

import logging
from pathlib import Path

from influencea.models import RankingRecord

logger = logging.getLogger(__name__)

COLUMN_HEADER = "Rank,Name,Value"


class OutputError(Exception):
    """出力ファイルの作成・書き込みに失敗した."""


def finalize(records: list[RankingRecord]) -> list[RankingRecord]:
    """スコア昇順に並べ替える.

    同スコアは順位 → nation 名の順で並べ、入力順に依存しない結果にする。
    """
    return sorted(records, key=lambda r: (r.score, r.rank, r.nation))


def header_lines(region: str, census_id: int) -> list[str]:
    return [f"Region: {region}, CensusID: {census_id}", COLUMN_HEADER]


def format_row(record: RankingRecord) -> str:
    return f"{record.rank},{record.nation},{record.score!r}"


def render(region: str, census_id: int, records: list[RankingRecord]) -> list[str]:
    """ヘッダー 2 行 + スコア昇順のデータ行を返す."""
    lines = header_lines(region, census_id)
    lines.extend(format_row(r) for r in finalize(records))
    return lines


def output_filename(region: str, census_id: int) -> str:
    return f"rankings-{region}-cid{census_id}.csv"


def write_results(path: Path, lines: list[str]) -> None:
    """行をファイルに書き出す。既存ファイルは警告なく上書きする.

    Raises:
        OutputError: ファイルの作成・書き込みに失敗した場合
    """
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            for line in lines:
                f.write(line + "\n")
    except OSError as e:
        raise OutputError(f"出力ファイルの書き込みに失敗しました: {path} ({e})") from e
    logger.info("%s に %d 件書き込み", path, max(len(lines) - 2, 0))
