"""NationStates センサス順位収集のエントリーポイント.

処理フロー:
  1. 引数から運用者 nation・地域・センサス ID を取得
  2. User-Agent 付きの Session を作成
  3. ページ送りで地域の全ランキングを取得
  4. スコア昇順に並べ替えて CSV に書き出し
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import datetime
from pathlib import Path

from influencea.collector import collect
from influencea.config import (
    DEFAULT_CENSUS_ID,
    LOG_DIR,
    MAX_CENSUS_ID,
    OPERATOR_NATION,
    OUTPUT_DIR,
    VERSION,
)
from influencea.fetcher import PageFetcher, create_session
from influencea.finalizer import OutputError, output_filename, render, write_results


def setup_logging() -> None:
    """ロギングの初期設定."""
    log_file = LOG_DIR / f"influencea_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def _census_id(value: str) -> int:
    try:
        census_id = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"整数ではありません: {value!r}")
    if not 0 <= census_id <= MAX_CENSUS_ID:
        raise argparse.ArgumentTypeError(
            f"0〜{MAX_CENSUS_ID} の範囲で指定してください: {census_id}"
        )
    return census_id


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="influencea",
        description="NationStates の地域センサス順位を全件取得し CSV に出力する",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "-n", "--nation",
        default=OPERATOR_NATION,
        required=OPERATOR_NATION is None,
        help="運用者のメイン nation（NS モデレーターへの識別用）",
    )
    parser.add_argument("-r", "--region", required=True, help="対象地域")
    parser.add_argument(
        "-c", "--census-id",
        type=_census_id,
        default=DEFAULT_CENSUS_ID,
        help=f"センサス ID（既定: {DEFAULT_CENSUS_ID}）",
    )
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=OUTPUT_DIR,
        help="CSV の出力先ディレクトリ",
    )
    return parser


def run(argv: list[str] | None = None) -> int:
    """メイン処理。終了コードを返す."""
    args = build_parser().parse_args(argv)

    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("=== センサス順位取得 開始 ===")
    logger.info("region=%s, census_id=%d", args.region, args.census_id)
    start_time = time.time()

    try:
        session = create_session(args.nation)
    except ValueError as e:
        logger.error("%s", e)
        return 2

    with session:
        rankings = collect(PageFetcher(session), args.region, args.census_id)

    lines = render(args.region, args.census_id, rankings)
    for line in lines[2:]:
        logger.info("%s", line)

    path = args.output_dir / output_filename(args.region, args.census_id)
    try:
        write_results(path, lines)
    except OutputError as e:
        logger.error("%s", e)
        return 1

    elapsed = time.time() - start_time
    logger.info("=== センサス順位取得 完了 ===")
    logger.info("取得件数: %d 件, 出力: %s, 所要時間: %.1f 秒", len(rankings), path, elapsed)
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
