"""Command-line interface for radius_map.

Run:
    python -m radius_map classify --csv points.csv --ref-lat 51.5007 --ref-lng -0.1246 --radius-m 5000
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict

from radius_map.csv_io import classified_rows, load_geo_points, write_classified_csv
from radius_map.geo import haversine_m
from radius_map.models import DEFAULT_LATITUDE, DEFAULT_LONGITUDE, DEFAULT_RADIUS_M
from radius_map.registry import PointRegistry

logger = logging.getLogger(__name__)


def _cmd_distance(args: argparse.Namespace) -> int:
    lat1, lng1 = args.from_point
    lat2, lng2 = args.to_point
    d = haversine_m(lat1, lng1, lat2, lng2)
    print(f"distance_m={d:.2f}")
    return 0


def _cmd_classify(args: argparse.Namespace) -> int:
    points, summary = load_geo_points(args.csv)

    registry = PointRegistry(strict=args.strict)
    registry.set_reference_point(args.ref_lat, args.ref_lng, args.radius_m)
    registry.add_candidate_points(points)
    total = registry.summary()

    print("### 行数")
    print(f"total_rows={summary.rows_total}, parsed={summary.rows_parsed}, skipped={summary.rows_skipped}")
    print()

    ref = registry.reference
    print("### 参考点")
    print(f"lat={ref.latitude}, lng={ref.longitude}, radius_m={ref.radius_m}")
    print()

    print("### 分类结果")
    print(f"points={total.total}, inside={total.inside}, outside={total.outside}")

    if args.out:
        write_classified_csv(registry.candidates, ref, args.out)
        print(f"已导出：{args.out}")

    if args.json:
        payload = {
            "reference": {"latitude": ref.latitude, "longitude": ref.longitude, "radius_m": ref.radius_m},
            "summary": asdict(total) | {"outside": total.outside},
            "rows_skipped": summary.rows_skipped,
            "points": classified_rows(registry.candidates, ref),
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="radius_map")
    p.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="日志级别",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_dist = sub.add_parser("distance", help="计算两点之间的大圆距离（米）")
    p_dist.add_argument(
        "--from",
        dest="from_point",
        type=float,
        nargs=2,
        metavar=("LAT", "LNG"),
        required=True,
        help="起点纬度 经度",
    )
    p_dist.add_argument(
        "--to",
        dest="to_point",
        type=float,
        nargs=2,
        metavar=("LAT", "LNG"),
        required=True,
        help="终点纬度 经度",
    )
    p_dist.set_defaults(func=_cmd_distance)

    p_cls = sub.add_parser("classify", help="按参考点半径对CSV中的点分类（半径内/外）")
    p_cls.add_argument("--csv", type=str, required=True, help="输入CSV路径（latitude/longitude 或 lat/lng 列）")
    p_cls.add_argument("--ref-lat", type=float, default=DEFAULT_LATITUDE, help="参考点纬度")
    p_cls.add_argument("--ref-lng", type=float, default=DEFAULT_LONGITUDE, help="参考点经度")
    p_cls.add_argument("--radius-m", type=float, default=DEFAULT_RADIUS_M, help="半径（米），默认 1000")
    p_cls.add_argument("--out", type=str, default=None, help="输出分类结果CSV路径（可选）")
    p_cls.add_argument("--strict", action="store_true", help="严格模式：经纬度越界或负半径直接报错")
    p_cls.add_argument("--json", action="store_true", help="额外输出JSON（便于后处理）")
    p_cls.set_defaults(func=_cmd_classify)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    try:
        return int(args.func(args))
    except FileNotFoundError as exc:
        print(f"找不到文件：{exc.filename!r}", file=sys.stderr)
        return 2
    except (KeyError, ValueError) as exc:
        logger.debug("命令失败", exc_info=True)
        print(f"错误：{exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
