from __future__ import annotations

import argparse
import csv
import math
import random
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Center:
    lat: float
    lon: float


# meters per degree of latitude on the 6371 km sphere
M_PER_DEG_LAT = 6_371_000.0 * math.pi / 180.0


def generate_points(
    *,
    rows: int,
    seed: int,
    center: Center,
    max_distance_m: float,
) -> list[dict[str, str]]:
    """Generate fake candidate rows scattered around a center (privacy-safe)."""

    rng = random.Random(seed)
    out: list[dict[str, str]] = []
    cos_lat = max(1e-6, math.cos(math.radians(center.lat)))

    for _ in range(rows):
        # sqrt keeps the density uniform over the disk
        r = max_distance_m * math.sqrt(rng.random())
        theta = rng.uniform(0.0, 2.0 * math.pi)
        d_lat = r * math.cos(theta) / M_PER_DEG_LAT
        d_lon = r * math.sin(theta) / (M_PER_DEG_LAT * cos_lat)

        out.append(
            {
                "latitude": f"{center.lat + d_lat:.7f}",
                "longitude": f"{center.lon + d_lon:.7f}",
            }
        )
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake candidate points CSV for demo/testing.")
    p.add_argument("--out", type=str, default="sample_data/points.csv", help="Output CSV path")
    p.add_argument("--rows", type=int, default=50, help="Number of rows")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--center-lat", type=float, default=51.5007, help="Center latitude")
    p.add_argument("--center-lon", type=float, default=-0.1246, help="Center longitude")
    p.add_argument(
        "--max-distance-m",
        type=float,
        default=10_000.0,
        help="Points are scattered up to roughly this many meters from the center",
    )
    args = p.parse_args()

    center = Center(args.center_lat, args.center_lon)
    rows = generate_points(rows=args.rows, seed=args.seed, center=center, max_distance_m=args.max_distance_m)
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with out_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=["latitude", "longitude"])
        w.writeheader()
        w.writerows(rows)

    print(f"Generated: {out_path} (rows={len(rows)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
