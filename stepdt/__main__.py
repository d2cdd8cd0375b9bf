import argparse
import logging
import re
from pathlib import Path

import numpy as np

from stepdt.BowyerWatson.engine import TriangulationEngine, as_point_list
from stepdt.GlobalTestDelaunay import GlobalTestDelaunay


def read_points(path: Path):
    """One `x y` (or `x,y`) pair per line; blank lines and # comments skipped."""
    points = []
    for lineno, line in enumerate(path.read_text().splitlines(), 1):
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        fields = [f for f in re.split(r"[,\s]+", line) if f]
        if len(fields) != 2:
            raise ValueError(f"{path}:{lineno}: expected 2 coordinates, got {len(fields)}")
        points.append((float(fields[0]), float(fields[1])))
    return points


def random_points(n, seed=None, width=1280.0, height=720.0):
    rng = np.random.default_rng(seed)
    return [tuple(p) for p in rng.random((n, 2)) * (width, height)]


def build_parser():
    ap = argparse.ArgumentParser(prog="stepdt",
                                 description="Step-by-step Bowyer-Watson Delaunay triangulation")
    source = ap.add_mutually_exclusive_group()
    source.add_argument("--points", type=Path, help="file with one 'x y' pair per line")
    source.add_argument("--random", type=int, metavar="N", help="use N random points")
    ap.add_argument("--seed", type=int, default=None, help="seed for --random")
    ap.add_argument("--headless", action="store_true",
                    help="run to completion and print the triangles instead of animating")
    ap.add_argument("--interval", type=int, default=16, help="milliseconds per frame")
    ap.add_argument("--log-level", default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap


def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(levelname)s %(name)s: %(message)s")

    points = []
    if args.points is not None:
        try:
            points = as_point_list(read_points(args.points))
        except (OSError, ValueError) as e:
            ap.error(str(e))
    elif args.random is not None:
        points = random_points(args.random, args.seed)

    if args.headless:
        engine = TriangulationEngine(points)
        triangles = engine.run()
        for t in triangles:
            print(" ".join(f"{p.x:.6g} {p.y:.6g}" for p in t))
        delaunay = GlobalTestDelaunay(triangles, engine.points)
        print(f"# {len(triangles)} triangles, {len(engine.points)} points, "
              f"delaunay={'yes' if delaunay else 'NO'}")
        return 0

    from stepdt.Viewer.animator import StepAnimator
    StepAnimator(points, interval=args.interval).show()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
