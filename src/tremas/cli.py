# -*- coding: utf-8 -*-
from __future__ import annotations
import argparse, json, sys

from pydantic import ValidationError

from .config.loader import load_config
from .config.schema import TremasConfig
from .data.io import save_batch
from .logging import init_logging, init_logging_from_cfg
from .pipeline import regenerate


def _overrides(args) -> dict:
    gen = {
        k: v
        for k, v in (
            ("depth", args.depth),
            ("density", args.density),
            ("base_radius", args.base_radius),
            ("samples", args.samples),
        )
        if v is not None
    }
    out: dict = {}
    if gen:
        out["generation"] = gen
    render = {k: v for k, v in (("speed", getattr(args, "speed", None)),
                                ("point_size", getattr(args, "point_size", None))) if v is not None}
    if render:
        out["render"] = render
    if args.seed is not None:
        out["seed"] = args.seed
    return out


def _config(args) -> TremasConfig:
    try:
        cfg = load_config(args.config, overrides=_overrides(args))
    except (ValidationError, ValueError, TypeError, FileNotFoundError) as exc:
        raise SystemExit(f"invalid configuration: {exc}")
    init_logging_from_cfg(cfg)
    if args.verbose:
        init_logging("debug" if args.verbose > 1 else "info")
    return cfg


def cmd_generate(args):
    cfg = _config(args)
    batch, field = regenerate(cfg.generation, cfg.seed, return_field=True)
    summary = dict(batch.summary(), circles=len(field), per_level=field.per_level_counts())
    if args.out:
        path = save_batch(args.out, batch)
        summary["path"] = str(path)
    print(json.dumps(summary, ensure_ascii=False))
    return 0


def cmd_render(args):
    cfg = _config(args)
    from .viz.backend import setup_matplotlib_backend
    setup_matplotlib_backend(force="Agg")
    from .viz.view import render_snapshot

    batch = regenerate(cfg.generation, cfg.seed)
    render_snapshot(batch, args.out, params=cfg.render, t=args.time)
    print(json.dumps(dict(batch.summary(), path=args.out), ensure_ascii=False))
    return 0


def cmd_view(args):
    cfg = _config(args)
    from .viz.backend import setup_matplotlib_backend
    setup_matplotlib_backend(prefer=args.backend)
    from .publisher import BatchPublisher
    from .viz.view import PointCloudView

    with BatchPublisher() as pub:
        pub.submit(cfg.generation, cfg.seed)
        view = PointCloudView(
            lambda: pub.current,
            params=cfg.render,
            on_regenerate=lambda: pub.submit(view.request),
            request=cfg.generation,
            on_request=pub.submit,
        )
        view.run()
    return 0


def _common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", default=None, help="YAML config file")
    p.add_argument("--depth", type=int, default=None)
    p.add_argument("--density", type=float, default=None)
    p.add_argument("--base-radius", dest="base_radius", type=float, default=None)
    p.add_argument("--samples", type=int, default=None)
    p.add_argument("--seed", type=int, default=None, help="seed for reproducible output")
    p.add_argument("-v", "--verbose", action="count", default=0)


def make_parser():
    p = argparse.ArgumentParser(prog="tremas")
    sub = p.add_subparsers(dest="cmd", required=True)

    pg = sub.add_parser("generate", help="Generate a batch and print its summary")
    _common(pg)
    pg.add_argument("--out", default=None, help="write the batch to this .npz file")
    pg.set_defaults(func=cmd_generate)

    pr = sub.add_parser("render", help="Render one frame to an image file")
    _common(pr)
    pr.add_argument("--out", default="out/tremas.png")
    pr.add_argument("--time", type=float, default=0.0, help="animation time in seconds")
    pr.add_argument("--speed", type=float, default=None)
    pr.add_argument("--point-size", dest="point_size", type=float, default=None)
    pr.set_defaults(func=cmd_render)

    pv = sub.add_parser("view", help="Open the animated viewer (space: pause, n: regenerate)")
    _common(pv)
    pv.add_argument("--speed", type=float, default=None)
    pv.add_argument("--point-size", dest="point_size", type=float, default=None)
    pv.add_argument("--backend", default="TkAgg")
    pv.set_defaults(func=cmd_view)

    return p


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    parser = make_parser()
    ns = parser.parse_args(argv)
    return ns.func(ns)


if __name__ == "__main__":
    raise SystemExit(main())
