import argparse
import csv
import json
import logging
import math
import sys
from pathlib import Path

from dotenv import load_dotenv

from .core import ContractTerms, OptionKind, Position, CALL
from .black_scholes import calculate_all, probability_itm, price as bs_price
from .yields import analyze_yield, projected_premium, total_notional, RATIO_FIELDS
from .payoff import generate_curve
from .config import Settings, LOG_LEVELS
from .errors import InvalidInputError

logger = logging.getLogger(__name__)

EXIT_INVALID_INPUT = 2


def _kind(s: str) -> OptionKind:
    try:
        return OptionKind.parse(s)
    except InvalidInputError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _position(s: str) -> Position:
    try:
        return Position.parse(s)
    except InvalidInputError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _fmt(x: float, spec: str = ".4f") -> str:
    if math.isnan(x):
        return "--"
    if math.isinf(x):
        return "unlimited"
    return format(x, spec)


def add_market(parser: argparse.ArgumentParser, settings: Settings):
    parser.add_argument("--S", type=float, required=True, help="underlying price")
    parser.add_argument("--K", type=float, required=True, help="strike")
    parser.add_argument("--days", type=float, required=True, help="calendar days to expiry")
    parser.add_argument("--sigma", type=float, default=settings.volatility, help="volatility (decimal)")
    parser.add_argument("--r", type=float, default=settings.risk_free_rate, help="cont. risk-free")
    parser.add_argument("--q", type=float, default=0.0, help="cont. dividend yield")
    parser.add_argument("--kind", type=_kind, default=CALL, help="call|put")


def _terms(args) -> ContractTerms:
    return ContractTerms.from_days(args.S, args.K, args.days, args.r, args.sigma, args.q, args.kind)


def cmd_greeks(args):
    terms = _terms(args)
    g = calculate_all(terms)
    for key, value in g.as_dict().items():
        print(f"{key:<6} {value:.6f}")
    print(f"p_itm  {probability_itm(terms):.6f}")


def cmd_yield(args):
    m = analyze_yield(args.S, args.K, args.days, args.premium, args.kind)
    if not m.defined:
        print("premium is zero or unknown: no seller yield")
        return
    for key, value in m.as_dict().items():
        label = m.quality(key).value if key in RATIO_FIELDS else ""
        print(f"{key:<28} {_fmt(value):>14}  {label}")
    print(f"{'projected_premium':<28} {projected_premium(args.premium, args.contracts):>14.2f}")
    print(f"{'total_notional':<28} {total_notional(args.K, args.contracts):>14.2f}")


def cmd_payoff(args):
    terms = _terms(args)
    premium = bs_price(terms) if args.premium is None else args.premium
    curve = generate_curve(terms, premium, args.contracts, args.position, steps=args.steps)
    print(f"premium     {premium:.4f}")
    print(f"breakeven   {curve.breakeven:.4f}")
    print(f"max_profit  {_fmt(curve.max_profit, '.2f')}")
    print(f"max_loss    {_fmt(curve.max_loss, '.2f')}")
    print(f"risk_reward {_fmt(curve.risk_reward, '.2f')}")
    if args.csv:
        with open(args.csv, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["spot", "expiry_pnl", "valuation_pnl"])
            for i, s in enumerate(curve.spots):
                val = "" if curve.valuation_pnl is None else f"{curve.valuation_pnl[i]:.6f}"
                writer.writerow([f"{s:.6f}", f"{curve.expiry_pnl[i]:.6f}", val])
        logger.info("curve written to %s", args.csv)


def _book_row(row: dict, settings: Settings) -> dict:
    """Greeks and seller yield for one CSV row."""
    rid = row.get("id", "")
    S = float(row["S"])
    K = float(row["K"])
    days = float(row["days"])
    sigma = float(row.get("sigma") or settings.volatility)
    r = float(row.get("r") or settings.risk_free_rate)
    q = float(row.get("q") or 0.0)
    kind = OptionKind.parse(row.get("kind") or "call")

    terms = ContractTerms.from_days(S, K, days, r, sigma, q, kind)
    g = calculate_all(terms)
    premium = float(row["premium"]) if row.get("premium") else g.price
    m = analyze_yield(S, K, max(1.0, days), premium, kind)

    result = {"id": rid, "premium": premium}
    result.update(g.as_dict())
    result["p_itm"] = probability_itm(terms)
    result.update(m.as_dict())
    result["annualized_quality"] = (
        m.quality("annualized_yield").value if m.defined else None
    )
    return result


def cmd_book(args):
    settings = args.settings
    with open(args.input, newline="") as f:
        rows = list(csv.DictReader(f))

    logger.info("analysing %d positions", len(rows))

    results = []
    for i, row in enumerate(rows):
        try:
            results.append(_book_row(row, settings))
        except (InvalidInputError, KeyError, ValueError) as e:
            logger.warning("row %d (id=%s): %s", i, row.get("id", "?"), e)
            results.append({"id": row.get("id", ""), "price": None, "error": str(e)})

    output_path = Path(args.output)
    if output_path.suffix == ".json":
        with open(output_path, "w") as f:
            json.dump(results, f, indent=2, default=str)
    else:
        fieldnames = []
        for r in results:
            for k in r:
                if k not in fieldnames:
                    fieldnames.append(k)
        with open(output_path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
            writer.writeheader()
            writer.writerows(results)

    failed = sum(1 for r in results if "error" in r)
    print(f"Analysed: {len(results) - failed}  |  Failed: {failed}  ->  {args.output}")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="optyield", description="Option pricing and seller-yield CLI")
    p.add_argument("--log-level", default=settings.log_level,
                   choices=LOG_LEVELS, type=str.upper)
    sub = p.add_subparsers(dest="cmd", required=True)

    # Greeks
    p_g = sub.add_parser("greeks", help="Black-Scholes price and Greeks")
    add_market(p_g, settings)
    p_g.set_defaults(func=cmd_greeks)

    # Yield
    p_y = sub.add_parser("yield", help="seller yield for a quoted premium")
    p_y.add_argument("--S", type=float, required=True)
    p_y.add_argument("--K", type=float, required=True)
    p_y.add_argument("--days", type=float, required=True)
    p_y.add_argument("--premium", type=float, required=True)
    p_y.add_argument("--kind", type=_kind, default=CALL, help="call|put")
    p_y.add_argument("--contracts", type=int, default=1)
    p_y.set_defaults(func=cmd_yield)

    # Payoff
    p_p = sub.add_parser("payoff", help="P/L summary and sampled curve")
    add_market(p_p, settings)
    p_p.add_argument("--premium", type=float, default=None, help="default: model price")
    p_p.add_argument("--contracts", type=int, default=1)
    p_p.add_argument("--position", type=_position, default=Position.SHORT, help="long|short")
    p_p.add_argument("--steps", type=int, default=settings.curve_steps)
    p_p.add_argument("--csv", default=None, help="write sampled curve to this path")
    p_p.set_defaults(func=cmd_payoff)

    # Book
    p_b = sub.add_parser("book", help="batch Greeks and yield from a CSV")
    p_b.add_argument("--input", required=True, help="CSV with id,S,K,days,sigma,r,q,kind,premium")
    p_b.add_argument("--output", required=True, help="output path (.csv or .json)")
    p_b.set_defaults(func=cmd_book)

    return p


def main(argv=None) -> int:
    load_dotenv()
    try:
        settings = Settings.from_env()
    except InvalidInputError as e:
        print(f"optyield: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    args = build_parser(settings).parse_args(argv)
    args.settings = settings
    logging.basicConfig(level=args.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except InvalidInputError as e:
        logger.error("%s", e)
        return EXIT_INVALID_INPUT
    return 0


if __name__ == "__main__":
    sys.exit(main())
