import argparse
import logging

from .core import Instrument, CALL, PUT, EUROPEAN, AMERICAN
from .core import european_call, european_put, american_call, american_put
from .portfolio import Portfolio

logger = logging.getLogger(__name__)


def _side(s: str):
    s = s.lower()
    if s in {"call", "c"}:
        return CALL
    if s in {"put", "p"}:
        return PUT
    raise argparse.ArgumentTypeError("side must be 'call' or 'put'")


def _exercise(s: str):
    s = s.lower()
    if s in {"european", "euro", "e"}:
        return EUROPEAN
    if s in {"american", "amer", "a"}:
        return AMERICAN
    raise argparse.ArgumentTypeError("exercise must be 'european' or 'american'")


def add_contract(parser: argparse.ArgumentParser):
    parser.add_argument("--spot", type=float, required=True)
    parser.add_argument("--strike", type=float, required=True)
    parser.add_argument("--vol", type=float, required=True, help="annualised volatility")
    parser.add_argument("--expiry", type=float, required=True, help="years")
    parser.add_argument("--rate", type=float, required=True, help="cont. risk-free")
    parser.add_argument("--side", type=_side, default=CALL, help="call|put")
    parser.add_argument("--exercise", type=_exercise, default=EUROPEAN,
                        help="european|american")
    parser.add_argument("--depth", type=int, default=500, help="lattice steps")


def cmd_price(args):
    inst = Instrument(args.strike, args.vol, args.expiry, args.rate,
                      args.side, args.exercise, args.depth)
    print(f"{inst.variant}")
    print(f"  value         {inst.value(args.spot):.10f}")
    print(f"  delta (1%)    {inst.delta(args.spot):.10f}")
    print(f"  black-scholes {inst.closed_form_value(args.spot):.10f}")


def cmd_demo(args):
    S, K, r, T, sigma = 50.0, 50.0, 0.10, 0.5, 0.20
    depth = args.tree_depth
    contracts = [
        ("EUROPEAN CALL value", european_call(K, sigma, T, r, depth)),
        ("AMERICAN CALL value (CRR)", american_call(K, sigma, T, r, depth)),
        ("EUROPEAN PUT value", european_put(K, sigma, T, r, depth)),
        ("AMERICAN PUT value (CRR)", american_put(K, sigma, T, r, depth)),
    ]
    for desc, inst in contracts:
        print(f"{desc}: {inst.value(S):.6f}  Black-Scholes: {inst.closed_form_value(S):.6f}")
    print()

    # ATM book on one underlying, 25% vol
    spot, strike, r, T, sigma = 100.0, 100.0, 0.05, 1.0, 0.25
    book = Portfolio(depth=args.depth)
    for make in (european_call, american_call, european_put, american_put):
        book.add_position(10, make(strike, sigma, T, r, args.depth))

    print(f"Portfolio Value: {book.value(spot):.6f}")
    print(f"Portfolio Delta: {book.delta(spot):.6f}")
    n = args.scenarios
    print(f"Portfolio VaR (95%, 1d): {book.value_at_risk(spot, sigma, r, n):.6f}")
    print(f"Portfolio ES  (95%, 1d): {book.expected_shortfall(spot, sigma, r, n):.6f}")


def main(argv=None):
    p = argparse.ArgumentParser(prog="optrisk", description="Option valuation and portfolio risk")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="cmd", required=True)

    p_price = sub.add_parser("price", help="Value a single contract")
    add_contract(p_price)
    p_price.set_defaults(func=cmd_price)

    p_demo = sub.add_parser("demo", help="Sample contracts and a four-option ATM book")
    p_demo.add_argument("--tree-depth", dest="tree_depth", type=int, default=20_000,
                        help="lattice steps for the single-contract values")
    p_demo.add_argument("--depth", type=int, default=500, help="lattice steps for the book")
    p_demo.add_argument("--scenarios", type=int, default=20_000)
    p_demo.set_defaults(func=cmd_demo)

    args = p.parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except ValueError as e:
        logger.error("%s failed: %s", args.cmd, e)
        p.exit(2, f"optrisk: error: {e}\n")


if __name__ == "__main__":
    main()
